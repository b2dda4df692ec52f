"""Tests for platform scoring, overall scores and trends."""

import pytest

from app.analysis.scoring import (
    overall_score,
    quality_points,
    rank_points,
    round_half_up,
    score_platform,
    trend,
    weighted_overall_score,
)
from app.analysis.types import ResponseAnalysis, Trend


class TestRoundHalfUp:
    @pytest.mark.parametrize("value, expected", [(2.5, 3), (2.4, 2), (3.5, 4), (0.5, 1), (7.0, 7)])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected


class TestRankPoints:
    @pytest.mark.parametrize(
        "rank, expected",
        [(1, 50), (2, 40), (3, 30), (4, 20), (5, 20), (6, 10), (10, 10), (11, 0), (None, 0), (0, 0)],
    )
    def test_table(self, rank, expected):
        assert rank_points(rank) == expected


class TestQualityPoints:
    def test_share_of_mentioning_responses(self):
        assert quality_points(1, 3) == 3
        assert quality_points(2, 3) == 7
        assert quality_points(3, 3) == 10

    def test_half_rounds_up(self):
        assert quality_points(1, 4) == 3  # 2.5 → 3

    def test_no_responses(self):
        assert quality_points(0, 0) == 0


class TestScorePlatform:
    def test_full_marks(self):
        analyses = [ResponseAnalysis(mentions=2, rank=1), ResponseAnalysis(mentions=3, rank=4)]
        result = score_platform(analyses)
        assert result.total_mentions == 5
        assert result.best_rank == 1
        assert result.responses_mentioning == 2
        # 40 (capped) + 50 + 10
        assert result.score == 100

    def test_partial(self):
        analyses = [
            ResponseAnalysis(mentions=1, rank=3),
            ResponseAnalysis(),
            ResponseAnalysis(),
        ]
        # 10 + 30 + round(10/3)=3
        assert score_platform(analyses).score == 43

    def test_not_mentioned(self):
        result = score_platform([ResponseAnalysis(), ResponseAnalysis()])
        assert result.score == 0
        assert result.best_rank is None

    def test_empty(self):
        assert score_platform([]).score == 0


class TestOverallScore:
    def test_mean(self):
        assert overall_score([50, 60, 71]) == 60

    def test_mean_rounds_half_up(self):
        assert overall_score([50, 51]) == 51

    def test_empty(self):
        assert overall_score([]) == 0

    def test_weighted(self):
        # (80×0.3 + 40×0.25) / 0.55 = 61.8
        assert weighted_overall_score({"ChatGPT": 80, "Claude": 40}) == 62

    def test_weighted_unknown_platform_uses_default(self):
        assert weighted_overall_score({"Mistral": 40, "Claude": 60}) == 50

    def test_weighted_all_zero(self):
        assert weighted_overall_score({"ChatGPT": 0, "Gemini": 0}) == 0
        assert weighted_overall_score({}) == 0


class TestTrend:
    def test_no_previous(self):
        assert trend(50, None) == Trend.STABLE

    def test_up_at_threshold(self):
        assert trend(55, 50) == Trend.UP

    def test_down_at_threshold(self):
        assert trend(45, 50) == Trend.DOWN

    def test_small_change_is_stable(self):
        assert trend(54, 50) == Trend.STABLE
        assert trend(46, 50) == Trend.STABLE
