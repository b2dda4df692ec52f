"""Visibility Score Calculator.

Per platform (0–100):

    score = mention_points + rank_points + quality_points, clamped to [0, 100]

      - mention_points = min(total_mentions × 10, 40)
      - rank_points    = 50 / 40 / 30 for rank 1 / 2 / 3,
                         20 for rank ≤ 5, 10 for rank ≤ 10, else 0
      - quality_points = 10 × share of responses that name the brand

Across platforms:
  - overall_score           = mean of platform scores (brand dashboard)
  - weighted_overall_score  = platform-weighted mean (competitor comparison)
"""

from __future__ import annotations

import logging
import math

from app.analysis.types import PlatformScore, ResponseAnalysis, Trend

logger = logging.getLogger(__name__)

MAX_MENTION_POINTS = 40
POINTS_PER_MENTION = 10
MAX_QUALITY_POINTS = 10

# Minimum score change that counts as a trend
TREND_THRESHOLD = 5

# ChatGPT and Gemini carry the most traffic
PLATFORM_WEIGHTS: dict[str, float] = {
    "ChatGPT": 0.3,
    "Claude": 0.25,
    "Gemini": 0.3,
    "Perplexity": 0.15,
}
DEFAULT_PLATFORM_WEIGHT = 0.25


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 → 3), unlike built-in round()."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(int(value), 100))


def rank_points(rank: int | None) -> int:
    if rank is None or rank <= 0:
        return 0
    if rank == 1:
        return 50
    if rank == 2:
        return 40
    if rank == 3:
        return 30
    if rank <= 5:
        return 20
    if rank <= 10:
        return 10
    return 0


def mention_points(total_mentions: int) -> int:
    return min(max(total_mentions, 0) * POINTS_PER_MENTION, MAX_MENTION_POINTS)


def quality_points(responses_mentioning: int, responses_total: int) -> int:
    if responses_total <= 0:
        return 0
    return round_half_up(MAX_QUALITY_POINTS * responses_mentioning / responses_total)


def score_platform(analyses: list[ResponseAnalysis]) -> PlatformScore:
    """Fold the per-response analyses of one platform into a PlatformScore."""
    result = PlatformScore(responses_total=len(analyses))

    for analysis in analyses:
        result.total_mentions += analysis.mentions
        if analysis.is_mentioned:
            result.responses_mentioning += 1
        if analysis.rank is not None:
            result.best_rank = analysis.rank if result.best_rank is None else min(result.best_rank, analysis.rank)

    raw = (
        mention_points(result.total_mentions)
        + rank_points(result.best_rank)
        + quality_points(result.responses_mentioning, result.responses_total)
    )
    result.score = clamp_score(raw)

    logger.debug(
        "Platform score: responses=%d mentioning=%d mentions=%d best_rank=%s → %d",
        result.responses_total,
        result.responses_mentioning,
        result.total_mentions,
        result.best_rank,
        result.score,
    )
    return result


def overall_score(scores: list[int]) -> int:
    """Plain mean of platform scores; 0 when no platform succeeded."""
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))


def weighted_overall_score(platform_scores: dict[str, int]) -> int:
    """Platform-weighted mean keyed by display name.

    Returns 0 when no platform scored above zero.
    """
    if not any(score > 0 for score in platform_scores.values()):
        return 0

    total_weighted = 0.0
    total_weight = 0.0
    for platform, score in platform_scores.items():
        weight = PLATFORM_WEIGHTS.get(platform, DEFAULT_PLATFORM_WEIGHT)
        total_weighted += score * weight
        total_weight += weight

    return round_half_up(total_weighted / total_weight)


def trend(current: int, previous: int | None) -> Trend:
    if previous is None:
        return Trend.STABLE
    delta = current - previous
    if delta >= TREND_THRESHOLD:
        return Trend.UP
    if delta <= -TREND_THRESHOLD:
        return Trend.DOWN
    return Trend.STABLE
