"""Brand visibility analysis across every configured LLM platform.

Flow:
  1. Generate prompts from the brand configuration; measure on a prefix
  2. Ask every platform with a key (platforms and prompts in parallel)
  3. Parse each answer for mentions and list rank
  4. Score per platform, attach advice and the trend against the last run
  5. Average into the overall score

A platform whose every prompt failed is reported in ``platform_errors``
and left out of the rankings. If all of them failed, nothing is scored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.analysis.ranking_parser import analyze_response
from app.analysis.recommendations import generate_recommendations
from app.analysis.scoring import overall_score, score_platform, trend
from app.analysis.types import PlatformRanking
from app.collectors.registry import build_collectors, get_logo
from app.core.config import settings
from app.core.exceptions import AnalysisFailedError, NoProvidersConfiguredError
from app.core.metrics import ANALYSIS_RUNS
from app.prompt_engine.generator import generate_queries
from app.prompt_engine.types import BrandConfig
from app.services.llm_collection import collect_all

logger = logging.getLogger(__name__)


@dataclass
class BrandAnalysisOutcome:
    rankings: list[PlatformRanking] = field(default_factory=list)
    overall_score: int = 0
    recommendations: list[str] = field(default_factory=list)
    analyzed_prompts: list[str] = field(default_factory=list)
    platform_errors: dict[str, str] = field(default_factory=dict)

    def llm_results(self) -> list[dict]:
        return [r.to_dict() for r in self.rankings]


def previous_scores(llm_results: list[dict] | None) -> dict[str, int]:
    """``{display name: score}`` from a stored ``llm_results`` list."""
    scores: dict[str, int] = {}
    for entry in llm_results or []:
        if isinstance(entry, dict) and "platform" in entry and "score" in entry:
            scores[entry["platform"]] = int(entry["score"])
    return scores


def _merge_recommendations(rankings: list[PlatformRanking]) -> list[str]:
    merged: list[str] = []
    for ranking in rankings:
        for rec in ranking.recommendations:
            if rec not in merged:
                merged.append(rec)
    return merged


async def run_brand_analysis(
    config: BrandConfig,
    keys: dict[str, str],
    previous: list[dict] | None = None,
) -> BrandAnalysisOutcome:
    """Measure *config*'s brand on every platform that has a key in *keys*.

    *keys* maps credential names to API keys; *previous* is the
    ``llm_results`` of the last analysis with the same configuration.

    Raises:
        NoProvidersConfiguredError: *keys* holds no usable key.
        AnalysisFailedError: every platform failed.
    """
    collectors = build_collectors(keys)
    if not collectors:
        ANALYSIS_RUNS.labels(kind="brand", status="no_providers").inc()
        raise NoProvidersConfiguredError()

    queries = generate_queries(config.brand_name, config.industry, config.location, config.keywords)
    measured = queries[: settings.queries_per_platform]
    logger.info(
        "Brand analysis for %s: %d platforms, %d/%d queries",
        config.brand_name,
        len(collectors),
        len(measured),
        len(queries),
    )

    outcome = BrandAnalysisOutcome(analyzed_prompts=queries)
    before = previous_scores(previous)

    for platform in await collect_all(collectors, measured):
        if platform.failed:
            outcome.platform_errors[platform.display_name] = platform.error_message
            continue

        analyses = [analyze_response(text, config.brand_name) for text in platform.responses]
        scored = score_platform(analyses)

        outcome.rankings.append(
            PlatformRanking(
                platform=platform.display_name,
                logo=get_logo(platform.platform),
                rank=scored.best_rank,
                score=scored.score,
                mentions=scored.total_mentions,
                trend=trend(scored.score, before.get(platform.display_name)).value,
                recommendations=generate_recommendations(platform.platform, scored.score, scored.best_rank),
                queries_succeeded=len(platform.responses),
                queries_failed=len(platform.errors),
            )
        )

    if not outcome.rankings:
        ANALYSIS_RUNS.labels(kind="brand", status="failed").inc()
        raise AnalysisFailedError(outcome.platform_errors)

    outcome.overall_score = overall_score([r.score for r in outcome.rankings])
    outcome.recommendations = _merge_recommendations(outcome.rankings)

    ANALYSIS_RUNS.labels(kind="brand", status="success").inc()
    logger.info(
        "Brand analysis for %s done: overall=%d platforms_ok=%d platforms_failed=%d",
        config.brand_name,
        outcome.overall_score,
        len(outcome.rankings),
        len(outcome.platform_errors),
    )
    return outcome
