"""Head-to-head visibility comparison between a brand and its competitors.

All brands are measured on the same brand-free prompts: each platform is
asked each prompt once, and every answer is scored for every brand. No
brand is named in the question, so nobody gets a free mention.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.analysis.ranking_parser import analyze_response
from app.analysis.scoring import score_platform, trend, weighted_overall_score
from app.analysis.types import BrandData, BrandPlatformData
from app.collectors.registry import build_collectors, get_logo
from app.core.config import settings
from app.core.exceptions import AnalysisFailedError, BadRequestError, NoProvidersConfiguredError
from app.core.metrics import ANALYSIS_RUNS
from app.prompt_engine.generator import generate_queries, thematic_queries
from app.prompt_engine.types import BrandConfig
from app.services.brand_analysis import previous_scores
from app.services.competitor_discovery import Competitor
from app.services.llm_collection import PlatformResponses, collect_all

logger = logging.getLogger(__name__)


@dataclass
class CompetitorComparison:
    your_brand: BrandData
    competitors: list[BrandData] = field(default_factory=list)
    your_position: int = 1
    analyzed_prompts: list[str] = field(default_factory=list)
    platform_errors: dict[str, str] = field(default_factory=dict)


def _score_brand(
    name: str,
    website: str,
    platforms: list[PlatformResponses],
    previous: list[dict] | None,
) -> BrandData:
    before = previous_scores(previous)
    entries: list[BrandPlatformData] = []

    for platform in platforms:
        scored = score_platform([analyze_response(text, name) for text in platform.responses])
        entries.append(
            BrandPlatformData(
                platform=platform.display_name,
                logo=get_logo(platform.platform),
                rank=scored.best_rank,
                score=scored.score,
                mentions=scored.total_mentions,
                trend=trend(scored.score, before.get(platform.display_name)).value,
            )
        )

    overall = weighted_overall_score({e.platform: e.score for e in entries})
    return BrandData(name=name, website=website, overall_score=overall, platforms=entries)


def brand_position(your_score: int, competitor_scores: list[int]) -> int:
    """1-based rank of your brand; ties go to your brand."""
    return 1 + sum(1 for score in competitor_scores if score > your_score)


async def run_competitor_analysis(
    config: BrandConfig,
    competitors: list[Competitor],
    keys: dict[str, str],
    previous: dict[str, list[dict]] | None = None,
) -> CompetitorComparison:
    """Score *config*'s brand and each competitor on shared thematic prompts.

    *previous* maps a website to that brand's stored per-platform results
    and feeds the trend column.

    Raises:
        NoProvidersConfiguredError: *keys* holds no usable key.
        BadRequestError: no brand-free prompt is left to ask.
        AnalysisFailedError: every platform failed.
    """
    collectors = build_collectors(keys)
    if not collectors:
        ANALYSIS_RUNS.labels(kind="competitor", status="no_providers").inc()
        raise NoProvidersConfiguredError()

    names = [config.brand_name] + [c.name for c in competitors]
    queries = thematic_queries(
        generate_queries(config.brand_name, config.industry, config.location, config.keywords),
        names,
    )
    measured = queries[: settings.competitor_queries_per_platform]
    if not measured:
        raise BadRequestError("No brand-free prompts available for comparison")

    logger.info(
        "Competitor analysis for %s vs %d competitors: %d platforms, %d queries",
        config.brand_name,
        len(competitors),
        len(collectors),
        len(measured),
    )

    collected = await collect_all(collectors, measured)
    ok = [p for p in collected if not p.failed]
    platform_errors = {p.display_name: p.error_message for p in collected if p.failed}

    if not ok:
        ANALYSIS_RUNS.labels(kind="competitor", status="failed").inc()
        raise AnalysisFailedError(platform_errors)

    previous = previous or {}
    your_brand = _score_brand(config.brand_name, config.website_url, ok, previous.get(config.website_url))
    rivals = [_score_brand(c.name, c.website, ok, previous.get(c.website)) for c in competitors]

    comparison = CompetitorComparison(
        your_brand=your_brand,
        competitors=rivals,
        your_position=brand_position(your_brand.overall_score, [r.overall_score for r in rivals]),
        analyzed_prompts=measured,
        platform_errors=platform_errors,
    )

    ANALYSIS_RUNS.labels(kind="competitor", status="success").inc()
    logger.info(
        "Competitor analysis for %s done: score=%d position=%d/%d",
        config.brand_name,
        your_brand.overall_score,
        comparison.your_position,
        len(rivals) + 1,
    )
    return comparison
