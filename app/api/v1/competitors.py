"""Competitor comparison for a stored brand analysis."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_current_user
from app.core.exceptions import NotFoundError
from app.core.metrics import ANALYSIS_CACHE_HITS
from app.core.plan_limits import check_analysis_quota
from app.core.rate_limit import limiter
from app.db.postgres import get_db
from app.models.brand_analysis import BrandAnalysis
from app.models.competitor_analysis import CompetitorAnalysis
from app.models.user import User
from app.prompt_engine.types import BrandConfig
from app.schemas.competitor import (
    BrandDataResponse,
    CompetitorAnalysisResponse,
    StoredCompetitorListResponse,
    StoredCompetitorResponse,
)
from app.services import analysis_store
from app.services.competitor_analysis import brand_position, run_competitor_analysis
from app.services.competitor_discovery import discover_competitors
from app.services.provider_keys import resolve_keys

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyses/{analysis_id}/competitors", tags=["competitors"])


async def _get_analysis(db: AsyncSession, user: User, analysis_id: UUID) -> BrandAnalysis:
    analysis = await analysis_store.get_brand_analysis(db, user.id, analysis_id)
    if not analysis:
        raise NotFoundError("Analysis not found")
    return analysis


def _stored_to_brand_data(row: CompetitorAnalysis) -> BrandDataResponse:
    return BrandDataResponse(
        name=row.competitor_name,
        website=row.competitor_website,
        overall_score=row.competitor_score,
        platforms=row.competitor_llm_results or [],
    )


def _stored_brand(analysis: BrandAnalysis) -> BrandDataResponse | None:
    if analysis.comparison_results is None:
        return None
    return BrandDataResponse(
        name=analysis.brand_name,
        website=analysis.website,
        overall_score=analysis.comparison_score or 0,
        platforms=analysis.comparison_results,
    )


def _config_from(analysis: BrandAnalysis) -> BrandConfig:
    return BrandConfig(
        website_url=analysis.website,
        brand_name=analysis.brand_name,
        industry=analysis.industry,
        location=analysis.location or None,
        keywords=list(analysis.keywords or []),
        competitors=list(analysis.competitors or []),
        competitor_choice=analysis.competitor_choice,
    )


@router.post("", response_model=CompetitorAnalysisResponse)
@limiter.limit("5/minute")
async def analyze_competitors(
    request: Request,
    analysis_id: UUID,
    force: bool = Query(False),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Discover competitors and measure everyone on the same prompts.

    Stored competitors are returned as-is while the newest of them is
    fresh, unless *force* is set.
    """
    analysis = await _get_analysis(db, user, analysis_id)
    stored = await analysis_store.get_competitors(db, analysis.id)

    if stored and not force and analysis_store.is_fresh(stored[0], settings.analysis_cache_ttl_hours):
        ANALYSIS_CACHE_HITS.labels(kind="competitor").inc()
        your_brand = _stored_brand(analysis)
        return CompetitorAnalysisResponse(
            analysis_id=analysis.id,
            your_brand=your_brand,
            competitors=[_stored_to_brand_data(row) for row in stored],
            your_position=(
                brand_position(your_brand.overall_score, [row.competitor_score for row in stored])
                if your_brand
                else None
            ),
            cached=True,
        )

    await check_analysis_quota(db, user)

    config = _config_from(analysis)
    keys = resolve_keys(user)
    competitors = await discover_competitors(
        config.brand_name,
        config.industry,
        config.location,
        manual=config.competitors,
        choice=config.competitor_choice,
        openai_api_key=keys.get("openai"),
    )

    previous = {row.competitor_website: row.competitor_llm_results for row in stored}
    if analysis.comparison_results is not None:
        previous[analysis.website] = analysis.comparison_results
    comparison = await run_competitor_analysis(config, competitors, keys, previous=previous)

    await analysis_store.save_comparison_brand(
        db,
        analysis,
        comparison.your_brand.overall_score,
        [p.to_dict() for p in comparison.your_brand.platforms],
    )
    await analysis_store.delete_competitors(db, analysis.id)
    for rival in comparison.competitors:
        await analysis_store.save_competitor_analysis(
            db,
            analysis,
            rival.name,
            rival.website,
            rival.overall_score,
            [p.to_dict() for p in rival.platforms],
        )
    await analysis_store.track_api_usage(db, user.id, analysis_store.USAGE_COMPETITOR)

    return CompetitorAnalysisResponse(
        analysis_id=analysis.id,
        your_brand=comparison.your_brand.to_dict(),
        competitors=[rival.to_dict() for rival in comparison.competitors],
        your_position=comparison.your_position,
        platform_errors=comparison.platform_errors,
        cached=False,
    )


@router.get("", response_model=StoredCompetitorListResponse)
async def list_competitors(
    analysis_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    analysis = await _get_analysis(db, user, analysis_id)
    rows = await analysis_store.get_competitors(db, analysis.id)
    return StoredCompetitorListResponse(
        analysis_id=analysis.id,
        items=[StoredCompetitorResponse.model_validate(row) for row in rows],
        total=len(rows),
    )
