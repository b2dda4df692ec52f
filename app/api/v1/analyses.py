"""Brand analyses: run (or serve from cache), read back, invalidate."""

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
from app.models.user import User
from app.prompt_engine.types import BrandConfig
from app.schemas.analysis import (
    BrandAnalysisRequest,
    BrandAnalysisResponse,
    ForceReanalysisResponse,
    StoredAnalysisResponse,
)
from app.services import analysis_store
from app.services.brand_analysis import run_brand_analysis
from app.services.provider_keys import resolve_keys

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyses", tags=["analyses"])


def _cached_response(analysis: BrandAnalysis) -> BrandAnalysisResponse:
    return BrandAnalysisResponse(
        analysis_id=analysis.id,
        rankings=analysis.llm_results or [],
        overall_score=analysis.overall_score,
        recommendations=analysis.recommendations or [],
        analyzed_prompts=analysis.analyzed_prompts or [],
        platform_errors=analysis.platform_errors or {},
        cached=True,
    )


@router.post("/brand", response_model=BrandAnalysisResponse)
@limiter.limit("10/minute")
async def analyze_brand(
    request: Request,
    body: BrandAnalysisRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Run a brand analysis, or return the stored one while it is fresh.

    A cached result does not count against the monthly quota.
    """
    config = BrandConfig(
        website_url=body.website_url,
        brand_name=body.brand_name,
        industry=body.industry,
        location=body.location,
        keywords=body.keywords,
        competitors=body.competitors,
        competitor_choice=body.competitor_choice,
    )

    existing = await analysis_store.get_existing_analysis(
        db, user.id, config.website_url, config.brand_name, config.industry, config.location, config.keywords
    )
    if existing and not body.force and analysis_store.is_fresh(existing, settings.analysis_cache_ttl_hours):
        logger.info("Serving cached analysis %s for %s", existing.id, config.brand_name)
        ANALYSIS_CACHE_HITS.labels(kind="brand").inc()
        return _cached_response(existing)

    await check_analysis_quota(db, user)

    outcome = await run_brand_analysis(
        config,
        resolve_keys(user),
        previous=existing.llm_results if existing else None,
    )
    analysis = await analysis_store.save_brand_analysis(
        db,
        user.id,
        config,
        overall_score=outcome.overall_score,
        llm_results=outcome.llm_results(),
        recommendations=outcome.recommendations,
        analyzed_prompts=outcome.analyzed_prompts,
        platform_errors=outcome.platform_errors,
    )

    return BrandAnalysisResponse(
        analysis_id=analysis.id,
        rankings=outcome.llm_results(),
        overall_score=outcome.overall_score,
        recommendations=outcome.recommendations,
        analyzed_prompts=outcome.analyzed_prompts,
        platform_errors=outcome.platform_errors,
        cached=False,
    )


@router.get("/latest", response_model=StoredAnalysisResponse)
async def latest_analysis(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    analysis = await analysis_store.get_latest_brand_analysis(db, user.id)
    if not analysis:
        raise NotFoundError("No analyses yet")
    return analysis


@router.get("/{analysis_id}", response_model=StoredAnalysisResponse)
async def get_analysis(
    analysis_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    analysis = await analysis_store.get_brand_analysis(db, user.id, analysis_id)
    if not analysis:
        raise NotFoundError("Analysis not found")
    return analysis


@router.delete("", response_model=ForceReanalysisResponse)
async def force_reanalysis(
    website: str = Query(..., min_length=1),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Drop every stored analysis for *website* so the next run is fresh."""
    deleted = await analysis_store.force_reanalysis(db, user.id, website)
    return ForceReanalysisResponse(website=website, deleted=deleted)
