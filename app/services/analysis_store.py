"""Persistence for brand and competitor analyses, plus monthly usage accounting.

Every query is scoped to a user. An analysis is identified by its
configuration: website, brand, industry, location and the *set* of
keywords. Saving a new analysis replaces the previous one with the same
configuration, together with its competitor rows.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.models.api_usage import ApiUsage
from app.models.brand_analysis import BrandAnalysis
from app.models.competitor_analysis import CompetitorAnalysis
from app.prompt_engine.types import BrandConfig

logger = logging.getLogger(__name__)

# Analyses per calendar month (UTC)
PLAN_LIMITS: dict[str, int] = {
    "free": 5,
    "starter": 25,
    "pro": 100,
    "enterprise": 1000,
}
DEFAULT_PLAN = "free"

USAGE_BRAND = "brand"
USAGE_COMPETITOR = "competitor"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _same_keywords(stored: list | None, wanted: list[str] | None) -> bool:
    return set(stored or []) == set(wanted or [])


def month_start(now: datetime | None = None) -> datetime:
    now = _as_utc(now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def is_fresh(analysis: BrandAnalysis | CompetitorAnalysis, ttl_hours: float, now: datetime | None = None) -> bool:
    """True while *analysis* (last update, else creation) is younger than *ttl_hours*."""
    if ttl_hours <= 0:
        return False
    now = now or datetime.now(timezone.utc)
    stamp = getattr(analysis, "updated_at", None) or analysis.created_at
    if stamp is None:
        return False
    return _as_utc(now) - _as_utc(stamp) < timedelta(hours=ttl_hours)


# ---------------------------------------------------------------------------
# Brand analyses
# ---------------------------------------------------------------------------


async def _find_same_config(
    db: AsyncSession,
    user_id: UUID,
    website: str,
    brand_name: str,
    industry: str,
    location: str | None,
    keywords: list[str] | None,
) -> list[BrandAnalysis]:
    result = await db.execute(
        select(BrandAnalysis)
        .where(
            BrandAnalysis.user_id == user_id,
            BrandAnalysis.website == website,
            BrandAnalysis.brand_name == brand_name,
            BrandAnalysis.industry == industry,
            BrandAnalysis.location == (location or ""),
        )
        .order_by(BrandAnalysis.created_at.desc())
    )
    return [row for row in result.scalars().all() if _same_keywords(row.keywords, keywords)]


async def get_existing_analysis(
    db: AsyncSession,
    user_id: UUID,
    website: str,
    brand_name: str,
    industry: str,
    location: str | None = None,
    keywords: list[str] | None = None,
) -> BrandAnalysis | None:
    """Latest analysis with the same configuration (keyword order ignored)."""
    matches = await _find_same_config(db, user_id, website, brand_name, industry, location, keywords)
    return matches[0] if matches else None


async def _delete_analyses(db: AsyncSession, analysis_ids: list[UUID]) -> int:
    if not analysis_ids:
        return 0
    await db.execute(delete(CompetitorAnalysis).where(CompetitorAnalysis.brand_analysis_id.in_(analysis_ids)))
    await db.execute(delete(BrandAnalysis).where(BrandAnalysis.id.in_(analysis_ids)))
    return len(analysis_ids)


async def delete_existing_analysis(
    db: AsyncSession,
    user_id: UUID,
    website: str,
    brand_name: str,
    industry: str,
    location: str | None = None,
    keywords: list[str] | None = None,
) -> int:
    """Remove analyses (and their competitors) with this configuration."""
    matches = await _find_same_config(db, user_id, website, brand_name, industry, location, keywords)
    removed = await _delete_analyses(db, [row.id for row in matches])
    if removed:
        logger.info("Deleted %d existing analysis(es) for %s / %s", removed, website, brand_name)
    return removed


async def save_brand_analysis(
    db: AsyncSession,
    user_id: UUID,
    config: BrandConfig,
    *,
    overall_score: int,
    llm_results: list[dict],
    recommendations: list[str],
    analyzed_prompts: list[str],
    platform_errors: dict[str, str] | None = None,
) -> BrandAnalysis:
    """Replace the same-configuration analysis and count one brand usage."""
    await delete_existing_analysis(
        db, user_id, config.website_url, config.brand_name, config.industry, config.location, config.keywords
    )

    analysis = BrandAnalysis(
        user_id=user_id,
        website=config.website_url,
        brand_name=config.brand_name,
        industry=config.industry,
        location=config.location or "",
        keywords=list(config.keywords),
        competitors=list(config.competitors),
        competitor_choice=config.competitor_choice,
        overall_score=overall_score,
        llm_results=llm_results,
        recommendations=recommendations,
        analyzed_prompts=analyzed_prompts,
        platform_errors=platform_errors or {},
    )
    db.add(analysis)
    await db.flush()

    await track_api_usage(db, user_id, USAGE_BRAND)
    logger.info("Saved brand analysis %s (score %d)", analysis.id, overall_score)
    return analysis


async def get_latest_brand_analysis(db: AsyncSession, user_id: UUID) -> BrandAnalysis | None:
    result = await db.execute(
        select(BrandAnalysis)
        .where(BrandAnalysis.user_id == user_id)
        .order_by(BrandAnalysis.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_brand_analysis(db: AsyncSession, user_id: UUID, analysis_id: UUID) -> BrandAnalysis | None:
    result = await db.execute(
        select(BrandAnalysis).where(BrandAnalysis.id == analysis_id, BrandAnalysis.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def force_reanalysis(db: AsyncSession, user_id: UUID, website: str) -> int:
    """Drop every analysis the user has for *website*; returns how many were removed."""
    result = await db.execute(
        select(BrandAnalysis.id).where(BrandAnalysis.user_id == user_id, BrandAnalysis.website == website)
    )
    removed = await _delete_analyses(db, list(result.scalars().all()))
    logger.info("Force reanalysis for %s: %d analysis(es) removed", website, removed)
    return removed


# ---------------------------------------------------------------------------
# Competitor analyses
# ---------------------------------------------------------------------------


async def save_competitor_analysis(
    db: AsyncSession,
    brand_analysis: BrandAnalysis,
    competitor_name: str,
    competitor_website: str,
    competitor_score: int,
    competitor_llm_results: list[dict],
) -> CompetitorAnalysis:
    row = CompetitorAnalysis(
        user_id=brand_analysis.user_id,
        brand_analysis_id=brand_analysis.id,
        competitor_name=competitor_name,
        competitor_website=competitor_website,
        competitor_score=competitor_score,
        competitor_llm_results=competitor_llm_results,
    )
    db.add(row)
    await db.flush()
    return row


async def get_competitors(db: AsyncSession, brand_analysis_id: UUID) -> list[CompetitorAnalysis]:
    """Competitor rows for an analysis, newest first."""
    result = await db.execute(
        select(CompetitorAnalysis)
        .where(CompetitorAnalysis.brand_analysis_id == brand_analysis_id)
        .order_by(CompetitorAnalysis.created_at.desc())
    )
    return list(result.scalars().all())


async def get_existing_competitor_analysis(
    db: AsyncSession, brand_analysis_id: UUID, competitor_website: str
) -> CompetitorAnalysis | None:
    result = await db.execute(
        select(CompetitorAnalysis)
        .where(
            CompetitorAnalysis.brand_analysis_id == brand_analysis_id,
            CompetitorAnalysis.competitor_website == competitor_website,
        )
        .order_by(CompetitorAnalysis.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def delete_competitors(db: AsyncSession, brand_analysis_id: UUID) -> int:
    result = await db.execute(
        delete(CompetitorAnalysis).where(CompetitorAnalysis.brand_analysis_id == brand_analysis_id)
    )
    return result.rowcount or 0


async def save_comparison_brand(db: AsyncSession, brand_analysis: BrandAnalysis, score: int, results: list[dict]) -> None:
    """Store your brand's side of the latest competitor comparison.

    ``updated_at`` is left alone: it dates the brand analysis itself.
    """
    await db.execute(
        update(BrandAnalysis)
        .where(BrandAnalysis.id == brand_analysis.id)
        .values(comparison_score=score, comparison_results=results, updated_at=BrandAnalysis.updated_at)
        .execution_options(synchronize_session=False)
    )
    set_committed_value(brand_analysis, "comparison_score", score)
    set_committed_value(brand_analysis, "comparison_results", results)


# ---------------------------------------------------------------------------
# Usage
# ---------------------------------------------------------------------------


async def track_api_usage(db: AsyncSession, user_id: UUID, analysis_type: str, queries_used: int = 1) -> ApiUsage:
    usage = ApiUsage(user_id=user_id, analysis_type=analysis_type, queries_used=queries_used)
    db.add(usage)
    await db.flush()
    return usage


async def get_monthly_usage(db: AsyncSession, user_id: UUID, now: datetime | None = None) -> dict[str, int]:
    """Sum of ``queries_used`` since 00:00 UTC on the first of the current month."""
    since = month_start(now)
    result = await db.execute(
        select(ApiUsage.analysis_type, func.coalesce(func.sum(ApiUsage.queries_used), 0))
        .where(ApiUsage.user_id == user_id, ApiUsage.created_at >= since)
        .group_by(ApiUsage.analysis_type)
    )
    totals = {analysis_type: int(used) for analysis_type, used in result.all()}

    brand = totals.get(USAGE_BRAND, 0)
    competitor = totals.get(USAGE_COMPETITOR, 0)
    return {"brand": brand, "competitor": competitor, "total": brand + competitor}


def plan_limit(plan: str | None) -> int:
    return PLAN_LIMITS.get(plan or DEFAULT_PLAN, PLAN_LIMITS[DEFAULT_PLAN])


async def check_subscription_limit(db: AsyncSession, user_id: UUID, plan: str | None, now: datetime | None = None) -> dict:
    """Monthly usage against the plan quota."""
    usage = await get_monthly_usage(db, user_id, now)
    limit = plan_limit(plan)
    return {
        "plan": plan or DEFAULT_PLAN,
        "usage": usage,
        "limit": limit,
        "remaining": max(limit - usage["total"], 0),
        "can_analyze": usage["total"] < limit,
    }
