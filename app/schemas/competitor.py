from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class BrandPlatformResponse(BaseModel):
    platform: str
    logo: str
    rank: int | None = None
    score: int
    mentions: int
    trend: str


class BrandDataResponse(BaseModel):
    name: str
    website: str
    overall_score: int
    platforms: list[BrandPlatformResponse] = Field(default_factory=list)


class CompetitorAnalysisResponse(BaseModel):
    success: bool = True
    analysis_id: UUID
    your_brand: BrandDataResponse | None = None
    competitors: list[BrandDataResponse]
    your_position: int | None = None
    platform_errors: dict[str, str] = Field(default_factory=dict)
    cached: bool = False


class StoredCompetitorResponse(BaseModel):
    id: UUID
    competitor_name: str
    competitor_website: str
    competitor_score: int
    competitor_llm_results: list[BrandPlatformResponse]
    created_at: datetime

    model_config = {"from_attributes": True}


class StoredCompetitorListResponse(BaseModel):
    analysis_id: UUID
    items: list[StoredCompetitorResponse]
    total: int
