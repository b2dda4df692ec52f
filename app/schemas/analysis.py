from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class BrandAnalysisRequest(BaseModel):
    website_url: str = Field(min_length=1, max_length=500)
    brand_name: str = Field(min_length=1, max_length=255)
    industry: str = Field(min_length=1, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    keywords: list[str] = Field(default_factory=list, max_length=20)
    competitors: list[str] = Field(default_factory=list, max_length=20)
    competitor_choice: Literal["auto", "manual"] = "auto"
    force: bool = False

    @field_validator("website_url", "brand_name", "industry")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("location")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("keywords", "competitors")
    @classmethod
    def _drop_blank(cls, v: list[str]) -> list[str]:
        return [item.strip() for item in v if item and item.strip()]


class PlatformRankingResponse(BaseModel):
    platform: str
    logo: str
    rank: int | None = None
    score: int
    mentions: int
    trend: str
    recommendations: list[str] = Field(default_factory=list)
    queries_succeeded: int = 0
    queries_failed: int = 0


class BrandAnalysisResponse(BaseModel):
    success: bool = True
    analysis_id: UUID
    rankings: list[PlatformRankingResponse]
    overall_score: int
    recommendations: list[str] = Field(default_factory=list)
    analyzed_prompts: list[str] = Field(default_factory=list)
    platform_errors: dict[str, str] = Field(default_factory=dict)
    cached: bool = False


class StoredAnalysisResponse(BaseModel):
    id: UUID
    website: str
    brand_name: str
    industry: str
    location: str
    keywords: list[str]
    competitors: list[str]
    competitor_choice: str
    overall_score: int
    llm_results: list[PlatformRankingResponse]
    recommendations: list[str]
    analyzed_prompts: list[str]
    platform_errors: dict[str, str] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ForceReanalysisResponse(BaseModel):
    website: str
    deleted: int
