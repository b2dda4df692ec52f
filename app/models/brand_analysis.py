import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, JsonType


class BrandAnalysis(Base):
    """One brand-visibility run for a given website/brand/industry/location/keywords configuration."""

    __tablename__ = "brand_analyses"
    __table_args__ = (Index("ix_brand_analyses_config", "user_id", "website", "brand_name", "industry", "location"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Configuration
    website: Mapped[str] = mapped_column(String(500), nullable=False)
    brand_name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), default="", server_default="")
    keywords: Mapped[list] = mapped_column(JsonType, default=list)
    competitors: Mapped[list] = mapped_column(JsonType, default=list)
    competitor_choice: Mapped[str] = mapped_column(String(10), default="auto")  # auto | manual

    # Results
    overall_score: Mapped[int] = mapped_column(Integer, default=0)
    llm_results: Mapped[list] = mapped_column(JsonType, default=list)  # serialized PlatformRanking dicts
    recommendations: Mapped[list] = mapped_column(JsonType, default=list)
    analyzed_prompts: Mapped[list] = mapped_column(JsonType, default=list)
    platform_errors: Mapped[dict] = mapped_column(JsonType, default=dict)  # {"Claude": "401 ..."}

    # Own brand as measured in the latest competitor comparison
    comparison_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    comparison_results: Mapped[list | None] = mapped_column(JsonType, nullable=True)  # serialized BrandPlatformData

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="brand_analyses")  # noqa: F821
    competitor_analyses: Mapped[list["CompetitorAnalysis"]] = relationship(  # noqa: F821
        "CompetitorAnalysis", back_populates="brand_analysis", cascade="all, delete-orphan"
    )
