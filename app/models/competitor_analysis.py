import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, JsonType


class CompetitorAnalysis(Base):
    """Visibility of one competitor measured on the same prompts as its parent brand analysis."""

    __tablename__ = "competitor_analyses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    brand_analysis_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("brand_analyses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    competitor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    competitor_website: Mapped[str] = mapped_column(String(500), nullable=False)
    competitor_score: Mapped[int] = mapped_column(Integer, default=0)
    competitor_llm_results: Mapped[list] = mapped_column(JsonType, default=list)  # serialized BrandPlatformData

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    brand_analysis: Mapped["BrandAnalysis"] = relationship(  # noqa: F821
        "BrandAnalysis", back_populates="competitor_analyses"
    )
