import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, LargeBinary, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    plan: Mapped[str] = mapped_column(String(20), default="free")  # free / starter / pro / enterprise
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # LLM provider keys (Fernet-encrypted, fall back to server env keys when empty)
    openai_api_key: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    anthropic_api_key: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    google_api_key: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    perplexity_api_key: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    brand_analyses: Mapped[list["BrandAnalysis"]] = relationship(  # noqa: F821
        "BrandAnalysis", back_populates="user", cascade="all, delete-orphan"
    )
