"""initial_brand_visibility_schema

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-19 10:12:31.204118

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0a1b2c3d4e5f"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("plan", sa.String(length=20), nullable=False, server_default="free"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("openai_api_key", sa.LargeBinary(), nullable=True),
        sa.Column("anthropic_api_key", sa.LargeBinary(), nullable=True),
        sa.Column("google_api_key", sa.LargeBinary(), nullable=True),
        sa.Column("perplexity_api_key", sa.LargeBinary(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "brand_analyses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("website", sa.String(length=500), nullable=False),
        sa.Column("brand_name", sa.String(length=255), nullable=False),
        sa.Column("industry", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("keywords", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("competitors", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("competitor_choice", sa.String(length=10), nullable=False, server_default="auto"),
        sa.Column("overall_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("llm_results", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("recommendations", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("analyzed_prompts", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("platform_errors", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("comparison_score", sa.Integer(), nullable=True),
        sa.Column("comparison_results", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_brand_analyses_user_id", "brand_analyses", ["user_id"])
    op.create_index(
        "ix_brand_analyses_config",
        "brand_analyses",
        ["user_id", "website", "brand_name", "industry", "location"],
    )

    op.create_table(
        "competitor_analyses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("brand_analysis_id", sa.Uuid(), nullable=False),
        sa.Column("competitor_name", sa.String(length=255), nullable=False),
        sa.Column("competitor_website", sa.String(length=500), nullable=False),
        sa.Column("competitor_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("competitor_llm_results", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["brand_analysis_id"], ["brand_analyses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_competitor_analyses_user_id", "competitor_analyses", ["user_id"])
    op.create_index("ix_competitor_analyses_brand_analysis_id", "competitor_analyses", ["brand_analysis_id"])

    op.create_table(
        "api_usage",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("analysis_type", sa.String(length=20), nullable=False),
        sa.Column("queries_used", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_api_usage_user_id", "api_usage", ["user_id"])
    op.create_index("ix_api_usage_created_at", "api_usage", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_api_usage_created_at", table_name="api_usage")
    op.drop_index("ix_api_usage_user_id", table_name="api_usage")
    op.drop_table("api_usage")
    op.drop_index("ix_competitor_analyses_brand_analysis_id", table_name="competitor_analyses")
    op.drop_index("ix_competitor_analyses_user_id", table_name="competitor_analyses")
    op.drop_table("competitor_analyses")
    op.drop_index("ix_brand_analyses_config", table_name="brand_analyses")
    op.drop_index("ix_brand_analyses_user_id", table_name="brand_analyses")
    op.drop_table("brand_analyses")
    op.drop_table("users")
