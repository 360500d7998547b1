"""Initial schema — users, deals, saved quotes.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("token_identifier", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255)),
        sa.Column("role", sa.String(20), comment="admin, partner, user"),
        sa.Column("company_name", sa.String(255)),
        sa.Column("phone", sa.String(50)),
        sa.Column("country", sa.String(100)),
        sa.Column("industry_focus", sa.String(255)),
        sa.Column("website", sa.String(255)),
        sa.Column("partner_status", sa.String(20), comment="pending, approved, suspended"),
        sa.Column("join_date", sa.DateTime(timezone=True)),
        sa.Column("onboarding_complete", sa.Boolean()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_token_identifier", "users", ["token_identifier"], unique=True)

    op.create_table(
        "deals",
        sa.Column("legacy_id", sa.String(64), comment="Document-store id, kept for re-imports"),
        sa.Column("partner_id", sa.String(255), comment="NULL = unassigned"),
        sa.Column("user_id", sa.String(255)),
        sa.Column("assigned_by", sa.String(255)),
        sa.Column("assignment_notes", sa.Text()),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("opportunity_amount", sa.Numeric(14, 2)),
        sa.Column("commission_rate", sa.Numeric(5, 2)),
        sa.Column("expected_close_date", sa.DateTime(timezone=True)),
        sa.Column("last_followup", sa.DateTime(timezone=True)),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("contact_name", sa.String(255)),
        sa.Column("customer_email", sa.String(255)),
        sa.Column("customer_phone", sa.String(50)),
        sa.Column("customer_address", sa.String(255)),
        sa.Column("customer_city", sa.String(100)),
        sa.Column("customer_state", sa.String(100)),
        sa.Column("customer_zip", sa.String(20)),
        sa.Column("customer_country", sa.String(100)),
        sa.Column("camera_count", sa.Integer()),
        sa.Column("interested_usecases", postgresql.JSONB(astext_type=sa.Text())),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("legacy_id"),
    )
    op.create_index("ix_deals_partner_id", "deals", ["partner_id"])
    op.create_index("ix_deals_status", "deals", ["status"])

    op.create_table(
        "saved_quotes",
        sa.Column("created_by", sa.String(255), nullable=False),
        sa.Column("product", sa.String(20), nullable=False, comment="safety, pallet"),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("company_name", sa.String(255)),
        sa.Column("email", sa.String(255)),
        sa.Column("camera_count", sa.Integer(), nullable=False),
        sa.Column("subscription_type", sa.String(20), nullable=False),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("quote_data", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_saved_quotes_created_by", "saved_quotes", ["created_by"])


def downgrade() -> None:
    op.drop_table("saved_quotes")
    op.drop_table("deals")
    op.drop_table("users")
