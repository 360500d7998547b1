"""Deal model — an opportunity registered by a partner (or assigned by an admin)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, JsonDocument, TimestampMixin
from src.models.enums import DealStatus


class Deal(TimestampMixin, Base):
    """A deal in the partner pipeline."""

    __tablename__ = "deals"

    # Id of the record in the previous document store, kept for re-imports
    legacy_id: Mapped[str | None] = mapped_column(String(64), unique=True)

    # Ownership: NULL partner_id means unassigned
    partner_id: Mapped[str | None] = mapped_column(String(255), index=True)
    user_id: Mapped[str | None] = mapped_column(String(255))
    assigned_by: Mapped[str | None] = mapped_column(String(255))
    assignment_notes: Mapped[str | None] = mapped_column(Text)

    # Pipeline
    status: Mapped[str] = mapped_column(String(20), default=DealStatus.NEW.value, nullable=False, index=True)
    opportunity_amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    commission_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    expected_close_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    last_followup: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Customer
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(255))
    customer_email: Mapped[str | None] = mapped_column(String(255))
    customer_phone: Mapped[str | None] = mapped_column(String(50))
    customer_address: Mapped[str | None] = mapped_column(String(255))
    customer_city: Mapped[str | None] = mapped_column(String(100))
    customer_state: Mapped[str | None] = mapped_column(String(100))
    customer_zip: Mapped[str | None] = mapped_column(String(20))
    customer_country: Mapped[str | None] = mapped_column(String(100))

    # Opportunity detail
    camera_count: Mapped[int | None] = mapped_column(Integer)
    interested_usecases: Mapped[list[Any]] = mapped_column(JsonDocument, default=list)
    notes: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Deal id={self.id} status={self.status} partner_id={self.partner_id}>"
