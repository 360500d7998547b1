"""SavedQuote model — a computed quote a partner chose to keep."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, JsonDocument, TimestampMixin
from src.models.enums import QuoteProduct


class SavedQuote(TimestampMixin, Base):
    """Snapshot of a QuoteDetails payload plus the columns the quote list filters on."""

    __tablename__ = "saved_quotes"

    created_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    product: Mapped[str] = mapped_column(String(20), default=QuoteProduct.SAFETY.value, nullable=False)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))

    camera_count: Mapped[int] = mapped_column(Integer, nullable=False)
    subscription_type: Mapped[str] = mapped_column(String(20), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    # Full QuoteDetails as JSON; structure varies by product
    quote_data: Mapped[dict[str, Any]] = mapped_column(JsonDocument, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<SavedQuote id={self.id} product={self.product} customer={self.customer_name}>"
