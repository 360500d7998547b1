"""User model — portal accounts. Partners are users with role `partner`."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin
from src.models.enums import UserRole


class User(TimestampMixin, Base):
    """A partner or admin account, keyed by the identity provider's token identifier."""

    __tablename__ = "users"

    token_identifier: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value)

    # Partner profile
    company_name: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50))
    country: Mapped[str | None] = mapped_column(String(100))
    industry_focus: Mapped[str | None] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(String(255))
    partner_status: Mapped[str | None] = mapped_column(String(20))
    join_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    onboarding_complete: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<User token={self.token_identifier} role={self.role}>"
