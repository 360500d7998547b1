"""SQLAlchemy ORM models for Partner Desk.

Import all models here so Base.metadata.create_all() discovers them.
"""

from __future__ import annotations

from src.models.base import Base
from src.models.deal import Deal
from src.models.enums import (
    DealStatus,
    DeploymentType,
    QuoteProduct,
    UserRole,
)
from src.models.quote import SavedQuote
from src.models.user import User

__all__ = [
    # Base
    "Base",
    # Models
    "Deal",
    "SavedQuote",
    "User",
    # Enums
    "DealStatus",
    "DeploymentType",
    "QuoteProduct",
    "UserRole",
]
