"""Domain enums used across SQLAlchemy models and Pydantic schemas.

All enums use str mixin for JSON serialization.
"""

from __future__ import annotations

from enum import Enum


class DealStatus(str, Enum):
    """Pipeline stage of a registered deal."""

    NEW = "new"
    FIRST_CALL = "1st_call"
    TWO_PLUS_CALLS = "2plus_calls"
    APPROVED = "approved"
    WON = "won"
    LOST = "lost"
    LATER = "later"


STATUS_DISPLAY_NAMES: dict[DealStatus, str] = {
    DealStatus.NEW: "Early Stage",
    DealStatus.FIRST_CALL: "Low Interest",
    DealStatus.TWO_PLUS_CALLS: "High Interest",
    DealStatus.APPROVED: "Approved",
    DealStatus.WON: "Won",
    DealStatus.LOST: "Lost",
    DealStatus.LATER: "Later",
}


class UserRole(str, Enum):
    """Portal role — only admins may search or filter by partner."""

    ADMIN = "admin"
    PARTNER = "partner"
    USER = "user"


class DeploymentType(str, Enum):
    """Where the video analytics run — hosted deployments carry an infrastructure fee."""

    HOSTED = "hosted"
    CUSTOMER_CLOUD = "customer_cloud"


class QuoteProduct(str, Enum):
    """Product line a saved quote was generated for."""

    SAFETY = "safety"
    PALLET = "pallet"
