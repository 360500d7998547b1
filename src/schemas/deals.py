"""Pydantic schemas for the deal pipeline engine.

Read-only snapshots of deals and partners, the filter set, and the
aggregate stats record. No DB dependencies.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from src.models.enums import STATUS_DISPLAY_NAMES, DealStatus

ALL = "all"
UNASSIGNED = "unassigned"


class DealRecord(BaseModel):
    """Snapshot of a deal as supplied by the data layer."""

    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime
    updated_at: datetime | None = None

    # Ownership
    partner_id: str | None = None       # None or "" → unassigned
    user_id: str | None = None

    # Classification, kept as str so out-of-enum values survive into stats
    status: str

    # Commercial
    opportunity_amount: Decimal | None = Field(default=None, allow_inf_nan=True)
    commission_rate: Decimal | None = None
    expected_close_date: datetime | None = None
    last_followup: datetime | None = None

    # Descriptive
    customer_name: str = ""
    contact_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    customer_address: str | None = None
    customer_city: str | None = None
    customer_state: str | None = None
    customer_zip: str | None = None
    customer_country: str | None = None
    camera_count: int | None = None
    interested_usecases: list[str] = Field(default_factory=list)
    notes: str | None = None
    assignment_notes: str | None = None

    @property
    def is_unassigned(self) -> bool:
        return not self.partner_id

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status_label(self) -> str:
        """Display name of the status; out-of-enum values are shown as-is."""
        try:
            return STATUS_DISPLAY_NAMES[DealStatus(self.status)]
        except ValueError:
            return self.status


class PartnerRecord(BaseModel):
    """Subset of a user account needed to label a partner."""

    model_config = ConfigDict(frozen=True)

    token_identifier: str
    name: str | None = None
    company_name: str | None = None
    email: str | None = None
    role: str | None = None
    partner_status: str | None = None


class DealFilters(BaseModel):
    """Filter set applied by the pipeline views."""

    search_query: str = ""
    selected_partner: str = ALL      # "all" | "unassigned" | <partner id>
    selected_status: str = ALL       # "all" | <status>


class PartnerOption(BaseModel):
    """Entry of the partner filter dropdown."""

    id: str
    type: str = "partner"


class DealStats(BaseModel):
    """Per-status counts and amounts for a list of deals.

    `total` is the raw list length; deals with an unknown status are
    counted there and in no bucket.
    """

    new: int = 0
    first_call: int = 0
    two_plus_calls: int = 0
    approved: int = 0
    won: int = 0
    lost: int = 0
    later: int = 0
    total: int = 0

    new_amount: Decimal = Decimal("0")
    first_call_amount: Decimal = Decimal("0")
    two_plus_calls_amount: Decimal = Decimal("0")
    approved_amount: Decimal = Decimal("0")
    won_amount: Decimal = Decimal("0")
    lost_amount: Decimal = Decimal("0")
    later_amount: Decimal = Decimal("0")

    total_pipeline_value: Decimal = Decimal("0")   # every bucket except lost
    total_amount: Decimal = Decimal("0")           # every bucket including lost


class PipelineView(BaseModel):
    """Response body of the deal list endpoint."""

    deals: list[DealRecord]
    filters: DealFilters
    has_active_filters: bool
    partner_options: list[PartnerOption] = Field(default_factory=list)
    pipeline_stats: DealStats | None = None
    filtered_stats: DealStats | None = None
