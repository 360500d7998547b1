"""Pydantic schemas for the quote pricing engine.

The pricing table is validated once when loaded; the engine only ever
works on these models, never on raw dictionaries.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.models.enums import DeploymentType

# ---------------------------------------------------------------------------
# Pricing table
# ---------------------------------------------------------------------------


class SubscriptionTerm(BaseModel):
    """A subscription option and its contract length."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    months: int = Field(ge=0)                             # 0 → perpetual licence
    discount: Decimal = Field(default=Decimal("0"), ge=0, lt=1)   # fraction off the camera price
    perpetual_multiplier: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _perpetual_needs_multiplier(self) -> SubscriptionTerm:
        if self.months == 0 and self.perpetual_multiplier is None:
            msg = f"Term {self.id!r} has no duration and no perpetual multiplier"
            raise ValueError(msg)
        return self


class CameraTier(BaseModel):
    """Per-camera monthly prices for counts at or above `threshold`."""

    model_config = ConfigDict(frozen=True)

    threshold: int = Field(ge=0)        # inclusive lower bound
    price_per_camera: Decimal = Field(ge=0)
    price_all_scenarios: Decimal = Field(ge=0)
    label: str = ""


class BasePackage(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal = Field(ge=0)        # one-time
    included_cameras: int = Field(ge=0)
    included_scenarios: int = Field(default=3, ge=0)


class AddOnDefaults(BaseModel):
    """Unit prices of the optional one-time items."""

    model_config = ConfigDict(frozen=True)

    edge_server: Decimal = Field(default=Decimal("3000"), ge=0)
    implementation: Decimal = Field(default=Decimal("10000"), ge=0)
    speaker: Decimal = Field(default=Decimal("950"), ge=0)
    travel: Decimal = Field(default=Decimal("2000"), ge=0)


class PricingTable(BaseModel):
    """Validated pricing table for the safety product line."""

    model_config = ConfigDict(frozen=True)

    base_package: BasePackage
    subscription_types: list[SubscriptionTerm] = Field(min_length=1)
    camera_tiers: list[CameraTier] = Field(min_length=1)
    scenarios: list[str] = Field(min_length=1)
    infrastructure_cost_per_camera: Decimal = Field(default=Decimal("0"), ge=0)
    max_discount: Decimal = Field(default=Decimal("30"), ge=0, le=100)
    add_ons: AddOnDefaults = Field(default_factory=AddOnDefaults)

    @field_validator("subscription_types")
    @classmethod
    def _unique_terms(cls, v: list[SubscriptionTerm]) -> list[SubscriptionTerm]:
        ids = [t.id for t in v]
        if len(ids) != len(set(ids)):
            msg = f"Duplicate subscription ids: {ids}"
            raise ValueError(msg)
        return v

    @field_validator("camera_tiers")
    @classmethod
    def _contiguous_tiers(cls, v: list[CameraTier]) -> list[CameraTier]:
        if v[0].threshold > 1:
            msg = f"First camera tier starts at {v[0].threshold}; counts below it would have no price"
            raise ValueError(msg)
        for prev, cur in zip(v, v[1:]):
            if cur.threshold <= prev.threshold:
                msg = f"Camera tier thresholds must be strictly ascending ({prev.threshold} → {cur.threshold})"
                raise ValueError(msg)
        return v

    @field_validator("scenarios")
    @classmethod
    def _unique_scenarios(cls, v: list[str]) -> list[str]:
        if len(v) != len(set(v)):
            msg = "Scenario catalog contains duplicates"
            raise ValueError(msg)
        return v


# ---------------------------------------------------------------------------
# Quote input
# ---------------------------------------------------------------------------


class ClientInfo(BaseModel):
    name: str = ""
    company: str = ""
    email: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    customer_id: str | None = None


class CustomPricing(BaseModel):
    """Manual per-tier prices that replace the table lookup when enabled."""

    use_custom_pricing: bool = False
    tier1_price: Decimal = Field(default=Decimal("50"), ge=0)
    tier2_price: Decimal = Field(default=Decimal("40"), ge=0)
    tier3_price: Decimal = Field(default=Decimal("35"), ge=0)
    infrastructure_cost: Decimal = Field(default=Decimal("12"), ge=0)


class OneTimeOptions(BaseModel):
    """Optional one-time items. `None` costs fall back to the table's add-on defaults."""

    server_count: int = Field(default=0, ge=0)
    server_unit_cost: Decimal | None = Field(default=None, ge=0)
    include_implementation: bool = False
    implementation_cost: Decimal | None = Field(default=None, ge=0)
    implementation_description: str = ""
    speaker_count: int = Field(default=0, ge=0)
    speaker_unit_cost: Decimal | None = Field(default=None, ge=0)
    include_travel: bool = False
    travel_cost: Decimal | None = Field(default=None, ge=0)
    travel_description: str = ""


class SecondaryCurrencyInput(BaseModel):
    show_second_currency: bool = False
    currency: str = "INR"
    exchange_rate: Decimal | None = Field(default=None, gt=0)   # None → static default table
    last_updated: datetime | None = None


class QuoteInput(BaseModel):
    """Everything the quote generator form collects."""

    client_info: ClientInfo = Field(default_factory=ClientInfo)
    quote_date: date | None = None
    quote_number: str | None = None
    total_cameras: int
    subscription_type: str
    discount_percentage: Decimal = Field(default=Decimal("0"), allow_inf_nan=True)
    selected_scenarios: list[str] = Field(default_factory=list)
    everything_package: bool = False
    deployment_type: DeploymentType = DeploymentType.HOSTED
    custom_pricing: CustomPricing = Field(default_factory=CustomPricing)
    one_time: OneTimeOptions = Field(default_factory=OneTimeOptions)
    secondary: SecondaryCurrencyInput = Field(default_factory=SecondaryCurrencyInput)


# ---------------------------------------------------------------------------
# Quote output
# ---------------------------------------------------------------------------


class OneTimeLine(BaseModel):
    """A one-time cost line, added once to the contract value."""

    key: str                    # base_package, edge_server, implementation, speakers, travel, perpetual_license
    description: str
    quantity: int = 1
    unit_cost: Decimal
    total: Decimal


class SecondaryCurrency(BaseModel):
    """Converted amounts for display next to the base currency."""

    currency: str
    exchange_rate: Decimal
    last_updated: datetime | None = None
    amounts: dict[str, Decimal] = Field(default_factory=dict)


class QuoteDetails(BaseModel):
    """Computed quote. Amounts keep full precision; presentation rounds."""

    client_info: ClientInfo
    quote_date: date
    quote_number: str | None = None

    subscription_type: str
    subscription_name: str
    total_cameras: int
    selected_scenarios: list[str]
    is_everything_package: bool
    deployment_type: DeploymentType
    discount_percentage: Decimal

    base_cost: Decimal
    one_time_base_cost: Decimal
    tier_label: str
    unit_price: Decimal
    additional_cameras: int
    additional_camera_cost: Decimal          # monthly
    infrastructure_monthly_cost: Decimal

    monthly_recurring: Decimal
    annual_recurring: Decimal
    discount_amount: Decimal
    discounted_annual_recurring: Decimal
    discounted_monthly_recurring: Decimal
    contract_length: int                     # months

    one_time_lines: list[OneTimeLine]
    total_one_time_cost: Decimal
    perpetual_license_cost: Decimal = Decimal("0")
    total_contract_value: Decimal

    secondary_currency: SecondaryCurrency | None = None


# ---------------------------------------------------------------------------
# Pallet product line
# ---------------------------------------------------------------------------


class PalletTierPrices(BaseModel):
    """Graduated monthly per-camera prices for the pallet product."""

    model_config = ConfigDict(frozen=True)

    first_band: Decimal = Field(ge=0)       # cameras 1..first_band_size
    second_band: Decimal = Field(ge=0)      # next second_band_size cameras
    remainder: Decimal = Field(ge=0)


class PalletTerm(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    rate_card: str          # key into PalletPricingTable.rates
    months_billed: int = Field(ge=1)


class PalletPricingTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    subscription_types: list[PalletTerm] = Field(min_length=1)
    rates: dict[str, PalletTierPrices]
    first_band_size: int = Field(default=8, ge=1)
    second_band_size: int = Field(default=8, ge=1)
    edge_server_cost: Decimal = Field(default=Decimal("3500"), ge=0)
    cameras_per_edge_server: int = Field(default=16, ge=1)
    min_cameras: int = Field(default=8, ge=1)
    max_cameras: int = Field(default=200, ge=1)
    max_discount: Decimal = Field(default=Decimal("50"), ge=0, le=100)
    scenarios: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _rate_cards_exist(self) -> PalletPricingTable:
        for term in self.subscription_types:
            if term.rate_card not in self.rates:
                msg = f"Pallet term {term.id!r} references unknown rate card {term.rate_card!r}"
                raise ValueError(msg)
        if self.min_cameras > self.max_cameras:
            msg = "Pallet min_cameras exceeds max_cameras"
            raise ValueError(msg)
        return self


class PalletQuoteInput(BaseModel):
    client_info: ClientInfo = Field(default_factory=ClientInfo)
    quote_date: date | None = None
    cameras: int
    subscription_type: str = "yearly"
    include_edge_server: bool = True
    server_count: int | None = Field(default=None, ge=0)   # None → recommended count
    discount_percentage: Decimal = Field(default=Decimal("0"), allow_inf_nan=True)
    secondary: SecondaryCurrencyInput = Field(default_factory=SecondaryCurrencyInput)


class PalletQuoteDetails(BaseModel):
    client_info: ClientInfo
    quote_date: date
    subscription_type: str
    subscription_name: str
    cameras: int
    selected_scenarios: list[str]
    monthly_subscription_cost: Decimal
    subscription_cost: Decimal              # billed for months_billed
    months_billed: int
    server_count: int
    recommended_server_count: int
    edge_server_cost: Decimal
    subtotal: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    total: Decimal
    secondary_currency: SecondaryCurrency | None = None


# ---------------------------------------------------------------------------
# Exchange rates
# ---------------------------------------------------------------------------


class ExchangeRates(BaseModel):
    """Rates relative to `base`, as returned by the exchange-rate client."""

    base: str
    rates: dict[str, Decimal]
    last_updated: datetime
    error: str | None = None     # set when the static fallback table is in use


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


class CheckoutLineItem(BaseModel):
    price: str
    quantity: int = Field(ge=1)


class CheckoutRequest(BaseModel):
    """Payload handed to the payment gateway to open a checkout session."""

    mode: str                                  # "subscription" | "payment"
    line_items: list[CheckoutLineItem]
    customer_email: str
    success_url: str
    cancel_url: str
    metadata: dict[str, str] = Field(default_factory=dict)
    coupon_percent_off: Decimal | None = None   # duration "forever"
    coupon_name: str | None = None


# ---------------------------------------------------------------------------
# Saved quotes
# ---------------------------------------------------------------------------


class SavedQuoteSummary(BaseModel):
    """A persisted quote as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime | None = None
    created_by: str
    product: str
    customer_name: str
    company_name: str | None = None
    email: str | None = None
    camera_count: int
    subscription_type: str
    total_amount: Decimal
    quote_data: dict[str, Any] = Field(default_factory=dict)


class CheckoutOptions(BaseModel):
    """Caller choices when turning a saved quote into a checkout."""

    customer_email: str | None = None     # defaults to the quote's email
    starter_kit_included: bool = True
