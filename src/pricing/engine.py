"""Quote pricing engine for the safety product line.

Pure Python, Decimal arithmetic, no I/O. Implements:
- Camera tier resolution (inclusive lower thresholds, whole count at one rate)
- Additional-camera and infrastructure monthly costs
- Annual recurring, additional discount (clamped to the table maximum)
- One-time lines (base package, edge servers, implementation, speakers,
  travel, perpetual licence) and total contract value
- Optional secondary-currency amounts

Worked example (built-in table, yearly term, 25 cameras, 3 scenarios, 10% off):
  tier "21-100"  → $40 × (1 − 0.2 term discount) = $32 per camera/month
  additional      = 25 − 5 included = 20 cameras → $640/month
  annual          = $7,680; discount $768 → $6,912
  contract value  = $5,000 base + $6,912 / 12 × 12 = $11,912
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from src.errors import ConfigurationError, ValidationError
from src.models.enums import DeploymentType
from src.pricing.currency import default_rate
from src.schemas.pricing import (
    CameraTier,
    OneTimeLine,
    PricingTable,
    QuoteDetails,
    QuoteInput,
    SecondaryCurrency,
    SecondaryCurrencyInput,
    SubscriptionTerm,
)

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_MONTHS_PER_YEAR = 12


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def resolve_term(table: PricingTable, subscription_type: str) -> SubscriptionTerm:
    """Find a subscription term by id.

    Raises:
        ConfigurationError: unknown id. Never falls back to a default term.
    """
    for term in table.subscription_types:
        if term.id == subscription_type:
            return term
    known = ", ".join(t.id for t in table.subscription_types)
    msg = f"Unknown subscription type {subscription_type!r} (known: {known})"
    raise ConfigurationError(msg)


def resolve_tier(table: PricingTable, total_cameras: int) -> tuple[int, CameraTier]:
    """Return (index, tier) for a camera count.

    Thresholds are inclusive lower bounds: the last tier whose threshold is
    ≤ total_cameras applies. A count below the first threshold (only 0 for
    a valid table) uses the first tier.
    """
    index = 0
    for i, tier in enumerate(table.camera_tiers):
        if tier.threshold <= total_cameras:
            index = i
        else:
            break
    return index, table.camera_tiers[index]


def validate_scenarios(table: PricingTable, selected: list[str]) -> list[str]:
    """Deduplicate the selection (keeping order) and reject unknown names."""
    catalog = set(table.scenarios)
    unknown = [s for s in selected if s not in catalog]
    if unknown:
        msg = f"Unknown scenarios: {', '.join(unknown)}"
        raise ConfigurationError(msg)
    return list(dict.fromkeys(selected))


def is_everything_package(table: PricingTable, selected: list[str], explicit: bool = False) -> bool:
    """Everything package = explicitly requested, or the whole catalog selected."""
    return explicit or set(selected) >= set(table.scenarios)


def clamp_discount(discount_percentage: Decimal, max_discount: Decimal) -> Decimal:
    """Clamp to [0, max_discount].

    Raises:
        ValidationError: negative or non-finite discount.
    """
    if not discount_percentage.is_finite():
        msg = f"Discount must be a finite number, got {discount_percentage}"
        raise ValidationError(msg)
    if discount_percentage < _ZERO:
        msg = f"Discount cannot be negative, got {discount_percentage}"
        raise ValidationError(msg)
    return min(discount_percentage, max_discount)


# ---------------------------------------------------------------------------
# Calculation steps
# ---------------------------------------------------------------------------


def _unit_price(
    quote_input: QuoteInput,
    table: PricingTable,
    term: SubscriptionTerm,
    tier_index: int,
    tier: CameraTier,
    everything: bool,
) -> Decimal:
    """Monthly price per additional camera."""
    custom = quote_input.custom_pricing
    if custom.use_custom_pricing:
        # Overrides replace the table outright, term discount included
        overrides = (custom.tier1_price, custom.tier2_price, custom.tier3_price)
        return overrides[min(tier_index, len(overrides) - 1)]

    list_price = tier.price_all_scenarios if everything else tier.price_per_camera
    return list_price * (1 - term.discount)


def _infrastructure_rate(quote_input: QuoteInput, table: PricingTable) -> Decimal:
    if quote_input.deployment_type is not DeploymentType.HOSTED:
        return _ZERO
    if quote_input.custom_pricing.use_custom_pricing:
        return quote_input.custom_pricing.infrastructure_cost
    return table.infrastructure_cost_per_camera


def _one_time_lines(quote_input: QuoteInput, table: PricingTable) -> list[OneTimeLine]:
    """Base package plus the optional one-time items, in quote order."""
    opts = quote_input.one_time
    add_ons = table.add_ons
    base = table.base_package

    lines = [
        OneTimeLine(
            key="base_package",
            description=f"{base.name} (includes {base.included_cameras} cameras)",
            unit_cost=base.price,
            total=base.price,
        )
    ]

    if opts.server_count > 0:
        unit = opts.server_unit_cost if opts.server_unit_cost is not None else add_ons.edge_server
        lines.append(OneTimeLine(
            key="edge_server",
            description="Edge AI Server",
            quantity=opts.server_count,
            unit_cost=unit,
            total=unit * opts.server_count,
        ))

    if opts.include_implementation:
        unit = opts.implementation_cost if opts.implementation_cost is not None else add_ons.implementation
        lines.append(OneTimeLine(
            key="implementation",
            description=opts.implementation_description or "Implementation & setup",
            unit_cost=unit,
            total=unit,
        ))

    if opts.speaker_count > 0:
        unit = opts.speaker_unit_cost if opts.speaker_unit_cost is not None else add_ons.speaker
        lines.append(OneTimeLine(
            key="speakers",
            description="AXIS Network Speaker",
            quantity=opts.speaker_count,
            unit_cost=unit,
            total=unit * opts.speaker_count,
        ))

    if opts.include_travel:
        unit = opts.travel_cost if opts.travel_cost is not None else add_ons.travel
        if unit > _ZERO:
            lines.append(OneTimeLine(
                key="travel",
                description=opts.travel_description or "Travel & site support",
                unit_cost=unit,
                total=unit,
            ))

    return lines


def secondary_currency_block(
    secondary: SecondaryCurrencyInput,
    amounts: dict[str, Decimal],
) -> SecondaryCurrency | None:
    """Converted copies of `amounts` (secondary = primary × rate), or None when disabled."""
    if not secondary.show_second_currency:
        return None
    code = secondary.currency.upper()
    rate = secondary.exchange_rate if secondary.exchange_rate is not None else default_rate(code)
    return SecondaryCurrency(
        currency=code,
        exchange_rate=rate,
        last_updated=secondary.last_updated,
        amounts={name: value * rate for name, value in amounts.items()},
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_quote(quote_input: QuoteInput, table: PricingTable) -> QuoteDetails:
    """Compute a full quote from the form input and a validated pricing table.

    Args:
        quote_input: Camera count, term, scenarios, discount, options.
        table: Validated pricing table (see `load_pricing_table`).

    Returns:
        QuoteDetails with recurring, one-time and contract totals.

    Raises:
        ValidationError: negative camera count or negative/NaN discount.
        ConfigurationError: unknown subscription type, scenario or currency.
    """
    if quote_input.total_cameras < 0:
        msg = f"Camera count cannot be negative, got {quote_input.total_cameras}"
        raise ValidationError(msg)

    discount = clamp_discount(quote_input.discount_percentage, table.max_discount)
    term = resolve_term(table, quote_input.subscription_type)
    scenarios = validate_scenarios(table, quote_input.selected_scenarios)
    everything = is_everything_package(table, scenarios, quote_input.everything_package)

    # Recurring
    tier_index, tier = resolve_tier(table, quote_input.total_cameras)
    unit_price = _unit_price(quote_input, table, term, tier_index, tier, everything)
    additional_cameras = max(0, quote_input.total_cameras - table.base_package.included_cameras)
    additional_camera_cost = unit_price * additional_cameras
    infrastructure_monthly = _infrastructure_rate(quote_input, table) * quote_input.total_cameras

    monthly_recurring = additional_camera_cost + infrastructure_monthly
    annual_recurring = monthly_recurring * _MONTHS_PER_YEAR
    discount_amount = annual_recurring * discount / _HUNDRED
    discounted_annual = annual_recurring - discount_amount
    discounted_monthly = discounted_annual / _MONTHS_PER_YEAR
    contract_length = term.months

    # One-time
    lines = _one_time_lines(quote_input, table)
    perpetual_cost = _ZERO
    if term.perpetual_multiplier is not None:
        perpetual_cost = discounted_annual * term.perpetual_multiplier
        lines.append(OneTimeLine(
            key="perpetual_license",
            description=f"Perpetual license ({term.perpetual_multiplier}× annual subscription)",
            unit_cost=perpetual_cost,
            total=perpetual_cost,
        ))
    total_one_time = sum((line.total for line in lines), start=_ZERO)

    total_contract_value = total_one_time + discounted_monthly * contract_length

    amounts = {
        "base_cost": table.base_package.price,
        "one_time_base_cost": table.base_package.price,
        "unit_price": unit_price,
        "additional_camera_cost": additional_camera_cost,
        "infrastructure_monthly_cost": infrastructure_monthly,
        "monthly_recurring": monthly_recurring,
        "annual_recurring": annual_recurring,
        "discount_amount": discount_amount,
        "discounted_annual_recurring": discounted_annual,
        "discounted_monthly_recurring": discounted_monthly,
        "total_one_time_cost": total_one_time,
        "perpetual_license_cost": perpetual_cost,
        "total_contract_value": total_contract_value,
    }

    logger.debug(
        "Quote computed: term=%s cameras=%d tier=%s unit=%s tcv=%s",
        term.id, quote_input.total_cameras, tier.label or tier.threshold, unit_price, total_contract_value,
    )

    return QuoteDetails(
        client_info=quote_input.client_info,
        quote_date=quote_input.quote_date or date.today(),
        quote_number=quote_input.quote_number,
        subscription_type=term.id,
        subscription_name=term.name,
        total_cameras=quote_input.total_cameras,
        selected_scenarios=scenarios,
        is_everything_package=everything,
        deployment_type=quote_input.deployment_type,
        discount_percentage=discount,
        tier_label=tier.label,
        additional_cameras=additional_cameras,
        contract_length=contract_length,
        one_time_lines=lines,
        secondary_currency=secondary_currency_block(quote_input.secondary, amounts),
        **amounts,
    )
