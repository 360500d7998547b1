"""Pallet productivity quotes.

Graduated per-camera pricing: the first band of cameras at the top rate,
the next band at the middle rate, everything after at the remainder rate.
The monthly total is then billed for the term's months (pilot = 3 months
upfront at monthly rates, annual = 12 months at the yearly rate card).
"""

from __future__ import annotations

import logging
import math
from datetime import date
from decimal import Decimal

from src.errors import ConfigurationError, ValidationError
from src.pricing.engine import clamp_discount, secondary_currency_block
from src.schemas.pricing import (
    PalletPricingTable,
    PalletQuoteDetails,
    PalletQuoteInput,
    PalletTerm,
    PalletTierPrices,
)

logger = logging.getLogger(__name__)

def _resolve_term(table: PalletPricingTable, subscription_type: str) -> PalletTerm:
    for term in table.subscription_types:
        if term.id == subscription_type:
            return term
    msg = f"Unknown pallet subscription type {subscription_type!r}"
    raise ConfigurationError(msg)


def graduated_monthly_cost(cameras: int, prices: PalletTierPrices, table: PalletPricingTable) -> Decimal:
    """Monthly subscription for `cameras` under the graduated bands.

    20 cameras on the monthly card: 8×100 + 8×90 + 4×80 = 1840.
    """
    first = min(cameras, table.first_band_size)
    second = min(max(cameras - table.first_band_size, 0), table.second_band_size)
    rest = max(cameras - table.first_band_size - table.second_band_size, 0)
    return first * prices.first_band + second * prices.second_band + rest * prices.remainder


def recommended_server_count(cameras: int, table: PalletPricingTable) -> int:
    """One edge server per `cameras_per_edge_server` cameras, at least one."""
    return max(1, math.ceil(cameras / table.cameras_per_edge_server))


def compute_pallet_quote(pallet_input: PalletQuoteInput, table: PalletPricingTable) -> PalletQuoteDetails:
    """Price a pallet productivity quote.

    Raises:
        ValidationError: camera count outside [min_cameras, max_cameras],
            or a negative/NaN discount.
        ConfigurationError: unknown subscription type or secondary currency.
    """
    cameras = pallet_input.cameras
    if not table.min_cameras <= cameras <= table.max_cameras:
        msg = f"Pallet quotes need {table.min_cameras}-{table.max_cameras} cameras, got {cameras}"
        raise ValidationError(msg)

    discount = clamp_discount(pallet_input.discount_percentage, table.max_discount)
    term = _resolve_term(table, pallet_input.subscription_type)

    monthly = graduated_monthly_cost(cameras, table.rates[term.rate_card], table)
    subscription_cost = monthly * term.months_billed

    recommended = recommended_server_count(cameras, table)
    if pallet_input.include_edge_server:
        server_count = recommended if pallet_input.server_count is None else pallet_input.server_count
    else:
        server_count = 0
    edge_server_cost = table.edge_server_cost * server_count

    subtotal = subscription_cost + edge_server_cost
    discount_amount = subtotal * discount / 100
    total = subtotal - discount_amount

    logger.debug("Pallet quote: term=%s cameras=%d servers=%d total=%s", term.id, cameras, server_count, total)

    return PalletQuoteDetails(
        client_info=pallet_input.client_info,
        quote_date=pallet_input.quote_date or date.today(),
        subscription_type=term.id,
        subscription_name=term.name,
        cameras=cameras,
        selected_scenarios=list(table.scenarios),
        monthly_subscription_cost=monthly,
        subscription_cost=subscription_cost,
        months_billed=term.months_billed,
        server_count=server_count,
        recommended_server_count=recommended,
        edge_server_cost=edge_server_cost,
        subtotal=subtotal,
        discount_percentage=discount,
        discount_amount=discount_amount,
        total=total,
        secondary_currency=secondary_currency_block(pallet_input.secondary, {"total": total}),
    )
