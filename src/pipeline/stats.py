"""Per-status aggregation of deal lists."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from src.models.enums import DealStatus
from src.schemas.deals import DealRecord, DealStats

# DealStatus value → DealStats field prefix
_BUCKETS: dict[str, str] = {
    DealStatus.NEW.value: "new",
    DealStatus.FIRST_CALL.value: "first_call",
    DealStatus.TWO_PLUS_CALLS.value: "two_plus_calls",
    DealStatus.APPROVED.value: "approved",
    DealStatus.WON.value: "won",
    DealStatus.LOST.value: "lost",
    DealStatus.LATER.value: "later",
}


def deal_amount(deal: DealRecord) -> Decimal:
    """Opportunity amount for summing: missing or non-finite counts as 0."""
    amount = deal.opportunity_amount
    if amount is None or not amount.is_finite():
        return Decimal("0")
    return amount


def compute_stats(deals: Sequence[DealRecord]) -> DealStats:
    """Count and sum deals per status.

    Every deal with a known status lands in exactly one bucket. `total` is
    the list length, so deals with an unknown status show up there only.
    """
    counts = dict.fromkeys(_BUCKETS.values(), 0)
    amounts = dict.fromkeys(_BUCKETS.values(), Decimal("0"))

    for deal in deals:
        bucket = _BUCKETS.get(deal.status)
        if bucket is None:
            continue
        counts[bucket] += 1
        amounts[bucket] += deal_amount(deal)

    total_amount = sum(amounts.values(), start=Decimal("0"))

    return DealStats(
        **counts,
        **{f"{bucket}_amount": value for bucket, value in amounts.items()},
        total=len(deals),
        total_pipeline_value=total_amount - amounts["lost"],
        total_amount=total_amount,
    )


def pipeline_overview(
    all_deals: Sequence[DealRecord],
    filtered_deals: Iterable[DealRecord],
    is_privileged: bool,
) -> tuple[DealStats | None, DealStats | None]:
    """(stats of everything, stats of the current view); admins only."""
    if not is_privileged:
        return None, None
    return compute_stats(all_deals), compute_stats(list(filtered_deals))
