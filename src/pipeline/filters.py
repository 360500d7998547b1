"""Deal list filtering: free-text search, partner filter, status filter.

Stages run in that order and each keeps the input order. Partner search
and partner filtering only apply to privileged (admin) viewers; everyone
else is already scoped to their own deals by the data layer.

The `all` status hides lost deals. Lost deals are only listed when
`lost` is selected explicitly.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from src.models.enums import DealStatus
from src.schemas.deals import ALL, UNASSIGNED, DealFilters, DealRecord

PartnerResolver = Callable[[str], str]


# ── Stages ───────────────────────────────────────────────────────────────


def _matches_search(deal: DealRecord, query: str, resolver: PartnerResolver, is_privileged: bool) -> bool:
    if query in deal.customer_name.lower():
        return True
    if deal.contact_name and query in deal.contact_name.lower():
        return True
    if is_privileged and deal.partner_id:
        return query in resolver(deal.partner_id).lower()
    return False


def _search(
    deals: list[DealRecord],
    search_query: str,
    resolver: PartnerResolver,
    is_privileged: bool,
) -> list[DealRecord]:
    if not search_query.strip():
        return deals
    query = search_query.lower()
    return [d for d in deals if _matches_search(d, query, resolver, is_privileged)]


def _by_partner(deals: list[DealRecord], selected_partner: str) -> list[DealRecord]:
    if selected_partner == ALL:
        return deals
    if selected_partner == UNASSIGNED:
        return [d for d in deals if d.is_unassigned]
    return [d for d in deals if d.partner_id == selected_partner]


def _by_status(deals: list[DealRecord], selected_status: str) -> list[DealRecord]:
    if selected_status == ALL:
        return [d for d in deals if d.status != DealStatus.LOST]
    return [d for d in deals if d.status == selected_status]


# ── Public API ───────────────────────────────────────────────────────────


def scope_deals(
    deals: Sequence[DealRecord],
    filters: DealFilters,
    partner_resolver: PartnerResolver,
    is_privileged: bool,
) -> list[DealRecord]:
    """Search and partner stages only (no status filter)."""
    result = _search(list(deals), filters.search_query, partner_resolver, is_privileged)
    if is_privileged:
        result = _by_partner(result, filters.selected_partner)
    return result


def filter_deals(
    deals: Sequence[DealRecord],
    filters: DealFilters,
    partner_resolver: PartnerResolver,
    is_privileged: bool,
) -> list[DealRecord]:
    """Apply search, partner and status filters.

    Args:
        deals: Full deal list visible to the viewer.
        filters: Current filter set.
        partner_resolver: Maps a partner id to its display label.
        is_privileged: Whether the viewer may search and filter by partner.

    Returns:
        The matching deals in input order.
    """
    scoped = scope_deals(deals, filters, partner_resolver, is_privileged)
    return _by_status(scoped, filters.selected_status)


def has_active_filters(filters: DealFilters) -> bool:
    return (
        filters.selected_partner != ALL
        or filters.selected_status != ALL
        or bool(filters.search_query.strip())
    )


def has_partner_filters(filters: DealFilters) -> bool:
    """Partner or search filter set (the status filter is ignored)."""
    return filters.selected_partner != ALL or bool(filters.search_query.strip())


def clear_filters() -> DealFilters:
    return DealFilters()
