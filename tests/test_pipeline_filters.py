"""Tests for deal list filtering.

Covers:
- Status filter: "all" hides lost deals, "lost" shows only lost deals
- Free-text search on customer / contact / partner label
- Partner filter (admins only), unassigned bucket
- Order preservation and idempotence
- has_active_filters / clear_filters
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import MagicMock

from src.models.enums import DealStatus
from src.pipeline.filters import (
    clear_filters,
    filter_deals,
    has_active_filters,
    has_partner_filters,
    scope_deals,
)
from src.pipeline.partners import PartnerDirectory
from src.schemas.deals import DealFilters, DealRecord, PartnerRecord


def _deal(
    id_: str,
    status: str = "new",
    partner_id: str | None = None,
    customer: str = "Acme Logistics",
    contact: str | None = None,
    amount: str = "1000",
) -> DealRecord:
    return DealRecord(
        id=id_,
        created_at=datetime(2025, 1, 15, tzinfo=UTC),
        status=status,
        partner_id=partner_id,
        customer_name=customer,
        contact_name=contact,
        opportunity_amount=Decimal(amount),
    )


_DIRECTORY = PartnerDirectory([
    PartnerRecord(token_identifier="p-1", name="Jane Roe", company_name="Northwind Integrators"),
    PartnerRecord(token_identifier="p-2", name="Raj Patel", company_name="Vision Partners"),
])


def _all_statuses() -> list[DealRecord]:
    return [_deal(f"d-{s.value}", status=s.value) for s in DealStatus]


class TestStatusFilter:
    def test_all_hides_lost(self) -> None:
        result = filter_deals(_all_statuses(), DealFilters(), _DIRECTORY, True)
        assert DealStatus.LOST.value not in {d.status for d in result}
        assert len(result) == len(DealStatus) - 1

    def test_lost_only_when_selected(self) -> None:
        result = filter_deals(_all_statuses(), DealFilters(selected_status="lost"), _DIRECTORY, True)
        assert [d.status for d in result] == ["lost"]

    def test_concrete_status(self) -> None:
        result = filter_deals(_all_statuses(), DealFilters(selected_status="2plus_calls"), _DIRECTORY, True)
        assert [d.id for d in result] == ["d-2plus_calls"]

    def test_all_equals_union_of_non_lost_statuses(self) -> None:
        deals = _all_statuses() * 2
        all_ids = [d.id for d in filter_deals(deals, DealFilters(), _DIRECTORY, True)]
        union: list[str] = []
        for status in DealStatus:
            if status is DealStatus.LOST:
                continue
            union += [d.id for d in filter_deals(deals, DealFilters(selected_status=status.value), _DIRECTORY, True)]
        assert sorted(all_ids) == sorted(union)

    def test_unknown_status_passes_all(self) -> None:
        deals = [_deal("d-1", status="registered"), _deal("d-2", status="lost")]
        result = filter_deals(deals, DealFilters(), _DIRECTORY, True)
        assert [d.id for d in result] == ["d-1"]


class TestSearch:
    def test_customer_name_case_insensitive(self) -> None:
        deals = [_deal("d-1", customer="Acme Logistics"), _deal("d-2", customer="Globex")]
        result = filter_deals(deals, DealFilters(search_query="ACME"), _DIRECTORY, False)
        assert [d.id for d in result] == ["d-1"]

    def test_contact_name(self) -> None:
        deals = [_deal("d-1", contact="Maria Lopez"), _deal("d-2", contact=None)]
        result = filter_deals(deals, DealFilters(search_query="lopez"), _DIRECTORY, False)
        assert [d.id for d in result] == ["d-1"]

    def test_whitespace_query_is_noop(self) -> None:
        deals = [_deal("d-1"), _deal("d-2", customer="Globex")]
        result = filter_deals(deals, DealFilters(search_query="   "), _DIRECTORY, False)
        assert [d.id for d in result] == ["d-1", "d-2"]

    def test_partner_label_searched_for_admins(self) -> None:
        deals = [_deal("d-1", partner_id="p-1", customer="Globex"), _deal("d-2", partner_id="p-2", customer="Initech")]
        result = filter_deals(deals, DealFilters(search_query="northwind"), _DIRECTORY, True)
        assert [d.id for d in result] == ["d-1"]

    def test_partner_label_not_searched_for_partners(self) -> None:
        resolver = MagicMock(return_value="Northwind Integrators - Jane Roe")
        deals = [_deal("d-1", partner_id="p-1", customer="Globex")]
        result = filter_deals(deals, DealFilters(search_query="northwind"), resolver, False)
        assert result == []
        resolver.assert_not_called()

    def test_unknown_partner_matches_placeholder(self) -> None:
        deals = [_deal("d-1", partner_id="ghost", customer="Globex")]
        result = filter_deals(deals, DealFilters(search_query="unknown partner"), _DIRECTORY, True)
        assert [d.id for d in result] == ["d-1"]


class TestPartnerFilter:
    def test_unassigned(self) -> None:
        deals = [_deal("d-1", partner_id="p-1"), _deal("d-2"), _deal("d-3", partner_id="")]
        result = filter_deals(deals, DealFilters(selected_partner="unassigned"), _DIRECTORY, True)
        assert [d.id for d in result] == ["d-2", "d-3"]

    def test_exact_partner(self) -> None:
        deals = [_deal("d-1", partner_id="p-1"), _deal("d-2", partner_id="p-2"), _deal("d-3")]
        result = filter_deals(deals, DealFilters(selected_partner="p-2"), _DIRECTORY, True)
        assert [d.id for d in result] == ["d-2"]

    def test_ignored_for_non_privileged(self) -> None:
        deals = [_deal("d-1", partner_id="p-1"), _deal("d-2", partner_id="p-2")]
        result = filter_deals(deals, DealFilters(selected_partner="p-2"), _DIRECTORY, False)
        assert [d.id for d in result] == ["d-1", "d-2"]

    def test_scope_deals_skips_status(self) -> None:
        deals = [_deal("d-1", partner_id="p-1", status="lost"), _deal("d-2", partner_id="p-1")]
        result = scope_deals(deals, DealFilters(selected_partner="p-1"), _DIRECTORY, True)
        assert [d.id for d in result] == ["d-1", "d-2"]


class TestOrderingAndIdempotence:
    def test_preserves_input_order(self) -> None:
        deals = [_deal(f"d-{i}", customer=f"Acme {i}") for i in (5, 3, 9, 1)]
        result = filter_deals(deals, DealFilters(search_query="acme"), _DIRECTORY, True)
        assert [d.id for d in result] == ["d-5", "d-3", "d-9", "d-1"]

    def test_idempotent(self) -> None:
        deals = _all_statuses() + [_deal("x", partner_id="p-1", customer="Northwind Depot")]
        filters = DealFilters(search_query="north", selected_partner="p-1")
        first = filter_deals(deals, filters, _DIRECTORY, True)
        second = filter_deals(deals, filters, _DIRECTORY, True)
        assert first == second

    def test_input_not_mutated(self) -> None:
        deals = _all_statuses()
        snapshot = list(deals)
        filter_deals(deals, DealFilters(selected_status="won"), _DIRECTORY, True)
        assert deals == snapshot


class TestFilterState:
    def test_defaults_inactive(self) -> None:
        assert has_active_filters(DealFilters()) is False

    def test_whitespace_search_inactive(self) -> None:
        assert has_active_filters(DealFilters(search_query="  ")) is False

    def test_status_active(self) -> None:
        assert has_active_filters(DealFilters(selected_status="won")) is True

    def test_partner_filters_ignore_status(self) -> None:
        assert has_partner_filters(DealFilters(selected_status="won")) is False
        assert has_partner_filters(DealFilters(selected_partner="unassigned")) is True

    def test_clear(self) -> None:
        cleared = clear_filters()
        assert cleared == DealFilters(search_query="", selected_partner="all", selected_status="all")
