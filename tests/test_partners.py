"""Tests for partner label resolution and partner filter options."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from src.errors import NotFoundError
from src.pipeline.partners import UNKNOWN_PARTNER, PartnerDirectory, unique_partner_options
from src.schemas.deals import DealRecord, PartnerRecord


def _deal(id_: str, partner_id: str | None) -> DealRecord:
    return DealRecord(
        id=id_,
        created_at=datetime(2025, 2, 1, tzinfo=UTC),
        status="new",
        partner_id=partner_id,
        customer_name="Acme",
    )


@pytest.fixture
def directory() -> PartnerDirectory:
    return PartnerDirectory([
        PartnerRecord(token_identifier="p-1", name="Jane Roe", company_name="Northwind"),
        PartnerRecord(token_identifier="p-2", name=None, company_name=None),
        PartnerRecord(token_identifier="", name="No Token"),
    ])


class TestPartnerLabel:
    def test_company_and_contact(self, directory):
        assert directory.label("p-1") == "Northwind - Jane Roe"

    def test_missing_names(self, directory):
        assert directory.label("p-2") == "Unknown Company - Unknown Contact"

    def test_unknown_id_placeholder(self, directory):
        assert directory.label("nobody") == UNKNOWN_PARTNER

    def test_callable_as_resolver(self, directory):
        assert directory("p-1") == directory.label("p-1")

    def test_empty_token_not_indexed(self, directory):
        assert len(directory) == 2
        assert "" not in directory


class TestPartnerGet:
    def test_found(self, directory):
        assert directory.get("p-1").name == "Jane Roe"

    def test_not_found_raises(self, directory):
        with pytest.raises(NotFoundError):
            directory.get("nobody")


class TestUniquePartnerOptions:
    def test_unassigned_first(self):
        deals = [_deal("1", "p-2"), _deal("2", None), _deal("3", "p-1"), _deal("4", "p-2")]
        assert [o.id for o in unique_partner_options(deals)] == ["unassigned", "p-2", "p-1"]

    def test_no_unassigned(self):
        options = unique_partner_options([_deal("1", "p-1")])
        assert [o.id for o in options] == ["p-1"]
        assert options[0].type == "partner"

    def test_empty(self):
        assert unique_partner_options([]) == []
