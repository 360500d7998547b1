"""Tests for per-status deal statistics."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

from src.models.enums import DealStatus
from src.pipeline.stats import compute_stats, deal_amount, pipeline_overview
from src.schemas.deals import DealRecord, DealStats


def _deal(status: str, amount: str | None = "0", id_: str = "d") -> DealRecord:
    return DealRecord(
        id=id_,
        created_at=datetime(2025, 3, 1, tzinfo=UTC),
        status=status,
        customer_name="Acme",
        opportunity_amount=Decimal(amount) if amount is not None else None,
    )


class TestComputeStats:
    def test_empty(self) -> None:
        assert compute_stats([]) == DealStats()

    def test_lost_and_won_example(self) -> None:
        stats = compute_stats([_deal("lost", "100"), _deal("won", "200")])
        assert stats.lost == 1
        assert stats.lost_amount == Decimal("100")
        assert stats.won == 1
        assert stats.won_amount == Decimal("200")
        assert stats.total_pipeline_value == Decimal("200")
        assert stats.total_amount == Decimal("300")
        assert stats.total == 2

    def test_every_status_bucketed(self) -> None:
        deals = [_deal(s.value, "10", id_=s.value) for s in DealStatus]
        stats = compute_stats(deals)
        assert (stats.new, stats.first_call, stats.two_plus_calls, stats.approved) == (1, 1, 1, 1)
        assert (stats.won, stats.lost, stats.later) == (1, 1, 1)
        assert stats.total == len(DealStatus)
        assert stats.total_amount == Decimal("70")

    def test_unknown_status_only_in_total(self) -> None:
        stats = compute_stats([_deal("new", "50"), _deal("registered", "999")])
        bucket_sum = (
            stats.new + stats.first_call + stats.two_plus_calls + stats.approved
            + stats.won + stats.lost + stats.later
        )
        assert stats.total == 2
        assert bucket_sum == 1
        assert stats.total_amount == Decimal("50")

    def test_missing_and_nan_amounts_count_but_sum_zero(self) -> None:
        deals = [_deal("approved", None), _deal("approved", "NaN"), _deal("approved", "250")]
        stats = compute_stats(deals)
        assert stats.approved == 3
        assert stats.approved_amount == Decimal("250")

    def test_pipeline_value_is_total_minus_lost(self) -> None:
        deals = [
            _deal("new", "120.50"),
            _deal("1st_call", "80"),
            _deal("lost", "1000"),
            _deal("later", "15.25"),
            _deal("lost", None),
        ]
        stats = compute_stats(deals)
        assert stats.total_pipeline_value == stats.total_amount - stats.lost_amount
        assert stats.total_pipeline_value == Decimal("215.75")


class TestDealAmount:
    def test_infinite_counts_zero(self) -> None:
        assert deal_amount(_deal("new", "Infinity")) == Decimal("0")

    def test_regular(self) -> None:
        assert deal_amount(_deal("new", "42.10")) == Decimal("42.10")


class TestPipelineOverview:
    def test_none_for_partners(self) -> None:
        assert pipeline_overview([_deal("new", "1")], [], False) == (None, None)

    def test_admin_gets_both(self) -> None:
        everything = [_deal("new", "10"), _deal("won", "20")]
        overall, filtered = pipeline_overview(everything, everything[:1], True)
        assert overall is not None and filtered is not None
        assert overall.total == 2
        assert filtered.total == 1
        assert filtered.new_amount == Decimal("10")


class TestStatusLabel:
    def test_display_names(self) -> None:
        assert _deal("new").status_label == "Early Stage"
        assert _deal("1st_call").status_label == "Low Interest"
        assert _deal("2plus_calls").status_label == "High Interest"

    def test_unknown_status_shown_raw(self) -> None:
        assert _deal("registered").status_label == "registered"

    def test_serialized(self) -> None:
        assert _deal("won").model_dump()["status_label"] == "Won"
