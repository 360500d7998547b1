"""Tests for the safety quote pricing engine.

Tests cover:
- Worked example (annual term, tier 2, additional discount)
- Zero cameras → contract value equals the one-time base cost
- Inclusive tier thresholds (20 / 21 / 100 / 101 cameras)
- Everything package (explicit flag or full catalog)
- Discount clamping and monotonicity, invalid inputs
- Custom pricing, deployment type, one-time add-ons, perpetual term
- Secondary currency amounts
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from src.errors import ConfigurationError, ValidationError
from src.models.enums import DeploymentType
from src.pricing.engine import clamp_discount, compute_quote, resolve_tier
from src.pricing.tables import SAFETY_PRICING, load_pricing_table
from src.schemas.pricing import (
    CustomPricing,
    OneTimeOptions,
    QuoteInput,
    SecondaryCurrencyInput,
)

TABLE = load_pricing_table(SAFETY_PRICING)
THREE_SCENARIOS = ["PPE Compliance", "Area Controls", "Forklift Safety"]


def _quote(cameras: int, term: str = "yearly", discount: str = "0", **kwargs):
    kwargs.setdefault("selected_scenarios", THREE_SCENARIOS)
    quote_input = QuoteInput(
        total_cameras=cameras,
        subscription_type=term,
        discount_percentage=Decimal(discount),
        **kwargs,
    )
    return compute_quote(quote_input, TABLE)


class TestWorkedExample:
    def test_annual_25_cameras_10_percent(self) -> None:
        q = _quote(25, "yearly", "10")
        assert q.tier_label == "21-100 Cameras"
        assert q.unit_price == Decimal("32")
        assert q.additional_cameras == 20
        assert q.additional_camera_cost == Decimal("640")
        assert q.monthly_recurring == Decimal("640")
        assert q.annual_recurring == Decimal("7680")
        assert q.discount_amount == Decimal("768")
        assert q.discounted_annual_recurring == Decimal("6912")
        assert q.discounted_monthly_recurring == Decimal("576")
        assert q.contract_length == 12
        assert q.total_one_time_cost == Decimal("5000")
        assert q.total_contract_value == Decimal("11912")

    def test_echoes_input(self) -> None:
        q = _quote(25, "yearly", "10")
        assert q.subscription_type == "yearly"
        assert q.subscription_name == "Annual"
        assert q.selected_scenarios == THREE_SCENARIOS
        assert q.is_everything_package is False


class TestZeroCameras:
    @pytest.mark.parametrize("term", ["monthly", "threeMonth", "yearly", "threeYear"])
    def test_contract_value_is_base_cost(self, term: str) -> None:
        q = _quote(0, term)
        assert q.additional_cameras == 0
        assert q.monthly_recurring == Decimal("0")
        assert q.total_contract_value == q.one_time_base_cost == Decimal("5000")

    def test_included_cameras_free(self) -> None:
        q = _quote(5, "monthly")
        assert q.additional_cameras == 0
        assert q.total_contract_value == Decimal("5000")


class TestTiers:
    @pytest.mark.parametrize(
        ("cameras", "unit"),
        [(1, "50"), (20, "50"), (21, "40"), (100, "40"), (101, "30"), (500, "30")],
    )
    def test_inclusive_thresholds(self, cameras: int, unit: str) -> None:
        assert _quote(cameras, "monthly").unit_price == Decimal(unit)

    def test_zero_uses_first_tier(self) -> None:
        index, tier = resolve_tier(TABLE, 0)
        assert index == 0
        assert tier.threshold == 1

    def test_whole_count_at_one_rate(self) -> None:
        q = _quote(21, "monthly")
        assert q.additional_camera_cost == Decimal("40") * 16


class TestEverythingPackage:
    def test_full_catalog_selected(self) -> None:
        q = _quote(10, "monthly", selected_scenarios=list(TABLE.scenarios))
        assert q.is_everything_package is True
        assert q.unit_price == Decimal("60")
        assert q.additional_camera_cost == Decimal("300")

    def test_explicit_flag(self) -> None:
        q = _quote(10, "monthly", everything_package=True)
        assert q.is_everything_package is True
        assert q.unit_price == Decimal("60")

    def test_unknown_scenario(self) -> None:
        with pytest.raises(ConfigurationError):
            _quote(10, selected_scenarios=["Teleportation"])

    def test_duplicates_removed(self) -> None:
        q = _quote(10, selected_scenarios=["Housekeeping", "Housekeeping", "Headcounts"])
        assert q.selected_scenarios == ["Housekeeping", "Headcounts"]


class TestDiscount:
    def test_clamped_to_max(self) -> None:
        q = _quote(50, "yearly", "45")
        assert q.discount_percentage == Decimal("30")
        assert q.discount_amount == q.annual_recurring * Decimal("0.3")

    def test_monotonic(self) -> None:
        quotes = [_quote(60, "threeYear", d) for d in ("0", "5", "10", "20", "30", "40")]
        discounted = [q.discounted_annual_recurring for q in quotes]
        assert all(a >= b for a, b in zip(discounted, discounted[1:]))
        assert all(q.discounted_annual_recurring <= q.annual_recurring for q in quotes)
        assert all(q.discounted_annual_recurring >= 0 for q in quotes)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _quote(10, discount="-1")

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _quote(10, discount="NaN")

    def test_clamp_helper(self) -> None:
        assert clamp_discount(Decimal("12.5"), Decimal("30")) == Decimal("12.5")


class TestInvalidInput:
    def test_negative_cameras(self) -> None:
        with pytest.raises(ValidationError):
            _quote(-1)

    def test_unknown_subscription(self) -> None:
        with pytest.raises(ConfigurationError):
            _quote(10, "weekly")


class TestCustomPricing:
    def test_overrides_tier_price_and_infra(self) -> None:
        custom = CustomPricing(
            use_custom_pricing=True,
            tier1_price=Decimal("45"),
            tier2_price=Decimal("38"),
            tier3_price=Decimal("33"),
            infrastructure_cost=Decimal("12"),
        )
        q = _quote(25, "yearly", custom_pricing=custom)
        # No term discount on custom prices
        assert q.unit_price == Decimal("38")
        assert q.infrastructure_monthly_cost == Decimal("300")
        assert q.monthly_recurring == Decimal("1060")

    def test_third_tier(self) -> None:
        custom = CustomPricing(use_custom_pricing=True, tier3_price=Decimal("33"))
        assert _quote(150, custom_pricing=custom).unit_price == Decimal("33")

    def test_customer_cloud_has_no_infra(self) -> None:
        custom = CustomPricing(use_custom_pricing=True, infrastructure_cost=Decimal("12"))
        q = _quote(25, custom_pricing=custom, deployment_type=DeploymentType.CUSTOMER_CLOUD)
        assert q.infrastructure_monthly_cost == Decimal("0")


class TestOneTime:
    def test_add_ons(self) -> None:
        options = OneTimeOptions(
            server_count=2,
            include_implementation=True,
            speaker_count=3,
            include_travel=True,
        )
        q = _quote(5, "monthly", one_time=options)
        totals = {line.key: line.total for line in q.one_time_lines}
        assert totals == {
            "base_package": Decimal("5000"),
            "edge_server": Decimal("6000"),
            "implementation": Decimal("10000"),
            "speakers": Decimal("2850"),
            "travel": Decimal("2000"),
        }
        assert q.total_one_time_cost == Decimal("25850")
        assert q.total_contract_value == Decimal("25850")

    def test_custom_unit_costs(self) -> None:
        options = OneTimeOptions(server_count=1, server_unit_cost=Decimal("4200"), include_travel=True,
                                 travel_cost=Decimal("0"))
        q = _quote(5, "monthly", one_time=options)
        assert [line.key for line in q.one_time_lines] == ["base_package", "edge_server"]
        assert q.total_one_time_cost == Decimal("9200")


class TestTerms:
    def test_pilot_length(self) -> None:
        q = _quote(10, "threeMonth")
        assert q.contract_length == 3
        assert q.total_contract_value == Decimal("5000") + Decimal("250") * 3

    def test_perpetual(self) -> None:
        q = _quote(10, "perpetual")
        assert q.contract_length == 0
        assert q.discounted_annual_recurring == Decimal("2400")
        assert q.perpetual_license_cost == Decimal("7200")
        assert q.one_time_lines[-1].key == "perpetual_license"
        assert q.total_contract_value == Decimal("12200")


class TestSecondaryCurrency:
    def test_disabled_by_default(self) -> None:
        assert _quote(10).secondary_currency is None

    def test_static_rate(self) -> None:
        q = _quote(25, "yearly", "10", secondary=SecondaryCurrencyInput(show_second_currency=True, currency="INR"))
        assert q.secondary_currency is not None
        assert q.secondary_currency.exchange_rate == Decimal("83.12")
        assert q.secondary_currency.amounts["total_contract_value"] == Decimal("11912") * Decimal("83.12")

    def test_explicit_rate(self) -> None:
        secondary = SecondaryCurrencyInput(show_second_currency=True, currency="XYZ", exchange_rate=Decimal("2"))
        q = _quote(25, secondary=secondary)
        assert q.secondary_currency.amounts["monthly_recurring"] == q.monthly_recurring * 2

    def test_unknown_currency_without_rate(self) -> None:
        secondary = SecondaryCurrencyInput(show_second_currency=True, currency="XYZ")
        with pytest.raises(ConfigurationError):
            _quote(25, secondary=secondary)
