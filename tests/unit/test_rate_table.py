"""
Unit tests for commission rate table.

Tests cover:
- Rate lookup per plan and level
- Depth truncation
- Commission amount arithmetic
- Configuration validation
- Configuration summary
"""

from decimal import Decimal

import pytest

from commission_engine.config.plans import (
    PlanConfig,
    PlanType,
    build_plan_catalog,
)
from commission_engine.services.commission.rate_table import RateTable
from commission_engine.utils.exceptions import (
    CommissionConfigError,
    InvalidPlanError,
)


def make_plans(basic_rates=None, premium_rates=None, basic_price="800"):
    """Build a plan catalogue with custom rates."""
    return {
        PlanType.BASIC: PlanConfig(
            plan_type=PlanType.BASIC,
            label="Basic Plan",
            price=Decimal(basic_price),
            rates=basic_rates if basic_rates is not None else {1: Decimal("10")},
        ),
        PlanType.PREMIUM: PlanConfig(
            plan_type=PlanType.PREMIUM,
            label="Premium Plan",
            price=Decimal("2500"),
            rates=premium_rates if premium_rates is not None else {1: Decimal("15")},
        ),
    }


class TestRateLookup:
    """Test rate_for lookups."""

    @pytest.mark.parametrize(
        "level,expected",
        [(1, "10"), (2, "5"), (3, "2"), (4, "1"), (5, "0.5")],
    )
    def test_basic_rates(self, rate_table, level, expected):
        """Basic plan pays five levels."""
        assert rate_table.rate_for(PlanType.BASIC, level) == Decimal(expected)

    @pytest.mark.parametrize(
        "level,expected",
        [(1, "15"), (2, "7"), (3, "3"), (4, "2"), (5, "1"), (6, "0.5"), (7, "0.5")],
    )
    def test_premium_rates(self, rate_table, level, expected):
        """Premium plan pays seven levels."""
        assert rate_table.rate_for(PlanType.PREMIUM, level) == Decimal(expected)

    def test_level_beyond_plan_table(self, rate_table):
        """Levels past the plan table earn nothing."""
        assert rate_table.rate_for(PlanType.BASIC, 6) == Decimal("0")
        assert rate_table.rate_for(PlanType.PREMIUM, 8) == Decimal("0")

    def test_level_beyond_max_depth(self):
        """Maximum depth caps the plan table."""
        table = RateTable(
            make_plans(basic_rates={level: Decimal("1") for level in range(1, 16)}),
            max_depth=10,
        )

        assert table.rate_for(PlanType.BASIC, 10) == Decimal("1")
        assert table.rate_for(PlanType.BASIC, 11) == Decimal("0")

    def test_level_zero(self, rate_table):
        """Level 0 is the purchaser and earns nothing."""
        assert rate_table.rate_for(PlanType.BASIC, 0) == Decimal("0")

    def test_plan_given_as_string(self, rate_table):
        """External plan identifiers are accepted case-insensitively."""
        assert rate_table.rate_for("premium", 1) == Decimal("15")
        assert rate_table.rate_for("BASIC", 1) == Decimal("10")

    def test_unknown_plan_rejected(self, rate_table):
        """Unknown plans are a caller error."""
        with pytest.raises(InvalidPlanError, match="gold"):
            rate_table.rate_for("gold", 1)

    def test_plan_price(self, rate_table):
        """Prices come from settings."""
        assert rate_table.plan_price(PlanType.BASIC) == Decimal("800")
        assert rate_table.plan_price(PlanType.PREMIUM) == Decimal("2500")


class TestCommissionAmount:
    """Test commission amount arithmetic."""

    def test_whole_percentage(self):
        """10% of 800 is 80."""
        amount = RateTable.commission_amount(Decimal("800"), Decimal("10"))
        assert amount == Decimal("80.00")

    def test_half_percent_is_exact(self):
        """0.5% is represented exactly."""
        assert RateTable.commission_amount(
            Decimal("800"), Decimal("0.5")
        ) == Decimal("4.00")
        assert RateTable.commission_amount(
            Decimal("2500"), Decimal("0.5")
        ) == Decimal("12.50")

    def test_fraction_of_minor_unit_truncated(self):
        """Sub-paisa remainders are never paid out."""
        # 333.33 * 0.5 / 100 = 1.66665
        amount = RateTable.commission_amount(Decimal("333.33"), Decimal("0.5"))
        assert amount == Decimal("1.66")

    def test_zero_percentage(self):
        """Zero rate yields zero amount."""
        assert RateTable.commission_amount(
            Decimal("800"), Decimal("0")
        ) == Decimal("0.00")


class TestValidation:
    """Test configuration validation on construction."""

    def test_default_catalogue_is_valid(self, test_settings):
        """Shipped rate tables pass validation."""
        table = RateTable(build_plan_catalog(test_settings), max_depth=10)
        assert table.total_percentage(PlanType.BASIC) == Decimal("18.5")
        assert table.total_percentage(PlanType.PREMIUM) == Decimal("29")

    def test_rates_above_hundred_percent(self):
        """Rates summing above 100% are a configuration error."""
        plans = make_plans(
            basic_rates={1: Decimal("60"), 2: Decimal("40"), 3: Decimal("0.5")}
        )
        with pytest.raises(CommissionConfigError, match="exceeds 100%"):
            RateTable(plans, max_depth=10)

    def test_exactly_hundred_percent_allowed(self):
        """Paying out the full price is allowed."""
        plans = make_plans(basic_rates={1: Decimal("60"), 2: Decimal("40")})
        table = RateTable(plans, max_depth=10)
        assert table.total_percentage(PlanType.BASIC) == Decimal("100")

    def test_levels_beyond_depth_not_counted(self):
        """Only payable levels count towards the 100% limit."""
        plans = make_plans(
            basic_rates={1: Decimal("60"), 2: Decimal("30"), 3: Decimal("30")}
        )
        table = RateTable(plans, max_depth=2)
        assert table.total_percentage(PlanType.BASIC) == Decimal("90")

    def test_negative_rate(self):
        """Negative rates are rejected."""
        plans = make_plans(basic_rates={1: Decimal("-1")})
        with pytest.raises(CommissionConfigError, match="Negative rate"):
            RateTable(plans, max_depth=10)

    def test_rate_finer_than_stored_precision(self):
        """Rates must fit the stored percentage column."""
        plans = make_plans(basic_rates={1: Decimal("0.3333")})
        with pytest.raises(CommissionConfigError, match="three decimal places"):
            RateTable(plans, max_depth=10)

    def test_rate_at_stored_precision(self):
        """Three decimal places are accepted as configured."""
        table = RateTable(
            make_plans(basic_rates={1: Decimal("12.125")}), max_depth=10
        )
        assert table.rate_for(PlanType.BASIC, 1) == Decimal("12.125")

    def test_non_positive_level(self):
        """Level 0 cannot carry a rate."""
        plans = make_plans(basic_rates={0: Decimal("5")})
        with pytest.raises(CommissionConfigError, match="Invalid level"):
            RateTable(plans, max_depth=10)

    def test_non_positive_price(self):
        """Plans must have a positive price."""
        plans = make_plans(basic_price="0")
        with pytest.raises(CommissionConfigError, match="must be positive"):
            RateTable(plans, max_depth=10)

    def test_missing_plan(self):
        """Every recognised plan needs a configuration."""
        plans = make_plans()
        del plans[PlanType.PREMIUM]
        with pytest.raises(CommissionConfigError, match="premium"):
            RateTable(plans, max_depth=10)

    def test_invalid_depth(self):
        """Depth must be at least one level."""
        with pytest.raises(CommissionConfigError, match="depth"):
            RateTable(make_plans(), max_depth=0)


class TestSummary:
    """Test configuration summary."""

    def test_max_earnings(self, rate_table):
        """Full chains pay the whole rate table."""
        assert rate_table.max_earnings(PlanType.BASIC) == Decimal("148.00")
        assert rate_table.max_earnings(PlanType.PREMIUM) == Decimal("725.00")

    def test_summary(self, rate_table):
        """Summary reports payout and platform share per plan."""
        summary = rate_table.summary()

        assert summary["max_depth"] == 10
        basic = summary["plans"]["basic"]
        assert basic["price"] == Decimal("800")
        assert basic["total_percentage"] == Decimal("18.5")
        assert basic["platform_percentage"] == Decimal("81.5")
        assert basic["max_commission_amount"] == Decimal("148.00")
        assert basic["min_platform_amount"] == Decimal("652.00")
        assert [rate["level"] for rate in basic["rates"]] == [1, 2, 3, 4, 5]

        premium = summary["plans"]["premium"]
        assert premium["platform_percentage"] == Decimal("71")
        assert len(premium["rates"]) == 7
