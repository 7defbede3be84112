"""
Commission rate table.

Pure lookup of commission percentages by plan and ancestry level, plus the
commission amount arithmetic. Holds no session and performs no I/O.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from commission_engine.config.plans import (
    PlanConfig,
    PlanType,
    build_plan_catalog,
    parse_plan_type,
)
from commission_engine.config.settings import Settings
from commission_engine.models.types import RATE_UNIT
from commission_engine.utils.exceptions import CommissionConfigError
from commission_engine.utils.money import ZERO, floor_money

HUNDRED = Decimal("100")


class RateTable:
    """
    Plan rate tables bounded by a global maximum depth.

    Validation runs on construction, so a misconfigured table fails at
    process start instead of on the first purchase.
    """

    def __init__(
        self, plans: Mapping[PlanType, PlanConfig], max_depth: int
    ) -> None:
        """
        Initialize and validate rate table.

        Args:
            plans: Plan catalogue keyed by plan type
            max_depth: Deepest level that can receive a commission

        Raises:
            CommissionConfigError: If prices or rates are invalid
        """
        self.plans = dict(plans)
        self.max_depth = max_depth
        self._validate()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RateTable":
        """Build rate table from application settings."""
        return cls(
            plans=build_plan_catalog(settings),
            max_depth=settings.max_referral_depth,
        )

    def _validate(self) -> None:
        if self.max_depth < 1:
            raise CommissionConfigError(
                f"Maximum referral depth must be positive, got {self.max_depth}"
            )

        missing = [plan for plan in PlanType if plan not in self.plans]
        if missing:
            raise CommissionConfigError(
                f"No configuration for plans: {', '.join(missing)}"
            )

        for plan_type, plan in self.plans.items():
            if plan.price <= 0:
                raise CommissionConfigError(
                    f"Price of {plan_type} plan must be positive, got {plan.price}"
                )
            for level, percentage in plan.rates.items():
                if level < 1:
                    raise CommissionConfigError(
                        f"Invalid level {level} in {plan_type} rate table"
                    )
                if percentage < 0:
                    raise CommissionConfigError(
                        f"Negative rate {percentage}% at level {level} "
                        f"in {plan_type} rate table"
                    )
                if percentage != percentage.quantize(RATE_UNIT):
                    raise CommissionConfigError(
                        f"Rate {percentage}% at level {level} in {plan_type} "
                        f"rate table has more than three decimal places"
                    )

            total = self.total_percentage(plan_type)
            if total > HUNDRED:
                raise CommissionConfigError(
                    f"Commission rates of {plan_type} plan sum to {total}%, "
                    f"which exceeds 100%"
                )

    def get_plan(self, plan_type: "PlanType | str") -> PlanConfig:
        """
        Get plan configuration.

        Raises:
            InvalidPlanError: If plan type is not recognised
        """
        return self.plans[parse_plan_type(plan_type)]

    def plan_price(self, plan_type: "PlanType | str") -> Decimal:
        """Get plan price."""
        return self.get_plan(plan_type).price

    def rate_for(self, plan_type: "PlanType | str", level: int) -> Decimal:
        """
        Get commission percentage for an ancestry level.

        Args:
            plan_type: Purchased plan
            level: Ancestry level (1 = direct referrer)

        Returns:
            Percentage, or 0 beyond the plan table or the maximum depth
        """
        if level < 1 or level > self.max_depth:
            return Decimal("0")
        return self.get_plan(plan_type).rates.get(level, Decimal("0"))

    @staticmethod
    def commission_amount(plan_price: Decimal, percentage: Decimal) -> Decimal:
        """
        Calculate commission amount.

        Args:
            plan_price: Plan price
            percentage: Percentage in percent (0.5 = half a percent)

        Returns:
            Amount truncated to the minor currency unit
        """
        if percentage <= 0:
            return ZERO
        return floor_money(plan_price * percentage / HUNDRED)

    def total_percentage(self, plan_type: "PlanType | str") -> Decimal:
        """Sum of percentages payable for a plan within the maximum depth."""
        plan = self.get_plan(plan_type)
        return sum(
            (
                percentage
                for level, percentage in plan.rates.items()
                if level <= self.max_depth
            ),
            Decimal("0"),
        )

    def max_earnings(self, plan_type: "PlanType | str") -> Decimal:
        """
        Maximum total payout of one purchase with a full ancestry chain.

        Args:
            plan_type: Purchased plan

        Returns:
            Sum of commission amounts over every payable level
        """
        plan = self.get_plan(plan_type)
        return sum(
            (
                self.commission_amount(plan.price, self.rate_for(plan_type, level))
                for level in plan.rates
            ),
            ZERO,
        )

    def summary(self) -> dict[str, Any]:
        """
        Describe the active commission configuration.

        Returns:
            Dict with max depth and, per plan, price, rates, payout and
            platform share
        """
        plans: dict[str, Any] = {}
        for plan_type, plan in self.plans.items():
            total = self.total_percentage(plan_type)
            max_payout = self.max_earnings(plan_type)
            plans[plan_type.value] = {
                "label": plan.label,
                "price": plan.price,
                "rates": [
                    {"level": level, "percentage": percentage}
                    for level, percentage in plan.rates.items()
                    if level <= self.max_depth
                ],
                "total_percentage": total,
                "platform_percentage": HUNDRED - total,
                "max_commission_amount": max_payout,
                "min_platform_amount": plan.price - max_payout,
            }

        return {"max_depth": self.max_depth, "plans": plans}
