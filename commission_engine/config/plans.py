"""
Plan catalogue.

Defines the closed set of purchasable plans, their prices and the
per-level commission rate tables. Percentages are expressed in percent
(Decimal("0.5") is half a percent), never as fractions.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from types import MappingProxyType

from commission_engine.config.settings import Settings
from commission_engine.utils.exceptions import InvalidPlanError


class PlanType(StrEnum):
    """Recognised plan types."""

    BASIC = "basic"
    PREMIUM = "premium"


# Commission rates for the basic plan, level -> percent
BASIC_PLAN_COMMISSION_RATES: dict[int, Decimal] = {
    1: Decimal("10"),   # direct referrer
    2: Decimal("5"),
    3: Decimal("2"),
    4: Decimal("1"),
    5: Decimal("0.5"),
}

# Commission rates for the premium plan, level -> percent
PREMIUM_PLAN_COMMISSION_RATES: dict[int, Decimal] = {
    1: Decimal("15"),   # direct referrer
    2: Decimal("7"),
    3: Decimal("3"),
    4: Decimal("2"),
    5: Decimal("1"),
    6: Decimal("0.5"),
    7: Decimal("0.5"),
}

PLAN_LABELS = {
    PlanType.BASIC: "Basic Plan",
    PlanType.PREMIUM: "Premium Plan",
}


@dataclass(frozen=True)
class PlanConfig:
    """Price and commission rate table of one plan."""

    plan_type: PlanType
    label: str
    price: Decimal
    rates: Mapping[int, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        ordered = dict(sorted(self.rates.items()))
        object.__setattr__(self, "rates", MappingProxyType(ordered))


def parse_plan_type(value: "str | PlanType") -> PlanType:
    """
    Convert external plan identifier to PlanType.

    Args:
        value: Plan identifier such as "basic"

    Returns:
        Matching PlanType

    Raises:
        InvalidPlanError: If value is not a recognised plan
    """
    if isinstance(value, PlanType):
        return value
    try:
        return PlanType(str(value).strip().lower())
    except ValueError as exc:
        raise InvalidPlanError(f"Invalid plan type: {value}") from exc


def build_plan_catalog(settings: Settings) -> dict[PlanType, PlanConfig]:
    """Build the plan catalogue using prices from settings."""
    return {
        PlanType.BASIC: PlanConfig(
            plan_type=PlanType.BASIC,
            label=PLAN_LABELS[PlanType.BASIC],
            price=settings.basic_plan_price,
            rates=BASIC_PLAN_COMMISSION_RATES,
        ),
        PlanType.PREMIUM: PlanConfig(
            plan_type=PlanType.PREMIUM,
            label=PLAN_LABELS[PlanType.PREMIUM],
            price=settings.premium_plan_price,
            rates=PREMIUM_PLAN_COMMISSION_RATES,
        ),
    }
