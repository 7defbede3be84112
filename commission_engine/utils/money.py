"""
Money helpers.

All amounts are Decimal values in minor currency units (two places).
"""

from decimal import ROUND_DOWN, Decimal

from commission_engine.models.types import MINOR_UNIT

ZERO = Decimal("0.00")


def to_money(value: "Decimal | int | float | str | None") -> Decimal:
    """
    Normalize a stored or aggregated value to a money Decimal.

    Aggregates may come back from the driver as float or None (empty set);
    going through str avoids binary float artefacts.

    Args:
        value: Raw value

    Returns:
        Decimal quantized to the minor unit
    """
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(MINOR_UNIT)


def floor_money(value: Decimal) -> Decimal:
    """
    Truncate a computed amount to the minor unit.

    Used for payouts so rounding never pays out more than the exact share.

    Args:
        value: Exact amount

    Returns:
        Amount rounded down to the minor unit
    """
    return value.quantize(MINOR_UNIT, rounding=ROUND_DOWN)
