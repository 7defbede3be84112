"""
Standard type definitions for database models.

Provides consistent types for monetary and percentage fields across all models.
"""

from decimal import Decimal

from sqlalchemy import DECIMAL

# Smallest representable currency unit
MINOR_UNIT = Decimal("0.01")

# Standard money type for prices, commissions, balances
# Precision: 18 digits total, 2 after decimal point (minor currency units)
# Range: up to 9,999,999,999,999,999.99
MoneyType = DECIMAL(18, 2)

# Commission percentage type
# Precision: 7 digits total, 3 after decimal point
# Suitable for: rates such as 0.5%, 12.125%, 100.000%
RatePercentType = DECIMAL(7, 3)

# Smallest representable rate step
RATE_UNIT = Decimal("0.001")
