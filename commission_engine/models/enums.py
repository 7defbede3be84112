"""
Enumerations shared by ledger models.
"""

from enum import StrEnum


class CommissionStatus(StrEnum):
    """Commission record status."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EarningSource(StrEnum):
    """Origin of an earning."""

    COMMISSION = "commission"
    REFERRAL = "referral"
    BONUS = "bonus"


class EarningStatus(StrEnum):
    """Earning record status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class WalletTransactionType(StrEnum):
    """Wallet transaction type."""

    COMMISSION = "commission"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    PURCHASE = "purchase"


class WalletTransactionStatus(StrEnum):
    """Wallet transaction status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
