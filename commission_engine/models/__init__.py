"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from commission_engine.models.base import Base
from commission_engine.models.commission import Commission
from commission_engine.models.earning import Earning
from commission_engine.models.enums import (
    CommissionStatus,
    EarningSource,
    EarningStatus,
    WalletTransactionStatus,
    WalletTransactionType,
)
from commission_engine.models.platform_wallet import PlatformWallet
from commission_engine.models.referral_ancestor import ReferralAncestor
from commission_engine.models.user import User
from commission_engine.models.user_activity import ActivityType, UserActivity
from commission_engine.models.wallet_transaction import WalletTransaction

__all__ = [
    # Base
    "Base",
    # Enums
    "CommissionStatus",
    "EarningSource",
    "EarningStatus",
    "WalletTransactionStatus",
    "WalletTransactionType",
    "ActivityType",
    # Core Models
    "User",
    "ReferralAncestor",
    # Ledger Models
    "Commission",
    "Earning",
    "WalletTransaction",
    "PlatformWallet",
    # Activity
    "UserActivity",
]
