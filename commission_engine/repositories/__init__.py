"""
Repositories.

Async data access objects over a shared AsyncSession.
"""

from commission_engine.repositories.base import BaseRepository
from commission_engine.repositories.commission_repository import (
    CommissionRepository,
)
from commission_engine.repositories.earning_repository import EarningRepository
from commission_engine.repositories.platform_wallet_repository import (
    PlatformWalletRepository,
)
from commission_engine.repositories.referral_repository import ReferralRepository
from commission_engine.repositories.user_activity_repository import (
    UserActivityRepository,
)
from commission_engine.repositories.user_repository import UserRepository
from commission_engine.repositories.wallet_transaction_repository import (
    WalletTransactionRepository,
)

__all__ = [
    "BaseRepository",
    "CommissionRepository",
    "EarningRepository",
    "PlatformWalletRepository",
    "ReferralRepository",
    "UserActivityRepository",
    "UserRepository",
    "WalletTransactionRepository",
]
