"""
Commission statistics.

Read-only aggregations over committed ledger data for dashboards and
operator reports.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.repositories.commission_repository import (
    CommissionRepository,
)
from commission_engine.repositories.earning_repository import EarningRepository
from commission_engine.repositories.platform_wallet_repository import (
    PlatformWalletRepository,
)
from commission_engine.repositories.referral_repository import ReferralRepository
from commission_engine.repositories.user_repository import UserRepository
from commission_engine.repositories.wallet_transaction_repository import (
    WalletTransactionRepository,
)
from commission_engine.utils.exceptions import UserNotFoundError
from commission_engine.utils.money import to_money


@dataclass
class LevelEarnings:
    """Commission earnings of one ancestry level."""

    level: int
    amount: Decimal
    transactions: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "amount": self.amount,
            "transactions": self.transactions,
        }


@dataclass
class CommissionStats:
    """Referral and commission totals of one user."""

    user_id: int
    direct_referrals: int
    team_size: int
    total_earnings: Decimal
    earnings_by_level: list[LevelEarnings] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "directReferrals": self.direct_referrals,
            "teamSize": self.team_size,
            "totalEarnings": self.total_earnings,
            "earningsByLevel": [
                level.as_dict() for level in self.earnings_by_level
            ],
        }


@dataclass
class WalletReconciliation:
    """Running wallet balance compared to its transaction ledger."""

    user_id: int
    wallet_balance: Decimal
    ledger_balance: Decimal

    @property
    def difference(self) -> Decimal:
        return self.wallet_balance - self.ledger_balance

    @property
    def is_balanced(self) -> bool:
        return self.difference == 0


class CommissionStatisticsReader:
    """Aggregates commission statistics; never writes."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize statistics reader."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.referral_repo = ReferralRepository(session)
        self.earning_repo = EarningRepository(session)
        self.commission_repo = CommissionRepository(session)
        self.wallet_tx_repo = WalletTransactionRepository(session)
        self.platform_wallet_repo = PlatformWalletRepository(session)

    async def _require_user(self, user_id: int) -> None:
        if not await self.user_repo.exists(id=user_id):
            raise UserNotFoundError(f"User not found: {user_id}")

    async def get_commission_stats(self, user_id: int) -> CommissionStats:
        """
        Get referral counts and commission earnings of a user.

        Args:
            user_id: User ID

        Returns:
            CommissionStats (zeros and an empty breakdown for users
            without referrals)

        Raises:
            UserNotFoundError: If user does not exist
        """
        await self._require_user(user_id)

        direct_referrals = await self.referral_repo.count_direct_referrals(user_id)
        team_size = await self.referral_repo.count_team(user_id)
        total_earnings = await self.earning_repo.get_total_commission_earnings(
            user_id
        )
        by_level = await self.earning_repo.get_commission_earnings_by_level(
            user_id
        )

        return CommissionStats(
            user_id=user_id,
            direct_referrals=direct_referrals,
            team_size=team_size,
            total_earnings=total_earnings,
            earnings_by_level=[
                LevelEarnings(
                    level=row["level"],
                    amount=row["amount"],
                    transactions=row["transactions"],
                )
                for row in by_level
            ],
        )

    async def get_platform_summary(self, wallet_id: str) -> dict[str, Any]:
        """
        Get platform wallet report.

        Args:
            wallet_id: Platform wallet identity

        Returns:
            Dict with platform balance, ledger balance, total commissions
            paid and per-level commission breakdown
        """
        balance = await self.platform_wallet_repo.get_balance(wallet_id)
        ledger_balance = await self.wallet_tx_repo.get_platform_ledger_sum(
            wallet_id
        )
        total_commissions = await self.commission_repo.get_total_amount()
        by_level = await self.commission_repo.get_level_breakdown()

        return {
            "wallet_id": wallet_id,
            "balance": balance,
            "ledger_balance": ledger_balance,
            "total_commissions": total_commissions,
            "commissions_by_level": by_level,
        }

    async def reconcile_wallet(self, user_id: int) -> WalletReconciliation:
        """
        Compare a user's running wallet balance with its ledger.

        Args:
            user_id: User ID

        Returns:
            WalletReconciliation

        Raises:
            UserNotFoundError: If user does not exist
        """
        wallet_balance = await self.user_repo.get_wallet_balance(user_id)
        if wallet_balance is None:
            raise UserNotFoundError(f"User not found: {user_id}")

        ledger_balance = await self.wallet_tx_repo.get_user_ledger_sum(user_id)
        return WalletReconciliation(
            user_id=user_id,
            wallet_balance=to_money(wallet_balance),
            ledger_balance=ledger_balance,
        )
