"""
Wallet transaction repository.

Data access layer for WalletTransaction model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.enums import WalletTransactionStatus
from commission_engine.models.wallet_transaction import WalletTransaction
from commission_engine.repositories.base import BaseRepository
from commission_engine.utils.money import to_money


class WalletTransactionRepository(BaseRepository[WalletTransaction]):
    """Wallet transaction repository with ledger sums."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize wallet transaction repository."""
        super().__init__(WalletTransaction, session)

    async def get_user_ledger_sum(self, user_id: int) -> Decimal:
        """
        Sum of completed wallet transactions owned by a user.

        Args:
            user_id: User ID

        Returns:
            Ledger balance of the user wallet
        """
        stmt = select(func.sum(WalletTransaction.amount)).where(
            WalletTransaction.user_id == user_id,
            WalletTransaction.status == WalletTransactionStatus.COMPLETED.value,
        )
        result = await self.session.execute(stmt)
        return to_money(result.scalar())

    async def get_platform_ledger_sum(self, wallet_id: str) -> Decimal:
        """
        Sum of completed wallet transactions owned by a platform wallet.

        Args:
            wallet_id: Platform wallet identity

        Returns:
            Ledger balance of the platform wallet
        """
        stmt = select(func.sum(WalletTransaction.amount)).where(
            WalletTransaction.platform_wallet_id == wallet_id,
            WalletTransaction.status == WalletTransactionStatus.COMPLETED.value,
        )
        result = await self.session.execute(stmt)
        return to_money(result.scalar())

    async def get_by_reference(self, reference_id: str) -> list[WalletTransaction]:
        """
        Get wallet transactions linked to a reference.

        Args:
            reference_id: Commission ID or synthetic reference

        Returns:
            Matching transactions ordered by ID
        """
        return await self.find_by(reference_id=reference_id)
