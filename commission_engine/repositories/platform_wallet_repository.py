"""
Platform wallet repository.

Data access layer for PlatformWallet model.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.platform_wallet import PlatformWallet
from commission_engine.repositories.base import BaseRepository
from commission_engine.utils.money import to_money


class PlatformWalletRepository(BaseRepository[PlatformWallet]):
    """Platform wallet repository with atomic credit."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize platform wallet repository."""
        super().__init__(PlatformWallet, session)

    async def get_by_wallet_id(self, wallet_id: str) -> PlatformWallet | None:
        """
        Get platform wallet by its well-known identity.

        Args:
            wallet_id: Platform wallet identity

        Returns:
            PlatformWallet or None if never credited
        """
        return await self.get_by(wallet_id=wallet_id)

    async def get_balance(self, wallet_id: str) -> Decimal:
        """
        Get platform wallet balance.

        Args:
            wallet_id: Platform wallet identity

        Returns:
            Balance (0 if wallet does not exist yet)
        """
        stmt = select(PlatformWallet.balance).where(
            PlatformWallet.wallet_id == wallet_id
        )
        result = await self.session.execute(stmt)
        return to_money(result.scalar_one_or_none())

    async def credit(
        self, wallet_id: str, amount: Decimal, currency: str
    ) -> None:
        """
        Atomically add amount to the platform wallet, creating it if missing.

        Uses INSERT ... ON CONFLICT DO UPDATE so concurrent credits to the
        same wallet never lose an update and never race on creation.

        Args:
            wallet_id: Platform wallet identity
            amount: Amount to credit
            currency: Wallet currency (used on creation only)
        """
        now = datetime.now(UTC)
        dialect = self.session.get_bind().dialect.name

        if dialect in ("postgresql", "sqlite"):
            insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
            stmt = insert(PlatformWallet).values(
                wallet_id=wallet_id,
                balance=amount,
                currency=currency,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[PlatformWallet.wallet_id],
                set_={
                    "balance": PlatformWallet.balance + stmt.excluded.balance,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            await self.session.execute(stmt)
            return

        # Generic path for dialects without ON CONFLICT support
        stmt = (
            update(PlatformWallet)
            .where(PlatformWallet.wallet_id == wallet_id)
            .values(balance=PlatformWallet.balance + amount, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            await self.create(
                wallet_id=wallet_id,
                balance=amount,
                currency=currency,
                updated_at=now,
            )
