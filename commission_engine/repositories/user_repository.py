"""
User repository.

Data access layer for User model.
"""

from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.user import User
from commission_engine.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def credit_wallet(self, user_id: int, amount: Decimal) -> bool:
        """
        Atomically add amount to wallet balance and lifetime earnings.

        Issues a single UPDATE with column arithmetic so concurrent
        transactions crediting the same user never lose an update.

        Args:
            user_id: User ID
            amount: Amount to credit

        Returns:
            True if the user row was updated, False if user not found
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                wallet_balance=User.wallet_balance + amount,
                total_earnings=User.total_earnings + amount,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def get_wallet_balance(self, user_id: int) -> Decimal | None:
        """
        Get current wallet balance without loading the entity.

        Args:
            user_id: User ID

        Returns:
            Wallet balance or None if user not found
        """
        stmt = select(User.wallet_balance).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_paid_users(self, plans: list[str]) -> list[User]:
        """
        Find users that completed a purchase of one of the given plans.

        Args:
            plans: Accepted plan identifiers

        Returns:
            Paid users ordered by ID
        """
        stmt = (
            select(User)
            .where(User.has_paid.is_(True), User.plan.in_(plans))
            .order_by(User.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
