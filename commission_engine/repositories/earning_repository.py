"""
Earning repository.

Data access layer for Earning model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.earning import Earning
from commission_engine.models.enums import EarningSource, EarningStatus
from commission_engine.repositories.base import BaseRepository
from commission_engine.utils.money import to_money


class EarningRepository(BaseRepository[Earning]):
    """Earning repository with aggregation queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize earning repository."""
        super().__init__(Earning, session)

    def _commission_filters(self, user_id: int) -> tuple:
        return (
            Earning.user_id == user_id,
            Earning.source == EarningSource.COMMISSION.value,
            Earning.status != EarningStatus.FAILED.value,
        )

    async def get_total_commission_earnings(self, user_id: int) -> Decimal:
        """
        Sum of commission-sourced earnings of a user.

        Args:
            user_id: Beneficiary user ID

        Returns:
            Total amount (0 when the user has no earnings)
        """
        stmt = select(func.sum(Earning.amount)).where(
            *self._commission_filters(user_id)
        )
        result = await self.session.execute(stmt)
        return to_money(result.scalar())

    async def get_commission_earnings_by_level(
        self, user_id: int
    ) -> list[dict[str, int | Decimal]]:
        """
        Get commission earnings grouped by level in a single query.

        Args:
            user_id: Beneficiary user ID

        Returns:
            List of {"level", "amount", "transactions"} ordered by level
        """
        stmt = (
            select(
                Earning.level,
                func.sum(Earning.amount).label("amount"),
                func.count(Earning.id).label("transactions"),
            )
            .where(*self._commission_filters(user_id))
            .group_by(Earning.level)
            .order_by(Earning.level)
        )
        result = await self.session.execute(stmt)
        return [
            {
                "level": row.level,
                "amount": to_money(row.amount),
                "transactions": row.transactions,
            }
            for row in result.all()
        ]
