"""
Commission repository.

Data access layer for Commission model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.commission import Commission
from commission_engine.models.enums import CommissionStatus
from commission_engine.repositories.base import BaseRepository
from commission_engine.utils.money import to_money


class CommissionRepository(BaseRepository[Commission]):
    """Commission repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize commission repository."""
        super().__init__(Commission, session)

    async def exists_for_purchaser(self, purchaser_id: int) -> bool:
        """
        Check if any commission was recorded for a purchaser's purchase.

        Args:
            purchaser_id: Purchasing user ID

        Returns:
            True if at least one commission exists
        """
        return await self.exists(from_user_id=purchaser_id)

    async def get_by_purchaser(self, purchaser_id: int) -> list[Commission]:
        """
        Get commissions generated by a purchaser, nearest level first.

        Args:
            purchaser_id: Purchasing user ID

        Returns:
            List of commissions
        """
        stmt = (
            select(Commission)
            .where(Commission.from_user_id == purchaser_id)
            .order_by(Commission.level.asc(), Commission.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_total_amount(self, user_id: int | None = None) -> Decimal:
        """
        Sum of non-cancelled commission amounts.

        Args:
            user_id: Optional beneficiary filter (None = platform-wide)

        Returns:
            Total commission amount
        """
        stmt = select(func.sum(Commission.amount)).where(
            Commission.status != CommissionStatus.CANCELLED.value
        )
        if user_id is not None:
            stmt = stmt.where(Commission.user_id == user_id)

        result = await self.session.execute(stmt)
        return to_money(result.scalar())

    async def get_level_breakdown(
        self, user_id: int | None = None
    ) -> list[dict[str, int | Decimal]]:
        """
        Get commission totals grouped by level in a single query.

        Args:
            user_id: Optional beneficiary filter (None = platform-wide)

        Returns:
            List of {"level", "amount", "count"} ordered by level
        """
        stmt = (
            select(
                Commission.level,
                func.sum(Commission.amount).label("amount"),
                func.count(Commission.id).label("count"),
            )
            .where(Commission.status != CommissionStatus.CANCELLED.value)
            .group_by(Commission.level)
            .order_by(Commission.level)
        )
        if user_id is not None:
            stmt = stmt.where(Commission.user_id == user_id)

        result = await self.session.execute(stmt)
        return [
            {
                "level": row.level,
                "amount": to_money(row.amount),
                "count": row.count,
            }
            for row in result.all()
        ]
