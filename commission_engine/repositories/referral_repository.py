"""
Referral repository.

Data access layer for the precomputed ancestry chains (ReferralAncestor).
"""

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.referral_ancestor import ReferralAncestor
from commission_engine.repositories.base import BaseRepository


class ReferralRepository(BaseRepository[ReferralAncestor]):
    """Referral repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral repository."""
        super().__init__(ReferralAncestor, session)

    async def get_ancestry(self, user_id: int) -> list[ReferralAncestor]:
        """
        Get ancestry chain of a user ordered from direct referrer outward.

        Args:
            user_id: Descendant user ID

        Returns:
            List of ancestry rows ordered by level ascending
        """
        stmt = (
            select(ReferralAncestor)
            .where(ReferralAncestor.user_id == user_id)
            .order_by(ReferralAncestor.level.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_chain(
        self, user_id: int, ancestor_ids: list[int]
    ) -> list[ReferralAncestor]:
        """
        Store the ancestry chain of a newly registered user.

        Args:
            user_id: New user ID
            ancestor_ids: Ancestor IDs, direct referrer first

        Returns:
            Created ancestry rows
        """
        rows = [
            ReferralAncestor(user_id=user_id, ancestor_id=ancestor_id, level=level)
            for level, ancestor_id in enumerate(ancestor_ids, start=1)
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return rows

    async def count_direct_referrals(self, ancestor_id: int) -> int:
        """
        Count users whose direct referrer is ancestor_id.

        Args:
            ancestor_id: Referrer user ID

        Returns:
            Number of level 1 referrals
        """
        return await self.count(ancestor_id=ancestor_id, level=1)

    async def count_team(self, ancestor_id: int) -> int:
        """
        Count users having ancestor_id anywhere in their ancestry chain.

        Args:
            ancestor_id: Referrer user ID

        Returns:
            Team size across all levels
        """
        stmt = select(func.count(distinct(ReferralAncestor.user_id))).where(
            ReferralAncestor.ancestor_id == ancestor_id
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def has_ancestry(self, user_id: int) -> bool:
        """
        Check if user has at least one ancestor.

        Args:
            user_id: User ID

        Returns:
            True if ancestry chain is non-empty
        """
        return await self.exists(user_id=user_id)
