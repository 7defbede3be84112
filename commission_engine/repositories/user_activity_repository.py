"""
User Activity Repository.

Data access layer for user activity tracking.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.user_activity import UserActivity
from commission_engine.repositories.base import BaseRepository


class UserActivityRepository(BaseRepository[UserActivity]):
    """Repository for user activity operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository."""
        super().__init__(UserActivity, session)

    async def log_activity(
        self,
        user_id: int,
        activity_type: str,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> UserActivity:
        """
        Log a user activity.

        Args:
            user_id: User ID
            activity_type: Type of activity (from ActivityType)
            description: Human-readable description
            metadata: Additional JSON data

        Returns:
            Created UserActivity record
        """
        activity = UserActivity(
            user_id=user_id,
            activity_type=activity_type,
            description=description,
            extra_data=metadata,
        )
        self.session.add(activity)
        await self.session.flush()
        return activity

    async def get_user_activities(
        self,
        user_id: int,
        activity_type: str | None = None,
        limit: int = 100,
    ) -> list[UserActivity]:
        """
        Get recent activities of a user.

        Args:
            user_id: User ID
            activity_type: Optional type filter
            limit: Max results

        Returns:
            Activities, newest first
        """
        stmt = select(UserActivity).where(UserActivity.user_id == user_id)
        if activity_type:
            stmt = stmt.where(UserActivity.activity_type == activity_type)
        stmt = stmt.order_by(UserActivity.id.desc()).limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
