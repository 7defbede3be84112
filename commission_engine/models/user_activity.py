"""
User Activity Model.

Activity feed entries shown to users. Financial events append an entry for
the beneficiary; entries are informational and never part of the ledger.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base


class ActivityType:
    """Activity type constants."""

    SIGNUP = "signup"
    REFERRAL_SIGNUP = "referral_signup"
    PAYMENT_INITIATED = "payment_initiated"
    PAYMENT_COMPLETED = "payment_completed"
    COMMISSION_EARNED = "commission_earned"


class UserActivity(Base):
    """User activity log entry."""

    __tablename__ = "user_activities"
    __table_args__ = (
        Index("ix_user_activities_user_id_created", "user_id", "created_at"),
        Index("ix_user_activities_type_created", "activity_type", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    activity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Additional data as JSON (JSONB on PostgreSQL)
    extra_data: Mapped[dict | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<UserActivity(id={self.id}, user_id={self.user_id}, "
            f"type={self.activity_type}, created={self.created_at})>"
        )
