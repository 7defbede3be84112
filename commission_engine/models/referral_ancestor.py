"""
ReferralAncestor model.

Precomputed ancestry chain of a user: one row per upline referrer with the
referral distance to it. Rows are written once at signup and never updated.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base


class ReferralAncestor(Base):
    """ReferralAncestor model - (user, ancestor, level) triples."""

    __tablename__ = "referral_ancestors"
    __table_args__ = (
        UniqueConstraint("user_id", "level", name="uq_referral_ancestor_user_level"),
        CheckConstraint("level >= 1", name="check_referral_ancestor_level_positive"),
        Index("ix_referral_ancestors_ancestor_level", "ancestor_id", "level"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Descendant whose chain this row belongs to
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Upline referrer. Not a foreign key: the chain is a signup-time
    # snapshot and must survive removal of the ancestor account.
    ancestor_id: Mapped[int] = mapped_column(
        Integer, nullable=False, index=True
    )

    # 1 = direct referrer, increasing with distance
    level: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralAncestor(user_id={self.user_id}, "
            f"ancestor_id={self.ancestor_id}, level={self.level})>"
        )
