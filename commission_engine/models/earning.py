"""
Earning model.

Beneficiary-facing record of money received. Commission is one source;
statistics are computed from these rows.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base
from commission_engine.models.enums import EarningStatus
from commission_engine.models.types import MoneyType


class Earning(Base):
    """Earning entity."""

    __tablename__ = "earnings"
    __table_args__ = (
        Index("ix_earnings_user_created", "user_id", "created_at"),
        Index("ix_earnings_user_source_level", "user_id", "source", "level"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Plain column: audit rows outlive deleted beneficiaries
    user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), default="INR", nullable=False
    )

    # commission, referral, bonus
    source: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    # Purchaser that generated the earning
    referral_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True
    )
    level: Mapped[int | None] = mapped_column(Integer, nullable=True)

    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=EarningStatus.COMPLETED.value,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"Earning(id={self.id}, user_id={self.user_id}, "
            f"source={self.source}, amount={self.amount})"
        )
