"""
Commission model.

Audit trail of commissions: one immutable row per (purchase event, ancestor).
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base
from commission_engine.models.enums import CommissionStatus
from commission_engine.models.types import MoneyType, RatePercentType


class Commission(Base):
    """
    Commission entity.

    Attributes:
        id: Primary key
        user_id: Beneficiary (ancestor) receiving the commission
        from_user_id: Purchaser whose plan purchase generated it
        amount: Commission amount
        level: Ancestry level of the beneficiary
        percentage: Percentage of plan price applied
        plan_type: Purchased plan
        plan_amount: Plan price at distribution time
        status: Always "completed" at creation
        created_at: Creation timestamp
        paid_at: Payout timestamp (unused by distribution)
    """

    __tablename__ = "commissions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="check_commission_amount_positive"),
        CheckConstraint("level >= 1", name="check_commission_level_positive"),
        Index("ix_commissions_user_level", "user_id", "level"),
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
    from_user_id: Mapped[int] = mapped_column(
        Integer, nullable=False, index=True
    )

    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    percentage: Mapped[Decimal] = mapped_column(RatePercentType, nullable=False)

    plan_type: Mapped[str] = mapped_column(String(20), nullable=False)
    plan_amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=CommissionStatus.COMPLETED.value,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Commission(id={self.id}, user_id={self.user_id}, "
            f"from_user_id={self.from_user_id}, level={self.level}, "
            f"amount={self.amount})>"
        )
