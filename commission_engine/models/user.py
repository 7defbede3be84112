"""
User model.

Represents a registered platform user. The same table holds purchasers and
their referral ancestors.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base
from commission_engine.models.types import MoneyType


class User(Base):
    """User model - purchasers and commission beneficiaries."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "wallet_balance >= 0", name="check_user_wallet_balance_non_negative"
        ),
        CheckConstraint(
            "total_earnings >= 0",
            name="check_user_total_earnings_non_negative"
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Profile
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True, index=True
    )

    # Direct referrer (level 1 of the ancestry chain)
    referred_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Purchase state
    plan: Mapped[str | None] = mapped_column(
        String(20), nullable=True, index=True
    )
    has_paid: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    # Wallet (denormalized running balance of the wallet transaction ledger)
    wallet_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    total_earnings: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    currency: Mapped[str] = mapped_column(
        String(3), default="INR", nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, name={self.name!r}, "
            f"wallet_balance={self.wallet_balance})>"
        )
