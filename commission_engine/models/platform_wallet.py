"""
PlatformWallet model.

Platform-owned wallet aggregate, keyed by a well-known wallet identity.
Credited with the part of each plan price not paid out as commission.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base
from commission_engine.models.types import MoneyType


class PlatformWallet(Base):
    """PlatformWallet model."""

    __tablename__ = "platform_wallets"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    wallet_id: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False
    )
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    currency: Mapped[str] = mapped_column(
        String(3), default="INR", nullable=False
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
            f"<PlatformWallet(wallet_id={self.wallet_id!r}, "
            f"balance={self.balance})>"
        )
