"""
WalletTransaction model.

Append-only wallet ledger. Every wallet balance change is mirrored by exactly
one row here, so a wallet balance always equals the sum of its rows.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base
from commission_engine.models.enums import WalletTransactionStatus
from commission_engine.models.types import MoneyType


class WalletTransaction(Base):
    """
    WalletTransaction entity.

    The owner is either a user wallet or the platform wallet, never both.

    Attributes:
        id: Primary key
        user_id: Owning user (user wallets)
        platform_wallet_id: Owning platform wallet identity
        amount: Signed amount
        transaction_type: commission, deposit, withdrawal, purchase
        reference_id: Commission id or synthetic reference
        status: Transaction status
        description: Human-readable description
        created_at: Creation timestamp
    """

    __tablename__ = "wallet_transactions"
    __table_args__ = (
        CheckConstraint(
            "(user_id IS NULL) <> (platform_wallet_id IS NULL)",
            name="check_wallet_transaction_single_owner",
        ),
        Index("ix_wallet_transactions_user_created", "user_id", "created_at"),
        Index(
            "ix_wallet_transactions_type_status",
            "transaction_type",
            "status",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Plain column: ledger rows outlive deleted users
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
    )
    platform_wallet_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True
    )

    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    transaction_type: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True
    )
    reference_id: Mapped[str | None] = mapped_column(
        String(100), nullable=True, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=WalletTransactionStatus.COMPLETED.value,
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    @property
    def is_platform(self) -> bool:
        """Check if transaction belongs to the platform wallet."""
        return self.platform_wallet_id is not None

    def __repr__(self) -> str:
        """String representation."""
        owner = self.platform_wallet_id or self.user_id
        return (
            f"<WalletTransaction(id={self.id}, owner={owner}, "
            f"type={self.transaction_type}, amount={self.amount})>"
        )
