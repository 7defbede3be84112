"""
Ledger writer.

Creates the commission, earning and wallet transaction records of one
(ancestor, level) payout and credits the ancestor's wallet. All writes go
through the caller's unit of work and become visible only on its commit.
"""

from decimal import Decimal
from typing import Any

from loguru import logger

from commission_engine.models.commission import Commission
from commission_engine.models.earning import Earning
from commission_engine.models.enums import (
    CommissionStatus,
    EarningSource,
    EarningStatus,
    WalletTransactionStatus,
    WalletTransactionType,
)
from commission_engine.models.user import User
from commission_engine.models.user_activity import ActivityType
from commission_engine.models.wallet_transaction import WalletTransaction
from commission_engine.services.unit_of_work import UnitOfWork
from commission_engine.utils.exceptions import LedgerWriteError


class LedgerWriter:
    """Writes ledger records for commission payouts."""

    def __init__(self, uow: UnitOfWork, currency: str) -> None:
        """
        Initialize ledger writer.

        Args:
            uow: Open unit of work
            currency: Currency of earning records
        """
        self.uow = uow
        self.currency = currency

    async def record_commission(
        self,
        beneficiary_id: int,
        purchaser_id: int,
        amount: Decimal,
        level: int,
        percentage: Decimal,
        plan_type: str,
        plan_price: Decimal,
    ) -> Commission:
        """
        Create commission record (audit trail).

        Args:
            beneficiary_id: Ancestor receiving the commission
            purchaser_id: User whose purchase generated it
            amount: Commission amount
            level: Ancestry level of the beneficiary
            percentage: Applied percentage
            plan_type: Purchased plan
            plan_price: Plan price at distribution time

        Returns:
            Created Commission
        """
        return await self.uow.commissions.create(
            user_id=beneficiary_id,
            from_user_id=purchaser_id,
            amount=amount,
            level=level,
            percentage=percentage,
            plan_type=plan_type,
            plan_amount=plan_price,
            status=CommissionStatus.COMPLETED.value,
        )

    async def record_earning(
        self,
        beneficiary_id: int,
        amount: Decimal,
        purchaser_id: int,
        level: int,
        description: str,
    ) -> Earning:
        """
        Create commission-sourced earning record.

        Args:
            beneficiary_id: Ancestor receiving the commission
            amount: Earned amount
            purchaser_id: User whose purchase generated it
            level: Ancestry level of the beneficiary
            description: Human-readable description

        Returns:
            Created Earning
        """
        return await self.uow.earnings.create(
            user_id=beneficiary_id,
            amount=amount,
            currency=self.currency,
            source=EarningSource.COMMISSION.value,
            referral_id=purchaser_id,
            level=level,
            description=description,
            status=EarningStatus.COMPLETED.value,
        )

    async def record_wallet_transaction(
        self,
        owner_id: int,
        amount: Decimal,
        transaction_type: WalletTransactionType,
        reference_id: str,
        description: str,
    ) -> WalletTransaction:
        """
        Append wallet transaction to a user's ledger.

        Args:
            owner_id: Wallet owner user ID
            amount: Signed amount
            transaction_type: Transaction type
            reference_id: Commission ID or synthetic reference
            description: Human-readable description

        Returns:
            Created WalletTransaction
        """
        return await self.uow.wallet_transactions.create(
            user_id=owner_id,
            amount=amount,
            transaction_type=transaction_type.value,
            reference_id=reference_id,
            status=WalletTransactionStatus.COMPLETED.value,
            description=description,
        )

    async def credit_wallet(
        self,
        owner_id: int,
        amount: Decimal,
        activity_description: str | None = None,
        activity_metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Add amount to wallet balance and lifetime earnings.

        A successful credit also logs one activity entry for the owner.

        Args:
            owner_id: Wallet owner user ID
            amount: Amount to credit
            activity_description: Activity log description
            activity_metadata: Activity log payload

        Raises:
            LedgerWriteError: If the owner row no longer exists
        """
        updated = await self.uow.users.credit_wallet(owner_id, amount)
        if not updated:
            raise LedgerWriteError(
                f"Wallet of user {owner_id} not found while crediting {amount}"
            )

        await self.log_activity(
            owner_id,
            ActivityType.COMMISSION_EARNED,
            activity_description,
            activity_metadata,
        )

    async def log_activity(
        self,
        user_id: int,
        activity_type: str,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Log activity in a savepoint without affecting the enclosing scope.

        Failures are reported to the application log and never raised.
        """
        try:
            async with self.uow.savepoint():
                await self.uow.activities.log_activity(
                    user_id=user_id,
                    activity_type=activity_type,
                    description=description,
                    metadata=metadata,
                )
        except Exception as e:
            # Non-blocking: the financial writes stay in place
            logger.warning(
                "Activity logging failed",
                extra={
                    "user_id": user_id,
                    "activity_type": activity_type,
                    "error": str(e),
                },
            )

    async def record_payout(
        self,
        beneficiary: User,
        purchaser: User,
        amount: Decimal,
        level: int,
        percentage: Decimal,
        plan_type: str,
        plan_price: Decimal,
    ) -> Commission:
        """
        Write all records of one ancestor payout.

        Args:
            beneficiary: Ancestor receiving the commission
            purchaser: User who bought the plan
            amount: Commission amount
            level: Ancestry level of the beneficiary
            percentage: Applied percentage
            plan_type: Purchased plan
            plan_price: Plan price

        Returns:
            Created Commission
        """
        beneficiary_id = beneficiary.id

        commission = await self.record_commission(
            beneficiary_id=beneficiary_id,
            purchaser_id=purchaser.id,
            amount=amount,
            level=level,
            percentage=percentage,
            plan_type=plan_type,
            plan_price=plan_price,
        )

        await self.record_earning(
            beneficiary_id=beneficiary_id,
            amount=amount,
            purchaser_id=purchaser.id,
            level=level,
            description=(
                f"{percentage.normalize():f}% commission from {plan_type} "
                f"plan purchase by {purchaser.name}"
            ),
        )

        await self.record_wallet_transaction(
            owner_id=beneficiary_id,
            amount=amount,
            transaction_type=WalletTransactionType.COMMISSION,
            reference_id=str(commission.id),
            description=(
                f"Level {level} commission for {plan_type} plan purchase "
                f"by {purchaser.name}"
            ),
        )

        await self.credit_wallet(
            beneficiary_id,
            amount,
            activity_description=(
                f"Earned {amount} {self.currency} commission from "
                f"{purchaser.name}'s {plan_type} plan purchase at level {level}"
            ),
            activity_metadata={
                "from_user_id": purchaser.id,
                "commission_id": commission.id,
                "amount": str(amount),
                "level": level,
                "plan_type": plan_type,
            },
        )

        logger.debug(
            "Commission recorded",
            extra={
                "beneficiary_id": beneficiary_id,
                "purchaser_id": purchaser.id,
                "level": level,
                "percentage": str(percentage),
                "amount": str(amount),
            },
        )
        return commission
