"""
Platform remainder accountant.

Credits the share of a plan price not paid out to ancestors to the
platform-owned wallet.
"""

from decimal import Decimal

from loguru import logger

from commission_engine.models.enums import (
    WalletTransactionStatus,
    WalletTransactionType,
)
from commission_engine.models.user import User
from commission_engine.services.unit_of_work import UnitOfWork
from commission_engine.utils.exceptions import CommissionConfigError
from commission_engine.utils.money import ZERO, floor_money

HUNDRED = Decimal("100")


def purchase_reference(purchaser_id: int) -> str:
    """Synthetic wallet transaction reference of a plan purchase."""
    return f"plan_purchase_{purchaser_id}"


class PlatformRemainderAccountant:
    """Credits platform revenue of a purchase event."""

    def __init__(
        self, uow: UnitOfWork, wallet_id: str, currency: str
    ) -> None:
        """
        Initialize accountant.

        Args:
            uow: Open unit of work
            wallet_id: Well-known platform wallet identity
            currency: Platform wallet currency
        """
        self.uow = uow
        self.wallet_id = wallet_id
        self.currency = currency

    @staticmethod
    def calculate_remainder(
        plan_price: Decimal, total_percentage_paid_out: Decimal
    ) -> Decimal:
        """
        Calculate platform share from the paid out percentage.

        Args:
            plan_price: Plan price
            total_percentage_paid_out: Sum of percentages paid to ancestors

        Returns:
            Remainder, clamped to zero when payouts exceed 100%
        """
        remaining = HUNDRED - total_percentage_paid_out
        if remaining < 0:
            logger.critical(
                "Commission payout exceeds plan price, platform share clamped to zero",
                extra={
                    "plan_price": str(plan_price),
                    "total_percentage": str(total_percentage_paid_out),
                },
            )
            return ZERO
        return floor_money(plan_price * remaining / HUNDRED)

    async def credit_platform(
        self,
        plan_price: Decimal,
        total_percentage_paid_out: Decimal,
        total_commissions: Decimal,
        purchaser: User,
        plan_type: str,
    ) -> Decimal:
        """
        Credit platform wallet with the undistributed share of a purchase.

        The credited amount is plan price minus the commissions actually
        paid, so payouts and platform revenue always add up to the price.
        It equals calculate_remainder() whenever every payout is exact.

        Args:
            plan_price: Plan price
            total_percentage_paid_out: Sum of percentages paid to ancestors
            total_commissions: Sum of amounts paid to ancestors
            purchaser: User who bought the plan
            plan_type: Purchased plan

        Returns:
            Amount credited to the platform wallet

        Raises:
            CommissionConfigError: If payouts exceed the plan price
        """
        if total_percentage_paid_out > HUNDRED or total_commissions > plan_price:
            self.calculate_remainder(plan_price, total_percentage_paid_out)
            raise CommissionConfigError(
                f"Commissions of {plan_type} plan purchase by user "
                f"{purchaser.id} pay out {total_percentage_paid_out}% "
                f"({total_commissions} of {plan_price})"
            )

        amount = plan_price - total_commissions

        await self.uow.platform_wallets.credit(
            self.wallet_id, amount, self.currency
        )
        await self.uow.wallet_transactions.create(
            platform_wallet_id=self.wallet_id,
            amount=amount,
            transaction_type=WalletTransactionType.DEPOSIT.value,
            reference_id=purchase_reference(purchaser.id),
            status=WalletTransactionStatus.COMPLETED.value,
            description=(
                f"Platform revenue from {plan_type} plan purchase "
                f"by {purchaser.name}"
            ),
        )

        logger.debug(
            "Platform remainder credited",
            extra={
                "wallet_id": self.wallet_id,
                "purchaser_id": purchaser.id,
                "amount": str(amount),
            },
        )
        return amount
