"""
Commission distribution engine.

Entry point of a completed plan purchase: walks the purchaser's ancestry,
pays every eligible ancestor its level commission and credits the rest of
the plan price to the platform wallet, all inside one unit of work.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commission_engine.config.plans import PlanConfig, PlanType
from commission_engine.config.settings import Settings
from commission_engine.models.user import User
from commission_engine.repositories.user_repository import UserRepository
from commission_engine.services.commission.ancestry_resolver import (
    AncestryResolver,
)
from commission_engine.services.commission.ledger_writer import LedgerWriter
from commission_engine.services.commission.platform_accountant import (
    PlatformRemainderAccountant,
)
from commission_engine.services.commission.rate_table import RateTable
from commission_engine.services.unit_of_work import UnitOfWork
from commission_engine.utils.exceptions import (
    INPUT_ERRORS,
    PurchaserNotFoundError,
    is_retryable,
)
from commission_engine.utils.money import ZERO


class SkipReason(StrEnum):
    """Why an ancestor in the chain was not paid."""

    NOT_FOUND = "not_found"
    INACTIVE = "inactive"


@dataclass
class CommissionDetail:
    """One paid ancestor."""

    beneficiary_id: int
    amount: Decimal
    level: int
    percentage: Decimal

    def as_dict(self) -> dict[str, Any]:
        return {
            "beneficiaryId": self.beneficiary_id,
            "amount": self.amount,
            "level": self.level,
            "percentage": self.percentage,
        }


@dataclass
class SkippedAncestor:
    """Ancestor whose share went to the platform instead."""

    ancestor_id: int
    level: int
    reason: SkipReason

    def as_dict(self) -> dict[str, Any]:
        return {
            "ancestorId": self.ancestor_id,
            "level": self.level,
            "reason": self.reason.value,
        }


@dataclass
class DistributionResult:
    """
    Outcome of one distribution.

    On failure nothing was persisted and the amounts are zero. retryable
    tells the caller whether running the whole distribution again may
    succeed; callers must check for an earlier distribution first.
    """

    success: bool
    total_commissions: Decimal = ZERO
    platform_amount: Decimal = ZERO
    details: list[CommissionDetail] = field(default_factory=list)
    skipped: list[SkippedAncestor] = field(default_factory=list)
    error: str | None = None
    retryable: bool = False

    @classmethod
    def failure(cls, error: str, retryable: bool = False) -> "DistributionResult":
        return cls(success=False, error=error, retryable=retryable)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to the external result shape."""
        data: dict[str, Any] = {
            "success": self.success,
            "totalCommissions": self.total_commissions,
            "platformAmount": self.platform_amount,
            "details": [detail.as_dict() for detail in self.details],
            "skipped": [skip.as_dict() for skip in self.skipped],
        }
        if self.error is not None:
            data["error"] = self.error
            data["retryable"] = self.retryable
        return data


class CommissionDistributionEngine:
    """
    Distributes plan purchase commissions over the referral ancestry.

    The engine does not deduplicate: every call is a full, independent
    distribution. Callers retrying a purchase must first check whether it
    was already distributed (see MissingCommissionProcessor).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        rate_table: RateTable,
        platform_wallet_id: str = "platform",
        currency: str = "INR",
    ) -> None:
        """
        Initialize distribution engine.

        Args:
            session_factory: Session maker for units of work
            rate_table: Validated rate table
            platform_wallet_id: Identity of the platform wallet
            currency: Currency of plan prices and wallets
        """
        self.session_factory = session_factory
        self.rate_table = rate_table
        self.platform_wallet_id = platform_wallet_id
        self.currency = currency

    @classmethod
    def from_settings(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
    ) -> "CommissionDistributionEngine":
        """Build engine from application settings."""
        return cls(
            session_factory=session_factory,
            rate_table=RateTable.from_settings(settings),
            platform_wallet_id=settings.platform_wallet_id,
            currency=settings.currency,
        )

    async def distribute_commissions(
        self, purchaser_id: int, plan_type: "PlanType | str"
    ) -> DistributionResult:
        """
        Distribute commissions of a completed plan purchase.

        Never raises for input or store errors; they are reported in the
        result and every write of the attempt is rolled back.

        Args:
            purchaser_id: User who bought the plan
            plan_type: Purchased plan ("basic" or "premium")

        Returns:
            DistributionResult with totals and per-ancestor details
        """
        try:
            # Input checks run before the unit of work opens
            plan = self.rate_table.get_plan(plan_type)
            purchaser = await self._load_purchaser(purchaser_id)

            async with UnitOfWork(self.session_factory) as uow:
                result = await self._distribute(uow, purchaser, plan)
        except INPUT_ERRORS as e:
            logger.warning(
                "Commission distribution rejected",
                extra={
                    "purchaser_id": purchaser_id,
                    "plan_type": str(plan_type),
                    "error": str(e),
                },
            )
            return DistributionResult.failure(str(e))
        except Exception as e:
            retryable = is_retryable(e)
            logger.exception(
                "Commission distribution failed, all writes rolled back",
                extra={
                    "purchaser_id": purchaser_id,
                    "plan_type": str(plan_type),
                    "retryable": retryable,
                },
            )
            return DistributionResult.failure(str(e), retryable=retryable)

        logger.info(
            "Commissions distributed",
            extra={
                "purchaser_id": purchaser_id,
                "plan_type": plan.plan_type.value,
                "total_commissions": str(result.total_commissions),
                "platform_amount": str(result.platform_amount),
                "paid_ancestors": len(result.details),
                "skipped_ancestors": len(result.skipped),
            },
        )
        return result

    async def _load_purchaser(self, purchaser_id: int) -> User:
        """Load purchaser outside of the distribution scope."""
        async with self.session_factory() as session:
            purchaser = await UserRepository(session).get_by_id(purchaser_id)

        if purchaser is None:
            raise PurchaserNotFoundError(f"User not found: {purchaser_id}")
        return purchaser

    async def _distribute(
        self, uow: UnitOfWork, purchaser: User, plan: PlanConfig
    ) -> DistributionResult:
        plan_type = plan.plan_type.value
        ledger = LedgerWriter(uow, self.currency)
        accountant = PlatformRemainderAccountant(
            uow, self.platform_wallet_id, self.currency
        )

        ancestry = await AncestryResolver(uow.referrals).ancestry_of(purchaser.id)
        if not ancestry:
            logger.debug(
                "Purchaser has no ancestors",
                extra={"purchaser_id": purchaser.id},
            )

        result = DistributionResult(success=True)
        total_percentage = Decimal("0")

        for ref in ancestry:
            if ref.level > self.rate_table.max_depth:
                continue

            percentage = self.rate_table.rate_for(plan.plan_type, ref.level)
            if percentage <= 0:
                continue

            ancestor = await uow.users.get_by_id(ref.ancestor_id)
            if ancestor is None or not ancestor.is_active:
                reason = (
                    SkipReason.NOT_FOUND if ancestor is None
                    else SkipReason.INACTIVE
                )
                logger.warning(
                    "Ancestor skipped, share goes to platform",
                    extra={
                        "purchaser_id": purchaser.id,
                        "ancestor_id": ref.ancestor_id,
                        "level": ref.level,
                        "reason": reason.value,
                    },
                )
                result.skipped.append(
                    SkippedAncestor(ref.ancestor_id, ref.level, reason)
                )
                continue

            amount = self.rate_table.commission_amount(plan.price, percentage)
            if amount <= 0:
                continue

            await ledger.record_payout(
                beneficiary=ancestor,
                purchaser=purchaser,
                amount=amount,
                level=ref.level,
                percentage=percentage,
                plan_type=plan_type,
                plan_price=plan.price,
            )

            total_percentage += percentage
            result.total_commissions += amount
            result.details.append(
                CommissionDetail(
                    beneficiary_id=ref.ancestor_id,
                    amount=amount,
                    level=ref.level,
                    percentage=percentage,
                )
            )

        result.platform_amount = await accountant.credit_platform(
            plan_price=plan.price,
            total_percentage_paid_out=total_percentage,
            total_commissions=result.total_commissions,
            purchaser=purchaser,
            plan_type=plan_type,
        )
        return result
