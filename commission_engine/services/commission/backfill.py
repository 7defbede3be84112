"""
Missing commission backfill.

Finds paid purchases that were never distributed and distributes them.
This is the caller-side deduplication the distribution engine relies on.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commission_engine.config.plans import PlanType
from commission_engine.services.commission.distribution_engine import (
    CommissionDistributionEngine,
    DistributionResult,
)
from commission_engine.services.commission.platform_accountant import (
    purchase_reference,
)
from commission_engine.services.unit_of_work import UnitOfWork
from commission_engine.utils.exceptions import (
    CommissionAlreadyDistributedError,
    PurchaseNotEligibleError,
    UserNotFoundError,
)


@dataclass
class BackfillEntry:
    """Distribution performed for one user."""

    user_id: int
    name: str
    plan_type: str
    result: DistributionResult

    def as_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "name": self.name,
            "planType": self.plan_type,
            "result": self.result.as_dict(),
        }


async def is_already_distributed(uow: UnitOfWork, purchaser_id: int) -> bool:
    """
    Check if a purchase was distributed before.

    Every distribution writes the platform revenue transaction, so its
    reference is checked besides commission records; a purchase whose
    ancestors were all skipped has no commissions but is still done.
    """
    if await uow.commissions.exists_for_purchaser(purchaser_id):
        return True
    return await uow.wallet_transactions.exists(
        reference_id=purchase_reference(purchaser_id)
    )


class MissingCommissionProcessor:
    """
    Distributes commissions of paid purchases that have none.

    The already-distributed check and the distribution run in separate
    transactions, so runs through one processor are serialised by a lock.
    Separate processes running the backfill at the same time are not
    coordinated and may pay a purchase twice.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: CommissionDistributionEngine,
    ) -> None:
        """
        Initialize processor.

        Args:
            session_factory: Session maker for lookups
            engine: Distribution engine used for the backfill
        """
        self.session_factory = session_factory
        self.engine = engine
        self._lock = asyncio.Lock()

    async def process_user(self, user_id: int) -> BackfillEntry:
        """
        Distribute commissions of a single user's purchase.

        Args:
            user_id: Purchasing user ID

        Returns:
            BackfillEntry with the distribution result

        Raises:
            UserNotFoundError: If user does not exist
            PurchaseNotEligibleError: If user has not paid for a valid plan
            CommissionAlreadyDistributedError: If already distributed
        """
        async with self._lock:
            return await self._process_user(user_id)

    async def _process_user(self, user_id: int) -> BackfillEntry:
        async with UnitOfWork(self.session_factory) as uow:
            user = await uow.users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(f"User not found: {user_id}")

            if not user.has_paid or user.plan not in list(PlanType):
                raise PurchaseNotEligibleError(
                    f"User {user_id} has not paid or has no valid plan"
                )

            if await is_already_distributed(uow, user_id):
                raise CommissionAlreadyDistributedError(
                    f"Commissions already processed for user {user_id}"
                )

            name, plan = user.name, user.plan

        result = await self.engine.distribute_commissions(user_id, plan)
        return BackfillEntry(user_id, name, plan, result)

    async def process_all(self) -> list[BackfillEntry]:
        """
        Distribute every paid purchase with ancestors and no distribution.

        Returns:
            One entry per distributed user, in user ID order
        """
        async with self._lock:
            return await self._process_all()

    async def _process_all(self) -> list[BackfillEntry]:
        async with UnitOfWork(self.session_factory) as uow:
            paid_users = await uow.users.find_paid_users(list(PlanType))

            pending = []
            for user in paid_users:
                if not await uow.referrals.has_ancestry(user.id):
                    continue
                if await is_already_distributed(uow, user.id):
                    continue
                pending.append((user.id, user.name, user.plan))

        logger.info(
            "Missing commissions found",
            extra={"paid_users": len(paid_users), "pending": len(pending)},
        )

        entries: list[BackfillEntry] = []
        for user_id, name, plan in pending:
            result = await self.engine.distribute_commissions(user_id, plan)
            if not result.success:
                logger.error(
                    "Backfill distribution failed",
                    extra={"user_id": user_id, "error": result.error},
                )
            entries.append(BackfillEntry(user_id, name, plan, result))

        return entries
