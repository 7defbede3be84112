"""
Shared fixtures for integration tests.

Every test gets a fresh SQLite database file with the full schema, a
session maker bound to it and a seeder for users and ancestry chains.
"""

from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from commission_engine.config.plans import PlanType
from commission_engine.database import create_engine, create_session_maker
from commission_engine.models import Base, User
from commission_engine.services.commission.distribution_engine import (
    CommissionDistributionEngine,
)
from commission_engine.services.unit_of_work import UnitOfWork
from commission_engine.utils.money import to_money


class LedgerSeeder:
    """Creates users with signup-time ancestry and reads ledger state."""

    def __init__(self, session_maker) -> None:
        self.session_maker = session_maker
        self._counter = 0

    async def create_user(
        self,
        name: str | None = None,
        referrer_id: int | None = None,
        plan: str | None = None,
        has_paid: bool = False,
        is_active: bool = True,
    ) -> int:
        """
        Create user and store its ancestry chain.

        Args:
            name: Display name (generated when omitted)
            referrer_id: Direct referrer
            plan: Purchased plan
            has_paid: Purchase completed flag
            is_active: Account active flag

        Returns:
            New user ID
        """
        self._counter += 1
        async with UnitOfWork(self.session_maker) as uow:
            ancestor_ids: list[int] = []
            if referrer_id is not None:
                upline = await uow.referrals.get_ancestry(referrer_id)
                ancestor_ids = [referrer_id] + [row.ancestor_id for row in upline]

            user = await uow.users.create(
                name=name or f"User {self._counter}",
                email=f"user{self._counter}@example.com",
                referred_by_id=referrer_id,
                plan=plan,
                has_paid=has_paid,
                is_active=is_active,
            )
            if ancestor_ids:
                await uow.referrals.add_chain(user.id, ancestor_ids)
            return user.id

    async def build_chain(
        self, length: int, plan: str = PlanType.BASIC
    ) -> tuple[int, list[int]]:
        """
        Create a straight line of ancestors and a paid purchaser below it.

        Args:
            length: Number of ancestors
            plan: Plan bought by the purchaser

        Returns:
            (purchaser ID, ancestor IDs nearest first)
        """
        referrer_id = None
        created: list[int] = []
        for _ in range(length):
            referrer_id = await self.create_user(referrer_id=referrer_id)
            created.append(referrer_id)

        purchaser_id = await self.create_user(
            name="Purchaser",
            referrer_id=referrer_id,
            plan=plan,
            has_paid=True,
        )
        return purchaser_id, list(reversed(created))

    async def update_user(self, user_id: int, **values: Any) -> None:
        """Change user columns."""
        async with UnitOfWork(self.session_maker) as uow:
            user = await uow.users.get_by_id(user_id)
            for key, value in values.items():
                setattr(user, key, value)

    async def delete_user(self, user_id: int) -> None:
        """Remove user row, leaving ancestry snapshots of others in place."""
        async with UnitOfWork(self.session_maker) as uow:
            user = await uow.users.get_by_id(user_id)
            await uow.session.delete(user)

    async def wallet_balance(self, user_id: int) -> Decimal:
        """Running wallet balance of a user."""
        async with self.session_maker() as session:
            user = await session.get(User, user_id)
            return to_money(user.wallet_balance)

    async def total_earnings(self, user_id: int) -> Decimal:
        """Lifetime earnings of a user."""
        async with self.session_maker() as session:
            user = await session.get(User, user_id)
            return to_money(user.total_earnings)

    async def platform_balance(self, wallet_id: str = "platform") -> Decimal:
        """Platform wallet balance."""
        async with UnitOfWork(self.session_maker) as uow:
            return await uow.platform_wallets.get_balance(wallet_id)

    async def count(self, model, **filters: Any) -> int:
        """Count rows of a model."""
        async with self.session_maker() as session:
            stmt = select(func.count()).select_from(model).filter_by(**filters)
            result = await session.execute(stmt)
            return result.scalar() or 0


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Async engine over a fresh SQLite file with all tables."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    """Session maker bound to the test database."""
    return create_session_maker(db_engine)


@pytest.fixture
def seeder(session_maker) -> LedgerSeeder:
    """Seeder for the test database."""
    return LedgerSeeder(session_maker)


@pytest.fixture
def distribution_engine(session_maker, rate_table) -> CommissionDistributionEngine:
    """Distribution engine with default plans."""
    return CommissionDistributionEngine(
        session_factory=session_maker,
        rate_table=rate_table,
        platform_wallet_id="platform",
        currency="INR",
    )
