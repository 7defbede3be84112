"""
Integration tests for the unit of work.
"""

from decimal import Decimal

import pytest

from commission_engine.models import User
from commission_engine.services.unit_of_work import UnitOfWork


class TestUnitOfWork:
    """Commit, rollback and savepoint behaviour."""

    @pytest.mark.asyncio
    async def test_commit_on_success(self, session_maker, seeder):
        """Writes are visible after a clean exit."""
        async with UnitOfWork(session_maker) as uow:
            user = await uow.users.create(name="Meera")
            user_id = user.id

        assert await seeder.count(User, id=user_id) == 1

    @pytest.mark.asyncio
    async def test_rollback_on_error(self, session_maker, seeder):
        """Writes are discarded when the block raises."""
        user_id = await seeder.create_user()

        with pytest.raises(RuntimeError):
            async with UnitOfWork(session_maker) as uow:
                await uow.users.credit_wallet(user_id, Decimal("50.00"))
                await uow.users.create(name="Ghost")
                raise RuntimeError("boom")

        assert await seeder.wallet_balance(user_id) == Decimal("0.00")
        assert await seeder.count(User, name="Ghost") == 0

    @pytest.mark.asyncio
    async def test_savepoint_rollback_keeps_outer_writes(
        self, session_maker, seeder
    ):
        """A failed savepoint undoes only its own writes."""
        user_id = await seeder.create_user()

        async with UnitOfWork(session_maker) as uow:
            await uow.users.credit_wallet(user_id, Decimal("25.00"))
            with pytest.raises(RuntimeError):
                async with uow.savepoint():
                    await uow.users.create(name="Nested")
                    raise RuntimeError("nested failure")

        assert await seeder.wallet_balance(user_id) == Decimal("25.00")
        assert await seeder.count(User, name="Nested") == 0

    @pytest.mark.asyncio
    async def test_session_closed_after_exit(self, session_maker):
        """Repositories cannot be used outside the scope."""
        uow = UnitOfWork(session_maker)
        async with uow:
            pass

        with pytest.raises(RuntimeError, match="not open"):
            uow.session
