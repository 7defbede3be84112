"""
Integration tests for missing commission backfill.
"""

import asyncio
from decimal import Decimal

import pytest

from commission_engine.models import Commission
from commission_engine.services.commission.backfill import (
    MissingCommissionProcessor,
)
from commission_engine.utils.exceptions import (
    CommissionAlreadyDistributedError,
    PurchaseNotEligibleError,
    UserNotFoundError,
)


@pytest.fixture
def processor(session_maker, distribution_engine):
    """Backfill processor over the test database."""
    return MissingCommissionProcessor(session_maker, distribution_engine)


class TestProcessUser:
    """Test single user backfill."""

    @pytest.mark.asyncio
    async def test_distributes_pending_purchase(self, processor, seeder):
        """Paid purchase without commissions is distributed."""
        purchaser_id, (a, _, _) = await seeder.build_chain(3)

        entry = await processor.process_user(purchaser_id)

        assert entry.user_id == purchaser_id
        assert entry.name == "Purchaser"
        assert entry.plan_type == "basic"
        assert entry.result.success is True
        assert entry.result.total_commissions == Decimal("136.00")
        assert await seeder.wallet_balance(a) == Decimal("80.00")
        assert entry.as_dict()["result"]["platformAmount"] == Decimal("664.00")

    @pytest.mark.asyncio
    async def test_second_run_refused(self, processor, seeder):
        """Already distributed purchases are never paid twice."""
        purchaser_id, _ = await seeder.build_chain(3)
        await processor.process_user(purchaser_id)

        with pytest.raises(CommissionAlreadyDistributedError):
            await processor.process_user(purchaser_id)

        assert await seeder.count(Commission) == 3

    @pytest.mark.asyncio
    async def test_distribution_without_commissions_detected(
        self, processor, seeder
    ):
        """A purchase that paid no ancestor still counts as distributed."""
        purchaser_id, ancestors = await seeder.build_chain(1)
        await seeder.update_user(ancestors[0], is_active=False)

        entry = await processor.process_user(purchaser_id)
        assert entry.result.details == []
        assert entry.result.platform_amount == Decimal("800.00")

        with pytest.raises(CommissionAlreadyDistributedError):
            await processor.process_user(purchaser_id)

    @pytest.mark.asyncio
    async def test_unknown_user(self, processor):
        """Unknown user."""
        with pytest.raises(UserNotFoundError):
            await processor.process_user(404)

    @pytest.mark.asyncio
    async def test_unpaid_user(self, processor, seeder):
        """User without a completed purchase."""
        root = await seeder.create_user()
        user_id = await seeder.create_user(referrer_id=root, plan="basic")

        with pytest.raises(PurchaseNotEligibleError):
            await processor.process_user(user_id)

    @pytest.mark.asyncio
    async def test_unknown_plan(self, processor, seeder):
        """Paid user with a plan outside the catalogue."""
        user_id = await seeder.create_user(plan="gold", has_paid=True)

        with pytest.raises(PurchaseNotEligibleError):
            await processor.process_user(user_id)


class TestProcessAll:
    """Test full backfill scan."""

    @pytest.mark.asyncio
    async def test_only_pending_purchases(
        self, processor, seeder, distribution_engine
    ):
        """Skips unpaid, referrer-less and already distributed users."""
        root = await seeder.create_user(name="Root")
        pending = await seeder.create_user(
            name="Pending", referrer_id=root, plan="premium", has_paid=True
        )
        await seeder.create_user(name="Unpaid", referrer_id=root, plan="basic")
        await seeder.create_user(name="Solo", plan="basic", has_paid=True)
        done = await seeder.create_user(
            name="Done", referrer_id=root, plan="basic", has_paid=True
        )
        await distribution_engine.distribute_commissions(done, "basic")

        entries = await processor.process_all()

        assert [entry.user_id for entry in entries] == [pending]
        assert entries[0].result.success is True
        # 15% of 2500 plus 10% of 800 from the earlier distribution
        assert await seeder.wallet_balance(root) == Decimal("455.00")

    @pytest.mark.asyncio
    async def test_nothing_pending(self, processor, seeder):
        """Empty database yields no entries."""
        assert await processor.process_all() == []

    @pytest.mark.asyncio
    async def test_idempotent(self, processor, seeder):
        """Running the scan twice distributes once."""
        await seeder.build_chain(2)

        first = await processor.process_all()
        second = await processor.process_all()

        assert len(first) == 1
        assert second == []
        assert await seeder.count(Commission) == 2


class TestConcurrentRuns:
    """Overlapping runs through one processor pay once."""

    @pytest.mark.asyncio
    async def test_same_user_twice(self, processor, seeder):
        """The second run sees the first distribution."""
        purchaser_id, (a, _, _) = await seeder.build_chain(3)

        outcomes = await asyncio.gather(
            processor.process_user(purchaser_id),
            processor.process_user(purchaser_id),
            return_exceptions=True,
        )

        entries = [o for o in outcomes if not isinstance(o, Exception)]
        errors = [o for o in outcomes if isinstance(o, Exception)]
        assert len(entries) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], CommissionAlreadyDistributedError)
        assert await seeder.count(Commission) == 3
        assert await seeder.wallet_balance(a) == Decimal("80.00")

    @pytest.mark.asyncio
    async def test_scan_and_single_user(self, processor, seeder):
        """A scan and a single user run never both distribute."""
        purchaser_id, (a, _) = await seeder.build_chain(2)

        scanned, single = await asyncio.gather(
            processor.process_all(),
            processor.process_user(purchaser_id),
            return_exceptions=True,
        )

        assert [entry.user_id for entry in scanned] == [purchaser_id]
        assert isinstance(single, CommissionAlreadyDistributedError)
        assert await seeder.count(Commission) == 2
        assert await seeder.wallet_balance(a) == Decimal("80.00")
