"""
Unit of work.

Groups every write of one business operation into a single database
transaction: all of them become visible on commit, none of them on failure.
"""

from types import TracebackType

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction, async_sessionmaker

from commission_engine.repositories import (
    CommissionRepository,
    EarningRepository,
    PlatformWalletRepository,
    ReferralRepository,
    UserActivityRepository,
    UserRepository,
    WalletTransactionRepository,
)


class UnitOfWork:
    """
    Transactional scope with repositories bound to one session.

    Usage:
        async with UnitOfWork(session_maker) as uow:
            await uow.users.credit_wallet(user_id, amount)
            await uow.wallet_transactions.create(...)
        # committed here; rolled back if the block raised
    """

    users: UserRepository
    referrals: ReferralRepository
    commissions: CommissionRepository
    earnings: EarningRepository
    wallet_transactions: WalletTransactionRepository
    platform_wallets: PlatformWalletRepository
    activities: UserActivityRepository

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Initialize unit of work.

        Args:
            session_factory: Session maker used to open the scope
        """
        self.session_factory = session_factory
        self._session: AsyncSession | None = None

    @property
    def session(self) -> AsyncSession:
        """Session of the open scope."""
        if self._session is None:
            raise RuntimeError("Unit of work is not open")
        return self._session

    async def __aenter__(self) -> "UnitOfWork":
        session = self.session_factory()
        self._session = session

        self.users = UserRepository(session)
        self.referrals = ReferralRepository(session)
        self.commissions = CommissionRepository(session)
        self.earnings = EarningRepository(session)
        self.wallet_transactions = WalletTransactionRepository(session)
        self.platform_wallets = PlatformWalletRepository(session)
        self.activities = UserActivityRepository(session)

        await session.begin()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self.session
        try:
            if exc_type is None:
                await session.commit()
            else:
                await session.rollback()
                logger.debug(
                    "Unit of work rolled back",
                    extra={"error_type": exc_type.__name__},
                )
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
            self._session = None

    def savepoint(self) -> AsyncSessionTransaction:
        """
        Open a nested transaction inside the scope.

        A failure inside the savepoint rolls back only the savepoint's own
        writes; the enclosing scope stays usable.
        """
        return self.session.begin_nested()
