"""SQLAlchemy Unit of Work implementation."""

from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_account_repo import SQLAlchemyAccountRepository
from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository


class SQLAlchemyUnitOfWork:
    """One transaction over the account and profile tables.

    Anything not committed by the time the block exits is rolled back, so a
    service that raises halfway through a handle claim leaves no partial rows.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._accounts: SQLAlchemyAccountRepository | None = None
        self._profiles: SQLAlchemyProfileRepository | None = None

    @property
    def accounts(self) -> SQLAlchemyAccountRepository:
        if self._accounts is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._accounts

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        if self._profiles is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._profiles

    async def commit(self) -> None:
        if self._session is not None:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        session = self._session_factory()
        self._session = session
        # Repositories share the session so they see each other's flushes
        self._accounts = SQLAlchemyAccountRepository(session)
        self._profiles = SQLAlchemyProfileRepository(session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        session = self._session
        if session is None:
            return
        try:
            if session.in_transaction():
                await session.rollback()
        finally:
            await session.close()
            self._session = None
            self._accounts = None
            self._profiles = None
