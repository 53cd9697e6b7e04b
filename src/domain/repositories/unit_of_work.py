"""Unit of Work protocol."""

from types import TracebackType
from typing import Protocol

from domain.repositories.account_repository import IAccountRepository
from domain.repositories.profile_repository import IProfileRepository


class IUnitOfWork(Protocol):
    """Transaction boundary shared by the account and profile repositories.

    Changes become visible to other requests only after ``commit``; leaving
    the ``async with`` block without committing discards them.
    """

    accounts: IAccountRepository
    profiles: IProfileRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...
