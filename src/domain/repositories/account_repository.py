"""Account repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.account import Account


class IAccountRepository(Protocol):
    """Repository interface for Account entities."""

    async def get(self, id: UUID) -> Account | None:
        """Get an account by ID."""
        ...

    async def get_by_email(self, email: str) -> Account | None:
        """Get an account by (lowercased) email."""
        ...

    async def get_by_handle(self, handle: str) -> Account | None:
        """Get the account owning a normalized handle."""
        ...

    async def create(self, account: Account) -> Account:
        """Insert a new account. Unique violations surface as IntegrityError."""
        ...

    async def claim_handle(self, account_id: UUID, handle: str) -> bool:
        """Set the handle only if the account has none yet.

        Returns False when no row was updated. A handle owned by another
        account surfaces as IntegrityError from the unique constraint.
        """
        ...
