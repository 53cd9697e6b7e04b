"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID

from domain.entities.account import Account


@dataclass
class SessionSubject:
    """The account a session token was issued to."""

    account_id: UUID
    email: str
    handle: Optional[str] = None


@dataclass
class ExternalIdentity:
    """Identity asserted by an external provider's token."""

    provider: str
    external_id: str
    email: str
    display_name: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[SessionSubject]:
        """
        Validate a session token issued by this service.

        Args:
            token: The bearer token to validate

        Returns:
            SessionSubject if valid, None if invalid
        """
        ...

    async def validate_external_token(self, token: str) -> Optional[ExternalIdentity]:
        """
        Validate an identity token issued by the external provider.

        Args:
            token: The provider's token

        Returns:
            ExternalIdentity if valid, None if invalid
        """
        ...

    def create_token(self, account: Account) -> str:
        """
        Create a session token for an account.

        Args:
            account: The account to create a token for

        Returns:
            The generated token string
        """
        ...
