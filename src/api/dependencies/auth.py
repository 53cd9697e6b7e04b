"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.v1.dependencies import get_identity_service
from core.exceptions import AccountMissingError, AuthenticationError, ErrorCode
from domain.entities.account import Account
from domain.services.identity_service import IdentityService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import ExternalIdentity

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton auth provider
_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


def _require_credentials(
    credentials: HTTPAuthorizationCredentials | None,
) -> str:
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )
    return credentials.credentials


async def get_current_account(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
    identity: IdentityService = Depends(get_identity_service),
) -> Account:
    """
    Dependency to get the account behind a session token.

    Raises:
        AuthenticationError: If no token provided, the token is invalid, or
            the account no longer exists
    """
    token = _require_credentials(credentials)
    subject = await auth_provider.validate_token(token)

    if not subject:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    try:
        return await identity.get_account(subject.account_id)
    except AccountMissingError:
        raise AuthenticationError(
            message="Account no longer exists",
            error_code=ErrorCode.INVALID_TOKEN,
        ) from None


async def get_external_identity(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> ExternalIdentity:
    """
    Dependency to validate an identity token from the external provider.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    token = _require_credentials(credentials)
    identity = await auth_provider.validate_external_token(token)

    if not identity:
        raise AuthenticationError(
            message="Invalid or expired identity token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return identity


# Type aliases for convenience in route handlers
CurrentAccount = Annotated[Account, Depends(get_current_account)]
VerifiedExternalIdentity = Annotated[ExternalIdentity, Depends(get_external_identity)]
