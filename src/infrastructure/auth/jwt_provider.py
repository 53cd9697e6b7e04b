"""JWT authentication provider implementation.

Two kinds of token pass through here:

- Session tokens issued by this service after sign-in (HS256, shared
  secret). ``sub`` is the account id.
- Identity tokens from the external sign-in provider, verified with the
  provider's JWKS (ES256). HS256 identity tokens signed with the local secret
  are accepted too, which is what the test-suite uses.

Session token payload structure:
    {
        "sub": "account-uuid",
        "email": "user@example.com",
        "handle": "alice",
        "typ": "session",
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from domain.entities.account import Account
from infrastructure.auth.provider import ExternalIdentity, SessionSubject

logger = logging.getLogger(__name__)

SESSION_TOKEN_TYPE = "session"

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache JWKS keys from the identity provider."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.identity_provider_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
            # Build a kid -> key mapping
            _jwks_cache = {}
            for key_data in jwks_data.get("keys", []):
                kid = key_data.get("kid")
                if kid:
                    _jwks_cache[kid] = key_data
            logger.info("Fetched %d JWKS keys from %s", len(_jwks_cache), jwks_url)
            return _jwks_cache
    except (httpx.HTTPError, ValueError):
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}


class JWTAuthProvider:
    """JWT-based authentication provider.

    Issues and validates session tokens, and validates external identity
    tokens for the sign-in exchange.
    """

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        provider_name: str = settings.identity_provider_name,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._provider_name = provider_name

    async def validate_token(self, token: str) -> Optional[SessionSubject]:
        """
        Validate a session token and extract the account it was issued to.

        Args:
            token: The JWT to validate

        Returns:
            SessionSubject if valid, None if invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except JWTError:
            return None

        if payload.get("typ") != SESSION_TOKEN_TYPE:
            return None

        try:
            account_id = UUID(payload.get("sub", ""))
        except ValueError:
            return None

        email = payload.get("email")
        if not email:
            return None

        return SessionSubject(
            account_id=account_id,
            email=email,
            handle=payload.get("handle"),
        )

    async def validate_external_token(self, token: str) -> Optional[ExternalIdentity]:
        """
        Validate an identity token from the external provider.

        Detects the signing algorithm from the token header:
        - ES256: validates via JWKS public key
        - HS256 (local/test): validates via shared secret

        Args:
            token: The JWT to validate

        Returns:
            ExternalIdentity if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg == "ES256":
                payload = await self._validate_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None or payload.get("typ") == SESSION_TOKEN_TYPE:
            return None

        external_id = payload.get("sub")
        email = payload.get("email")
        if not external_id or not email:
            return None

        # Providers disagree on where the display name lives
        user_metadata = payload.get("user_metadata") or {}
        display_name = (
            user_metadata.get("display_name")
            or user_metadata.get("name")
            or user_metadata.get("full_name")
            or payload.get("name")
        )

        return ExternalIdentity(
            provider=self._provider_name,
            external_id=str(external_id),
            email=email,
            display_name=display_name,
        )

    async def _validate_es256(
        self, token: str, header: dict
    ) -> Optional[dict]:
        """Validate an ES256-signed JWT using JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        jwks_keys = await _get_jwks_keys()
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Unknown kid: the provider may have rotated keys
            global _jwks_cache
            _jwks_cache = None
            jwks_keys = await _get_jwks_keys()
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        ec_key = ECKey(key_data, algorithm="ES256")
        return jwt.decode(
            token,
            ec_key,
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, account: Account) -> str:
        """
        Create a session token for an account.

        Args:
            account: The account to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(account.id),
            "email": account.email,
            "handle": account.handle,
            "typ": SESSION_TOKEN_TYPE,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def create_external_token(
        self,
        external_id: str,
        email: str,
        display_name: Optional[str] = None,
    ) -> str:
        """
        Create an HS256 identity token shaped like the provider's (used for tests).
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": external_id,
            "email": email,
            "aud": "authenticated",
            "exp": expire,
            "user_metadata": {
                "display_name": display_name,
            },
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
