"""Identity resolution: credentials in, exactly one account out."""

import asyncio
from collections.abc import Callable
from uuid import UUID

import structlog
from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError

from core.config import settings
from core.exceptions import (
    AccountMissingError,
    AppException,
    DuplicateEmailError,
    HandleReservedError,
    HandleTakenError,
    InvalidCredentialError,
    ProviderConflictError,
    ValidationError,
)
from domain.entities.account import LOCAL_PROVIDER, Account, Credential
from domain.entities.profile import starter_profile
from domain.handles import is_reserved, normalize_handle
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.passwords import (
    MAX_PASSWORD_BYTES,
    BcryptPasswordHasher,
    IPasswordHasher,
    password_too_long,
)

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    """Validate an address and fold it to the form accounts are keyed by."""
    try:
        validated = validate_email((email or "").strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("Invalid email address", {"email": email, "reason": str(exc)}) from exc
    return validated.normalized.lower()


def _integrity_conflict(exc: IntegrityError, email: str, handle: str | None) -> AppException:
    """Translate a unique-constraint violation into the matching domain conflict."""
    orig = str(exc.orig).lower() if exc.orig else str(exc).lower()
    if handle and "handle" in orig:
        return HandleTakenError(handle)
    if "email" in orig:
        return DuplicateEmailError(email)
    raise exc


class IdentityService:
    """Maps credentials to accounts, creating an account on first sight."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        password_hasher: IPasswordHasher | None = None,
        min_password_length: int = settings.password_min_length,
    ) -> None:
        self._uow_factory = uow_factory
        self._hasher = password_hasher or BcryptPasswordHasher()
        self._min_password_length = min_password_length

    async def resolve_external(
        self,
        provider: str,
        external_id: str,
        email: str,
        display_name: str | None = None,
    ) -> Account:
        """Sign in through an external identity provider.

        Never merges into an account that holds a local password; the caller
        must send the user back to their original sign-in method.
        """
        email = normalize_email(email)
        async with self._uow_factory() as uow:
            existing = await uow.accounts.get_by_email(email)
            if existing:
                return self._check_external(existing, provider, external_id)

            account = Account(email=email, credential=Credential.external(provider, external_id))
            try:
                created = await uow.accounts.create(account)
                await uow.profiles.create(starter_profile(created.id, display_name))
                await uow.commit()
            except IntegrityError:
                await uow.rollback()
                # Two first sign-ins raced; the other one created the account
                existing = await uow.accounts.get_by_email(email)
                if existing is None:
                    raise
                return self._check_external(existing, provider, external_id)

            logger.info("account_created", account_id=str(created.id), provider=provider)
            return created

    async def resolve_local(
        self,
        email: str,
        password: str,
        handle: str | None = None,
    ) -> Account:
        """Sign in with email and password, or sign up when a handle is proposed.

        Signup creates the account, claims the handle and seeds the profile in
        one transaction; the handle's unique constraint settles races.
        """
        email = normalize_email(email)
        async with self._uow_factory() as uow:
            existing = await uow.accounts.get_by_email(email)
            if existing:
                if not existing.credential.is_local or not existing.credential.password_hash:
                    raise ProviderConflictError(email, existing.credential.provider)
                matches = await asyncio.to_thread(
                    self._hasher.verify, password, existing.credential.password_hash
                )
                if not matches:
                    raise InvalidCredentialError()
                return existing

            if handle is None:
                raise AccountMissingError(email)

            normalized = normalize_handle(handle)
            if is_reserved(normalized):
                raise HandleReservedError(normalized)
            if len(password or "") < self._min_password_length:
                raise ValidationError(
                    f"Password must be at least {self._min_password_length} characters",
                    {"field": "password"},
                )
            if password_too_long(password):
                raise ValidationError(
                    f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
                    {"field": "password"},
                )

            password_hash = await asyncio.to_thread(self._hasher.hash, password)
            account = Account(
                email=email,
                credential=Credential.local(password_hash),
                handle=normalized,
            )
            try:
                created = await uow.accounts.create(account)
                await uow.profiles.create(starter_profile(created.id, f"@{normalized}"))
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                raise _integrity_conflict(exc, email, normalized) from exc

            logger.info(
                "account_created",
                account_id=str(created.id),
                provider=LOCAL_PROVIDER,
                handle=normalized,
            )
            return created

    async def get_account(self, account_id: UUID) -> Account:
        """Load the account behind a session token."""
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id)
            if not account:
                raise AccountMissingError(str(account_id))
            return account

    @staticmethod
    def _check_external(account: Account, provider: str, external_id: str) -> Account:
        credential = account.credential
        if credential.is_local:
            raise ProviderConflictError(account.email, LOCAL_PROVIDER)
        if credential.provider == provider and credential.external_id != external_id:
            raise ProviderConflictError(account.email, provider)
        return account
