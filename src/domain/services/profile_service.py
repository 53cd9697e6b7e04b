"""Profile store: handle claims, owner saves and click counters."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AccountMissingError,
    AuthorizationError,
    HandleAlreadySetError,
    HandleReservedError,
    HandleTakenError,
    InvalidHandleError,
    ProfileNotFoundError,
)
from domain.entities.account import Account
from domain.entities.profile import DEFAULT_TITLE, ItemKind, Profile, ProfileEdit, starter_profile
from domain.handles import (
    HandleAvailability,
    UnavailableReason,
    is_reserved,
    normalize_handle,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.projection_cache import ProjectionCache

logger = structlog.get_logger()


class ProfileService:
    """Service layer for the Profile document and its handle.

    Saves replace the editable fields wholesale; the last save wins. Click
    counters are only ever changed through ``increment_item_click``.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        projection_cache: ProjectionCache | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = projection_cache

    async def find_by_handle(self, handle: str) -> Profile | None:
        """Case-insensitive lookup on the normalized handle."""
        try:
            normalized = normalize_handle(handle)
        except InvalidHandleError:
            return None
        async with self._uow_factory() as uow:
            return await uow.profiles.get_by_handle(normalized)  # type: ignore[no-any-return]

    async def find_by_account(self, account_id: UUID) -> Profile | None:
        async with self._uow_factory() as uow:
            return await uow.profiles.get_by_account(account_id)  # type: ignore[no-any-return]

    async def check_handle(self, candidate: str) -> HandleAvailability:
        """Normalize a candidate and report whether it can be claimed.

        Raises:
            InvalidHandleError: if the candidate fails the format rules.
        """
        handle = normalize_handle(candidate)
        if is_reserved(handle):
            return HandleAvailability(handle, False, UnavailableReason.RESERVED)
        async with self._uow_factory() as uow:
            owner = await uow.accounts.get_by_handle(handle)
        if owner:
            return HandleAvailability(handle, False, UnavailableReason.TAKEN)
        return HandleAvailability(handle, True)

    async def is_handle_available(self, candidate: str) -> bool:
        return (await self.check_handle(candidate)).available

    async def claim_handle(self, account_id: UUID, candidate: str) -> Account:
        """Assign a handle to an account exactly once.

        Re-claiming the same handle for the same account is a no-op. The
        uniqueness decision is left to the database constraint so concurrent
        claims for one handle produce exactly one winner.
        """
        handle = normalize_handle(candidate)
        if is_reserved(handle):
            raise HandleReservedError(handle)

        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id)
            if not account:
                raise AccountMissingError(str(account_id))
            if account.handle == handle:
                return account  # type: ignore[no-any-return]
            if account.handle is not None:
                raise HandleAlreadySetError(account.handle)

            try:
                claimed = await uow.accounts.claim_handle(account_id, handle)
            except IntegrityError as exc:
                await uow.rollback()
                logger.info("handle_claim_lost", handle=handle, account_id=str(account_id))
                raise HandleTakenError(handle) from exc

            if not claimed:
                # Another request from the same account got there first
                await uow.rollback()
                current = await uow.accounts.get(account_id)
                if current and current.handle == handle:
                    return current  # type: ignore[no-any-return]
                raise HandleAlreadySetError(current.handle if current else "")

            profile = await uow.profiles.get_by_account(account_id)
            if profile is None:
                await uow.profiles.create(starter_profile(account_id, f"@{handle}"))
            elif profile.display_title == DEFAULT_TITLE:
                await uow.profiles.set_display_title(account_id, f"@{handle}")

            await uow.commit()

        if self._cache:
            self._cache.invalidate(handle)
        account.handle = handle
        logger.info("handle_claimed", handle=handle, account_id=str(account_id))
        return account  # type: ignore[no-any-return]

    async def replace_editable_fields(
        self,
        handle: str,
        fields: ProfileEdit,
        account_id: UUID | None = None,
    ) -> Profile:
        """Replace the editable subset of a profile and return the stored copy.

        Item ids the profile already owns keep their click counters; anything
        outside ``ProfileEdit`` is never touched. When ``account_id`` is given
        it must own the handle.
        """
        try:
            normalized = normalize_handle(handle)
        except InvalidHandleError:
            raise ProfileNotFoundError(handle) from None

        async with self._uow_factory() as uow:
            owner = await uow.accounts.get_by_handle(normalized)
            if not owner:
                raise ProfileNotFoundError(normalized)
            if account_id is not None and owner.id != account_id:
                raise AuthorizationError("You can only edit your own profile")

            updated = await uow.profiles.replace_editable(owner.id, fields)
            await uow.commit()

        if self._cache:
            self._cache.invalidate(normalized)
        logger.info(
            "profile_saved",
            handle=normalized,
            links=len(updated.links),
            store_items=len(updated.store_items),
        )
        return updated  # type: ignore[no-any-return]

    async def increment_item_click(self, handle: str, item_id: UUID, kind: ItemKind) -> bool:
        """Add exactly one to a single item's counter.

        Returns False when the handle or the item does not exist.
        """
        try:
            normalized = normalize_handle(handle)
        except InvalidHandleError:
            return False
        async with self._uow_factory() as uow:
            matched = await uow.profiles.increment_click(normalized, item_id, kind)
            await uow.commit()
            return matched  # type: ignore[no-any-return]
