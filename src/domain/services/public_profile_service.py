"""Public read path for anonymous visitors."""

from collections.abc import Callable

from core.exceptions import InvalidHandleError
from domain.entities.profile import ProfileProjection
from domain.handles import is_reserved, normalize_handle
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.projection_cache import ProjectionCache


class PublicProfileService:
    """Resolves handles to read-only projections.

    An unknown handle is an expected outcome and comes back as ``None``.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        projection_cache: ProjectionCache | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = projection_cache

    async def render_profile(self, handle: str) -> ProfileProjection | None:
        try:
            normalized = normalize_handle(handle)
        except InvalidHandleError:
            return None

        if self._cache:
            cached = self._cache.get(normalized)
            if cached is not None:
                return cached

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_handle(normalized)
        if profile is None:
            return None

        projection = ProfileProjection.from_profile(profile)
        if self._cache:
            self._cache.put(projection)
        return projection

    async def is_claimable(self, handle: str) -> bool:
        """Whether a visitor landing on a missing page could claim this handle."""
        try:
            normalized = normalize_handle(handle)
        except InvalidHandleError:
            return False
        if is_reserved(normalized):
            return False
        async with self._uow_factory() as uow:
            return await uow.accounts.get_by_handle(normalized) is None
