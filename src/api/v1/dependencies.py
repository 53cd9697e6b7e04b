"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.analytics_service import AnalyticsService
from domain.services.identity_service import IdentityService
from domain.services.profile_service import ProfileService
from domain.services.projection_cache import ProjectionCache
from domain.services.public_profile_service import PublicProfileService
from infrastructure.auth.passwords import BcryptPasswordHasher
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.importers.linktree import LinktreeImporter


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_projection_cache() -> ProjectionCache:
    """Process-wide cache shared by the public read path and the writers."""
    return ProjectionCache(
        ttl_seconds=settings.profile_cache_ttl_seconds,
        max_entries=settings.profile_cache_max_entries,
    )


@lru_cache
def get_identity_service() -> IdentityService:
    """Get Identity service instance."""
    return IdentityService(get_uow_factory(), password_hasher=BcryptPasswordHasher())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory(), projection_cache=get_projection_cache())


@lru_cache
def get_public_profile_service() -> PublicProfileService:
    """Get public Profile read service instance."""
    return PublicProfileService(get_uow_factory(), projection_cache=get_projection_cache())


@lru_cache
def get_analytics_service() -> AnalyticsService:
    """Get Analytics service instance."""
    return AnalyticsService(get_profile_service())


@lru_cache
def get_importer() -> LinktreeImporter:
    """Get the Linktree importer."""
    return LinktreeImporter()
