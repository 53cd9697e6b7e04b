"""Short-lived cache for public profile projections."""

from cachetools import TTLCache

from domain.entities.profile import ProfileProjection


class ProjectionCache:
    """TTL cache keyed by normalized handle.

    Entries expire after ``ttl_seconds`` and are dropped eagerly whenever the
    owner saves. A TTL of 0 disables caching entirely.
    """

    def __init__(self, ttl_seconds: int, max_entries: int = 1024) -> None:
        self._enabled = ttl_seconds > 0
        self._entries: TTLCache[str, ProfileProjection] = TTLCache(
            maxsize=max_entries, ttl=max(ttl_seconds, 1)
        )

    def get(self, handle: str) -> ProfileProjection | None:
        if not self._enabled:
            return None
        return self._entries.get(handle)

    def put(self, projection: ProfileProjection) -> None:
        if self._enabled:
            self._entries[projection.handle] = projection

    def invalidate(self, handle: str) -> None:
        self._entries.pop(handle, None)

    def clear(self) -> None:
        self._entries.clear()
