"""Editable, client-held copy of a profile.

A ``DraftSession`` holds the last profile fetched from the server plus local
edits. Nothing leaves the draft until ``save()``, which sends the complete
editable subset in one request and adopts whatever the server returns.

States::

    CLEAN --edit--> DIRTY --save()--> SAVING --ok--> CLEAN
                                         \\--error--> DIRTY

Items are addressed by id everywhere, so reordering or removing stays correct
even for items added locally that the server has never seen.
"""

from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4

from core.exceptions import (
    DraftItemNotFoundError,
    ImportFailedError,
    MockImportError,
    OutfitTagLimitError,
    SaveInProgressError,
    ValidationError,
)
from domain.entities.imports import ImportOutcome, ImportResult
from domain.entities.profile import (
    DEFAULT_BIO,
    DEFAULT_TITLE,
    MAX_OUTFIT_TAGS,
    SOCIAL_PLATFORMS,
    ItemKind,
    LinkItem,
    Outfit,
    OutfitTag,
    Profile,
    ProfileEdit,
    StoreItem,
)

ProfileWriter = Callable[[str, ProfileEdit], Awaitable[Profile]]

EDITABLE_SCALARS = frozenset({"display_title", "bio", "avatar_image", "theme"})
_SERVER_OWNED = frozenset({"id", "click_count"})


class DraftState(StrEnum):
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"


class DraftSession:
    """Local edit buffer for one profile."""

    def __init__(self, profile: Profile, writer: ProfileWriter) -> None:
        if profile.handle is None:
            raise ValueError("Only profiles with a claimed handle can be edited")
        self._writer = writer
        self._baseline = profile.clone()
        self._working = profile.clone()
        self._state = DraftState.CLEAN
        self._revision = 0

    # --- inspection ---

    @property
    def state(self) -> DraftState:
        return self._state

    @property
    def handle(self) -> str:
        return self._working.handle  # type: ignore[return-value]

    @property
    def profile(self) -> Profile:
        """Snapshot of the working copy."""
        return self._working.clone()

    @property
    def baseline(self) -> Profile:
        """Snapshot of the last server copy."""
        return self._baseline.clone()

    @property
    def is_dirty(self) -> bool:
        return self._state != DraftState.CLEAN

    # --- field edits ---

    def apply_field_edit(self, field: str, value: str) -> None:
        if field not in EDITABLE_SCALARS:
            raise ValidationError(f"Field is not editable: {field}", {"field": field})
        setattr(self._working, field, value)
        self._touch()

    def set_social_link(self, platform: str, url: str | None) -> None:
        """Set or clear (empty/None) one social platform."""
        if platform not in SOCIAL_PLATFORMS:
            raise ValidationError(f"Unknown social platform: {platform}", {"platform": platform})
        if url and url.strip():
            self._working.social_links[platform] = url.strip()
        else:
            self._working.social_links.pop(platform, None)
        self._touch()

    # --- links and store items ---

    def add_item(self, kind: ItemKind, position: int | None = None, **fields: Any) -> UUID:
        """Add a link or store item with a fresh local id and return the id."""
        fields = {k: v for k, v in fields.items() if k not in _SERVER_OWNED}
        item: LinkItem | StoreItem
        try:
            item = LinkItem(**fields) if kind == ItemKind.LINK else StoreItem(**fields)
        except TypeError as exc:
            raise ValidationError(str(exc), {"kind": kind.value}) from exc

        items = self._working.items(kind)
        index = len(items) if position is None else self._clamp(position, len(items) + 1)
        items.insert(index, item)  # type: ignore[arg-type]
        self._touch()
        return item.id

    def update_item(self, kind: ItemKind, item_id: UUID, **changes: Any) -> None:
        item = self._find(kind, item_id)
        for name, value in changes.items():
            if name in _SERVER_OWNED or not hasattr(item, name):
                raise ValidationError(f"Field is not editable: {name}", {"field": name})
            setattr(item, name, value)
        self._touch()

    def remove_item(self, kind: ItemKind, item_id: UUID) -> None:
        items = self._working.items(kind)
        items.remove(self._find(kind, item_id))  # type: ignore[arg-type]
        self._touch()

    def reorder(self, kind: ItemKind, item_id: UUID, new_index: int) -> None:
        """Move an item to ``new_index`` (clamped), keeping everyone's ids."""
        items = self._working.items(kind)
        item = self._find(kind, item_id)
        items.remove(item)  # type: ignore[arg-type]
        items.insert(self._clamp(new_index, len(items) + 1), item)  # type: ignore[arg-type]
        self._touch()

    # --- outfits ---

    def add_outfit(self, image: str = "") -> UUID:
        """Newest outfits go first."""
        outfit = Outfit(image=image)
        self._working.outfits.insert(0, outfit)
        self._touch()
        return outfit.id

    def set_outfit_image(self, outfit_id: UUID, image: str) -> None:
        self._find_outfit(outfit_id).image = image
        self._touch()

    def remove_outfit(self, outfit_id: UUID) -> None:
        self._working.outfits.remove(self._find_outfit(outfit_id))
        self._touch()

    def tag_outfit(self, outfit_id: UUID, title: str, url: str, x: float, y: float) -> UUID:
        outfit = self._find_outfit(outfit_id)
        if len(outfit.tags) >= MAX_OUTFIT_TAGS:
            raise OutfitTagLimitError(MAX_OUTFIT_TAGS)
        tag = OutfitTag(title=title, url=url, x=x, y=y)
        outfit.tags.append(tag)
        self._touch()
        return tag.id

    def untag_outfit(self, outfit_id: UUID, tag_id: UUID) -> None:
        outfit = self._find_outfit(outfit_id)
        for tag in outfit.tags:
            if tag.id == tag_id:
                outfit.tags.remove(tag)
                self._touch()
                return
        raise DraftItemNotFoundError("outfit tag", str(tag_id))

    # --- import ---

    def merge_import(
        self,
        result: ImportResult,
        overwrite: bool = False,
        accept_mock: bool = False,
    ) -> list[UUID]:
        """Fold imported data into the draft and return the new link ids.

        Imported links are appended after the existing ones. Title, bio and
        avatar only replace values that are empty or still the platform
        default, unless ``overwrite`` is set. Placeholder (mock) results are
        refused unless ``accept_mock`` confirms the owner saw the warning.
        """
        if result.outcome == ImportOutcome.FAILED:
            raise ImportFailedError(result.reason or "unknown error")
        if result.is_mock and not accept_mock:
            raise MockImportError()

        for field, value in (
            ("display_title", result.title),
            ("bio", result.description),
            ("avatar_image", result.image),
        ):
            if value and (overwrite or self._is_placeholder(field)):
                setattr(self._working, field, value)

        added = []
        for imported in result.links:
            link = LinkItem(title=imported.title, url=imported.url)
            self._working.links.append(link)
            added.append(link.id)

        self._touch()
        return added

    # --- persistence ---

    async def save(self) -> Profile:
        """Send the whole draft and adopt the server's copy.

        Only one save may be in flight. On failure the draft stays DIRTY with
        every edit intact so the caller can retry. Edits made while the save
        was in flight are kept and leave the draft DIRTY.
        """
        if self._state == DraftState.SAVING:
            raise SaveInProgressError()

        revision = self._revision
        self._state = DraftState.SAVING
        try:
            saved = await self._writer(self.handle, self._working.editable_fields())
        except BaseException:
            self._state = DraftState.DIRTY
            raise

        self._baseline = saved.clone()
        if self._revision == revision:
            self._working = saved.clone()
            self._state = DraftState.CLEAN
        else:
            self._refresh_server_fields(saved)
            self._state = DraftState.DIRTY
        return saved

    def discard(self) -> None:
        """Drop local edits and return to the last server copy."""
        if self._state == DraftState.SAVING:
            raise SaveInProgressError()
        self._working = self._baseline.clone()
        self._state = DraftState.CLEAN
        self._revision += 1

    def reload(self, profile: Profile) -> None:
        """Replace the draft with a fresh fetch, abandoning local edits."""
        if self._state == DraftState.SAVING:
            raise SaveInProgressError()
        self._baseline = profile.clone()
        self._working = profile.clone()
        self._state = DraftState.CLEAN
        self._revision += 1

    # --- helpers ---

    def _touch(self) -> None:
        self._revision += 1
        if self._state != DraftState.SAVING:
            self._state = DraftState.DIRTY

    def _find(self, kind: ItemKind, item_id: UUID) -> LinkItem | StoreItem:
        for item in self._working.items(kind):
            if item.id == item_id:
                return item
        raise DraftItemNotFoundError(kind.value, str(item_id))

    def _find_outfit(self, outfit_id: UUID) -> Outfit:
        for outfit in self._working.outfits:
            if outfit.id == outfit_id:
                return outfit
        raise DraftItemNotFoundError("outfit", str(outfit_id))

    def _is_placeholder(self, field: str) -> bool:
        current = getattr(self._working, field)
        if not current:
            return True
        if field == "display_title":
            return current in (DEFAULT_TITLE, f"@{self.handle}")
        if field == "bio":
            return current == DEFAULT_BIO
        return False

    def _refresh_server_fields(self, saved: Profile) -> None:
        counts = {item.id: item.click_count for item in [*saved.links, *saved.store_items]}
        for item in [*self._working.links, *self._working.store_items]:
            item.click_count = counts.get(item.id, item.click_count)

    @staticmethod
    def _clamp(index: int, size: int) -> int:
        return max(0, min(index, size - 1))
