"""Conversion between profile documents and domain entities.

Older documents stored items as plain objects that gained ``_id`` and
``clicks`` fields over time, and used ``title``/``image``/``themeColor`` for
the page fields. Everything is upgraded here, once, when a document is
loaded, so the rest of the code can rely on every item carrying an id.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import NAMESPACE_OID, UUID, uuid4, uuid5

from domain.entities.profile import (
    DEFAULT_THEME,
    DEFAULT_TITLE,
    PROFILE_SCHEMA_VERSION,
    LinkItem,
    Outfit,
    OutfitTag,
    Profile,
    ProfileEdit,
    StoreItem,
)


def _coerce_id(raw: Any) -> UUID:
    """Keep UUIDs, map legacy object ids deterministically, mint the rest."""
    if isinstance(raw, UUID):
        return raw
    if raw:
        try:
            return UUID(str(raw))
        except ValueError:
            return uuid5(NAMESPACE_OID, str(raw))
    return uuid4()


def _first(doc: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in doc and doc[key] is not None:
            return doc[key]
    return default


def _link_from(doc: Mapping[str, Any]) -> LinkItem:
    return LinkItem(
        id=_coerce_id(_first(doc, "id", "_id")),
        title=str(doc.get("title", "")),
        url=str(doc.get("url", "")),
        icon=doc.get("icon") or None,
        click_count=int(_first(doc, "click_count", "clicks", default=0)),
    )


def _store_item_from(doc: Mapping[str, Any]) -> StoreItem:
    return StoreItem(
        id=_coerce_id(_first(doc, "id", "_id")),
        title=str(doc.get("title", "")),
        price=str(doc.get("price", "")),
        image=str(doc.get("image") or ""),
        url=doc.get("url") or None,
        click_count=int(_first(doc, "click_count", "clicks", default=0)),
    )


def _outfit_from(doc: Mapping[str, Any]) -> Outfit:
    return Outfit(
        id=_coerce_id(_first(doc, "id", "_id")),
        image=str(doc.get("image") or ""),
        tags=[
            OutfitTag(
                id=_coerce_id(_first(tag, "id", "_id")),
                title=str(tag.get("title", "")),
                url=str(tag.get("url", "")),
                x=float(tag.get("x", 50)),
                y=float(tag.get("y", 50)),
            )
            # Older documents called the hotspots "items"
            for tag in _first(doc, "tags", "items", default=[])
        ],
    )


def outfits_from_json(data: Any) -> list[Outfit]:
    return [_outfit_from(item) for item in data or []]


def outfits_to_json(outfits: list[Outfit]) -> list[dict[str, Any]]:
    return [
        {
            "id": str(outfit.id),
            "image": outfit.image,
            "tags": [
                {"id": str(tag.id), "title": tag.title, "url": tag.url, "x": tag.x, "y": tag.y}
                for tag in outfit.tags
            ],
        }
        for outfit in outfits
    ]


def profile_from_document(doc: Mapping[str, Any], account_id: UUID | None = None) -> Profile:
    """Build a Profile from an API payload or a legacy stored document."""
    owner = account_id or _coerce_id(_first(doc, "account_id", "accountId", "_id"))
    profile = Profile(
        account_id=owner,
        handle=_first(doc, "handle", "username"),
        display_title=str(_first(doc, "display_title", "displayTitle", "title", default=DEFAULT_TITLE)),
        bio=str(doc.get("bio") or ""),
        avatar_image=str(_first(doc, "avatar_image", "avatarImage", "image", default="")),
        theme=str(_first(doc, "theme", "themeColor", default=DEFAULT_THEME.value)),
        links=[_link_from(item) for item in doc.get("links") or []],
        store_items=[
            _store_item_from(item)
            for item in _first(doc, "store_items", "storeItems", default=[])
        ],
        social_links=dict(_first(doc, "social_links", "socialLinks", default={})),
        outfits=outfits_from_json(doc.get("outfits")),
        schema_version=PROFILE_SCHEMA_VERSION,
    )
    # Route through ProfileEdit so blank social platforms are dropped
    profile.social_links = ProfileEdit(social_links=profile.social_links).social_links
    for attr in ("created_at", "updated_at"):
        value = doc.get(attr)
        if isinstance(value, str):
            setattr(profile, attr, datetime.fromisoformat(value))
        elif isinstance(value, datetime):
            setattr(profile, attr, value)
    return profile


def edit_to_document(edit: ProfileEdit) -> dict[str, Any]:
    """Serialize the editable subset into the JSON body of a save request.

    Click counters are server-owned and never sent.
    """
    return {
        "display_title": edit.display_title,
        "bio": edit.bio,
        "avatar_image": edit.avatar_image,
        "theme": edit.theme,
        "links": [
            {"id": str(link.id), "title": link.title, "url": link.url, "icon": link.icon}
            for link in edit.links
        ],
        "store_items": [
            {
                "id": str(item.id),
                "title": item.title,
                "price": item.price,
                "image": item.image,
                "url": item.url,
            }
            for item in edit.store_items
        ],
        "social_links": dict(edit.social_links),
        "outfits": outfits_to_json(edit.outfits),
    }


def edit_from_document(doc: Mapping[str, Any]) -> ProfileEdit:
    """Parse a save request body. Items without an id get a fresh one."""
    return profile_from_document(doc, account_id=uuid4()).editable_fields()
