"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.config import settings
from domain.documents import edit_from_document
from domain.entities.profile import MAX_OUTFIT_TAGS, ProfileEdit


def _check_inline_size(value: str) -> str:
    # Inline data: URIs are stored as-is, so they are capped
    if value.startswith("data:") and len(value.encode("utf-8")) > settings.avatar_max_bytes:
        raise ValueError(f"inline image exceeds {settings.avatar_max_bytes} bytes")
    return value


class LinkItemIn(BaseModel):
    """A link as sent by the editor."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    title: str = Field(..., max_length=200)
    url: str = Field(..., max_length=2048)
    icon: str | None = Field(None, max_length=64)


class StoreItemIn(BaseModel):
    """A store item as sent by the editor."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    title: str = Field(..., max_length=200)
    price: str = Field("", max_length=50)
    image: str = ""
    url: str | None = Field(None, max_length=2048)

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: str) -> str:
        return _check_inline_size(v)


class OutfitTagIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    title: str = Field(..., max_length=200)
    url: str = Field(..., max_length=2048)
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)


class OutfitIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    image: str = ""
    tags: list[OutfitTagIn] = Field(default_factory=list, max_length=MAX_OUTFIT_TAGS)

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: str) -> str:
        return _check_inline_size(v)


class ProfileEditRequest(BaseModel):
    """Schema for saving a profile.

    The whole editable subset is replaced. Unknown fields, including click
    counters, are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    display_title: str = Field(..., max_length=200)
    bio: str = Field("", max_length=2000)
    avatar_image: str = ""
    theme: str = Field("indigo", max_length=32)
    links: list[LinkItemIn] = Field(default_factory=list)
    store_items: list[StoreItemIn] = Field(default_factory=list)
    social_links: dict[str, str] = Field(default_factory=dict)
    outfits: list[OutfitIn] = Field(default_factory=list)

    @field_validator("avatar_image")
    @classmethod
    def validate_avatar(cls, v: str) -> str:
        return _check_inline_size(v)

    def to_edit(self) -> ProfileEdit:
        return edit_from_document(self.model_dump())


class LinkItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    url: str
    icon: str | None = None
    click_count: int = 0


class StoreItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    price: str
    image: str
    url: str | None = None
    click_count: int = 0


class OutfitTagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    url: str
    x: float
    y: float


class OutfitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    image: str
    tags: list[OutfitTagResponse]


class ProfileResponse(BaseModel):
    """Schema for a Profile (owner view and public view share the shape)."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "handle": "alice",
                "display_title": "@alice",
                "bio": "Welcome to my page!",
                "avatar_image": "",
                "theme": "indigo",
                "links": [
                    {
                        "id": "456e4567-e89b-12d3-a456-426614174000",
                        "title": "Blog",
                        "url": "https://alice.example.com",
                        "icon": None,
                        "click_count": 12,
                    }
                ],
                "store_items": [],
                "social_links": {"github": "https://github.com/alice"},
                "outfits": [],
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    handle: str | None = None
    display_title: str
    bio: str
    avatar_image: str
    theme: str
    links: list[LinkItemResponse]
    store_items: list[StoreItemResponse]
    social_links: dict[str, str]
    outfits: list[OutfitResponse]
    updated_at: datetime

    @classmethod
    def from_entity(cls, entity: Any) -> "ProfileResponse":
        """Build from a Profile or a ProfileProjection."""
        return cls.model_validate(entity)


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse
