"""Profile domain entities."""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

PROFILE_SCHEMA_VERSION = 2

DEFAULT_TITLE = "My Profile"
DEFAULT_BIO = "Welcome to my page!"

MAX_OUTFIT_TAGS = 3

SOCIAL_PLATFORMS = (
    "instagram",
    "twitter",
    "linkedin",
    "youtube",
    "facebook",
    "tiktok",
    "github",
    "pinterest",
    "email",
)


class Theme(StrEnum):
    """Closed set of page themes."""

    INDIGO = "indigo"
    VERDANT = "verdant"
    PURPLE = "purple"
    ROSE = "rose"
    AMBER = "amber"
    CYAN = "cyan"


DEFAULT_THEME = Theme.INDIGO


def resolve_theme(value: str | None) -> Theme:
    """Map a stored theme label onto the closed set.

    Unknown labels are kept as-is in storage and only resolved here.
    """
    try:
        return Theme((value or "").strip().lower())
    except ValueError:
        return DEFAULT_THEME


class ItemKind(StrEnum):
    """Click-trackable item collections on a profile."""

    LINK = "link"
    STORE = "store"


@dataclass
class LinkItem:
    title: str
    url: str
    id: UUID = field(default_factory=uuid4)
    icon: str | None = None
    click_count: int = 0


@dataclass
class StoreItem:
    title: str
    price: str
    image: str = ""
    url: str | None = None
    id: UUID = field(default_factory=uuid4)
    click_count: int = 0


@dataclass
class OutfitTag:
    """A product hotspot on an outfit photo, positioned in percent."""

    title: str
    url: str
    x: float
    y: float
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        self.x = min(max(float(self.x), 0.0), 100.0)
        self.y = min(max(float(self.y), 0.0), 100.0)


@dataclass
class Outfit:
    image: str = ""
    tags: list[OutfitTag] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)


@dataclass
class ProfileEdit:
    """The caller-editable subset of a profile, replaced as a whole on save."""

    display_title: str = DEFAULT_TITLE
    bio: str = ""
    avatar_image: str = ""
    theme: str = DEFAULT_THEME.value
    links: list[LinkItem] = field(default_factory=list)
    store_items: list[StoreItem] = field(default_factory=list)
    social_links: dict[str, str] = field(default_factory=dict)
    outfits: list[Outfit] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Sparse map: blank platforms are simply absent
        self.social_links = {
            platform: url.strip()
            for platform, url in self.social_links.items()
            if platform in SOCIAL_PLATFORMS and url and url.strip()
        }


@dataclass
class Profile:
    """Domain entity for the public page owned by one account."""

    account_id: UUID
    handle: str | None = None
    display_title: str = DEFAULT_TITLE
    bio: str = ""
    avatar_image: str = ""
    theme: str = DEFAULT_THEME.value
    links: list[LinkItem] = field(default_factory=list)
    store_items: list[StoreItem] = field(default_factory=list)
    social_links: dict[str, str] = field(default_factory=dict)
    outfits: list[Outfit] = field(default_factory=list)
    schema_version: int = PROFILE_SCHEMA_VERSION
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def resolved_theme(self) -> Theme:
        return resolve_theme(self.theme)

    def items(self, kind: ItemKind) -> list[LinkItem] | list[StoreItem]:
        return self.links if kind == ItemKind.LINK else self.store_items

    def editable_fields(self) -> ProfileEdit:
        """Deep copy of the editable subset."""
        return ProfileEdit(
            display_title=self.display_title,
            bio=self.bio,
            avatar_image=self.avatar_image,
            theme=self.theme,
            links=copy.deepcopy(self.links),
            store_items=copy.deepcopy(self.store_items),
            social_links=dict(self.social_links),
            outfits=copy.deepcopy(self.outfits),
        )

    def clone(self) -> "Profile":
        return copy.deepcopy(self)


def starter_store_items() -> list[StoreItem]:
    """Demo shop shown on freshly created pages."""
    return [
        StoreItem(
            title="Floral Summer Dress",
            price="₹1,499",
            image="https://images.unsplash.com/photo-1572804013309-59a88b7e92f1?w=400&h=400&fit=crop",
            url="#",
        ),
        StoreItem(
            title="Designer Handbag",
            price="₹2,999",
            image="https://images.unsplash.com/photo-1584917865442-de89df76afd3?w=400&h=400&fit=crop",
            url="#",
        ),
        StoreItem(
            title="Chic Sunglasses",
            price="₹999",
            image="https://images.unsplash.com/photo-1511499767150-a48a237f0083?w=400&h=400&fit=crop",
            url="#",
        ),
    ]


def starter_profile(account_id: UUID, display_title: str | None = None) -> Profile:
    """Populated page for a brand new account."""
    return Profile(
        account_id=account_id,
        display_title=display_title or DEFAULT_TITLE,
        bio=DEFAULT_BIO,
        store_items=starter_store_items(),
    )


@dataclass(frozen=True, slots=True)
class ProfileProjection:
    """Read-only view of a profile served to anonymous visitors."""

    handle: str
    display_title: str
    bio: str
    avatar_image: str
    theme: Theme
    links: tuple[LinkItem, ...]
    store_items: tuple[StoreItem, ...]
    social_links: dict[str, str]
    outfits: tuple[Outfit, ...]
    updated_at: datetime

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileProjection":
        if profile.handle is None:
            raise ValueError("Profiles without a handle are not publicly visible")
        snapshot = profile.clone()
        return cls(
            handle=snapshot.handle,  # type: ignore[arg-type]
            display_title=snapshot.display_title,
            bio=snapshot.bio,
            avatar_image=snapshot.avatar_image,
            theme=snapshot.resolved_theme,
            links=tuple(snapshot.links),
            store_items=tuple(snapshot.store_items),
            social_links=dict(snapshot.social_links),
            outfits=tuple(snapshot.outfits),
            updated_at=snapshot.updated_at,
        )
