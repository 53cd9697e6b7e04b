"""Account domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

LOCAL_PROVIDER = "local"


@dataclass(frozen=True, slots=True)
class Credential:
    """How an account proves its identity.

    Either a local password hash or a link to an external identity provider,
    never both.
    """

    provider: str
    external_id: str | None = None
    password_hash: str | None = None

    @classmethod
    def local(cls, password_hash: str) -> "Credential":
        return cls(provider=LOCAL_PROVIDER, password_hash=password_hash)

    @classmethod
    def external(cls, provider: str, external_id: str) -> "Credential":
        return cls(provider=provider, external_id=external_id)

    @property
    def is_local(self) -> bool:
        return self.provider == LOCAL_PROVIDER


@dataclass
class Account:
    """Domain entity for an account (identity anchor)."""

    email: str
    credential: Credential
    id: UUID = field(default_factory=uuid4)
    handle: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self.email = self.email.strip().lower()

    @property
    def needs_onboarding(self) -> bool:
        return self.handle is None

    def to_public(self) -> "PublicAccount":
        """Strip credential material."""
        return PublicAccount(
            id=self.id,
            email=self.email,
            handle=self.handle,
            provider=self.credential.provider,
        )


@dataclass(frozen=True, slots=True)
class PublicAccount:
    """Read-only view of an account safe to hand to callers."""

    id: UUID
    email: str
    handle: str | None
    provider: str
