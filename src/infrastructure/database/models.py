"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class AccountModel(Base):
    """Account model. Owns the handle so uniqueness is enforced here."""

    __tablename__ = "accounts"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    handle: Mapped[str | None] = mapped_column(String(64))
    provider: Mapped[str] = mapped_column(String(32), nullable=False)
    external_id: Mapped[str | None] = mapped_column(String(255))
    password_hash: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    profile: Mapped["ProfileModel | None"] = relationship(
        "ProfileModel",
        back_populates="account",
        uselist=False,
        lazy="raise",
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_accounts_email"),
        UniqueConstraint("handle", name="uq_accounts_handle"),
        UniqueConstraint("provider", "external_id", name="uq_accounts_provider_external_id"),
        CheckConstraint(
            "(provider = 'local' AND password_hash IS NOT NULL) "
            "OR (provider <> 'local' AND external_id IS NOT NULL)",
            name="ck_accounts_credential",
        ),
    )


class ProfileModel(Base):
    """Profile page model, one per account."""

    __tablename__ = "profiles"

    account_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    display_title: Mapped[str] = mapped_column(String(200), nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    avatar_image: Mapped[str] = mapped_column(Text, nullable=False, default="")
    theme: Mapped[str] = mapped_column(String(32), nullable=False)
    social_links: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    outfits: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    account: Mapped["AccountModel"] = relationship(
        "AccountModel",
        back_populates="profile",
        lazy="raise",
    )
    links: Mapped[list["LinkItemModel"]] = relationship(
        "LinkItemModel",
        cascade="all, delete-orphan",
        order_by="LinkItemModel.position",
        lazy="raise",
    )
    store_items: Mapped[list["StoreItemModel"]] = relationship(
        "StoreItemModel",
        cascade="all, delete-orphan",
        order_by="StoreItemModel.position",
        lazy="raise",
    )


class LinkItemModel(Base):
    """A link button on a profile."""

    __tablename__ = "profile_links"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    profile_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.account_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    icon: Mapped[str | None] = mapped_column(String(64))
    click_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    __table_args__ = (
        CheckConstraint("click_count >= 0", name="ck_profile_links_click_count"),
    )


class StoreItemModel(Base):
    """A product card in a profile's shop section."""

    __tablename__ = "profile_store_items"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    profile_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.account_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    image: Mapped[str] = mapped_column(Text, nullable=False, default="")
    url: Mapped[str | None] = mapped_column(String(2048))
    click_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    __table_args__ = (
        CheckConstraint("click_count >= 0", name="ck_profile_store_items_click_count"),
    )


class RetiredItemIdModel(Base):
    """Ids of deleted links and store items. They are never handed out again."""

    __tablename__ = "retired_item_ids"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    kind: Mapped[str] = mapped_column(String(16), primary_key=True)
    retired_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
