"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, selectinload

from domain.documents import outfits_from_json, outfits_to_json
from domain.entities.profile import ItemKind, LinkItem, Profile, ProfileEdit, StoreItem
from infrastructure.database.models import (
    AccountModel,
    LinkItemModel,
    ProfileModel,
    RetiredItemIdModel,
    StoreItemModel,
)

_ITEM_MODELS: dict[ItemKind, type[LinkItemModel] | type[StoreItemModel]] = {
    ItemKind.LINK: LinkItemModel,
    ItemKind.STORE: StoreItemModel,
}


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository.

    Links and store items live in their own tables so click counters can be
    bumped with a single UPDATE, independently of the owner's saves.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_account(self, account_id: UUID) -> Profile | None:
        """Get the profile owned by an account."""
        model = await self._load(ProfileModel.account_id == account_id)
        return self._to_entity(model) if model else None

    async def get_by_handle(self, handle: str) -> Profile | None:
        """Get a profile by handle."""
        model = await self._load(AccountModel.handle == handle)
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Create a profile together with its items."""
        model = ProfileModel(
            account_id=profile.account_id,
            display_title=profile.display_title,
            bio=profile.bio,
            avatar_image=profile.avatar_image,
            theme=profile.theme,
            social_links=dict(profile.social_links),
            outfits=outfits_to_json(profile.outfits),
            schema_version=profile.schema_version,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
            links=[
                self._link_model(profile.account_id, position, link, link.id)
                for position, link in enumerate(profile.links)
            ],
            store_items=[
                self._store_item_model(profile.account_id, position, item, item.id)
                for position, item in enumerate(profile.store_items)
            ],
        )
        self._session.add(model)
        await self._session.flush()
        created = await self.get_by_account(profile.account_id)
        if created is None:
            raise ValueError(f"Profile {profile.account_id} vanished after insert")
        return created

    async def replace_editable(self, account_id: UUID, edit: ProfileEdit) -> Profile:
        """Replace every editable field of a profile.

        Items keep their row (and so their click counter) when the payload
        reuses an id the profile already owns. Unknown ids become new rows;
        ids that belong to another profile or were deleted earlier are
        re-minted. Rows the payload no longer mentions are deleted and their
        ids retired.
        """
        model = await self._load(ProfileModel.account_id == account_id)
        if not model:
            raise ValueError(f"Profile {account_id} not found")

        model.display_title = edit.display_title
        model.bio = edit.bio
        model.avatar_image = edit.avatar_image
        model.theme = edit.theme
        model.social_links = dict(edit.social_links)
        model.outfits = outfits_to_json(edit.outfits)
        model.updated_at = datetime.utcnow()

        await self._sync_items(model, ItemKind.LINK, edit.links)
        await self._sync_items(model, ItemKind.STORE, edit.store_items)

        await self._session.flush()
        updated = await self.get_by_account(account_id)
        if updated is None:
            raise ValueError(f"Profile {account_id} not found")
        return updated

    async def set_display_title(self, account_id: UUID, title: str) -> None:
        """Overwrite only the display title."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.account_id == account_id)
            .values(display_title=title, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def increment_click(self, handle: str, item_id: UUID, kind: ItemKind) -> bool:
        """Add one to a counter in a single statement.

        The increment happens inside the database, so concurrent clicks are
        never lost and owner saves (which never write click_count) cannot
        overwrite it.
        """
        item_model = _ITEM_MODELS[kind]
        owner = select(AccountModel.id).where(AccountModel.handle == handle).scalar_subquery()
        stmt = (
            update(item_model)
            .where(item_model.id == item_id, item_model.profile_id == owner)
            .values(click_count=item_model.click_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    async def _load(self, *criteria: Any) -> ProfileModel | None:
        stmt = (
            select(ProfileModel)
            .join(ProfileModel.account)
            .options(
                contains_eager(ProfileModel.account),
                selectinload(ProfileModel.links),
                selectinload(ProfileModel.store_items),
            )
            .where(*criteria)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def _sync_items(
        self,
        model: ProfileModel,
        kind: ItemKind,
        items: list[LinkItem] | list[StoreItem],
    ) -> None:
        collection: list[Any] = model.links if kind == ItemKind.LINK else model.store_items
        existing = {row.id: row for row in collection}

        foreign_candidates = {item.id for item in items if item.id not in existing}
        taken: set[UUID] = set()
        if foreign_candidates:
            item_model = _ITEM_MODELS[kind]
            result = await self._session.execute(
                select(item_model.id).where(item_model.id.in_(foreign_candidates))
            )
            taken = set(result.scalars())
            retired = await self._session.execute(
                select(RetiredItemIdModel.id).where(
                    RetiredItemIdModel.kind == kind.value,
                    RetiredItemIdModel.id.in_(foreign_candidates),
                )
            )
            taken.update(retired.scalars())

        kept: set[UUID] = set()
        for position, item in enumerate(items):
            row = existing.get(item.id)
            if row is not None and item.id not in kept:
                self._apply_item(row, item)
                row.position = position
            else:
                reusable = item.id not in taken and item.id not in kept and item.id not in existing
                new_id = item.id if reusable else uuid4()
                if kind == ItemKind.LINK:
                    row = self._link_model(model.account_id, position, item, new_id)  # type: ignore[arg-type]
                else:
                    row = self._store_item_model(model.account_id, position, item, new_id)  # type: ignore[arg-type]
                row.click_count = 0
                collection.append(row)
            kept.add(row.id)

        for row in [row for row in collection if row.id not in kept]:
            collection.remove(row)
            self._session.add(RetiredItemIdModel(id=row.id, kind=kind.value))

    @staticmethod
    def _apply_item(row: Any, item: LinkItem | StoreItem) -> None:
        # click_count is never written from owner edits
        row.title = item.title
        row.url = item.url
        if isinstance(item, LinkItem):
            row.icon = item.icon
        else:
            row.price = item.price
            row.image = item.image

    @staticmethod
    def _link_model(profile_id: UUID, position: int, link: LinkItem, id: UUID) -> LinkItemModel:
        return LinkItemModel(
            id=id,
            profile_id=profile_id,
            position=position,
            title=link.title,
            url=link.url,
            icon=link.icon,
            click_count=link.click_count,
        )

    @staticmethod
    def _store_item_model(
        profile_id: UUID, position: int, item: StoreItem, id: UUID
    ) -> StoreItemModel:
        return StoreItemModel(
            id=id,
            profile_id=profile_id,
            position=position,
            title=item.title,
            price=item.price,
            image=item.image,
            url=item.url,
            click_count=item.click_count,
        )

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            account_id=model.account_id,
            handle=model.account.handle,
            display_title=model.display_title,
            bio=model.bio,
            avatar_image=model.avatar_image,
            theme=model.theme,
            links=[
                LinkItem(
                    id=row.id,
                    title=row.title,
                    url=row.url,
                    icon=row.icon,
                    click_count=row.click_count,
                )
                for row in sorted(model.links, key=lambda r: r.position)
            ],
            store_items=[
                StoreItem(
                    id=row.id,
                    title=row.title,
                    price=row.price,
                    image=row.image,
                    url=row.url,
                    click_count=row.click_count,
                )
                for row in sorted(model.store_items, key=lambda r: r.position)
            ],
            social_links=dict(model.social_links or {}),
            outfits=outfits_from_json(model.outfits),
            schema_version=model.schema_version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
