"""Concurrent writers against a file-backed database.

Each unit of work gets its own connection, so these exercise the database's
own arbitration rather than interleaving on a shared connection.
"""

import asyncio
from collections.abc import Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import HandleTakenError
from domain.entities.account import Account, Credential
from domain.entities.profile import ItemKind, LinkItem, Profile, starter_profile
from domain.services.analytics_service import AnalyticsService
from domain.services.identity_service import IdentityService
from domain.services.profile_service import ProfileService
from infrastructure.auth.passwords import BcryptPasswordHasher
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


@pytest.fixture
def file_uow_factory(
    file_session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(file_session_factory)

    return factory


async def _fresh_account(uow_factory: Callable[[], SQLAlchemyUnitOfWork], name: str) -> Account:
    account = Account(
        email=f"{name}@example.com",
        credential=Credential.external("google", f"sub-{name}"),
    )
    async with uow_factory() as uow:
        created = await uow.accounts.create(account)
        await uow.profiles.create(starter_profile(created.id))
        await uow.commit()
    return created


class TestConcurrentClaims:
    @pytest.mark.asyncio
    async def test_exactly_one_account_wins_a_handle(
        self, file_uow_factory: Callable[[], SQLAlchemyUnitOfWork]
    ):
        service = ProfileService(file_uow_factory)
        contenders = [await _fresh_account(file_uow_factory, f"user{n}") for n in range(4)]

        results = await asyncio.gather(
            *(service.claim_handle(account.id, "popular") for account in contenders),
            return_exceptions=True,
        )

        winners = [r for r in results if isinstance(r, Account)]
        losers = [r for r in results if isinstance(r, HandleTakenError)]
        assert len(winners) == 1
        assert len(losers) == 3

        owner = await service.find_by_handle("popular")
        assert owner is not None
        assert owner.account_id == winners[0].id
        assert owner.display_title == "@popular"

    @pytest.mark.asyncio
    async def test_concurrent_signups_for_one_handle(
        self, file_uow_factory: Callable[[], SQLAlchemyUnitOfWork]
    ):
        identity = IdentityService(
            file_uow_factory, password_hasher=BcryptPasswordHasher(rounds=4)
        )

        results = await asyncio.gather(
            *(
                identity.resolve_local(f"signup{n}@example.com", "correct-horse", handle="shared")
                for n in range(3)
            ),
            return_exceptions=True,
        )

        assert sum(isinstance(r, Account) for r in results) == 1
        assert sum(isinstance(r, HandleTakenError) for r in results) == 2


class TestConcurrentClicks:
    @pytest.mark.asyncio
    async def test_no_click_is_lost(self, file_uow_factory: Callable[[], SQLAlchemyUnitOfWork]):
        account = await _fresh_account(file_uow_factory, "clicky")
        service = ProfileService(file_uow_factory)
        await service.claim_handle(account.id, "clicky")
        profile = await service.find_by_handle("clicky")
        assert profile is not None
        edit = profile.editable_fields()
        edit.links = [LinkItem(title="Hot", url="https://hot")]
        saved = await service.replace_editable_fields("clicky", edit)
        link_id = saved.links[0].id

        analytics = AnalyticsService(service)
        await asyncio.gather(*(analytics.record_click("clicky", link_id, "link") for _ in range(12)))

        after = await service.find_by_handle("clicky")
        assert after is not None
        assert after.links[0].click_count == 12

    @pytest.mark.asyncio
    async def test_saves_racing_clicks_keep_counts(
        self, file_uow_factory: Callable[[], SQLAlchemyUnitOfWork]
    ):
        account = await _fresh_account(file_uow_factory, "busy")
        service = ProfileService(file_uow_factory)
        await service.claim_handle(account.id, "busy")
        current = await service.find_by_handle("busy")
        assert current is not None
        item_id = current.store_items[0].id

        async def save(title: str) -> Profile:
            edit = current.editable_fields()
            edit.display_title = title
            return await service.replace_editable_fields("busy", edit)

        clicks = [service.increment_item_click("busy", item_id, ItemKind.STORE) for _ in range(8)]
        saves = [save(f"Title {n}") for n in range(3)]
        await asyncio.gather(*clicks, *saves)

        after = await service.find_by_handle("busy")
        assert after is not None
        assert after.store_items[0].click_count == 8
        assert after.display_title.startswith("Title ")
