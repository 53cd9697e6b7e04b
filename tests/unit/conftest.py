"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.account import Account, Credential
from domain.entities.profile import LinkItem, Profile, StoreItem


class FakeUnitOfWork:
    """Fake Unit of Work with both repository mocks for unit testing."""

    def __init__(self) -> None:
        self.accounts = AsyncMock()
        self.profiles = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def account_id() -> UUID:
    """A random account ID."""
    return uuid4()


@pytest.fixture
def account(account_id: UUID) -> Account:
    """An onboarded account owning the handle ``alice``."""
    return Account(
        id=account_id,
        email="alice@example.com",
        handle="alice",
        credential=Credential.external("google", "google-sub-1"),
    )


@pytest.fixture
def profile(account_id: UUID) -> Profile:
    """A profile with one link and one store item."""
    return Profile(
        account_id=account_id,
        handle="alice",
        display_title="@alice",
        bio="hello",
        links=[LinkItem(title="Blog", url="https://blog.example.com", click_count=4)],
        store_items=[StoreItem(title="Tee", price="$20", click_count=2)],
        social_links={"github": "https://github.com/alice"},
    )
