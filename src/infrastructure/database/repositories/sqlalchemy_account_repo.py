"""SQLAlchemy implementation of Account repository."""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.account import Account, Credential
from infrastructure.database.models import AccountModel


class SQLAlchemyAccountRepository:
    """SQLAlchemy implementation of IAccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Account | None:
        """Get an account by ID."""
        stmt = (
            select(AccountModel)
            .where(AccountModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Account | None:
        """Get an account by email."""
        stmt = select(AccountModel).where(AccountModel.email == email.strip().lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_handle(self, handle: str) -> Account | None:
        """Get the account owning a handle."""
        stmt = select(AccountModel).where(AccountModel.handle == handle)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, account: Account) -> Account:
        """Create a new account."""
        model = self._to_model(account)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def claim_handle(self, account_id: UUID, handle: str) -> bool:
        """Conditionally set the handle; the unique constraint picks the winner."""
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id, AccountModel.handle.is_(None))
            .values(handle=handle)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    def _to_entity(self, model: AccountModel) -> Account:
        """Convert ORM model to domain entity."""
        return Account(
            id=model.id,
            email=model.email,
            handle=model.handle,
            credential=Credential(
                provider=model.provider,
                external_id=model.external_id,
                password_hash=model.password_hash,
            ),
            created_at=model.created_at,
        )

    def _to_model(self, entity: Account) -> AccountModel:
        """Convert domain entity to ORM model."""
        return AccountModel(
            id=entity.id,
            email=entity.email,
            handle=entity.handle,
            provider=entity.credential.provider,
            external_id=entity.credential.external_id,
            password_hash=entity.credential.password_hash,
            created_at=entity.created_at,
        )
