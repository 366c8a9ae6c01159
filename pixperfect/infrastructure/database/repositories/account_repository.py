"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pixperfect.db.models import Account as AccountModel
from pixperfect.modules.accounts.exceptions import AccountAlreadyExistsError
from pixperfect.modules.accounts.models import Account
from pixperfect.modules.accounts.repository import AccountRepository


class SqlAccountRepository(AccountRepository):
    """Account repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: str) -> Account | None:
        stmt = select(AccountModel).where(AccountModel.id == account_id)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def get_by_username(self, username: str) -> Account | None:
        stmt = select(AccountModel).where(AccountModel.username == username)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def create_account(self, *, username: str, password_hash: str) -> Account:
        model = AccountModel(username=username, password_hash=password_hash)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            # lost a race with a concurrent sign-up for the same name
            await self._session.rollback()
            raise AccountAlreadyExistsError(username) from exc
        await self._session.refresh(model)
        account = self._to_domain(model)
        assert account is not None
        return account

    @staticmethod
    def _to_domain(model: AccountModel | None) -> Account | None:
        if model is None:
            return None
        return Account(
            id=str(model.id),
            username=model.username,
            password_hash=model.password_hash,
            created_at=model.created_at,
        )
