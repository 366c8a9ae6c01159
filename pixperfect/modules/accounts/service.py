"""Domain services for account management."""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from pixperfect.core.config import get_settings
from pixperfect.core.crypto import hash_password, verify_password

from .exceptions import AccountAlreadyExistsError, InvalidAccountInputError, InvalidCredentialsError
from .models import Account, AccountCreateInput
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Sign-up and log-in use cases."""

    def __init__(self, repository: AccountRepository, min_password_length: int | None = None) -> None:
        self._repository = repository
        self._min_password_length = (
            min_password_length
            if min_password_length is not None
            else get_settings().security.min_password_length
        )

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        # imported late: the SQL repository imports this package's models
        from pixperfect.infrastructure.database.repositories.account_repository import SqlAccountRepository

        return cls(SqlAccountRepository(session))

    async def get_by_id(self, account_id: str) -> Account | None:
        return await self._repository.get_by_id(account_id)

    def _validate(self, username: str, password: str) -> None:
        if not username or not password:
            raise InvalidAccountInputError("Username and password are required")
        if len(password) < self._min_password_length:
            raise InvalidAccountInputError(
                f"Password must be {self._min_password_length} characters long"
            )

    async def create_account(self, payload: AccountCreateInput) -> Account:
        self._validate(payload.username, payload.password)
        existing = await self._repository.get_by_username(payload.username)
        if existing is not None:
            raise AccountAlreadyExistsError(payload.username)

        # bcrypt is CPU bound; keep it off the event loop
        password_hash = await asyncio.to_thread(hash_password, payload.password)
        account = await self._repository.create_account(
            username=payload.username,
            password_hash=password_hash,
        )
        logger.info("User registered: id=%s username=%s", account.id, account.username)
        return account

    async def authenticate(self, username: str, password: str) -> Account:
        self._validate(username, password)
        account = await self._repository.get_by_username(username)
        if account is None:
            logger.info("Login failed: user not found for username %s", username)
            raise InvalidCredentialsError(username)
        if not await asyncio.to_thread(verify_password, password, account.password_hash):
            logger.info("Login failed: password mismatch for username %s", username)
            raise InvalidCredentialsError(username)
        logger.info("Login successful for username %s", username)
        return account
