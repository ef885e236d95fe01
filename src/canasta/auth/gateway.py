"""
Identity gateway.

The rest of the application only needs three things from identity: who is
signed in for a session token, signing out, and turning an authorization
code from the sign-in callback into a session.  :class:`IdentityGateway`
is that contract.

:class:`SqlIdentityGateway` is a self-contained implementation on the
same database as the record store.  Its :meth:`~SqlIdentityGateway.issue_code`
plays the part of the external provider's sign-in page: it hands out a
single-use code that the callback route then exchanges.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..db.models import AuthCode, AuthSession, UserAccount

logger = logging.getLogger(__name__)


class AuthExchangeError(Exception):
    """The authorization code could not be exchanged for a session."""


@dataclass(frozen=True)
class User:
    id: int
    email: str


class IdentityGateway(Protocol):
    async def get_current_user(self, session_token: Optional[str]) -> Optional[User]: ...

    async def sign_out(self, session_token: Optional[str]) -> None: ...

    async def exchange_code_for_session(self, code: str) -> str: ...


class SqlIdentityGateway:
    def __init__(self, engine: AsyncEngine, code_ttl_seconds: int = 300) -> None:
        self.engine = engine
        self.code_ttl_seconds = code_ttl_seconds

    def _session(self) -> AsyncSession:
        return AsyncSession(self.engine, expire_on_commit=False)

    async def issue_code(self, email: str) -> str:
        """Create the user on first sign-in and return a fresh authorization code."""
        email = email.strip().lower()
        if not email:
            raise ValueError("email must not be empty")
        async with self._session() as session:
            result = await session.exec(select(UserAccount).where(UserAccount.email == email))
            account = result.first()
            if account is None:
                account = UserAccount(email=email)
                session.add(account)
                await session.commit()
                await session.refresh(account)
                logger.info("Registered user %s (%s)", account.id, email)
            code = secrets.token_urlsafe(24)
            session.add(AuthCode(code=code, user_id=account.id, expires_at=time.time() + self.code_ttl_seconds))
            await session.commit()
        return code

    async def exchange_code_for_session(self, code: str) -> str:
        async with self._session() as session:
            auth_code = await session.get(AuthCode, code)
            if auth_code is None:
                raise AuthExchangeError("Invalid authorization code")
            if auth_code.used:
                raise AuthExchangeError("Authorization code already used")
            if auth_code.expires_at < time.time():
                raise AuthExchangeError("Authorization code expired")
            user_id = auth_code.user_id
            auth_code.used = True
            token = secrets.token_urlsafe(32)
            session.add(auth_code)
            session.add(AuthSession(token=token, user_id=user_id))
            await session.commit()
        logger.info("Opened session for user %s", user_id)
        return token

    async def get_current_user(self, session_token: Optional[str]) -> Optional[User]:
        if not session_token:
            return None
        async with self._session() as session:
            auth_session = await session.get(AuthSession, session_token)
            if auth_session is None:
                return None
            account = await session.get(UserAccount, auth_session.user_id)
            if account is None:
                return None
            return User(id=account.id, email=account.email)

    async def sign_out(self, session_token: Optional[str]) -> None:
        if not session_token:
            return
        async with self._session() as session:
            auth_session = await session.get(AuthSession, session_token)
            if auth_session is not None:
                user_id = auth_session.user_id
                await session.delete(auth_session)
                await session.commit()
                logger.info("Closed session for user %s", user_id)
