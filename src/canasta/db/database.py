"""Engine construction and schema creation."""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import SQLModel

from . import models  # noqa: F401  (registers the tables on SQLModel.metadata)

SQLITE_ASYNC_DRIVER = "sqlite+aiosqlite"


def async_url(url: str) -> str:
    """Point a plain ``sqlite://`` URL at the aiosqlite driver."""
    if url.startswith("sqlite://"):
        return SQLITE_ASYNC_DRIVER + url[len("sqlite"):]
    return url


def create_db_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Build the async engine for ``url``.

    An in-memory SQLite database lives as long as its one connection, so it
    gets a static pool.  File databases open a connection per session,
    which keeps connections from being shared across event loops.
    """
    url = async_url(url)
    if url.startswith(SQLITE_ASYNC_DRIVER):
        if url in (SQLITE_ASYNC_DRIVER + "://", SQLITE_ASYNC_DRIVER + ":///:memory:"):
            return create_async_engine(url, echo=echo, poolclass=StaticPool)
        return create_async_engine(url, echo=echo, poolclass=NullPool)
    return create_async_engine(url, echo=echo)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
