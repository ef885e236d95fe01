"""Shared fixtures: a SQLite database file and a store that can be told to fail."""

import asyncio

import pytest

from canasta.db import SqlRecordStore, StoreError, create_db_engine, init_db


class RecordingStore:
    """
    Wraps a real store, remembers every call and raises ``StoreError`` for
    any ``(operation, table)`` pair listed in ``fail_on``.
    """

    def __init__(self, inner):
        self.inner = inner
        self.calls = []
        self.fail_on = set()

    def calls_to(self, op, table=None):
        return [c for c in self.calls if c[0] == op and (table is None or c[1] == table)]

    async def _call(self, op, table, *args, **kwargs):
        self.calls.append((op, table) + args)
        if (op, table) in self.fail_on:
            raise StoreError(f"{op} on {table} refused")
        return await getattr(self.inner, op)(table, *args, **kwargs)

    async def insert(self, table, values):
        return await self._call("insert", table, values)

    async def select(self, table, filters=None, limit=None, order_by=None, descending=False):
        return await self._call("select", table, filters, limit=limit, order_by=order_by, descending=descending)

    async def update(self, table, row_id, values):
        return await self._call("update", table, row_id, values)

    async def delete(self, table, row_id):
        return await self._call("delete", table, row_id)

    async def select_games_with_shots(self, team_id):
        self.calls.append(("select_games_with_shots", "games", team_id))
        if ("select_games_with_shots", "games") in self.fail_on:
            raise StoreError("games fetch refused")
        return await self.inner.select_games_with_shots(team_id)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "canasta.db"


@pytest.fixture
def db_engine(db_path):
    engine = create_db_engine(f"sqlite:///{db_path}")
    asyncio.run(init_db(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def store(db_engine):
    return SqlRecordStore(db_engine)


@pytest.fixture
def recording_store(store):
    return RecordingStore(store)
