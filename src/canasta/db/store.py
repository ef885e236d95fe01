"""
Record store used by the engine.

The engine talks to persistence only through the small keyed-collection
interface of :class:`RecordStore`: insert, filtered select, update by id,
delete by id, and a games-with-shots fetch.  Rows travel as plain
dictionaries.  :class:`SqlRecordStore` implements it on top of SQLModel.

All methods are coroutines on SQLModel's ``AsyncSession``, so a round trip
never holds up the event loop; callers await each one in turn.  Every
failure surfaces as :class:`StoreError`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Type

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from .models import Game, Player, Shot, Team

Row = Dict[str, Any]

TABLES: Dict[str, Type[SQLModel]] = {
    "teams": Team,
    "players": Player,
    "games": Game,
    "shots": Shot,
}


class StoreError(RuntimeError):
    """Raised when a record store operation fails."""


class RecordStore(Protocol):
    async def insert(self, table: str, values: Row) -> Row: ...

    async def select(
        self,
        table: str,
        filters: Optional[Row] = None,
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]: ...

    async def update(self, table: str, row_id: int, values: Row) -> Row: ...

    async def delete(self, table: str, row_id: int) -> None: ...

    async def select_games_with_shots(self, team_id: int) -> List[Row]: ...


def _model_for(table: str) -> Type[SQLModel]:
    try:
        return TABLES[table]
    except KeyError:
        raise StoreError(f"Unknown table: {table}") from None


def _column(model: Type[SQLModel], name: str):
    column = getattr(model, name, None)
    if column is None or name not in model.model_fields:
        raise StoreError(f"Unknown column {model.__tablename__}.{name}")
    return column


class SqlRecordStore:
    """:class:`RecordStore` backed by an async SQLAlchemy engine."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    def _session(self) -> AsyncSession:
        return AsyncSession(self.engine, expire_on_commit=False)

    async def insert(self, table: str, values: Row) -> Row:
        model = _model_for(table)
        try:
            async with self._session() as session:
                row = model(**values)
                session.add(row)
                await session.commit()
                await session.refresh(row)
                return row.model_dump()
        except SQLAlchemyError as exc:
            raise StoreError(f"Insert into {table} failed: {exc}") from exc

    async def select(
        self,
        table: str,
        filters: Optional[Row] = None,
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        model = _model_for(table)
        statement = select(model)
        for name, value in (filters or {}).items():
            statement = statement.where(_column(model, name) == value)
        order_column = _column(model, order_by or "id")
        statement = statement.order_by(order_column.desc() if descending else order_column)
        if limit is not None:
            statement = statement.limit(limit)
        try:
            async with self._session() as session:
                result = await session.exec(statement)
                return [row.model_dump() for row in result.all()]
        except SQLAlchemyError as exc:
            raise StoreError(f"Select from {table} failed: {exc}") from exc

    async def update(self, table: str, row_id: int, values: Row) -> Row:
        model = _model_for(table)
        for name in values:
            _column(model, name)
        try:
            async with self._session() as session:
                row = await session.get(model, row_id)
                if row is None:
                    raise StoreError(f"{table} row {row_id} not found")
                for name, value in values.items():
                    setattr(row, name, value)
                session.add(row)
                await session.commit()
                await session.refresh(row)
                return row.model_dump()
        except SQLAlchemyError as exc:
            raise StoreError(f"Update of {table} row {row_id} failed: {exc}") from exc

    async def delete(self, table: str, row_id: int) -> None:
        model = _model_for(table)
        try:
            async with self._session() as session:
                row = await session.get(model, row_id)
                if row is None:
                    raise StoreError(f"{table} row {row_id} not found")
                await session.delete(row)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Delete of {table} row {row_id} failed: {exc}") from exc

    async def select_games_with_shots(self, team_id: int) -> List[Row]:
        """Games of a team, newest first, each carrying its shots in insertion order."""
        try:
            async with self._session() as session:
                games = await session.exec(
                    select(Game)
                    .where(Game.team_id == team_id)
                    .order_by(Game.created_at.desc(), Game.id.desc())
                )
                rows = [dict(game.model_dump(), shots=[]) for game in games.all()]
                if not rows:
                    return rows
                by_id = {row["id"]: row for row in rows}
                shots = await session.exec(
                    select(Shot).where(Shot.game_id.in_(list(by_id))).order_by(Shot.id)
                )
                for shot in shots.all():
                    by_id[shot.game_id]["shots"].append(shot.model_dump())
                return rows
        except SQLAlchemyError as exc:
            raise StoreError(f"Loading games for team {team_id} failed: {exc}") from exc
