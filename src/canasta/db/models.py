"""
SQLModel models for Canasta.

The record store exposes four collections to the engine (``teams``,
``players``, ``games`` and ``shots``).  The identity gateway keeps its own
three tables (``users``, ``auth_codes`` and ``auth_sessions``).

Shots reference their player by display name only.  There is deliberately
no foreign key from ``shots`` to ``players``: deleting or renaming a player
leaves historical shots untouched.
"""

from typing import Optional
from datetime import datetime, timezone
from sqlalchemy import BigInteger
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserAccount(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    created_at: datetime = Field(default_factory=_utcnow)


class AuthCode(SQLModel, table=True):
    __tablename__ = "auth_codes"

    code: str = Field(primary_key=True)
    user_id: int = Field(foreign_key="users.id")
    expires_at: float  # epoch seconds
    used: bool = False


class AuthSession(SQLModel, table=True):
    __tablename__ = "auth_sessions"

    token: str = Field(primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow)


class Team(SQLModel, table=True):
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow)


class Player(SQLModel, table=True):
    __tablename__ = "players"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    team_id: int = Field(foreign_key="teams.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow)


class Game(SQLModel, table=True):
    __tablename__ = "games"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    date: str  # display string, e.g. "19/10/2026"
    team_id: int = Field(foreign_key="teams.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow)


class Shot(SQLModel, table=True):
    __tablename__ = "shots"

    id: Optional[int] = Field(default=None, primary_key=True)
    type: str  # triple / doble / libre
    result: str  # convertido / fallado
    player_name: str
    game_id: int = Field(foreign_key="games.id", index=True)
    timestamp: int = Field(sa_type=BigInteger)  # epoch milliseconds
    created_at: datetime = Field(default_factory=_utcnow)
