"""Database models, engine helpers and the record store for Canasta."""

from .models import AuthCode, AuthSession, Game, Player, Shot, Team, UserAccount
from .database import create_db_engine, init_db
from .store import RecordStore, SqlRecordStore, StoreError

__all__ = [
    "AuthCode",
    "AuthSession",
    "Game",
    "Player",
    "Shot",
    "Team",
    "UserAccount",
    "create_db_engine",
    "init_db",
    "RecordStore",
    "SqlRecordStore",
    "StoreError",
]
