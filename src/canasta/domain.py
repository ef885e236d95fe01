"""
In-memory domain model for Canasta.

These dataclasses are what the engine and the statistics functions work
with.  They are built from rows returned by the record store; the SQLModel
table classes in :mod:`canasta.db.models` never leave the store layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ShotType(str, Enum):
    TRIPLE = "triple"
    DOBLE = "doble"
    LIBRE = "libre"


class ShotResult(str, Enum):
    CONVERTIDO = "convertido"
    FALLADO = "fallado"


@dataclass(frozen=True)
class Shot:
    """A single recorded attempt.  ``player_name`` is a display name, not an id."""
    id: int
    type: ShotType
    result: ShotResult
    player_name: str
    game_id: int
    timestamp: int  # milliseconds since the epoch

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Shot":
        return cls(
            id=row["id"],
            type=ShotType(row["type"]),
            result=ShotResult(row["result"]),
            player_name=row["player_name"],
            game_id=row["game_id"],
            timestamp=int(row["timestamp"]),
        )

    @property
    def made(self) -> bool:
        return self.result is ShotResult.CONVERTIDO


@dataclass
class Player:
    id: int
    name: str
    team_id: int

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Player":
        return cls(id=row["id"], name=row["name"], team_id=row["team_id"])


@dataclass
class Game:
    id: int
    name: str
    date: str
    team_id: int
    shots: List[Shot] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Game":
        return cls(
            id=row["id"],
            name=row["name"],
            date=row["date"],
            team_id=row["team_id"],
            shots=[Shot.from_row(s) for s in row.get("shots") or []],
        )


@dataclass
class AppState:
    """
    Everything one signed-in user is looking at.

    Only the roster manager, the game session manager and the controller's
    load step write to it.  ``games`` is newest first.  The active game is
    stored as an id and resolved against ``games``, so the active game and
    its entry in the list are always the same object.
    """
    user_id: Optional[int] = None
    team_id: Optional[int] = None
    team_name: str = ""
    players: List[Player] = field(default_factory=list)
    games: List[Game] = field(default_factory=list)
    active_game_id: Optional[int] = None
    loaded: bool = False

    @property
    def active_game(self) -> Optional[Game]:
        if self.active_game_id is None:
            return None
        return self.find_game(self.active_game_id)

    def find_game(self, game_id: int) -> Optional[Game]:
        for game in self.games:
            if game.id == game_id:
                return game
        return None

    def find_player(self, player_id: int) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None
