"""
Game session management: creating games, picking the active game and
appending shots to it.
"""

import logging
import time
from datetime import date
from typing import Callable, Dict, Optional

from ..db.store import RecordStore, StoreError
from ..domain import AppState, Game, Shot, ShotResult, ShotType

logger = logging.getLogger(__name__)

# Short calendar date formats, matching what browsers print for these locales.
DATE_FORMATS: Dict[str, Callable[[date], str]] = {
    "es-ES": lambda d: f"{d.day}/{d.month}/{d.year}",
    "en-US": lambda d: f"{d.month}/{d.day}/{d.year}",
    "en-GB": lambda d: f"{d.day:02d}/{d.month:02d}/{d.year}",
}


def format_game_date(day: date, locale: str = "es-ES") -> str:
    formatter = DATE_FORMATS.get(locale)
    if formatter is None:
        raise ValueError(f"Unsupported date locale: {locale}")
    return formatter(day)


def now_millis() -> int:
    return int(time.time() * 1000)


class GameSessionManager:
    def __init__(self, state: AppState, store: RecordStore, date_locale: str = "es-ES") -> None:
        # Fail on a bad locale now rather than on the first game.
        format_game_date(date.today(), date_locale)
        self.state = state
        self.store = store
        self.date_locale = date_locale

    async def create_game(self, name: str, day: Optional[date] = None) -> Optional[Game]:
        """Create a game dated today, put it first in the list and make it active."""
        name = name.strip()
        if not name or self.state.team_id is None:
            return None
        try:
            row = await self.store.insert(
                "games",
                {
                    "name": name,
                    "date": format_game_date(day or date.today(), self.date_locale),
                    "team_id": self.state.team_id,
                },
            )
        except StoreError as exc:
            logger.error("Error creating game: %s", exc)
            return None
        game = Game(id=row["id"], name=row["name"], date=row["date"], team_id=row["team_id"])
        self.state.games.insert(0, game)
        self.state.active_game_id = game.id
        return game

    def select_game(self, game_id: int) -> Optional[Game]:
        game = self.state.find_game(game_id)
        if game is not None:
            self.state.active_game_id = game.id
        return game

    async def record_shot(self, shot_type, result, player_name: Optional[str]) -> Optional[Shot]:
        """
        Persist a shot for the active game and append it there.

        Does nothing unless there is an active game and type, result and
        player are all given and valid.
        """
        game = self.state.active_game
        if game is None or not player_name:
            return None
        try:
            shot_type = ShotType(shot_type)
            result = ShotResult(result)
        except ValueError:
            return None
        try:
            row = await self.store.insert(
                "shots",
                {
                    "type": shot_type.value,
                    "result": result.value,
                    "player_name": player_name,
                    "game_id": game.id,
                    "timestamp": now_millis(),
                },
            )
        except StoreError as exc:
            logger.error("Error saving shot: %s", exc)
            return None
        shot = Shot.from_row(row)
        game.shots.append(shot)
        return shot
