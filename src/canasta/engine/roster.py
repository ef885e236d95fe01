"""
Team and roster management.

Every change is written to the record store first and applied to the
in-memory state only once the store call succeeds.  Store failures are
logged and leave the state exactly as it was.
"""

import logging
from typing import Optional

from ..db.store import RecordStore, StoreError
from ..domain import AppState, Player
from .debounce import Debouncer

logger = logging.getLogger(__name__)


class RosterManager:
    """Owns the team name and the player list of an :class:`AppState`."""

    def __init__(self, state: AppState, store: RecordStore, quiet_period: float = 1.0) -> None:
        self.state = state
        self.store = store
        self._team_saver = Debouncer(quiet_period, self._save_team)

    @property
    def save_pending(self) -> bool:
        return self._team_saver.pending

    def set_team_name(self, name: str) -> None:
        """
        Change the team name and schedule a save after the quiet period.

        Rapid changes coalesce: only the value current when the quiet
        period ends is written.  Nothing is scheduled until the user's data
        has loaded, since an unloaded state cannot tell whether a team
        already exists.  Must be called from a running event loop.
        """
        self.state.team_name = name
        if self.state.user_id is None or not self.state.loaded:
            return
        self._team_saver.schedule()

    async def flush(self) -> None:
        await self._team_saver.flush()

    async def _save_team(self) -> None:
        name = self.state.team_name
        if not name.strip() or self.state.user_id is None:
            return
        try:
            if self.state.team_id is not None:
                await self.store.update("teams", self.state.team_id, {"name": name})
            else:
                row = await self.store.insert("teams", {"name": name, "user_id": self.state.user_id})
                self.state.team_id = row["id"]
                logger.info("Created team %s (%r) for user %s", row["id"], name, self.state.user_id)
        except StoreError as exc:
            logger.error("Error saving team: %s", exc)

    async def add_player(self, name: str) -> Optional[Player]:
        name = name.strip()
        if not name or self.state.team_id is None:
            return None
        try:
            row = await self.store.insert("players", {"name": name, "team_id": self.state.team_id})
        except StoreError as exc:
            logger.error("Error adding player: %s", exc)
            return None
        player = Player.from_row(row)
        self.state.players.append(player)
        return player

    async def rename_player(self, player_id: int, name: str) -> Optional[Player]:
        """
        Rename a player.  Shots already recorded keep the old name and are
        no longer attributed to this player.
        """
        name = name.strip()
        player = self.state.find_player(player_id)
        if not name or player is None:
            return None
        try:
            await self.store.update("players", player_id, {"name": name})
        except StoreError as exc:
            logger.error("Error renaming player: %s", exc)
            return None
        player.name = name
        return player

    async def remove_player(self, player_id: int) -> bool:
        if self.state.find_player(player_id) is None:
            return False
        try:
            await self.store.delete("players", player_id)
        except StoreError as exc:
            logger.error("Error removing player: %s", exc)
            return False
        self.state.players = [p for p in self.state.players if p.id != player_id]
        return True
