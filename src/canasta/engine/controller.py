"""
Core orchestration for one signed-in user.

The controller owns the user's :class:`AppState` and glues together the
roster manager, the game session manager, the shot wizard and the
statistics functions.  State is changed only through those collaborators;
statistics are recomputed from the state on every request.
"""

import logging
from typing import List, Optional

from ..db.store import RecordStore, StoreError
from ..domain import AppState, Game, Player
from ..stats import ALL_GAMES, PlayerStats, TeamStats, player_stats, team_stats
from .roster import RosterManager
from .session import GameSessionManager
from .wizard import ShotWizard

logger = logging.getLogger(__name__)


class AppController:
    """Shot tracking state and operations for a single user."""

    def __init__(
        self,
        store: RecordStore,
        user_id: Optional[int],
        quiet_period: float = 1.0,
        date_locale: str = "es-ES",
    ) -> None:
        self.store = store
        self.state = AppState(user_id=user_id)
        self.roster = RosterManager(self.state, store, quiet_period)
        self.session = GameSessionManager(self.state, store, date_locale)
        self.wizard = ShotWizard(self.session.record_shot, lambda: [p.name for p in self.state.players])

    @property
    def ready(self) -> bool:
        """False until a user is signed in and their data has been loaded."""
        return self.state.user_id is not None and self.state.loaded

    async def load(self) -> None:
        """
        Load the user's team, its players and its games with their shots.

        Without a user nothing is loaded and the controller stays not ready.
        A store failure is logged and the controller stays not ready, so the
        load can be retried.  Once the team row has been read its id is kept
        even if a later fetch fails; a retry never creates a second team.
        """
        user_id = self.state.user_id
        if user_id is None:
            return
        try:
            teams = await self.store.select("teams", {"user_id": user_id}, limit=1)
            if teams:
                team = teams[0]
                self.state.team_id = team["id"]
                self.state.team_name = team["name"]
                players = await self.store.select("players", {"team_id": team["id"]})
                games = await self.store.select_games_with_shots(team["id"])
                self.state.players = [Player.from_row(row) for row in players]
                self.state.games = [Game.from_row(row) for row in games]
                logger.info(
                    "Loaded team %s with %d players and %d games",
                    team["id"], len(self.state.players), len(self.state.games),
                )
        except StoreError as exc:
            logger.error("Error loading team data: %s", exc)
            return
        self.state.loaded = True

    async def close(self) -> None:
        """Write any pending team name change before going away."""
        await self.roster.flush()

    def team_stats(self, scope=ALL_GAMES) -> TeamStats:
        return team_stats(self.state.games, scope)

    def player_stats(self, scope=ALL_GAMES) -> List[PlayerStats]:
        return player_stats(self.state.games, self.state.players, scope)
