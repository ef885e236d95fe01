"""Request bodies and response shaping for the HTTP API."""

from dataclasses import asdict
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..engine import AppController


class NameInput(BaseModel):
    """Body for anything that is just a name: team, player, game."""
    name: str


class ShotTypeInput(BaseModel):
    type: str


class ShotResultInput(BaseModel):
    result: str


class ShotPlayerInput(BaseModel):
    player_name: str


class LoginInput(BaseModel):
    email: str = Field(min_length=1)
    next: str = "/"


def state_out(controller: AppController) -> Dict[str, Any]:
    state = controller.state
    return {
        "user_id": state.user_id,
        "team_id": state.team_id,
        "team_name": state.team_name,
        "save_pending": controller.roster.save_pending,
        "players": [asdict(p) for p in state.players],
        "games": [asdict(g) for g in state.games],
        "active_game_id": state.active_game_id,
        "wizard": controller.wizard.snapshot(),
    }


def wizard_out(controller: AppController, accepted: bool, shot: Optional[Any] = None) -> Dict[str, Any]:
    out = {"accepted": accepted, "wizard": controller.wizard.snapshot()}
    if shot is not None:
        out["shot"] = asdict(shot)
    return out
