"""Roster, game session and shot entry engine for Canasta."""

from .controller import AppController
from .debounce import Debouncer
from .roster import RosterManager
from .session import GameSessionManager, format_game_date
from .wizard import ShotWizard, WizardStep

__all__ = [
    "AppController",
    "Debouncer",
    "RosterManager",
    "GameSessionManager",
    "format_game_date",
    "ShotWizard",
    "WizardStep",
]
