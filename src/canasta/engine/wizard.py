"""
Shot entry wizard.

Recording a shot is a strict four-step sequence::

    IDLE --type--> TYPE_CHOSEN --result--> RESULT_CHOSEN --player--> PLAYER_CHOSEN
                                                                     |
    IDLE <--------------------- confirm (records) / cancel ----------+

A choice made out of order is ignored, so the only way to reach the
recording call is through all three choices.  ``back()`` undoes the last
choice while the type or result step is showing.

When built with a roster, only players currently on it can be chosen.
"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from ..domain import Shot, ShotResult, ShotType

logger = logging.getLogger(__name__)

RecordShot = Callable[[ShotType, ShotResult, str], Awaitable[Optional[Shot]]]


class WizardStep(str, Enum):
    IDLE = "idle"
    TYPE_CHOSEN = "type_chosen"
    RESULT_CHOSEN = "result_chosen"
    PLAYER_CHOSEN = "player_chosen"


class ShotWizard:
    def __init__(self, record_shot: RecordShot, roster: Optional[Callable[[], Iterable[str]]] = None) -> None:
        self._record_shot = record_shot
        self._roster = roster
        self.step = WizardStep.IDLE
        self.shot_type: Optional[ShotType] = None
        self.result: Optional[ShotResult] = None
        self.player_name: Optional[str] = None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "step": self.step.value,
            "type": self.shot_type.value if self.shot_type else None,
            "result": self.result.value if self.result else None,
            "player_name": self.player_name,
        }

    def choose_type(self, shot_type) -> bool:
        if self.step is not WizardStep.IDLE:
            return False
        try:
            self.shot_type = ShotType(shot_type)
        except ValueError:
            return False
        self.step = WizardStep.TYPE_CHOSEN
        return True

    def choose_result(self, result) -> bool:
        if self.step is not WizardStep.TYPE_CHOSEN:
            return False
        try:
            self.result = ShotResult(result)
        except ValueError:
            return False
        self.step = WizardStep.RESULT_CHOSEN
        return True

    def choose_player(self, player_name: Optional[str]) -> bool:
        if self.step is not WizardStep.RESULT_CHOSEN or not player_name or not player_name.strip():
            return False
        if self._roster is not None and player_name not in set(self._roster()):
            return False
        self.player_name = player_name
        self.step = WizardStep.PLAYER_CHOSEN
        return True

    def back(self) -> bool:
        if self.step is WizardStep.TYPE_CHOSEN:
            self.shot_type = None
            self.step = WizardStep.IDLE
            return True
        if self.step is WizardStep.RESULT_CHOSEN:
            self.result = None
            self.step = WizardStep.TYPE_CHOSEN
            return True
        return False

    def cancel(self) -> None:
        self._reset()

    async def confirm(self) -> Optional[Shot]:
        """Record the selected shot and start over.  Ignored before the player step."""
        if self.step is not WizardStep.PLAYER_CHOSEN:
            return None
        shot = await self._record_shot(self.shot_type, self.result, self.player_name)
        if shot is None:
            logger.warning("Shot %s/%s by %s was not recorded", self.shot_type.value, self.result.value, self.player_name)
        self._reset()
        return shot

    def _reset(self) -> None:
        self.step = WizardStep.IDLE
        self.shot_type = None
        self.result = None
        self.player_name = None
