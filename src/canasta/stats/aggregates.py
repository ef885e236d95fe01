"""
Shooting statistics.

Everything here is a pure function over a snapshot of games (each with its
shot sequence) and the roster.  Nothing is cached and nothing raises: an
empty or unknown scope simply yields zero-valued statistics.

A *scope* is either :data:`ALL_GAMES` or the id of one game.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from ..domain import Game, Player, Shot, ShotType

ALL_GAMES = "all"

Scope = Union[str, int]

# Breakdowns are always reported in this order.
SHOT_TYPE_ORDER: Tuple[ShotType, ...] = (ShotType.TRIPLE, ShotType.DOBLE, ShotType.LIBRE)

POINTS_FOR_TYPE: Dict[ShotType, int] = {
    ShotType.TRIPLE: 3,
    ShotType.DOBLE: 2,
    ShotType.LIBRE: 1,
}

SHOT_TYPE_LABELS: Dict[ShotType, str] = {
    ShotType.TRIPLE: "Triple (3 puntos)",
    ShotType.DOBLE: "Doble (2 puntos)",
    ShotType.LIBRE: "Tiro libre (1 punto)",
}


@dataclass(frozen=True)
class ShotBreakdown:
    type: ShotType
    attempts: int
    made: int
    percentage: int


@dataclass(frozen=True)
class TeamStats:
    total_shots: int
    made_shots: int
    percentage: int
    by_type: Tuple[ShotBreakdown, ...]


@dataclass(frozen=True)
class PlayerStats:
    name: str
    attempts: int
    made: int
    percentage: int
    by_type: Tuple[ShotBreakdown, ...]


def points_for_type(shot_type: ShotType) -> int:
    """Points a made shot of this type is worth.  Not used by the aggregates."""
    return POINTS_FOR_TYPE[ShotType(shot_type)]


def shot_type_label(shot_type: ShotType) -> str:
    return SHOT_TYPE_LABELS[ShotType(shot_type)]


def percentage(made: int, attempts: int) -> int:
    """
    Whole-number make percentage, rounded half up.

    Computed in integers so that e.g. 1 of 8 gives exactly 13 and 2 of 3
    gives 67.  Zero attempts gives 0.
    """
    if attempts <= 0:
        return 0
    return (200 * made + attempts) // (2 * attempts)


def select_shots(games: Sequence[Game], scope: Scope = ALL_GAMES) -> List[Shot]:
    """
    Shots in ``scope``.

    For :data:`ALL_GAMES` this is every game's shots concatenated in list
    order.  For a game id it is that game's shots; an unknown id gives an
    empty list.
    """
    if scope == ALL_GAMES:
        return [shot for game in games for shot in game.shots]
    for game in games:
        if str(game.id) == str(scope):
            return list(game.shots)
    return []


def _breakdown(shots: Iterable[Shot]) -> Tuple[int, int, Tuple[ShotBreakdown, ...]]:
    shots = list(shots)
    made = sum(1 for s in shots if s.made)
    by_type = []
    for shot_type in SHOT_TYPE_ORDER:
        typed = [s for s in shots if s.type is shot_type]
        typed_made = sum(1 for s in typed if s.made)
        by_type.append(
            ShotBreakdown(
                type=shot_type,
                attempts=len(typed),
                made=typed_made,
                percentage=percentage(typed_made, len(typed)),
            )
        )
    return len(shots), made, tuple(by_type)


def team_stats(games: Sequence[Game], scope: Scope = ALL_GAMES) -> TeamStats:
    total, made, by_type = _breakdown(select_shots(games, scope))
    return TeamStats(
        total_shots=total,
        made_shots=made,
        percentage=percentage(made, total),
        by_type=by_type,
    )


def player_stats(
    games: Sequence[Game], players: Sequence[Player], scope: Scope = ALL_GAMES
) -> List[PlayerStats]:
    """
    Per-player statistics in roster order.

    Shots are matched on ``player_name`` against the player's *current*
    name.  Shots recorded under a name no current player carries are not
    attributed to anyone.
    """
    shots = select_shots(games, scope)
    result = []
    for player in players:
        attempts, made, by_type = _breakdown(s for s in shots if s.player_name == player.name)
        result.append(
            PlayerStats(
                name=player.name,
                attempts=attempts,
                made=made,
                percentage=percentage(made, attempts),
                by_type=by_type,
            )
        )
    return result
