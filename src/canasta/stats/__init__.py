"""Shooting statistics for Canasta."""

from .aggregates import (
    ALL_GAMES,
    POINTS_FOR_TYPE,
    SHOT_TYPE_ORDER,
    PlayerStats,
    ShotBreakdown,
    TeamStats,
    percentage,
    player_stats,
    points_for_type,
    select_shots,
    shot_type_label,
    team_stats,
)

__all__ = [
    "ALL_GAMES",
    "POINTS_FOR_TYPE",
    "SHOT_TYPE_ORDER",
    "PlayerStats",
    "ShotBreakdown",
    "TeamStats",
    "percentage",
    "player_stats",
    "points_for_type",
    "select_shots",
    "shot_type_label",
    "team_stats",
]
