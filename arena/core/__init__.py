"""Core value types for the skirmish arena."""

from .types import (
    GridPos,
    Team,
    MoveDir,
    ActionType,
    DistanceMetric,
    MovementMode,
    GameResult,
)
from .actions import Action, Move, Attack, action_from_dict

__all__ = [
    "GridPos",
    "Team",
    "MoveDir",
    "ActionType",
    "DistanceMetric",
    "MovementMode",
    "GameResult",
    "Action",
    "Move",
    "Attack",
    "action_from_dict",
]
