"""
Skirmish arena: melee attackers versus ranged defenders on a grid.

This package provides:
- Core value types and the Move / Attack actions
- Immutable units, the grid and the live WorldState
- Mechanics: legality rules, A* pathfinding, turn resolution
- SkirmishEnv and Scenario
"""

from .core.types import Team, MoveDir, ActionType, DistanceMetric, MovementMode, GameResult
from .core.actions import Action, Move, Attack
from .entities.unit import Unit
from .world import Grid, WorldState
from .scenario import Scenario
from .environment import SkirmishEnv, StepInfo

__all__ = [
    "Team",
    "MoveDir",
    "ActionType",
    "DistanceMetric",
    "MovementMode",
    "GameResult",
    "Action",
    "Move",
    "Attack",
    "Unit",
    "Grid",
    "WorldState",
    "Scenario",
    "SkirmishEnv",
    "StepInfo",
]
