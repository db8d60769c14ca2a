"""
Game mechanics: legality rules, pathfinding and per-turn resolution.
"""

from .rules import legal_actions, in_attack_range
from .pathfinding import find_path, path_distance, next_step, UNREACHABLE_DISTANCE
from .movement import MovementResolver, MoveResult, ActionResolutionResult
from .combat import CombatResolver, CombatResult, CombatResolutionResult
from .victory import VictoryConditions, VictoryResult

__all__ = [
    "legal_actions",
    "in_attack_range",
    "find_path",
    "path_distance",
    "next_step",
    "UNREACHABLE_DISTANCE",
    "MovementResolver",
    "MoveResult",
    "ActionResolutionResult",
    "CombatResolver",
    "CombatResult",
    "CombatResolutionResult",
    "VictoryConditions",
    "VictoryResult",
]
