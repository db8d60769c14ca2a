"""
Core type definitions shared by the arena and the agents.

This module holds the small value types every other module speaks in:
- GridPos: an (x, y) cell
- Team: the melee attackers and the ranged defenders
- MoveDir: the four orthogonal movement directions
- ActionType: tags of the closed Move | Attack action variant
- MovementMode / DistanceMetric: grid geometry conventions
- GameResult: final outcome of a match
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Tuple

GridPos = Tuple[int, int]


class Team(Enum):
    """The two sides of a skirmish."""

    ATTACKERS = "ATTACKERS"
    DEFENDERS = "DEFENDERS"

    @property
    def enemy(self) -> "Team":
        return Team.DEFENDERS if self is Team.ATTACKERS else Team.ATTACKERS

    @property
    def is_maximizing(self) -> bool:
        """Attackers are the maximizing side of the search."""
        return self is Team.ATTACKERS


class MoveDir(Enum):
    """
    Orthogonal movement directions.

    The y axis grows downward (row 0 is the top of the map), so NORTH
    decreases y.
    """

    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"

    def apply(self, pos: GridPos) -> GridPos:
        dx, dy = _DELTAS[self]
        return (pos[0] + dx, pos[1] + dy)

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> "MoveDir":
        for direction, delta in _DELTAS.items():
            if delta == (dx, dy):
                return direction
        raise ValueError(f"No orthogonal direction for delta ({dx}, {dy})")


_DELTAS = {
    MoveDir.NORTH: (0, -1),
    MoveDir.EAST: (1, 0),
    MoveDir.SOUTH: (0, 1),
    MoveDir.WEST: (-1, 0),
}


class ActionType(Enum):
    MOVE = "MOVE"
    ATTACK = "ATTACK"


class DistanceMetric(Enum):
    """Distance conventions used for ranges and heuristics."""

    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"
    EUCLIDEAN = "euclidean"

    def between(self, a: GridPos, b: GridPos) -> float:
        dx = abs(a[0] - b[0])
        dy = abs(a[1] - b[1])
        if self is DistanceMetric.MANHATTAN:
            return dx + dy
        if self is DistanceMetric.CHEBYSHEV:
            return max(dx, dy)
        return math.hypot(dx, dy)


class MovementMode(Enum):
    """
    Grid connectivity used by the pathfinder and by attack ranges.

    Each mode fixes one consistent movement/heuristic pair:
    - ORTHOGONAL: 4-connected steps, Manhattan heuristic and range
    - DIAGONAL: 8-connected steps, Chebyshev heuristic and range
    """

    ORTHOGONAL = "orthogonal"
    DIAGONAL = "diagonal"

    @property
    def metric(self) -> DistanceMetric:
        if self is MovementMode.ORTHOGONAL:
            return DistanceMetric.MANHATTAN
        return DistanceMetric.CHEBYSHEV

    @property
    def deltas(self) -> Tuple[GridPos, ...]:
        if self is MovementMode.ORTHOGONAL:
            return _ORTHOGONAL_DELTAS
        return _ORTHOGONAL_DELTAS + _DIAGONAL_DELTAS


_ORTHOGONAL_DELTAS: Tuple[GridPos, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
_DIAGONAL_DELTAS: Tuple[GridPos, ...] = ((1, -1), (1, 1), (-1, 1), (-1, -1))


class GameResult(Enum):
    ATTACKERS_WIN = "ATTACKERS_WIN"
    DEFENDERS_WIN = "DEFENDERS_WIN"
    DRAW = "DRAW"
    IN_PROGRESS = "IN_PROGRESS"
