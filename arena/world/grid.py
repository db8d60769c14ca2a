"""
Grid map model.

The grid is static for the lifetime of a match: a width, a height and a
set of blocked cells. All queries are pure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Set

from ..core.types import DistanceMetric, GridPos, MovementMode


@dataclass(frozen=True)
class Grid:
    """
    Static map geometry.

    The obstacle set is a frozenset so it can be shared by reference across
    every simulated state derived from one snapshot without being copied.

    Attributes:
        width: Number of columns (valid x in [0, width))
        height: Number of rows (valid y in [0, height))
        obstacles: Cells no unit may occupy or move through
    """

    width: int
    height: int
    obstacles: FrozenSet[GridPos] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive: {self.width}x{self.height}")
        if not isinstance(self.obstacles, frozenset):
            object.__setattr__(self, "obstacles", frozenset(tuple(p) for p in self.obstacles))
        for cell in self.obstacles:
            if not self.in_bounds(cell):
                raise ValueError(f"Obstacle {cell} is outside the {self.width}x{self.height} grid")

    def in_bounds(self, pos: GridPos) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def is_blocked(self, pos: GridPos) -> bool:
        return pos in self.obstacles

    def is_open(self, pos: GridPos) -> bool:
        """In bounds and not an obstacle."""
        return self.in_bounds(pos) and pos not in self.obstacles

    def neighbors(self, pos: GridPos, movement: MovementMode = MovementMode.ORTHOGONAL) -> Set[GridPos]:
        """
        Cells adjacent to pos that lie inside the grid.

        Obstacles are not filtered here; callers decide what blocks them.

        Args:
            pos: Center cell
            movement: ORTHOGONAL for up to 4 neighbors, DIAGONAL for up to 8

        Returns:
            Set of in-bounds neighbor cells
        """
        x, y = pos
        return {
            (x + dx, y + dy)
            for dx, dy in movement.deltas
            if self.in_bounds((x + dx, y + dy))
        }

    def distance(self, a: GridPos, b: GridPos,
                 metric: DistanceMetric = DistanceMetric.MANHATTAN) -> float:
        return metric.between(a, b)

    @property
    def has_obstacles(self) -> bool:
        return bool(self.obstacles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "obstacles": [list(p) for p in sorted(self.obstacles)],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Grid:
        return cls(
            width=int(data["width"]),
            height=int(data["height"]),
            obstacles=_to_cells(data.get("obstacles", [])),
        )


def _to_cells(raw: Iterable[Any]) -> FrozenSet[GridPos]:
    return frozenset((int(p[0]), int(p[1])) for p in raw)
