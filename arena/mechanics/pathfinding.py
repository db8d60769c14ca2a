"""
A* pathfinding over the grid.

Used in two places:
- as the distance feature of the minimax evaluation when the map has
  obstacles (a straight line would ignore walls)
- as the movement planner that steps a unit around obstacles toward an
  enemy

Each MovementMode fixes a consistent movement/heuristic pair:
ORTHOGONAL moves use the Manhattan heuristic, DIAGONAL moves use the
Chebyshev heuristic. Both are admissible and consistent for unit step
cost, so the first time the goal is popped its path is shortest.
"""

from __future__ import annotations

import heapq
import itertools
from typing import AbstractSet, Dict, List, Optional

from infra.logger import get_logger

from ..core.types import GridPos, MoveDir, MovementMode
from ..world.grid import Grid

logger = get_logger(__name__)

# Distance charged when no path exists. Large enough to dominate any real
# path on the maps we play, finite so evaluation keeps ordering states.
UNREACHABLE_DISTANCE = 50


def find_path(
    start: GridPos,
    goal: GridPos,
    grid: Grid,
    movement: MovementMode = MovementMode.ORTHOGONAL,
    blocked: Optional[AbstractSet[GridPos]] = None,
) -> Optional[List[GridPos]]:
    """
    Find a shortest-hop path from start to goal around obstacles.

    The returned path holds only the intermediate cells, excluding both
    start and goal, ordered from the first step after start. Callers that
    want to walk toward the goal pop the first element as their next move.

    Example (ORTHOGONAL, F = start, G = goal, x = obstacle)::

        F - - -
        x x x -
        G - - -

    path = [(1,0), (2,0), (3,0), (3,1), (3,2), (2,2), (1,2)]

    Args:
        start: Starting cell
        goal: Target cell
        grid: Map with its obstacle set
        movement: Grid connectivity (and matching heuristic)
        blocked: Extra cells to treat as impassable (the goal is exempt)

    Returns:
        List of intermediate cells ([] when start == goal or when they are
        adjacent), or None when the goal is unreachable.
    """
    if start == goal:
        return []
    if not grid.in_bounds(goal) or grid.is_blocked(goal):
        logger.debug("Goal %s is off-grid or blocked", goal)
        return None

    heuristic = movement.metric.between
    extra = blocked or frozenset()
    tie = itertools.count()  # insertion order breaks f/h ties deterministically

    h0 = heuristic(start, goal)
    open_heap = [(h0, h0, next(tie), start)]
    cost_so_far: Dict[GridPos, int] = {start: 0}
    came_from: Dict[GridPos, GridPos] = {}
    closed = set()

    while open_heap:
        _, _, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        if current == goal:
            return _reconstruct(came_from, start, goal)
        closed.add(current)

        for nb in sorted(grid.neighbors(current, movement)):
            if nb in closed or grid.is_blocked(nb):
                continue
            if nb != goal and nb in extra:
                continue
            g = cost_so_far[current] + 1
            if g < cost_so_far.get(nb, g + 1):
                cost_so_far[nb] = g
                came_from[nb] = current
                h = heuristic(nb, goal)
                heapq.heappush(open_heap, (g + h, h, next(tie), nb))

    logger.debug("No path from %s to %s", start, goal)
    return None


def _reconstruct(came_from: Dict[GridPos, GridPos], start: GridPos, goal: GridPos) -> List[GridPos]:
    path: List[GridPos] = []
    current = came_from[goal]
    while current != start:
        path.append(current)
        current = came_from[current]
    path.reverse()
    return path


def path_distance(
    start: GridPos,
    goal: GridPos,
    grid: Grid,
    movement: MovementMode = MovementMode.ORTHOGONAL,
) -> int:
    """
    Number of steps on a shortest path, or UNREACHABLE_DISTANCE.

    An unreachable goal is a normal outcome here, not an error.
    """
    if start == goal:
        return 0
    path = find_path(start, goal, grid, movement)
    if path is None:
        return UNREACHABLE_DISTANCE
    return len(path) + 1


def next_step(
    start: GridPos,
    goal: GridPos,
    grid: Grid,
    movement: MovementMode = MovementMode.ORTHOGONAL,
    blocked: Optional[AbstractSet[GridPos]] = None,
) -> Optional[MoveDir]:
    """
    Direction of the first step along the A* path toward goal.

    Units only move orthogonally. When a DIAGONAL path starts with a
    diagonal step, the orthogonal component that closes the larger gap is
    tried first, then the other one.

    Returns:
        The direction to move, or None if the goal is unreachable or
        already adjacent.
    """
    path = find_path(start, goal, grid, movement, blocked)
    if not path:
        return None

    first = path[0]
    dx = first[0] - start[0]
    dy = first[1] - start[1]
    if dx == 0 or dy == 0:
        return MoveDir.from_delta(dx, dy)

    extra = blocked or frozenset()
    x_first = abs(goal[0] - start[0]) >= abs(goal[1] - start[1])
    candidates = [(dx, 0), (0, dy)] if x_first else [(0, dy), (dx, 0)]
    for cx, cy in candidates:
        cell = (start[0] + cx, start[1] + cy)
        if grid.is_open(cell) and cell not in extra:
            return MoveDir.from_delta(cx, cy)
    return None
