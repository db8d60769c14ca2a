"""
MovementResolver - movement action resolution for the live environment.

Moves are resolved simultaneously against the positions at the start of
the turn:
- the destination must be in bounds and not an obstacle
- the destination must not be occupied by a living unit
- two units moving to the same cell both stay put
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..core.actions import Action
from ..core.types import ActionType, GridPos

if TYPE_CHECKING:
    from ..world.world import WorldState


@dataclass
class MoveResult:
    """
    Outcome of a single move action.

    Attributes:
        unit_id: Unit that tried to move
        success: Whether the unit actually moved
        from_pos: Position before the move (None if the unit is unknown)
        to_pos: Requested destination (None if the unit is unknown)
        log: Human-readable log message
    """

    unit_id: int
    success: bool
    from_pos: Optional[GridPos]
    to_pos: Optional[GridPos]
    log: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "success": self.success,
            "from_pos": list(self.from_pos) if self.from_pos else None,
            "to_pos": list(self.to_pos) if self.to_pos else None,
            "log": self.log,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoveResult":
        return cls(
            unit_id=data["unit_id"],
            success=data["success"],
            from_pos=tuple(data["from_pos"]) if data.get("from_pos") else None,
            to_pos=tuple(data["to_pos"]) if data.get("to_pos") else None,
            log=data.get("log", ""),
        )


@dataclass
class ActionResolutionResult:
    """All movement outcomes for a turn."""

    move_results: List[MoveResult]
    movement_occurred: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "move_results": [r.to_dict() for r in self.move_results],
            "movement_occurred": self.movement_occurred,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionResolutionResult":
        return cls(
            move_results=[MoveResult.from_dict(r) for r in data.get("move_results", [])],
            movement_occurred=data.get("movement_occurred", False),
        )


class MovementResolver:
    """Stateless resolver for move actions."""

    def resolve_actions(self, world: WorldState, actions: Dict[int, Action]) -> ActionResolutionResult:
        """
        Resolve every Move in `actions` and update the world in place.

        Args:
            world: Current world state (modified in-place)
            actions: Map of unit_id -> action

        Returns:
            ActionResolutionResult with one MoveResult per move action
        """
        occupied = world.occupied_cells()
        results: List[MoveResult] = []
        requested: Dict[int, GridPos] = {}

        for unit_id in sorted(actions):
            action = actions[unit_id]
            if action.type != ActionType.MOVE:
                continue
            unit = world.get_unit(action.unit_id)
            if unit is None or not unit.alive:
                results.append(MoveResult(action.unit_id, False, None, None,
                                          f"Unit #{action.unit_id} is unknown or dead and cannot move"))
                continue
            dest = action.direction.apply(unit.pos)
            if not world.grid.in_bounds(dest):
                results.append(MoveResult(unit.id, False, unit.pos, dest,
                                          f"{unit.label()} cannot leave the grid to {dest}"))
            elif world.grid.is_blocked(dest):
                results.append(MoveResult(unit.id, False, unit.pos, dest,
                                          f"{unit.label()} is blocked by an obstacle at {dest}"))
            elif dest in occupied:
                results.append(MoveResult(unit.id, False, unit.pos, dest,
                                          f"{unit.label()} blocked: {dest} is occupied"))
            else:
                requested[unit.id] = dest

        contested = Counter(requested.values())
        for unit_id, dest in requested.items():
            unit = world.get_unit(unit_id)
            if contested[dest] > 1:
                results.append(MoveResult(unit_id, False, unit.pos, dest,
                                          f"{unit.label()} collided at {dest} and stayed put"))
                continue
            world.update_unit(unit.moved_to(dest))
            results.append(MoveResult(unit_id, True, unit.pos, dest,
                                      f"{unit.label()} moves {unit.pos} -> {dest}"))

        results.sort(key=lambda r: r.unit_id)
        return ActionResolutionResult(
            move_results=results,
            movement_occurred=any(r.success for r in results),
        )
