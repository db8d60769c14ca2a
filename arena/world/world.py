"""
WorldState - the live snapshot owned by the environment.

Agents receive the world through the state dict returned by the
environment and read it as the host snapshot: the grid (with its blocked
cells) and, per team, the living units with their id, position, hit
points, damage and range.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.types import GridPos, Team
from ..entities.unit import Unit
from .grid import Grid


@dataclass
class WorldState:
    """
    Mutable container for the match state.

    Units themselves are immutable; the world swaps in the updated value
    when a unit moves or takes damage.
    """

    grid: Grid
    units: Dict[int, Unit] = field(default_factory=dict)
    turn: int = 0
    game_over: bool = False
    winner: Optional[Team] = None
    game_over_reason: Optional[str] = None

    # ------------------------------------------------------------------#
    # Units
    # ------------------------------------------------------------------#
    def add_unit(self, unit: Unit) -> None:
        if unit.id in self.units:
            raise ValueError(f"Duplicate unit id {unit.id}")
        if not self.grid.in_bounds(unit.pos):
            raise ValueError(f"{unit.label()} is outside the grid at {unit.pos}")
        if self.grid.is_blocked(unit.pos):
            raise ValueError(f"{unit.label()} is placed on an obstacle at {unit.pos}")
        if unit.alive:
            holder = self.occupied_cells().get(unit.pos)
            if holder is not None:
                raise ValueError(f"{unit.label()} shares {unit.pos} with {self.units[holder].label()}")
        self.units[unit.id] = unit

    def update_unit(self, unit: Unit) -> None:
        if unit.id not in self.units:
            raise KeyError(f"Unknown unit id {unit.id}")
        self.units[unit.id] = unit

    def get_unit(self, unit_id: int) -> Optional[Unit]:
        return self.units.get(unit_id)

    def get_alive_units(self) -> List[Unit]:
        return [u for u in self.units.values() if u.alive]

    def get_team_units(self, team: Team, alive_only: bool = True) -> List[Unit]:
        """Units of a team in ascending id order."""
        return sorted(
            (u for u in self.units.values() if u.team == team and (u.alive or not alive_only)),
            key=lambda u: u.id,
        )

    def occupied_cells(self) -> Dict[GridPos, int]:
        """Map of cell -> id of the living unit standing there."""
        return {u.pos: u.id for u in self.get_alive_units()}

    # ------------------------------------------------------------------#
    # Serialization
    # ------------------------------------------------------------------#
    def clone(self) -> WorldState:
        # Units are immutable and the grid is frozen; a new dict is enough.
        return WorldState(
            grid=self.grid,
            units=dict(self.units),
            turn=self.turn,
            game_over=self.game_over,
            winner=self.winner,
            game_over_reason=self.game_over_reason,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.to_dict(),
            "units": [u.to_dict() for u in sorted(self.units.values(), key=lambda u: u.id)],
            "turn": self.turn,
            "game_over": self.game_over,
            "winner": self.winner.name if self.winner else None,
            "game_over_reason": self.game_over_reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> WorldState:
        world = cls(grid=Grid.from_dict(data["grid"]))
        for unit_data in data.get("units", []):
            world.add_unit(Unit.from_dict(unit_data))
        world.turn = int(data.get("turn", 0))
        world.game_over = bool(data.get("game_over", False))
        winner = data.get("winner")
        world.winner = Team[winner] if winner else None
        world.game_over_reason = data.get("game_over_reason")
        return world
