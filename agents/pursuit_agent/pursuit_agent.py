"""
Pursuit agent: a scripted baseline built on the A* planner.

Each unit attacks the weakest enemy it can reach this turn; otherwise it
walks one step along the shortest path toward its nearest enemy.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set, TYPE_CHECKING

from arena.core.actions import Action, Attack, Move
from arena.core.types import GridPos, MovementMode, Team
from arena.entities.unit import Unit
from arena.mechanics.pathfinding import next_step, path_distance
from arena.mechanics.rules import in_attack_range
from arena.world import WorldState
from infra.logger import get_logger

from ..base_agent import BaseAgent
from ..registry import register_agent

if TYPE_CHECKING:
    from arena.environment import StepInfo

logger = get_logger(__name__)


@register_agent("pursuit")
class PursuitAgent(BaseAgent):
    """
    Greedy chaser.

    Decision process per unit, in id order:
    - Attack the lowest-hp enemy in range (lowest id on ties)
    - Otherwise step toward the nearest enemy by path length, routing
      around obstacles and every other living unit
    - Units whose path is blocked stay idle
    """

    def __init__(
        self,
        team: Team,
        name: str | None = None,
        movement: MovementMode | str = MovementMode.ORTHOGONAL,
        **_: Any,
    ):
        super().__init__(team, name)
        self.movement = MovementMode(movement)

    def get_actions(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[Dict[int, Action], Dict[str, Any]]:
        world: WorldState = state["world"]
        enemies = world.get_team_units(self.team.enemy)
        actions: Dict[int, Action] = {}
        if not enemies:
            return actions, {"policy": "pursuit", "actions_count": 0}

        # Cells units occupy now plus cells our earlier units will move into.
        blocked: Set[GridPos] = set(world.occupied_cells())

        for unit in world.get_team_units(self.team):
            in_range = [e for e in enemies if in_attack_range(unit, e, self.movement)]
            if in_range:
                target = min(in_range, key=lambda e: (e.hp, e.id))
                actions[unit.id] = Attack(unit.id, target.id)
                continue

            target = self._nearest(unit, enemies, world)
            direction = next_step(unit.pos, target.pos, world.grid, self.movement,
                                  blocked=blocked - {unit.pos})
            if direction is None:
                logger.debug("%s has no open step toward %s", unit.label(), target.label())
                continue
            dest = direction.apply(unit.pos)
            if dest in blocked:
                continue
            actions[unit.id] = Move(unit.id, direction)
            blocked.add(dest)

        metadata = {
            "policy": "pursuit",
            "actions_count": len(actions),
        }
        return actions, metadata

    def _nearest(self, unit: Unit, enemies: List[Unit], world: WorldState) -> Unit:
        def _distance(enemy: Unit) -> float:
            if world.grid.has_obstacles:
                return path_distance(unit.pos, enemy.pos, world.grid, self.movement)
            return self.movement.metric.between(unit.pos, enemy.pos)

        return min(enemies, key=lambda e: (_distance(e), e.id))
