"""
CombatResolver - attack action resolution for the live environment.

This module handles:
- Validating attack actions (attacker alive, target an alive enemy in range)
- Applying damage simultaneously
- Tracking kills
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List

from ..core.actions import Action
from ..core.types import ActionType, MovementMode
from .rules import in_attack_range

if TYPE_CHECKING:
    from ..world.world import WorldState


@dataclass
class CombatResult:
    """
    Result of resolving a single attack action.

    Attributes:
        attacker_id: ID of the unit that attacked
        target_id: ID of the target unit
        success: Whether the attack was carried out
        damage: Damage dealt (0 if not carried out)
        distance: Distance to target (None if invalid)
        log: Human-readable log message
    """

    attacker_id: int
    target_id: int
    success: bool
    damage: int
    distance: float | None
    log: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attacker_id": self.attacker_id,
            "target_id": self.target_id,
            "success": self.success,
            "damage": self.damage,
            "distance": self.distance,
            "log": self.log,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CombatResult":
        return cls(
            attacker_id=data["attacker_id"],
            target_id=data["target_id"],
            success=data["success"],
            damage=data.get("damage", 0),
            distance=data.get("distance"),
            log=data.get("log", ""),
        )


@dataclass
class CombatResolutionResult:
    """
    Complete result of resolving all combat for a turn.

    Attributes:
        combat_results: Results from all attack actions
        death_logs: Logs from units being killed
        killed_unit_ids: Units whose hp dropped to 0 or below this turn
        combat_occurred: True if at least one attack was carried out
    """

    combat_results: List[CombatResult]
    death_logs: List[str]
    killed_unit_ids: List[int]
    combat_occurred: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "combat_results": [r.to_dict() for r in self.combat_results],
            "death_logs": self.death_logs,
            "killed_unit_ids": self.killed_unit_ids,
            "combat_occurred": self.combat_occurred,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CombatResolutionResult":
        return cls(
            combat_results=[CombatResult.from_dict(r) for r in data.get("combat_results", [])],
            death_logs=data.get("death_logs", []),
            killed_unit_ids=data.get("killed_unit_ids", []),
            combat_occurred=data.get("combat_occurred", False),
        )


class CombatResolver:
    """
    Stateless resolver for attack actions.

    Every attack of a turn is validated against the same snapshot (after
    movement) and all damage lands at once, so two units can kill each
    other in the same turn and resolution order never matters.
    """

    def __init__(self, movement: MovementMode = MovementMode.ORTHOGONAL):
        """
        Args:
            movement: Selects the range metric (Manhattan or Chebyshev)
        """
        self.movement = movement

    def resolve_combat(self, world: WorldState, actions: Dict[int, Action]) -> CombatResolutionResult:
        """
        Resolve all attack actions for a turn, including death application.

        Args:
            world: Current world state (modified in-place)
            actions: Map of unit_id -> action

        Returns:
            CombatResolutionResult with all outcomes
        """
        results: List[CombatResult] = []
        pending: Dict[int, int] = defaultdict(int)

        for unit_id in sorted(actions):
            action = actions[unit_id]
            if action.type != ActionType.ATTACK:
                continue
            result = self.resolve_single(world, action)
            results.append(result)
            if result.success:
                pending[result.target_id] += result.damage

        death_logs: List[str] = []
        killed: List[int] = []
        for target_id in sorted(pending):
            target = world.get_unit(target_id)
            hit = target.damaged(pending[target_id])
            world.update_unit(hit)
            if target.alive and not hit.alive:
                killed.append(target_id)
                death_logs.append(f"{hit.label()} was destroyed!")

        return CombatResolutionResult(
            combat_results=results,
            death_logs=death_logs,
            killed_unit_ids=killed,
            combat_occurred=any(r.success for r in results),
        )

    def resolve_single(self, world: WorldState, action: Action) -> CombatResult:
        """
        Validate one attack against the current world without applying damage.
        """
        attacker = world.get_unit(action.unit_id)
        target = world.get_unit(action.target_id)

        if attacker is None or not attacker.alive:
            return CombatResult(action.unit_id, action.target_id, False, 0, None,
                                f"Unit #{action.unit_id} is unknown or dead and cannot attack")
        if target is None or not target.alive:
            return CombatResult(attacker.id, action.target_id, False, 0, None,
                                f"{attacker.label()} target #{action.target_id} invalid or dead")
        if target.team == attacker.team:
            return CombatResult(attacker.id, target.id, False, 0, None,
                                f"{attacker.label()} cannot attack friendly {target.label()}")

        distance = self.movement.metric.between(attacker.pos, target.pos)
        if not in_attack_range(attacker, target, self.movement):
            return CombatResult(attacker.id, target.id, False, 0, distance,
                                f"{attacker.label()} out of range of {target.label()} "
                                f"(d={distance:g} > {attacker.attack_range})")

        return CombatResult(attacker.id, target.id, True, attacker.damage, distance,
                            f"{attacker.label()} hits {target.label()} for {attacker.damage} (d={distance:g})")
