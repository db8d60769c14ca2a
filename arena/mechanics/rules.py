"""
Action legality shared by the live environment and simulated states.

Keeping one definition means the minimax search never plans an action
that the environment would reject.
"""

from __future__ import annotations

from typing import Iterable, List

from ..core.actions import Action, Attack, Move
from ..core.types import MoveDir, MovementMode
from ..entities.unit import Unit
from ..world.grid import Grid


def in_attack_range(attacker: Unit, target: Unit,
                    movement: MovementMode = MovementMode.ORTHOGONAL) -> bool:
    """Range is measured with the movement mode's metric (Manhattan or Chebyshev)."""
    return movement.metric.between(attacker.pos, target.pos) <= attacker.attack_range


def legal_actions(
    unit: Unit,
    units: Iterable[Unit],
    grid: Grid,
    movement: MovementMode = MovementMode.ORTHOGONAL,
) -> List[Action]:
    """
    Every action `unit` may take given the other units on the board.

    - Move: destination in bounds, not an obstacle, not occupied by any
      other living unit (friend or foe)
    - Attack: any living enemy within the unit's attack range

    Moves come first in N, E, S, W order, then attacks in the order the
    enemies are given. Dead units have no actions.
    """
    if not unit.alive:
        return []
    others = [u for u in units if u.alive and u.id != unit.id]
    occupied = {u.pos for u in others}

    actions: List[Action] = []
    for direction in MoveDir:
        dest = direction.apply(unit.pos)
        if grid.is_open(dest) and dest not in occupied:
            actions.append(Move(unit.id, direction))
    for enemy in others:
        if enemy.team != unit.team and in_attack_range(unit, enemy, movement):
            actions.append(Attack(unit.id, enemy.id))
    return actions
