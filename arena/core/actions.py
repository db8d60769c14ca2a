"""
Action definitions.

An action is a closed tagged variant with exactly two members:
- Move(unit_id, direction): step one cell in an orthogonal direction
- Attack(unit_id, target_id): deal the unit's damage to an enemy in range

Both are immutable values, safe to share between simulated states and to
use as dictionary values in joint-action maps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from .types import ActionType, MoveDir


@dataclass(frozen=True)
class Move:
    """Move one cell in a direction."""

    unit_id: int
    direction: MoveDir

    @property
    def type(self) -> ActionType:
        return ActionType.MOVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": ActionType.MOVE.value,
            "unit_id": self.unit_id,
            "params": {"dir": self.direction.name},
        }

    def __str__(self) -> str:
        return f"MOVE(#{self.unit_id} {self.direction.name})"


@dataclass(frozen=True)
class Attack:
    """Attack a target unit."""

    unit_id: int
    target_id: int

    @property
    def type(self) -> ActionType:
        return ActionType.ATTACK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": ActionType.ATTACK.value,
            "unit_id": self.unit_id,
            "params": {"target_id": self.target_id},
        }

    def __str__(self) -> str:
        return f"ATTACK(#{self.unit_id} -> #{self.target_id})"


Action = Union[Move, Attack]


def action_from_dict(data: Dict[str, Any]) -> Action:
    """
    Rebuild an action from its ``to_dict()`` form.

    Raises:
        ValueError: If the type tag is unknown or parameters are missing
    """
    try:
        action_type = ActionType(data["type"])
        unit_id = int(data["unit_id"])
        params = data.get("params", {})
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Malformed action payload: {data!r}") from exc

    if action_type == ActionType.MOVE:
        if "dir" not in params:
            raise ValueError(f"Move action is missing 'dir': {data!r}")
        return Move(unit_id=unit_id, direction=MoveDir[params["dir"]])
    elif action_type == ActionType.ATTACK:
        if "target_id" not in params:
            raise ValueError(f"Attack action is missing 'target_id': {data!r}")
        return Attack(unit_id=unit_id, target_id=int(params["target_id"]))
    raise ValueError(f"Unknown action type {action_type}")
