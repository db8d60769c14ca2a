from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, Optional

from arena.core.actions import Action

if TYPE_CHECKING:
    from .combat_state import CombatState


@dataclass(frozen=True, eq=False)
class SearchNode:
    """
    One edge of the game tree: the joint action taken and the state it led to.

    Attributes:
        actions: unit_id -> Action applied to the parent to reach `state`
            (empty for the root and for the alpha/beta sentinels)
        state: Resulting combat state
        value: Backed-up utility once the search has scored this node;
            None means "use the state's own utility"
    """

    actions: Dict[int, Action]
    state: "CombatState"
    value: Optional[float] = None

    @property
    def utility(self) -> float:
        if self.value is not None:
            return self.value
        return self.state.utility()

    def with_value(self, value: float) -> SearchNode:
        return replace(self, value=value)

    def to_dict(self) -> Dict:
        return {
            "actions": {uid: a.to_dict() for uid, a in sorted(self.actions.items())},
            "utility": self.utility,
        }

    def __repr__(self) -> str:
        acts = ", ".join(str(a) for _, a in sorted(self.actions.items())) or "-"
        return f"SearchNode([{acts}], utility={self.utility})"
