from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from arena.core.actions import Action
from arena.core.types import Team
from arena.environment import StepInfo
from arena.world import WorldState


@dataclass
class Frame:
    """
    Snapshot of a single turn, with helpers to serialize for transport.

    `world` is the state the actions were chosen from; `step_info` says
    what happened when they were applied.
    """

    world: WorldState
    actions: Optional[Mapping[int, Action]] = None
    action_metadata: Optional[Mapping[str, Any]] = None
    step_info: Optional[StepInfo] = None
    done: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the frame into a JSON-friendly dictionary.
        """
        frame: Dict[str, Any] = {
            "turn": self.world.turn,
            "done": self.done,
            "world": self.world.to_dict(),
            "teams": self._serialize_teams(self.world),
        }

        actions_payload = self._serialize_actions(self.actions or {})
        if actions_payload:
            frame["actions"] = actions_payload
        if self.action_metadata is not None:
            frame["action_metadata"] = dict(self.action_metadata)
        if self.step_info is not None:
            frame["step_info"] = self.step_info.to_dict()

        return frame

    @staticmethod
    def _serialize_teams(world: WorldState) -> Dict[str, Any]:
        """Per-team roll-up for UI consumers: living ids and total hp."""
        teams: Dict[str, Any] = {}
        for team in Team:
            units = world.get_team_units(team)
            teams[team.name.lower()] = {
                "alive_ids": [u.id for u in units],
                "total_hp": sum(u.hp for u in units),
            }
        return teams

    @staticmethod
    def _serialize_actions(actions: Mapping[int, Action]) -> List[Dict[str, Any]]:
        """Serialize action map to a list for easy iteration client-side."""
        serialized: List[Dict[str, Any]] = []
        for unit_id, action in sorted(actions.items()):
            serialized.append(
                {
                    "unit_id": unit_id,
                    "type": action.type.name,
                    "params": action.to_dict().get("params", {}),
                    "label": str(action),
                }
            )
        return serialized
