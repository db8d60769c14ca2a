from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from arena.core.types import Team


@dataclass
class AgentSpec:
    """
    Declarative description of which agent controls a team.

    Attributes:
        team: Team the agent plays
        type: Registered agent type name ("minimax", "pursuit", "random")
        name: Optional display name
        params: Keyword arguments forwarded to the agent constructor
    """

    team: Team
    type: str
    name: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team": self.team.name,
            "type": self.type,
            "name": self.name,
            "params": dict(self.params),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AgentSpec:
        if "team" not in data or "type" not in data:
            raise ValueError(f"AgentSpec requires 'team' and 'type': {data!r}")
        team = data["team"]
        return cls(
            team=team if isinstance(team, Team) else Team[str(team).upper()],
            type=str(data["type"]),
            name=data.get("name"),
            params=dict(data.get("params") or {}),
        )
