from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..core.types import GameResult, Team

if TYPE_CHECKING:
    from ..world.world import WorldState


@dataclass
class VictoryResult:
    """Outcome of the end-of-turn victory check."""

    is_game_over: bool
    result: GameResult
    winner: Optional[Team] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_game_over": self.is_game_over,
            "result": self.result.value,
            "winner": self.winner.name if self.winner else None,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VictoryResult":
        winner = data.get("winner")
        return cls(
            is_game_over=data["is_game_over"],
            result=GameResult(data["result"]),
            winner=Team[winner] if winner else None,
            reason=data.get("reason"),
        )


class VictoryConditions:
    """
    End-of-turn checks, in priority order:
    1. Both sides eliminated -> draw
    2. One side eliminated -> the other wins
    3. Turn cap reached -> draw
    """

    def __init__(self, max_turns: Optional[int] = None):
        if max_turns is not None and max_turns <= 0:
            raise ValueError(f"max_turns must be positive: {max_turns}")
        self.max_turns = max_turns

    def check_all(self, world: WorldState) -> VictoryResult:
        attackers = world.get_team_units(Team.ATTACKERS)
        defenders = world.get_team_units(Team.DEFENDERS)

        if not attackers and not defenders:
            return VictoryResult(True, GameResult.DRAW, None, "Mutual elimination")
        if not defenders:
            return VictoryResult(True, GameResult.ATTACKERS_WIN, Team.ATTACKERS, "All defenders destroyed")
        if not attackers:
            return VictoryResult(True, GameResult.DEFENDERS_WIN, Team.DEFENDERS, "All attackers destroyed")
        if self.max_turns is not None and world.turn >= self.max_turns:
            return VictoryResult(True, GameResult.DRAW, None, f"Turn limit ({self.max_turns}) reached")
        return VictoryResult(False, GameResult.IN_PROGRESS)
