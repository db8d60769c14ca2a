"""
Minimax agent: looks `ply_limit` plies ahead with alpha-beta pruning and
issues the root joint action that is best under worst-case enemy play.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING

from arena.core.actions import Action
from arena.core.types import Team
from arena.world.world import WorldState
from infra.logger import get_logger

from ..base_agent import BaseAgent
from ..registry import register_agent
from .combat_state import CombatState
from .config import SearchConfig
from .search import AlphaBetaSearch

if TYPE_CHECKING:
    from arena.environment import StepInfo

logger = get_logger(__name__)


@register_agent("minimax")
class MinimaxAgent(BaseAgent):
    """
    Agent that picks joint actions by depth-limited adversarial search.

    The attackers are always the maximizing side of the evaluation. When
    this agent plays the defenders the root is a minimizing node, so the
    same evaluation serves both teams.
    """

    def __init__(
        self,
        team: Team,
        name: str | None = None,
        config: SearchConfig | Dict[str, Any] | None = None,
        **params: Any,
    ):
        """
        Initialize the minimax agent.

        Args:
            team: Team to control
            name: Optional agent name (default: "MinimaxAgent")
            config: SearchConfig (or its dict form); mutually exclusive
                with keyword parameters
            **params: SearchConfig fields (ply_limit, movement, ...)

        Raises:
            pydantic.ValidationError: If the configuration is malformed
        """
        super().__init__(team, name)
        if config is not None and params:
            raise TypeError("Pass either config or individual search parameters, not both")
        if isinstance(config, SearchConfig):
            self.config = config
        else:
            self.config = SearchConfig(**(config or params))
        self.last_stats: Dict[str, Any] = {}

    def build_root(self, world: WorldState) -> CombatState:
        return CombatState.from_world(
            world,
            to_move=self.team,
            movement=self.config.movement,
            straight_line=self.config.straight_line,
        )

    def get_actions(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[Dict[int, Action], Dict[str, Any]]:
        """
        Search from the current snapshot and return the root action map.

        Units left out of the chosen joint action (no legal action this
        ply) get no command.
        """
        world: WorldState = state["world"]
        root = self.build_root(world)

        search = AlphaBetaSearch.from_config(self.config)
        best = search.best_child(root)
        own_ids = {u.id for u in root.roster(self.team)}
        actions: Dict[int, Action] = {
            unit_id: action for unit_id, action in best.actions.items() if unit_id in own_ids
        }

        self.last_stats = search.stats.to_dict()
        logger.info(
            "%s turn %d: %s (value=%s, nodes=%d, cutoffs=%d, %.3fs)",
            self.name,
            world.turn,
            ", ".join(str(a) for _, a in sorted(actions.items())) or "no action",
            best.utility,
            search.stats.nodes,
            search.stats.cutoffs,
            search.stats.elapsed_s,
        )

        metadata = {
            "policy": "minimax",
            "ply_limit": self.config.ply_limit,
            "value": best.utility,
            "root_utility": root.utility(),
            "search": self.last_stats,
            "actions_count": len(actions),
        }
        return actions, metadata
