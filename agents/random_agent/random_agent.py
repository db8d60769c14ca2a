"""
Random agent implementation for testing and baseline comparison.

This agent makes random legal decisions for all its units.
"""

import random
from typing import Dict, Any, Optional, TYPE_CHECKING
from arena.core.actions import Action
from arena.core.types import MovementMode, Team
from arena.mechanics.rules import legal_actions
from arena.world import WorldState
from ..base_agent import BaseAgent
from ..registry import register_agent

if TYPE_CHECKING:
    from arena.environment import StepInfo


@register_agent("random")
class RandomAgent(BaseAgent):
    """
    Agent that takes random actions.

    Decision process:
    - For each living unit, sample uniformly from its legal actions.

    This serves as a baseline for comparing the search agents.
    """

    def __init__(
        self,
        team: Team,
        name: str = None,
        seed: Optional[int] = None,
        movement: MovementMode | str = MovementMode.ORTHOGONAL,
        **_: Any,
    ):
        """
        Initialize random agent.

        Args:
            team: Team to control
            name: Agent name (default: "RandomAgent")
            seed: Random seed for reproducibility (None = random)
            movement: Movement mode used to judge attack ranges
        """
        super().__init__(team, name)
        self.rng = random.Random(seed)
        self.movement = MovementMode(movement)

    def get_actions(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[Dict[int, Action], Dict[str, Any]]:
        """
        Generate random actions for all units by sampling legal actions.

        Args:
            state: Current game state
            step_info: Optional previous step resolution info (unused)

        Returns:
            Tuple of (actions, metadata)
        """
        world: WorldState = state["world"]
        everyone = world.get_alive_units()
        actions = {}

        for unit in world.get_team_units(self.team):
            allowed = legal_actions(unit, everyone, world.grid, self.movement)
            if not allowed:
                continue
            actions[unit.id] = self.rng.choice(allowed)

        metadata = {
            "policy": "random",
            "actions_count": len(actions),
        }
        return actions, metadata
