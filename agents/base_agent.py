"""
Base agent interface for the skirmish arena.

All agents must implement this interface to interact with the environment.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, TYPE_CHECKING
from arena.core.actions import Action
from arena.core.types import Team

if TYPE_CHECKING:
    from arena.environment import StepInfo


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    Agents observe the game state and produce one command per living unit
    they control.

    Subclasses must implement:
    - get_actions(): Produce actions for all controlled units

    Attributes:
        team: The team this agent controls (ATTACKERS or DEFENDERS)
        name: Agent name for logging/identification
    """

    def __init__(self, team: Team, name: str = None):
        """
        Initialize the agent.

        Args:
            team: Team this agent controls
            name: Optional name for the agent (defaults to class name)
        """
        self.team = team
        self.name = name or self.__class__.__name__

    @abstractmethod
    def get_actions(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[Dict[int, Action], Dict[str, Any]]:
        """
        Get actions for all controlled units.

        This is called once per turn (the per-tick callback). The agent
        should:
        1. Read its units and the enemy units from the world snapshot
        2. Optionally consume previous StepInfo (movement/combat/victory)
        3. Decide on one action per unit
        4. Return (actions, metadata)

        State structure:
            {
                "world": WorldState,
            }

        To get your units:
            world = state["world"]
            my_units = world.get_team_units(self.team)

        Args:
            state: Current game state from environment
            step_info: Optional per-turn resolution info from the previous step
            **kwargs: Reserved for future fields

        Returns:
            Tuple of:
                - Dict mapping unit_id to Action (at most one per unit)
                - Metadata dict (search statistics, reasoning, etc.)

        Notes:
            - Dead units must not have actions
            - A unit with no sensible action may simply be left out
            - Invalid actions are rejected by the environment
        """
        pass

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name} ({self.team.name})"

    def __repr__(self) -> str:
        """Detailed representation."""
        return f"{self.__class__.__name__}(team={self.team.name}, name='{self.name}')"
