from __future__ import annotations

from typing import Any, Dict, Optional

from agents import PreparedAgent, create_agent_from_spec
from agents.spec import AgentSpec
from arena import SkirmishEnv
from arena.core.types import Team
from arena.environment import StepInfo
from arena.scenario import Scenario
from arena.world import WorldState
from infra.logger import get_logger

from game_frame import Frame

logger = get_logger(__name__)


class GameRunner:
    """
    Step-by-step game runner that returns UI-friendly frames.

    step() advances one turn; current_frame() shows the world without advancing.
    """

    def __init__(
        self,
        scenario: Scenario,
        world: WorldState | Dict[str, Any] | None = None,
    ):
        self.scenario = scenario.clone()

        self.env = SkirmishEnv()
        self._state = self.env.reset(scenario=self.scenario, world=world)

        self._attacker_agent = self._agent_from_scenario(self.scenario, Team.ATTACKERS)
        self._defender_agent = self._agent_from_scenario(self.scenario, Team.DEFENDERS)

        self._done = self.env.is_game_over
        self._last_info: StepInfo | None = None
        self._final_world: WorldState | None = None

    # ------------------------------------------------------------------#
    # Properties
    # ------------------------------------------------------------------#
    @property
    def state(self) -> Dict[str, Any]:
        return self._state

    @property
    def done(self) -> bool:
        return self._done

    @property
    def turn(self) -> int:
        """Current turn pulled directly from the world state."""
        world: WorldState = self._state["world"]
        if world is None:
            raise RuntimeError("World state is not initialized")
        return world.turn

    @property
    def agents(self) -> Dict[Team, PreparedAgent]:
        return {Team.ATTACKERS: self._attacker_agent, Team.DEFENDERS: self._defender_agent}

    # ------------------------------------------------------------------#
    # Core API
    # ------------------------------------------------------------------#
    def step(self, injections: Optional[Dict[str, Any]] = None) -> Frame:
        """
        Execute one turn of the game and return a formatted frame.

        Both agents decide from the same pre-turn snapshot; their action
        maps are merged and applied together.

        Args:
            injections: Optional dict with 'attackers'/'defenders' keys for agent kwargs.

        Raises:
            RuntimeError: If the game is already finished and the final
                frame has been handed out
        """
        if self._done:
            if self._final_world is not None:
                final_world = self._final_world
                self._final_world = None
                return Frame(world=final_world, done=True)
            raise RuntimeError("Game is already finished")

        injections = injections or {}
        world_before: WorldState = self._state["world"].clone()
        attacker_actions, attacker_meta = self._attacker_agent.agent.get_actions(
            self._state,
            step_info=self._last_info,
            **injections.get("attackers", {}),
        )
        defender_actions, defender_meta = self._defender_agent.agent.get_actions(
            self._state,
            step_info=self._last_info,
            **injections.get("defenders", {}),
        )

        merged_actions = {**attacker_actions, **defender_actions}
        self._state, _rewards, self._done, self._last_info = self.env.step(merged_actions)

        if self._done:
            self._final_world = self._state["world"].clone()
            logger.info(
                "Game finished on turn %d: %s",
                self._final_world.turn,
                self._final_world.game_over_reason,
            )

        return Frame(
            world=world_before,
            actions=merged_actions,
            action_metadata={"attackers": attacker_meta, "defenders": defender_meta},
            step_info=self._last_info,
            done=self._done,
        )

    def run(self, *, include_history: bool = False) -> Frame | list[Frame]:
        """
        Run the full episode to completion.

        Returns the final frame, or the full frame history if include_history
        is True.
        """
        frames: list[Frame] = []
        while True:
            frame = self.step()
            frames.append(frame)
            if frame.done:
                break

        return frames if include_history else frames[-1]

    def current_frame(self) -> Frame:
        """
        Snapshot of the current world with no actions attached.
        """
        world: WorldState = self._state["world"]
        return Frame(world=world.clone(), done=self._done)

    # Helpers
    def _agent_from_scenario(self, scenario: Scenario, team: Team) -> PreparedAgent:
        if not scenario.agents:
            raise ValueError("Scenario is missing agent specs.")
        matches = [spec for spec in scenario.agents if spec.team == team]
        if not matches:
            raise ValueError(f"No AgentSpec found for team {team.name}")
        if len(matches) > 1:
            raise ValueError(f"Multiple AgentSpecs found for team {team.name}")
        return create_agent_from_spec(self._with_scenario_defaults(matches[0], scenario))

    @staticmethod
    def _with_scenario_defaults(spec: AgentSpec, scenario: Scenario) -> AgentSpec:
        """
        Agents judge ranges with the scenario's movement mode unless told
        otherwise; random agents inherit the scenario seed.
        """
        params = dict(spec.params)
        if "config" not in params:
            params.setdefault("movement", scenario.movement.value)
        if spec.type == "random" and scenario.seed is not None:
            params.setdefault("seed", scenario.seed)
        return AgentSpec(team=spec.team, type=spec.type, name=spec.name, params=params)
