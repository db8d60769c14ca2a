"""
SkirmishEnv - Main environment interface.

A gym-like loop for melee attackers versus ranged defenders on a grid
with obstacles.

Usage:
    from arena import SkirmishEnv
    from arena.scenario import create_open_field_scenario

    env = SkirmishEnv()
    state = env.reset(scenario=create_open_field_scenario())

    while not done:
        actions, _metadata = agent.get_actions(state)
        state, rewards, done, info = env.step(actions)

    print(f"Winner: {state['world'].winner}")

State Structure:
    {
        "world": WorldState  # Shared snapshot, both teams see everything
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from infra.logger import get_logger

from .core.actions import Action
from .core.types import GameResult, MovementMode, Team
from .mechanics import (
    ActionResolutionResult,
    CombatResolutionResult,
    CombatResolver,
    MovementResolver,
    VictoryConditions,
    VictoryResult,
)
from .scenario import MAX_TEAM_SIZE, MIN_TEAM_SIZE, Scenario
from .world import Grid, WorldState

logger = get_logger(__name__)


@dataclass
class StepInfo:
    """
    Per-step metadata returned at the end of each step.

    Contains the raw movement and combat resolution outputs plus the
    victory check result. The full world is still returned in `state`.
    """

    movement: ActionResolutionResult
    combat: CombatResolutionResult
    victory: VictoryResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "movement": self.movement.to_dict(),
            "combat": self.combat.to_dict(),
            "victory": self.victory.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StepInfo":
        return cls(
            movement=ActionResolutionResult.from_dict(data["movement"]),
            combat=CombatResolutionResult.from_dict(data["combat"]),
            victory=VictoryResult.from_dict(data["victory"]),
        )


class SkirmishEnv:
    """
    Orchestrates movement, combat and victory checks over a WorldState.

    Attributes:
        world: Current world state (None until reset())
        movement: Movement mode of the loaded scenario
    """

    def __init__(self):
        self.world: Optional[WorldState] = None
        self._scenario: Optional[Scenario] = None
        self.movement = MovementMode.ORTHOGONAL

        self._movement = MovementResolver()
        self._combat = CombatResolver(self.movement)
        self._victory_checker: Optional[VictoryConditions] = None

    def reset(
        self,
        scenario: Scenario | Dict[str, Any],
        world: WorldState | Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """
        Reset the environment with a scenario, optionally resuming a world.

        Args:
            scenario: Scenario instance or dict from Scenario.to_dict()
            world: Optional WorldState (or its dict) to resume from instead
                of placing the scenario's units on a fresh grid

        Returns:
            Initial state (same structure as step())

        Raises:
            ValueError: If the scenario is invalid, or the provided world's
                grid does not match the scenario's, or its roster breaks the
                same placement rules a scenario enforces
        """
        if isinstance(scenario, Scenario):
            scenario_obj = scenario.clone()
        else:
            scenario_obj = Scenario.from_dict(scenario)

        self._scenario = scenario_obj
        self.movement = scenario_obj.movement
        self._combat = CombatResolver(self.movement)
        self._victory_checker = VictoryConditions(max_turns=scenario_obj.max_turns)

        if world is None:
            self.world = WorldState(grid=scenario_obj.build_grid())
            for unit in scenario_obj.units:
                self.world.add_unit(unit)
        else:
            # Rebuilt through add_unit so placement is checked unit by unit.
            world_obj = WorldState.from_dict(world.to_dict() if isinstance(world, WorldState) else world)
            expected: Grid = scenario_obj.build_grid()
            if world_obj.grid != expected:
                raise ValueError(
                    "Provided world grid does not match scenario: "
                    f"world=({world_obj.grid.width}x{world_obj.grid.height}, "
                    f"{len(world_obj.grid.obstacles)} obstacles), "
                    f"scenario=({expected.width}x{expected.height}, {len(expected.obstacles)} obstacles)"
                )
            self._check_roster(world_obj)
            self.world = world_obj

        logger.debug("Environment reset: %s", scenario_obj)
        return self._build_state()

    def step(self, actions: Dict[int, Action]) -> Tuple[Dict[str, Any], Dict[Team, float], bool, StepInfo]:
        """
        Execute one turn.

        Turn order:
        1. Movement (blocked, occupied and contested moves are rejected)
        2. Combat (validated against post-move positions, damage is simultaneous)
        3. Victory check

        Args:
            actions: Map of unit_id -> Action for both teams

        Returns:
            Tuple of (state, rewards, done, info)

        Raises:
            RuntimeError: If reset() hasn't been called or the game is over
        """
        if self.world is None:
            raise RuntimeError("Must call reset() before calling step()")
        if self.world.game_over:
            raise RuntimeError("Game is already over; call reset() to start a new one")

        self.world.turn += 1

        movement_results = self._movement.resolve_actions(self.world, actions)
        combat_results = self._combat.resolve_combat(self.world, actions)
        victory_result = self._victory_checker.check_all(self.world)

        if victory_result.is_game_over:
            self.world.game_over = True
            self.world.winner = victory_result.winner
            self.world.game_over_reason = victory_result.reason

        for result in movement_results.move_results:
            logger.debug("turn %d move: %s", self.world.turn, result.log)
        for result in combat_results.combat_results:
            logger.debug("turn %d combat: %s", self.world.turn, result.log)
        for line in combat_results.death_logs:
            logger.info("turn %d: %s", self.world.turn, line)
        if victory_result.is_game_over:
            logger.info("Game over on turn %d: %s", self.world.turn, victory_result.reason)

        info = StepInfo(movement=movement_results, combat=combat_results, victory=victory_result)
        return self._build_state(), self._calculate_rewards(victory_result), victory_result.is_game_over, info

    def _build_state(self) -> Dict[str, Any]:
        return {"world": self.world}

    @staticmethod
    def _check_roster(world: WorldState) -> None:
        """Resumed worlds keep the scenario's team sizes; the dead still count."""
        for team in Team:
            size = len(world.get_team_units(team, alive_only=False))
            if not MIN_TEAM_SIZE <= size <= MAX_TEAM_SIZE:
                raise ValueError(
                    f"Team {team.name} must have {MIN_TEAM_SIZE}-{MAX_TEAM_SIZE} units, got {size}"
                )

    def _calculate_rewards(self, victory_result: VictoryResult) -> Dict[Team, float]:
        """
        Win: +1.0, loss: -1.0, draw or in progress: 0.0.
        """
        if victory_result.result == GameResult.ATTACKERS_WIN:
            return {Team.ATTACKERS: 1.0, Team.DEFENDERS: -1.0}
        if victory_result.result == GameResult.DEFENDERS_WIN:
            return {Team.ATTACKERS: -1.0, Team.DEFENDERS: 1.0}
        return {Team.ATTACKERS: 0.0, Team.DEFENDERS: 0.0}

    @property
    def scenario(self) -> Optional[Scenario]:
        return self._scenario

    @property
    def is_game_over(self) -> bool:
        return self.world is not None and self.world.game_over

    @property
    def winner(self) -> Optional[Team]:
        """Winner (None if draw or in progress)."""
        return self.world.winner if self.world else None
