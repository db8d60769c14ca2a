"""
Scenario system for creating and managing match setups.

Provides Python definitions for scenarios and JSON serialization.
"""

from __future__ import annotations

import json
import time
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from infra.logger import get_logger
from paths import PROJECT_ROOT, SCENARIO_STORAGE_DIR

from .core.types import GridPos, MovementMode, Team
from .entities.unit import Unit
from .world.grid import Grid

if TYPE_CHECKING:
    from agents.spec import AgentSpec

logger = get_logger(__name__)

MIN_TEAM_SIZE = 1
MAX_TEAM_SIZE = 2


class Scenario:
    """
    A complete, self-contained match definition.

    A scenario includes everything needed to initialize an environment:
    - Grid dimensions and obstacle cells
    - Movement mode (4- or 8-connected, which also fixes the range metric)
    - Turn cap
    - All units with explicit stats
    - Optional agent specs, one per team

    Example:
        scenario = Scenario(
            grid_width=6,
            grid_height=6,
            obstacles=[(2, 2), (2, 3)],
            units=[
                Unit.attacker(1, (0, 0)),
                Unit.defender(2, (5, 5)),
            ],
        )
        scenario.save_json("my_scenario.json")
        scenario = Scenario.load_json("my_scenario.json")
    """

    def __init__(
        self,
        grid_width: int = 10,
        grid_height: int = 10,
        obstacles: Optional[Iterable[GridPos]] = None,
        movement: MovementMode = MovementMode.ORTHOGONAL,
        max_turns: Optional[int] = 100,
        seed: Optional[int] = None,
        units: Optional[List[Unit]] = None,
        agents: Optional[List["AgentSpec"]] = None,
    ):
        """
        Args:
            grid_width: Width of the grid (columns)
            grid_height: Height of the grid (rows)
            obstacles: Blocked cells
            movement: Movement mode shared by the environment and agents
            max_turns: Optional hard cap on total turns before declaring a draw
            seed: Seed forwarded to randomized agents that do not set one
            units: Units of both teams (team carried on each unit)
            agents: Optional list of AgentSpec (one per team)

        Raises:
            ValueError: If the layout is invalid (see validate())
        """
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.obstacles: frozenset[GridPos] = frozenset(tuple(p) for p in (obstacles or ()))
        self.movement = movement
        self.max_turns = max_turns
        self.seed = seed
        self.units: List[Unit] = list(units or [])
        self.agents: Optional[List["AgentSpec"]] = agents
        self.validate()

    def build_grid(self) -> Grid:
        return Grid(self.grid_width, self.grid_height, self.obstacles)

    def validate(self) -> None:
        """
        Check the layout before any game starts.

        Raises:
            ValueError: On an out-of-bounds obstacle, a team with fewer than
                one or more than two units, duplicate ids or positions, or a
                unit outside the grid or on an obstacle
        """
        grid = self.build_grid()
        if self.max_turns is not None and self.max_turns <= 0:
            raise ValueError(f"max_turns must be positive or None, got {self.max_turns}")

        sizes = Counter(u.team for u in self.units)
        for team in Team:
            if not MIN_TEAM_SIZE <= sizes[team] <= MAX_TEAM_SIZE:
                raise ValueError(
                    f"Team {team.name} must have {MIN_TEAM_SIZE}-{MAX_TEAM_SIZE} units, got {sizes[team]}"
                )

        ids = Counter(u.id for u in self.units)
        duplicates = sorted(i for i, n in ids.items() if n > 1)
        if duplicates:
            raise ValueError(f"Duplicate unit ids: {duplicates}")

        seen: Dict[GridPos, Unit] = {}
        for unit in self.units:
            if not grid.in_bounds(unit.pos):
                raise ValueError(f"{unit.label()} is outside the {self.grid_width}x{self.grid_height} grid")
            if grid.is_blocked(unit.pos):
                raise ValueError(f"{unit.label()} is placed on an obstacle at {unit.pos}")
            if unit.pos in seen:
                raise ValueError(f"{unit.label()} shares {unit.pos} with {seen[unit.pos].label()}")
            seen[unit.pos] = unit

    def clone(self) -> Scenario:
        """Copy of this scenario that shares no mutable containers."""
        return Scenario.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-compatible dictionary.

        Returns:
            Dict with config, units, and optional agent specs
        """
        data: Dict[str, Any] = {
            "config": {
                "grid_width": self.grid_width,
                "grid_height": self.grid_height,
                "obstacles": [list(p) for p in sorted(self.obstacles)],
                "movement": self.movement.value,
                "max_turns": self.max_turns,
                "seed": self.seed,
            },
            "units": [u.to_dict() for u in self.units],
        }
        if self.agents is not None:
            data["agents"] = self._serialize_agents(self.agents)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Scenario:
        """
        Deserialize from to_dict() output (also accepts Unit objects in "units").

        Raises:
            ValueError: If "config" is missing or the layout is invalid
        """
        if "config" not in data:
            raise ValueError("Scenario must contain 'config' dictionary")
        config = data["config"]
        units = [u if isinstance(u, Unit) else Unit.from_dict(u) for u in data.get("units", [])]
        return cls(
            grid_width=config.get("grid_width", 10),
            grid_height=config.get("grid_height", 10),
            obstacles=[(int(p[0]), int(p[1])) for p in config.get("obstacles", [])],
            movement=MovementMode(config.get("movement", MovementMode.ORTHOGONAL.value)),
            max_turns=config.get("max_turns", 100),
            seed=config.get("seed"),
            units=units,
            agents=cls._deserialize_agents(data.get("agents")),
        )

    @staticmethod
    def _serialize_agents(agents: List["AgentSpec"]) -> List[Dict[str, Any]]:
        # Local import to avoid circular imports during module load
        from agents.spec import AgentSpec

        return [a.to_dict() if isinstance(a, AgentSpec) else dict(a) for a in agents]

    @staticmethod
    def _deserialize_agents(data: Any) -> Optional[List["AgentSpec"]]:
        if data is None:
            return None
        from agents.spec import AgentSpec

        agents_list: List[AgentSpec] = []
        for value in data:
            if isinstance(value, AgentSpec):
                agents_list.append(AgentSpec.from_dict(value.to_dict()))
            elif isinstance(value, dict):
                agents_list.append(AgentSpec.from_dict(value))
            else:
                raise TypeError(f"Agent definition must be AgentSpec or dict, got {type(value)}")
        return agents_list

    def save_json(self, filepath: str | Path | None = None, indent: int = 2) -> Path:
        """
        Save scenario to a JSON file.

        Args:
            filepath: Destination. If None, saves under storage/scenarios
                with a timestamped name. Relative paths resolve against the
                project root.
            indent: JSON indentation

        Returns:
            The path written
        """
        if filepath is None:
            SCENARIO_STORAGE_DIR.mkdir(parents=True, exist_ok=True)
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            filepath = SCENARIO_STORAGE_DIR / f"scenario_{timestamp}.json"
        else:
            filepath = Path(filepath)
            if not filepath.is_absolute():
                filepath = PROJECT_ROOT / filepath
            filepath.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Saving scenario JSON to %s", filepath)
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=indent, ensure_ascii=False)
        return filepath

    @classmethod
    def load_json(cls, filepath: str | Path) -> Scenario:
        with open(filepath, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __str__(self) -> str:
        return (
            f"Scenario({self.grid_width}x{self.grid_height}, obstacles={len(self.obstacles)}, "
            f"units={len(self.units)}, movement={self.movement.value})"
        )

    def __repr__(self) -> str:
        return f"Scenario(units={self.units}, obstacles={sorted(self.obstacles)})"


# =============================================================================
# SCENARIO BUILDERS
# =============================================================================

def create_open_field_scenario() -> Scenario:
    """
    Two attackers against two defenders on an open 10x10 field.

    Both sides are driven by the minimax agent.
    """
    from agents.spec import AgentSpec

    return Scenario(
        grid_width=10,
        grid_height=10,
        max_turns=60,
        seed=42,
        agents=[
            AgentSpec(team=Team.ATTACKERS, type="minimax", name="Attacker Minimax", params={"ply_limit": 2}),
            AgentSpec(team=Team.DEFENDERS, type="minimax", name="Defender Minimax", params={"ply_limit": 2}),
        ],
        units=[
            Unit.attacker(1, (0, 4)),
            Unit.attacker(2, (0, 5)),
            Unit.defender(3, (9, 4)),
            Unit.defender(4, (9, 5)),
        ],
    )


def create_wall_scenario() -> Scenario:
    """
    Attackers must walk around a wall with a single gap to reach the defenders.

    The wall makes the minimax evaluation switch to A* distances.
    """
    from agents.spec import AgentSpec

    wall = [(4, y) for y in range(0, 5)]
    return Scenario(
        grid_width=8,
        grid_height=6,
        obstacles=wall,
        max_turns=80,
        seed=7,
        agents=[
            AgentSpec(team=Team.ATTACKERS, type="minimax", name="Attacker Minimax", params={"ply_limit": 2}),
            AgentSpec(team=Team.DEFENDERS, type="pursuit", name="Defender Pursuit"),
        ],
        units=[
            Unit.attacker(1, (1, 1)),
            Unit.attacker(2, (1, 3)),
            Unit.defender(3, (6, 2)),
        ],
    )


if __name__ == "__main__":
    # Run via `python -m arena.scenario` to write the builders' scenarios to storage
    from infra.logger import configure_logging

    configure_logging(level="INFO", json=True)
    create_open_field_scenario().save_json(SCENARIO_STORAGE_DIR / "open_field.json")
    create_wall_scenario().save_json(SCENARIO_STORAGE_DIR / "wall.json")
