"""
Agent layer: search configuration, the registry/factory, and the three
registered agents playing from a live world snapshot.
"""

import unittest

from pydantic import ValidationError

from agents import (
    AgentSpec,
    MinimaxAgent,
    PursuitAgent,
    RandomAgent,
    SearchConfig,
    create_agent_from_spec,
    registered_agent_types,
)
from arena.core.actions import Attack, Move
from arena.core.types import ActionType, DistanceMetric, MoveDir, MovementMode, Team
from arena.entities.unit import Unit
from arena.mechanics.rules import legal_actions
from arena.world import Grid, WorldState


def _world(grid, *units):
    world = WorldState(grid=grid)
    for unit in units:
        world.add_unit(unit)
    return world


class TestSearchConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = SearchConfig()
        self.assertEqual(config.ply_limit, 2)
        self.assertEqual(config.movement, MovementMode.ORTHOGONAL)
        self.assertEqual(config.straight_line, DistanceMetric.EUCLIDEAN)
        self.assertTrue(config.pruning)

    def test_modes_accept_their_values(self) -> None:
        config = SearchConfig(movement="diagonal", straight_line="chebyshev")
        self.assertEqual(config.movement, MovementMode.DIAGONAL)
        self.assertEqual(config.straight_line, DistanceMetric.CHEBYSHEV)

    def test_rejects_malformed_settings(self) -> None:
        bad = [
            {"ply_limit": 0},
            {"ply_limit": -3},
            {"movement": "hex"},
            {"straight_line": "manhattan"},
            {"depth": 2},
        ]
        for params in bad:
            with self.subTest(params=params), self.assertRaises(ValidationError):
                SearchConfig(**params)

    def test_is_frozen(self) -> None:
        config = SearchConfig()
        with self.assertRaises(ValidationError):
            config.ply_limit = 5


class TestFactory(unittest.TestCase):
    def test_known_types_are_registered(self) -> None:
        self.assertTrue({"minimax", "pursuit", "random"} <= set(registered_agent_types()))

    def test_builds_minimax_agent_from_params(self) -> None:
        prepared = create_agent_from_spec(
            AgentSpec(team=Team.DEFENDERS, type="minimax", name="D", params={"ply_limit": 3})
        )
        self.assertIsInstance(prepared.agent, MinimaxAgent)
        self.assertEqual(prepared.agent.config.ply_limit, 3)
        self.assertEqual(prepared.agent.team, Team.DEFENDERS)
        self.assertEqual(prepared.agent.name, "D")

    def test_invalid_params_raise_value_error(self) -> None:
        with self.assertRaises(ValueError):
            create_agent_from_spec(AgentSpec(team=Team.ATTACKERS, type="minimax", params={"ply_limit": 0}))

    def test_unknown_type_raises_value_error(self) -> None:
        with self.assertRaises(ValueError):
            create_agent_from_spec(AgentSpec(team=Team.ATTACKERS, type="telepath"))

    def test_config_and_params_are_exclusive(self) -> None:
        with self.assertRaises(TypeError):
            MinimaxAgent(Team.ATTACKERS, config=SearchConfig(), ply_limit=2)

    def test_spec_round_trip_accepts_team_names(self) -> None:
        spec = AgentSpec.from_dict({"team": "attackers", "type": "random", "params": {"seed": 3}})
        self.assertEqual(spec.team, Team.ATTACKERS)
        self.assertEqual(AgentSpec.from_dict(spec.to_dict()), spec)

    def test_spec_requires_team_and_type(self) -> None:
        with self.assertRaises(ValueError):
            AgentSpec.from_dict({"type": "random"})


class TestMinimaxAgent(unittest.TestCase):
    def setUp(self) -> None:
        self.world = _world(
            Grid(6, 6),
            Unit(1, Team.ATTACKERS, (0, 0), hp=20, damage=4, attack_range=1),
            Unit(2, Team.ATTACKERS, (0, 3), hp=20, damage=4, attack_range=1),
            Unit(3, Team.DEFENDERS, (5, 2), hp=10, damage=3, attack_range=3),
        )

    def test_attacker_commands_only_its_units(self) -> None:
        agent = MinimaxAgent(Team.ATTACKERS, ply_limit=2)
        actions, meta = agent.get_actions({"world": self.world})
        self.assertTrue(set(actions) <= {1, 2})
        self.assertEqual(meta["policy"], "minimax")
        self.assertEqual(meta["ply_limit"], 2)
        self.assertGreater(meta["search"]["nodes"], 0)

    def test_defender_plays_minimizing_root(self) -> None:
        agent = MinimaxAgent(Team.DEFENDERS, config={"ply_limit": 1})
        root = agent.build_root(self.world)
        self.assertFalse(root.is_max)
        actions, _ = agent.get_actions({"world": self.world})
        self.assertEqual(set(actions), {3})

    def test_actions_are_legal_in_the_world(self) -> None:
        agent = MinimaxAgent(Team.ATTACKERS, ply_limit=2)
        actions, _ = agent.get_actions({"world": self.world})
        everyone = self.world.get_alive_units()
        for unit_id, action in actions.items():
            unit = self.world.get_unit(unit_id)
            self.assertIn(action, legal_actions(unit, everyone, self.world.grid))


class TestPursuitAgent(unittest.TestCase):
    def test_walks_around_wall(self) -> None:
        world = _world(
            Grid(4, 3, frozenset({(0, 1), (1, 1), (2, 1)})),
            Unit.attacker(1, (0, 0)),
            Unit.defender(2, (0, 2)),
        )
        actions, _ = PursuitAgent(Team.ATTACKERS).get_actions({"world": world})
        self.assertEqual(actions, {1: Move(1, MoveDir.EAST)})

    def test_attacks_weakest_enemy_in_range(self) -> None:
        world = _world(
            Grid(5, 5),
            Unit(1, Team.ATTACKERS, (2, 2), hp=20, damage=5, attack_range=1),
            Unit(2, Team.DEFENDERS, (2, 1), hp=9, damage=1, attack_range=3),
            Unit(3, Team.DEFENDERS, (3, 2), hp=4, damage=1, attack_range=3),
        )
        actions, _ = PursuitAgent(Team.ATTACKERS).get_actions({"world": world})
        self.assertEqual(actions[1], Attack(1, 3))

    def test_teammates_do_not_claim_the_same_cell(self) -> None:
        world = _world(
            Grid(5, 3),
            Unit.attacker(1, (0, 1)),
            Unit.attacker(2, (1, 0)),
            Unit.defender(3, (4, 1)),
        )
        actions, _ = PursuitAgent(Team.ATTACKERS).get_actions({"world": world})
        destinations = [a.direction.apply(world.get_unit(uid).pos)
                        for uid, a in actions.items() if a.type == ActionType.MOVE]
        self.assertEqual(len(destinations), len(set(destinations)))


class TestRandomAgent(unittest.TestCase):
    def test_samples_only_legal_actions(self) -> None:
        world = _world(
            Grid(4, 4, frozenset({(1, 1)})),
            Unit.attacker(1, (0, 1)),
            Unit.attacker(2, (1, 0)),
            Unit.defender(3, (3, 3)),
        )
        everyone = world.get_alive_units()
        agent = RandomAgent(Team.ATTACKERS, seed=7)
        for _ in range(20):
            actions, meta = agent.get_actions({"world": world})
            self.assertEqual(meta["policy"], "random")
            for unit_id, action in actions.items():
                self.assertIn(action, legal_actions(world.get_unit(unit_id), everyone, world.grid))

    def test_seed_makes_choices_reproducible(self) -> None:
        world = _world(Grid(5, 5), Unit.attacker(1, (2, 2)), Unit.defender(2, (4, 4)))
        a = RandomAgent(Team.ATTACKERS, seed=11)
        b = RandomAgent(Team.ATTACKERS, seed=11)
        for _ in range(10):
            self.assertEqual(a.get_actions({"world": world})[0], b.get_actions({"world": world})[0])


if __name__ == "__main__":
    unittest.main()
