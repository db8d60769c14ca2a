"""
Live environment: turn resolution, victory conditions, scenarios and the
step-by-step runner.
"""

import json
import tempfile
import unittest
from pathlib import Path

from agents.spec import AgentSpec
from arena import Scenario, SkirmishEnv
from arena.core.actions import Attack, Move, action_from_dict
from arena.core.types import GameResult, MoveDir, MovementMode, Team
from arena.entities.unit import Unit
from arena.scenario import create_open_field_scenario, create_wall_scenario
from game_runner import GameRunner


def _scenario(units, obstacles=(), width=6, height=6, max_turns=20, movement=MovementMode.ORTHOGONAL):
    return Scenario(
        grid_width=width,
        grid_height=height,
        obstacles=obstacles,
        movement=movement,
        max_turns=max_turns,
        units=units,
    )


class TestActions(unittest.TestCase):
    def test_actions_rebuild_from_their_dicts(self) -> None:
        for action in (Move(4, MoveDir.SOUTH), Attack(1, 7)):
            self.assertEqual(action_from_dict(action.to_dict()), action)

    def test_malformed_action_payloads(self) -> None:
        bad = [
            {"type": "FLY", "unit_id": 1},
            {"type": "MOVE", "unit_id": 1, "params": {}},
            {"type": "ATTACK", "params": {"target_id": 2}},
        ]
        for payload in bad:
            with self.subTest(payload=payload), self.assertRaises(ValueError):
                action_from_dict(payload)


class TestScenario(unittest.TestCase):
    def test_rejects_oversize_team(self) -> None:
        units = [Unit.attacker(i, (0, i)) for i in range(1, 4)] + [Unit.defender(9, (5, 5))]
        with self.assertRaises(ValueError):
            _scenario(units)

    def test_rejects_empty_team(self) -> None:
        with self.assertRaises(ValueError):
            _scenario([Unit.attacker(1, (0, 0))])

    def test_rejects_unit_on_obstacle(self) -> None:
        with self.assertRaises(ValueError):
            _scenario([Unit.attacker(1, (2, 2)), Unit.defender(2, (5, 5))], obstacles=[(2, 2)])

    def test_rejects_duplicate_ids_and_cells(self) -> None:
        with self.assertRaises(ValueError):
            _scenario([Unit.attacker(1, (0, 0)), Unit.defender(1, (5, 5))])
        with self.assertRaises(ValueError):
            _scenario([Unit.attacker(1, (0, 0)), Unit.defender(2, (0, 0))])

    def test_rejects_out_of_bounds(self) -> None:
        with self.assertRaises(ValueError):
            _scenario([Unit.attacker(1, (6, 0)), Unit.defender(2, (5, 5))])
        with self.assertRaises(ValueError):
            _scenario([Unit.attacker(1, (0, 0)), Unit.defender(2, (5, 5))], obstacles=[(9, 9)])

    def test_json_file_round_trip(self) -> None:
        scenario = create_wall_scenario()
        with tempfile.TemporaryDirectory() as tmp:
            path = scenario.save_json(Path(tmp) / "wall.json")
            loaded = Scenario.load_json(path)
            with open(path) as f:
                self.assertEqual(json.load(f), scenario.to_dict())
        self.assertEqual(loaded.to_dict(), scenario.to_dict())
        self.assertEqual(loaded.agents[1].type, "pursuit")

    def test_clone_is_independent(self) -> None:
        scenario = create_open_field_scenario()
        clone = scenario.clone()
        clone.units.pop()
        clone.agents[0].params["ply_limit"] = 4
        self.assertEqual(len(scenario.units), 4)
        self.assertEqual(scenario.agents[0].params["ply_limit"], 2)

    def test_missing_config_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Scenario.from_dict({"units": []})


class TestStep(unittest.TestCase):
    def setUp(self) -> None:
        self.env = SkirmishEnv()

    def test_step_before_reset_raises(self) -> None:
        with self.assertRaises(RuntimeError):
            self.env.step({})

    def test_move_onto_obstacle_or_unit_is_rejected(self) -> None:
        self.env.reset(_scenario(
            [Unit.attacker(1, (1, 1)), Unit.attacker(2, (2, 1)), Unit.defender(3, (5, 5))],
            obstacles=[(1, 0)],
        ))
        state, _, _, info = self.env.step({1: Move(1, MoveDir.NORTH), 2: Move(2, MoveDir.WEST)})
        world = state["world"]
        self.assertEqual(world.get_unit(1).pos, (1, 1))
        self.assertEqual(world.get_unit(2).pos, (2, 1))
        self.assertFalse(info.movement.movement_occurred)

    def test_contested_cell_blocks_both_units(self) -> None:
        self.env.reset(_scenario([Unit.attacker(1, (0, 1)), Unit.attacker(2, (2, 1)), Unit.defender(3, (5, 5))]))
        state, _, _, info = self.env.step({1: Move(1, MoveDir.EAST), 2: Move(2, MoveDir.WEST)})
        world = state["world"]
        self.assertEqual(world.get_unit(1).pos, (0, 1))
        self.assertEqual(world.get_unit(2).pos, (2, 1))
        self.assertEqual([r.success for r in info.movement.move_results], [False, False])

    def test_attack_is_checked_after_movement(self) -> None:
        self.env.reset(_scenario([
            Unit(1, Team.ATTACKERS, (1, 1), hp=10, damage=3, attack_range=1),
            Unit(2, Team.DEFENDERS, (2, 1), hp=10, damage=3, attack_range=1),
        ]))
        state, _, _, info = self.env.step({1: Attack(1, 2), 2: Move(2, MoveDir.EAST)})
        self.assertEqual(state["world"].get_unit(2).hp, 10)
        self.assertFalse(info.combat.combat_occurred)

    def test_simultaneous_kill_is_a_draw(self) -> None:
        self.env.reset(_scenario([
            Unit(1, Team.ATTACKERS, (1, 1), hp=5, damage=8, attack_range=1),
            Unit(2, Team.DEFENDERS, (2, 1), hp=5, damage=6, attack_range=3),
        ]))
        state, rewards, done, info = self.env.step({1: Attack(1, 2), 2: Attack(2, 1)})
        self.assertTrue(done)
        self.assertEqual(info.victory.result, GameResult.DRAW)
        self.assertEqual(sorted(info.combat.killed_unit_ids), [1, 2])
        self.assertEqual(rewards, {Team.ATTACKERS: 0.0, Team.DEFENDERS: 0.0})
        self.assertIsNone(state["world"].winner)

    def test_elimination_wins_and_game_cannot_continue(self) -> None:
        self.env.reset(_scenario([
            Unit(1, Team.ATTACKERS, (1, 1), hp=20, damage=8, attack_range=1),
            Unit(2, Team.DEFENDERS, (2, 1), hp=8, damage=1, attack_range=3),
        ]))
        state, rewards, done, info = self.env.step({1: Attack(1, 2)})
        self.assertTrue(done)
        self.assertEqual(state["world"].winner, Team.ATTACKERS)
        self.assertEqual(rewards[Team.ATTACKERS], 1.0)
        self.assertEqual(info.victory.result, GameResult.ATTACKERS_WIN)
        with self.assertRaises(RuntimeError):
            self.env.step({})

    def test_turn_cap_is_a_draw(self) -> None:
        self.env.reset(_scenario([Unit.attacker(1, (0, 0)), Unit.defender(2, (5, 5))], max_turns=2))
        _, _, done, _ = self.env.step({})
        self.assertFalse(done)
        _, _, done, info = self.env.step({})
        self.assertTrue(done)
        self.assertEqual(info.victory.result, GameResult.DRAW)

    def test_diagonal_mode_uses_chebyshev_range(self) -> None:
        units = [
            Unit(1, Team.ATTACKERS, (1, 1), hp=20, damage=4, attack_range=1),
            Unit(2, Team.DEFENDERS, (2, 2), hp=20, damage=1, attack_range=1),
        ]
        self.env.reset(_scenario(units, movement=MovementMode.DIAGONAL))
        state, _, _, _ = self.env.step({1: Attack(1, 2)})
        self.assertEqual(state["world"].get_unit(2).hp, 16)

        self.env.reset(_scenario(units))
        state, _, _, _ = self.env.step({1: Attack(1, 2)})
        self.assertEqual(state["world"].get_unit(2).hp, 20)

    def test_reset_resumes_from_world(self) -> None:
        scenario = _scenario([Unit.attacker(1, (0, 0)), Unit.defender(2, (5, 5))])
        self.env.reset(scenario)
        state, _, _, _ = self.env.step({1: Move(1, MoveDir.EAST)})
        saved = state["world"].to_dict()

        other = SkirmishEnv()
        resumed = other.reset(scenario, world=saved)["world"]
        self.assertEqual(resumed.turn, 1)
        self.assertEqual(resumed.get_unit(1).pos, (1, 0))

        with self.assertRaises(ValueError):
            other.reset(_scenario([Unit.attacker(1, (0, 0)), Unit.defender(2, (5, 5))], width=7), world=saved)

    def test_resumed_world_placement_is_checked(self) -> None:
        scenario = create_wall_scenario()
        grid = scenario.build_grid().to_dict()
        defender = Unit.defender(3, (6, 2)).to_dict()
        bad_rosters = {
            "on_obstacle": [Unit.attacker(1, (4, 0)).to_dict(), defender],
            "shared_cell": [Unit.attacker(1, (1, 1)).to_dict(), Unit.attacker(2, (1, 1)).to_dict(), defender],
            "oversize_team": [Unit.attacker(i, (0, i)).to_dict() for i in (1, 2, 5)] + [defender],
            "empty_team": [defender],
        }
        for name, units in bad_rosters.items():
            with self.subTest(name), self.assertRaises(ValueError):
                self.env.reset(scenario, world={"grid": grid, "units": units})

    def test_resumed_world_object_is_checked(self) -> None:
        scenario = _scenario([Unit.attacker(1, (0, 0)), Unit.defender(2, (5, 5))])
        state = self.env.reset(scenario)
        world = state["world"].clone()
        world.units[3] = Unit.defender(3, (5, 5))
        with self.assertRaises(ValueError):
            SkirmishEnv().reset(scenario, world=world)

    def test_dead_unit_may_share_a_cell(self) -> None:
        scenario = _scenario([Unit.attacker(1, (0, 0)), Unit.defender(2, (5, 5))])
        world = {
            "grid": scenario.build_grid().to_dict(),
            "units": [
                Unit.attacker(1, (0, 0), hp=0).to_dict(),
                Unit.defender(2, (0, 0)).to_dict(),
            ],
            "turn": 4,
        }
        resumed = self.env.reset(scenario, world=world)["world"]
        self.assertEqual(resumed.occupied_cells(), {(0, 0): 2})


class TestUnit(unittest.TestCase):
    def test_list_position_becomes_tuple(self) -> None:
        unit = Unit(1, Team.ATTACKERS, [2, 3], hp=10, damage=2, attack_range=1)
        self.assertEqual(unit.pos, (2, 3))
        self.assertEqual({unit.pos: unit.id}, {(2, 3): 1})
        self.assertEqual(unit.moved_to([1, 3]).pos, (1, 3))


class TestGameRunner(unittest.TestCase):
    def test_current_frame_does_not_advance(self) -> None:
        runner = GameRunner(create_wall_scenario())
        frame = runner.current_frame()
        self.assertFalse(frame.done)
        self.assertIsNone(frame.actions)
        self.assertEqual(runner.turn, 0)

    def test_wall_scenario_runs_to_completion(self) -> None:
        scenario = create_wall_scenario()
        scenario.max_turns = 12
        runner = GameRunner(scenario)
        frames = runner.run(include_history=True)

        self.assertTrue(frames[-1].done)
        self.assertTrue(runner.done)
        self.assertLessEqual(runner.turn, 12)
        first = frames[0].to_dict()
        self.assertEqual(first["turn"], 0)
        self.assertIn("attackers", first["action_metadata"])

        # The finished world is handed out once, then the runner refuses to step.
        terminal = runner.step()
        self.assertTrue(terminal.done)
        self.assertIsNone(terminal.actions)
        with self.assertRaises(RuntimeError):
            runner.step()

    def test_agents_inherit_scenario_movement(self) -> None:
        scenario = _scenario(
            [Unit.attacker(1, (0, 0)), Unit.defender(2, (5, 5))],
            movement=MovementMode.DIAGONAL,
        )
        scenario.agents = [
            AgentSpec(team=Team.ATTACKERS, type="minimax", params={"ply_limit": 1}),
            AgentSpec(team=Team.DEFENDERS, type="random"),
        ]
        runner = GameRunner(scenario)
        agents = runner.agents
        self.assertEqual(agents[Team.ATTACKERS].agent.config.movement, MovementMode.DIAGONAL)
        self.assertEqual(agents[Team.DEFENDERS].agent.movement, MovementMode.DIAGONAL)

    def test_missing_agent_spec_is_rejected(self) -> None:
        scenario = _scenario([Unit.attacker(1, (0, 0)), Unit.defender(2, (5, 5))])
        scenario.agents = [AgentSpec(team=Team.ATTACKERS, type="random")]
        with self.assertRaises(ValueError):
            GameRunner(scenario)


if __name__ == "__main__":
    unittest.main()
