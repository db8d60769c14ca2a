"""
Alpha-beta search: leaf handling, agreement with plain minimax, and the
behaviour of small hand-checked positions.
"""

import math
import unittest

from agents.minimax_agent import AlphaBetaSearch, CombatState, SearchNode, order_successors
from arena.core.types import ActionType, DistanceMetric, MovementMode, Team
from arena.entities.unit import Unit
from arena.world import Grid


def _two_v_one(grid=None):
    """Two melee attackers against one ranged defender."""
    return CombatState(
        grid or Grid(5, 5),
        attackers=[
            Unit(1, Team.ATTACKERS, (0, 0), hp=10, damage=2, attack_range=1),
            Unit(2, Team.ATTACKERS, (0, 2), hp=10, damage=2, attack_range=1),
        ],
        defenders=[Unit(3, Team.DEFENDERS, (4, 1), hp=10, damage=3, attack_range=3)],
    )


def _two_v_two(grid):
    return CombatState(
        grid,
        attackers=[
            Unit(1, Team.ATTACKERS, (0, 1), hp=12, damage=4, attack_range=1),
            Unit(2, Team.ATTACKERS, (1, 3), hp=12, damage=4, attack_range=1),
        ],
        defenders=[
            Unit(3, Team.DEFENDERS, (3, 1), hp=6, damage=2, attack_range=2),
            Unit(4, Team.DEFENDERS, (4, 3), hp=6, damage=2, attack_range=2),
        ],
    )


def _action_key(node: SearchNode):
    return sorted((uid, str(a)) for uid, a in node.actions.items())


class TestLeaves(unittest.TestCase):
    def test_zero_ply_returns_root(self) -> None:
        root = _two_v_one()
        best = AlphaBetaSearch(ply_limit=0).best_child(root)
        self.assertIs(best.state, root)
        self.assertEqual(best.actions, {})
        self.assertEqual(best.utility, root.utility())

    def test_negative_ply_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            AlphaBetaSearch(ply_limit=-1)

    def test_no_joint_action_is_a_leaf(self) -> None:
        grid = Grid(3, 3, frozenset({(1, 0), (0, 1)}))
        root = CombatState(
            grid,
            attackers=[Unit(1, Team.ATTACKERS, (0, 0), hp=10, damage=2, attack_range=1)],
            defenders=[Unit(2, Team.DEFENDERS, (2, 2), hp=10, damage=3, attack_range=1)],
        )
        search = AlphaBetaSearch(ply_limit=3)
        best = search.best_child(root)
        self.assertIs(best.state, root)
        self.assertEqual(search.stats.leaves, 1)

    def test_terminal_root_is_a_leaf(self) -> None:
        root = CombatState(
            Grid(3, 3),
            attackers=[Unit(1, Team.ATTACKERS, (0, 0), hp=10, damage=2, attack_range=1)],
            defenders=[],
        )
        best = AlphaBetaSearch(ply_limit=2).best_child(root)
        self.assertIs(best.state, root)

    def test_side_flag_mismatch_raises(self) -> None:
        root = _two_v_one()
        search = AlphaBetaSearch(ply_limit=1)
        alpha = SearchNode({}, CombatState.sentinel(-math.inf))
        beta = SearchNode({}, CombatState.sentinel(math.inf))
        with self.assertRaises(ValueError):
            search.search(SearchNode({}, root), 0, False, alpha, beta)


class TestPruningAgreement(unittest.TestCase):
    def _assert_agree(self, root: CombatState, ply: int) -> None:
        pruned = AlphaBetaSearch(ply_limit=ply, pruning=True)
        plain = AlphaBetaSearch(ply_limit=ply, pruning=False)
        a = pruned.best_child(root)
        b = plain.best_child(root)
        self.assertAlmostEqual(a.utility, b.utility)
        self.assertEqual(_action_key(a), _action_key(b))
        self.assertLessEqual(pruned.stats.nodes, plain.stats.nodes)

    def test_open_field(self) -> None:
        for ply in (1, 2, 3):
            with self.subTest(ply=ply):
                self._assert_agree(_two_v_two(Grid(5, 5)), ply)

    def test_with_obstacles(self) -> None:
        grid = Grid(5, 5, frozenset({(2, 1), (2, 2)}))
        for ply in (1, 2):
            with self.subTest(ply=ply):
                self._assert_agree(_two_v_two(grid), ply)

    def test_minimizing_root(self) -> None:
        root = _two_v_two(Grid(5, 5))
        defenders_turn = root.apply_actions({})
        self.assertFalse(defenders_turn.is_max)
        self._assert_agree(defenders_turn, 2)

    def test_without_move_ordering(self) -> None:
        root = _two_v_one()
        a = AlphaBetaSearch(ply_limit=2, order_moves=False).best_child(root)
        b = AlphaBetaSearch(ply_limit=2, pruning=False, order_moves=False).best_child(root)
        self.assertAlmostEqual(a.utility, b.utility)
        self.assertEqual(_action_key(a), _action_key(b))


class TestDecisions(unittest.TestCase):
    def test_attackers_close_in_on_open_board(self) -> None:
        root = _two_v_one()
        defender = root.defenders[0]
        best = AlphaBetaSearch(ply_limit=2).best_child(root)

        closer = []
        for unit in root.attackers:
            action = best.actions.get(unit.id)
            if action is None or action.type != ActionType.MOVE:
                continue
            before = DistanceMetric.EUCLIDEAN.between(unit.pos, defender.pos)
            after = DistanceMetric.EUCLIDEAN.between(action.direction.apply(unit.pos), defender.pos)
            closer.append(after < before)
        self.assertTrue(any(closer))

    def test_attackers_hold_off_outside_defender_range(self) -> None:
        # Every closer cell is within the defender's range 3, and one hit
        # costs more than one step of distance gains.
        root = CombatState(
            Grid(7, 7),
            attackers=[
                Unit(1, Team.ATTACKERS, (0, 4), hp=10, damage=2, attack_range=1),
                Unit(2, Team.ATTACKERS, (1, 3), hp=10, damage=2, attack_range=1),
            ],
            defenders=[Unit(3, Team.DEFENDERS, (0, 0), hp=10, damage=3, attack_range=3)],
        )
        best = AlphaBetaSearch(ply_limit=2).best_child(root)
        self.assertEqual(_action_key(best), [(1, "MOVE(#1 EAST)"), (2, "MOVE(#2 EAST)")])
        self.assertAlmostEqual(best.utility, -167.162, places=2)

    def test_lethal_attack_is_taken(self) -> None:
        root = CombatState(
            Grid(4, 4),
            attackers=[Unit(1, Team.ATTACKERS, (1, 1), hp=20, damage=8, attack_range=1)],
            defenders=[Unit(2, Team.DEFENDERS, (2, 1), hp=5, damage=3, attack_range=3)],
        )
        best = AlphaBetaSearch(ply_limit=2).best_child(root)
        self.assertEqual(best.actions[1].type, ActionType.ATTACK)
        self.assertEqual(best.actions[1].target_id, 2)

    def test_stats_are_reset_per_decision(self) -> None:
        search = AlphaBetaSearch(ply_limit=2)
        search.best_child(_two_v_one())
        first = search.stats.nodes
        search.best_child(_two_v_one())
        self.assertEqual(search.stats.nodes, first)
        self.assertGreater(first, 1)


class TestOrdering(unittest.TestCase):
    def test_best_first_for_each_side(self) -> None:
        children = _two_v_one().successors()
        for maximizing in (True, False):
            ordered = order_successors(children, maximizing)
            values = [c.state.utility() for c in ordered]
            self.assertEqual(values, sorted(values, reverse=maximizing))

    def test_ties_keep_generation_order(self) -> None:
        children = _two_v_one().successors()
        ordered = order_successors(children, True)
        for a, b in zip(ordered, ordered[1:]):
            if a.state.utility() == b.state.utility():
                self.assertLess(children.index(a), children.index(b))


if __name__ == "__main__":
    unittest.main()
