"""
CombatState - the simulated position the minimax search reasons about.

A CombatState is a value: both rosters are tuples of immutable units, the
grid (and its obstacle set) is shared read-only with every state derived
from the same root, and successor generation always builds new states.
The only thing that changes after construction is the memoized utility.

Evaluation (from the attackers' point of view)::

    utility =   W_ATTACKER_HP    * total attacker hp
              + W_DEFENDER_HP    * total defender hp
              + W_ATTACKER_ALIVE * living attackers
              + W_DEFENDER_ALIVE * living defenders
              + W_DISTANCE       * sum over attackers of the distance to
                                   the nearest defender

The distance is the A* step count when the map has obstacles (or
UNREACHABLE_DISTANCE when walled off) and a straight-line distance on an
open map. The two are not interchangeable: a single search always uses
the branch its grid selects, so values stay comparable within a tree.
"""

from __future__ import annotations

import itertools
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Tuple

from arena.core.actions import Action
from arena.core.types import ActionType, DistanceMetric, GridPos, MovementMode, Team
from arena.entities.unit import Unit
from arena.mechanics.pathfinding import path_distance
from arena.mechanics import rules
from arena.world.grid import Grid
from arena.world.world import WorldState

from .node import SearchNode

# Evaluation weights.
W_ATTACKER_HP = 1
W_DEFENDER_HP = -10
W_ATTACKER_ALIVE = 10
W_DEFENDER_ALIVE = -100
W_DISTANCE = -1


class CombatState:
    """
    Immutable-by-convention snapshot of both teams for one ply.

    Attributes:
        grid: Map geometry, shared by reference with ancestors/descendants
        is_max: True when it is the attackers' (maximizing side's) turn
        depth: Plies simulated from the root
        movement: Connectivity for pathfinding and attack ranges
        straight_line: Distance used by the evaluation on open maps
    """

    __slots__ = (
        "grid",
        "_attackers",
        "_defenders",
        "is_max",
        "depth",
        "movement",
        "straight_line",
        "_utility",
        "_utility_computed",
    )

    def __init__(
        self,
        grid: Grid,
        attackers: Iterable[Unit],
        defenders: Iterable[Unit],
        is_max: bool = True,
        depth: int = 0,
        movement: MovementMode = MovementMode.ORTHOGONAL,
        straight_line: DistanceMetric = DistanceMetric.EUCLIDEAN,
    ):
        self.grid = grid
        # Rosters only ever hold living units.
        self._attackers: Tuple[Unit, ...] = tuple(u for u in attackers if u.alive)
        self._defenders: Tuple[Unit, ...] = tuple(u for u in defenders if u.alive)
        self.is_max = is_max
        self.depth = depth
        self.movement = movement
        self.straight_line = straight_line
        self._utility: Optional[float] = None
        self._utility_computed = False

    # ------------------------------------------------------------------#
    # Construction
    # ------------------------------------------------------------------#
    @classmethod
    def from_world(
        cls,
        world: WorldState,
        to_move: Team = Team.ATTACKERS,
        movement: MovementMode = MovementMode.ORTHOGONAL,
        straight_line: DistanceMetric = DistanceMetric.EUCLIDEAN,
    ) -> CombatState:
        """
        Build a root state from the environment snapshot.

        Args:
            world: Live world (only living units are read)
            to_move: Side whose decision is being searched
        """
        return cls(
            grid=world.grid,
            attackers=world.get_team_units(Team.ATTACKERS),
            defenders=world.get_team_units(Team.DEFENDERS),
            is_max=to_move.is_maximizing,
            depth=0,
            movement=movement,
            straight_line=straight_line,
        )

    @classmethod
    def sentinel(cls, utility: float) -> CombatState:
        """Empty state with a fixed utility, used to seed alpha and beta."""
        state = cls(grid=Grid(1, 1), attackers=(), defenders=())
        state._utility = utility
        state._utility_computed = True
        return state

    # ------------------------------------------------------------------#
    # Rosters
    # ------------------------------------------------------------------#
    @property
    def attackers(self) -> Tuple[Unit, ...]:
        return self._attackers

    @property
    def defenders(self) -> Tuple[Unit, ...]:
        return self._defenders

    @property
    def units(self) -> Tuple[Unit, ...]:
        return self._attackers + self._defenders

    def get_unit(self, unit_id: int) -> Optional[Unit]:
        return next((u for u in self.units if u.id == unit_id), None)

    def roster(self, team: Team) -> Tuple[Unit, ...]:
        return self._attackers if team == Team.ATTACKERS else self._defenders

    def is_terminal(self) -> bool:
        return not self._attackers or not self._defenders

    # ------------------------------------------------------------------#
    # Action generation
    # ------------------------------------------------------------------#
    def enemies_in_range(self, unit: Unit) -> List[Unit]:
        return [
            enemy
            for enemy in self.roster(unit.team.enemy)
            if rules.in_attack_range(unit, enemy, self.movement)
        ]

    def legal_actions(self, unit: Unit) -> List[Action]:
        """
        Every action the unit may take in this state.

        A Move is legal when the destination is in bounds, not an obstacle
        and not occupied by another living unit (friend or foe). An Attack
        is legal for every living enemy within the unit's range. Moves come
        first in N, E, S, W order, then attacks in roster order.
        """
        return rules.legal_actions(unit, self.units, self.grid, self.movement)

    def successors(self) -> List[SearchNode]:
        """
        All joint actions for the side to move and the states they produce.

        Units with no legal action sit the ply out. Joint assignments that
        send two units to the same cell, or any unit onto an obstacle, are
        dropped. Enumeration order is deterministic for a given state.
        """
        acting = self._attackers if self.is_max else self._defenders
        options = [actions for actions in (self.legal_actions(u) for u in acting) if actions]
        if not options:
            return []

        positions = {u.id: u.pos for u in acting}
        children: List[SearchNode] = []
        for combo in itertools.product(*options):
            if self._conflicts(combo, positions):
                continue
            joint = {action.unit_id: action for action in combo}
            children.append(SearchNode(joint, self.apply_actions(joint)))
        return children

    def _conflicts(self, combo: Tuple[Action, ...], positions: Dict[int, GridPos]) -> bool:
        destinations = set()
        for action in combo:
            if action.type != ActionType.MOVE:
                continue
            dest = action.direction.apply(positions[action.unit_id])
            if dest in destinations or self.grid.is_blocked(dest):
                return True
            destinations.add(dest)
        return False

    def apply_actions(self, actions: Dict[int, Action]) -> CombatState:
        """
        Apply one ply's joint action and return the successor state.

        All actions are resolved against this (pre-ply) state and applied
        at once, so resolution order never matters. Damage may drive hp
        below zero; dead units are dropped from the successor's rosters.
        The successor has the side flag flipped and depth + 1.

        Raises:
            ValueError: If an action references a unit not in this state
        """
        units = {u.id: u for u in self.units}
        destinations: Dict[int, GridPos] = {}
        damage: Dict[int, int] = defaultdict(int)

        for unit_id in sorted(actions):
            action = actions[unit_id]
            actor = units.get(action.unit_id)
            if actor is None:
                raise ValueError(f"Action {action} references unknown or dead unit {action.unit_id}")
            if action.type == ActionType.MOVE:
                destinations[actor.id] = action.direction.apply(actor.pos)
            elif action.type == ActionType.ATTACK:
                if action.target_id not in units:
                    raise ValueError(f"Action {action} targets unknown or dead unit {action.target_id}")
                damage[action.target_id] += actor.damage
            else:
                raise ValueError(f"Unsupported action type {action.type}")

        def _resolve(unit: Unit) -> Unit:
            if unit.id in destinations:
                unit = unit.moved_to(destinations[unit.id])
            if damage.get(unit.id):
                unit = unit.damaged(damage[unit.id])
            return unit

        return CombatState(
            grid=self.grid,
            attackers=[_resolve(u) for u in self._attackers],
            defenders=[_resolve(u) for u in self._defenders],
            is_max=not self.is_max,
            depth=self.depth + 1,
            movement=self.movement,
            straight_line=self.straight_line,
        )

    # ------------------------------------------------------------------#
    # Evaluation
    # ------------------------------------------------------------------#
    def utility(self) -> float:
        """Heuristic value from the attackers' point of view (memoized)."""
        if not self._utility_computed:
            self._utility = self._evaluate()
            self._utility_computed = True
        return self._utility  # type: ignore[return-value]

    def _evaluate(self) -> float:
        attacker_hp = sum(u.hp for u in self._attackers)
        defender_hp = sum(u.hp for u in self._defenders)
        distance = sum(self.distance_to_nearest_enemy(u) for u in self._attackers)
        return (
            W_ATTACKER_HP * attacker_hp
            + W_DEFENDER_HP * defender_hp
            + W_ATTACKER_ALIVE * len(self._attackers)
            + W_DEFENDER_ALIVE * len(self._defenders)
            + W_DISTANCE * distance
        )

    def distance_to_nearest_enemy(self, unit: Unit) -> float:
        """Distance from unit to the closest living enemy (0 if none remain)."""
        enemies = self.roster(unit.team.enemy)
        if not enemies:
            return 0
        return min(self.distance(unit.pos, enemy.pos) for enemy in enemies)

    def distance(self, a: GridPos, b: GridPos) -> float:
        if self.grid.has_obstacles:
            return path_distance(a, b, self.grid, self.movement)
        return self.grid.distance(a, b, self.straight_line)

    # ------------------------------------------------------------------#
    # Debugging
    # ------------------------------------------------------------------#
    def to_dict(self) -> Dict[str, Any]:
        return {
            "attackers": [u.to_dict() for u in self._attackers],
            "defenders": [u.to_dict() for u in self._defenders],
            "is_max": self.is_max,
            "depth": self.depth,
            "utility": self._utility if self._utility_computed else None,
        }

    def __repr__(self) -> str:
        att = ", ".join(f"#{u.id}@{u.pos}:{u.hp}" for u in self._attackers)
        dfn = ", ".join(f"#{u.id}@{u.pos}:{u.hp}" for u in self._defenders)
        side = "MAX" if self.is_max else "MIN"
        return f"CombatState({side}, depth={self.depth}, attackers=[{att}], defenders=[{dfn}])"
