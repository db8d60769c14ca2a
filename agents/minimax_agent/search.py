"""
Depth-limited minimax search with alpha-beta pruning.

The game tree alternates between the attackers' joint action (maximizing)
and the defenders' joint action (minimizing). Each recursion frame is in
one of four situations:

- ROOT: depth 0, the side whose decision we are computing
- INTERIOR: 0 < depth < ply_limit, sides alternate
- LEAF: depth == ply_limit, the state is terminal, or no joint action
  exists; the node's own utility is the backed-up value
- CUT: a subtree skipped because alpha >= beta

Alpha and beta are SearchNodes like any other: they start as sentinel
nodes worth -inf and +inf, so every comparison in the recursion is a
plain comparison of node utilities.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from infra.logger import get_logger

from .combat_state import CombatState
from .config import SearchConfig
from .node import SearchNode
from .ordering import order_successors

logger = get_logger(__name__)


@dataclass
class SearchStats:
    """Counters for one decision."""

    nodes: int = 0
    leaves: int = 0
    cutoffs: int = 0
    elapsed_s: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": self.nodes,
            "leaves": self.leaves,
            "cutoffs": self.cutoffs,
            "elapsed_s": round(self.elapsed_s, 6),
        }


class AlphaBetaSearch:
    """
    Minimax search over CombatStates.

    Args:
        ply_limit: Depth at which states are evaluated statically (>= 0;
            0 evaluates the root itself)
        pruning: Apply alpha-beta cutoffs. With pruning disabled the search
            is a plain exhaustive minimax, which returns the same value
        order_moves: Expand successors best-first
    """

    def __init__(self, ply_limit: int, pruning: bool = True, order_moves: bool = True):
        if ply_limit < 0:
            raise ValueError(f"ply_limit cannot be negative: {ply_limit}")
        self.ply_limit = ply_limit
        self.pruning = pruning
        self.order_moves = order_moves
        self.stats = SearchStats()

    @classmethod
    def from_config(cls, config: SearchConfig) -> AlphaBetaSearch:
        return cls(ply_limit=config.ply_limit, pruning=config.pruning, order_moves=config.order_moves)

    # ------------------------------------------------------------------#
    # Entry point
    # ------------------------------------------------------------------#
    def best_child(self, state: CombatState) -> SearchNode:
        """
        Pick the best root action for the side to move in `state`.

        Returns:
            The root child (its action map and resulting state) with its
            backed-up value, or the root node itself when the root is a
            leaf (ply_limit 0, terminal, or no legal joint action).
        """
        self.stats = SearchStats()
        started = time.perf_counter()

        root = SearchNode({}, state)
        if self.pruning:
            alpha = SearchNode({}, CombatState.sentinel(-math.inf))
            beta = SearchNode({}, CombatState.sentinel(math.inf))
            best = self.search(root, 0, state.is_max, alpha, beta)
        else:
            best = self.minimax(root, 0, state.is_max)

        self.stats.elapsed_s = time.perf_counter() - started
        logger.debug(
            "Search finished: value=%s nodes=%d leaves=%d cutoffs=%d in %.4fs",
            best.utility, self.stats.nodes, self.stats.leaves, self.stats.cutoffs, self.stats.elapsed_s,
        )
        return best

    # ------------------------------------------------------------------#
    # Alpha-beta
    # ------------------------------------------------------------------#
    def search(
        self,
        node: SearchNode,
        depth: int,
        is_maximizing: bool,
        alpha: SearchNode,
        beta: SearchNode,
    ) -> SearchNode:
        """
        Alpha-beta recursion.

        Args:
            node: Action and state to search from
            depth: Plies already simulated above `node`
            is_maximizing: Whether the side to move in `node.state` maximizes
            alpha: Best node guaranteed so far for the maximizer
            beta: Best node guaranteed so far for the minimizer

        Returns:
            The best child of `node` carrying its backed-up value, `node`
            itself at a leaf, or the alpha/beta bound it failed to improve.
        """
        if node.state.is_max != is_maximizing:
            raise ValueError(f"Side flag mismatch at depth {depth}: state says is_max={node.state.is_max}")
        self.stats.nodes += 1

        if depth >= self.ply_limit or node.state.is_terminal():
            self.stats.leaves += 1
            return node

        children = node.state.successors()
        if not children:
            # Nobody on the side to move can act: evaluate as a leaf.
            self.stats.leaves += 1
            return node
        if self.order_moves:
            children = order_successors(children, is_maximizing)

        for child in children:
            result = self.search(child, depth + 1, not is_maximizing, alpha, beta)
            scored = child.with_value(result.utility)

            if is_maximizing and scored.utility > alpha.utility:
                alpha = scored
            elif not is_maximizing and scored.utility < beta.utility:
                beta = scored

            if alpha.utility >= beta.utility:
                self.stats.cutoffs += 1
                return scored

        return alpha if is_maximizing else beta

    # ------------------------------------------------------------------#
    # Plain minimax
    # ------------------------------------------------------------------#
    def minimax(self, node: SearchNode, depth: int, is_maximizing: bool) -> SearchNode:
        """Exhaustive minimax without cutoffs; first best child wins ties."""
        self.stats.nodes += 1

        if depth >= self.ply_limit or node.state.is_terminal():
            self.stats.leaves += 1
            return node

        children = node.state.successors()
        if not children:
            self.stats.leaves += 1
            return node
        if self.order_moves:
            children = order_successors(children, is_maximizing)

        best: Optional[SearchNode] = None
        for child in children:
            scored = child.with_value(self.minimax(child, depth + 1, not is_maximizing).utility)
            if best is None:
                best = scored
            elif is_maximizing and scored.utility > best.utility:
                best = scored
            elif not is_maximizing and scored.utility < best.utility:
                best = scored
        return best  # type: ignore[return-value]
