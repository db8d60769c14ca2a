from __future__ import annotations

from typing import List, Sequence

from .node import SearchNode


def order_successors(children: Sequence[SearchNode], maximizing: bool) -> List[SearchNode]:
    """
    Sort successors best-first for the side choosing among them.

    The key is each child's own (static) state utility: descending when
    the maximizer is choosing, ascending for the minimizer. The sort is
    stable, so children with equal utility keep their generation order and
    the search stays deterministic. Every child's utility gets memoized as
    a side effect.
    """
    return sorted(children, key=lambda child: child.state.utility(), reverse=maximizing)
