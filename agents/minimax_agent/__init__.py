from .combat_state import CombatState
from .config import SearchConfig
from .minimax_agent import MinimaxAgent
from .node import SearchNode
from .ordering import order_successors
from .search import AlphaBetaSearch, SearchStats

__all__ = [
    "AlphaBetaSearch",
    "CombatState",
    "MinimaxAgent",
    "SearchConfig",
    "SearchNode",
    "SearchStats",
    "order_successors",
]
