from .grid import Grid
from .world import WorldState

__all__ = ["Grid", "WorldState"]
