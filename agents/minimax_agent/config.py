from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from arena.core.types import DistanceMetric, MovementMode


class SearchConfig(BaseModel):
    """
    Tunables of the minimax agent.

    Validated on construction, so a malformed configuration (a
    non-positive ply count, an unknown mode) is rejected before any search
    runs.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ply_limit: PositiveInt = Field(
        default=2,
        description="Number of plies (one side's joint action each) to look ahead.",
    )
    movement: MovementMode = Field(
        default=MovementMode.ORTHOGONAL,
        description="Pathfinding connectivity; also selects the attack-range metric.",
    )
    straight_line: DistanceMetric = Field(
        default=DistanceMetric.EUCLIDEAN,
        description="Distance used by the evaluation when the map has no obstacles.",
    )
    pruning: bool = Field(
        default=True,
        description="Alpha-beta cutoffs. Disable only to compare against plain minimax.",
    )
    order_moves: bool = Field(
        default=True,
        description="Sort successors best-first before expanding them.",
    )

    @field_validator("straight_line")
    @classmethod
    def _straight_line_metric(cls, value: DistanceMetric) -> DistanceMetric:
        if value is DistanceMetric.MANHATTAN:
            raise ValueError("straight_line must be 'euclidean' or 'chebyshev'")
        return value
