from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

from ..core.types import GridPos, Team

# Attack ranges are fixed per team: melee attackers, ranged defenders.
ATTACKER_RANGE = 1
DEFENDER_RANGE = 12


@dataclass(frozen=True)
class Unit:
    """
    A single combat unit.

    Units are immutable values. Anything that "changes" a unit (moving,
    taking damage) returns a new Unit, so every simulated state owns an
    independent roster and no two states ever alias the same unit.

    Hit points may go negative when damage is applied; a unit is dead once
    hp <= 0.
    """

    id: int
    team: Team
    pos: GridPos
    hp: int
    damage: int
    attack_range: int
    name: str | None = None

    def __post_init__(self):
        """Validate unit after initialization."""
        if not isinstance(self.pos, tuple):
            object.__setattr__(self, "pos", tuple(self.pos))
        if self.damage < 0:
            raise ValueError(f"Damage cannot be negative: {self.damage}")
        if self.attack_range < 0:
            raise ValueError(f"Attack range cannot be negative: {self.attack_range}")

    @classmethod
    def attacker(cls, id: int, pos: GridPos, hp: int = 160, damage: int = 8,
                 name: str | None = None) -> Unit:
        """Create a melee attacker with the team's fixed short range."""
        return cls(id=id, team=Team.ATTACKERS, pos=tuple(pos), hp=hp, damage=damage,
                   attack_range=ATTACKER_RANGE, name=name)

    @classmethod
    def defender(cls, id: int, pos: GridPos, hp: int = 50, damage: int = 6,
                 name: str | None = None) -> Unit:
        """Create a ranged defender with the team's fixed long range."""
        return cls(id=id, team=Team.DEFENDERS, pos=tuple(pos), hp=hp, damage=damage,
                   attack_range=DEFENDER_RANGE, name=name)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def moved_to(self, pos: GridPos) -> Unit:
        return replace(self, pos=tuple(pos))

    def damaged(self, amount: int) -> Unit:
        return replace(self, hp=self.hp - amount)

    def label(self) -> str:
        """
        Get a human-readable label for this unit.

        Returns:
            String like "attacker#1(ATTACKERS)"
        """
        display_name = self.name if self.name else self.team.name.lower().rstrip("s")
        return f"{display_name}#{self.id}({self.team.name})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "team": self.team.name,
            "pos": list(self.pos),
            "hp": self.hp,
            "damage": self.damage,
            "attack_range": self.attack_range,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Unit:
        return cls(
            id=int(data["id"]),
            team=Team[data["team"]],
            pos=(int(data["pos"][0]), int(data["pos"][1])),
            hp=int(data["hp"]),
            damage=int(data["damage"]),
            attack_range=int(data["attack_range"]),
            name=data.get("name"),
        )

    def __str__(self) -> str:
        status = "alive" if self.alive else "dead"
        return f"{self.label()} at {self.pos} hp={self.hp} [{status}]"
