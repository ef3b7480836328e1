from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DeathKind(str, Enum):
    """Which death transition a fighter runs when its hp reaches zero."""

    PLAYER = "player"
    MONSTER = "monster"


class AIType(str, Enum):
    BASIC = "basic"


@dataclass
class Position:
    """Spatial position on the map."""

    x: int
    y: int

    def __iter__(self):
        yield self.x
        yield self.y


@dataclass
class Fighter:
    """Capability block for entities that can attack and be damaged."""

    max_hp: int
    hp: int
    defense: int
    power: int
    on_death: DeathKind

    def __post_init__(self) -> None:
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) may not exceed max_hp ({self.max_hp})")
        self.on_death = DeathKind(self.on_death)
