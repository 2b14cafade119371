"""Board sizes used by the game's progression, from first node to last."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Level:
    id: int
    name: str
    rows: int
    cols: int
    mines: int

    @property
    def density(self) -> float:
        return self.mines / (self.rows * self.cols)


LEVELS: Tuple[Level, ...] = (
    Level(1, "PERIMETER_SCAN", 9, 9, 10),
    Level(2, "SUBNET_ALPHA", 10, 12, 18),
    Level(3, "DATA_NEXUS", 12, 14, 28),
    Level(4, "CIPHER_VAULT", 14, 16, 42),
    Level(5, "KERNEL_CORE", 16, 18, 58),
    Level(6, "DEEP_NET", 16, 20, 70),
    Level(7, "ROOT_ACCESS", 18, 22, 90),
)


def get_level(level_id: int) -> Level:
    """Level with the given id; unknown ids fall back to the first level."""
    for level in LEVELS:
        if level.id == level_id:
            return level
    return LEVELS[0]
