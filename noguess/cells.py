"""Cell value and visibility types shared by the engine and the verifier."""

from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple, Tuple, Union


class CellState(IntEnum):
    """Per-cell visibility."""

    HIDDEN = 0
    REVEALED = 1
    FLAGGED = 2


@dataclass(frozen=True)
class Mine:
    """A cell holding a mine."""

    def to_int(self) -> int:
        return -1

    def __str__(self) -> str:
        return "M"


@dataclass(frozen=True)
class Count:
    """A safe cell and the number of mines among its 8 neighbours."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 8:
            raise ValueError(f"Adjacency count must be in 0..8, got {self.value}.")

    def to_int(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


CellValue = Union[Mine, Count]

MINE = Mine()
COUNTS: Tuple[Count, ...] = tuple(Count(n) for n in range(9))


def is_mine_value(value: CellValue) -> bool:
    return isinstance(value, Mine)


def cell_value_from_int(raw: int) -> CellValue:
    """Decode the flat serialized form: -1 for a mine, 0..8 for a count."""
    if raw == -1:
        return MINE
    if not 0 <= raw <= 8:
        raise ValueError(f"Invalid serialized cell value: {raw}")
    return COUNTS[raw]


class RevealedCell(NamedTuple):
    row: int
    col: int
    value: CellValue


class RevealResult(NamedTuple):
    """Outcome of a reveal or chord: whether a mine was hit and the newly revealed cells."""

    hit: bool
    cells: Tuple[RevealedCell, ...]


EMPTY_REVEAL = RevealResult(False, ())


class FlagResult(NamedTuple):
    row: int
    col: int
    flagged: bool


class AreaCell(NamedTuple):
    row: int
    col: int
    value: CellValue
    is_mine: bool
    state: CellState
