"""Mine layouts and their adjacency grids."""

from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, List, Tuple

from .cells import COUNTS, MINE, CellValue, is_mine_value
from .utils import Coord, get_neighborhoods


def compute_values(
    rows: int, cols: int, mines: AbstractSet[Coord]
) -> List[List[CellValue]]:
    """Build the value grid from scratch: MINE on mine cells, neighbour counts elsewhere."""
    neighborhoods = get_neighborhoods(rows, cols)
    values: List[List[CellValue]] = [[COUNTS[0] for _ in range(cols)] for _ in range(rows)]

    for r in range(rows):
        for c in range(cols):
            if (r, c) in mines:
                values[r][c] = MINE
                continue
            count = sum(1 for n in neighborhoods[(r, c)] if n in mines)
            values[r][c] = COUNTS[count]

    return values


@dataclass(frozen=True)
class Layout:
    """A complete mine placement together with its adjacency grid."""

    rows: int
    cols: int
    mines: FrozenSet[Coord]
    values: Tuple[Tuple[CellValue, ...], ...]

    @classmethod
    def from_mines(cls, rows: int, cols: int, mines: AbstractSet[Coord]) -> "Layout":
        grid = compute_values(rows, cols, mines)
        return cls(rows, cols, frozenset(mines), tuple(tuple(row) for row in grid))

    @classmethod
    def parse(cls, text: str) -> "Layout":
        """
        Build a layout from an ASCII picture: '*' for a mine, any other
        character for a safe cell. Blank lines and surrounding spaces are ignored.
        """
        lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
        if not lines or any(len(line) != len(lines[0]) for line in lines):
            raise ValueError("Layout picture must be a non-empty rectangle.")

        mines = {
            (r, c)
            for r, line in enumerate(lines)
            for c, ch in enumerate(line)
            if ch == "*"
        }
        return cls.from_mines(len(lines), len(lines[0]), mines)

    @property
    def mine_count(self) -> int:
        return len(self.mines)

    @property
    def safe_count(self) -> int:
        return self.rows * self.cols - len(self.mines)

    def value(self, row: int, col: int) -> CellValue:
        return self.values[row][col]

    def is_mine(self, row: int, col: int) -> bool:
        return is_mine_value(self.values[row][col])
