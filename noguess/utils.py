"""Grid helpers shared by the engine, the generator and the verifier."""

from typing import Dict, List, Tuple

Coord = Tuple[int, int]

# Module-level cache: (rows, cols) -> {(row, col): ((nr, nc), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[Tuple[int, int], Dict[Coord, Tuple[Coord, ...]]] = {}


def get_neighborhoods(rows: int, cols: int) -> Dict[Coord, Tuple[Coord, ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for every cell in a grid.

    Args:
        rows: Number of grid rows. Must be positive.
        cols: Number of grid columns. Must be positive.

    Returns:
        Mapping from each cell (row, col) to a tuple of valid neighboring
        coordinates (nr, nc) under 8-connectivity.

    Raises:
        ValueError: If rows or cols is non-positive.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError("rows and cols must be positive.")

    key = (rows, cols)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Coord, Tuple[Coord, ...]] = {}
    for r in range(rows):
        for c in range(cols):
            nbrs: List[Coord] = []
            for dr in (-1, 0, 1):
                for dc in (-1, 0, 1):
                    if dr == 0 and dc == 0:
                        continue
                    nr, nc = r + dr, c + dc
                    if 0 <= nr < rows and 0 <= nc < cols:
                        nbrs.append((nr, nc))
            neighborhoods[(r, c)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods


def area_around(row: int, col: int, rows: int, cols: int, radius: int = 1) -> List[Coord]:
    """Square block of side 2*radius+1 centred on (row, col), clipped to the grid."""
    cells: List[Coord] = []
    for dr in range(-radius, radius + 1):
        for dc in range(-radius, radius + 1):
            rr, cc = row + dr, col + dc
            if 0 <= rr < rows and 0 <= cc < cols:
                cells.append((rr, cc))
    return cells


def clamp_mine_count(rows: int, cols: int, requested: int) -> int:
    """Keep at least nine safe cells, the size of the opening around a first click."""
    return max(0, min(requested, rows * cols - 9))
