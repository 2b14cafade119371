"""Reveal engine: the live board, its visibility grid, and the player's moves."""

import random
import time
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from .cells import (
    COUNTS,
    EMPTY_REVEAL,
    MINE,
    AreaCell,
    CellState,
    CellValue,
    Count,
    FlagResult,
    RevealedCell,
    RevealResult,
    cell_value_from_int,
    is_mine_value,
)
from .config import GeneratorConfig
from .generator import BoardGenerator, GenerationResult
from .layout import Layout, compute_values
from .utils import Coord, area_around, clamp_mine_count, get_neighborhoods


class GamePhase(Enum):
    UNPLAYED = "unplayed"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class RevealEngine:
    """Minesweeper board whose mines are laid out on the first reveal by BoardGenerator."""

    def __init__(
        self,
        rows: int,
        cols: int,
        mine_count: int,
        *,
        config: Optional[GeneratorConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize an unplayed engine.

        Args:
            rows: Board height (number of rows), must be > 0.
            cols: Board width (number of columns), must be > 0.
            mine_count: Requested mines; clamped to rows*cols - 9 so the opening
                around the first click always fits.
            config: Generator tunables used on the first reveal.
            rng: Random source shared by generation and mine relocation.
            clock: Wall clock in seconds, used for elapsed-time bookkeeping.

        Raises:
            ValueError: If dimensions are non-positive or mine_count is negative.
        """
        if rows <= 0 or cols <= 0:
            raise ValueError("rows and cols must be positive.")
        if mine_count < 0:
            raise ValueError("mine_count must be non-negative.")

        self.rows: int = rows
        self.cols: int = cols
        self.mine_count: int = clamp_mine_count(rows, cols, mine_count)
        self.config: GeneratorConfig = config if config is not None else GeneratorConfig()
        self.rng: random.Random = rng if rng is not None else random.Random()
        self.clock: Callable[[], float] = clock

        self.board: List[List[CellValue]] = [
            [COUNTS[0] for _ in range(cols)] for _ in range(rows)
        ]
        self.mines: Set[Coord] = set()
        self.cell_states: List[List[CellState]] = [
            [CellState.HIDDEN for _ in range(cols)] for _ in range(rows)
        ]
        self.game_over: bool = False
        self.won: bool = False
        self.first_click: bool = True
        self.revealed_count: int = 0
        self.flagged_count: int = 0
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.last_generation: Optional[GenerationResult] = None

        self._neighborhoods = get_neighborhoods(rows, cols)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def neighbors(self, row: int, col: int) -> Tuple[Coord, ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods[(row, col)]

    @property
    def phase(self) -> GamePhase:
        if self.won:
            return GamePhase.WON
        if self.game_over:
            return GamePhase.LOST
        if self.first_click:
            return GamePhase.UNPLAYED
        return GamePhase.PLAYING

    # -------------------------------------------------------------------------
    # Layout installation
    # -------------------------------------------------------------------------

    def install_layout(self, layout: Layout) -> None:
        """
        Replace the mine set and values in one step and leave the unplayed phase.

        Used by the first reveal with a generated layout; also the way to play a
        fixed layout.
        """
        if (layout.rows, layout.cols) != (self.rows, self.cols):
            raise ValueError("Layout dimensions do not match the engine.")

        self.mines = set(layout.mines)
        self.mine_count = len(layout.mines)
        self.board = [list(row) for row in layout.values]
        self.first_click = False

    def layout(self) -> Layout:
        """Immutable snapshot of the current mine layout."""
        return Layout(
            self.rows,
            self.cols,
            frozenset(self.mines),
            tuple(tuple(row) for row in self.board),
        )

    def _rebuild_adjacency(self) -> None:
        self.board = compute_values(self.rows, self.cols, self.mines)

    # -------------------------------------------------------------------------
    # Player moves
    # -------------------------------------------------------------------------

    def reveal(self, row: int, col: int) -> RevealResult:
        """
        Reveal a cell, flood-filling through zero-count cells.

        Returns:
            RevealResult(hit, cells). `hit` is True when the cell is a mine; the
            mine is revealed and the caller decides what happens next (see
            end_game). `cells` lists the newly revealed cells. Out-of-bounds,
            non-hidden cells and finished games yield an empty result.

        Raises:
            GenerationBudgetExceeded: Only on the first reveal, and only when the
                config sets max_attempts or time_budget_seconds and no board is
                certified within it. The engine then stays unplayed, so the
                reveal can be retried.
        """
        if self.game_over:
            return EMPTY_REVEAL
        if not self.in_bounds(row, col):
            return EMPTY_REVEAL
        if self.cell_states[row][col] != CellState.HIDDEN:
            return EMPTY_REVEAL

        if self.first_click:
            self.last_generation = BoardGenerator(
                self.rows, self.cols, self.mine_count, self.config, self.rng
            ).generate(row, col)
            self.install_layout(self.last_generation.layout)
        if self.start_time is None:
            self.start_time = self.clock()

        if is_mine_value(self.board[row][col]):
            self.cell_states[row][col] = CellState.REVEALED
            return RevealResult(True, (RevealedCell(row, col, MINE),))

        revealed = self._flood_fill(row, col)

        if self.revealed_count == self.rows * self.cols - self.mine_count:
            self.won = True
            self.game_over = True
            self.end_time = self.clock()

        return RevealResult(False, tuple(revealed))

    def _flood_fill(self, row: int, col: int) -> List[RevealedCell]:
        stack: List[Coord] = [(row, col)]
        revealed: List[RevealedCell] = []

        while stack:
            r, c = stack.pop()
            if self.cell_states[r][c] != CellState.HIDDEN:
                continue

            value = self.board[r][c]
            self.cell_states[r][c] = CellState.REVEALED
            self.revealed_count += 1
            revealed.append(RevealedCell(r, c, value))

            if isinstance(value, Count) and value.value == 0:
                for n in self.neighbors(r, c):
                    if self.cell_states[n[0]][n[1]] == CellState.HIDDEN:
                        stack.append(n)

        return revealed

    def toggle_flag(self, row: int, col: int) -> Optional[FlagResult]:
        """Flip a hidden cell to flagged or back; None when the move is not allowed."""
        if self.game_over:
            return None
        if not self.in_bounds(row, col):
            return None

        state = self.cell_states[row][col]
        if state == CellState.REVEALED:
            return None

        if state == CellState.FLAGGED:
            self.cell_states[row][col] = CellState.HIDDEN
            self.flagged_count -= 1
            return FlagResult(row, col, False)

        self.cell_states[row][col] = CellState.FLAGGED
        self.flagged_count += 1
        return FlagResult(row, col, True)

    def chord_reveal(self, row: int, col: int) -> RevealResult:
        """
        Reveal every hidden neighbor of a revealed numbered cell whose flagged
        neighbor count equals its number.
        """
        if self.game_over or not self.in_bounds(row, col):
            return EMPTY_REVEAL
        if self.cell_states[row][col] != CellState.REVEALED:
            return EMPTY_REVEAL

        value = self.board[row][col]
        if not isinstance(value, Count) or value.value == 0:
            return EMPTY_REVEAL

        flagged = sum(
            1 for nr, nc in self.neighbors(row, col)
            if self.cell_states[nr][nc] == CellState.FLAGGED
        )
        if flagged != value.value:
            return EMPTY_REVEAL

        cells: List[RevealedCell] = []
        any_hit = False
        for nr, nc in self.neighbors(row, col):
            if self.cell_states[nr][nc] != CellState.HIDDEN:
                continue
            result = self.reveal(nr, nc)
            cells.extend(result.cells)
            any_hit = any_hit or result.hit

        return RevealResult(any_hit, tuple(cells))

    def end_game(self) -> None:
        """Record a loss decided by the caller, typically after a mine hit."""
        if self.game_over or self.first_click:
            return
        self.game_over = True
        self.won = False
        self.end_time = self.clock()

    # -------------------------------------------------------------------------
    # Ability primitives
    # -------------------------------------------------------------------------

    def relocate_mine(
        self, row: int, col: int, banned: Iterable[Coord] = ()
    ) -> Optional[Coord]:
        """
        Move the mine at (row, col) to a random hidden non-mine cell outside `banned`.

        A mine the player already hit is covered again, so the vacated cell is
        a hidden safe cell that still has to be revealed to win.

        Returns:
            The mine's new coordinate, or None if (row, col) holds no mine or no
            target cell is available.
        """
        if not self.in_bounds(row, col) or (row, col) not in self.mines:
            return None

        banned_set = set(banned)
        candidates = [
            (r, c)
            for r in range(self.rows)
            for c in range(self.cols)
            if (r, c) not in self.mines
            and (r, c) not in banned_set
            and self.cell_states[r][c] == CellState.HIDDEN
        ]
        if not candidates:
            return None

        target = self.rng.choice(candidates)
        self.cell_states[row][col] = CellState.HIDDEN
        self.mines.discard((row, col))
        self.mines.add(target)
        self._rebuild_adjacency()
        return target

    def force_zero_at(self, row: int, col: int) -> None:
        """Move every mine in the 3x3 area around (row, col) elsewhere so the cell reads 0."""
        if self.first_click or not self.in_bounds(row, col):
            return

        area = area_around(row, col, self.rows, self.cols)
        forbidden = frozenset(area)
        for cell in area:
            if cell in self.mines:
                self.relocate_mine(cell[0], cell[1], forbidden)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def cell_value(self, row: int, col: int) -> Optional[CellValue]:
        if not self.in_bounds(row, col):
            return None
        return self.board[row][col]

    def cell_state(self, row: int, col: int) -> Optional[CellState]:
        if not self.in_bounds(row, col):
            return None
        return self.cell_states[row][col]

    def is_mine(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and is_mine_value(self.board[row][col])

    def row_mine_count(self, row: int) -> Optional[int]:
        if not 0 <= row < self.rows:
            return None
        return sum(1 for c in range(self.cols) if is_mine_value(self.board[row][c]))

    def col_mine_count(self, col: int) -> Optional[int]:
        if not 0 <= col < self.cols:
            return None
        return sum(1 for r in range(self.rows) if is_mine_value(self.board[r][col]))

    def area_snapshot(self, row: int, col: int) -> List[AreaCell]:
        """Values and states of the 3x3 area centred on (row, col), clipped to the board."""
        return [
            AreaCell(
                r,
                c,
                self.board[r][c],
                is_mine_value(self.board[r][c]),
                self.cell_states[r][c],
            )
            for r, c in area_around(row, col, self.rows, self.cols)
        ]

    def reveal_all_mines(self) -> List[RevealedCell]:
        """Every mine that is not already revealed, for the end-of-game display."""
        return [
            RevealedCell(r, c, MINE)
            for r, c in sorted(self.mines)
            if self.cell_states[r][c] != CellState.REVEALED
        ]

    def elapsed_seconds(self) -> int:
        if self.start_time is None:
            return 0
        end = self.end_time if self.end_time is not None else self.clock()
        return int(end - self.start_time)

    def completion_percent(self) -> int:
        total = self.rows * self.cols - self.mine_count
        return (self.revealed_count * 100) // total if total > 0 else 0

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Flat snapshot of the whole engine state, JSON-safe."""
        return {
            "rows": self.rows,
            "cols": self.cols,
            "mine_count": self.mine_count,
            "board": [[v.to_int() for v in row] for row in self.board],
            "mines": [[r, c] for r, c in sorted(self.mines)],
            "cell_states": [[int(s) for s in row] for row in self.cell_states],
            "game_over": self.game_over,
            "won": self.won,
            "first_click": self.first_click,
            "revealed_count": self.revealed_count,
            "flagged_count": self.flagged_count,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        *,
        config: Optional[GeneratorConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> "RevealEngine":
        """Rebuild an engine from to_dict() output."""
        engine = cls(data["rows"], data["cols"], 0, config=config, rng=rng, clock=clock)
        engine.mine_count = data["mine_count"]
        engine.board = [[cell_value_from_int(v) for v in row] for row in data["board"]]
        engine.mines = {(r, c) for r, c in data["mines"]}
        engine.cell_states = [[CellState(s) for s in row] for row in data["cell_states"]]
        engine.game_over = data["game_over"]
        engine.won = data["won"]
        engine.first_click = data["first_click"]
        engine.revealed_count = data["revealed_count"]
        engine.flagged_count = data["flagged_count"]
        engine.start_time = data["start_time"]
        engine.end_time = data["end_time"]
        return engine

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _m(self, s: str) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}"

    def format_board(self, reveal_all: bool = False, color: bool = True) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show mines and all underlying values.
            color: If False, emit plain text without ANSI escapes.

        Returns:
            A formatted multi-line string with coordinate labels and the board grid.
        """
        coord = self._c if color else str
        mine = self._m if color else str

        def cell_str(r: int, c: int) -> str:
            state = self.cell_states[r][c]
            if reveal_all or state == CellState.REVEALED:
                v = self.board[r][c]
                return mine("M") if is_mine_value(v) else str(v)
            if state == CellState.FLAGGED:
                return "F"
            return "."

        # Header: column coordinates
        header_cells = " ".join(f"{c:2d}" for c in range(self.cols))
        out = [coord("   ") + coord(header_cells)]
        out.append(coord("   " + "-" * (3 * self.cols - 1)))

        # Rows with row coordinate at left
        for r in range(self.rows):
            row_cells = " ".join(f" {cell_str(r, c)}" for c in range(self.cols))
            out.append(coord(f"{r:2d} ") + coord("|") + row_cells)

        return "\n".join(out)

    def print_board(self) -> None:
        """Print the current visible board state to stdout."""
        print(self.format_board(reveal_all=False))

    def print_full_board(self) -> None:
        """Print the fully revealed underlying board to stdout (for debugging)."""
        print(self.format_board(reveal_all=True))


_CLI_ACTIONS = {"r": "reveal", "f": "flag", "c": "chord"}


def play_cli(engine: RevealEngine) -> None:
    """
    Run a simple terminal UI for playing a no-guess board.

    Args:
        engine: A RevealEngine instance to play against.
    """
    print(
        "No-guess Minesweeper CLI. Commands: r ROW COL (reveal), f ROW COL (flag), "
        "c ROW COL (chord). Coordinates are 0-based. Type 'q' to quit.\n"
    )
    print(engine.format_board(reveal_all=False))

    while True:
        s = input("\nMove: ").strip()
        if s.lower() in {"q", "quit", "exit"}:
            print("Quit.")
            return

        parts = s.replace(",", " ").split()
        if len(parts) == 2:
            parts = ["r"] + parts
        if len(parts) != 3 or parts[0].lower() not in _CLI_ACTIONS:
            print("Invalid input. Example: r 3 5")
            continue

        try:
            row = int(parts[1])
            col = int(parts[2])
        except ValueError:
            print("Invalid input. Coordinates must be integers.")
            continue

        action = _CLI_ACTIONS[parts[0].lower()]
        if action == "flag":
            engine.toggle_flag(row, col)
            hit = False
        elif action == "chord":
            hit = engine.chord_reveal(row, col).hit
        else:
            hit = engine.reveal(row, col).hit

        print(f"\nYou decided to {action} ({row}, {col}).\n")
        print(engine.format_board(reveal_all=False))

        if hit:
            engine.end_game()
            print("\nYou hit a mine. You lost.")
            print("\nFull board:")
            print(engine.format_board(reveal_all=True))
            return

        if engine.won:
            print(f"\nYou revealed all safe cells in {engine.elapsed_seconds()}s. You won!")
            print("\nFull board:")
            print(engine.format_board(reveal_all=True))
            return
