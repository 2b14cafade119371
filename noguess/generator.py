"""No-guess board generation by rejection sampling against the verifier."""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Optional, Set

from .config import GeneratorConfig
from .exceptions import GenerationBudgetExceeded
from .layout import Layout
from .utils import Coord, area_around, clamp_mine_count
from .verifier import NoGuessVerifier

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """A certified layout and what it took to find it."""

    layout: Layout
    attempts: int
    elapsed_seconds: float
    verifier_stats: Dict[str, Any] = field(default_factory=dict)


class BoardGenerator:
    """Samples mine layouts until one is solvable from the first click without guessing."""

    def __init__(
        self,
        rows: int,
        cols: int,
        mine_count: int,
        config: Optional[GeneratorConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            rows: Board height, must be > 0.
            cols: Board width, must be > 0.
            mine_count: Requested mines; clamped to rows*cols - 9.
            config: Search caps and optional retry budget.
            rng: Random source; a fresh random.Random() when omitted.
            clock: Monotonic clock used for the time budget.
        """
        if rows <= 0 or cols <= 0:
            raise ValueError("rows and cols must be positive.")
        if mine_count < 0:
            raise ValueError("mine_count must be non-negative.")

        self.rows = rows
        self.cols = cols
        self.mine_count = clamp_mine_count(rows, cols, mine_count)
        self.config = config if config is not None else GeneratorConfig()
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock

    def safe_zone(self, first_row: int, first_col: int) -> FrozenSet[Coord]:
        return frozenset(
            area_around(first_row, first_col, self.rows, self.cols, self.config.safe_radius)
        )

    def sample_layout(self, safe_zone: FrozenSet[Coord]) -> Layout:
        """Place mines uniformly at random outside the safe zone."""
        if self.mine_count > self.rows * self.cols - len(safe_zone):
            raise ValueError(
                f"Cannot place {self.mine_count} mines outside a safe zone of "
                f"{len(safe_zone)} cells on a {self.rows}x{self.cols} board."
            )

        mines: Set[Coord] = set()
        while len(mines) < self.mine_count:
            cell = (self.rng.randrange(self.rows), self.rng.randrange(self.cols))
            if cell in mines or cell in safe_zone:
                continue
            mines.add(cell)

        return Layout.from_mines(self.rows, self.cols, mines)

    def _budget_spent(self, attempts: int, started: float) -> bool:
        if self.config.max_attempts is not None and attempts >= self.config.max_attempts:
            return True
        if (
            self.config.time_budget_seconds is not None
            and self.clock() - started >= self.config.time_budget_seconds
        ):
            return True
        return False

    def generate(self, first_row: int, first_col: int) -> GenerationResult:
        """
        Find a layout certified by NoGuessVerifier for a first click at (first_row, first_col).

        Each rejected candidate is discarded whole and a fresh one is drawn.

        Raises:
            ValueError: If the first click is outside the board.
            GenerationBudgetExceeded: Only when the config sets max_attempts or
                time_budget_seconds and that budget runs out.
        """
        if not (0 <= first_row < self.rows and 0 <= first_col < self.cols):
            raise ValueError("First click is outside the board.")

        safe_zone = self.safe_zone(first_row, first_col)
        started = self.clock()
        attempts = 0

        while True:
            if self._budget_spent(attempts, started):
                raise GenerationBudgetExceeded(attempts, self.clock() - started)

            attempts += 1
            layout = self.sample_layout(safe_zone)
            verifier = NoGuessVerifier(layout, self.config)

            if verifier.verify(first_row, first_col):
                elapsed = self.clock() - started
                logger.info(
                    "No-guess %dx%d board with %d mines found after %d attempts (%.3fs).",
                    self.rows,
                    self.cols,
                    self.mine_count,
                    attempts,
                    elapsed,
                )
                return GenerationResult(layout, attempts, elapsed, verifier.stats())

            logger.debug("Attempt %d rejected: %s", attempts, verifier.failure_reason)
