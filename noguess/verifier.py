"""No-guess verifier: simulated perfect deductive play against a candidate layout."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .cells import CellState, Count, is_mine_value
from .config import GeneratorConfig
from .constraints import (
    Constraint,
    Deductions,
    build_components,
    collect_constraints,
    local_deductions,
    subset_deductions,
)
from .enumeration import enumerate_component
from .exceptions import InconsistentConstraintError
from .layout import Layout
from .utils import Coord, get_neighborhoods

logger = logging.getLogger(__name__)


class NoGuessVerifier:
    """
    Certifies that a layout can be cleared from a first click by deduction alone.

    The verifier keeps its own visibility grid and never touches a live engine.
    Each pass tries, in order:
    1. Local deduction: a constraint that is already satisfied or saturated
    2. Subset elimination between constraint pairs
    3. Exact enumeration of small connected components
    4. The global mine count over all hidden cells

    Every mark is checked against the true layout, so an unsound deduction makes
    the candidate fail instead of producing a wrong certificate.
    """

    def __init__(
        self,
        layout: Layout,
        config: Optional[GeneratorConfig] = None,
        record_steps: bool = False,
    ) -> None:
        """
        Args:
            layout: The candidate layout (ground truth for every mark).
            config: Search caps; defaults to GeneratorConfig().
            record_steps: If True, keep the ordered list of simulated moves in
                `moves_sequence` as (row, col, "S" | "M", method).
        """
        self.layout = layout
        self.config = config if config is not None else GeneratorConfig()
        self.record_steps = record_steps
        self.rows: int = layout.rows
        self.cols: int = layout.cols
        self._neighborhoods = get_neighborhoods(layout.rows, layout.cols)
        self.safe_target: int = layout.safe_count
        self._reset()

    def _reset(self) -> None:
        self.states: List[List[CellState]] = [
            [CellState.HIDDEN for _ in range(self.cols)] for _ in range(self.rows)
        ]
        self.revealed_safe: int = 0
        self.flagged_mines: int = 0
        self.failure_reason: Optional[str] = None
        self._current_method: str = "first_move"

        # Metrics / counters (for analysis)
        self.passes_count: int = 0
        self.inferred_local_count: int = 0
        self.inferred_subset_count: int = 0
        self.inferred_exact_count: int = 0
        self.inferred_global_count: int = 0
        self.components_enumerated_count: int = 0
        self.components_skipped_count: int = 0
        self.components_truncated_count: int = 0
        self.max_component_size: int = 0

        self.moves_sequence: List[Tuple[int, int, str, str]] = []

    # -------------------------------------------------------------------------
    # Simulated moves
    # -------------------------------------------------------------------------

    def reveal_safe(self, row: int, col: int) -> bool:
        """Flood-fill reveal on the simulated grid; False if a mine is reached."""
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            return True
        if self.states[row][col] != CellState.HIDDEN:
            return True

        if self.record_steps:
            self.moves_sequence.append((row, col, "S", self._current_method))

        stack: List[Coord] = [(row, col)]
        while stack:
            r, c = stack.pop()
            if self.states[r][c] != CellState.HIDDEN:
                continue
            value = self.layout.values[r][c]
            if is_mine_value(value):
                self.failure_reason = f"reveal of mine at {(r, c)} by {self._current_method}"
                return False

            self.states[r][c] = CellState.REVEALED
            self.revealed_safe += 1

            if isinstance(value, Count) and value.value == 0:
                for n in self._neighborhoods[(r, c)]:
                    if self.states[n[0]][n[1]] == CellState.HIDDEN:
                        stack.append(n)

        return True

    def flag_mine(self, row: int, col: int) -> bool:
        """Flag on the simulated grid; False if the cell is actually safe."""
        if self.states[row][col] != CellState.HIDDEN:
            return True
        if not self.layout.is_mine(row, col):
            self.failure_reason = f"flag on safe cell {(row, col)} by {self._current_method}"
            return False

        self.states[row][col] = CellState.FLAGGED
        self.flagged_mines += 1
        if self.record_steps:
            self.moves_sequence.append((row, col, "M", self._current_method))
        return True

    def apply(self, deductions: Deductions) -> bool:
        """Apply a pass's marks, flags before reveals."""
        for r, c in sorted(deductions.flag):
            if not self.flag_mine(r, c):
                return False
        for r, c in sorted(deductions.reveal):
            if not self.reveal_safe(r, c):
                return False
        return True

    # -------------------------------------------------------------------------
    # Deduction passes
    # -------------------------------------------------------------------------

    def constraints(self) -> List[Constraint]:
        return collect_constraints(self.layout.values, self.states, self._neighborhoods)

    def exact_deductions(self, constraints: List[Constraint]) -> Deductions:
        """
        Enumerate each small component and keep the variables fixed in every solution.

        Raises:
            InconsistentConstraintError: If a component has no solution at all.
        """
        found = Deductions()

        for component in build_components(constraints):
            size = len(component.variables)
            self.max_component_size = max(self.max_component_size, size)
            if size > self.config.max_component_size:
                self.components_skipped_count += 1
                continue

            self.components_enumerated_count += 1
            tally = enumerate_component(component, self.config.max_solutions)
            if tally.total == 0:
                raise InconsistentConstraintError(
                    f"Component of {size} cells has no satisfying assignment."
                )
            if tally.truncated:
                self.components_truncated_count += 1
                continue

            component_found = tally.deductions()
            found.reveal |= component_found.reveal
            found.flag |= component_found.flag

        return found

    def global_deductions(self) -> Optional[Deductions]:
        """Resolve every hidden cell from the global mine count, or None if it cannot."""
        hidden = [
            (r, c)
            for r in range(self.rows)
            for c in range(self.cols)
            if self.states[r][c] == CellState.HIDDEN
        ]
        remaining_mines = self.layout.mine_count - self.flagged_mines

        if remaining_mines == 0:
            return Deductions(reveal=set(hidden))
        if remaining_mines == len(hidden):
            return Deductions(flag=set(hidden))
        return None

    def _run_pass(self) -> bool:
        """One round of deduction. Returns False when the candidate must be rejected."""
        self.passes_count += 1
        constraints = self.constraints()

        self._current_method = "local"
        found = local_deductions(constraints)
        if not found.empty:
            self.inferred_local_count += len(found)
            return self.apply(found)

        if len(constraints) > 1:
            self._current_method = "subset"
            found = subset_deductions(constraints)
            if not found.empty:
                self.inferred_subset_count += len(found)
                return self.apply(found)

        if constraints:
            self._current_method = "exact"
            found = self.exact_deductions(constraints)
            if not found.empty:
                self.inferred_exact_count += len(found)
                return self.apply(found)

        self._current_method = "global"
        found_global = self.global_deductions()
        if found_global is None:
            self.failure_reason = (
                f"stuck with {self.safe_target - self.revealed_safe} safe cells hidden"
            )
            return False
        self.inferred_global_count += len(found_global)
        return self.apply(found_global)

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def verify(self, first_row: int, first_col: int) -> bool:
        """
        Simulate play from the first click.

        Returns:
            True if every safe cell gets revealed without a guess and without any
            mark landing on the wrong kind of cell, False otherwise.
        """
        self._reset()

        if not self.reveal_safe(first_row, first_col):
            logger.debug("Candidate rejected: first click lands on a mine.")
            return False

        try:
            while self.revealed_safe < self.safe_target:
                if not self._run_pass():
                    logger.debug("Candidate rejected: %s.", self.failure_reason)
                    return False
        except InconsistentConstraintError as exc:
            self.failure_reason = str(exc)
            logger.debug("Candidate rejected: inconsistent constraints (%s).", exc)
            return False

        return True

    @property
    def is_complete(self) -> bool:
        return self.revealed_safe == self.safe_target

    def stats(self) -> Dict[str, Any]:
        """Counters describing the last verification run."""
        return {
            "passes_count": self.passes_count,
            "revealed_safe_count": self.revealed_safe,
            "flagged_mines_count": self.flagged_mines,
            "inferred_local_count": self.inferred_local_count,
            "inferred_subset_count": self.inferred_subset_count,
            "inferred_exact_count": self.inferred_exact_count,
            "inferred_global_count": self.inferred_global_count,
            "components_enumerated_count": self.components_enumerated_count,
            "components_skipped_count": self.components_skipped_count,
            "components_truncated_count": self.components_truncated_count,
            "max_component_size": self.max_component_size,
        }


def is_no_guess(
    layout: Layout,
    first_row: int,
    first_col: int,
    config: Optional[GeneratorConfig] = None,
) -> bool:
    """Shortcut for NoGuessVerifier(layout, config).verify(first_row, first_col)."""
    return NoGuessVerifier(layout, config).verify(first_row, first_col)
