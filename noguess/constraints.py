"""Constraint extraction and the cheap deduction passes of the verifier."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set, Tuple

from .cells import CellState, CellValue, Count
from .exceptions import InconsistentConstraintError
from .utils import Coord


@dataclass(frozen=True)
class Constraint:
    """Exactly `mines_left` of the `hidden` cells around `cell` are mines."""

    cell: Coord
    hidden: FrozenSet[Coord]
    mines_left: int


@dataclass
class Deductions:
    """Cells proven safe and cells proven to be mines by one pass."""

    reveal: Set[Coord] = field(default_factory=set)
    flag: Set[Coord] = field(default_factory=set)

    @property
    def empty(self) -> bool:
        return not self.reveal and not self.flag

    def __len__(self) -> int:
        return len(self.reveal) + len(self.flag)


@dataclass
class Component:
    """Constraints connected through shared hidden cells, and those cells."""

    variables: List[Coord]
    constraints: List[Constraint]


def collect_constraints(
    values: Sequence[Sequence[CellValue]],
    states: Sequence[Sequence[CellState]],
    neighborhoods: Dict[Coord, Tuple[Coord, ...]],
) -> List[Constraint]:
    """
    Derive one constraint per revealed numbered cell that still touches hidden cells.

    Raises:
        InconsistentConstraintError: If a cell has more flagged neighbours than
            its count, or fewer hidden neighbours than the mines it still needs.
    """
    constraints: List[Constraint] = []

    for r, row_states in enumerate(states):
        for c, state in enumerate(row_states):
            if state != CellState.REVEALED:
                continue
            value = values[r][c]
            if not isinstance(value, Count) or value.value == 0:
                continue

            hidden: List[Coord] = []
            flagged = 0
            for nr, nc in neighborhoods[(r, c)]:
                nstate = states[nr][nc]
                if nstate == CellState.HIDDEN:
                    hidden.append((nr, nc))
                elif nstate == CellState.FLAGGED:
                    flagged += 1

            if not hidden:
                continue

            mines_left = value.value - flagged
            if mines_left < 0 or mines_left > len(hidden):
                raise InconsistentConstraintError(
                    f"Cell {(r, c)} needs {mines_left} mines among {len(hidden)} hidden cells."
                )

            constraints.append(Constraint((r, c), frozenset(hidden), mines_left))

    return constraints


def local_deductions(constraints: Iterable[Constraint]) -> Deductions:
    """Single-constraint rule: all hidden neighbours safe, or all mines."""
    found = Deductions()
    for constraint in constraints:
        if constraint.mines_left == 0:
            found.reveal.update(constraint.hidden)
        elif constraint.mines_left == len(constraint.hidden):
            found.flag.update(constraint.hidden)
    return found


def subset_deductions(constraints: Sequence[Constraint]) -> Deductions:
    """
    Pairwise rule: when A's hidden set is contained in B's, the cells only B
    sees hold exactly B.mines_left - A.mines_left mines.
    """
    found = Deductions()

    def apply(a: Constraint, b: Constraint) -> None:
        if len(a.hidden) > len(b.hidden) or not a.hidden <= b.hidden:
            return
        diff = b.hidden - a.hidden
        if not diff:
            return
        mine_diff = b.mines_left - a.mines_left
        if mine_diff < 0 or mine_diff > len(diff):
            return
        if mine_diff == 0:
            found.reveal.update(diff)
        elif mine_diff == len(diff):
            found.flag.update(diff)

    for i in range(len(constraints)):
        for j in range(i + 1, len(constraints)):
            apply(constraints[i], constraints[j])
            apply(constraints[j], constraints[i])

    return found


def build_components(constraints: Sequence[Constraint]) -> List[Component]:
    """Split constraints into connected components of the variable/constraint graph."""
    var_to_constraints: Dict[Coord, List[int]] = {}
    for ci, constraint in enumerate(constraints):
        for var in constraint.hidden:
            var_to_constraints.setdefault(var, []).append(ci)

    visited: Set[Coord] = set()
    components: List[Component] = []

    for start in var_to_constraints:
        if start in visited:
            continue

        stack: List[Coord] = [start]
        variables: List[Coord] = []
        member_constraints: List[int] = []
        seen_constraints: Set[int] = set()

        while stack:
            var = stack.pop()
            if var in visited:
                continue
            visited.add(var)
            variables.append(var)

            for ci in var_to_constraints[var]:
                if ci in seen_constraints:
                    continue
                seen_constraints.add(ci)
                member_constraints.append(ci)
                for nxt in constraints[ci].hidden:
                    if nxt not in visited:
                        stack.append(nxt)

        components.append(
            Component(variables, [constraints[ci] for ci in member_constraints])
        )

    return components
