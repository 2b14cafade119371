"""Exact enumeration of mine assignments for one constraint component."""

from dataclasses import dataclass
from typing import Dict, List

from .constraints import Component, Deductions
from .utils import Coord


@dataclass
class SolutionTally:
    """
    Result of exhaustively enumerating a component.

    Attributes:
        total: Number of satisfying assignments found.
        mine_hits: For each variable, in how many of them it holds a mine.
        truncated: True if the search stopped at the solution cap; the counts
            are then partial and must not be used for deductions.
    """

    total: int
    mine_hits: Dict[Coord, int]
    truncated: bool = False

    def deductions(self) -> Deductions:
        found = Deductions()
        if self.truncated or self.total == 0:
            return found
        for var, hits in self.mine_hits.items():
            if hits == 0:
                found.reveal.add(var)
            elif hits == self.total:
                found.flag.add(var)
        return found


def enumerate_component(component: Component, max_solutions: int) -> SolutionTally:
    """
    Count every 0/1 assignment of the component's variables that satisfies all of
    its constraints, and how often each variable is a mine.

    Variables are assigned most-constrained first. A branch is cut as soon as a
    constraint it touches holds more mines than its target, or can no longer
    reach the target with the variables it has left. The search walks an
    explicit stack, so memory stays proportional to the component size.

    Args:
        component: Variables and the constraints linking them.
        max_solutions: Once more than this many solutions are found the search
            stops and the tally is marked truncated.
    """
    variables = component.variables
    n = len(variables)
    local_index = {var: i for i, var in enumerate(variables)}

    targets: List[int] = []
    sizes: List[int] = []
    var_constraints: List[List[int]] = [[] for _ in range(n)]
    for ci, constraint in enumerate(component.constraints):
        members = [local_index[v] for v in constraint.hidden if v in local_index]
        targets.append(constraint.mines_left)
        sizes.append(len(members))
        for vi in members:
            var_constraints[vi].append(ci)

    order = sorted(range(n), key=lambda vi: len(var_constraints[vi]), reverse=True)

    assigned_mines = [0] * len(targets)
    assigned_cells = [0] * len(targets)
    assignment = [0] * n
    hits = [0] * n
    total = 0
    truncated = False

    def fits(vi: int, value: int) -> bool:
        for ci in var_constraints[vi]:
            next_mines = assigned_mines[ci] + value
            remaining = sizes[ci] - (assigned_cells[ci] + 1)
            if next_mines > targets[ci] or next_mines + remaining < targets[ci]:
                return False
        return True

    def assign(vi: int, value: int, step: int) -> None:
        for ci in var_constraints[vi]:
            assigned_mines[ci] += value * step
            assigned_cells[ci] += step
        assignment[vi] = value if step > 0 else 0

    # tried[d] is the value currently applied at depth d, or -1 before the first try.
    tried = [-1] * n
    depth = 0
    while depth >= 0:
        if depth == n:
            if all(assigned_mines[ci] == targets[ci] for ci in range(len(targets))):
                total += 1
                for vi in range(n):
                    hits[vi] += assignment[vi]
                if total > max_solutions:
                    truncated = True
                    break
            depth -= 1
            continue

        vi = order[depth]
        current = tried[depth]
        if current >= 0:
            assign(vi, current, -1)

        advanced = False
        for value in range(current + 1, 2):
            if fits(vi, value):
                assign(vi, value, 1)
                tried[depth] = value
                depth += 1
                advanced = True
                break

        if not advanced:
            tried[depth] = -1
            depth -= 1

    return SolutionTally(
        total=total,
        mine_hits={variables[vi]: hits[vi] for vi in range(n)},
        truncated=truncated,
    )
