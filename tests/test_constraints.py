# tests/test_constraints.py

import random
import unittest

from noguess import Layout, NoGuessVerifier
from noguess.cells import CellState
from noguess.constraints import (
    Constraint,
    build_components,
    collect_constraints,
    local_deductions,
    subset_deductions,
)
from noguess.enumeration import enumerate_component
from noguess.exceptions import InconsistentConstraintError
from noguess.utils import get_neighborhoods

H, R, F = CellState.HIDDEN, CellState.REVEALED, CellState.FLAGGED


def constraint(cells, mines_left, at=(99, 99)):
    return Constraint(at, frozenset(cells), mines_left)


class TestCollectConstraints(unittest.TestCase):

    def setUp(self):
        # 1 mine in the top-left corner of a 3x3 board.
        self.layout = Layout.parse("""
            *..
            ...
            ...
        """)
        self.neighborhoods = get_neighborhoods(3, 3)

    def test_only_numbered_cells_with_hidden_neighbours(self):
        states = [
            [H, R, R],
            [H, R, R],
            [R, R, R],
        ]
        constraints = collect_constraints(self.layout.values, states, self.neighborhoods)
        by_cell = {c.cell: c for c in constraints}

        self.assertEqual(set(by_cell), {(0, 1), (1, 1)})
        self.assertEqual(by_cell[(1, 1)].hidden, frozenset({(0, 0), (1, 0)}))
        self.assertEqual(by_cell[(1, 1)].mines_left, 1)

    def test_flags_reduce_mines_left(self):
        states = [
            [F, R, H],
            [H, R, H],
            [H, H, H],
        ]
        constraints = collect_constraints(self.layout.values, states, self.neighborhoods)
        by_cell = {c.cell: c for c in constraints}
        self.assertEqual(by_cell[(1, 1)].mines_left, 0)
        self.assertNotIn((0, 0), by_cell[(1, 1)].hidden)

    def test_too_many_flags_is_inconsistent(self):
        states = [
            [F, R, H],
            [F, R, H],
            [H, H, H],
        ]
        with self.assertRaises(InconsistentConstraintError):
            collect_constraints(self.layout.values, states, self.neighborhoods)


class TestLocalDeductions(unittest.TestCase):

    def test_satisfied_and_saturated(self):
        found = local_deductions([
            constraint({(0, 0), (0, 1)}, 0),
            constraint({(5, 5), (5, 6)}, 2),
            constraint({(7, 7), (7, 8)}, 1),
        ])
        self.assertEqual(found.reveal, {(0, 0), (0, 1)})
        self.assertEqual(found.flag, {(5, 5), (5, 6)})
        self.assertEqual(len(found), 4)


class TestSubsetDeductions(unittest.TestCase):

    def test_extra_cells_are_mines(self):
        a = constraint({(0, 0), (0, 1)}, 1, at=(1, 0))
        b = constraint({(0, 0), (0, 1), (0, 2)}, 2, at=(1, 1))
        found = subset_deductions([a, b])
        self.assertEqual(found.flag, {(0, 2)})
        self.assertFalse(found.reveal)

    def test_extra_cells_are_safe(self):
        a = constraint({(0, 0), (0, 1)}, 1, at=(1, 0))
        b = constraint({(0, 0), (0, 1), (0, 2)}, 1, at=(1, 1))
        found = subset_deductions([b, a])
        self.assertEqual(found.reveal, {(0, 2)})
        self.assertFalse(found.flag)

    def test_out_of_range_difference_gives_nothing(self):
        a = constraint({(0, 0), (0, 1)}, 2, at=(1, 0))
        b = constraint({(0, 0), (0, 1), (0, 2)}, 1, at=(1, 1))
        self.assertTrue(subset_deductions([a, b]).empty)

    def test_identical_sets_give_nothing(self):
        a = constraint({(0, 0), (0, 1)}, 1, at=(1, 0))
        b = constraint({(0, 0), (0, 1)}, 1, at=(1, 1))
        self.assertTrue(subset_deductions([a, b]).empty)

    def test_never_contradicts_exact_enumeration(self):
        rng = random.Random(1234)
        checked = 0
        for _ in range(80):
            mines = set()
            while len(mines) < 12:
                mines.add((rng.randrange(8), rng.randrange(8)))
            layout = Layout.from_mines(8, 8, mines)

            zeros = [
                (r, c) for r in range(8) for c in range(8)
                if not layout.is_mine(r, c) and str(layout.value(r, c)) == "0"
            ]
            if not zeros:
                continue
            verifier = NoGuessVerifier(layout)
            verifier.reveal_safe(*rng.choice(zeros))

            constraints = verifier.constraints()
            found = subset_deductions(constraints)

            for component in build_components(constraints):
                if len(component.variables) > 22:
                    continue
                tally = enumerate_component(component, max_solutions=10**6)
                self.assertGreater(tally.total, 0)
                for var in component.variables:
                    if var in found.reveal:
                        self.assertEqual(tally.mine_hits[var], 0)
                        self.assertFalse(layout.is_mine(*var))
                        checked += 1
                    if var in found.flag:
                        self.assertEqual(tally.mine_hits[var], tally.total)
                        self.assertTrue(layout.is_mine(*var))
                        checked += 1
        self.assertGreater(checked, 0)


class TestComponents(unittest.TestCase):

    def test_disjoint_constraints_split(self):
        a = constraint({(0, 0), (0, 1)}, 1, at=(1, 0))
        b = constraint({(5, 5)}, 1, at=(6, 6))
        components = build_components([a, b])
        self.assertEqual(len(components), 2)
        sizes = sorted(len(comp.variables) for comp in components)
        self.assertEqual(sizes, [1, 2])

    def test_shared_variable_joins(self):
        a = constraint({(0, 0), (0, 1)}, 1, at=(1, 0))
        b = constraint({(0, 1), (0, 2)}, 1, at=(1, 2))
        c = constraint({(0, 2), (0, 3)}, 1, at=(1, 3))
        components = build_components([a, b, c])
        self.assertEqual(len(components), 1)
        self.assertEqual(len(components[0].variables), 4)
        self.assertEqual(len(components[0].constraints), 3)


if __name__ == "__main__":
    unittest.main()
