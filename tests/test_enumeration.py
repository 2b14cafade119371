# tests/test_enumeration.py

import unittest

from noguess.constraints import Component, Constraint
from noguess.enumeration import enumerate_component


def component(*constraints):
    variables = []
    for c in constraints:
        for var in sorted(c.hidden):
            if var not in variables:
                variables.append(var)
    return Component(variables, list(constraints))


def constraint(cells, mines_left):
    return Constraint((99, 99), frozenset(cells), mines_left)


A, B, C = (0, 0), (0, 1), (0, 2)


class TestEnumerateComponent(unittest.TestCase):

    def test_single_constraint(self):
        tally = enumerate_component(component(constraint({A, B, C}, 1)), 100)
        self.assertEqual(tally.total, 3)
        self.assertEqual(tally.mine_hits, {A: 1, B: 1, C: 1})
        self.assertFalse(tally.truncated)
        self.assertTrue(tally.deductions().empty)

    def test_forced_pattern(self):
        tally = enumerate_component(
            component(
                constraint({A, B}, 1),
                constraint({A, B, C}, 2),
                constraint({B, C}, 1),
            ),
            100,
        )
        self.assertEqual(tally.total, 1)
        found = tally.deductions()
        self.assertEqual(found.flag, {A, C})
        self.assertEqual(found.reveal, {B})

    def test_partial_deduction(self):
        # A+B = 1 and B+C = 1 with C a mine only when A is.
        tally = enumerate_component(
            component(constraint({A, B}, 1), constraint({B, C}, 1)), 100
        )
        self.assertEqual(tally.total, 2)
        self.assertEqual(tally.mine_hits[B], 1)
        self.assertTrue(tally.deductions().empty)

    def test_all_safe(self):
        tally = enumerate_component(component(constraint({A, B, C}, 0)), 100)
        self.assertEqual(tally.total, 1)
        self.assertEqual(tally.deductions().reveal, {A, B, C})

    def test_no_solution(self):
        tally = enumerate_component(
            component(constraint({A, B}, 2), constraint({A, B}, 0)), 100
        )
        self.assertEqual(tally.total, 0)
        self.assertTrue(tally.deductions().empty)

    def test_truncated_when_cap_exceeded(self):
        cells = {(0, i) for i in range(10)}
        tally = enumerate_component(component(constraint(cells, 5)), 100)
        self.assertTrue(tally.truncated)
        self.assertTrue(tally.deductions().empty)

    def test_cap_reached_exactly_is_not_truncated(self):
        cells = {(0, i) for i in range(10)}
        tally = enumerate_component(component(constraint(cells, 5)), 252)
        self.assertFalse(tally.truncated)
        self.assertEqual(tally.total, 252)
        self.assertTrue(all(hits == 126 for hits in tally.mine_hits.values()))


if __name__ == "__main__":
    unittest.main()
