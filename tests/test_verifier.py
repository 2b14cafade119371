# tests/test_verifier.py

import unittest

from noguess import GeneratorConfig, Layout, NoGuessVerifier, is_no_guess
from noguess.cells import CellState
from noguess.constraints import Constraint, Deductions
from noguess.exceptions import InconsistentConstraintError

WALL = """
..*..
..*..
..*..
..*..
..*..
"""

# The two cells left of the 1-1 pair can never be told apart.
FIFTY_FIFTY = """
*......
.......
"""

CORNER = """
*..
...
...
"""

A, B, C = (0, 0), (0, 1), (0, 2)


def constraint(cells, mines_left, at=(99, 99)):
    return Constraint(at, frozenset(cells), mines_left)


class TestVerify(unittest.TestCase):

    def test_wall_is_solved_with_global_count(self):
        verifier = NoGuessVerifier(Layout.parse(WALL))
        self.assertTrue(verifier.verify(0, 0))
        self.assertTrue(verifier.is_complete)
        self.assertEqual(verifier.flagged_mines, 5)
        self.assertEqual(verifier.inferred_local_count, 5)
        self.assertEqual(verifier.inferred_global_count, 10)
        self.assertIsNone(verifier.failure_reason)

    def test_opening_that_clears_everything(self):
        verifier = NoGuessVerifier(Layout.parse(CORNER))
        self.assertTrue(verifier.verify(2, 2))
        self.assertEqual(verifier.passes_count, 0)

    def test_fifty_fifty_is_rejected(self):
        layout = Layout.parse(FIFTY_FIFTY)
        verifier = NoGuessVerifier(layout)
        self.assertFalse(verifier.verify(0, 6))
        self.assertTrue(verifier.failure_reason.startswith("stuck"))
        self.assertEqual(verifier.states[1][0], CellState.HIDDEN)
        self.assertFalse(is_no_guess(layout, 0, 6))

    def test_first_click_on_mine_is_rejected(self):
        self.assertFalse(is_no_guess(Layout.parse(CORNER), 0, 0))

    def test_verify_resets_between_runs(self):
        verifier = NoGuessVerifier(Layout.parse(WALL))
        self.assertTrue(verifier.verify(0, 0))
        first = verifier.stats()
        self.assertTrue(verifier.verify(0, 4))
        self.assertEqual(verifier.stats()["revealed_safe_count"], first["revealed_safe_count"])
        self.assertEqual(verifier.stats()["flagged_mines_count"], 5)

    def test_record_steps(self):
        verifier = NoGuessVerifier(Layout.parse(WALL), record_steps=True)
        self.assertTrue(verifier.verify(0, 0))

        moves = verifier.moves_sequence
        self.assertEqual(moves[0], (0, 0, "S", "first_move"))
        flags = [m for m in moves if m[2] == "M"]
        self.assertEqual(sorted((r, c) for r, c, _, _ in flags), [(r, 2) for r in range(5)])
        self.assertTrue(all(m[3] == "local" for m in flags))
        self.assertTrue(any(m[3] == "global" for m in moves))

    def test_steps_not_recorded_by_default(self):
        verifier = NoGuessVerifier(Layout.parse(WALL))
        verifier.verify(0, 0)
        self.assertEqual(verifier.moves_sequence, [])


class TestApply(unittest.TestCase):

    def test_reveal_of_mine_fails(self):
        verifier = NoGuessVerifier(Layout.parse(CORNER))
        self.assertFalse(verifier.apply(Deductions(reveal={(0, 0)})))
        self.assertIn("mine", verifier.failure_reason)

    def test_flag_on_safe_cell_fails(self):
        verifier = NoGuessVerifier(Layout.parse(CORNER))
        self.assertFalse(verifier.apply(Deductions(flag={(1, 1)})))
        self.assertEqual(verifier.flagged_mines, 0)

    def test_flags_are_applied_before_reveals(self):
        verifier = NoGuessVerifier(Layout.parse(CORNER), record_steps=True)
        self.assertTrue(verifier.apply(Deductions(reveal={(1, 1)}, flag={(0, 0)})))
        self.assertEqual([m[2] for m in verifier.moves_sequence], ["M", "S"])


class TestExactDeductions(unittest.TestCase):

    def setUp(self):
        self.layout = Layout.parse(CORNER)

    def test_forced_component(self):
        verifier = NoGuessVerifier(self.layout)
        found = verifier.exact_deductions([
            constraint({A, B}, 1),
            constraint({A, B, C}, 2),
            constraint({B, C}, 1),
        ])
        self.assertEqual(found.flag, {A, C})
        self.assertEqual(found.reveal, {B})
        self.assertEqual(verifier.components_enumerated_count, 1)
        self.assertEqual(verifier.max_component_size, 3)

    def test_large_component_is_skipped(self):
        verifier = NoGuessVerifier(self.layout, GeneratorConfig(max_component_size=2))
        found = verifier.exact_deductions([constraint({A, B, C}, 0)])
        self.assertTrue(found.empty)
        self.assertEqual(verifier.components_skipped_count, 1)
        self.assertEqual(verifier.components_enumerated_count, 0)

    def test_truncated_component_gives_nothing(self):
        verifier = NoGuessVerifier(self.layout, GeneratorConfig(max_solutions=1))
        found = verifier.exact_deductions([constraint({A, B, C}, 1)])
        self.assertTrue(found.empty)
        self.assertEqual(verifier.components_truncated_count, 1)

    def test_unsatisfiable_component_raises(self):
        verifier = NoGuessVerifier(self.layout)
        with self.assertRaises(InconsistentConstraintError):
            verifier.exact_deductions([constraint({A, B}, 2), constraint({A, B}, 0)])


class TestGlobalDeductions(unittest.TestCase):

    def test_undecided_returns_none(self):
        verifier = NoGuessVerifier(Layout.parse(CORNER))
        self.assertIsNone(verifier.global_deductions())

    def test_all_mines_flagged_reveals_rest(self):
        verifier = NoGuessVerifier(Layout.parse(CORNER))
        self.assertTrue(verifier.flag_mine(0, 0))
        found = verifier.global_deductions()
        self.assertEqual(len(found.reveal), 8)
        self.assertFalse(found.flag)

    def test_hidden_cells_all_mines(self):
        verifier = NoGuessVerifier(Layout.parse(CORNER))
        for r in range(3):
            for c in range(3):
                if (r, c) != (0, 0):
                    verifier.states[r][c] = CellState.REVEALED
        found = verifier.global_deductions()
        self.assertEqual(found.flag, {(0, 0)})


if __name__ == "__main__":
    unittest.main()
