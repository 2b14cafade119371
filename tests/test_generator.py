# tests/test_generator.py

import random
import unittest
from unittest import mock

from noguess import BoardGenerator, GeneratorConfig, is_no_guess
from noguess.exceptions import GenerationBudgetExceeded
from noguess.levels import LEVELS
from noguess.utils import area_around


class TickingClock:
    """Advances by `step` seconds every time it is read."""

    def __init__(self, step):
        self.now = 0.0
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


class TestGenerate(unittest.TestCase):

    def assert_certified(self, generator, result, first_row, first_col):
        layout = result.layout
        self.assertEqual(layout.mine_count, generator.mine_count)
        for cell in area_around(first_row, first_col, layout.rows, layout.cols):
            self.assertNotIn(cell, layout.mines)
        self.assertTrue(is_no_guess(layout, first_row, first_col))
        self.assertGreaterEqual(result.attempts, 1)

    def test_beginner_board_from_centre(self):
        generator = BoardGenerator(9, 9, 10, rng=random.Random(7))
        result = generator.generate(4, 4)
        self.assert_certified(generator, result, 4, 4)
        self.assertEqual(result.verifier_stats["revealed_safe_count"], 71)

    def test_corner_first_click(self):
        generator = BoardGenerator(9, 9, 10, rng=random.Random(11))
        result = generator.generate(0, 0)
        self.assert_certified(generator, result, 0, 0)

    def test_several_sizes_and_seeds(self):
        for rows, cols, mines in ((5, 5, 3), (8, 12, 15), (16, 16, 40)):
            for seed in (1, 2):
                with self.subTest(rows=rows, cols=cols, mines=mines, seed=seed):
                    generator = BoardGenerator(rows, cols, mines, rng=random.Random(seed))
                    first = (rows // 2, cols // 2)
                    self.assert_certified(generator, generator.generate(*first), *first)

    def test_every_level(self):
        for level in LEVELS:
            with self.subTest(level=level.name):
                generator = BoardGenerator(
                    level.rows, level.cols, level.mines, rng=random.Random(level.id)
                )
                first = (level.rows // 2, level.cols // 2)
                self.assert_certified(generator, generator.generate(*first), *first)

    def test_same_seed_same_layout(self):
        a = BoardGenerator(9, 9, 10, rng=random.Random(3)).generate(4, 4)
        b = BoardGenerator(9, 9, 10, rng=random.Random(3)).generate(4, 4)
        self.assertEqual(a.layout, b.layout)
        self.assertEqual(a.attempts, b.attempts)

    def test_densest_board_fills_everything_outside_the_opening(self):
        generator = BoardGenerator(5, 5, 100, rng=random.Random(0))
        self.assertEqual(generator.mine_count, 16)
        result = generator.generate(2, 2)
        self.assertEqual(result.attempts, 1)
        opening = set(area_around(2, 2, 5, 5))
        expected = {(r, c) for r in range(5) for c in range(5)} - opening
        self.assertEqual(result.layout.mines, expected)

    def test_zero_mines(self):
        result = BoardGenerator(4, 4, 0, rng=random.Random(0)).generate(0, 0)
        self.assertEqual(result.layout.mine_count, 0)
        self.assertEqual(result.verifier_stats["revealed_safe_count"], 16)


class TestArguments(unittest.TestCase):

    def test_invalid_construction(self):
        with self.assertRaises(ValueError):
            BoardGenerator(0, 9, 10)
        with self.assertRaises(ValueError):
            BoardGenerator(9, 9, -1)

    def test_first_click_out_of_bounds(self):
        with self.assertRaises(ValueError):
            BoardGenerator(9, 9, 10).generate(9, 0)

    def test_safe_zone_too_large(self):
        generator = BoardGenerator(
            5, 5, 100, config=GeneratorConfig(safe_radius=2), rng=random.Random(0)
        )
        with self.assertRaises(ValueError):
            generator.generate(2, 2)

    def test_safe_zone_is_clipped_at_edges(self):
        generator = BoardGenerator(9, 9, 10)
        self.assertEqual(len(generator.safe_zone(0, 0)), 4)
        self.assertEqual(len(generator.safe_zone(0, 4)), 6)
        self.assertEqual(len(generator.safe_zone(4, 4)), 9)


class TestBudget(unittest.TestCase):

    def test_unbounded_by_default(self):
        config = GeneratorConfig()
        self.assertIsNone(config.max_attempts)
        self.assertIsNone(config.time_budget_seconds)

    def test_max_attempts(self):
        generator = BoardGenerator(
            9, 9, 10, config=GeneratorConfig(max_attempts=3), rng=random.Random(0)
        )
        with mock.patch("noguess.generator.NoGuessVerifier.verify", return_value=False):
            with self.assertRaises(GenerationBudgetExceeded) as ctx:
                generator.generate(4, 4)
        self.assertEqual(ctx.exception.attempts, 3)

    def test_time_budget(self):
        generator = BoardGenerator(
            9,
            9,
            10,
            config=GeneratorConfig(time_budget_seconds=5.0),
            rng=random.Random(0),
            clock=TickingClock(step=10.0),
        )
        with self.assertRaises(GenerationBudgetExceeded) as ctx:
            generator.generate(4, 4)
        self.assertEqual(ctx.exception.attempts, 0)
        self.assertGreaterEqual(ctx.exception.elapsed_seconds, 5.0)


if __name__ == "__main__":
    unittest.main()
