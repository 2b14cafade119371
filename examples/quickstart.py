"""
Quickstart example for the no-guess Minesweeper core.

This script demonstrates basic usage of the engine and the generator.
"""

import json
import random

from noguess import (
    LEVELS,
    RevealEngine,
    is_no_guess,
    run_generation_many_tests,
)


def main():
    print("=" * 60)
    print("No-Guess Minesweeper - Quickstart Example")
    print("=" * 60)

    # Example 1: Generate a board on the first click
    print("\n1. First click on a 9x9 board with 10 mines at (4, 4)...")
    print("-" * 60)

    engine = RevealEngine(9, 9, 10, rng=random.Random(7))
    result = engine.reveal(4, 4)
    generation = engine.last_generation

    print(f"Opening size: {len(result.cells)} cells")
    print(f"Candidate layouts tried: {generation.attempts}")
    print(f"Generation time: {generation.elapsed_seconds:.3f}s")
    print(engine.format_board(reveal_all=False))

    # Example 2: The installed layout passes the verifier again
    print("\n2. Re-checking the installed layout...")
    print("-" * 60)
    print(f"No-guess from (4, 4): {is_no_guess(engine.layout(), 4, 4)}")

    # Example 3: Flag every mine, then finish with chords
    print("\n3. Flagging all mines and chording the numbers...")
    print("-" * 60)

    for row, col in sorted(engine.mines):
        engine.toggle_flag(row, col)
    for row in range(engine.rows):
        for col in range(engine.cols):
            engine.chord_reveal(row, col)
            engine.reveal(row, col)

    print(f"Phase: {engine.phase.value}, completion {engine.completion_percent()}%")
    print(engine.format_board(reveal_all=True))

    # Example 4: Save and restore
    print("\n4. Serializing the finished game...")
    print("-" * 60)
    blob = json.dumps(engine.to_dict())
    restored = RevealEngine.from_dict(json.loads(blob))
    print(f"Snapshot: {len(blob)} bytes, restored phase: {restored.phase.value}")

    # Example 5: Generation cost per level
    print("\n5. Generation cost by level (5 boards each)...")
    print("-" * 60)

    for level in LEVELS[:4]:
        results = run_generation_many_tests(level.rows, level.cols, level.mines, runs=5, seed=1)
        print(
            f"{level.name:15s} ({level.rows}x{level.cols}, {level.mines:2d} mines): "
            f"{results['avg_attempts']:6.1f} attempts, {results['avg_elapsed_seconds']:.3f}s"
        )

    print("\n" + "=" * 60)
    print("Done! See SPEC_FULL.md for the full behaviour of the core.")
    print("=" * 60)


if __name__ == "__main__":
    main()
