"""Analysis and benchmarking tools for the no-guess generator."""

import random
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .cells import CellState
from .config import GeneratorConfig
from .engine import RevealEngine
from .levels import LEVELS, Level
from .verifier import NoGuessVerifier

_DEDUCTION_KEYS = (
    "inferred_local_count",
    "inferred_subset_count",
    "inferred_exact_count",
    "inferred_global_count",
)


def format_verifier_knowledge(
    verifier: NoGuessVerifier, *, show_coords: bool = True
) -> str:
    """
    Format the verifier's simulated grid as a human-readable string.

    Args:
        verifier: Verifier instance whose simulated state will be displayed.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid where hidden cells are '.', flagged cells 'F' and revealed
        cells their adjacency count.
    """
    w, h = verifier.cols, verifier.rows

    def cell_char(r: int, c: int) -> str:
        state = verifier.states[r][c]
        if state == CellState.HIDDEN:
            return "."
        if state == CellState.FLAGGED:
            return "F"
        return str(verifier.layout.values[r][c])

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{c:2d}" for c in range(w))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * w - 1))

    for r in range(h):
        row = " ".join(f" {cell_char(r, c)}" for c in range(w))
        lines.append(f"{r:2d} |" + row if show_coords else row)

    return "\n".join(lines)


def run_generation_single_test(
    rows: int,
    cols: int,
    mine_count: int,
    *,
    first_click: Optional[Tuple[int, int]] = None,
    show_boards: bool = False,
    config: Optional[GeneratorConfig] = None,
    seed: Optional[int] = None,
) -> Dict[str, object]:
    """
    Generate one no-guess board through a fresh RevealEngine and report the cost.

    Args:
        rows: Board height.
        cols: Board width.
        mine_count: Requested number of mines.
        first_click: Coordinate of the first reveal; defaults to the centre.
        show_boards: If True, print the generated board and the opening.
        config: Generator tunables.
        seed: Seed for the engine's random source.

    Returns:
        The verifier counters of the accepted layout, plus "attempts",
        "elapsed_seconds", "opening_size" and "mine_count".
    """
    if first_click is None:
        first_click = (rows // 2, cols // 2)

    engine = RevealEngine(rows, cols, mine_count, config=config, rng=random.Random(seed))
    result = engine.reveal(*first_click)
    generation = engine.last_generation
    if generation is None:
        raise RuntimeError("First reveal did not generate a layout.")

    if show_boards:
        print(f"Board {rows}x{cols}, {engine.mine_count} mines, first click {first_click}")
        print("Opening:")
        print(engine.format_board(reveal_all=False))
        print()
        print("Underlying board (mines visible):")
        print(engine.format_board(reveal_all=True))
        print()
        print(f"Accepted after {generation.attempts} attempts "
              f"({generation.elapsed_seconds:.3f}s).")

    out: Dict[str, object] = dict(generation.verifier_stats)
    out["attempts"] = generation.attempts
    out["elapsed_seconds"] = generation.elapsed_seconds
    out["opening_size"] = len(result.cells)
    out["mine_count"] = engine.mine_count
    return out


def run_generation_many_tests(
    rows: int,
    cols: int,
    mine_count: int,
    runs: int,
    *,
    config: Optional[GeneratorConfig] = None,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Generate many independent boards and return averaged metrics.

    Returns:
        Averages of every numeric metric from run_generation_single_test()
        (prefixed with "avg_"), plus:
        - max_attempts
        - std_attempts
        - acceptance_rate (boards accepted per candidate tried)
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    seeder = random.Random(seed)
    sums: Dict[str, float] = defaultdict(float)
    attempts: List[int] = []

    for _ in range(runs):
        payload = run_generation_single_test(
            rows, cols, mine_count, config=config, seed=seeder.randrange(2**32)
        )
        for k, v in payload.items():
            if isinstance(v, (int, float)) and not isinstance(v, bool):
                sums[f"avg_{k}"] += float(v)
        attempts.append(int(payload["attempts"]))  # type: ignore[arg-type]

    out: Dict[str, float] = {k: total / runs for k, total in sums.items()}
    attempts_arr = np.asarray(attempts, dtype=float)
    out["max_attempts"] = float(attempts_arr.max())
    out["std_attempts"] = float(attempts_arr.std())
    out["acceptance_rate"] = float(runs / attempts_arr.sum())
    return out


def run_level_analysis(
    runs: int,
    *,
    levels: Sequence[Level] = LEVELS,
    config: Optional[GeneratorConfig] = None,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Benchmark generation on each progression level and plot summaries.

    Args:
        runs: Number of boards generated per level.
        levels: Levels to benchmark (default: all of them).
        config: Generator tunables.
        seed: Seed for reproducible runs.
        show: If True, display the figures; otherwise they are closed.

    Returns:
        Mapping from level name to statistics dict returned by
        run_generation_many_tests().
    """
    results: Dict[str, Dict[str, float]] = {}
    for level in levels:
        results[level.name] = run_generation_many_tests(
            level.rows, level.cols, level.mines, runs, config=config, seed=seed
        )

    level_names = [level.name for level in levels]
    x = np.arange(len(level_names))

    # 1) Attempts and acceptance rate per level
    avg_attempts = [results[n]["avg_attempts"] for n in level_names]
    acceptance = [results[n]["acceptance_rate"] for n in level_names]

    fig, ax1 = plt.subplots()
    ax1.bar(x, avg_attempts, label="avg attempts")
    ax1.set_ylabel("Average candidate layouts per board")
    ax2 = ax1.twinx()
    ax2.plot(x, acceptance, color="tab:red", marker="o", label="acceptance rate")
    ax2.set_ylabel("Acceptance rate")
    ax2.set_ylim(0.0, 1.0)
    ax1.set_xticks(x)
    ax1.set_xticklabels(level_names, rotation=30, ha="right")
    ax1.set_title("Generation attempts by level")
    fig.tight_layout()

    # 2) Generation time per level
    avg_seconds = [results[n]["avg_elapsed_seconds"] for n in level_names]

    fig_time = plt.figure()
    plt.bar(x, avg_seconds)
    plt.xticks(x, level_names, rotation=30, ha="right")
    plt.ylabel("Average seconds per board")
    plt.title("Generation time by level")
    plt.tight_layout()

    # 3) Deduction mix of the accepted boards
    bar_w = 0.2
    fig_mix = plt.figure()
    for i, key in enumerate(_DEDUCTION_KEYS):
        values = [results[n][f"avg_{key}"] for n in level_names]
        label = key.replace("inferred_", "").replace("_count", "")
        plt.bar(x + (i - 1.5) * bar_w, values, width=bar_w, label=label)
    plt.xticks(x, level_names, rotation=30, ha="right")
    plt.ylabel("Average cells deduced")
    plt.title("Deductions by method (accepted boards)")
    plt.legend()
    plt.tight_layout()

    if show:
        plt.show()
    else:
        for f in (fig, fig_time, fig_mix):
            plt.close(f)

    return results


def summarize_deduction_mix(
    results: Dict[str, Dict[str, float]], *, level: str
) -> Dict[str, float]:
    """
    Fractions of cells resolved by each deduction method on one level.

    Args:
        results: Output of run_level_analysis().
        level: Level name to summarize.

    Returns:
        Dict with local_frac, subset_frac, exact_frac, global_frac and
        avg_attempts.
    """
    if level not in results:
        raise KeyError(f"Level {level!r} not found in results.")
    m = results[level]

    counts = {
        key: float(m.get(f"avg_{key}", 0.0)) for key in _DEDUCTION_KEYS
    }
    total = sum(counts.values())
    if total == 0.0:
        raise ZeroDivisionError("No deductions recorded; cannot compute fractions.")

    return {
        "local_frac": counts["inferred_local_count"] / total,
        "subset_frac": counts["inferred_subset_count"] / total,
        "exact_frac": counts["inferred_exact_count"] / total,
        "global_frac": counts["inferred_global_count"] / total,
        "avg_attempts": float(m["avg_attempts"]),
    }
