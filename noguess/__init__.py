"""
No-guess Minesweeper core

A reveal engine plus a board generator whose layouts are certified solvable from
the first click by deduction alone:
- Local deduction: satisfied or saturated single constraints
- Subset elimination: one constraint's hidden cells contained in another's
- Exact enumeration: backtracking over small connected constraint components
- Global count: the remaining mine total over all hidden cells
"""

from .analysis import (
    format_verifier_knowledge,
    run_generation_single_test,
    run_generation_many_tests,
    run_level_analysis,
    summarize_deduction_mix,
)
from .cells import CellState, Count, Mine, MINE, RevealResult
from .config import GeneratorConfig, load_config
from .engine import GamePhase, RevealEngine, play_cli
from .exceptions import (
    GenerationBudgetExceeded,
    InconsistentConstraintError,
    NoGuessError,
)
from .generator import BoardGenerator, GenerationResult
from .layout import Layout
from .levels import LEVELS, Level, get_level
from .verifier import NoGuessVerifier, is_no_guess

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "RevealEngine",
    "BoardGenerator",
    "NoGuessVerifier",
    "Layout",
    # Types
    "CellState",
    "Count",
    "Mine",
    "MINE",
    "RevealResult",
    "GamePhase",
    "GenerationResult",
    # Configuration
    "GeneratorConfig",
    "load_config",
    "LEVELS",
    "Level",
    "get_level",
    # Errors
    "NoGuessError",
    "InconsistentConstraintError",
    "GenerationBudgetExceeded",
    # Helpers
    "is_no_guess",
    "play_cli",
    # Analysis functions
    "format_verifier_knowledge",
    "run_generation_single_test",
    "run_generation_many_tests",
    "run_level_analysis",
    "summarize_deduction_mix",
]
