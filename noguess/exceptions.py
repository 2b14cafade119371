"""Exceptions raised inside the generator and verifier."""


class NoGuessError(Exception):
    """Base class for errors raised by this package."""


class InconsistentConstraintError(NoGuessError):
    """A simulated board reached a state no mine assignment can satisfy."""


class GenerationBudgetExceeded(NoGuessError):
    """The caller-supplied attempt or time budget ran out before a board was certified."""

    def __init__(self, attempts: int, elapsed_seconds: float) -> None:
        super().__init__(
            f"No no-guess board found after {attempts} attempts "
            f"({elapsed_seconds:.2f}s)."
        )
        self.attempts = attempts
        self.elapsed_seconds = elapsed_seconds
