"""Tunables for the no-guess generator and its verifier."""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

import yaml

DEFAULT_MAX_COMPONENT_SIZE = 22
DEFAULT_MAX_SOLUTIONS = 50000


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Search caps and retry budget for board generation.

    Attributes:
        max_component_size: Largest constraint component (in hidden variables)
            enumerated exactly; bigger components yield no deduction in a pass.
        max_solutions: Number of full solutions after which a component's
            enumeration is abandoned as truncated.
        max_attempts: Optional ceiling on candidate layouts tried.
        time_budget_seconds: Optional wall-clock ceiling for one generation.
        safe_radius: Radius of the mine-free block around the first click.
    """

    max_component_size: int = DEFAULT_MAX_COMPONENT_SIZE
    max_solutions: int = DEFAULT_MAX_SOLUTIONS
    max_attempts: Optional[int] = None
    time_budget_seconds: Optional[float] = None
    safe_radius: int = 1

    def __post_init__(self) -> None:
        if self.max_component_size <= 0:
            raise ValueError("max_component_size must be positive.")
        if self.max_solutions <= 0:
            raise ValueError("max_solutions must be positive.")
        if self.max_attempts is not None and self.max_attempts <= 0:
            raise ValueError("max_attempts must be positive when set.")
        if self.time_budget_seconds is not None and self.time_budget_seconds <= 0:
            raise ValueError("time_budget_seconds must be positive when set.")
        if self.safe_radius < 0:
            raise ValueError("safe_radius must be non-negative.")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "GeneratorConfig":
        """Build a config from a plain mapping, rejecting unknown keys."""
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown generator config keys: {sorted(unknown)}")

        return cls(**dict(data))


def load_config(path: str, section: Optional[str] = "generator") -> GeneratorConfig:
    """
    Load a GeneratorConfig from a YAML file.

    Args:
        path: Path to the YAML file.
        section: Top-level key holding the generator settings; None to read
            the whole document as the settings mapping.
    """
    with open(path, "r") as f:
        document = yaml.safe_load(f) or {}

    if section is not None:
        document = document.get(section) or {}

    if not isinstance(document, Mapping):
        raise ValueError(f"Generator config in {path!r} must be a mapping.")

    return GeneratorConfig.from_mapping(document)
