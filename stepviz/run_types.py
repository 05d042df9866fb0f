"""Run configuration types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RunConfig:
    """Groups trace-runner configuration.

    ``max_steps`` is the caller-imposed cap on recorded steps; ``None`` means
    the run continues until the program finishes, and ``0`` records nothing.
    """

    max_steps: int | None = None
    yield_between_steps: bool = True

    def __post_init__(self):
        if self.max_steps is not None and self.max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {self.max_steps}")


@dataclass
class RunStats:
    """Returned execution metrics from a trace run."""

    steps: int = 0
    elapsed: float = 0.0
