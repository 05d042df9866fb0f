"""Trace data types for step-by-step execution replay."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .run_types import RunStats


class TraceStatus(str, Enum):
    COMPLETED = "completed"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class TraceStep:
    """A single captured step.

    ``line_number`` is 1-based in the HostLang program; ``scope`` maps each
    visible candidate identifier to its JSON-safe snapshot.
    """

    step_index: int
    line_number: int
    scope: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"lineNumber": self.line_number, "scope": self.scope}


@dataclass(frozen=True)
class Trace:
    """Complete record of one simulated run.

    Steps captured before a failure are kept; ``error`` holds the single
    human-readable failure line.
    """

    steps: list[TraceStep] = field(default_factory=list)
    error: str | None = None
    truncated: bool = False
    stats: RunStats = field(default_factory=RunStats)

    @property
    def is_empty(self) -> bool:
        return not self.steps

    @property
    def status(self) -> TraceStatus:
        if self.error is not None:
            return TraceStatus.FAILED
        if self.is_empty:
            return TraceStatus.EMPTY
        return TraceStatus.COMPLETED

    def line_numbers(self) -> list[int]:
        return [s.line_number for s in self.steps]

    def values_of(self, name: str) -> list[Any]:
        """Snapshots of *name* across the steps where it was visible."""
        return [s.scope[name] for s in self.steps if name in s.scope]

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "steps": [s.to_dict() for s in self.steps],
            "error": self.error,
            "truncated": self.truncated,
        }
