"""
Result types and exceptions for export runs.

Orchestration returns values instead of letting exceptions cross the process
boundary: every export target yields a TargetOutcome and every run a RunResult.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class TargetOutcome:
    """Outcome of one export target within a run."""
    target: str
    path: str
    ok: bool
    skipped: bool = False
    error: Optional[BaseException] = None

    @property
    def status(self) -> str:
        if self.skipped:
            return "skipped"
        return "ok" if self.ok else "failed"


@dataclass(frozen=True)
class RunResult:
    """Overall result of one process run."""
    ok: bool
    message: str = ""
    outcomes: tuple[TargetOutcome, ...] = field(default_factory=tuple)
    error: Optional[BaseException] = None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else -1

    @property
    def failed_targets(self) -> list[str]:
        return [o.target for o in self.outcomes if not o.ok and not o.skipped]

    @classmethod
    def from_outcomes(cls, message: str = "", outcomes: tuple[TargetOutcome, ...] = ()) -> RunResult:
        return cls(ok=all(o.ok or o.skipped for o in outcomes), message=message, outcomes=tuple(outcomes))

    @classmethod
    def failure(cls, message: str, error: Optional[BaseException] = None,
                outcomes: tuple[TargetOutcome, ...] = ()) -> RunResult:
        return cls(ok=False, message=message, outcomes=tuple(outcomes), error=error)


class ExportError(Exception):
    """Base exception for export operations."""
    pass


class InvocationError(ExportError):
    """Missing arguments, missing input file or unknown mode."""
    pass


class TargetExportError(ExportError):
    """A single export target could not be produced."""
    def __init__(self, target: str, path: str, message: str):
        self.target = target
        self.path = path
        super().__init__(f"Export target {target} failed ({path}): {message}")


class ExtractionError(ExportError):
    """Raw tribe or profile extraction failed."""
    pass


class BackendError(ExportError):
    """The content backend could not be resolved or constructed."""
    pass
