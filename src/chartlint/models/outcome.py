"""Lint result models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from collections.abc import Iterable


class Severity(IntEnum):
    """Ordinal severity of a lint message."""

    UNKNOWN = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LintMessage:
    """A structured message emitted by a lint rule."""

    severity: Severity
    path: str
    text: str

    def __str__(self) -> str:
        return f"[{self.severity.name}] {self.path}: {self.text}"


@dataclass(frozen=True)
class LintOutcome:
    """Everything the validation engine reported for a single chart.

    ``errors`` holds raw engine-level failures. When the engine produced
    structured messages, the raw errors are derived from them; when it could
    not even get that far, ``messages`` is empty.
    """

    messages: tuple[LintMessage, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def has_warnings_or_errors(self) -> bool:
        if any(msg.severity > Severity.INFO for msg in self.messages):
            return True
        return bool(self.errors)

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    @classmethod
    def from_messages(
        cls, messages: Iterable[LintMessage], *, tolerance: Severity = Severity.ERROR
    ) -> LintOutcome:
        collected = tuple(messages)
        errors = tuple(str(msg) for msg in collected if msg.severity >= tolerance)
        return cls(messages=collected, errors=errors)

    @classmethod
    def from_failure(cls, error: str | Exception) -> LintOutcome:
        return cls(errors=(str(error),))


@dataclass(frozen=True)
class ScopeResult:
    """Result of linting one scope.

    Exactly one of ``outcome`` and ``failure`` is set: ``outcome`` when the
    engine ran, ``failure`` when the engine could not lint the scope at all.
    """

    scope: str
    outcome: LintOutcome | None = None
    failure: str | None = None

    def __post_init__(self) -> None:
        if (self.outcome is None) == (self.failure is None):
            raise ValueError("ScopeResult needs exactly one of outcome or failure")

    @property
    def ok(self) -> bool:
        return self.outcome is not None

    def as_outcome(self) -> LintOutcome:
        """Collapse into a LintOutcome; a failure becomes a single raw error."""
        if self.outcome is not None:
            return self.outcome
        return LintOutcome.from_failure(self.failure or "")
