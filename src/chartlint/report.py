"""Report aggregation and rendering."""

from __future__ import annotations

from typing import TextIO
from collections.abc import Iterable

from .errors import ChartLintError
from .models import LintOutcome, ScopedChart, Severity


class LintFailedError(ChartLintError):
    """Raised after rendering when at least one chart failed."""


class LintReport:
    """Accumulate per-scope outcomes into a text report.

    ``total`` counts every scope added, including the ones quiet mode hides.
    ``failed`` counts scopes with at least one raw error and ``noisy`` scopes
    with any warning or error.
    """

    def __init__(self, *, quiet: bool = False) -> None:
        self.quiet = quiet
        self.total = 0
        self.failed = 0
        self.noisy = 0
        self._lines: list[str] = []

    def add(self, scope: str, scoped: ScopedChart, outcome: LintOutcome) -> None:
        self.total += 1
        noisy = outcome.has_warnings_or_errors
        if noisy:
            self.noisy += 1
        if self.quiet and not noisy:
            return

        self._lines.append(
            f"==> Linting chart: name={scoped.name}, scope={scope}, path={scoped.path}"
        )

        # Engines fold their errors into the messages, so raw errors are only
        # shown when there are no messages to show.
        if not outcome.messages:
            for err in outcome.errors:
                self._lines.append(f"Error {err}")

        for msg in outcome.messages:
            if not self.quiet or msg.severity > Severity.INFO:
                self._lines.append(str(msg))

        if outcome.failed:
            self.failed += 1

        self._lines.append("")

    def extend(self, results: Iterable[tuple[str, ScopedChart, LintOutcome]]) -> LintReport:
        for scope, scoped, outcome in results:
            self.add(scope, scoped, outcome)
        return self

    @property
    def body(self) -> str:
        return "".join(line + "\n" for line in self._lines)

    @property
    def summary(self) -> str:
        return f"{self.total} chart(s) linted, {self.failed} chart(s) failed"

    @property
    def show_summary(self) -> bool:
        return not self.quiet or self.noisy > 0

    def render(self) -> str:
        """Return the full report text, summary line included when shown."""
        text = self.body
        if self.failed == 0 and self.show_summary:
            text += self.summary + "\n"
        return text

    def write(self, out: TextIO) -> None:
        """Write the report to ``out``.

        Raises:
            LintFailedError: After writing the body, when any chart failed.
                The summary is the error message and is not written to ``out``.
        """
        if self.failed > 0:
            out.write(self.body)
            raise LintFailedError(self.summary)
        out.write(self.render())
