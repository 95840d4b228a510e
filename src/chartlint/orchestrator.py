"""Run the validation engine once per scope."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Iterator, Mapping

from .linter import LintEngine, LintEngineError
from .models import LintOutcome, ScopedChart, ScopeResult
from .values import values_for_scope


logger = logging.getLogger(__name__)


class LintOrchestrator:
    """Lint every scope of a chart tree with a single engine.

    A scope the engine cannot lint is recorded as a failed ScopeResult and the
    remaining scopes are still linted.
    """

    def __init__(self, engine: LintEngine) -> None:
        self.engine = engine

    def lint_scope(self, scoped: ScopedChart, values: Mapping[str, Any]) -> ScopeResult:
        scope_values = values_for_scope(scoped.scope, values)
        try:
            outcome = self.engine.run(scoped.path, scope_values)
        except LintEngineError as exc:
            logger.debug("Engine failed on scope %r (%s): %s", scoped.scope, scoped.path, exc)
            return ScopeResult(scope=scoped.scope, failure=str(exc))
        return ScopeResult(scope=scoped.scope, outcome=outcome)

    def run(
        self, charts: Mapping[str, ScopedChart], values: Mapping[str, Any]
    ) -> Iterator[tuple[str, ScopedChart, LintOutcome]]:
        """Yield ``(scope, chart, outcome)`` for every scope in ``charts``."""
        for scope, scoped in charts.items():
            result = self.lint_scope(scoped, values)
            yield scope, scoped, result.as_outcome()
