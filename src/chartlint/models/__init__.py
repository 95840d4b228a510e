"""Data models for charts and lint results."""

from __future__ import annotations

from .chart import ROOT_SCOPE, ChartMetadata, ChartNode, Dependency, ScopedChart
from .outcome import LintMessage, LintOutcome, ScopeResult, Severity

__all__ = [
    "ROOT_SCOPE",
    "ChartMetadata",
    "ChartNode",
    "Dependency",
    "LintMessage",
    "LintOutcome",
    "ScopeResult",
    "ScopedChart",
    "Severity",
]
