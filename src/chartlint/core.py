"""Core lint entrypoint.

This module has no argument parsing in it so the same flow can be driven by
the command line and by tests.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from .discovery import DiscoveryError, discover_scoped_charts, root_scope
from .linter import ChartLinter, LintEngine
from .loader import VALUES_FILE, ChartLoadError, load_chart
from .orchestrator import LintOrchestrator
from .report import LintReport
from .values import ValueOptions, merge_values, parse_values_text
from .versions import KubeVersion


class RootChartError(ChartLoadError):
    """Raised when the chart given on the command line cannot be loaded."""


def lint_path(
    path: Path | str = ".",
    *,
    with_subcharts: bool = False,
    strict: bool = False,
    quiet: bool = False,
    kube_version: KubeVersion | None = None,
    value_options: ValueOptions | None = None,
    engine: LintEngine | None = None,
    out: TextIO | None = None,
) -> LintReport:
    """Lint the chart at ``path`` and, optionally, its sub-charts.

    Params:
        path: root chart directory or archive
        with_subcharts: also lint the charts under charts/ that satisfy a
            dependency of the root chart
        strict: have the built-in engine fail on warnings
        quiet: hide clean charts and Info messages
        kube_version: target Kubernetes version for the built-in engine
        value_options: values files and --set overrides
        engine: validation engine; the built-in ChartLinter when None
        out: stream the report is written to (default: stdout)

    Returns: the populated LintReport

    Raises:
        RootChartError: the root chart cannot be loaded
        DiscoveryError: a sub-chart cannot be loaded
        ValuesError: the overrides are invalid
        LintFailedError: at least one chart failed; raised after the report
            has been written
    """
    out = out or sys.stdout
    path = Path(path)

    try:
        root_chart = load_chart(path)
    except ChartLoadError as exc:
        raise RootChartError(f"cannot load chart, due to: {exc}") from exc

    if with_subcharts:
        try:
            charts = discover_scoped_charts(path, root_chart)
        except DiscoveryError as exc:
            raise DiscoveryError(f"cannot load sub-charts, due to: {exc}") from exc
    else:
        charts = root_scope(path, root_chart)

    values = merge_values(parse_values_text(root_chart.values_text, VALUES_FILE), value_options)

    if engine is None:
        engine = ChartLinter(strict=strict, kube_version=kube_version)

    report = LintReport(quiet=quiet)
    report.extend(LintOrchestrator(engine).run(charts, values))
    report.write(out)
    return report
