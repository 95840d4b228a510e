"""Sub-chart discovery.

Walks the ``charts/`` directory of a root chart, loads every chart found there
(unpacked directories and packaged archives alike) and admits the ones that
satisfy a dependency declared by the root chart.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ChartLintError
from .loader import CHART_FILE, ChartLoadError, is_archive, load_chart
from .models import ROOT_SCOPE, ChartNode, ScopedChart


logger = logging.getLogger(__name__)

SUBCHARTS_DIR = "charts"


class DiscoveryError(ChartLintError):
    """Raised when a sub-chart under charts/ cannot be loaded."""


def root_scope(path: Path, chart: ChartNode) -> dict[str, ScopedChart]:
    """Return a scope mapping holding only the root chart."""
    return {ROOT_SCOPE: ScopedChart(scope=ROOT_SCOPE, chart=chart, path=path)}


def find_candidates(path: Path) -> list[tuple[ChartNode, Path]]:
    """Load every chart found below ``path``/charts, in walk order.

    A ``Chart.yaml`` file yields the chart rooted at its directory; a
    ``.tgz``/``.tar.gz`` file yields the packaged chart. Nested sub-charts of
    sub-charts are candidates too.

    Raises:
        DiscoveryError: If any candidate fails to load.
    """
    charts_dir = Path(path) / SUBCHARTS_DIR
    if not charts_dir.is_dir():
        return []

    found: list[tuple[ChartNode, Path]] = []
    for entry in sorted(charts_dir.rglob("*")):
        if not entry.is_file():
            continue
        if entry.name == CHART_FILE:
            location = entry.parent
        elif is_archive(entry):
            location = entry
        else:
            continue
        try:
            found.append((load_chart(location), location))
        except ChartLoadError as exc:
            raise DiscoveryError(f"cannot load sub-chart from {entry}, due to: {exc}") from exc

    return found


def discover_scoped_charts(path: Path, root_chart: ChartNode) -> dict[str, ScopedChart]:
    """Build the scope mapping for ``root_chart`` and its sub-charts.

    Candidates are matched on exact ``(name, version)`` against the root
    chart's own dependency list only. A match is keyed by the dependency's
    alias when it declares one, else by its name; a later candidate under
    an already used key replaces the earlier one. Candidates matching no
    root dependency are dropped.

    Raises:
        DiscoveryError: If any candidate fails to load. No partial mapping
            is returned.
    """
    path = Path(path)
    charts = root_scope(path, root_chart)

    for candidate, location in find_candidates(path):
        matched = False
        for dep in root_chart.dependencies_matching(candidate):
            matched = True
            key = dep.scope_key
            if key in charts:
                logger.debug(
                    "Scope %r from %s replaced by %s", key, charts[key].path, location
                )
            charts[key] = ScopedChart(scope=key, chart=candidate, path=location)
            logger.debug("Admitted sub-chart %s under scope %r", location, key)
        if not matched:
            logger.debug(
                "Dropped %s: %s-%s is not a dependency of %s",
                location,
                candidate.name,
                candidate.version,
                root_chart.name,
            )

    return charts
