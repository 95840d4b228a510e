"""Chart descriptor models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from collections.abc import Iterable, Mapping

# Scope key reserved for the chart being linted.
ROOT_SCOPE = "."


@dataclass(frozen=True)
class Dependency:
    """A dependency declared in a chart's ``Chart.yaml``."""

    name: str
    version: str
    alias: str = ""

    @property
    def scope_key(self) -> str:
        """Scope under which a chart satisfying this dependency is linted."""
        return self.alias or self.name

    def matches(self, metadata: ChartMetadata) -> bool:
        return self.name == metadata.name and self.version == metadata.version

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Dependency:
        return cls(
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            alias=str(data.get("alias") or ""),
        )


@dataclass(frozen=True)
class ChartMetadata:
    """Parsed contents of ``Chart.yaml``."""

    name: str
    version: str
    api_version: str = ""
    icon: str = ""
    kube_version: str = ""
    dependencies: tuple[Dependency, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChartMetadata:
        deps = data.get("dependencies") or []
        return cls(
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            api_version=str(data.get("apiVersion") or ""),
            icon=str(data.get("icon") or ""),
            kube_version=str(data.get("kubeVersion") or ""),
            dependencies=tuple(Dependency.from_dict(d) for d in deps if isinstance(d, Mapping)),
        )


@dataclass(frozen=True)
class ChartNode:
    """A loaded chart: metadata plus the raw files the linter inspects.

    ``templates`` maps paths relative to the chart root (``templates/x.yaml``)
    to their raw content. ``templates`` is None when the chart has no
    ``templates/`` directory at all.
    """

    metadata: ChartMetadata
    location: Path
    values_text: str | None = None
    schema_text: str | None = None
    templates: Mapping[str, bytes] | None = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def version(self) -> str:
        return self.metadata.version

    @property
    def dependencies(self) -> tuple[Dependency, ...]:
        return self.metadata.dependencies

    def dependencies_matching(self, candidate: ChartNode) -> Iterable[Dependency]:
        """Yield this chart's declared dependencies satisfied by ``candidate``."""
        for dep in self.dependencies:
            if dep.matches(candidate.metadata):
                yield dep


@dataclass(frozen=True)
class ScopedChart:
    """A chart paired with the scope key it is linted under."""

    scope: str
    chart: ChartNode
    path: Path

    @property
    def name(self) -> str:
        return self.chart.name
