"""Pytest fixtures for chartlint tests."""

from __future__ import annotations

import io
import tarfile
from pathlib import Path
from typing import Any, Callable
from collections.abc import Mapping

import pytest
import yaml

from chartlint.models import LintMessage, LintOutcome, Severity


def write_chart(
    root: Path,
    name: str,
    version: str = "0.1.0",
    *,
    dependencies: list[dict[str, str]] | None = None,
    values: str | None = "",
    templates: dict[str, str] | None = None,
    icon: str = "https://example.com/icon.png",
    extra: dict[str, Any] | None = None,
) -> Path:
    """Write a chart directory at ``root`` and return it."""
    root.mkdir(parents=True, exist_ok=True)
    meta: dict[str, Any] = {"apiVersion": "v2", "name": name, "version": version}
    if icon:
        meta["icon"] = icon
    if dependencies:
        meta["dependencies"] = dependencies
    meta.update(extra or {})
    (root / "Chart.yaml").write_text(yaml.safe_dump(meta), encoding="utf-8")
    if values is not None:
        (root / "values.yaml").write_text(values, encoding="utf-8")
    if templates is None:
        templates = {"deployment.yaml": "kind: Deployment\nmetadata:\n  name: {{ .Release.Name }}\n"}
    tpl_dir = root / "templates"
    tpl_dir.mkdir(exist_ok=True)
    for tpl_name, content in templates.items():
        (tpl_dir / tpl_name).write_text(content, encoding="utf-8")
    return root


def pack_chart(chart_dir: Path, archive: Path) -> Path:
    """Package ``chart_dir`` into a gzipped tar under its own directory name."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        tar.add(chart_dir, arcname=chart_dir.name)
    archive.write_bytes(buf.getvalue())
    return archive


@pytest.fixture
def make_chart() -> Callable[..., Path]:
    return write_chart


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Build a chart in a scratch directory and package it to ``archive``."""

    def _make(archive: Path, name: str, version: str = "0.1.0", **kwargs: Any) -> Path:
        staging = tmp_path / "_staging" / name
        write_chart(staging, name, version, **kwargs)
        archive.parent.mkdir(parents=True, exist_ok=True)
        return pack_chart(staging, archive)

    return _make


class StubEngine:
    """Validation engine returning canned outcomes keyed by chart directory name."""

    def __init__(self, outcomes: Mapping[str, LintOutcome] | None = None) -> None:
        self.outcomes = dict(outcomes or {})
        self.calls: list[tuple[Path, Mapping[str, Any]]] = []

    def run(self, path: Path, values: Mapping[str, Any]) -> LintOutcome:
        self.calls.append((Path(path), values))
        return self.outcomes.get(Path(path).name, LintOutcome())


@pytest.fixture
def stub_engine() -> StubEngine:
    return StubEngine()


def error_outcome(text: str = "boom") -> LintOutcome:
    return LintOutcome.from_messages([LintMessage(Severity.ERROR, "Chart.yaml", text)])
