"""Tests for the chart loader."""

from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest

from chartlint.loader import ChartLoadError, is_archive, load_chart


class TestLoadDirectory:
    """Tests for loading unpacked charts."""

    def test_metadata_and_files(self, make_chart, tmp_path: Path) -> None:
        root = make_chart(
            tmp_path / "web",
            "web",
            "1.2.3",
            dependencies=[{"name": "db", "version": "1.0.0", "alias": "database"}],
            values="replicas: 2\n",
            templates={"svc.yaml": "kind: Service\n"},
            extra={"kubeVersion": ">=1.19.0"},
        )

        chart = load_chart(root)

        assert chart.name == "web"
        assert chart.version == "1.2.3"
        assert chart.metadata.api_version == "v2"
        assert chart.metadata.kube_version == ">=1.19.0"
        assert chart.location == root
        assert chart.values_text == "replicas: 2\n"
        assert chart.schema_text is None
        assert chart.templates == {"templates/svc.yaml": b"kind: Service\n"}
        [dep] = chart.dependencies
        assert (dep.name, dep.version, dep.alias, dep.scope_key) == (
            "db",
            "1.0.0",
            "database",
            "database",
        )

    def test_missing_templates_dir(self, make_chart, tmp_path: Path) -> None:
        root = make_chart(tmp_path / "web", "web")
        for tpl in (root / "templates").iterdir():
            tpl.unlink()
        (root / "templates").rmdir()

        assert load_chart(root).templates is None

    def test_missing_chart_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ChartLoadError, match="Chart.yaml file is missing"):
            load_chart(tmp_path)

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(ChartLoadError, match="no such chart"):
            load_chart(tmp_path / "nope")

    def test_invalid_chart_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "Chart.yaml").write_text("name: [oops\n", encoding="utf-8")
        with pytest.raises(ChartLoadError, match="cannot parse"):
            load_chart(tmp_path)


class TestLoadArchive:
    """Tests for loading packaged charts."""

    def test_round_trip_from_directory(self, make_archive, tmp_path: Path) -> None:
        archive = make_archive(
            tmp_path / "db-1.0.0.tgz",
            "db",
            "1.0.0",
            values="image: postgres\n",
        )

        chart = load_chart(archive)

        assert chart.name == "db"
        assert chart.version == "1.0.0"
        assert chart.location == archive
        assert chart.values_text == "image: postgres\n"
        assert chart.templates is not None
        assert "templates/deployment.yaml" in chart.templates

    def test_archive_without_chart_yaml(self, tmp_path: Path) -> None:
        archive = tmp_path / "empty.tgz"
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w:gz") as tar:
            data = b"a: 1\n"
            info = tarfile.TarInfo("empty/values.yaml")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
        archive.write_bytes(buf.getvalue())

        with pytest.raises(ChartLoadError, match="Chart.yaml file is missing"):
            load_chart(archive)

    def test_corrupt_archive(self, tmp_path: Path) -> None:
        archive = tmp_path / "bad.tgz"
        archive.write_bytes(b"garbage")
        with pytest.raises(ChartLoadError, match="cannot read archive"):
            load_chart(archive)


@pytest.mark.parametrize(
    ("name", "expected"),
    [("db-1.0.0.tgz", True), ("db-1.0.0.tar.gz", True), ("db.tar", False), ("Chart.yaml", False)],
)
def test_is_archive(name: str, expected: bool) -> None:
    assert is_archive(Path(name)) is expected
