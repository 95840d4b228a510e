"""Load charts from directories and packaged archives."""

from __future__ import annotations

import tarfile
from pathlib import Path, PurePosixPath

from .errors import ChartLintError
from .models import ChartMetadata, ChartNode


CHART_FILE = "Chart.yaml"
VALUES_FILE = "values.yaml"
SCHEMA_FILE = "values.schema.json"
TEMPLATES_DIR = "templates"
ARCHIVE_SUFFIXES = (".tgz", ".tar.gz")


class ChartLoadError(ChartLintError):
    """Raised when a chart cannot be read or its Chart.yaml is invalid."""


def is_archive(path: Path) -> bool:
    return path.name.endswith(ARCHIVE_SUFFIXES)


def load_chart(path: Path | str) -> ChartNode:
    """Load the chart at ``path``, either a directory or a chart archive.

    Raises:
        ChartLoadError: If the path is missing, unreadable or not a chart.
    """
    path = Path(path)
    if path.is_dir():
        return _load_directory(path)
    if path.is_file():
        return _load_archive(path)
    raise ChartLoadError(f"no such chart: {path}")


def _parse_metadata(text: str, origin: Path) -> ChartMetadata:
    import yaml

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ChartLoadError(f"cannot parse {origin}: {exc}") from exc
    if not isinstance(data, dict):
        raise ChartLoadError(f"{origin} must contain a mapping")
    return ChartMetadata.from_dict(data)


def _read_optional(path: Path) -> str | None:
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ChartLoadError(f"cannot read {path}: {exc}") from exc


def _load_directory(root: Path) -> ChartNode:
    chart_file = root / CHART_FILE
    if not chart_file.is_file():
        raise ChartLoadError(f"{CHART_FILE} file is missing in {root}")
    metadata = _parse_metadata(_read_optional(chart_file) or "", chart_file)

    templates: dict[str, bytes] | None = None
    templates_dir = root / TEMPLATES_DIR
    if templates_dir.is_dir():
        templates = {}
        try:
            for p in sorted(templates_dir.rglob("*")):
                if p.is_file():
                    templates[p.relative_to(root).as_posix()] = p.read_bytes()
        except OSError as exc:
            raise ChartLoadError(f"cannot read templates in {root}: {exc}") from exc

    return ChartNode(
        metadata=metadata,
        location=root,
        values_text=_read_optional(root / VALUES_FILE),
        schema_text=_read_optional(root / SCHEMA_FILE),
        templates=templates,
    )


def _load_archive(archive: Path) -> ChartNode:
    """Load a packaged chart: a gzipped tar with one top-level directory."""
    try:
        with tarfile.open(archive, "r:gz") as tar:
            files: dict[str, bytes] = {}
            has_templates = False
            for member in tar.getmembers():
                parts = PurePosixPath(member.name).parts
                if len(parts) < 2:
                    continue
                if parts[1] == TEMPLATES_DIR:
                    has_templates = True
                if not member.isfile():
                    continue
                handle = tar.extractfile(member)
                if handle is None:
                    continue
                # Drop the top-level directory; nested sub-charts are kept
                # under their charts/ prefix and ignored below.
                files["/".join(parts[1:])] = handle.read()
    except (OSError, tarfile.TarError, EOFError) as exc:
        raise ChartLoadError(f"cannot read archive {archive}: {exc}") from exc

    if CHART_FILE not in files:
        raise ChartLoadError(f"{CHART_FILE} file is missing in {archive}")

    def text(name: str) -> str | None:
        raw = files.get(name)
        if raw is None:
            return None
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ChartLoadError(f"cannot decode {name} in {archive}: {exc}") from exc

    metadata = _parse_metadata(text(CHART_FILE) or "", archive / CHART_FILE)
    prefix = TEMPLATES_DIR + "/"
    templates = {name: raw for name, raw in sorted(files.items()) if name.startswith(prefix)}

    return ChartNode(
        metadata=metadata,
        location=archive,
        values_text=text(VALUES_FILE),
        schema_text=text(SCHEMA_FILE),
        templates=templates if has_templates else None,
    )
