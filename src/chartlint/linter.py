"""Built-in validation engine.

The engine lints a single chart against a single value tree. It checks the
chart descriptor, the values file (and its JSON schema, if the chart ships
one) and the shape of the templates directory. It does not render templates.
"""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from typing import Any, Protocol
from collections.abc import Iterable, Iterator, Mapping

from packaging.version import InvalidVersion

from .errors import ChartLintError
from .loader import CHART_FILE, SCHEMA_FILE, TEMPLATES_DIR, VALUES_FILE, ChartLoadError, load_chart
from .models import ChartNode, LintMessage, LintOutcome, Severity
from .values import ValuesError, coalesce, parse_values_text
from .versions import DEFAULT_KUBE_VERSION, KubeVersion, is_semver, parse_kube_version, satisfies


TEMPLATE_EXTENSIONS = (".yaml", ".yml", ".tpl", ".txt")
API_VERSIONS = ("v1", "v2")


class LintEngineError(ChartLintError):
    """Raised by an engine that cannot lint a chart at all."""


class LintEngine(Protocol):
    """Anything that can lint one chart path with one value tree."""

    def run(self, path: Path, values: Mapping[str, Any]) -> LintOutcome: ...


def _format_errors(errors: Iterable) -> Iterator[str]:
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        yield f"- {pointer or '<root>'}: {error.message}"


class ChartLinter:
    """Lint charts with the built-in rule set.

    ``strict`` lowers the failure threshold from Error to Warning, so that
    warnings are reported as raw errors too.
    """

    def __init__(self, *, strict: bool = False, kube_version: KubeVersion | None = None) -> None:
        self.strict = strict
        self.kube_version = kube_version or parse_kube_version(DEFAULT_KUBE_VERSION)

    @property
    def tolerance(self) -> Severity:
        return Severity.WARNING if self.strict else Severity.ERROR

    def run(self, path: Path, values: Mapping[str, Any]) -> LintOutcome:
        try:
            chart = load_chart(path)
        except ChartLoadError as exc:
            return LintOutcome.from_failure(f"unable to load chart: {exc}")

        messages: list[LintMessage] = []
        messages.extend(self.check_chartfile(chart))
        messages.extend(self.check_values(chart, values))
        messages.extend(self.check_templates(chart))
        return LintOutcome.from_messages(messages, tolerance=self.tolerance)

    def check_chartfile(self, chart: ChartNode) -> Iterator[LintMessage]:
        meta = chart.metadata

        def error(text: str) -> LintMessage:
            return LintMessage(Severity.ERROR, CHART_FILE, text)

        if not meta.name:
            yield error("name is required")

        if not meta.version:
            yield error("version is required")
        elif not is_semver(meta.version):
            yield error(f"version '{meta.version}' is not a valid SemVer")

        if not meta.api_version:
            yield error('apiVersion is required. The value must be either "v1" or "v2"')
        elif meta.api_version not in API_VERSIONS:
            yield error(
                f"apiVersion '{meta.api_version}' is not valid. "
                'The value must be either "v1" or "v2"'
            )

        if not meta.icon:
            yield LintMessage(Severity.INFO, CHART_FILE, "icon is recommended")

        if meta.kube_version:
            try:
                compatible = satisfies(self.kube_version.version, meta.kube_version)
            except InvalidVersion:
                yield error(f"kubeVersion '{meta.kube_version}' is not a valid constraint")
            else:
                if not compatible:
                    yield error(
                        f"chart requires kubeVersion: {meta.kube_version} which is "
                        f"incompatible with Kubernetes {self.kube_version}"
                    )

    def check_values(self, chart: ChartNode, values: Mapping[str, Any]) -> Iterator[LintMessage]:
        try:
            defaults = parse_values_text(chart.values_text, VALUES_FILE)
        except ValuesError as exc:
            yield LintMessage(Severity.ERROR, VALUES_FILE, str(exc))
            return

        if chart.schema_text is None:
            return

        from jsonschema import Draft7Validator
        from jsonschema.exceptions import SchemaError
        from jsonschema.validators import validator_for
        from referencing.exceptions import Unresolvable

        try:
            schema = json.loads(chart.schema_text)
            validator_cls = validator_for(schema, default=Draft7Validator)
            validator_cls.check_schema(schema)
        except (json.JSONDecodeError, SchemaError) as exc:
            yield LintMessage(Severity.ERROR, SCHEMA_FILE, f"invalid schema: {exc}")
            return

        document = coalesce(defaults, values)
        try:
            errors = sorted(
                validator_cls(schema).iter_errors(document), key=lambda e: [str(p) for p in e.path]
            )
        except Unresolvable as exc:
            yield LintMessage(Severity.ERROR, SCHEMA_FILE, f"invalid schema: {exc}")
            return
        for line in _format_errors(errors):
            yield LintMessage(
                Severity.ERROR, VALUES_FILE, f"values don't meet the schema of {chart.name}: {line}"
            )

    def check_templates(self, chart: ChartNode) -> Iterator[LintMessage]:
        if chart.templates is None:
            yield LintMessage(Severity.WARNING, TEMPLATES_DIR + "/", "directory not found")
            return

        import yaml

        for name, raw in chart.templates.items():
            suffix = PurePosixPath(name).suffix
            if suffix not in TEMPLATE_EXTENSIONS:
                yield LintMessage(
                    Severity.ERROR,
                    name,
                    f"file extension '{suffix}' not valid. "
                    "Valid extensions are .yaml, .yml, .tpl, or .txt",
                )
                continue
            if suffix not in (".yaml", ".yml") or b"{{" in raw:
                continue
            try:
                list(yaml.safe_load_all(raw))
            except yaml.YAMLError as exc:
                yield LintMessage(Severity.ERROR, name, f"unable to parse YAML: {exc}")
