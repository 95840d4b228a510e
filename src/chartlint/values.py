"""Value trees: merging user overrides and scoping them to sub-charts."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from collections.abc import Mapping

from .errors import ChartLintError
from .models import ROOT_SCOPE


GLOBAL_KEY = "global"

ValueTree = Mapping[str, Any]


class ValuesError(ChartLintError):
    """Raised when a values file or a --set expression is invalid."""


def values_for_scope(scope: str, values: ValueTree) -> ValueTree:
    """Return the slice of ``values`` a chart linted under ``scope`` sees.

    The root scope sees ``values`` itself. Any other scope sees
    ``values[scope]`` when that is a mapping, else ``{"global": None}``; in
    both cases the root's ``global`` entry, when present, replaces the scope's
    own ``global`` wholesale. Nothing is deep-merged and ``values`` is never
    modified.
    """
    if scope == ROOT_SCOPE:
        return values

    result: dict[str, Any] = {GLOBAL_KEY: None}
    scoped = values.get(scope)
    if isinstance(scoped, Mapping):
        result = dict(scoped)

    if GLOBAL_KEY in values:
        result[GLOBAL_KEY] = values[GLOBAL_KEY]

    return result


def coalesce(defaults: ValueTree | None, overrides: ValueTree | None) -> dict[str, Any]:
    """Deep-merge ``overrides`` onto ``defaults`` and return a new tree.

    Nested mappings are merged key by key, any other override value replaces
    the default, and a None override deletes the key.
    """
    result: dict[str, Any] = copy.deepcopy(dict(defaults or {}))
    for key, value in (overrides or {}).items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = coalesce(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


@dataclass(frozen=True)
class ValueOptions:
    """User supplied overrides, applied in the order listed."""

    value_files: tuple[str, ...] = ()
    values: tuple[str, ...] = ()
    string_values: tuple[str, ...] = ()


def parse_values_text(text: str | None, origin: str) -> dict[str, Any]:
    """Parse a YAML values document; an empty document is an empty tree."""
    import yaml

    try:
        data = yaml.safe_load(text or "")
    except yaml.YAMLError as exc:
        raise ValuesError(f"cannot parse {origin}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValuesError(f"{origin} must contain a mapping, got {type(data).__name__}")
    return data


def _typed_scalar(raw: str) -> Any:
    if raw in ("true", "false"):
        return raw == "true"
    if raw == "null":
        return None
    try:
        return int(raw)
    except ValueError:
        return raw


def _assign(tree: dict[str, Any], dotted: str, value: Any, expr: str) -> None:
    keys = dotted.split(".")
    if any(not k for k in keys):
        raise ValuesError(f"invalid key {dotted!r} in {expr!r}")
    node = tree
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[keys[-1]] = value


def parse_set_expression(expr: str, *, as_string: bool = False) -> dict[str, Any]:
    """Parse ``a.b=c,d=e`` into a nested tree.

    With ``as_string`` every value stays a string; otherwise ``true``,
    ``false``, ``null`` and integers are converted.
    """
    tree: dict[str, Any] = {}
    for part in expr.split(","):
        if not part:
            continue
        key, sep, raw = part.partition("=")
        if not sep:
            raise ValuesError(f"key {key!r} has no value in {expr!r}")
        value = raw if as_string else _typed_scalar(raw)
        _assign(tree, key.strip(), value, expr)
    return tree


def merge_values(base: ValueTree | None, options: ValueOptions | None = None) -> dict[str, Any]:
    """Merge chart defaults with values files and --set overrides.

    Raises:
        ValuesError: If a values file is unreadable or an expression is invalid.
    """
    options = options or ValueOptions()
    merged: dict[str, Any] = copy.deepcopy(dict(base or {}))

    for name in options.value_files:
        try:
            text = Path(name).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ValuesError(f"cannot read values file {name}: {exc}") from exc
        merged = _overlay(merged, parse_values_text(text, name))

    for expr in options.values:
        merged = _overlay(merged, parse_set_expression(expr))
    for expr in options.string_values:
        merged = _overlay(merged, parse_set_expression(expr, as_string=True))

    return merged


def _overlay(dst: dict[str, Any], src: Mapping[str, Any]) -> dict[str, Any]:
    """Like ``coalesce`` but a None value is kept rather than deleting the key."""
    result = dict(dst)
    for key, value in src.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = _overlay(dict(result[key]), value)
        else:
            result[key] = copy.deepcopy(value)
    return result
