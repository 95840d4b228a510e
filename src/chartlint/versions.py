"""Kubernetes versions and semver constraints built atop packaging.version.

Supported constraint expressions:
- exact versions (e.g., "1.2.3")
- caret ranges ^x.y.z → >=x.y.z,<x+1.0.0
- tilde ranges ~x.y.z → >=x.y.z,<x.y+1.0
- comparator sets split by spaces or commas, e.g., ">=1.20.0 <1.26.0"
- alternatives joined by "||"

Prerelease and build suffixes ("-0", "+k3s1") are ignored when comparing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from packaging.version import InvalidVersion, Version


DEFAULT_KUBE_VERSION = "v1.20.0"

# Semantic Versioning 2.0.0, with an optional leading "v".
SEMVER_PATTERN = re.compile(
    r"^v?(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?(?:\.(0|[1-9]\d*))?"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


class KubeVersionError(ValueError):
    """Raised when a Kubernetes version string cannot be parsed."""


@dataclass(frozen=True)
class KubeVersion:
    """Target Kubernetes version for capability and compatibility checks."""

    major: int
    minor: int
    patch: int = 0

    @property
    def version(self) -> str:
        return f"v{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        return self.version


def is_semver(text: str) -> bool:
    return bool(SEMVER_PATTERN.match(text.strip()))


def _parse_version(v: str) -> Version:
    core = re.split(r"[-+]", v.strip(), maxsplit=1)[0]
    return Version(core)


def parse_kube_version(text: str) -> KubeVersion:
    """Parse "1.20", "v1.20.3" and the like.

    Raises:
        KubeVersionError: If ``text`` is not a semantic version.
    """
    if not is_semver(text):
        raise KubeVersionError(f"{text!r} is not a valid semantic version")
    try:
        v = _parse_version(text)
    except InvalidVersion as exc:
        raise KubeVersionError(str(exc)) from exc
    return KubeVersion(major=v.major, minor=v.minor, patch=v.micro)


def _next_major(v: Version) -> Version:
    return Version(f"{v.major + 1}.0.0")


def _next_minor(v: Version) -> Version:
    return Version(f"{v.major}.{v.minor + 1}.0")


# ">= 1.19.0" is read as ">=1.19.0"
_OPERATOR_SPACING = re.compile(r"(>=|<=|!=|==|>|<|=|\^|~)\s+")


def _satisfies_one(v: Version, expr: str) -> bool:
    expr = _OPERATOR_SPACING.sub(r"\1", expr.strip())

    # caret ^x.y.z
    if expr.startswith("^"):
        base = _parse_version(expr[1:])
        return (v >= base) and (v < _next_major(base))

    # tilde ~x.y.z
    if expr.startswith("~"):
        base = _parse_version(expr[1:])
        return (v >= base) and (v < _next_minor(base))

    ok = True
    for t in expr.replace(",", " ").split():
        if t.startswith(">="):
            ok = ok and (v >= _parse_version(t[2:]))
        elif t.startswith(">"):
            ok = ok and (v > _parse_version(t[1:]))
        elif t.startswith("<="):
            ok = ok and (v <= _parse_version(t[2:]))
        elif t.startswith("<"):
            ok = ok and (v < _parse_version(t[1:]))
        elif t.startswith("!="):
            ok = ok and (v != _parse_version(t[2:]))
        elif t.startswith("=="):
            ok = ok and (v == _parse_version(t[2:]))
        elif t.startswith("="):
            ok = ok and (v == _parse_version(t[1:]))
        else:
            ok = ok and (v == _parse_version(t))
    return ok


def satisfies(installed: str, constraint: str) -> bool:
    """Return True when version ``installed`` meets ``constraint``.

    Raises:
        packaging.version.InvalidVersion: If either side is malformed.
    """
    v = _parse_version(installed)
    return any(_satisfies_one(v, alt) for alt in constraint.split("||") if alt.strip())
