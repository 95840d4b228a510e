"""Tests for Kubernetes version parsing and constraints."""

from __future__ import annotations

import pytest

from chartlint.versions import KubeVersion, KubeVersionError, is_semver, parse_kube_version, satisfies


class TestParseKubeVersion:
    """Tests for parse_kube_version."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1.20", KubeVersion(1, 20, 0)),
            ("v1.20.3", KubeVersion(1, 20, 3)),
            ("1.27.1+k3s1", KubeVersion(1, 27, 1)),
        ],
    )
    def test_valid(self, text: str, expected: KubeVersion) -> None:
        assert parse_kube_version(text) == expected

    def test_version_string(self) -> None:
        assert parse_kube_version("1.20").version == "v1.20.0"
        assert str(parse_kube_version("v1.22.4")) == "v1.22.4"

    @pytest.mark.parametrize("text", ["", "latest", "1.x", "v1..2"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(KubeVersionError):
            parse_kube_version(text)


class TestSatisfies:
    """Tests for semver constraint matching."""

    @pytest.mark.parametrize(
        ("version", "constraint", "expected"),
        [
            ("v1.20.0", ">=1.19.0", True),
            ("v1.18.0", ">=1.19.0", False),
            ("v1.20.0", ">=1.19.0-0 <1.22.0-0", True),
            ("v1.22.0", ">=1.19.0-0 <1.22.0-0", False),
            ("v1.20.0", ">=1.19.0, <1.21.0", True),
            ("v1.20.5", "~1.20.0", True),
            ("v1.21.0", "~1.20.0", False),
            ("v1.99.0", "^1.0.0", True),
            ("v2.0.0", "^1.0.0", False),
            ("v1.16.0", "<1.15.0 || >=1.16.0", True),
            ("v1.15.5", "<1.15.0 || >=1.16.0", False),
            ("v1.20.0", "1.20.0", True),
            ("v1.20.0", ">= 1.19.0", True),
            ("v1.18.0", ">= 1.19.0", False),
            ("v1.20.0", ">= 1.19.0, < 1.21.0", True),
            ("v1.21.0", ">= 1.19.0, < 1.21.0", False),
            ("v1.20.5", "~ 1.20.0", True),
        ],
    )
    def test_constraints(self, version: str, constraint: str, expected: bool) -> None:
        assert satisfies(version, constraint) is expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [("1.0.0", True), ("0.1.0-rc.1+build.5", True), ("1.0", True), ("one", False), ("1.0.0.0", False)],
)
def test_is_semver(text: str, expected: bool) -> None:
    assert is_semver(text) is expected
