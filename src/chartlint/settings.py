"""Environment configuration.

Settings are read from ``CHARTLINT_*`` environment variables and validated
when loaded. Command line flags take precedence over anything read here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from collections.abc import Mapping

from .errors import ChartLintError
from .versions import DEFAULT_KUBE_VERSION, KubeVersion, KubeVersionError, parse_kube_version


DEBUG_ENV_VAR = "CHARTLINT_DEBUG"
STRICT_ENV_VAR = "CHARTLINT_STRICT"
KUBE_VERSION_ENV_VAR = "CHARTLINT_KUBE_VERSION"

_TRUTHY = {"1", "true", "yes", "y"}


class ConfigError(ChartLintError):
    """Raised when the environment holds an invalid setting."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Debug, strict and default Kubernetes version settings read from the environment."""

    debug: bool = False
    strict: bool = False
    kube_version: KubeVersion = parse_kube_version(DEFAULT_KUBE_VERSION)


def _flag(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, "").strip().lower() in _TRUTHY


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Load settings from ``env`` (default: the process environment).

    Raises:
        ConfigError: If CHARTLINT_KUBE_VERSION is set but cannot be parsed.
    """
    env = os.environ if env is None else env

    raw_kube = env.get(KUBE_VERSION_ENV_VAR, "").strip() or DEFAULT_KUBE_VERSION
    try:
        kube_version = parse_kube_version(raw_kube)
    except KubeVersionError as exc:
        raise ConfigError(f"Invalid {KUBE_VERSION_ENV_VAR} '{raw_kube}': {exc}") from exc

    return Settings(
        debug=_flag(env, DEBUG_ENV_VAR),
        strict=_flag(env, STRICT_ENV_VAR),
        kube_version=kube_version,
    )
