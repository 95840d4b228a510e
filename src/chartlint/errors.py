"""Base exception shared by the fatal errors raised across chartlint."""

from __future__ import annotations


class ChartLintError(RuntimeError):
    """Base error for failures that abort a lint run."""
