"""chartlint: lint a chart together with its sub-charts.

The orchestration lives in ``core.lint_path``; ``cli`` is a thin argparse
wrapper around it.
"""

from .core import lint_path
from .errors import ChartLintError
from .report import LintFailedError, LintReport

__version__ = "0.1.0"

__all__ = [
    "ChartLintError",
    "LintFailedError",
    "LintReport",
    "lint_path",
]
