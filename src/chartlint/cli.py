"""Examine a chart for possible issues.

This command takes a path to a chart and runs a series of tests to verify that
the chart is well-formed.

If the linter encounters things that will cause the chart to fail installation,
it will emit [ERROR] messages. If it encounters issues that break with
convention or recommendation, it will emit [WARNING] messages.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from .core import lint_path
from .errors import ChartLintError
from .settings import Settings, load_settings
from .values import ValueOptions
from .versions import KubeVersionError, parse_kube_version


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chartlint",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("paths", nargs="*", metavar="PATH", help="Path to the chart (default: .)")
    parser.add_argument(
        "--strict", action="store_true", default=None, help="fail on lint warnings"
    )
    parser.add_argument("--with-subcharts", action="store_true", help="lint dependent charts")
    parser.add_argument("--quiet", action="store_true", help="print only warnings and errors")
    parser.add_argument(
        "--kube-version",
        default="",
        help="Kubernetes version used for capabilities and deprecation checks",
    )
    parser.add_argument(
        "-f",
        "--values",
        dest="value_files",
        action="append",
        default=[],
        metavar="FILE",
        help="specify values in a YAML file (can specify multiple)",
    )
    parser.add_argument(
        "--set",
        dest="set_values",
        action="append",
        default=[],
        metavar="EXPR",
        help="set values on the command line (key1=val1,key2=val2)",
    )
    parser.add_argument(
        "--set-string",
        dest="set_string_values",
        action="append",
        default=[],
        metavar="EXPR",
        help="set STRING values on the command line (key1=val1,key2=val2)",
    )
    parser.add_argument("--debug", action="store_true", help="enable verbose logging")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run(args: argparse.Namespace, settings: Settings, out: TextIO) -> None:
    """Run a lint from parsed arguments.

    Raises:
        ChartLintError: On any fatal error or when a chart failed.
    """
    if len(args.paths) > 1:
        raise ChartLintError(
            f"invalid call, expected path to a single chart, got: {args.paths}"
        )
    path = args.paths[0] if args.paths else "."

    kube_version = settings.kube_version
    if args.kube_version:
        try:
            kube_version = parse_kube_version(args.kube_version)
        except KubeVersionError as exc:
            raise ChartLintError(f"invalid kube version '{args.kube_version}': {exc}") from exc

    strict = settings.strict if args.strict is None else args.strict

    lint_path(
        path,
        with_subcharts=args.with_subcharts,
        strict=strict,
        quiet=args.quiet,
        kube_version=kube_version,
        value_options=ValueOptions(
            value_files=tuple(args.value_files),
            values=tuple(args.set_values),
            string_values=tuple(args.set_string_values),
        ),
        out=out,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings()
    except ChartLintError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _configure_logging(args.debug or settings.debug)

    try:
        run(args, settings, sys.stdout)
    except ChartLintError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
