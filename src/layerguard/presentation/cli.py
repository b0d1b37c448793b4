"""layerguard command line interface.

Usage:
    layerguard                          # lint the current directory
    layerguard path/to/umbrella         # lint another project
    layerguard --format json > out.json
    layerguard --min-severity high --workers 8 -v

Exit status is the maximum exit status among issues at or above the
minimum severity (0 when clean), 1 on configuration or usage errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

from layerguard import __version__
from layerguard.application.reporters import ConsoleReporter, JsonReporter, PlainTextReporter
from layerguard.domain.exceptions.base import LayerGuardError
from layerguard.domain.model.enums import Severity
from layerguard.infrastructure.config import discover_config, load_config
from layerguard.presentation.runner import lint_project

if TYPE_CHECKING:
    from collections.abc import Sequence

    from layerguard.domain.ports.reporter import ReporterProtocol

logger = logging.getLogger("layerguard")

USAGE_ERROR = 1

_REPORTERS = {
    "text": PlainTextReporter,
    "json": JsonReporter,
    "rich": ConsoleReporter,
}


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the `layerguard` command."""
    parser = argparse.ArgumentParser(
        prog="layerguard",
        description="Architecture linter for layered Elixir umbrella projects.",
    )
    parser.add_argument("path", nargs="?", default=".", help="Project directory to lint (default: .)")
    parser.add_argument("--config", type=Path, help="TOML config file (default: discovered above PATH)")
    parser.add_argument("--format", choices=sorted(_REPORTERS), default="text", help="Output format")
    parser.add_argument(
        "--min-severity",
        choices=[severity.name.lower() for severity in Severity],
        help="Issues below this severity do not affect the exit status",
    )
    parser.add_argument("--workers", type=int, help="Worker threads for per-file analysis")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"layerguard {__version__}")
    return parser


def configure_logging(verbose: bool) -> None:
    """Route package logs to stderr through rich."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def main(argv: Sequence[str] | None = None) -> int:
    """Run the linter.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    root = Path(args.path)
    if not root.is_dir():
        parser.error(f"not a directory: {root}")

    try:
        config = load_config(args.config) if args.config else discover_config(root)
        overrides: dict[str, object] = {}
        if args.min_severity:
            overrides["min_severity"] = Severity.parse(args.min_severity)
        if args.workers is not None:
            overrides["workers"] = args.workers
        if overrides:
            config = replace(config, **overrides)  # type: ignore[arg-type]

        reporter: ReporterProtocol = _REPORTERS[args.format]()
        result = lint_project(root, config, reporter=reporter)
    except LayerGuardError as e:
        logger.error("%s", e)
        return USAGE_ERROR

    return result.exit_status


if __name__ == "__main__":
    sys.exit(main())
