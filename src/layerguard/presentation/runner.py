"""Project-level entry point shared by the CLI and the pytest plugin.

Wires the concrete adapters (Elixir parser, local filesystem, TOML
configuration) into the engine.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from layerguard.application.discovery import discover_sources, read_sources
from layerguard.application.services import LintEngine
from layerguard.infrastructure.adapters import CachedSourceParser, ElixirSourceParser, LocalFileSystem
from layerguard.infrastructure.config import discover_config

if TYPE_CHECKING:
    from pathlib import Path

    from layerguard.domain.model.configuration import LinterConfig
    from layerguard.domain.model.result import LintResult
    from layerguard.domain.ports.reporter import ReporterProtocol
    from layerguard.domain.ports.source_parser import SourceParserPort

logger = logging.getLogger(__name__)

# One cache per process: repeated runs only reparse edited files.
_default_parser = CachedSourceParser(ElixirSourceParser())


def lint_project(
    root: Path,
    config: LinterConfig | None = None,
    *,
    reporter: ReporterProtocol | None = None,
    parser: SourceParserPort | None = None,
) -> LintResult:
    """Lint every source file below root.

    Args:
        root: Project directory
        config: Run configuration, discovered above root if None
        reporter: Optional reporter for output
        parser: Source parser (shared cached ElixirSourceParser if None)

    Returns:
        LintResult with ordered issues and exit status

    Raises:
        ConfigurationError: If configuration is invalid
        ValueError: If root is not a directory
    """
    if config is None:
        config = discover_config(root)
    engine = LintEngine.from_config(
        config,
        parser or _default_parser,
        LocalFileSystem(root),
        reporter=reporter,
    )
    paths = discover_sources(root, config.include, config.exclude)
    logger.info("linting %d file(s) under %s", len(paths), root)
    return engine.run(read_sources(root, paths))
