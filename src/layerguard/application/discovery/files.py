"""Source file discovery from directory structure."""

from __future__ import annotations

import logging
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING

from layerguard.domain.model.configuration import DEFAULT_EXCLUDE, DEFAULT_INCLUDE

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)


def matches(path: str, pattern: str) -> bool:
    """Glob match on a project-relative path.

    `*` crosses directory separators; a leading `**/` also matches at
    the project root.
    """
    if fnmatchcase(path, pattern):
        return True
    return pattern.startswith("**/") and fnmatchcase(path, pattern[3:])


def discover_sources(
    root: Path,
    include: Iterable[str] = DEFAULT_INCLUDE,
    exclude: Iterable[str] = DEFAULT_EXCLUDE,
) -> tuple[str, ...]:
    """Discover source files below root.

    Args:
        root: Project directory to scan
        include: Globs of files to analyze
        exclude: Globs of files to skip (checked against relative paths)

    Returns:
        Sorted project-relative paths with forward slashes

    Raises:
        ValueError: If root is not a directory
    """
    if not root.is_dir():
        raise ValueError(f"root must be a directory: {root}")

    excluded = tuple(exclude)
    found: set[str] = set()
    for pattern in include:
        for file in root.glob(pattern):
            if not file.is_file():
                continue
            relative = file.relative_to(root).as_posix()
            if any(matches(relative, skip) for skip in excluded):
                continue
            found.add(relative)

    logger.debug("discovered %d source file(s) under %s", len(found), root)
    return tuple(sorted(found))


def read_sources(root: Path, paths: Iterable[str]) -> dict[str, str]:
    """Read discovered files.

    Undecodable bytes are replaced so that one bad file surfaces as a
    parse issue instead of aborting the run.

    Args:
        root: Project directory
        paths: Project-relative paths

    Returns:
        Path -> file content, in input order
    """
    return {path: (root / path).read_text(encoding="utf-8", errors="replace") for path in paths}
