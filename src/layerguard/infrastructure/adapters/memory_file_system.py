"""In-memory filesystem adapter.

Used when linting sources that are not on disk (editor buffers, tests).
"""

from __future__ import annotations

from collections.abc import Iterable


class MemoryFileSystem:
    """Existence probe over a fixed set of project-relative paths.

    A directory exists when any known file lives below it.
    """

    def __init__(self, paths: Iterable[str] = ()) -> None:
        """Initialize with known file paths.

        Args:
            paths: Project-relative file paths (forward slashes)
        """
        self._files = frozenset(path.strip("/") for path in paths)
        directories: set[str] = set()
        for file in self._files:
            parts = file.split("/")[:-1]
            for size in range(1, len(parts) + 1):
                directories.add("/".join(parts[:size]))
        self._directories = frozenset(directories)

    def exists(self, path: str) -> bool:
        """True if path is a known file or a directory containing one."""
        normalized = path.strip("/")
        return normalized in self._files or normalized in self._directories
