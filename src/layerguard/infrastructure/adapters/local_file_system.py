"""Local disk filesystem adapter."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalFileSystem:
    """Existence probe rooted at a project directory.

    Probe failures (permission denied, broken mounts) are logged and
    answer False.
    """

    def __init__(self, root: Path) -> None:
        """Initialize with project root.

        Args:
            root: Directory that project-relative paths resolve against

        Raises:
            TypeError: If root is None
        """
        if root is None:
            raise TypeError("root must not be None")
        self._root = root

    @property
    def root(self) -> Path:
        """Project root directory."""
        return self._root

    def exists(self, path: str) -> bool:
        """True if project-relative path exists on disk."""
        try:
            return (self._root / path).exists()
        except OSError as e:
            logger.warning("cannot probe %s: %s", path, e)
            return False
