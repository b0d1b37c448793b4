"""Project filesystem port."""

from __future__ import annotations

from typing import Protocol


class ProjectFileSystem(Protocol):
    """Existence probe used by structural-placement checks.

    Implementations never raise: probe failures (permission denied, ...)
    answer False.
    """

    def exists(self, path: str) -> bool:
        """True if project-relative path exists.

        Args:
            path: Project-relative path (forward slashes)

        Returns:
            True if a file or directory exists at path
        """
        ...
