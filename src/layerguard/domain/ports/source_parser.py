"""Source parser port (interface)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from layerguard.domain.model.syntax_tree import SyntaxTree


class SourceParserPort(ABC):
    """Port for parsing source code.

    Infrastructure layer must provide implementation.
    """

    @abstractmethod
    def parse(self, path: str, content: str) -> SyntaxTree:
        """Parse one source file.

        Args:
            path: Project-relative path (forward slashes)
            content: File text

        Returns:
            Parsed SyntaxTree

        Raises:
            SourceParseError: If content cannot be parsed
        """
        ...
