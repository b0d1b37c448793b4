"""Parsing exceptions."""

from __future__ import annotations

from layerguard.domain.exceptions.base import LayerGuardError


class SourceParseError(LayerGuardError):
    """Error during source code parsing.

    File-scoped: the engine turns it into a single issue for the file
    and keeps analysing the rest of the project.

    Attributes:
        path: File that failed to parse
        reason: Why parsing failed
        line: Line where parsing stopped (1-based)
    """

    def __init__(self, path: str, reason: str, line: int = 1) -> None:
        # FAIL-FIRST: validate required parameters
        if path is None:
            raise TypeError("path must not be None")
        if not reason:
            raise ValueError("reason must be non-empty string")
        if line < 1:
            raise ValueError(f"line must be >= 1, got {line}")

        self.path = path
        self.reason = reason
        self.line = line
        super().__init__(f"Failed to parse {path}:{line}: {reason}")
