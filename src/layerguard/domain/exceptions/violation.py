"""Boundary violation exception."""

from __future__ import annotations

from typing import TYPE_CHECKING

from layerguard.domain.exceptions.base import LayerGuardError

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue


class BoundaryViolationError(LayerGuardError):
    """Architecture boundaries violated.

    Raised by assert_clean() when issues found.

    Attributes:
        issues: All reported issues
    """

    def __init__(self, issues: tuple[Issue, ...]) -> None:
        if not issues:
            raise ValueError("BoundaryViolationError requires at least one issue")

        self.issues = issues

        msg_parts = [f"Found {len(issues)} architecture issue(s):"]
        for issue in issues:
            msg_parts.append(str(issue))

        super().__init__("\n".join(msg_parts))
