"""Reporter protocol for output formatting.

Reporters format LintResult for display. They write to
an output stream and return nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from layerguard.domain.model.result import LintResult


class ReporterProtocol(Protocol):
    """Contract for output reporters.

    Example:
        class MyReporter:
            def report(self, result: LintResult) -> None:
                for issue in result.issues:
                    print(issue)
    """

    def report(self, result: LintResult) -> None:
        """Report lint result.

        Args:
            result: Ordered issues and exit status
        """
        ...
