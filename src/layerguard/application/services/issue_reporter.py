"""Issue aggregation: deterministic ordering and exit status."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from layerguard.domain.model.enums import Severity
from layerguard.domain.model.result import LintResult

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue


class IssueReporter:
    """Collects issues into an ordered LintResult.

    Order never depends on completion order: issues are sorted by
    (file, line, rule id). Ties keep their collection order.
    """

    __slots__ = ("_min_severity",)

    def __init__(self, min_severity: Severity = Severity.LOW) -> None:
        """Initialize reporter.

        Args:
            min_severity: Issues below this severity do not affect the exit status
        """
        self._min_severity = min_severity

    @staticmethod
    def order(issues: Iterable[Issue]) -> tuple[Issue, ...]:
        """Issues sorted by (file, line, rule id)."""
        return tuple(sorted(issues, key=lambda issue: issue.sort_key))

    def exit_status(self, issues: Iterable[Issue]) -> int:
        """Max exit status among issues at or above min severity, 0 if none."""
        return max(
            (issue.exit_status for issue in issues if issue.severity >= self._min_severity),
            default=0,
        )

    def build(self, issues: Iterable[Issue], files_checked: int) -> LintResult:
        """Ordered result with its exit status."""
        ordered = self.order(issues)
        return LintResult(issues=ordered, exit_status=self.exit_status(ordered), files_checked=files_checked)
