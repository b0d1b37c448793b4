"""Plain text reporter using print().

Stdlib-only reporter for simple text output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from layerguard.application.reporters._base import BaseReporter

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue
    from layerguard.domain.model.result import LintResult


class PlainTextReporter(BaseReporter):
    """Plain text reporter using print().

    Outputs to stdout by default, can be configured for any TextIO.
    """

    def report(self, result: LintResult) -> None:
        """Report lint result as plain text.

        Args:
            result: Lint result
        """
        self._report_header()
        self._report_summary(result)

        if result.issues:
            self._report_issues(result.issues)

        self._report_footer(result)

    def _write(self, text: str = "") -> None:
        """Write line to output."""
        print(text, file=self._output)

    def _report_header(self) -> None:
        self._write("=" * 70)
        self._write("Architecture Lint Results")
        self._write("=" * 70)

    def _report_summary(self, result: LintResult) -> None:
        self._write()
        self._write("Summary:")
        self._write(f"  Files checked: {result.files_checked}")
        self._write(f"  Issues: {result.issue_count}")
        for rule_id, count in sorted(result.by_rule().items()):
            self._write(f"    {rule_id}: {count}")
        self._write(f"  Exit status: {result.exit_status}")

    def _report_issues(self, issues: tuple[Issue, ...]) -> None:
        self._write()
        self._write("-" * 70)
        self._write(f"Issues ({len(issues)}):")
        self._write("-" * 70)

        for i, issue in enumerate(issues, start=1):
            self._write()
            self._write(f"{i}. [{issue.severity.name}] {issue.rule_id} ({issue.category.value})")
            self._write(f"   {issue.location}  trigger: {issue.trigger}")
            for line in issue.message.splitlines():
                self._write(f"   {line}")

    def _report_footer(self, result: LintResult) -> None:
        self._write()
        self._write("=" * 70)
        status = "PASSED" if result.passed else "FAILED"
        self._write(f"Result: {status}")
        self._write("=" * 70)
