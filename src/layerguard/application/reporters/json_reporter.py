"""JSON reporter for machine-readable output.

Stdlib-only reporter for JSON output.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TextIO

from layerguard.application.reporters._base import BaseReporter

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue
    from layerguard.domain.model.result import LintResult


class JsonReporter(BaseReporter):
    """JSON reporter for CI integration and tooling."""

    def __init__(self, output: TextIO | None = None, *, indent: int | None = 2) -> None:
        """Initialize reporter.

        Args:
            output: Output stream (default: sys.stdout)
            indent: JSON indentation (default: 2, None for compact)
        """
        super().__init__(output)
        self._indent = indent

    def report(self, result: LintResult) -> None:
        """Report lint result as JSON.

        Args:
            result: Lint result
        """
        json.dump(self.to_dict(result), self._output, indent=self._indent)
        self._output.write("\n")

    def to_dict(self, result: LintResult) -> dict[str, object]:
        """Convert LintResult to a JSON-serializable dict."""
        return {
            "passed": result.passed,
            "exit_status": result.exit_status,
            "summary": {
                "files_checked": result.files_checked,
                "issue_count": result.issue_count,
                "by_rule": dict(sorted(result.by_rule().items())),
            },
            "issues": [self._issue_to_dict(issue) for issue in result.issues],
        }

    def _issue_to_dict(self, issue: Issue) -> dict[str, object]:
        return {
            "rule_id": issue.rule_id,
            "severity": issue.severity.name.lower(),
            "category": issue.category.value,
            "family": issue.family.name.lower(),
            "file": issue.file,
            "line": issue.line,
            "trigger": issue.trigger,
            "message": issue.message,
            "exit_status": issue.exit_status,
        }
