"""Tests for reporters/plain_text.py."""

import io

from layerguard.application.reporters.plain_text import PlainTextReporter
from layerguard.domain.model.result import LintResult
from tests.factories import make_issue


def render(result: LintResult) -> str:
    output = io.StringIO()
    PlainTextReporter(output).report(result)
    return output.getvalue()


class TestPlainTextReporter:
    """Tests for PlainTextReporter."""

    def test_reports_passed_result(self) -> None:
        """Reports PASSED when nothing was found."""
        text = render(LintResult.empty())

        assert "Architecture Lint Results" in text
        assert "  Issues: 0" in text
        assert "  Exit status: 0" in text
        assert "Result: PASSED" in text
        assert "Issues (" not in text

    def test_reports_failed_result(self) -> None:
        """Reports every issue with location, trigger and message."""
        issue = make_issue(
            line=7,
            exit_status=16,
            message="Domain entity has infrastructure dependency.\nMove persistence to a use case.",
        )
        result = LintResult(issues=(issue,), exit_status=16, files_checked=3)

        text = render(result)

        assert "  Files checked: 3" in text
        assert "    no_repo_in_domain: 1" in text
        assert "1. [HIGH] no_repo_in_domain (warning)" in text
        assert "   lib/my_app/domain/entities/user.ex:7  trigger: Repo.insert" in text
        assert "   Move persistence to a use case." in text
        assert "Result: FAILED" in text

    def test_rule_counts_sorted(self) -> None:
        issues = (
            make_issue("no_repo_in_domain", "lib/a.ex"),
            make_issue("domain_test_purity", "lib/b.ex"),
            make_issue("no_repo_in_domain", "lib/c.ex"),
        )

        text = render(LintResult(issues=issues, exit_status=2, files_checked=3))

        assert text.index("domain_test_purity: 1") < text.index("no_repo_in_domain: 2")
