"""Tests for domain/model/result.py."""

import pytest

from layerguard.domain.model.result import LintResult
from tests.factories import make_issue


class TestLintResult:
    """Tests for LintResult aggregate."""

    def test_empty(self) -> None:
        result = LintResult.empty()

        assert result.passed
        assert result.issue_count == 0
        assert result.files_checked == 0

    def test_failed_when_exit_status_nonzero(self) -> None:
        result = LintResult(issues=(make_issue(),), exit_status=2, files_checked=1)
        assert not result.passed

    def test_passed_with_issues_below_threshold(self) -> None:
        """Issues that do not raise the exit status still pass."""
        result = LintResult(issues=(make_issue(),), exit_status=0, files_checked=1)

        assert result.passed
        assert result.issue_count == 1

    def test_by_rule_and_for_rule(self) -> None:
        issues = (
            make_issue("no_env_in_runtime", "lib/a.ex", 1),
            make_issue("no_repo_in_domain", "lib/a.ex", 2),
            make_issue("no_env_in_runtime", "lib/b.ex", 1),
        )
        result = LintResult(issues=issues, exit_status=2, files_checked=2)

        assert result.by_rule() == {"no_env_in_runtime": 2, "no_repo_in_domain": 1}
        assert result.for_rule("no_repo_in_domain") == (issues[1],)
        assert result.for_rule("unknown") == ()


class TestLintResultFailFirst:
    """Tests for FAIL-FIRST validation in LintResult."""

    def test_unordered_issues_raise(self) -> None:
        issues = (make_issue(file="lib/b.ex"), make_issue(file="lib/a.ex"))
        with pytest.raises(ValueError, match="must be ordered"):
            LintResult(issues=issues, exit_status=2, files_checked=2)

    def test_negative_exit_status_raises(self) -> None:
        with pytest.raises(ValueError, match="exit_status must be >= 0"):
            LintResult(issues=(), exit_status=-1, files_checked=0)

    def test_negative_files_checked_raises(self) -> None:
        with pytest.raises(ValueError, match="files_checked must be >= 0"):
            LintResult(issues=(), exit_status=0, files_checked=-1)
