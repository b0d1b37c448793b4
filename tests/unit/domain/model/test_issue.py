"""Tests for domain/model/issue.py."""

import pytest

from layerguard.domain.model.enums import RuleCategory, RuleFamily, Severity
from layerguard.domain.model.issue import Issue
from layerguard.domain.model.location import Location
from tests.factories import make_issue


class TestIssueCreation:
    """Tests for valid Issue creation."""

    def test_defaults(self) -> None:
        """Category, family and exit status have design defaults."""
        issue = Issue(
            rule_id="layer_boundary_deps",
            message="Domain must not depend on Infrastructure",
            file="lib/my_app/domain.ex",
            line=2,
            trigger="deps",
            severity=Severity.HIGHER,
        )

        assert issue.category is RuleCategory.DESIGN
        assert issue.family is RuleFamily.LAYER_LEAKAGE
        assert issue.exit_status == 2

    def test_location(self) -> None:
        issue = make_issue(file="lib/a.ex", line=9)
        assert issue.location == Location(file="lib/a.ex", line=9)

    def test_sort_key(self) -> None:
        """Ordered by file, then line, then rule id."""
        issues = [
            make_issue("b_rule", "lib/b.ex", 1),
            make_issue("z_rule", "lib/a.ex", 5),
            make_issue("a_rule", "lib/a.ex", 5),
            make_issue("a_rule", "lib/a.ex", 2),
        ]

        ordered = sorted(issues, key=lambda issue: issue.sort_key)

        assert [(i.file, i.line, i.rule_id) for i in ordered] == [
            ("lib/a.ex", 2, "a_rule"),
            ("lib/a.ex", 5, "a_rule"),
            ("lib/a.ex", 5, "z_rule"),
            ("lib/b.ex", 1, "b_rule"),
        ]

    def test_str(self) -> None:
        issue = make_issue(file="lib/a.ex", line=3, trigger="Repo.get")
        assert str(issue).startswith("[HIGH] no_repo_in_domain lib/a.ex:3 (Repo.get): ")


class TestIssueFailFirst:
    """Tests for FAIL-FIRST validation in Issue."""

    def test_empty_rule_id_raises(self) -> None:
        with pytest.raises(ValueError, match="rule_id must not be empty"):
            make_issue(rule_id="")

    def test_empty_message_raises(self) -> None:
        with pytest.raises(ValueError, match="message must not be empty"):
            make_issue(message="")

    def test_empty_file_raises(self) -> None:
        with pytest.raises(ValueError, match="file must not be empty"):
            make_issue(file="")

    def test_line_zero_raises(self) -> None:
        with pytest.raises(ValueError, match="line must be >= 1"):
            make_issue(line=0)

    def test_negative_exit_status_raises(self) -> None:
        with pytest.raises(ValueError, match="exit_status must be >= 0"):
            make_issue(exit_status=-1)
