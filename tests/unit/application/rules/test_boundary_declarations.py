"""Tests for rules/boundary_declarations.py."""

import pytest

from layerguard.application.rules.boundary_declarations import PublicApiBoundary, is_app_entry_module
from layerguard.domain.model.enums import RuleFamily, Severity
from tests.factories import boundary_module, run_rule


class TestIsAppEntryModule:
    """Tests for app entry module detection."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("lib/my_app.ex", True),
            ("apps/core/lib/core.ex", True),
            ("apps/core/lib/other.ex", False),
            ("lib/my_app/accounts.ex", False),
            ("mix.exs", False),
        ],
    )
    def test_detection(self, path: str, expected: bool) -> None:
        assert is_app_entry_module(path) is expected


class TestPublicApiBoundary:
    """Tests for public_api_boundary rule."""

    def test_missing_boundary(self) -> None:
        issues = run_rule(PublicApiBoundary(), "lib/my_app.ex", "defmodule MyApp do\n  def hello, do: :world\nend\n")

        assert len(issues) == 1
        issue = issues[0]
        assert issue.trigger == "use Boundary"
        assert issue.line == 1
        assert issue.severity is Severity.HIGHER
        assert issue.family is RuleFamily.DEPENDENCY_RULE
        assert issue.exit_status == 2

    def test_missing_top_level(self) -> None:
        issues = run_rule(PublicApiBoundary(), "lib/my_app.ex", boundary_module("MyApp", "[MyApp.ApplicationLayer]"))

        assert [issue.trigger for issue in issues] == ["top_level?"]
        assert issues[0].line == 2

    def test_infrastructure_dependency(self) -> None:
        source = boundary_module("MyApp", "[MyApp.Infrastructure]", "top_level?: true")

        issues = run_rule(PublicApiBoundary(), "lib/my_app.ex", source)

        assert [issue.trigger for issue in issues] == ["Infrastructure", "deps"]

    def test_well_formed_clean(self) -> None:
        source = boundary_module("MyApp", "[MyApp.ApplicationLayer]", "top_level?: true, exports: []")
        assert run_rule(PublicApiBoundary(), "lib/my_app.ex", source) == ()

    def test_umbrella_entry_checked(self) -> None:
        issues = run_rule(PublicApiBoundary(), "apps/core/lib/core.ex", "defmodule Core do\nend\n")
        assert [issue.trigger for issue in issues] == ["use Boundary"]

    @pytest.mark.parametrize(
        "path",
        ["apps/core_web/lib/core_web.ex", "apps/core_tools/lib/core_tools.ex", "lib/my_app_web.ex"],
    )
    def test_presentation_and_tools_apps_skipped(self, path: str) -> None:
        assert run_rule(PublicApiBoundary(), path, "defmodule CoreWeb do\nend\n") == ()

    def test_excluded_apps(self) -> None:
        rule = PublicApiBoundary(params={"excluded_apps": ["my_app"]})
        assert run_rule(rule, "lib/my_app.ex", "defmodule MyApp do\nend\n") == ()
