"""Tests for rules/_base.py."""

from types import MappingProxyType

import pytest

from layerguard.application.rules._base import BaseRule
from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.model.configuration import RuleConfig
from layerguard.domain.model.enums import Layer, RuleCategory, RuleFamily, Severity
from layerguard.domain.model.syntax import Call
from tests.factories import ctx_for, make_unit


class ConsoleInDomain(BaseRule):
    """Test rule: flags IO.puts in domain files."""

    id = "console_in_domain"
    family = RuleFamily.LAYER_LEAKAGE
    layers = frozenset({Layer.DOMAIN})
    param_defaults = MappingProxyType(
        {
            "functions": ("puts",),
            "limit": 3,
            "strict": False,
            "label": "console",
            "table": MappingProxyType({"IO": "stdio"}),
        }
    )

    def visit(self, node, ctx):
        if isinstance(node, Call) and node.module is not None and node.module.name == "IO":
            if node.function in self.strings("functions"):
                return (self.issue(ctx, "Console output in domain", node.line, node.qualified_name),)
        return ()


DOMAIN_SOURCE = """
defmodule MyApp.Domain.Entities.User do
  def log(user) do
    IO.puts(user.name)
    IO.inspect(user)
  end
end
"""


class TestBaseRuleDefaults:
    """Tests for severity, exit status and option defaults."""

    def test_defaults(self) -> None:
        rule = ConsoleInDomain()

        assert rule.severity is Severity.NORMAL
        assert rule.exit_status == RuleCategory.DESIGN.default_exit_status
        assert rule.params["limit"] == 3

    def test_overrides(self) -> None:
        rule = ConsoleInDomain(severity=Severity.LOW, exit_status=9, params={"limit": 7})

        assert rule.severity is Severity.LOW
        assert rule.exit_status == 9
        assert rule.params["limit"] == 7
        assert rule.params["strict"] is False

    def test_list_option_becomes_tuple(self) -> None:
        rule = ConsoleInDomain(params={"functions": ["puts", "inspect"]})
        assert rule.strings("functions") == ("puts", "inspect")

    def test_table_option(self) -> None:
        rule = ConsoleInDomain(params={"table": {"Logger": "logging"}})

        assert rule.table("table") == {"Logger": "logging"}
        with pytest.raises(TypeError, match="is not a table"):
            rule.table("functions")

    def test_repr(self) -> None:
        assert repr(ConsoleInDomain()) == "ConsoleInDomain('console_in_domain')"


class TestBaseRuleOptionValidation:
    """Tests for FAIL-FIRST option validation."""

    def test_unknown_option_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown option 'limti'"):
            ConsoleInDomain(params={"limti": 3})

    @pytest.mark.parametrize(
        ("key", "value", "message"),
        [
            ("limit", "3", "must be an integer"),
            ("limit", True, "must be an integer"),
            ("strict", 1, "must be a boolean"),
            ("label", 5, "must be a string"),
            ("functions", "puts", "must be a list of strings"),
            ("functions", ["puts", 1], "must be a list of strings"),
            ("table", ["IO"], "must be a table"),
            ("table", {"IO": 1}, "must map strings to strings"),
        ],
    )
    def test_wrong_type_raises(self, key: str, value: object, message: str) -> None:
        with pytest.raises(ConfigurationError, match=message):
            ConsoleInDomain(params={key: value})


class TestBaseRuleFromConfig:
    """Tests for from_config factory."""

    def test_disabled_returns_none(self) -> None:
        assert ConsoleInDomain.from_config(RuleConfig(enabled=False)) is None

    def test_enabled_applies_overrides(self) -> None:
        rule = ConsoleInDomain.from_config(RuleConfig(severity=Severity.HIGHER, params={"limit": 1}))

        assert rule is not None
        assert rule.severity is Severity.HIGHER
        assert rule.params["limit"] == 1


class TestBaseRuleCheck:
    """Tests for applicability and the walk-based check."""

    def test_layer_gate(self) -> None:
        rule = ConsoleInDomain()

        assert rule.applicable(make_unit("lib/my_app/domain/entities/user.ex", DOMAIN_SOURCE))
        assert not rule.applicable(make_unit("lib/my_app/accounts.ex", "defmodule MyApp.Accounts do\nend\n"))

    def test_check_collects_visitor_issues(self) -> None:
        rule = ConsoleInDomain()
        unit = make_unit("lib/my_app/domain/entities/user.ex", DOMAIN_SOURCE)

        issues = rule.check(unit, ctx_for(rule, unit))

        assert len(issues) == 1
        issue = issues[0]
        assert issue.rule_id == "console_in_domain"
        assert issue.trigger == "IO.puts"
        assert issue.line == 4
        assert issue.file == "lib/my_app/domain/entities/user.ex"
        assert issue.family is RuleFamily.LAYER_LEAKAGE
        assert issue.exit_status == 2
