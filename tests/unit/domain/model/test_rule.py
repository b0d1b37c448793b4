"""Tests for domain/model/rule.py."""

import pytest

from layerguard.domain.model.rule import RuleContext
from layerguard.infrastructure.adapters.memory_file_system import MemoryFileSystem
from tests.factories import DeniedFileSystem, make_unit


class TestRuleContext:
    """Tests for RuleContext."""

    def test_path_from_unit(self) -> None:
        unit = make_unit("lib/my_app/accounts.ex", "defmodule MyApp.Accounts do\nend\n")
        ctx = RuleContext(unit, MemoryFileSystem())
        assert ctx.path == "lib/my_app/accounts.ex"

    def test_params_are_read_only(self) -> None:
        ctx = RuleContext(make_unit(source=""), MemoryFileSystem(), {"with_clause_threshold": 5})
        with pytest.raises(TypeError):
            ctx.params["with_clause_threshold"] = 1  # type: ignore[index]

    def test_strings(self) -> None:
        ctx = RuleContext(make_unit(source=""), MemoryFileSystem(), {"names": ["Repo", "Req"]})
        assert ctx.strings("names") == ("Repo", "Req")

    def test_strings_rejects_plain_string(self) -> None:
        ctx = RuleContext(make_unit(source=""), MemoryFileSystem(), {"names": "Repo"})
        with pytest.raises(TypeError, match="sequence of strings"):
            ctx.strings("names")

    def test_integer(self) -> None:
        ctx = RuleContext(make_unit(source=""), MemoryFileSystem(), {"threshold": 5, "bad": "5"})

        assert ctx.integer("threshold") == 5
        with pytest.raises(TypeError, match="must be int"):
            ctx.integer("bad")

    def test_exists(self) -> None:
        ctx = RuleContext(make_unit(source=""), MemoryFileSystem(["lib/my_app/accounts/queries.ex"]))

        assert ctx.exists("lib/my_app/accounts/queries.ex")
        assert not ctx.exists("lib/my_app/billing/queries.ex")

    def test_failed_probe_counts_as_missing(self) -> None:
        ctx = RuleContext(make_unit(source=""), DeniedFileSystem())
        assert ctx.exists("lib/my_app/accounts/queries.ex") is False
