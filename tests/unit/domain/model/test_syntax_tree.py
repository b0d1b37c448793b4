"""Tests for domain/model/syntax_tree.py."""

import pytest

from layerguard.domain.model.syntax import Call, ModuleDecl, Var
from layerguard.domain.model.syntax_tree import SyntaxTree
from tests.factories import make_tree, ref


class TestSyntaxTreeFailFirst:
    """Tests for FAIL-FIRST validation in SyntaxTree."""

    def test_empty_path_raises(self) -> None:
        with pytest.raises(ValueError, match="path must not be empty"):
            SyntaxTree(path="")

    def test_backslash_path_raises(self) -> None:
        with pytest.raises(ValueError, match="forward slashes"):
            SyntaxTree(path="lib\\my_app.ex")


class TestSyntaxTreeQueries:
    """Tests for module and node lookups."""

    def test_modules_outermost_first(self) -> None:
        inner = ModuleDecl(ref("MyApp.Users.Error"), ())
        outer = ModuleDecl(ref("MyApp.Users"), (inner,))
        tree = make_tree(body=(outer,))

        assert tree.modules() == (outer, inner)
        assert tree.module_name == ref("MyApp.Users")

    def test_module_name_skips_unnamed(self) -> None:
        """`defmodule __MODULE__.X` has no parseable name."""
        tree = make_tree(body=(ModuleDecl(None, ()), ModuleDecl(ref("MyApp.Named"), ())))
        assert tree.module_name == ref("MyApp.Named")

    def test_module_name_none_without_modules(self) -> None:
        assert make_tree(body=(Call(None, "config", (Var("x"),)),)).module_name is None

    def test_nodes_pre_order(self) -> None:
        tree = make_tree(body=(Var("a"), Var("b")))
        assert [node.name for node in tree.nodes() if isinstance(node, Var)] == ["a", "b"]

