"""Tests for extraction/dependency_extractor.py."""

from layerguard.application.extraction.dependency_extractor import (
    DependencyExtractor,
    find_boundary_directive,
    is_boundary_directive,
)
from layerguard.domain.model.syntax import Directive
from tests.factories import parse, ref


def extract(source: str):
    return DependencyExtractor().extract(parse(source, "lib/my_app/domain.ex"))


class TestDeclarationShapes:
    """Tests for the supported deps literal shapes."""

    def test_explicit_empty_list(self) -> None:
        declaration = extract(
            """
            defmodule MyApp.Domain do
              use Boundary, deps: [], exports: []
            end
            """
        )

        assert declaration is not None
        assert declaration.module == ref("MyApp.Domain")
        assert declaration.is_empty
        assert declaration.line == 3

    def test_flat_module_list(self) -> None:
        declaration = extract(
            """
            defmodule MyApp.Infrastructure do
              use Boundary,
                deps: [MyApp.Domain, MyApp.ApplicationLayer],
                exports: [Repo]
            end
            """
        )

        assert declaration is not None
        assert declaration.deps == frozenset({ref("MyApp.Domain"), ref("MyApp.ApplicationLayer")})

    def test_tuple_wrapped_entries(self) -> None:
        """Only the module of `{Module, options}` entries is kept."""
        declaration = extract(
            """
            defmodule MyApp.Infrastructure do
              use Boundary, deps: [MyApp.Domain, {Ecto, :relaxed}, {Phoenix.PubSub, type: :runtime}]
            end
            """
        )

        assert declaration is not None
        assert declaration.deps == frozenset({ref("MyApp.Domain"), ref("Ecto"), ref("Phoenix.PubSub")})

    def test_use_boundary_without_deps(self) -> None:
        """A boundary without a deps option declares no dependencies."""
        declaration = extract(
            """
            defmodule MyApp.Domain do
              use Boundary
            end
            """
        )

        assert declaration is not None
        assert declaration.is_empty


class TestFailSoft:
    """Tests for fail-soft extraction."""

    def test_malformed_entries_dropped(self) -> None:
        """One malformed and two well-formed entries yield exactly the two."""
        declaration = extract(
            """
            defmodule MyApp.ApplicationLayer do
              use Boundary, deps: [MyApp.Domain, :not_a_module, MyApp.Shared]
            end
            """
        )

        assert declaration is not None
        assert declaration.deps == frozenset({ref("MyApp.Domain"), ref("MyApp.Shared")})

    def test_module_attribute_entries_dropped(self) -> None:
        declaration = extract(
            """
            defmodule MyApp.ApplicationLayer do
              use Boundary, deps: [@domain, __MODULE__.Helpers, MyApp.Domain]
            end
            """
        )

        assert declaration is not None
        assert declaration.deps == frozenset({ref("MyApp.Domain")})

    def test_non_literal_deps_is_undeclared(self) -> None:
        """A computed deps value is not guessed at."""
        declaration = extract(
            """
            defmodule MyApp.ApplicationLayer do
              use Boundary, deps: @deps
            end
            """
        )

        assert declaration is None

    def test_no_boundary_is_none(self) -> None:
        declaration = extract(
            """
            defmodule MyApp.Accounts do
              use Ecto.Schema
            end
            """
        )

        assert declaration is None

    def test_other_use_directives_ignored(self) -> None:
        declaration = extract(
            """
            defmodule MyApp.Accounts do
              use Other.Boundary, deps: [MyApp.Infrastructure]
            end
            """
        )

        assert declaration is None


class TestOptionsAndLookup:
    """Tests for boundary flags and directive lookup."""

    def test_true_flags_collected(self) -> None:
        declaration = extract(
            """
            defmodule MyApp do
              use Boundary, top_level?: true, check: [in: false], deps: [MyApp.ApplicationLayer]
            end
            """
        )

        assert declaration is not None
        assert declaration.options == frozenset({"top_level?"})

    def test_nested_module_owns_directive(self) -> None:
        tree = parse(
            """
            defmodule MyApp.Notifications do
              defmodule Infrastructure do
              end

              use Boundary, deps: []
            end
            """
        )

        found = find_boundary_directive(tree)

        assert found is not None
        module, directive = found
        assert module == ref("MyApp.Notifications")
        assert is_boundary_directive(directive)

    def test_is_boundary_directive(self) -> None:
        assert is_boundary_directive(Directive("use", ref("Boundary"), (ref("Boundary"),)))
        assert not is_boundary_directive(Directive("alias", ref("Boundary"), (ref("Boundary"),)))
