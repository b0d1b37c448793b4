"""Tests for infrastructure/adapters/_tokenizer.py."""

import pytest

from layerguard.domain.exceptions.parsing import SourceParseError
from layerguard.infrastructure.adapters._tokenizer import tokenize


def kinds(source: str) -> list[tuple[str, str]]:
    """(kind, value) pairs of all tokens."""
    return [(token.kind, token.value) for token in tokenize("lib/x.ex", source)]


class TestIdentifiers:
    """Tests for identifiers, aliases and keyword keys."""

    def test_question_and_bang_suffixes(self) -> None:
        assert kinds("valid? File.write!") == [
            ("ident", "valid?"),
            ("alias", "File"),
            ("op", "."),
            ("ident", "write!"),
        ]

    def test_bang_before_equals_is_operator(self) -> None:
        assert kinds("a!=b") == [("ident", "a"), ("op", "!="), ("ident", "b")]

    def test_keyword_keys(self) -> None:
        assert kinds('do: x, top_level?: true, "quoted": 1') == [
            ("kw_key", "do"),
            ("ident", "x"),
            ("punct", ","),
            ("kw_key", "top_level?"),
            ("literal", "true"),
            ("punct", ","),
            ("kw_key", "quoted"),
            ("int", "1"),
        ]

    def test_reserved_words(self) -> None:
        assert kinds("fn x when x in y -> nil end") == [
            ("keyword", "fn"),
            ("ident", "x"),
            ("op", "when"),
            ("ident", "x"),
            ("op", "in"),
            ("ident", "y"),
            ("op", "->"),
            ("literal", "nil"),
            ("keyword", "end"),
        ]


class TestAtoms:
    """Tests for atom scanning."""

    def test_erlang_module_call(self) -> None:
        """`:crypto.hash` is an atom followed by a remote call."""
        assert kinds(":crypto.hash") == [("atom", "crypto"), ("op", "."), ("ident", "hash")]

    def test_elixir_prefixed_atom(self) -> None:
        assert kinds(":Elixir.MyApp.Repo") == [("atom", "Elixir.MyApp.Repo")]

    def test_quoted_and_operator_atoms(self) -> None:
        assert kinds(':"with space" :+ ::') == [("atom", "with space"), ("atom", "+"), ("op", "::")]

    def test_bracket_atoms(self) -> None:
        assert kinds(":{} :%{} :<<>>") == [("atom", "{}"), ("atom", "%{}"), ("atom", "<<>>")]


class TestLiterals:
    """Tests for numbers, strings, sigils and comments."""

    def test_numbers(self) -> None:
        assert kinds("1_000 2.5 0x1F ?a") == [
            ("int", "1_000"),
            ("float", "2.5"),
            ("int", "0x1F"),
            ("int", "97"),
        ]

    def test_string_with_interpolation(self) -> None:
        assert kinds('"hi #{user.name} "') == [("string", "hi #{user.name} ")]

    def test_interpolation_with_nested_string(self) -> None:
        assert kinds('"a #{"}"} b"') == [("string", 'a #{"}"} b')]

    def test_sigil(self) -> None:
        tokens = tokenize("lib/x.ex", "~r/ab+/i x")

        assert tokens[0].kind == "sigil"
        assert tokens[0].value.startswith("~r")
        assert (tokens[1].kind, tokens[1].value) == ("ident", "x")

    def test_comments_dropped(self) -> None:
        assert kinds("x # Repo.insert(x)\ny") == [("ident", "x"), ("ident", "y")]

    def test_heredoc_advances_lines(self) -> None:
        tokens = tokenize("lib/x.ex", '@doc """\nline one\nline two\n"""\nx')

        assert tokens[-1].value == "x"
        assert tokens[-1].line == 5


class TestSpacing:
    """Tests for whitespace and line tracking."""

    def test_space_and_newline_flags(self) -> None:
        tokens = tokenize("lib/x.ex", "foo -1\nbar")

        assert [(token.space_before, token.newline_before) for token in tokens] == [
            (False, False),
            (True, False),
            (False, False),
            (True, True),
        ]
        assert tokens[-1].line == 2

    def test_crlf_normalized(self) -> None:
        tokens = tokenize("lib/x.ex", "a\r\nb")

        assert [token.line for token in tokens] == [1, 2]


class TestErrors:
    """Tests for lexical errors."""

    def test_unterminated_string_reports_start_line(self) -> None:
        with pytest.raises(SourceParseError, match="unterminated string") as exc_info:
            tokenize("lib/x.ex", 'x = 1\ny = "abc\nz = 2\n')

        assert exc_info.value.line == 2
        assert exc_info.value.path == "lib/x.ex"

    def test_unterminated_heredoc(self) -> None:
        with pytest.raises(SourceParseError, match="unterminated heredoc"):
            tokenize("lib/x.ex", '@doc """\nnever closed\n')

    def test_unexpected_character(self) -> None:
        with pytest.raises(SourceParseError, match="unexpected character"):
            tokenize("lib/x.ex", "x = `y`")
