"""Elixir tokenizer.

Produces a flat token list for the parser. Strings, charlists, sigils and
heredocs are scanned as single tokens (interpolations are skipped, not
parsed). Comments are dropped. Newlines are not tokens: each token records
whether whitespace or a line break precedes it, which is all the parser
needs to tell `foo -1` from `foo - 1` and statement boundaries apart.
"""

from __future__ import annotations

from dataclasses import dataclass

from layerguard.domain.exceptions.parsing import SourceParseError

# Longest first: the scanner takes the first operator that matches
OPERATORS: tuple[str, ...] = (
    "<<<", ">>>", "<<~", "~>>", "<~>", "|||", "&&&", "^^^", "===", "!==", "+++", "---", "...",
    "\\\\", "|>", "<-", "->", "=>", "==", "!=", "<=", ">=", "&&", "||", "++", "--", "<>", "=~",
    "::", "..", "//", "<<", ">>", "~>", "<~", "**",
    "+", "-", "*", "/", "=", "<", ">", "|", "&", "^", "!", "@", ".", "%",
)  # fmt: skip

PUNCTUATION = frozenset("()[]{},;")

KEYWORDS = frozenset({"do", "end", "fn", "else", "rescue", "catch", "after"})
WORD_OPERATORS = frozenset({"when", "and", "or", "not", "in"})
WORD_LITERALS = {"true": True, "false": False, "nil": None}

# Bracket atoms such as `:{}`, checked before the plain operators
_OPERATOR_ATOMS: tuple[str, ...] = ("%{}", "{}", "<<>>")

_SIGIL_PAIRS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_SIGIL_DELIMITERS = frozenset('/|"\'([{<')


@dataclass(frozen=True, slots=True)
class Token:
    """Lexical token.

    Attributes:
        kind: alias | ident | kw_key | keyword | atom | int | float | string
            | charlist | sigil | literal | op | punct
        value: Token text (string contents for quoted tokens)
        line: 1-based line of the first character
        space_before: Whitespace or a line break precedes the token
        newline_before: A line break precedes the token
    """

    kind: str
    value: str
    line: int
    space_before: bool = False
    newline_before: bool = False


def _is_ident_start(char: str) -> bool:
    return char == "_" or (char.isalpha() and char.islower())


def _is_ident_char(char: str) -> bool:
    return char == "_" or char.isalnum()


class Tokenizer:
    """Single-pass scanner over one source file."""

    def __init__(self, path: str, source: str) -> None:
        """Initialize scanner.

        Args:
            path: File path for error messages
            source: Source text
        """
        self._path = path
        self._src = source.replace("\r\n", "\n")
        self._pos = 0
        self._line = 1
        self._tokens: list[Token] = []
        self._space = False
        self._newline = False

    def tokenize(self) -> list[Token]:
        """Scan the whole source.

        Raises:
            SourceParseError: On unterminated strings, sigils or heredocs,
                or characters that start no token
        """
        src = self._src
        while self._pos < len(src):
            char = src[self._pos]
            if char == "\n":
                self._line += 1
                self._pos += 1
                self._space = self._newline = True
            elif char in " \t\f\v":
                self._pos += 1
                self._space = True
            elif char == "\\" and src.startswith("\\\n", self._pos):
                # explicit line continuation
                self._pos += 2
                self._line += 1
                self._space = True
            elif char == "#":
                end = src.find("\n", self._pos)
                self._pos = len(src) if end < 0 else end
            else:
                self._scan_token(char)
        return self._tokens

    def _error(self, reason: str, line: int | None = None) -> SourceParseError:
        return SourceParseError(self._path, reason, line or self._line)

    def _emit(self, kind: str, value: str, line: int) -> None:
        self._tokens.append(Token(kind, value, line, self._space, self._newline))
        self._space = self._newline = False

    def _peek(self, offset: int = 0) -> str:
        index = self._pos + offset
        return self._src[index] if index < len(self._src) else ""

    def _scan_token(self, char: str) -> None:
        line = self._line
        if char.isdigit():
            self._scan_number(line)
        elif _is_ident_start(char):
            self._scan_identifier(line)
        elif char.isalpha():
            self._scan_alias(line)
        elif char == '"':
            value = self._scan_quoted('"')
            self._emit_quoted("string", value, line)
        elif char == "'":
            value = self._scan_quoted("'")
            self._emit_quoted("charlist", value, line)
        elif char == ":":
            self._scan_colon(line)
        elif char == "?" and self._peek(1):
            self._scan_char_literal(line)
        elif char == "~" and self._peek(1).isalpha():
            self._scan_sigil(line)
        elif char in PUNCTUATION:
            self._pos += 1
            self._emit("punct", char, line)
        else:
            for operator in OPERATORS:
                if self._src.startswith(operator, self._pos):
                    self._pos += len(operator)
                    self._emit("op", operator, line)
                    return
            raise self._error(f"unexpected character {char!r}")

    def _scan_number(self, line: int) -> None:
        src = self._src
        start = self._pos
        if src.startswith(("0x", "0b", "0o"), start):
            self._pos += 2
            while self._pos < len(src) and (src[self._pos].isalnum() or src[self._pos] == "_"):
                self._pos += 1
            self._emit("int", src[start : self._pos], line)
            return

        self._consume_digits()
        kind = "int"
        if self._peek() == "." and self._peek(1).isdigit():
            kind = "float"
            self._pos += 1
            self._consume_digits()
            if self._peek() in ("e", "E") and (self._peek(1).isdigit() or self._peek(1) in "+-"):
                self._pos += 2
                self._consume_digits()
        self._emit(kind, src[start : self._pos], line)

    def _consume_digits(self) -> None:
        src = self._src
        while self._pos < len(src) and (src[self._pos].isdigit() or src[self._pos] == "_"):
            self._pos += 1

    def _scan_word(self) -> str:
        src = self._src
        start = self._pos
        while self._pos < len(src) and _is_ident_char(src[self._pos]):
            self._pos += 1
        if self._peek() in ("?", "!") and self._peek(1) != "=":
            self._pos += 1
        return src[start : self._pos]

    def _is_keyword_colon(self) -> bool:
        """`:` directly after a word, followed by whitespace (`key: value`)."""
        return self._peek() == ":" and self._peek(1) in (" ", "\t", "\n", "")

    def _scan_identifier(self, line: int) -> None:
        word = self._scan_word()
        if self._is_keyword_colon():
            self._pos += 1
            self._emit("kw_key", word, line)
        elif word in KEYWORDS:
            self._emit("keyword", word, line)
        elif word in WORD_OPERATORS:
            self._emit("op", word, line)
        elif word in WORD_LITERALS:
            self._emit("literal", word, line)
        else:
            self._emit("ident", word, line)

    def _scan_alias(self, line: int) -> None:
        word = self._scan_word()
        if self._is_keyword_colon():
            self._pos += 1
            self._emit("kw_key", word, line)
        else:
            self._emit("alias", word, line)

    def _emit_quoted(self, kind: str, value: str, line: int) -> None:
        if self._is_keyword_colon():
            self._pos += 1
            self._emit("kw_key", value, line)
        else:
            self._emit(kind, value, line)

    def _scan_colon(self, line: int) -> None:
        nxt = self._peek(1)
        if nxt == ":":
            self._pos += 2
            self._emit("op", "::", line)
            return
        if nxt in ('"', "'"):
            self._pos += 1
            self._emit("atom", self._scan_quoted(nxt), line)
            return
        if nxt == "_" or nxt.isalpha():
            self._pos += 1
            start = self._pos
            self._scan_word()
            # :Elixir.Foo.Bar style atoms
            while self._peek() == "." and self._peek(1).isupper():
                self._pos += 1
                self._scan_word()
            self._emit("atom", self._src[start : self._pos], line)
            return
        for operator in _OPERATOR_ATOMS + OPERATORS:
            if self._src.startswith(operator, self._pos + 1):
                self._pos += 1 + len(operator)
                self._emit("atom", operator, line)
                return
        raise self._error("unexpected ':'")

    def _scan_char_literal(self, line: int) -> None:
        self._pos += 1
        if self._peek() == "\\":
            self._pos += 1
        char = self._peek()
        if char == "\n":
            self._line += 1
        self._pos += 1
        self._emit("int", str(ord(char)) if char else "0", line)

    def _scan_quoted(self, quote: str) -> str:
        """Scan a string or charlist starting at the opening quote.

        Returns:
            Raw contents between the delimiters
        """
        src = self._src
        start_line = self._line
        triple = quote * 3
        if src.startswith(triple, self._pos):
            self._pos += 3
            end = self._find_heredoc_end(triple)
            value = src[self._pos : end]
            self._line += value.count("\n")
            self._pos = end + 3
            return value

        self._pos += 1
        start = self._pos
        while True:
            if self._pos >= len(src):
                raise self._error("unterminated string", start_line)
            char = src[self._pos]
            if char == "\\":
                if self._peek(1) == "\n":
                    self._line += 1
                self._pos += 2
            elif char == quote:
                value = src[start : self._pos]
                self._pos += 1
                return value
            elif char == "#" and self._peek(1) == "{":
                self._skip_interpolation()
            else:
                if char == "\n":
                    self._line += 1
                self._pos += 1

    def _find_heredoc_end(self, triple: str) -> int:
        src = self._src
        index = self._pos
        while True:
            end = src.find(triple, index)
            if end < 0:
                raise self._error("unterminated heredoc")
            if src[end - 1] != "\\":
                return end
            index = end + 1

    def _skip_interpolation(self) -> None:
        """Skip `#{...}` including nested braces and strings."""
        src = self._src
        start_line = self._line
        self._pos += 2
        depth = 1
        while depth:
            if self._pos >= len(src):
                raise self._error("unterminated interpolation", start_line)
            char = src[self._pos]
            if char in ('"', "'"):
                self._scan_quoted(char)
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            elif char == "\n":
                self._line += 1
            self._pos += 1

    def _scan_sigil(self, line: int) -> None:
        src = self._src
        self._pos += 1
        name_start = self._pos
        while self._peek().isalpha():
            self._pos += 1
        name = src[name_start : self._pos]
        opener = self._peek()
        if opener not in _SIGIL_DELIMITERS:
            raise self._error(f"invalid sigil delimiter {opener!r}")

        if opener in ('"', "'") and src.startswith(opener * 3, self._pos):
            body = self._scan_quoted(opener)
        else:
            closer = _SIGIL_PAIRS.get(opener, opener)
            self._pos += 1
            start = self._pos
            depth = 1
            while True:
                if self._pos >= len(src):
                    raise self._error(f"unterminated sigil ~{name}", line)
                char = src[self._pos]
                if char == "\\":
                    self._pos += 2
                    continue
                if char == "\n":
                    self._line += 1
                if char == closer and closer != opener:
                    depth -= 1
                    if depth == 0:
                        break
                elif char == closer:
                    break
                elif char == opener:
                    depth += 1
                self._pos += 1
            body = src[start : self._pos]
            self._pos += 1

        while self._peek().isalpha():
            self._pos += 1
        self._emit("sigil", f"~{name}{body}", line)


def tokenize(path: str, source: str) -> list[Token]:
    """Tokenize source.

    Raises:
        SourceParseError: On malformed lexical input
    """
    return Tokenizer(path, source).tokenize()
