"""Elixir source parser adapter.

Implements SourceParserPort with a hand-written Pratt parser over the
token stream from `_tokenizer`. It understands the subset of Elixir that
architecture rules inspect (modules, definitions, directives, calls,
blocks, literals and operators) and lowers the generic call forms into
dedicated nodes:

    defmodule X do ... end         -> ModuleDecl
    def f(a) when g, do: ...       -> FunctionDef
    alias/import/use/require       -> Directive
    with a <- b do ... else ... end -> With

Anything it cannot make sense of raises SourceParseError for the whole
file; the engine reports that and keeps going with the other files.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from layerguard.domain.exceptions.parsing import SourceParseError
from layerguard.domain.model.module_ref import ModuleRef, is_module_name
from layerguard.domain.model.syntax import (
    Alias,
    Atom,
    BinaryOp,
    Block,
    Call,
    Clause,
    Directive,
    Fn,
    FunctionDef,
    ListLit,
    Literal,
    MapLit,
    ModuleDecl,
    Pair,
    TupleLit,
    UnaryOp,
    Var,
    With,
)
from layerguard.domain.model.syntax_tree import SyntaxTree
from layerguard.domain.ports.source_parser import SourceParserPort
from layerguard.infrastructure.adapters._tokenizer import WORD_LITERALS, Token, tokenize

if TYPE_CHECKING:
    from layerguard.domain.model.syntax import Node

# operator -> (binding power, right associative)
_BINARY: dict[str, tuple[int, bool]] = {
    "\\\\": (10, True),
    "<-": (20, False),
    "when": (30, True),
    "::": (40, True),
    "|": (50, True),
    "=>": (60, True),
    "=": (70, True),
    "||": (80, False), "|||": (80, False), "or": (80, False),
    "&&": (90, False), "&&&": (90, False), "and": (90, False),
    "==": (100, False), "!=": (100, False), "=~": (100, False), "===": (100, False), "!==": (100, False),
    "<": (110, False), ">": (110, False), "<=": (110, False), ">=": (110, False),
    "|>": (120, False), "<<<": (120, False), ">>>": (120, False), "<<~": (120, False),
    "~>>": (120, False), "<~": (120, False), "~>": (120, False), "<~>": (120, False),
    "in": (130, False), "not in": (130, False),
    "^^^": (140, False),
    "++": (150, True), "--": (150, True), "..": (150, True), "<>": (150, True),
    "+++": (150, True), "---": (150, True), "//": (150, True),
    "+": (160, False), "-": (160, False),
    "*": (170, False), "/": (170, False),
    "**": (175, True),
}  # fmt: skip

_UNARY_BP = 180
_CAPTURE_BP = 65
_MAP_UPDATE_BP = 50

# Prefix-capable operators that never continue the previous line
_NO_CONTINUATION = frozenset({"-", "+", "!", "^", "&", "@", ".."})

_SECTION_KEYWORDS = frozenset({"else", "rescue", "catch", "after"})
_SECTION_ENDS = _SECTION_KEYWORDS | {"end"}

_ARG_START_KINDS = frozenset(
    {"ident", "alias", "int", "float", "string", "charlist", "sigil", "atom", "literal", "kw_key"}
)
_ARG_START_OPS = frozenset({"%", "@", "&", "!", "^", "not", "<<"})

_DEF_KINDS = frozenset({"def", "defp", "defmacro", "defmacrop"})
_DIRECTIVE_KINDS = frozenset({"alias", "import", "use", "require"})


def _number(token: Token) -> int | float:
    text = token.value.replace("_", "")
    if token.kind == "float":
        return float(text)
    if text[:2] in ("0x", "0b", "0o"):
        return int(text, 0)
    return int(text)


def _trailing_keywords(args: tuple[Node, ...]) -> tuple[Pair, ...]:
    """Pairs of a trailing keyword list argument, empty if there is none."""
    if not args:
        return ()
    last = args[-1]
    if isinstance(last, ListLit) and last.items and all(isinstance(item, Pair) for item in last.items):
        return tuple(item for item in last.items if isinstance(item, Pair))
    return ()


def _keyword(pairs: tuple[Pair, ...], key: str) -> Node | None:
    for pair in pairs:
        if pair.key_name == key:
            return pair.value
    return None


def _split_guard(params: list[Node]) -> tuple[tuple[Node, ...], Node | None]:
    """Pull a trailing `when` guard off a clause head."""
    if params and isinstance(params[-1], BinaryOp) and params[-1].op == "when":
        last = params[-1]
        return (*params[:-1], last.left), last.right
    return tuple(params), None


class _Parser:
    """Recursive-descent parser over one token list."""

    def __init__(self, path: str, tokens: list[Token]) -> None:
        self._path = path
        self._tokens = tokens
        self._pos = 0
        # set while parsing no-paren call arguments: a `do` belongs to the outer call
        self._no_do = False

    # -- token helpers -------------------------------------------------

    def _peek(self, offset: int = 0) -> Token | None:
        index = self._pos + offset
        return self._tokens[index] if index < len(self._tokens) else None

    def _at(self, kind: str, value: str | None = None, offset: int = 0) -> bool:
        token = self._peek(offset)
        return token is not None and token.kind == kind and (value is None or token.value == value)

    def _error(self, reason: str, token: Token | None = None) -> SourceParseError:
        if token is None:
            last = self._tokens[-1].line if self._tokens else 1
            return SourceParseError(self._path, reason, last)
        return SourceParseError(self._path, reason, token.line)

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise self._error("unexpected end of file")
        self._pos += 1
        return token

    def _accept(self, kind: str, value: str) -> bool:
        if self._at(kind, value):
            self._pos += 1
            return True
        return False

    def _expect(self, kind: str, value: str) -> Token:
        token = self._peek()
        if token is None:
            raise self._error(f"unexpected end of file, expected {value!r}")
        if token.kind != kind or token.value != value:
            raise self._error(f"unexpected {token.value!r}, expected {value!r}", token)
        self._pos += 1
        return token

    @contextmanager
    def _nesting(self, *, no_do: bool = False) -> Iterator[None]:
        saved = self._no_do
        self._no_do = no_do
        try:
            yield
        finally:
            self._no_do = saved

    # -- statements and clauses ------------------------------------------

    def parse_program(self) -> tuple[Node, ...]:
        return self._parse_body(frozenset())

    def _at_terminator(self, terminators: frozenset[str]) -> bool:
        token = self._peek()
        if token is None:
            return True
        return token.kind in ("keyword", "punct") and token.value in terminators

    def _parse_body(self, terminators: frozenset[str]) -> tuple[Node, ...]:
        """Statements, or stab clauses when the body contains `->` heads."""
        statements: list[Node] = []
        clauses: list[Clause] = []
        head: tuple[tuple[Node, ...], Node | None, int] | None = None

        def open_clause(params: list[Node], line: int) -> None:
            nonlocal head, statements
            if head is not None:
                clauses.append(Clause(head[0], tuple(statements), head[1], head[2]))
            elif statements:
                raise self._error("expression before clause head", self._peek())
            statements = []
            split = _split_guard(params)
            head = (split[0], split[1], line)

        with self._nesting():
            while (token := self._peek()) is not None and not self._at_terminator(terminators):
                if self._accept("punct", ";"):
                    continue
                if self._accept("op", "->"):
                    open_clause([], token.line)
                    continue

                expression = self._parse_expr(0)
                if self._at("punct", ",") or self._at("op", "->"):
                    params = [expression]
                    while self._accept("punct", ","):
                        params.append(self._parse_expr(0))
                    self._expect("op", "->")
                    open_clause(params, token.line)
                    continue

                statements.append(expression)
                self._expect_separator(terminators)

        if head is None:
            return tuple(statements)
        clauses.append(Clause(head[0], tuple(statements), head[1], head[2]))
        return tuple(clauses)

    def _expect_separator(self, terminators: frozenset[str]) -> None:
        token = self._peek()
        if token is None or token.newline_before or self._at_terminator(terminators):
            return
        if token.kind == "punct" and token.value == ";":
            return
        raise self._error(f"unexpected {token.value!r}", token)

    def _parse_do_block(self) -> tuple[tuple[Node, ...], tuple[Node, ...]]:
        """`do ... [else|rescue|catch|after ...] end` sections."""
        self._expect("keyword", "do")
        body = self._parse_body(_SECTION_ENDS)
        sections: list[Node] = []
        while (token := self._peek()) is not None and token.kind == "keyword" and token.value in _SECTION_KEYWORDS:
            self._advance()
            sections.extend(self._parse_body(_SECTION_ENDS))
        self._expect("keyword", "end")
        return body, tuple(sections)

    def _takes_do(self) -> bool:
        return not self._no_do and self._at("keyword", "do")

    # -- expressions -----------------------------------------------------

    def _binary_operator(self) -> str | None:
        token = self._peek()
        if token is None or token.kind != "op":
            return None
        if token.newline_before and token.value in _NO_CONTINUATION:
            return None
        if token.value == "not":
            return "not in" if self._at("op", "in", 1) else None
        return token.value if token.value in _BINARY else None

    def _parse_expr(self, min_bp: int) -> Node:
        left = self._parse_unary()
        while (op := self._binary_operator()) is not None:
            bp, right_assoc = _BINARY[op]
            if bp <= min_bp:
                break
            self._advance()
            if op == "not in":
                self._advance()
            right = self._parse_expr(bp - 1 if right_assoc else bp)
            left = BinaryOp(op, left, right, left.line)
        return left

    def _parse_unary(self) -> Node:
        token = self._advance()
        if token.kind == "op":
            match token.value:
                case "!" | "^" | "not" | "-" | "+":
                    operand = self._parse_expr(_UNARY_BP)
                    if token.value == "-" and isinstance(operand, Literal) and isinstance(operand.value, (int, float)):
                        if not isinstance(operand.value, bool):
                            return Literal(-operand.value, token.line)
                    return UnaryOp(token.value, operand, token.line)
                case "&":
                    return UnaryOp("&", self._parse_expr(_CAPTURE_BP), token.line)
                case "@":
                    return UnaryOp("@", self._parse_postfix(self._parse_primary(self._advance())), token.line)
                case "%":
                    return self._parse_postfix(self._parse_map(token))
                case "<<":
                    return self._parse_postfix(self._parse_bitstring(token))
        return self._parse_postfix(self._parse_primary(token))

    def _parse_primary(self, token: Token) -> Node:
        match token.kind:
            case "ident":
                return self._parse_identifier(token)
            case "alias":
                ref = ModuleRef.try_parse(token.value)
                return Alias(ref, token.line) if ref is not None else Var(token.value, token.line)
            case "atom":
                return Atom(token.value, token.line)
            case "int" | "float":
                return Literal(_number(token), token.line)
            case "string" | "charlist" | "sigil":
                return Literal(token.value, token.line)
            case "literal":
                return Literal(WORD_LITERALS[token.value], token.line)
            case "kw_key":
                self._pos -= 1
                pairs = self._parse_keyword_run()
                return ListLit(pairs, token.line)
            case "keyword" if token.value == "fn":
                return self._parse_fn(token)
            case "punct":
                return self._parse_group(token)
        raise self._error(f"unexpected {token.value!r}", token)

    def _parse_group(self, token: Token) -> Node:
        match token.value:
            case "(":
                body = self._parse_body(frozenset({")"}))
                self._expect("punct", ")")
                if len(body) == 1 and not isinstance(body[0], Clause):
                    return body[0]
                return Block(body, token.line)
            case "[":
                with self._nesting():
                    items = self._parse_sequence("]", keywords_inline=True)
                self._expect("punct", "]")
                return ListLit(items, token.line)
            case "{":
                with self._nesting():
                    items = self._parse_sequence("}")
                self._expect("punct", "}")
                return TupleLit(items, token.line)
        raise self._error(f"unexpected {token.value!r}", token)

    def _parse_postfix(self, node: Node) -> Node:
        while True:
            token = self._peek()
            if token is None:
                return node
            if token.kind == "op" and token.value == ".":
                self._advance()
                node = self._parse_dot(node)
            elif token.kind == "punct" and token.value == "[" and not token.space_before:
                self._advance()
                with self._nesting():
                    index = self._parse_expr(0)
                self._expect("punct", "]")
                node = Call(node, "[]", (index,), line=token.line)
            else:
                return node

    def _parse_dot(self, target: Node) -> Node:
        token = self._advance()
        match token.kind, token.value:
            case "alias", name:
                if isinstance(target, Alias):
                    if not is_module_name(name):
                        raise self._error(f"invalid alias segment {name!r}", token)
                    return Alias(target.ref.child(name), target.line)
                return Call(target, name, line=token.line)
            case "ident", name:
                args = self._parse_call_args()
                block, sections = self._parse_do_block() if self._takes_do() else ((), ())
                return Call(target, name, args or (), block, sections, token.line)
            case "punct", "(":
                self._pos -= 1
                return Call(target, ".", self._parse_paren_args(), line=token.line)
            case "punct", "{":
                with self._nesting():
                    items = self._parse_sequence("}")
                self._expect("punct", "}")
                return Call(target, "{}", items, line=token.line)
            case ("keyword" | "op"), name if name != ".":
                # Reserved words and operators as remote names: `:queue.in(x, q)`, `Kernel.-(1)`
                args = self._parse_call_args()
                return Call(target, name, args or (), line=token.line)
        raise self._error(f"unexpected {token.value!r} after '.'", token)

    def _parse_identifier(self, token: Token) -> Node:
        args = self._parse_call_args()
        if args is None and not self._takes_do():
            return Var(token.value, token.line)
        block, sections = self._parse_do_block() if self._takes_do() else ((), ())
        return self._lower(Call(None, token.value, args or (), block, sections, token.line))

    def _parse_call_args(self) -> tuple[Node, ...] | None:
        """Arguments following a function name, None when it is not a call."""
        token = self._peek()
        if token is not None and token.kind == "punct" and token.value == "(" and not token.space_before:
            return self._parse_paren_args()
        if self._starts_no_paren_arg():
            return self._parse_no_paren_args()
        return None

    def _starts_no_paren_arg(self) -> bool:
        token = self._peek()
        if token is None or token.newline_before or not token.space_before:
            return False
        match token.kind:
            case kind if kind in _ARG_START_KINDS:
                return True
            case "keyword":
                return token.value == "fn"
            case "punct":
                return token.value in ("[", "{", "(")
            case "op" if token.value == "not":
                return not self._at("op", "in", 1)
            case "op" if token.value in _ARG_START_OPS:
                return True
            case "op" if token.value in ("-", "+"):
                following = self._peek(1)
                return following is not None and not following.space_before
        return False

    def _parse_paren_args(self) -> tuple[Node, ...]:
        self._expect("punct", "(")
        with self._nesting():
            args = self._parse_sequence(")")
        self._expect("punct", ")")
        return args

    def _parse_no_paren_args(self) -> tuple[Node, ...]:
        items: list[Node] = []
        pairs: list[Pair] = []
        with self._nesting(no_do=True):
            while True:
                if self._at("kw_key"):
                    pairs.append(self._parse_pair())
                else:
                    items.append(self._parse_expr(0))
                if not self._accept("punct", ","):
                    break
        if pairs:
            items.append(ListLit(tuple(pairs), pairs[0].line))
        return tuple(items)

    def _parse_sequence(self, closer: str, *, keywords_inline: bool = False) -> tuple[Node, ...]:
        """Comma-separated items up to closer (not consumed).

        Keyword entries are collected into one trailing ListLit, or kept
        inline for list literals.
        """
        items: list[Node] = []
        pairs: list[Pair] = []
        while not self._at("punct", closer):
            if self._at("kw_key"):
                pair = self._parse_pair()
                if keywords_inline:
                    items.append(pair)
                else:
                    pairs.append(pair)
            else:
                items.append(self._parse_expr(0))
            if not self._accept("punct", ","):
                break
        if pairs:
            items.append(ListLit(tuple(pairs), pairs[0].line))
        return tuple(items)

    def _parse_pair(self) -> Pair:
        token = self._advance()
        return Pair(Atom(token.value, token.line), self._parse_expr(0), token.line)

    def _parse_keyword_run(self) -> tuple[Pair, ...]:
        pairs = [self._parse_pair()]
        while self._at("punct", ",") and self._at("kw_key", offset=1):
            self._advance()
            pairs.append(self._parse_pair())
        return tuple(pairs)

    def _parse_fn(self, token: Token) -> Fn:
        body = self._parse_body(frozenset({"end"}))
        self._expect("keyword", "end")
        clauses = tuple(node for node in body if isinstance(node, Clause))
        if not clauses:
            clauses = (Clause((), body, line=token.line),)
        return Fn(clauses, token.line)

    def _parse_map(self, token: Token) -> MapLit:
        struct: Node | None = None
        if not self._at("punct", "{"):
            struct = self._parse_struct_name()
        self._expect("punct", "{")
        update: Node | None = None
        entries: list[Node] = []
        with self._nesting():
            if not self._at("punct", "}") and not self._at("kw_key"):
                first = self._parse_expr(_MAP_UPDATE_BP)
                if self._accept("op", "|"):
                    update = first
                else:
                    entries.append(self._map_entry(first))
                    if not self._accept("punct", ","):
                        self._expect("punct", "}")
                        return MapLit(tuple(entries), struct, update, token.line)
            while not self._at("punct", "}"):
                if self._at("kw_key"):
                    entries.append(self._parse_pair())
                else:
                    entries.append(self._map_entry(self._parse_expr(0)))
                if not self._accept("punct", ","):
                    break
        self._expect("punct", "}")
        return MapLit(tuple(entries), struct, update, token.line)

    def _parse_struct_name(self) -> Node:
        token = self._advance()
        if token.kind == "alias":
            ref = ModuleRef.try_parse(token.value)
            if ref is None:
                raise self._error(f"invalid struct name {token.value!r}", token)
            while self._at("op", ".") and self._at("alias", offset=1):
                self._advance()
                ref = ref.child(self._advance().value)
            return Alias(ref, token.line)
        if token.kind == "ident":
            return Var(token.value, token.line)
        if token.kind == "op" and token.value == "@":
            return UnaryOp("@", Var(self._expect_ident().value, token.line), token.line)
        raise self._error(f"unexpected {token.value!r} in struct", token)

    def _expect_ident(self) -> Token:
        token = self._advance()
        if token.kind != "ident":
            raise self._error(f"unexpected {token.value!r}, expected identifier", token)
        return token

    @staticmethod
    def _map_entry(node: Node) -> Node:
        if isinstance(node, BinaryOp) and node.op == "=>":
            return Pair(node.left, node.right, node.line)
        return node

    def _parse_bitstring(self, token: Token) -> Call:
        items: list[Node] = []
        with self._nesting():
            while not self._at("op", ">>"):
                items.append(self._parse_expr(0))
                if not self._accept("punct", ","):
                    break
        self._expect("op", ">>")
        return Call(None, "<<>>", tuple(items), line=token.line)

    # -- lowering of special forms ---------------------------------------

    def _lower(self, call: Call) -> Node:
        name = call.function
        if name == "defmodule":
            return self._lower_module(call)
        if name in _DEF_KINDS:
            return self._lower_def(call)
        if name in _DIRECTIVE_KINDS:
            return self._lower_directive(call)
        if name == "with":
            return self._lower_with(call)
        return call

    @staticmethod
    def _block_or_keyword(call: Call) -> tuple[Node, ...]:
        """Do-block statements, or the `do:` keyword value."""
        if call.block:
            return call.block + call.else_block
        value = _keyword(_trailing_keywords(call.args[1:]), "do")
        return (value,) if value is not None else ()

    def _lower_module(self, call: Call) -> Node:
        if not call.args:
            return call
        name = call.args[0].ref if isinstance(call.args[0], Alias) else None
        return ModuleDecl(name, self._block_or_keyword(call), call.line)

    def _lower_def(self, call: Call) -> Node:
        if not call.args:
            return call
        head = call.args[0]
        guard: Node | None = None
        if isinstance(head, BinaryOp) and head.op == "when":
            head, guard = head.left, head.right
        match head:
            case Call(target=None, function=name, args=params, block=(), else_block=()):
                pass
            case Var(name=name):
                params = ()
            case _:
                # unquote fragments and operator definitions
                return call
        return FunctionDef(call.function, name, params, self._block_or_keyword(call), guard, call.line)

    def _lower_directive(self, call: Call) -> Node:
        if not call.args:
            return call
        base: ModuleRef | None
        match call.args[0]:
            case Alias(ref=ref):
                base, refs = ref, (ref,)
            case Call(target=Alias(ref=group), function="{}", args=items):
                base = group
                refs = tuple(group.child(*item.ref.segments) for item in items if isinstance(item, Alias))
            case _:
                base, refs = None, ()
        return Directive(call.function, base, refs, _trailing_keywords(call.args[1:]), call.line)

    def _lower_with(self, call: Call) -> Node:
        keywords = _trailing_keywords(call.args)
        body = _keyword(keywords, "do")
        if call.block or body is None:
            return With(call.args, call.block, call.else_block, call.line)
        fallback = _keyword(keywords, "else")
        return With(call.args[:-1], (body,), (fallback,) if fallback is not None else (), call.line)


class ElixirSourceParser(SourceParserPort):
    """Parser for Elixir source files.

    Stateless: safe to share between worker threads.

    FAIL-FIRST: raises SourceParseError on any lexical or syntax error,
    including unbalanced `do`/`end` and brackets.
    """

    def parse(self, path: str, content: str) -> SyntaxTree:
        """Parse one Elixir file.

        Args:
            path: Project-relative path (forward slashes)
            content: File text

        Returns:
            SyntaxTree with top-level nodes

        Raises:
            SourceParseError: If content is not well-formed
        """
        tokens = tokenize(path, content)
        try:
            body = _Parser(path, tokens).parse_program()
        except RecursionError as e:
            raise SourceParseError(path, "expression nesting too deep") from e
        except ValueError as e:
            # Node invariants rejected a construct the grammar let through
            raise SourceParseError(path, str(e)) from e
        return SyntaxTree(path=path, body=body)
