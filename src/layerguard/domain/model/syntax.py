"""Syntax node model.

Tagged-variant representation of a parsed Elixir module. Every node is an
immutable value carrying the 1-based source line it starts on. Rules never
inspect raw text: they dispatch on node type with `match`/`isinstance`.

Shapes produced by the parser:

    Repo.insert(user)           Call(target=Alias(Repo), function="insert", args=(Var(user),))
    :crypto.hash(:sha, data)    Call(target=Atom("crypto"), function="hash", ...)
    from(u in User)             Call(target=None, function="from", ...)
    alias MyApp.{A, B}          Directive(kind="alias", base=MyApp, refs=(MyApp.A, MyApp.B))
    use Boundary, deps: [X]     Directive(kind="use", refs=(Boundary,), options=(Pair(deps, ListLit),))
    def run(x), do: x           FunctionDef(kind="def", name="run", params=(Var(x),), body=(Var(x),))
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from layerguard.domain.model.module_ref import ModuleRef


class Node:
    """Marker base for all syntax nodes."""

    __slots__ = ()

    line: int


LiteralValue = str | int | float | bool | None


def _check_line(line: int) -> None:
    # FAIL-FIRST: lines are 1-based
    if line < 1:
        raise ValueError(f"line must be >= 1, got {line}")


@dataclass(frozen=True, slots=True)
class Alias(Node):
    """Bare module reference (e.g. `MyApp.Repo`)."""

    ref: ModuleRef
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class Atom(Node):
    """Atom literal without leading colon (`:crypto` -> name="crypto")."""

    name: str
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class Literal(Node):
    """String, number, boolean or nil literal."""

    value: LiteralValue
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class Var(Node):
    """Variable or bare identifier."""

    name: str
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name:
            raise ValueError("name must not be empty")
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class Call(Node):
    """Function call, local (`target=None`) or qualified.

    Attributes:
        target: Alias, Atom, any expression node, or None for local calls
        function: Function name ("." for anonymous calls `fun.(x)`)
        args: Positional arguments; trailing keywords become one ListLit of Pairs
        block: Statements of an attached `do` block
        else_block: Statements of `else`/`rescue`/`catch`/`after` sections
        line: Source line
    """

    target: Node | None
    function: str
    args: tuple[Node, ...] = ()
    block: tuple[Node, ...] = ()
    else_block: tuple[Node, ...] = ()
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.function:
            raise ValueError("function must not be empty")
        _check_line(self.line)

    @property
    def module(self) -> ModuleRef | None:
        """Target module ref for `Alias` targets, None otherwise."""
        if isinstance(self.target, Alias):
            return self.target.ref
        return None

    @property
    def qualified_name(self) -> str:
        """Display name of the call (`Repo.insert`, `:crypto.hash`, `from`)."""
        match self.target:
            case None:
                return self.function
            case Alias(ref=ref):
                return f"{ref}.{self.function}"
            case Atom(name=name):
                return f":{name}.{self.function}"
            case Var(name=name):
                return f"{name}.{self.function}"
            case _:
                return self.function


@dataclass(frozen=True, slots=True)
class Pair(Node):
    """Keyword or map entry (`key: value`, `key => value`)."""

    key: Node
    value: Node
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)

    @property
    def key_name(self) -> str | None:
        """Atom key name, None for non-atom keys."""
        if isinstance(self.key, Atom):
            return self.key.name
        return None


@dataclass(frozen=True, slots=True)
class Directive(Node):
    """Lexical directive: alias, import, use or require.

    Attributes:
        kind: "alias" | "import" | "use" | "require"
        base: Group base for `alias A.{B, C}`, else the single target ref
        refs: Referenced modules (groups expanded). Empty when the target
            is not a plain module name (e.g. `alias __MODULE__.X`)
        options: Trailing keyword options
        line: Source line
    """

    kind: str
    base: ModuleRef | None
    refs: tuple[ModuleRef, ...] = ()
    options: tuple[Pair, ...] = ()
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.kind not in _DIRECTIVE_KINDS:
            raise ValueError(f"unknown directive kind {self.kind!r}")
        _check_line(self.line)

    def option(self, key: str) -> Node | None:
        """Value of keyword option key, None if absent."""
        for pair in self.options:
            if pair.key_name == key:
                return pair.value
        return None


_DIRECTIVE_KINDS = frozenset({"alias", "import", "use", "require"})


@dataclass(frozen=True, slots=True)
class ModuleDecl(Node):
    """`defmodule Name do ... end`."""

    name: ModuleRef | None
    body: tuple[Node, ...] = ()
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class FunctionDef(Node):
    """`def`/`defp`/`defmacro`/`defmacrop` clause.

    Attributes:
        kind: Definition keyword
        name: Function name
        params: Parameter patterns (defaults appear as BinaryOp("\\\\"))
        body: Body statements
        guard: `when` guard expression
        line: Source line
    """

    kind: str
    name: str
    params: tuple[Node, ...] = ()
    body: tuple[Node, ...] = ()
    guard: Node | None = None
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.kind not in _DEF_KINDS:
            raise ValueError(f"unknown definition kind {self.kind!r}")
        if not self.name:
            raise ValueError("name must not be empty")
        _check_line(self.line)

    @property
    def is_private(self) -> bool:
        """True for defp/defmacrop."""
        return self.kind in {"defp", "defmacrop"}


_DEF_KINDS = frozenset({"def", "defp", "defmacro", "defmacrop"})


@dataclass(frozen=True, slots=True)
class Clause(Node):
    """Stab clause `params -> body` (fn, case, cond, receive, with-else)."""

    params: tuple[Node, ...] = ()
    body: tuple[Node, ...] = ()
    guard: Node | None = None
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class Fn(Node):
    """Anonymous function `fn ... end`."""

    clauses: tuple[Clause, ...] = ()
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class With(Node):
    """`with` special form.

    Attributes:
        clauses: Heads; matching heads are BinaryOp("<-"), bare expressions allowed
        body: `do` body
        else_clauses: `else` stab clauses
        line: Source line
    """

    clauses: tuple[Node, ...] = ()
    body: tuple[Node, ...] = ()
    else_clauses: tuple[Node, ...] = ()
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)

    @property
    def match_clause_count(self) -> int:
        """Number of `<-` clauses."""
        return sum(1 for clause in self.clauses if isinstance(clause, BinaryOp) and clause.op == "<-")


@dataclass(frozen=True, slots=True)
class BinaryOp(Node):
    """Infix operator application (`a |> b`, `x = y`, `arg \\\\ default`)."""

    op: str
    left: Node
    right: Node
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.op:
            raise ValueError("op must not be empty")
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class UnaryOp(Node):
    """Prefix operator application (`not x`, `&fun/1`, `@attr value`, `^pin`)."""

    op: str
    operand: Node
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.op:
            raise ValueError("op must not be empty")
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class ListLit(Node):
    """List literal (keyword lists hold Pair items)."""

    items: tuple[Node, ...] = ()
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class TupleLit(Node):
    """Tuple literal."""

    items: tuple[Node, ...] = ()
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class MapLit(Node):
    """Map or struct literal.

    Attributes:
        entries: Pair entries
        struct: Struct name node for `%Name{}` (Alias or Var for `__MODULE__`)
        update: Updated map for `%{map | key: value}`
        line: Source line
    """

    entries: tuple[Node, ...] = ()
    struct: Node | None = None
    update: Node | None = None
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Parenthesized expression sequence."""

    body: tuple[Node, ...] = ()
    line: int = 1

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        _check_line(self.line)


def children(node: Node) -> tuple[Node, ...]:
    """Direct child nodes in source order.

    Single dispatch point for traversal: adding a node variant requires
    extending this function only.
    """
    match node:
        case Alias() | Atom() | Literal() | Var() | Directive():
            return ()
        case Call(target=target, args=args, block=block, else_block=else_block):
            head = (target,) if target is not None else ()
            return head + args + block + else_block
        case Pair(key=key, value=value):
            return (key, value)
        case ModuleDecl(body=body):
            return body
        case FunctionDef(params=params, body=body, guard=guard):
            return params + ((guard,) if guard is not None else ()) + body
        case Clause(params=params, body=body, guard=guard):
            return params + ((guard,) if guard is not None else ()) + body
        case Fn(clauses=clauses):
            return clauses
        case With(clauses=clauses, body=body, else_clauses=else_clauses):
            return clauses + body + else_clauses
        case BinaryOp(left=left, right=right):
            return (left, right)
        case UnaryOp(operand=operand):
            return (operand,)
        case ListLit(items=items) | TupleLit(items=items):
            return items
        case MapLit(entries=entries, struct=struct, update=update):
            extra = tuple(part for part in (struct, update) if part is not None)
            return extra + entries
        case Block(body=body):
            return body
        case _:
            raise TypeError(f"unknown node type: {type(node).__name__}")


def walk(node: Node) -> Iterator[Node]:
    """Depth-first pre-order traversal starting at node (inclusive).

    Iterative to stay clear of the recursion limit on deeply piped code.
    """
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


def walk_all(nodes: tuple[Node, ...]) -> Iterator[Node]:
    """Pre-order traversal over a sequence of sibling roots."""
    for node in nodes:
        yield from walk(node)
