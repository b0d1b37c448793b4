"""Domain model entities."""

from layerguard.domain.model.configuration import (
    DEFAULT_LAYER_PATTERNS,
    LinterConfig,
    RuleConfig,
)
from layerguard.domain.model.dependency import DependencyDeclaration
from layerguard.domain.model.enums import Layer, RuleCategory, RuleFamily, Severity
from layerguard.domain.model.issue import Issue
from layerguard.domain.model.location import Location
from layerguard.domain.model.module_ref import ModuleRef, is_module_name
from layerguard.domain.model.result import LintResult
from layerguard.domain.model.rule import RuleContext
from layerguard.domain.model.source_unit import SourceUnit
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
    Node,
    Pair,
    TupleLit,
    UnaryOp,
    Var,
    With,
    children,
    walk,
    walk_all,
)
from layerguard.domain.model.syntax_tree import SyntaxTree

__all__ = [
    "DEFAULT_LAYER_PATTERNS",
    "Alias",
    "Atom",
    "BinaryOp",
    "Block",
    "Call",
    "Clause",
    "DependencyDeclaration",
    "Directive",
    "Fn",
    "FunctionDef",
    "Issue",
    "Layer",
    "LinterConfig",
    "LintResult",
    "ListLit",
    "Literal",
    "Location",
    "MapLit",
    "ModuleDecl",
    "ModuleRef",
    "Node",
    "Pair",
    "RuleCategory",
    "RuleConfig",
    "RuleContext",
    "RuleFamily",
    "Severity",
    "SourceUnit",
    "SyntaxTree",
    "TupleLit",
    "UnaryOp",
    "Var",
    "With",
    "children",
    "is_module_name",
    "walk",
    "walk_all",
]
