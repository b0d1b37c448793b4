"""Boundary dependency extraction.

Finds the canonical `use Boundary, deps: [...]` directive of a module and
turns its literal list into a DependencyDeclaration. Supported shapes:

    use Boundary, deps: []
    use Boundary, deps: [MyApp.Domain, MyApp.Application]
    use Boundary, deps: [MyApp.Domain, {Ecto, :relaxed}]

Extraction is fail-soft: entries that are not bare module names are
dropped, and a `deps` value that is not a literal list yields no
declaration at all (a missed violation beats a spurious one).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from layerguard.domain.model.dependency import DependencyDeclaration
from layerguard.domain.model.module_ref import ModuleRef
from layerguard.domain.model.syntax import (
    Alias,
    Directive,
    ListLit,
    Literal,
    TupleLit,
)

if TYPE_CHECKING:
    from layerguard.domain.model.syntax import Node
    from layerguard.domain.model.syntax_tree import SyntaxTree

logger = logging.getLogger(__name__)

BOUNDARY_MODULE = ModuleRef(("Boundary",))


def is_boundary_directive(node: Node) -> bool:
    """True for `use Boundary, ...`."""
    return isinstance(node, Directive) and node.kind == "use" and node.refs == (BOUNDARY_MODULE,)


def find_boundary_directive(tree: SyntaxTree) -> tuple[ModuleRef | None, Directive] | None:
    """First boundary directive with its enclosing module name.

    Returns:
        (module name, directive), None if the file declares no boundary
    """
    for module in tree.modules():
        for statement in module.body:
            if isinstance(statement, Directive) and is_boundary_directive(statement):
                return module.name, statement
    for statement in tree.body:
        if isinstance(statement, Directive) and is_boundary_directive(statement):
            return tree.module_name, statement
    return None


def _entry_ref(entry: Node) -> ModuleRef | None:
    match entry:
        case Alias(ref=ref):
            return ref
        case TupleLit(items=(Alias(ref=ref), *_)):
            return ref
        case _:
            return None


class DependencyExtractor:
    """Extracts DependencyDeclaration from a syntax tree."""

    def extract(self, tree: SyntaxTree) -> DependencyDeclaration | None:
        """Extract the module's boundary declaration.

        `use Boundary` without a `deps` option declares no dependencies.

        Args:
            tree: Parsed module

        Returns:
            Declaration, None if the module declares no boundary or its
            `deps` value is not a literal list
        """
        found = find_boundary_directive(tree)
        if found is None:
            return None
        module, directive = found
        if module is None:
            logger.debug("%s: boundary directive outside a named module", tree.path)
            return None

        value = directive.option("deps")
        deps: set[ModuleRef] = set()
        if value is not None:
            if not isinstance(value, ListLit):
                logger.debug("%s: deps is not a literal list, treating as undeclared", tree.path)
                return None
            for entry in value.items:
                ref = _entry_ref(entry)
                if ref is None:
                    logger.debug("%s:%d: dropping malformed deps entry", tree.path, entry.line)
                    continue
                deps.add(ref)

        flags = frozenset(
            pair.key_name
            for pair in directive.options
            if pair.key_name is not None and isinstance(pair.value, Literal) and pair.value.value is True
        )
        return DependencyDeclaration(
            module=module,
            deps=frozenset(deps),
            line=directive.line,
            options=flags,
        )

