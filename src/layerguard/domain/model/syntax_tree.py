"""Parsed source file."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from layerguard.domain.model.syntax import ModuleDecl, walk_all

if TYPE_CHECKING:
    from layerguard.domain.model.module_ref import ModuleRef
    from layerguard.domain.model.syntax import Node


@dataclass(frozen=True, slots=True)
class SyntaxTree:
    """Syntax tree of one source file.

    Attributes:
        path: Project-relative file path (forward slashes)
        body: Top-level nodes
    """

    path: str
    body: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.path:
            raise ValueError("path must not be empty")
        if "\\" in self.path:
            raise ValueError(f"path must use forward slashes: {self.path}")

    def nodes(self) -> Iterator[Node]:
        """All nodes in depth-first pre-order."""
        return walk_all(self.body)

    def modules(self) -> tuple[ModuleDecl, ...]:
        """All module declarations, outermost first."""
        return tuple(node for node in self.nodes() if isinstance(node, ModuleDecl))

    @property
    def module_name(self) -> ModuleRef | None:
        """Name of the first declared module."""
        for module in self.modules():
            if module.name is not None:
                return module.name
        return None
