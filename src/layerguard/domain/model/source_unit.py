"""Per-file analysis unit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from layerguard.domain.model.dependency import DependencyDeclaration
    from layerguard.domain.model.enums import Layer
    from layerguard.domain.model.module_ref import ModuleRef
    from layerguard.domain.model.syntax_tree import SyntaxTree


@dataclass(frozen=True, slots=True)
class SourceUnit:
    """One classified, parsed source file.

    Created once per file by the engine, immutable thereafter.

    Attributes:
        path: Project-relative file path
        layer: Classified layer
        syntax_tree: Parsed tree
        declaration: Boundary declaration, None when the module declares none
    """

    path: str
    layer: Layer
    syntax_tree: SyntaxTree
    declaration: DependencyDeclaration | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.path != self.syntax_tree.path:
            raise ValueError(f"path mismatch: {self.path} != {self.syntax_tree.path}")

    @property
    def module_name(self) -> ModuleRef | None:
        """First declared module name."""
        return self.syntax_tree.module_name

    @property
    def declared_deps(self) -> frozenset[ModuleRef] | None:
        """Declared dependencies, None when undeclared."""
        if self.declaration is None:
            return None
        return self.declaration.deps

    @property
    def filename(self) -> str:
        """Last path component."""
        return self.path.rsplit("/", 1)[-1]
