"""Declared boundary dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from layerguard.domain.model.module_ref import ModuleRef


@dataclass(frozen=True, slots=True)
class DependencyDeclaration:
    """Module's explicit allowed-dependency list.

    A module without a declaration has no DependencyDeclaration at all;
    an empty `deps` means "declares no dependencies".

    Attributes:
        module: Declaring module
        deps: Declared dependencies
        line: Line of the declaring directive
        options: Other boundary options as raw atom/literal text (e.g. top_level?)
    """

    module: ModuleRef
    deps: frozenset[ModuleRef]
    line: int = 1
    options: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.line < 1:
            raise ValueError(f"line must be >= 1, got {self.line}")

    @property
    def is_empty(self) -> bool:
        """True if the module declares no dependencies."""
        return not self.deps

    def sorted_deps(self) -> tuple[ModuleRef, ...]:
        """Dependencies in name order."""
        return tuple(sorted(self.deps, key=lambda ref: ref.name))
