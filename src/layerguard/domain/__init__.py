"""layerguard domain layer.

Pure domain logic with no external dependencies.
Only imports: typing, abc, dataclasses, enum, re, types, collections
"""

from layerguard.domain.exceptions import (
    BoundaryViolationError,
    ConfigurationError,
    LayerGuardError,
    SourceParseError,
)
from layerguard.domain.model import (
    DependencyDeclaration,
    Issue,
    Layer,
    LinterConfig,
    LintResult,
    ModuleRef,
    RuleCategory,
    RuleConfig,
    Severity,
    SourceUnit,
    SyntaxTree,
)

__all__ = [
    "BoundaryViolationError",
    "ConfigurationError",
    "DependencyDeclaration",
    "Issue",
    "Layer",
    "LayerGuardError",
    "LinterConfig",
    "LintResult",
    "ModuleRef",
    "RuleCategory",
    "RuleConfig",
    "Severity",
    "SourceParseError",
    "SourceUnit",
    "SyntaxTree",
]
