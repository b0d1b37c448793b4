"""Base rule class for per-file checks.

Provides default implementation of RuleProtocol.
Concrete rules inherit from this.
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar, Self

from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.model.enums import RuleCategory, Severity
from layerguard.domain.model.issue import Issue

if TYPE_CHECKING:
    from layerguard.domain.model.configuration import RuleConfig
    from layerguard.domain.model.enums import Layer, RuleFamily
    from layerguard.domain.model.rule import RuleContext
    from layerguard.domain.model.source_unit import SourceUnit
    from layerguard.domain.model.syntax import Node


class BaseRule(ABC):
    """Base class for rules implementing RuleProtocol.

    Concrete rules must:
    1. Set `id` and `family` class attributes
    2. Implement `applies_to()` (file predicate)
    3. Implement `visit()` or override `check()` for scoped traversals

    Applicability is the layer gate AND `applies_to()`: a rule with
    `layers = None` is layer-agnostic.

    Example:
        class NoConsoleInDomain(BaseRule):
            id = "no_console_in_domain"
            family = RuleFamily.LAYER_LEAKAGE
            layers = frozenset({Layer.DOMAIN})

            def applies_to(self, unit: SourceUnit) -> bool:
                return "/domain/" in unit.path

            def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
                if isinstance(node, Call) and node.qualified_name == "IO.puts":
                    return (self.issue(ctx, "Console output in domain", node.line, "IO.puts"),)
                return ()
    """

    id: ClassVar[str]
    """Stable rule identifier."""

    family: ClassVar[RuleFamily]
    """Violation family."""

    category: ClassVar[RuleCategory] = RuleCategory.DESIGN
    base_severity: ClassVar[Severity] = Severity.NORMAL
    base_exit_status: ClassVar[int | None] = None
    """Exit status when not configured. None = category default."""

    layers: ClassVar[frozenset[Layer] | None] = None
    """Layers the rule inspects. None = all layers."""

    param_defaults: ClassVar[Mapping[str, object]] = MappingProxyType({})
    """Built-in option defaults. Overrides must keep the default's type."""

    def __init__(
        self,
        severity: Severity | None = None,
        exit_status: int | None = None,
        params: Mapping[str, object] | None = None,
    ) -> None:
        """Initialize with optional overrides.

        Args:
            severity: Severity override
            exit_status: Exit status override
            params: Option overrides (unknown keys are rejected)

        Raises:
            ConfigurationError: If an option is unknown or has the wrong type
        """
        self.severity = severity if severity is not None else self.base_severity
        if exit_status is not None:
            self.exit_status = exit_status
        elif self.base_exit_status is not None:
            self.exit_status = self.base_exit_status
        else:
            self.exit_status = self.category.default_exit_status

        merged = dict(self.param_defaults)
        for key, value in (params or {}).items():
            if key not in self.param_defaults:
                raise ConfigurationError(self.id, f"unknown option {key!r}")
            merged[key] = _coerce(self.id, key, self.param_defaults[key], value)
        self.params: Mapping[str, object] = MappingProxyType(merged)
        self.validate_params()

    @classmethod
    def from_config(cls, config: RuleConfig) -> Self | None:
        """Create rule from config.

        Args:
            config: Rule configuration

        Returns:
            Rule instance if enabled, None if disabled
        """
        if not config.enabled:
            return None
        return cls(severity=config.severity, exit_status=config.exit_status, params=config.params)

    def validate_params(self) -> None:
        """Check option values. Override for range checks.

        Raises:
            ConfigurationError: If an option value is out of range
        """

    def strings(self, key: str) -> tuple[str, ...]:
        """String-list option value."""
        value = self.params[key]
        if not isinstance(value, tuple):
            raise TypeError(f"option {key!r} is not a string list")
        return value

    def table(self, key: str) -> Mapping[str, str]:
        """String-to-string table option value."""
        value = self.params[key]
        if not isinstance(value, Mapping):
            raise TypeError(f"option {key!r} is not a table")
        return value

    def applicable(self, unit: SourceUnit) -> bool:
        """True if the rule inspects unit."""
        if self.layers is not None and unit.layer not in self.layers:
            return False
        return self.applies_to(unit)

    def applies_to(self, unit: SourceUnit) -> bool:
        """File predicate. Default: every file."""
        return True

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        """Issues triggered by node. Default: none."""
        return ()

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        """Walk unit in pre-order and collect visitor issues."""
        issues: list[Issue] = []
        for node in unit.syntax_tree.nodes():
            issues.extend(self.visit(node, ctx))
        return tuple(issues)

    def issue(self, ctx: RuleContext, message: str, line: int, trigger: str) -> Issue:
        """Build an issue for the unit in ctx."""
        return Issue(
            rule_id=self.id,
            message=message,
            file=ctx.path,
            line=max(line, 1),
            trigger=trigger,
            severity=self.severity,
            category=self.category,
            family=self.family,
            exit_status=self.exit_status,
        )

    def __repr__(self) -> str:
        """Rule id for debugging."""
        return f"{type(self).__name__}({self.id!r})"


def _coerce(rule_id: str, key: str, default: object, value: object) -> object:
    """Validate override against the type of its default."""
    match default:
        case bool():
            if not isinstance(value, bool):
                raise ConfigurationError(rule_id, f"option {key!r} must be a boolean")
            return value
        case int():
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(rule_id, f"option {key!r} must be an integer")
            return value
        case str():
            if not isinstance(value, str):
                raise ConfigurationError(rule_id, f"option {key!r} must be a string")
            return value
        case tuple() | list() | frozenset():
            if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
                raise ConfigurationError(rule_id, f"option {key!r} must be a list of strings")
            if not all(isinstance(item, str) for item in value):
                raise ConfigurationError(rule_id, f"option {key!r} must be a list of strings")
            return tuple(value)
        case Mapping():
            if not isinstance(value, Mapping):
                raise ConfigurationError(rule_id, f"option {key!r} must be a table")
            if not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
                raise ConfigurationError(rule_id, f"option {key!r} must map strings to strings")
            return MappingProxyType(dict(value))
        case _:
            return value
