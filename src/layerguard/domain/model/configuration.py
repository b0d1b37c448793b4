"""Linter configuration.

Plain immutable values: built-in defaults, callers override selectively.
Malformed values raise ConfigurationError at construction time, before any
file is processed.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.model.enums import Layer, Severity

# Order matters: Interface is checked before Domain/Application so that
# presentation files with incidental "domain"/"application" substrings
# are not misclassified.
DEFAULT_LAYER_PATTERNS: tuple[tuple[Layer, tuple[str, ...]], ...] = (
    (Layer.INTERFACE, (r"(?i)_web\b", r"\bMix\.Tasks\.", r"/mix/tasks/")),
    (Layer.DOMAIN, (r"\.Domain\b", r"/domain/")),
    (Layer.APPLICATION, (r"\.Application\.", r"\.ApplicationLayer\b", r"/application/")),
    (Layer.INFRASTRUCTURE, (r"\.Infrastructure\b", r"/infrastructure/")),
)

DEFAULT_INCLUDE: tuple[str, ...] = ("**/*.ex", "**/*.exs")
DEFAULT_EXCLUDE: tuple[str, ...] = ("_build/**", "deps/**", "**/_build/**", "**/deps/**", "**/node_modules/**")


def _freeze(mapping: Mapping[str, object]) -> Mapping[str, object]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, slots=True)
class RuleConfig:
    """Per-rule configuration.

    Attributes:
        enabled: False disables the rule entirely
        severity: Override of the rule's default severity. None = default
        exit_status: Override of the rule's default exit status. None = default
        params: Rule-specific options overriding built-in defaults
    """

    enabled: bool = True
    severity: Severity | None = None
    exit_status: int | None = None
    params: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.exit_status is not None and not 0 <= self.exit_status <= 255:
            raise ConfigurationError("exit_status", f"must be 0-255, got {self.exit_status}")
        object.__setattr__(self, "params", _freeze(self.params))

    def param(self, key: str, default: object) -> object:
        """Configured value for key, default if unset."""
        return self.params.get(key, default)


@dataclass(frozen=True, slots=True)
class LinterConfig:
    """Run-wide configuration.

    Attributes:
        layer_patterns: Ordered (layer, regexes) groups. First match wins
        include: Glob patterns of files to analyze
        exclude: Glob patterns of files to skip
        rules: Rule id -> RuleConfig overrides
        min_severity: Issues below this severity do not affect the exit status
        workers: Worker threads for per-file analysis (1 = sequential)
        excluded_apps: App names skipped by boundary graph validation
    """

    layer_patterns: tuple[tuple[Layer, tuple[str, ...]], ...] = DEFAULT_LAYER_PATTERNS
    include: tuple[str, ...] = DEFAULT_INCLUDE
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    rules: Mapping[str, RuleConfig] = field(default_factory=dict)
    min_severity: Severity = Severity.LOW
    workers: int = 1
    excluded_apps: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.workers < 1:
            raise ConfigurationError("workers", f"must be >= 1, got {self.workers}")

        seen: set[Layer] = set()
        for layer, patterns in self.layer_patterns:
            if layer is Layer.UNKNOWN:
                raise ConfigurationError("layer_patterns", "UNKNOWN is the fallback, not a pattern group")
            if layer in seen:
                raise ConfigurationError("layer_patterns", f"duplicate group for {layer.value}")
            seen.add(layer)
            for pattern in patterns:
                try:
                    re.compile(pattern)
                except re.error as e:
                    raise ConfigurationError(f"layer_patterns.{layer.value}", f"bad regex {pattern!r}: {e}") from e

        for rule_id, rule_config in self.rules.items():
            if not isinstance(rule_config, RuleConfig):
                raise ConfigurationError(rule_id, f"expected RuleConfig, got {type(rule_config).__name__}")

        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def rule(self, rule_id: str) -> RuleConfig:
        """Configuration for rule_id, defaults if not overridden."""
        return self.rules.get(rule_id, _DEFAULT_RULE_CONFIG)

    def with_rule(self, rule_id: str, rule_config: RuleConfig) -> LinterConfig:
        """Copy with one rule override replaced."""
        rules = dict(self.rules)
        rules[rule_id] = rule_config
        return LinterConfig(
            layer_patterns=self.layer_patterns,
            include=self.include,
            exclude=self.exclude,
            rules=rules,
            min_severity=self.min_severity,
            workers=self.workers,
            excluded_apps=self.excluded_apps,
        )


_DEFAULT_RULE_CONFIG = RuleConfig()
