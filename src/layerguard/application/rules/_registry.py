"""Rule registry.

Central registry of all per-file rules with factory functions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from layerguard.application.rules.boundary_crossing import BOUNDARY_CROSSING_RULES
from layerguard.application.rules.boundary_declarations import BOUNDARY_DECLARATION_RULES
from layerguard.application.rules.delegation_bypass import DELEGATION_BYPASS_RULES
from layerguard.application.rules.layer_leakage import LAYER_LEAKAGE_RULES
from layerguard.application.rules.structural_placement import STRUCTURAL_PLACEMENT_RULES
from layerguard.domain.exceptions.validation import ConfigurationError

if TYPE_CHECKING:
    from layerguard.application.rules._base import BaseRule
    from layerguard.domain.model.configuration import LinterConfig
    from layerguard.domain.ports.rule import RuleProtocol

# Registry - tuple for immutability
# Order matters: rules run in this order for each file
_ALL_RULES: tuple[type[BaseRule], ...] = (
    *LAYER_LEAKAGE_RULES,
    *DELEGATION_BYPASS_RULES,
    *BOUNDARY_CROSSING_RULES,
    *STRUCTURAL_PLACEMENT_RULES,
    *BOUNDARY_DECLARATION_RULES,
)

PARSE_ERROR_RULE_ID = "parse_error"

# Configurable ids that are not per-file rules
_ENGINE_RULE_IDS = frozenset({PARSE_ERROR_RULE_ID, "layer_boundary_deps"})


def rule_ids() -> tuple[str, ...]:
    """Ids of all registered per-file rules, in run order."""
    return tuple(rule_cls.id for rule_cls in _ALL_RULES)


def known_rule_ids() -> frozenset[str]:
    """Every id accepted in configuration."""
    return frozenset(rule_ids()) | _ENGINE_RULE_IDS


def rules_from_config(config: LinterConfig) -> tuple[RuleProtocol, ...]:
    """Instantiate enabled rules.

    Rules are created using their from_config() factory method.
    If from_config() returns None, the rule is disabled.

    Args:
        config: Run configuration

    Returns:
        Tuple of enabled rules

    Raises:
        ConfigurationError: If config names an unknown rule or a rule option is invalid
    """
    known = known_rule_ids()
    for rule_id in config.rules:
        if rule_id not in known:
            raise ConfigurationError(rule_id, "unknown rule id")

    rules: list[RuleProtocol] = []
    for rule_cls in _ALL_RULES:
        rule = rule_cls.from_config(config.rule(rule_cls.id))
        if rule is not None:
            rules.append(rule)
    return tuple(rules)
