"""Per-file rule catalog.

Rules are grouped by violation family:
- layer_leakage: impure calls inside the domain layer
- delegation_bypass: orchestration or raw data access outside its owner
- boundary_crossing: access to another context's internals
- structural_placement: files outside their layer's directory
- boundary_declarations: public API boundary declarations
"""

from layerguard.application.rules._base import BaseRule
from layerguard.application.rules._registry import (
    PARSE_ERROR_RULE_ID,
    known_rule_ids,
    rule_ids,
    rules_from_config,
)

__all__ = [
    # Base
    "BaseRule",
    # Registry
    "PARSE_ERROR_RULE_ID",
    "known_rule_ids",
    "rule_ids",
    "rules_from_config",
]
