"""Cross-module validators.

Validators run once over the complete set of classified units:
- BoundaryGraphValidator: declared deps against the Dependency Rule
"""

from layerguard.application.validators.boundary_graph_validator import (
    RULE_ID,
    BoundaryGraphValidator,
)

__all__ = [
    "RULE_ID",
    "BoundaryGraphValidator",
]
