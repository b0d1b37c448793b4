"""Rule protocol.

Users extend layerguard by implementing this Protocol. Rules are
stateless: every input arrives through the unit and the context.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from layerguard.domain.model.enums import RuleCategory, RuleFamily, Severity
    from layerguard.domain.model.issue import Issue
    from layerguard.domain.model.rule import RuleContext
    from layerguard.domain.model.source_unit import SourceUnit
    from layerguard.domain.model.syntax import Node


class RuleProtocol(Protocol):
    """Contract for per-file checks.

    The engine calls `applicable()` once per unit and, when it answers
    True, `check()`. Walk-based rules implement `visit()` and inherit
    a `check()` that feeds it every node in pre-order.
    """

    id: str
    family: RuleFamily
    category: RuleCategory
    severity: Severity
    exit_status: int
    params: Mapping[str, object]

    def applicable(self, unit: SourceUnit) -> bool:
        """True if the rule inspects unit."""
        ...

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        """Issues triggered by a single node."""
        ...

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        """All issues for unit."""
        ...
