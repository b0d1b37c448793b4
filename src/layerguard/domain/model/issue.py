"""Reported diagnostic."""

from __future__ import annotations

from dataclasses import dataclass

from layerguard.domain.model.enums import RuleCategory, RuleFamily, Severity
from layerguard.domain.model.location import Location


@dataclass(frozen=True, slots=True)
class Issue:
    """Single architecture diagnostic.

    Attributes:
        rule_id: Id of the producing rule
        message: Human-readable message with remediation
        file: Project-relative file path
        line: 1-based line
        trigger: Source token that triggered the issue
        severity: Issue severity
        category: Rule category
        family: Violation family
        exit_status: Exit status contributed by this issue
    """

    rule_id: str
    message: str
    file: str
    line: int
    trigger: str
    severity: Severity
    category: RuleCategory = RuleCategory.DESIGN
    family: RuleFamily = RuleFamily.LAYER_LEAKAGE
    exit_status: int = 2

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.rule_id:
            raise ValueError("rule_id must not be empty")
        if not self.message:
            raise ValueError("message must not be empty")
        if not self.file:
            raise ValueError("file must not be empty")
        if self.line < 1:
            raise ValueError(f"line must be >= 1, got {self.line}")
        if self.exit_status < 0:
            raise ValueError(f"exit_status must be >= 0, got {self.exit_status}")

    @property
    def location(self) -> Location:
        """Source location."""
        return Location(file=self.file, line=self.line)

    @property
    def sort_key(self) -> tuple[str, int, str]:
        """Deterministic output order: file, line, rule id."""
        return (self.file, self.line, self.rule_id)

    def __str__(self) -> str:
        """Format issue for display."""
        return f"[{self.severity.name}] {self.rule_id} {self.location} ({self.trigger}): {self.message}"
