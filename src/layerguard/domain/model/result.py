"""Lint run result aggregate."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from layerguard.domain.model.issue import Issue


@dataclass(frozen=True, slots=True)
class LintResult:
    """Result of one lint run.

    Attributes:
        issues: Issues ordered by (file, line, rule id)
        exit_status: Max exit status among issues at or above min severity, 0 if none
        files_checked: Number of analyzed files
    """

    issues: tuple[Issue, ...]
    exit_status: int
    files_checked: int

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.exit_status < 0:
            raise ValueError(f"exit_status must be >= 0, got {self.exit_status}")
        if self.files_checked < 0:
            raise ValueError(f"files_checked must be >= 0, got {self.files_checked}")
        if list(self.issues) != sorted(self.issues, key=lambda issue: issue.sort_key):
            raise ValueError("issues must be ordered by (file, line, rule_id)")

    @property
    def passed(self) -> bool:
        """True if no issue affects the exit status."""
        return self.exit_status == 0

    @property
    def issue_count(self) -> int:
        """Number of issues."""
        return len(self.issues)

    def by_rule(self) -> dict[str, int]:
        """Issue count per rule id."""
        return dict(Counter(issue.rule_id for issue in self.issues))

    def for_rule(self, rule_id: str) -> tuple[Issue, ...]:
        """Issues produced by rule_id."""
        return tuple(issue for issue in self.issues if issue.rule_id == rule_id)

    @classmethod
    def empty(cls) -> LintResult:
        """Create empty result (passed, nothing checked)."""
        return cls(issues=(), exit_status=0, files_checked=0)
