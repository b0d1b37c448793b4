"""Domain enumerations."""

from __future__ import annotations

from enum import Enum, IntEnum, auto


class Layer(Enum):
    """Architectural layer of a source unit.

    Dependency Rule: Interface -> Infrastructure -> Application -> Domain.
    """

    DOMAIN = "domain"
    APPLICATION = "application"
    INFRASTRUCTURE = "infrastructure"
    INTERFACE = "interface"
    UNKNOWN = "unknown"


class Severity(IntEnum):
    """Issue severity. Ordered: higher value = more severe."""

    LOW = 1
    NORMAL = 2
    HIGH = 3
    HIGHER = 4

    @classmethod
    def parse(cls, value: str) -> Severity:
        """Parse severity from its lowercase name.

        Raises:
            ValueError: If value is not a known severity
        """
        try:
            return cls[value.upper()]
        except KeyError:
            known = ", ".join(s.name.lower() for s in cls)
            raise ValueError(f"unknown severity {value!r}, expected one of: {known}") from None


class RuleCategory(Enum):
    """Rule category.

    DESIGN: architecture shape violations
    WARNING: likely defects or anti-patterns
    """

    DESIGN = "design"
    WARNING = "warning"

    @property
    def default_exit_status(self) -> int:
        """Exit status used when a rule does not configure its own."""
        return _CATEGORY_EXIT_STATUS[self]


class RuleFamily(Enum):
    """Violation family a rule belongs to."""

    LAYER_LEAKAGE = auto()
    DELEGATION_BYPASS = auto()
    BOUNDARY_CROSSING = auto()
    STRUCTURAL_PLACEMENT = auto()
    DEPENDENCY_RULE = auto()
    PARSING = auto()


_CATEGORY_EXIT_STATUS = {
    RuleCategory.DESIGN: 2,
    RuleCategory.WARNING: 16,
}
