"""Rule evaluation context."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from layerguard.domain.model.source_unit import SourceUnit
    from layerguard.domain.ports.file_system import ProjectFileSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuleContext:
    """Per-check inputs handed to a rule visitor.

    Attributes:
        unit: Unit being checked
        filesystem: Existence probe for structural checks
        params: Rule options, built-in defaults merged with overrides
    """

    unit: SourceUnit
    filesystem: ProjectFileSystem
    params: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @property
    def path(self) -> str:
        """Path of the checked unit."""
        return self.unit.path

    def exists(self, path: str) -> bool:
        """Existence probe. A failed probe counts as missing."""
        try:
            return self.filesystem.exists(path)
        except OSError as e:
            logger.warning("existence probe failed for %s: %s", path, e)
            return False

    def strings(self, key: str) -> tuple[str, ...]:
        """String-sequence option."""
        value = self.params[key]
        if isinstance(value, str) or not isinstance(value, Iterable):
            raise TypeError(f"option {key!r} must be a sequence of strings")
        return tuple(str(item) for item in value)

    def integer(self, key: str) -> int:
        """Integer option."""
        value = self.params[key]
        if not isinstance(value, int):
            raise TypeError(f"option {key!r} must be int, got {type(value).__name__}")
        return value
