"""Domain exceptions."""

from layerguard.domain.exceptions.base import LayerGuardError
from layerguard.domain.exceptions.parsing import SourceParseError
from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.exceptions.violation import BoundaryViolationError

__all__ = [
    "LayerGuardError",
    "SourceParseError",
    "ConfigurationError",
    "BoundaryViolationError",
]
