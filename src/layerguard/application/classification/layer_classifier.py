"""Layer classification from module name and path.

Classification is an ordered list of (layer, patterns) groups evaluated
against "<module_name> <path>". First matching group wins; no match yields
Layer.UNKNOWN. Interface is checked first so that web files containing
narrower substrings ("/domain/", ".Application.") stay in the Interface layer.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.model.configuration import DEFAULT_LAYER_PATTERNS
from layerguard.domain.model.enums import Layer

if TYPE_CHECKING:
    from layerguard.domain.model.configuration import LinterConfig


class LayerClassifier:
    """Total, deterministic layer classifier.

    Example:
        >>> LayerClassifier().classify("lib/my_app/domain/entities/user.ex", "MyApp.Domain.Entities.User")
        <Layer.DOMAIN: 'domain'>
    """

    __slots__ = ("_groups",)

    def __init__(
        self,
        groups: tuple[tuple[Layer, tuple[str, ...]], ...] = DEFAULT_LAYER_PATTERNS,
    ) -> None:
        """Compile pattern groups.

        Args:
            groups: Ordered (layer, regex patterns) pairs

        Raises:
            ConfigurationError: If a pattern is not a valid regex
        """
        compiled: list[tuple[Layer, tuple[re.Pattern[str], ...]]] = []
        for layer, patterns in groups:
            try:
                compiled.append((layer, tuple(re.compile(p) for p in patterns)))
            except re.error as e:
                raise ConfigurationError(f"layer_patterns.{layer.value}", str(e)) from e
        self._groups = tuple(compiled)

    @classmethod
    def from_config(cls, config: LinterConfig) -> LayerClassifier:
        """Create classifier from linter config."""
        return cls(config.layer_patterns)

    def classify(self, path: str, module_name: str | None = None) -> Layer:
        """Classify a module.

        Args:
            path: Project-relative file path
            module_name: Declared module name, None if the file declares none

        Returns:
            Matching layer, Layer.UNKNOWN if no group matches
        """
        subject = f"{module_name or ''} {path}"
        for layer, patterns in self._groups:
            if any(pattern.search(subject) for pattern in patterns):
                return layer
        return Layer.UNKNOWN
