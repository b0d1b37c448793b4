"""Application layer for architecture linting.

Components:
- classification: Layer of a source unit from path and module name
- extraction: Boundary dependency declarations
- rules: Per-file rule catalog and registry
- validators: Cross-module boundary graph validation
- services: Engine facade, ordering and exit status
- discovery: Source file enumeration
- reporters: Output formatting (PlainText, JSON, rich console)
"""

from layerguard.application.classification import LayerClassifier
from layerguard.application.discovery import discover_sources, read_sources
from layerguard.application.extraction import DependencyExtractor
from layerguard.application.reporters import (
    BaseReporter,
    ConsoleReporter,
    JsonReporter,
    PlainTextReporter,
)
from layerguard.application.rules import BaseRule, known_rule_ids, rule_ids, rules_from_config
from layerguard.application.services import IssueReporter, LintEngine
from layerguard.application.validators import BoundaryGraphValidator

__all__ = [
    # Classification / extraction
    "LayerClassifier",
    "DependencyExtractor",
    # Discovery
    "discover_sources",
    "read_sources",
    # Rules
    "BaseRule",
    "known_rule_ids",
    "rule_ids",
    "rules_from_config",
    # Validators
    "BoundaryGraphValidator",
    # Reporters
    "BaseReporter",
    "ConsoleReporter",
    "JsonReporter",
    "PlainTextReporter",
    # Services
    "IssueReporter",
    "LintEngine",
]
