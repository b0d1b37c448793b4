"""Main facade for linting.

LintEngine is the primary entry point for running architecture checks.
Composition-based: accepts parser, filesystem probe, rules, validator and
reporter.

Pipeline:
    per file (parallelizable): parse -> classify -> extract -> rules
    barrier
    once: boundary graph validation
    ordering + exit status
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Self

from layerguard.application.classification.layer_classifier import LayerClassifier
from layerguard.application.extraction.dependency_extractor import DependencyExtractor
from layerguard.application.rules._registry import PARSE_ERROR_RULE_ID, rules_from_config
from layerguard.application.services.issue_reporter import IssueReporter
from layerguard.application.validators.boundary_graph_validator import BoundaryGraphValidator
from layerguard.domain.exceptions.parsing import SourceParseError
from layerguard.domain.model.configuration import LinterConfig
from layerguard.domain.model.enums import RuleCategory, RuleFamily, Severity
from layerguard.domain.model.issue import Issue
from layerguard.domain.model.rule import RuleContext
from layerguard.domain.model.source_unit import SourceUnit

if TYPE_CHECKING:
    from layerguard.domain.model.result import LintResult
    from layerguard.domain.ports.file_system import ProjectFileSystem
    from layerguard.domain.ports.reporter import ReporterProtocol
    from layerguard.domain.ports.rule import RuleProtocol
    from layerguard.domain.ports.source_parser import SourceParserPort

logger = logging.getLogger(__name__)


class LintEngine:
    """Runs all applicable rules over a file set.

    Per-file work shares no mutable state, so it may run on worker
    threads. Output order never depends on scheduling.

    Factory methods:
    - from_config(): Rules and validator based on LinterConfig

    Example:
        engine = LintEngine.from_config(LinterConfig(), ElixirSourceParser(), LocalFileSystem(root))
        result = engine.run({"lib/my_app/domain/user.ex": source})
        if not result.passed:
            print(f"Issues: {result.issue_count}")
    """

    def __init__(
        self,
        parser: SourceParserPort,
        filesystem: ProjectFileSystem,
        *,
        config: LinterConfig | None = None,
        rules: Sequence[RuleProtocol] = (),
        validator: BoundaryGraphValidator | None = None,
        classifier: LayerClassifier | None = None,
        extractor: DependencyExtractor | None = None,
        reporter: ReporterProtocol | None = None,
    ) -> None:
        """Initialize engine with dependencies.

        Args:
            parser: Source parser
            filesystem: Existence probe handed to rules
            config: Run configuration (defaults if None)
            rules: Per-file rules to run
            validator: Cross-module validator, None to skip graph validation
            classifier: Layer classifier (built from config if None)
            extractor: Boundary declaration extractor
            reporter: Optional reporter for output

        Raises:
            ConfigurationError: If config patterns are invalid
        """
        self._config = config or LinterConfig()
        self._parser = parser
        self._filesystem = filesystem
        self._rules = tuple(rules)
        self._validator = validator
        self._classifier = classifier or LayerClassifier.from_config(self._config)
        self._extractor = extractor or DependencyExtractor()
        self._reporter = reporter
        self._issue_reporter = IssueReporter(self._config.min_severity)

    @classmethod
    def from_config(
        cls,
        config: LinterConfig,
        parser: SourceParserPort,
        filesystem: ProjectFileSystem,
        *,
        reporter: ReporterProtocol | None = None,
    ) -> Self:
        """Create engine with rules and validator based on config.

        All configuration is validated here, before any file is processed.

        Args:
            config: Run configuration
            parser: Source parser
            filesystem: Existence probe
            reporter: Optional reporter

        Returns:
            LintEngine with config-based rules

        Raises:
            ConfigurationError: On unknown rule ids, bad options or bad patterns
        """
        return cls(
            parser,
            filesystem,
            config=config,
            rules=rules_from_config(config),
            validator=BoundaryGraphValidator.from_config(config, filesystem),
            reporter=reporter,
        )

    @property
    def rules(self) -> tuple[RuleProtocol, ...]:
        """Configured per-file rules."""
        return self._rules

    def run(self, files: Mapping[str, str]) -> LintResult:
        """Lint a file set.

        A file that fails to parse yields one parse_error issue; the other
        files are analyzed normally.

        Args:
            files: Project-relative path -> source text

        Returns:
            LintResult with ordered issues and exit status
        """
        start_time = time.perf_counter()
        paths = sorted(files)

        if self._config.workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=self._config.workers) as executor:
                outcomes = list(executor.map(lambda path: self._analyze(path, files[path]), paths))
        else:
            outcomes = [self._analyze(path, files[path]) for path in paths]

        # Barrier: graph validation needs every unit
        units = [unit for unit, _ in outcomes if unit is not None]
        issues = [issue for _, file_issues in outcomes for issue in file_issues]
        if self._validator is not None:
            issues.extend(self._validator.validate(units))

        result = self._issue_reporter.build(issues, files_checked=len(paths))
        logger.info(
            "checked %d file(s) in %.2fs: %d issue(s), exit status %d",
            result.files_checked,
            time.perf_counter() - start_time,
            result.issue_count,
            result.exit_status,
        )

        if self._reporter is not None:
            self._reporter.report(result)

        return result

    def analyze_unit(self, path: str, content: str) -> SourceUnit:
        """Parse, classify and extract one file.

        Raises:
            SourceParseError: If content cannot be parsed
        """
        tree = self._parser.parse(path, content)
        module_name = tree.module_name
        layer = self._classifier.classify(path, module_name.name if module_name else None)
        return SourceUnit(
            path=path,
            layer=layer,
            syntax_tree=tree,
            declaration=self._extractor.extract(tree),
        )

    def _analyze(self, path: str, content: str) -> tuple[SourceUnit | None, tuple[Issue, ...]]:
        """Per-file stage. Never raises SourceParseError."""
        try:
            unit = self.analyze_unit(path, content)
        except SourceParseError as e:
            logger.warning("%s", e)
            if not self._config.rule(PARSE_ERROR_RULE_ID).enabled:
                return None, ()
            return None, (self._parse_issue(path, e),)

        issues: list[Issue] = []
        for rule in self._rules:
            if rule.applicable(unit):
                issues.extend(rule.check(unit, RuleContext(unit, self._filesystem, rule.params)))
        logger.debug("%s: layer=%s, %d issue(s)", path, unit.layer.value, len(issues))
        return unit, tuple(issues)

    def _parse_issue(self, path: str, error: SourceParseError) -> Issue:
        rule_config = self._config.rule(PARSE_ERROR_RULE_ID)
        exit_status = rule_config.exit_status
        return Issue(
            rule_id=PARSE_ERROR_RULE_ID,
            message=f"File could not be parsed: {error.reason}. No other checks ran for this file.",
            file=path,
            line=error.line,
            trigger="parse",
            severity=rule_config.severity or Severity.HIGHER,
            category=RuleCategory.WARNING,
            family=RuleFamily.PARSING,
            exit_status=exit_status if exit_status is not None else RuleCategory.WARNING.default_exit_status,
        )
