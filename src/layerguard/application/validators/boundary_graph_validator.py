"""Boundary graph validator.

Checks every declared boundary against the Dependency Rule for its layer,
relative to its own architectural context:

    Domain          deps: []
    Application     deps within {Ctx.Domain}
    Infrastructure  deps within {Ctx.Domain, Ctx.Application, Ctx.ApplicationLayer}

A context without its own Domain on disk may depend on any enclosing
context's Domain instead. Runs once, after all per-file checks.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Self

from layerguard.application.rules._paths import app_name, is_test_path, is_web_app, split_project_path
from layerguard.application.validators._context import BoundaryContext, resolve_context
from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.model.enums import Layer, RuleCategory, RuleFamily, Severity
from layerguard.domain.model.issue import Issue

if TYPE_CHECKING:
    from layerguard.domain.model.configuration import LinterConfig
    from layerguard.domain.model.dependency import DependencyDeclaration
    from layerguard.domain.model.module_ref import ModuleRef
    from layerguard.domain.model.source_unit import SourceUnit
    from layerguard.domain.ports.file_system import ProjectFileSystem

logger = logging.getLogger(__name__)

RULE_ID = "layer_boundary_deps"

_CONSTRAINED = frozenset({Layer.DOMAIN, Layer.APPLICATION, Layer.INFRASTRUCTURE})
_PARAMS = frozenset({"skip_suffixes", "ignored_deps"})


class BoundaryGraphValidator:
    """Validates declared deps of all units against the Dependency Rule.

    Issue policy:
        - Domain: one issue listing every declared dep
        - Application/Infrastructure: one issue per forbidden dep
        - Missing required dep: only when the sibling layer file exists
          and no forbidden dep was reported for the module
    """

    rule_id = RULE_ID
    family = RuleFamily.DEPENDENCY_RULE
    category = RuleCategory.DESIGN

    def __init__(
        self,
        filesystem: ProjectFileSystem,
        *,
        excluded_apps: Iterable[str] = (),
        skip_suffixes: tuple[str, ...] = ("_web", "_tools"),
        ignored_deps: tuple[str, ...] = (),
        severity: Severity = Severity.HIGHER,
        exit_status: int = 2,
    ) -> None:
        """Initialize validator.

        Args:
            filesystem: Existence probe for sibling layer files
            excluded_apps: App names never validated
            skip_suffixes: App-name suffixes of presentation/tools apps
            ignored_deps: Dep module prefixes always allowed (external boundaries)
            severity: Issue severity
            exit_status: Issue exit status
        """
        self._filesystem = filesystem
        self._excluded_apps = frozenset(excluded_apps)
        self._skip_suffixes = skip_suffixes
        self._ignored_deps = ignored_deps
        self._severity = severity
        self._exit_status = exit_status

    @classmethod
    def from_config(cls, config: LinterConfig, filesystem: ProjectFileSystem) -> Self | None:
        """Create from the `layer_boundary_deps` rule configuration.

        Returns:
            Validator, None if disabled

        Raises:
            ConfigurationError: If an option is unknown or malformed
        """
        rule_config = config.rule(RULE_ID)
        if not rule_config.enabled:
            return None
        unknown = set(rule_config.params) - _PARAMS
        if unknown:
            raise ConfigurationError(RULE_ID, f"unknown option {sorted(unknown)[0]!r}")
        options: dict[str, tuple[str, ...]] = {}
        for key in _PARAMS & set(rule_config.params):
            value = rule_config.params[key]
            if isinstance(value, str) or not isinstance(value, (list, tuple)):
                raise ConfigurationError(RULE_ID, f"option {key!r} must be a list of strings")
            options[key] = tuple(str(item) for item in value)
        return cls(
            filesystem,
            excluded_apps=config.excluded_apps,
            severity=rule_config.severity or Severity.HIGHER,
            exit_status=rule_config.exit_status if rule_config.exit_status is not None else 2,
            **options,
        )

    def validate(self, units: Iterable[SourceUnit]) -> tuple[Issue, ...]:
        """Validate every unit carrying a boundary declaration.

        Args:
            units: All units of the run

        Returns:
            Issues in unit order
        """
        issues: list[Issue] = []
        for unit in units:
            if unit.declaration is None or not self._in_scope(unit.path):
                continue
            context = resolve_context(unit, unit.declaration.module)
            if context is None or context.layer not in _CONSTRAINED:
                continue
            issues.extend(self._check(unit, unit.declaration, context))
        logger.debug("boundary graph: %d issue(s)", len(issues))
        return tuple(issues)

    def _in_scope(self, path: str) -> bool:
        if is_test_path(path):
            return False
        app = app_name(path)
        if app is None:
            return True
        return app not in self._excluded_apps and not is_web_app(app, self._skip_suffixes)

    def _exists(self, context: BoundaryContext, filename: str) -> bool:
        """Sibling layer file probe. Unlocated contexts have no known siblings."""
        if not context.located:
            return False
        path = context.sibling(filename)
        try:
            return self._filesystem.exists(path)
        except OSError as e:
            logger.warning("existence probe failed for %s: %s", path, e)
            return False

    def _ignored(self, dep: ModuleRef) -> bool:
        return any(dep.name == prefix or dep.name.startswith(f"{prefix}.") for prefix in self._ignored_deps)

    def _allowed(self, context: BoundaryContext) -> frozenset[ModuleRef]:
        if context.layer is Layer.DOMAIN:
            return frozenset()
        allowed = {context.domain}
        if context.layer is Layer.INFRASTRUCTURE:
            allowed.update(context.applications)
        if not self._exists(context, "domain.ex"):
            allowed.update(context.ancestor_domains())
        return frozenset(allowed)

    def _check(
        self,
        unit: SourceUnit,
        declaration: DependencyDeclaration,
        context: BoundaryContext,
    ) -> list[Issue]:
        deps = [dep for dep in declaration.sorted_deps() if not self._ignored(dep)]
        layer = context.layer.value.capitalize()

        if context.layer is Layer.DOMAIN:
            if not deps:
                return []
            listed = ", ".join(dep.name for dep in deps)
            return [
                self._issue(
                    unit,
                    declaration,
                    f"Domain layer `{context.domain}` must have `deps: []` but has deps: [{listed}]. "
                    "Domain layer cannot depend on any other layers.",
                    "deps",
                )
            ]

        allowed = self._allowed(context)
        forbidden = [dep for dep in deps if dep not in allowed]
        if forbidden:
            expected = ", ".join(sorted(ref.name for ref in allowed)) or "none"
            return [
                self._issue(
                    unit,
                    declaration,
                    f"{layer} layer `{declaration.module}` cannot depend on `{dep}`. "
                    f"Allowed deps: [{expected}]. Dependencies must point inward "
                    "(Infrastructure -> Application -> Domain).",
                    dep.name,
                )
                for dep in forbidden
            ]

        issues: list[Issue] = []
        declared = set(deps)
        if context.domain not in declared and self._exists(context, "domain.ex"):
            issues.append(
                self._issue(
                    unit,
                    declaration,
                    f"{layer} layer must depend on Domain layer. Add `{context.domain}` to deps.",
                    "deps",
                )
            )
        if context.layer is Layer.INFRASTRUCTURE and declared.isdisjoint(context.applications):
            required = self._application_boundary(context)
            if required is not None:
                issues.append(
                    self._issue(
                        unit,
                        declaration,
                        f"Infrastructure layer must depend on Application layer. Add `{required}` to deps.",
                        "deps",
                    )
                )
        return issues

    def _application_boundary(self, context: BoundaryContext) -> ModuleRef | None:
        """Application boundary of context present on disk, None if absent."""
        plain, layered = context.applications
        if self._exists(context, "application_layer.ex"):
            return layered
        # lib/<app>/application.ex is the OTP lifecycle module
        project = split_project_path(context.sibling("application.ex"))
        if project is not None and not project.is_top_level and self._exists(context, "application.ex"):
            return plain
        return None

    def _issue(self, unit: SourceUnit, declaration: DependencyDeclaration, message: str, trigger: str) -> Issue:
        return Issue(
            rule_id=RULE_ID,
            message=message,
            file=unit.path,
            line=declaration.line,
            trigger=trigger,
            severity=self._severity,
            category=self.category,
            family=self.family,
            exit_status=self._exit_status,
        )
