"""Structural-placement rules.

File-location checks: the layer a module belongs to is visible in its path.
Issues point at line 1 and carry the suggested destination. Rules needing
to know about other files probe the injected filesystem.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING

from layerguard.application.rules._base import BaseRule
from layerguard.application.rules._paths import (
    ProjectPath,
    basename,
    camelize,
    dirname,
    is_test_path,
    is_web_app,
    join,
    split_project_path,
)
from layerguard.application.rules.delegation_bypass import is_context_module
from layerguard.domain.model.enums import RuleCategory, RuleFamily, Severity
from layerguard.domain.model.syntax import Atom, Pair

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue
    from layerguard.domain.model.rule import RuleContext
    from layerguard.domain.model.source_unit import SourceUnit


def _context_file(path: str) -> ProjectPath | None:
    """Project path of a non-test file below `lib/<app>/<context>/`."""
    if is_test_path(path) or not path.endswith(".ex"):
        return None
    project = split_project_path(path)
    if project is None or project.is_top_level or is_web_app(project.app, ("_web",)):
        return None
    return project


_LAYER_DIRECTORIES = frozenset({"domain", "application", "infrastructure"})


def relocated(project: ProjectPath, directory: str, filename: str) -> str:
    """`<prefix><context>/<directory>/<filename>`.

    App-level layer directories (`lib/<app>/infrastructure/...`) have no
    context segment.
    """
    context = "" if project.context in _LAYER_DIRECTORIES else project.context
    return f"{project.prefix}{join(context, directory, filename)}"


class _PlacementRule(BaseRule):
    """Shared line-1 issue builder for placement rules."""

    family = RuleFamily.STRUCTURAL_PLACEMENT

    def placement_issue(self, ctx: RuleContext, headline: str, destination: str, trigger: str) -> Issue:
        return self.issue(ctx, f"{headline}\n  Move to: {destination}", 1, trigger)


class ServicesInCorrectLayer(_PlacementRule):
    """Services orchestrate (application), notifiers perform I/O (infrastructure)."""

    id = "services_in_correct_layer"
    base_severity = Severity.HIGH
    param_defaults = MappingProxyType({"exempt_files": ("user_notifier.ex",)})

    def applies_to(self, unit: SourceUnit) -> bool:
        project = _context_file(unit.path)
        if project is None or unit.filename in self.strings("exempt_files"):
            return False
        name = unit.filename
        return name.endswith(("_service.ex", "_notifier.ex")) or "services/" in project.rest

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        project = split_project_path(unit.path)
        if project is None:
            return ()
        name = unit.filename
        headline = (
            "Service/notifier in wrong layer.\n"
            "  Application services (orchestration) -> application/services/\n"
            "  Infrastructure notifiers (I/O) -> infrastructure/notifiers/"
        )
        if name.endswith("_service.ex"):
            if "/application/services/" in unit.path:
                return ()
            destination = relocated(project, "application/services", name)
            return (
                self.placement_issue(ctx, headline, destination, "Application service not in application/services/"),
            )
        if name.endswith("_notifier.ex"):
            if "/infrastructure/notifiers/" in unit.path:
                return ()
            destination = relocated(project, "infrastructure/notifiers", name)
            return (
                self.placement_issue(
                    ctx, headline, destination, "Infrastructure notifier not in infrastructure/notifiers/"
                ),
            )
        if project.parts[1:2] == ("services",):
            service = relocated(project, "application/services", name)
            notifier = relocated(project, "infrastructure/notifiers", name)
            return (
                self.issue(
                    ctx,
                    "Ambiguous service file location. Decide which layer this module belongs to.\n"
                    f"  Orchestration: {service}\n"
                    f"  External I/O: {notifier}",
                    1,
                    "Ambiguous service file location",
                ),
            )
        return ()


class InfrastructureOrganization(_PlacementRule):
    """Infrastructure modules live in per-responsibility subdirectories."""

    id = "infrastructure_organization"
    base_severity = Severity.NORMAL

    _KINDS: tuple[tuple[re.Pattern[str], str, str], ...] = (
        (re.compile(r"_repository\.ex$"), "repositories", "Repository"),
        (re.compile(r"queries?\.ex$"), "queries", "Queries module"),
        (re.compile(r"_notifier\.ex$"), "notifiers", "Notifier"),
        (re.compile(r"_subscriber\.ex$"), "subscribers", "Subscriber"),
    )

    def _kind(self, filename: str) -> tuple[str, str] | None:
        for pattern, directory, label in self._KINDS:
            if pattern.search(filename):
                return directory, label
        return None

    def applies_to(self, unit: SourceUnit) -> bool:
        path = unit.path
        if is_test_path(path) or not path.endswith(".ex"):
            return False
        project = split_project_path(path)
        if project is None or is_web_app(project.app, ("_web",)):
            return False
        return self._kind(unit.filename) is not None

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        project = split_project_path(unit.path)
        kind = self._kind(unit.filename)
        if project is None or kind is None:
            return ()
        directory, label = kind
        if f"/infrastructure/{directory}/{unit.filename}" in unit.path:
            return ()
        destination = relocated(project, f"infrastructure/{directory}", unit.filename)
        return (
            self.placement_issue(
                ctx,
                "Infrastructure file not properly organized. "
                "Group infrastructure modules by responsibility under infrastructure/.",
                destination,
                f"{label} not in infrastructure/{directory}/",
            ),
        )


class UseCasesInApplicationLayer(_PlacementRule):
    """Use cases live in `<context>/application/use_cases/`."""

    id = "use_cases_in_application_layer"
    base_severity = Severity.NORMAL

    def applies_to(self, unit: SourceUnit) -> bool:
        project = _context_file(unit.path)
        return project is not None and "use_cases" in project.parts[:-1]

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        project = split_project_path(unit.path)
        if project is None or "/application/use_cases/" in unit.path:
            return ()
        parts = project.parts
        below = "/".join(parts[parts.index("use_cases") + 1 :])
        return (
            self.placement_issue(
                ctx,
                "Use case not in application layer. Use cases orchestrate domain logic "
                "and belong to the application layer.",
                relocated(project, "application/use_cases", below),
                "Use case not in application/use_cases/",
            ),
        )


class PoliciesInCorrectLayer(_PlacementRule):
    """Policies live in `domain/policies/` (pure rules) or `application/policies/`."""

    id = "policies_in_correct_layer"
    base_severity = Severity.NORMAL

    _ALLOWED = ("/domain/policies/", "/application/policies/")

    def applies_to(self, unit: SourceUnit) -> bool:
        project = _context_file(unit.path)
        if project is None:
            return False
        return unit.filename.endswith("_policy.ex") or "policies" in project.parts[:-1]

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        project = split_project_path(unit.path)
        if project is None or any(allowed in unit.path for allowed in self._ALLOWED):
            return ()
        return (
            self.placement_issue(
                ctx,
                "Policy not in a policies layer directory. Pure business rules belong in "
                "domain/policies/, authorization orchestration in application/policies/.",
                relocated(project, "domain/policies", unit.filename),
                "Policy not in domain/policies/ or application/policies/",
            ),
        )


class MissingQueriesModule(_PlacementRule):
    """Context modules own a Queries module for their Ecto queries."""

    id = "missing_queries_module"
    category = RuleCategory.WARNING
    base_severity = Severity.NORMAL
    param_defaults = MappingProxyType(
        {
            "known_contexts": (),
            "queries_paths": ("{context}/queries.ex", "{context}/infrastructure/queries"),
        }
    )
    """queries_paths: candidates relative to the context module's directory."""

    _EXCLUDED = ("/queries", "/use_cases/", "/policies/", "/infrastructure/", "/services/")

    def applies_to(self, unit: SourceUnit) -> bool:
        if not is_context_module(unit.path, self._EXCLUDED):
            return False
        known = self.strings("known_contexts")
        return not known or unit.filename.removesuffix(".ex") in known

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        context = unit.filename.removesuffix(".ex")
        root = dirname(unit.path)
        candidates = [join(root, template.format(context=context)) for template in ctx.strings("queries_paths")]
        if any(ctx.exists(candidate) for candidate in candidates):
            return ()
        return (
            self.issue(
                ctx,
                f"Context missing Queries module. Create: {candidates[0] if candidates else context}\n"
                f"  defmodule {camelize(context)}.Queries with composable query functions.",
                1,
                camelize(context),
            ),
        )


class ArchitecturalLayersDefined(_PlacementRule):
    """Each app declared in mix.exs defines its layer boundary files."""

    id = "architectural_layers_defined"
    base_severity = Severity.HIGH
    base_exit_status = 2
    param_defaults = MappingProxyType(
        {
            "excluded_apps": (),
            "core_layers": ("domain.ex", "application_layer.ex", "infrastructure_layer.ex"),
            "presentation_layers": ("presentation.ex",),
            "tools_layers": (),
        }
    )

    _LAYER_NAMES = MappingProxyType(
        {
            "domain.ex": "Domain",
            "application_layer.ex": "Application",
            "infrastructure_layer.ex": "Infrastructure",
            "presentation.ex": "Presentation",
        }
    )

    def applies_to(self, unit: SourceUnit) -> bool:
        return basename(unit.path) == "mix.exs"

    @staticmethod
    def _app_type(app: str) -> str:
        if app.endswith("_web"):
            return "presentation"
        if app.endswith("_tools"):
            return "tools"
        return "core"

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        app = next(
            (
                node.value.name
                for node in unit.syntax_tree.nodes()
                if isinstance(node, Pair) and node.key_name == "app" and isinstance(node.value, Atom)
            ),
            None,
        )
        if app is None or app in ctx.strings("excluded_apps"):
            return ()
        app_type = self._app_type(app)
        issues = []
        for filename in ctx.strings(f"{app_type}_layers"):
            relative = f"lib/{app}/{filename}"
            if ctx.exists(join(dirname(unit.path), relative)):
                continue
            layer = self._LAYER_NAMES.get(filename, filename.removesuffix(".ex").replace("_", " ").title())
            issues.append(
                self.issue(
                    ctx,
                    f"Missing {layer} layer definition file `{relative}` for {app_type} app. "
                    f"Create it with `use Boundary` and the layer's allowed deps.",
                    1,
                    filename,
                )
            )
        return tuple(issues)


STRUCTURAL_PLACEMENT_RULES: tuple[type[BaseRule], ...] = (
    ServicesInCorrectLayer,
    InfrastructureOrganization,
    UseCasesInApplicationLayer,
    PoliciesInCorrectLayer,
    MissingQueriesModule,
    ArchitecturalLayersDefined,
)
