"""Boundary-crossing rules.

Contexts talk to each other through their public API. Reaching into
another context's policies, queries or schemas, or exposing infrastructure
schemas to the web layer, couples modules across a boundary.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from layerguard.application.rules import _capabilities as cap
from layerguard.application.rules._base import BaseRule
from layerguard.application.rules._paths import (
    camelize,
    is_test_path,
    is_web_app,
    split_project_path,
    underscore,
)
from layerguard.application.rules.delegation_bypass import is_context_module
from layerguard.domain.model.enums import RuleCategory, RuleFamily, Severity
from layerguard.domain.model.syntax import Alias, Call, Directive

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue
    from layerguard.domain.model.module_ref import ModuleRef
    from layerguard.domain.model.rule import RuleContext
    from layerguard.domain.model.source_unit import SourceUnit
    from layerguard.domain.model.syntax import Node


def referenced_modules(node: Node) -> tuple[ModuleRef, ...]:
    """Modules named by an alias directive or a qualified call."""
    match node:
        case Directive(kind="alias", refs=refs):
            return refs
        case Call() if node.module is not None:
            return (node.module,)
    return ()


class _CrossContextAccess(BaseRule):
    """Shared check: `<App>.<OtherContext>.<Marker>.X` referenced from a context."""

    family = RuleFamily.BOUNDARY_CROSSING
    category = RuleCategory.WARNING
    base_severity = Severity.NORMAL
    param_defaults = MappingProxyType({"known_contexts": ()})

    marker: str
    """Namespace segment that marks the protected module kind."""

    kind: str
    """Singular name of the protected module kind, for messages."""

    excluded: tuple[str, ...]

    def applies_to(self, unit: SourceUnit) -> bool:
        path = unit.path
        if path.endswith("_test.exs") or any(part in path for part in self.excluded):
            return False
        project = split_project_path(path)
        if project is None or is_web_app(project.app, ("_web",)):
            return False
        known = self.strings("known_contexts")
        return not known or project.context in known

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        project = split_project_path(ctx.path)
        if project is None:
            return ()
        own = camelize(project.context)
        issues = []
        for ref in referenced_modules(node):
            segments = ref.segments
            if f".{self.marker}." not in f".{ref.name}." or len(segments) < 3:
                continue
            if segments[0] != project.app_module or segments[1] == own or segments[1] == self.marker:
                continue
            issues.append(
                self.issue(
                    ctx,
                    f"Context accesses {self.kind} from different context "
                    f"({own} uses {ref}). Call the public API of {segments[1]} instead.",
                    node.line,
                    ref.name,
                )
            )
        return tuple(issues)


class NoCrossContextPolicyAccess(_CrossContextAccess):
    """Policies are private to their context."""

    id = "no_cross_context_policy_access"
    marker = "Policies"
    kind = "Policy"
    excluded = ("/policies/", "/use_cases/", "/infrastructure/", "/services/")


class NoCrossContextQueryAccess(_CrossContextAccess):
    """Query modules are private to their context."""

    id = "no_cross_context_query_access"
    marker = "Queries"
    kind = "Query"
    excluded = ("/queries", "/use_cases/", "/infrastructure/", "/services/")


class NoCrossContextSchemaAccess(BaseRule):
    """Contexts read foreign schemas through the owning context's API."""

    id = "no_cross_context_schema_access"
    family = RuleFamily.BOUNDARY_CROSSING
    category = RuleCategory.WARNING
    base_severity = Severity.HIGH
    param_defaults = MappingProxyType(
        {
            "schema_contexts": MappingProxyType(
                {
                    "User": "accounts",
                    "Workspace": "workspaces",
                    "WorkspaceMember": "workspaces",
                    "Project": "projects",
                    "Page": "pages",
                    "PageComponent": "pages",
                    "Note": "notes",
                }
            ),
        }
    )
    """schema_contexts: bare schema alias -> owning context directory."""

    _EXCLUDED = ("/queries", "/use_cases/", "/policies/", "/infrastructure/", "/domain/", "/services/")

    def applies_to(self, unit: SourceUnit) -> bool:
        return is_context_module(unit.path, self._EXCLUDED)

    def _owner(self, schema: ModuleRef, app_module: str) -> str | None:
        """Owning context directory of schema, None if unknown."""
        segments = schema.segments
        if len(segments) == 3 and segments[0] == app_module:
            return underscore(segments[1])
        if len(segments) == 1:
            return self.table("schema_contexts").get(segments[0])
        return None

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        if not isinstance(node, Call) or node.function not in cap.REPO_READ_FUNCTIONS:
            return ()
        if node.module is None or not cap.is_repo(node.module):
            return ()
        if not node.args or not isinstance(node.args[0], Alias):
            return ()
        project = split_project_path(ctx.path)
        if project is None:
            return ()
        schema = node.args[0].ref
        owner = self._owner(schema, project.app_module)
        if owner is None or owner == project.context:
            return ()
        return (
            self.issue(
                ctx,
                f"Context accesses schema owned by another context "
                f"({camelize(project.context)} reads {schema} from {camelize(owner)}). "
                f"Use {camelize(owner)}.get_*() public API instead.",
                node.line,
                f"Repo.{node.function}({schema.last}, ...)",
            ),
        )


class NoInfrastructureSchemaInWeb(BaseRule):
    """Web modules work with domain entities, not persistence schemas."""

    id = "no_infrastructure_schema_in_web"
    family = RuleFamily.BOUNDARY_CROSSING
    base_severity = Severity.NORMAL

    _WEB_MARKERS = ("_web/", "/controllers/", "/live/", "/components/")
    _SCHEMA_MARKERS = ("Infrastructure.Schemas", ".Infrastructure.Schema.")

    def applies_to(self, unit: SourceUnit) -> bool:
        path = unit.path
        if not path.endswith(".ex") or is_test_path(path):
            return False
        return any(marker in path for marker in self._WEB_MARKERS)

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        return tuple(
            self.issue(
                ctx,
                f"Web layer references infrastructure schema `{ref}`. "
                "Use domain entities or context functions returning them instead.",
                node.line,
                ref.name,
            )
            for ref in referenced_modules(node)
            if any(marker in f"{ref.name}." for marker in self._SCHEMA_MARKERS)
        )


BOUNDARY_CROSSING_RULES: tuple[type[BaseRule], ...] = (
    NoCrossContextPolicyAccess,
    NoCrossContextQueryAccess,
    NoCrossContextSchemaAccess,
    NoInfrastructureSchemaInWeb,
)
