"""Boundary-declaration rules.

Per-file checks on the extracted `use Boundary` declaration. Cross-module
dependency validation lives in the boundary graph validator.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING

from layerguard.application.extraction.dependency_extractor import find_boundary_directive
from layerguard.application.rules._base import BaseRule
from layerguard.application.rules._paths import basename, camelize, is_web_app
from layerguard.domain.model.enums import RuleFamily, Severity

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue
    from layerguard.domain.model.rule import RuleContext
    from layerguard.domain.model.source_unit import SourceUnit

_UMBRELLA_ENTRY = re.compile(r"(?:^|/)apps/([^/]+)/lib/([^/]+)\.ex$")
_APP_ENTRY = re.compile(r"(?:^|/)lib/[^/]+\.ex$")


def is_app_entry_module(path: str) -> bool:
    """True for `apps/<app>/lib/<app>.ex` and `lib/<app>.ex`."""
    umbrella = _UMBRELLA_ENTRY.search(path)
    if umbrella is not None:
        return umbrella.group(1) == umbrella.group(2)
    return _APP_ENTRY.search(path) is not None and not path.endswith("_test.ex")


class PublicApiBoundary(BaseRule):
    """An app's public API module is a top-level boundary over its application layer."""

    id = "public_api_boundary"
    family = RuleFamily.DEPENDENCY_RULE
    base_severity = Severity.HIGHER
    base_exit_status = 2
    param_defaults = MappingProxyType(
        {
            "excluded_apps": (),
            "presentation_suffixes": ("_web",),
            "tools_suffixes": ("_tools",),
        }
    )

    def applies_to(self, unit: SourceUnit) -> bool:
        if not is_app_entry_module(unit.path):
            return False
        app = basename(unit.path).removesuffix(".ex")
        if app in self.strings("excluded_apps"):
            return False
        return not is_web_app(app, self.strings("presentation_suffixes") + self.strings("tools_suffixes"))

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        app_module = camelize(unit.filename.removesuffix(".ex"))
        found = find_boundary_directive(unit.syntax_tree)
        if found is None:
            modules = unit.syntax_tree.modules()
            return (
                self.issue(
                    ctx,
                    f"Public API module `{app_module}` must have `use Boundary` declaration "
                    "for architectural enforcement.",
                    modules[0].line if modules else 1,
                    "use Boundary",
                ),
            )

        _, directive = found
        issues: list[Issue] = []
        declaration = unit.declaration
        if declaration is None or "top_level?" not in declaration.options:
            issues.append(
                self.issue(
                    ctx,
                    "Public API module should have `top_level?: true` in Boundary config.",
                    directive.line,
                    "top_level?",
                )
            )
        deps = [dep.name for dep in declaration.sorted_deps()] if declaration else []
        if any("Infrastructure" in dep for dep in deps):
            issues.append(
                self.issue(
                    ctx,
                    "Public API module should not depend on Infrastructure directly. "
                    f"Change deps to `[{app_module}.ApplicationLayer]` instead.",
                    directive.line,
                    "Infrastructure",
                )
            )
        application = (f"{app_module}.ApplicationLayer", f"{app_module}.Application")
        if deps and not any(dep in application or "ApplicationLayer" in dep for dep in deps):
            issues.append(
                self.issue(
                    ctx,
                    "Public API module should depend on ApplicationLayer. "
                    f"Expected `deps: [{app_module}.ApplicationLayer]`.",
                    directive.line,
                    "deps",
                )
            )
        return tuple(issues)


BOUNDARY_DECLARATION_RULES: tuple[type[BaseRule], ...] = (PublicApiBoundary,)
