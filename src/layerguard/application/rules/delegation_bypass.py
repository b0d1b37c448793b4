"""Delegation-bypass rules.

Use cases and context modules orchestrate: raw data access, file I/O and
transaction plumbing belong to narrower infrastructure modules that are
injected or delegated to.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from types import MappingProxyType
from typing import TYPE_CHECKING

from layerguard.application.rules import _capabilities as cap
from layerguard.application.rules._base import BaseRule
from layerguard.application.rules._paths import camelize, is_test_path, is_web_app, split_project_path
from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.model.enums import Layer, RuleCategory, RuleFamily, Severity
from layerguard.domain.model.syntax import (
    Call,
    Directive,
    Fn,
    FunctionDef,
    With,
    children,
    walk_all,
)

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue
    from layerguard.domain.model.module_ref import ModuleRef
    from layerguard.domain.model.rule import RuleContext
    from layerguard.domain.model.source_unit import SourceUnit
    from layerguard.domain.model.syntax import Node

_APPLICATION = frozenset({Layer.APPLICATION})


def _is_use_case(unit: SourceUnit) -> bool:
    return "/application/use_cases/" in unit.path and not is_test_path(unit.path)


def is_context_module(path: str, excluded: tuple[str, ...], web_suffixes: tuple[str, ...] = ("_web",)) -> bool:
    """True for a top-level context module `lib/<app>/<context>.ex`."""
    if path.endswith("_test.exs") or not path.endswith(".ex") or any(part in path for part in excluded):
        return False
    project = split_project_path(path)
    if project is None or is_web_app(project.app, web_suffixes):
        return False
    return project.is_top_level


class NoDirectRepoInUseCases(BaseRule):
    """Use cases delegate persistence to repository modules."""

    id = "no_direct_repo_in_use_cases"
    family = RuleFamily.DELEGATION_BYPASS
    base_severity = Severity.HIGH
    layers = _APPLICATION

    _REPO = frozenset(
        {
            "insert", "insert!", "update", "update!", "delete", "delete!", "get", "get!",
            "get_by", "get_by!", "all", "one", "one!", "preload", "transaction",
        }
    )

    def applies_to(self, unit: SourceUnit) -> bool:
        return _is_use_case(unit)

    @staticmethod
    def _is_repo(ref: ModuleRef) -> bool:
        return ref.name == "Repo" or ref.name.endswith(".Repo")

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        match node:
            case Directive(kind="alias", refs=refs):
                found = [(f"alias {ref}", "direct Repo alias in use case") for ref in refs if self._is_repo(ref)]
            case Call() if node.module is not None and self._is_repo(node.module) and node.function in self._REPO:
                found = [(node.qualified_name, "direct Repo call in use case")]
            case _:
                return ()
        return tuple(
            self.issue(
                ctx,
                f"Use case contains direct Repo usage ({description}). "
                "The application layer must not depend on the Repo. Delegate to a repository "
                "module (e.g. UserRepository.insert_user/1) to keep boundaries testable.",
                node.line,
                trigger,
            )
            for trigger, description in found
        )


class NoDirectFileOperationsInUseCases(BaseRule):
    """Use cases receive an injectable file system instead of calling File/Path."""

    id = "no_direct_file_operations_in_use_cases"
    family = RuleFamily.DELEGATION_BYPASS
    base_severity = Severity.HIGH
    layers = _APPLICATION

    _FILE = frozenset(
        {
            "exists?", "dir?", "regular?", "read", "read!", "write", "write!", "mkdir", "mkdir!",
            "mkdir_p", "mkdir_p!", "rm", "rm!", "rm_rf", "rm_rf!", "cp", "cp!", "cp_r", "cp_r!",
            "ls", "ls!", "stat", "stat!", "rename", "rename!", "open", "close",
        }
    )
    _PATH = frozenset({"wildcard"})

    def applies_to(self, unit: SourceUnit) -> bool:
        return _is_use_case(unit) and unit.path.endswith(".ex")

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        if not isinstance(node, Call):
            return ()
        if cap.is_module_call(node, "File", self._FILE):
            suggestion = "Inject a file_system dependency via opts"
        elif cap.is_module_call(node, "Path", self._PATH):
            suggestion = "Use file_system.wildcard/1 instead"
        else:
            return ()
        return (
            self.issue(
                ctx,
                f"Use case contains direct file operation (direct {node.qualified_name} call). "
                f"{suggestion}. Example: fs = Keyword.get(opts, :file_system, FileSystem); "
                f"fs.{node.function}(...)",
                node.line,
                node.qualified_name,
            ),
        )


class NoInfrastructureAliasInApplication(BaseRule):
    """Application modules inject infrastructure instead of aliasing it."""

    id = "no_infrastructure_alias_in_application"
    family = RuleFamily.DELEGATION_BYPASS
    base_severity = Severity.HIGH
    base_exit_status = 2
    param_defaults = MappingProxyType(
        {
            "infrastructure_patterns": ("Infrastructure", "Infra"),
            "application_patterns": ("Application", "UseCases", "UseCase"),
        }
    )

    def applies_to(self, unit: SourceUnit) -> bool:
        path = unit.path.lower()
        if "/lib/" not in f"/{path}" or "/test/" in path:
            return False
        return any(pattern.lower() in path for pattern in self.strings("application_patterns"))

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        if not isinstance(node, Directive) or node.kind != "alias":
            return ()
        patterns = ctx.strings("infrastructure_patterns")
        return tuple(
            self.issue(
                ctx,
                f"Application layer aliases infrastructure module `{ref}`. "
                "Use dependency injection instead: define a behaviour, inject it via opts "
                "and resolve the default through Application config.",
                node.line,
                ref.name,
            )
            for ref in node.refs
            if any(pattern in ref.name for pattern in patterns)
        )


class ApplicationLayerInfrastructureDependency(BaseRule):
    """Application modules delegate HTTP, file and system I/O to infrastructure."""

    id = "application_layer_infrastructure_dependency"
    family = RuleFamily.DELEGATION_BYPASS
    base_severity = Severity.HIGH
    layers = _APPLICATION

    def applies_to(self, unit: SourceUnit) -> bool:
        path = unit.path
        return "/application/" in path and "/application/policies/" not in path and not is_test_path(path)

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        if not isinstance(node, Call):
            return ()
        if cap.is_http_call(node):
            description = "HTTP client call"
        elif cap.is_module_call(node, "File", cap.FILE_IO_FUNCTIONS):
            description = "file I/O"
        elif cap.is_module_call(node, "System", cap.SYSTEM_COMMANDS):
            description = "system call"
        else:
            return ()
        return (
            self.issue(
                ctx,
                f"Application layer contains I/O operation ({description} in application layer). "
                "I/O belongs in infrastructure/services/; the application layer orchestrates "
                "domain logic and calls injected infrastructure dependencies.",
                node.line,
                node.qualified_name,
            ),
        )


class UseCaseAdoption(BaseRule):
    """Context modules delegate complex orchestration to use cases."""

    id = "use_case_adoption"
    family = RuleFamily.DELEGATION_BYPASS
    category = RuleCategory.WARNING
    base_severity = Severity.NORMAL
    param_defaults = MappingProxyType({"with_clause_threshold": 5})

    _EXCLUDED = ("/use_cases/", "/queries", "/policies/", "/infrastructure/", "/domain/")
    _NEW = frozenset({"new"})

    def validate_params(self) -> None:
        threshold = self.params["with_clause_threshold"]
        if not isinstance(threshold, int) or threshold < 1:
            raise ConfigurationError(self.id, f"with_clause_threshold must be >= 1, got {threshold}")

    def applies_to(self, unit: SourceUnit) -> bool:
        return is_context_module(unit.path, self._EXCLUDED)

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        match node:
            case Call(args=()) if cap.is_module_call(node, "Multi", self._NEW) or cap.is_module_call(
                node, "Ecto.Multi", self._NEW
            ):
                found = ("Multi.new()", "Ecto.Multi transaction")
            case Call(function="transaction", args=(Fn(),)) if node.module is not None and cap.is_repo(node.module):
                found = ("Repo.transaction", "transaction block with multiple operations")
            case With() if node.match_clause_count >= ctx.integer("with_clause_threshold"):
                count = node.match_clause_count
                found = (f"with ({count} clauses)", f"complex with statement with {count} operations")
            case _:
                return ()
        trigger, description = found
        return (
            self.issue(
                ctx,
                f"Complex orchestration logic detected ({description}). "
                "Extract it to a use case, e.g. [Context].UseCases.CreateOperation, "
                "and keep context functions thin.",
                node.line,
                trigger,
            ),
        )


class NoInlineQueriesInContexts(BaseRule):
    """Context modules use Queries modules instead of inline Ecto queries."""

    id = "no_inline_queries_in_contexts"
    family = RuleFamily.DELEGATION_BYPASS
    category = RuleCategory.WARNING
    base_severity = Severity.NORMAL
    param_defaults = MappingProxyType({"known_contexts": ()})
    """known_contexts: context names to check. Empty = every context."""

    _EXCLUDED = ("/queries", "/use_cases/", "/policies/", "/infrastructure/", "/services/")
    _QUERY_FUNCTIONS = frozenset({"from", "fragment"})

    def applies_to(self, unit: SourceUnit) -> bool:
        if not is_context_module(unit.path, self._EXCLUDED):
            return False
        known = self.strings("known_contexts")
        project = split_project_path(unit.path)
        return not known or (project is not None and project.context in known)

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        if not isinstance(node, Call) or node.target is not None or node.function not in self._QUERY_FUNCTIONS:
            return ()
        project = split_project_path(ctx.path)
        context = camelize(project.context) if project else "Context"
        description = "inline Ecto query with from(...)" if node.function == "from" else "SQL fragment in context"
        return (
            self.issue(
                ctx,
                f"Context contains inline Ecto query ({description}). "
                f"Extract it to a query object: {context}.Queries.",
                node.line,
                node.function,
            ),
        )


def _walk_outside(nodes: tuple[Node, ...], skip: Callable[[Node], bool]) -> Iterator[Node]:
    """Pre-order walk that does not descend into nodes matching skip."""
    stack = list(reversed(nodes))
    while stack:
        current = stack.pop()
        if skip(current):
            continue
        yield current
        stack.extend(reversed(children(current)))


class UseCaseConsistentInjection(BaseRule):
    """Private use case helpers receive infrastructure through opts."""

    id = "use_case_consistent_injection"
    family = RuleFamily.DELEGATION_BYPASS
    base_severity = Severity.HIGH
    base_exit_status = 2
    param_defaults = MappingProxyType({"infrastructure_patterns": ("Infrastructure", "Infra")})

    _KEYWORD_GET = frozenset({"get"})

    def applies_to(self, unit: SourceUnit) -> bool:
        path = unit.path
        in_use_cases = "/application/use_cases/" in path or "/Application/UseCases/" in path
        return in_use_cases and path.endswith(".ex") and not is_test_path(path)

    def _is_keyword_get(self, node: Node) -> bool:
        return isinstance(node, Call) and cap.is_module_call(node, "Keyword", self._KEYWORD_GET)

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        patterns = ctx.strings("infrastructure_patterns")
        issues: list[Issue] = []
        for definition in unit.syntax_tree.nodes():
            if not isinstance(definition, FunctionDef) or not definition.is_private:
                continue
            if definition.name.startswith("default_"):
                continue
            for node in _walk_outside(definition.body, self._is_keyword_get):
                ref = node.module if isinstance(node, Call) else None
                if ref is None or not any(pattern in ref.name for pattern in patterns):
                    continue
                issues.append(
                    self.issue(
                        ctx,
                        f"Direct infrastructure call to `{ref}` in private function. "
                        "Resolve the dependency from opts in the public entry point and pass it down. "
                        f"Example: dep = Keyword.get(opts, :dep, {ref})",
                        node.line,
                        ref.name,
                    )
                )
        return tuple(issues)


class NoBroadcastInTransaction(BaseRule):
    """Broadcasts happen after the transaction commits.

    Scoped traversal: locate `Repo.transaction(fn -> ... end)`, then walk
    only the closure body for notification calls. A broadcast placed after
    the transaction call is not reported.
    """

    id = "no_broadcast_in_transaction"
    family = RuleFamily.DELEGATION_BYPASS
    category = RuleCategory.WARNING
    base_severity = Severity.HIGH

    _TRANSACTION = frozenset({"transaction", "transact"})
    _PUBSUB = frozenset({"broadcast", "broadcast_from"})

    def _transaction_body(self, node: Node) -> Fn | None:
        match node:
            case Call(args=(Fn() as body, *_)) if (
                node.module is not None and cap.is_repo(node.module) and node.function in self._TRANSACTION
            ):
                return body
        return None

    def _broadcast_trigger(self, node: Node) -> str | None:
        if not isinstance(node, Call):
            return None
        if cap.is_module_call(node, "Phoenix.PubSub", self._PUBSUB):
            return node.qualified_name
        if node.function.startswith("broadcast_"):
            return node.function
        return None

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        issues: list[Issue] = []
        reported: set[int] = set()
        for node in unit.syntax_tree.nodes():
            body = self._transaction_body(node)
            if body is None:
                continue
            for clause in body.clauses:
                for inner in walk_all(clause.body):
                    trigger = self._broadcast_trigger(inner)
                    if trigger is None or id(inner) in reported:
                        continue
                    reported.add(id(inner))
                    issues.append(
                        self.issue(
                            ctx,
                            f"Found '{trigger}' inside transaction (line {node.line}). "
                            "Broadcasts must happen after the transaction commits to avoid "
                            "notifying about rolled-back data. Move the broadcast after the "
                            "Repo.transaction/transact block.",
                            inner.line,
                            trigger,
                        )
                    )
        return tuple(issues)


DELEGATION_BYPASS_RULES: tuple[type[BaseRule], ...] = (
    NoDirectRepoInUseCases,
    NoDirectFileOperationsInUseCases,
    NoInfrastructureAliasInApplication,
    ApplicationLayerInfrastructureDependency,
    UseCaseAdoption,
    NoInlineQueriesInContexts,
    UseCaseConsistentInjection,
    NoBroadcastInTransaction,
)
