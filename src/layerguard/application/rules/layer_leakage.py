"""Layer-leakage rules.

Domain entities, policies and services must be pure: no persistence,
HTTP, crypto, clock, environment or file I/O calls. Each rule pairs a file
predicate with the capability calls it flags.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from layerguard.application.rules import _capabilities as cap
from layerguard.application.rules._base import BaseRule
from layerguard.application.rules._paths import is_test_path
from layerguard.domain.model.enums import Layer, RuleCategory, RuleFamily, Severity
from layerguard.domain.model.module_ref import ModuleRef
from layerguard.domain.model.syntax import (
    BinaryOp,
    Call,
    Directive,
    FunctionDef,
    Literal,
)

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue
    from layerguard.domain.model.rule import RuleContext
    from layerguard.domain.model.source_unit import SourceUnit
    from layerguard.domain.model.syntax import Node

_DOMAIN = frozenset({Layer.DOMAIN})

ECTO_QUERY = ModuleRef(("Ecto", "Query"))
ECTO_SCHEMA = ModuleRef(("Ecto", "Schema"))
ECTO_CHANGESET = ModuleRef(("Ecto", "Changeset"))


def _is_domain_entity(unit: SourceUnit) -> bool:
    return "/domain/entities/" in unit.path and unit.path.endswith(".ex") and not is_test_path(unit.path)


def uses_module(unit: SourceUnit, ref: ModuleRef) -> bool:
    """True if unit contains `use <ref>`."""
    return any(
        isinstance(node, Directive) and node.kind == "use" and ref in node.refs
        for node in unit.syntax_tree.nodes()
    )


class NoRepoInDomain(BaseRule):
    """Domain entities must not touch the Repo or build queries."""

    id = "no_repo_in_domain"
    family = RuleFamily.LAYER_LEAKAGE
    category = RuleCategory.WARNING
    base_severity = Severity.HIGH
    layers = _DOMAIN

    def applies_to(self, unit: SourceUnit) -> bool:
        return _is_domain_entity(unit)

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        match node:
            case Directive(kind="import", refs=refs) if ECTO_QUERY in refs:
                trigger = "import Ecto.Query"
                description = "Ecto.Query import in domain entity"
                suggestion = "Move query building to an Infrastructure.Queries module"
            case Call(target=None, function="from"):
                trigger = "from"
                description = "query building with from/2 in domain entity"
                suggestion = "Move it to an Infrastructure.Queries module"
            case Call() if node.module is not None and cap.is_repo(node.module):
                trigger = node.qualified_name
                description = "Repo call in domain entity"
                suggestion = "Move persistence to an application use case"
            case _:
                return ()
        return (
            self.issue(
                ctx,
                f"Domain entity has infrastructure dependency ({description}). "
                "Domain entities hold pure business logic with no Repo or database access. "
                f"{suggestion}. Persistence inside entities makes the domain untestable without a database.",
                node.line,
                trigger,
            ),
        )


class NoSideEffectsInDomain(BaseRule):
    """Domain entities must not hash passwords, use crypto, read env or do file I/O."""

    id = "no_side_effects_in_domain"
    family = RuleFamily.LAYER_LEAKAGE
    category = RuleCategory.WARNING
    base_severity = Severity.HIGH
    layers = _DOMAIN

    _BCRYPT = frozenset({"hash_pwd_salt", "add_hash", "hash_password"})
    _CRYPTO = frozenset({"strong_rand_bytes", "hash", "mac", "sign", "encrypt"})
    _FILE = frozenset({"read", "write", "read!", "write!"})

    def applies_to(self, unit: SourceUnit) -> bool:
        return _is_domain_entity(unit)

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        if not isinstance(node, Call):
            return ()
        if cap.is_module_call(node, "Bcrypt", self._BCRYPT):
            found = ("password hashing", "Extract to an Infrastructure.PasswordHasher service")
        elif cap.is_erlang_call(node, "crypto", self._CRYPTO):
            found = ("cryptographic operation", "Extract to an Infrastructure.TokenGenerator service")
        elif cap.is_module_call(node, "System", frozenset({"get_env"})):
            found = ("environment variable access", "Pass configuration in as a function argument")
        elif cap.is_module_call(node, "File", self._FILE):
            found = ("file I/O", "Extract to an Infrastructure.FileStorage service")
        else:
            return ()
        description, suggestion = found
        return (
            self.issue(
                ctx,
                f"Domain entity performs a side effect ({description} in domain entity). "
                f"Domain entities hold pure business logic. {suggestion}.",
                node.line,
                node.qualified_name,
            ),
        )


class NoInfrastructureInDomainEntities(BaseRule):
    """Domain entities must not alias or call infrastructure modules.

    Repo calls are reported by no_repo_in_domain, so `Repo` is not in the
    default service list.
    """

    id = "no_infrastructure_in_domain_entities"
    family = RuleFamily.LAYER_LEAKAGE
    base_severity = Severity.HIGH
    layers = _DOMAIN
    param_defaults = MappingProxyType(
        {
            "infrastructure_namespaces": (".Infrastructure.", "Infrastructure."),
            "infrastructure_services": (
                "CryptoService",
                "FileSystem",
                "ConfigLoader",
                "LayoutResolver",
                "BuildCache",
                "HttpClient",
                "EmailService",
                "StorageService",
                "CacheService",
                "QueueService",
            ),
        }
    )

    def applies_to(self, unit: SourceUnit) -> bool:
        return _is_domain_entity(unit)

    def _is_infrastructure(self, ref: ModuleRef, ctx: RuleContext) -> bool:
        name = ref.name
        if any(pattern in name for pattern in ctx.strings("infrastructure_namespaces")):
            return True
        return any(name.endswith(service) for service in ctx.strings("infrastructure_services"))

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        match node:
            case Directive(kind="alias", refs=refs):
                return tuple(
                    self._issue(ctx, node.line, f"alias {ref}", "aliasing infrastructure module")
                    for ref in refs
                    if self._is_infrastructure(ref, ctx)
                )
            case Call() if node.module is not None and self._is_infrastructure(node.module, ctx):
                return (self._issue(ctx, node.line, node.qualified_name, "direct infrastructure call"),)
        return ()

    def _issue(self, ctx: RuleContext, line: int, trigger: str, description: str) -> Issue:
        return self.issue(
            ctx,
            f"Domain entity has infrastructure dependency ({description} in domain entity). "
            "Move infrastructure calls to use cases and pass computed values as parameters.",
            line,
            trigger,
        )


class NoEctoInDomainLayer(BaseRule):
    """Domain modules must not define Ecto schemas or changesets."""

    id = "no_ecto_in_domain_layer"
    family = RuleFamily.LAYER_LEAKAGE
    base_severity = Severity.HIGH
    layers = _DOMAIN

    _CHANGESET_FUNCTIONS = frozenset({"cast", "validate_required", "validate_length", "validate_format"})

    def applies_to(self, unit: SourceUnit) -> bool:
        return "/domain/" in unit.path and not is_test_path(unit.path) and not unit.path.endswith("_behaviour.ex")

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        match node:
            case Directive(kind="use", refs=refs) if ECTO_SCHEMA in refs:
                found = ("use Ecto.Schema", "Ecto.Schema in domain layer, move to infrastructure/schemas/")
            case Directive(kind="import" | "alias" as kind, refs=refs) if ECTO_CHANGESET in refs:
                found = (f"{kind} Ecto.Changeset", "Ecto.Changeset in domain layer, use pure validation functions")
            case Call() if cap.is_module_call(node, "Ecto.Changeset", self._CHANGESET_FUNCTIONS):
                found = (node.qualified_name, "Ecto changeset function in domain, use pure validation")
            case Call(target=None, function="schema", args=(Literal(value=str() as table), *_)):
                found = (f'schema "{table}"', "Ecto schema definition in domain, move to infrastructure/schemas/")
            case FunctionDef(kind="def", name="changeset"):
                found = ("def changeset", "changeset function in domain, move to infrastructure/schemas/")
            case _:
                return ()
        trigger, description = found
        return (
            self.issue(
                ctx,
                f"Domain layer contains Ecto dependency ({description}). "
                "Keep Ecto schemas in infrastructure/schemas/ and model domain entities as plain structs.",
                node.line,
                trigger,
            ),
        )


class NoDateTimeNowInDomain(BaseRule):
    """Domain policies, entities and services must not read the clock.

    Clock calls used as injectable defaults are allowed:

        def expired?(token, now \\\\ DateTime.utc_now())
        now = Keyword.get(opts, :now, DateTime.utc_now())
    """

    id = "no_datetime_now_in_domain"
    family = RuleFamily.LAYER_LEAKAGE
    base_severity = Severity.HIGH
    layers = _DOMAIN

    _DIRS = ("/domain/policies/", "/domain/entities/", "/domain/services/")

    def applies_to(self, unit: SourceUnit) -> bool:
        path = unit.path
        return any(d in path for d in self._DIRS) and path.endswith(".ex") and not is_test_path(path)

    def check(self, unit: SourceUnit, ctx: RuleContext) -> tuple[Issue, ...]:
        # Pass 1: clock calls that are injectable defaults
        exempt: set[int] = set()
        for node in unit.syntax_tree.nodes():
            match node:
                case BinaryOp(op="\\\\", right=Call() as default) if cap.is_clock_call(default):
                    exempt.add(id(default))
                case Call(args=(_, _, Call() as default)) if cap.is_module_call(
                    node, "Keyword", frozenset({"get"})
                ) and cap.is_clock_call(default):
                    exempt.add(id(default))

        # Pass 2: everything else
        issues: list[Issue] = []
        for node in unit.syntax_tree.nodes():
            if not isinstance(node, Call) or id(node) in exempt:
                continue
            if (
                cap.is_clock_call(node)
                or cap.is_module_call(node, "System", cap.SYSTEM_CLOCK_FUNCTIONS)
                or cap.is_erlang_call(node, "os", cap.OS_CLOCK_FUNCTIONS)
            ):
                issues.append(
                    self.issue(
                        ctx,
                        f"Non-deterministic time call in domain layer ({node.qualified_name}). "
                        "Domain policies, entities and services must be deterministic. "
                        "Accept the current time as a parameter: "
                        "`def my_function(arg, current_time \\\\ DateTime.utc_now())`.",
                        node.line,
                        node.qualified_name,
                    )
                )
        return tuple(issues)


class NoIoInDomainServices(BaseRule):
    """Domain services must be pure functions without I/O."""

    id = "no_io_in_domain_services"
    family = RuleFamily.LAYER_LEAKAGE
    base_severity = Severity.HIGH
    layers = _DOMAIN

    _REPO = frozenset(
        {"insert", "insert!", "update", "update!", "delete", "delete!", "get", "get!", "get_by", "all", "one",
         "transaction"}
    )
    _PUBSUB = frozenset({"broadcast", "broadcast!", "subscribe", "unsubscribe"})
    _GENSERVER = frozenset({"call", "cast", "start_link"})

    def applies_to(self, unit: SourceUnit) -> bool:
        return "/domain/services/" in unit.path and not is_test_path(unit.path)

    def _describe(self, call: Call) -> str | None:
        ref = call.module
        if ref is None:
            return None
        if cap.is_repo_like(ref) and call.function in self._REPO:
            return "database I/O"
        if cap.is_http_call(call):
            return "HTTP I/O"
        if cap.is_module_call(call, "File", cap.FILE_IO_FUNCTIONS):
            return "file I/O"
        if "PubSub" in ref.name and call.function in self._PUBSUB:
            return "PubSub I/O"
        if cap.is_module_call(call, "System", cap.SYSTEM_COMMANDS):
            return "system call"
        if cap.is_module_call(call, "GenServer", self._GENSERVER):
            return "process I/O"
        return None

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        if not isinstance(node, Call):
            return ()
        description = self._describe(node)
        if description is None:
            return ()
        return (
            self.issue(
                ctx,
                f"Domain service contains I/O operation ({description} in domain service). "
                "Domain services must be pure functions. Let use cases fetch the data "
                "or move the I/O to the infrastructure layer.",
                node.line,
                node.qualified_name,
            ),
        )


class NoEnvInRuntime(BaseRule):
    """Runtime code must read configuration, not environment variables."""

    id = "no_env_in_runtime"
    family = RuleFamily.LAYER_LEAKAGE
    category = RuleCategory.WARNING
    base_severity = Severity.LOW
    param_defaults = MappingProxyType(
        {"allowed_paths": ("config/runtime.exs", "/release.ex", "lib/mix/tasks/")}
    )

    _ENV = frozenset({"get_env", "fetch_env!"})

    def applies_to(self, unit: SourceUnit) -> bool:
        if is_test_path(unit.path):
            return False
        return not any(allowed in unit.path for allowed in self.strings("allowed_paths"))

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        if isinstance(node, Call) and cap.is_module_call(node, "System", self._ENV):
            return (
                self.issue(
                    ctx,
                    f"Runtime environment variable access with {node.qualified_name}. "
                    "Use Application.get_env/3 or Application.compile_env/2 and set "
                    "environment-driven values in config/runtime.exs.",
                    node.line,
                    node.qualified_name,
                ),
            )
        return ()


class NoBusinessLogicInSchemas(BaseRule):
    """Ecto schemas only map data and validate it."""

    id = "no_business_logic_in_schemas"
    family = RuleFamily.LAYER_LEAKAGE
    category = RuleCategory.WARNING
    base_severity = Severity.NORMAL
    param_defaults = MappingProxyType(
        {
            "business_functions": ("generate_slug", "calculate_total", "compute_score", "process_data"),
            "data_access_functions": ("exists?", "slug_exists?", "find", "get", "create", "update", "delete"),
        }
    )

    _SUFFIXES = ("Generator", "Repository", "Service")

    def applies_to(self, unit: SourceUnit) -> bool:
        return not is_test_path(unit.path) and uses_module(unit, ECTO_SCHEMA)

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        match node:
            case FunctionDef(kind="defp", name=name) if name in ctx.strings("business_functions"):
                found = (f"defp {name}", f"business logic function in schema ({name})")
            case Call() if cap.is_module_call(node, "Bcrypt"):
                if node.function == "verify_pass":
                    return ()
                found = (node.qualified_name, "cryptographic operation in schema")
            case Call() if node.module is not None and self._is_service_call(node, ctx):
                found = (node.qualified_name, "call to external service or repository")
            case _:
                return ()
        trigger, description = found
        return (
            self.issue(
                ctx,
                f"Schema contains business logic ({description}). "
                "Ecto schemas handle data mapping and basic validation only. "
                "Move business logic to domain modules or context functions.",
                node.line,
                trigger,
            ),
        )

    def _is_service_call(self, call: Call, ctx: RuleContext) -> bool:
        name = call.module.name if call.module is not None else ""
        if name.endswith(self._SUFFIXES) or "Queries" in name:
            return True
        return call.function in ctx.strings("data_access_functions")


class DomainTestPurity(BaseRule):
    """Domain tests run without the database."""

    id = "domain_test_purity"
    family = RuleFamily.LAYER_LEAKAGE
    category = RuleCategory.WARNING
    base_severity = Severity.HIGH

    def applies_to(self, unit: SourceUnit) -> bool:
        path = unit.path
        if not path.endswith("_test.exs"):
            return False
        return "/policies/" in path or "/services/" in path or (is_test_path(path) and "/domain/" in path)

    def visit(self, node: Node, ctx: RuleContext) -> tuple[Issue, ...]:
        if not isinstance(node, Directive) or node.kind != "use":
            return ()
        return tuple(
            self.issue(
                ctx,
                f"Domain test uses {ref} but should use ExUnit.Case. "
                "Domain tests are pure unit tests with no database access: "
                "replace with `use ExUnit.Case, async: true` and keep DataCase for "
                "infrastructure tests.",
                node.line,
                f"use {ref}",
            )
            for ref in node.refs
            if ref.last == "DataCase"
        )


LAYER_LEAKAGE_RULES: tuple[type[BaseRule], ...] = (
    NoRepoInDomain,
    NoSideEffectsInDomain,
    NoInfrastructureInDomainEntities,
    NoEctoInDomainLayer,
    NoDateTimeNowInDomain,
    NoIoInDomainServices,
    NoEnvInRuntime,
    NoBusinessLogicInSchemas,
    DomainTestPurity,
)

