"""Recognized capability calls.

Module and function names that identify persistence, HTTP, crypto, clock,
environment, file and process I/O in Elixir code. Rules combine these with
their own file predicates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from layerguard.domain.model.syntax import Atom, Call

if TYPE_CHECKING:
    from layerguard.domain.model.module_ref import ModuleRef

HTTP_CLIENTS = frozenset({"HTTPoison", "Req", "Finch", "HTTPClient", "Tesla", "Mint"})
HTTP_FUNCTIONS = frozenset({"get", "post", "put", "delete", "patch", "request"})

FILE_IO_FUNCTIONS = frozenset({"read", "read!", "write", "write!", "open", "mkdir", "rm", "rm_rf"})

SYSTEM_COMMANDS = frozenset({"cmd", "shell"})

CLOCK_CALLS = frozenset(
    {
        ("DateTime", "utc_now"),
        ("DateTime", "now"),
        ("DateTime", "now!"),
        ("NaiveDateTime", "utc_now"),
        ("NaiveDateTime", "local_now"),
        ("Date", "utc_today"),
        ("Time", "utc_now"),
    }
)
SYSTEM_CLOCK_FUNCTIONS = frozenset({"system_time", "monotonic_time", "os_time"})
OS_CLOCK_FUNCTIONS = frozenset({"system_time", "timestamp"})

REPO_READ_FUNCTIONS = frozenset({"get", "get!", "get_by", "get_by!", "one", "one!", "preload"})


def is_module_call(call: Call, module: str, functions: frozenset[str] | None = None) -> bool:
    """True for `Module.function(...)` with an exact module name."""
    ref = call.module
    if ref is None or ref.name != module:
        return False
    return functions is None or call.function in functions


def is_erlang_call(call: Call, module: str, functions: frozenset[str]) -> bool:
    """True for `:module.function(...)`."""
    return isinstance(call.target, Atom) and call.target.name == module and call.function in functions


def is_repo(ref: ModuleRef) -> bool:
    """Last segment is `Repo`."""
    return ref.last == "Repo"


def is_repo_like(ref: ModuleRef) -> bool:
    """Name ends with Repo or Repository."""
    return ref.name.endswith("Repo") or ref.name.endswith("Repository")


def is_http_call(call: Call) -> bool:
    """HTTP client request."""
    ref = call.module
    return ref is not None and ref.name in HTTP_CLIENTS and call.function in HTTP_FUNCTIONS


def is_clock_call(call: Call) -> bool:
    """Non-deterministic Elixir clock call (`DateTime.utc_now()` ...)."""
    ref = call.module
    return ref is not None and (ref.name, call.function) in CLOCK_CALLS
