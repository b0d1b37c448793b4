"""Path helpers for Elixir project layouts.

Supported layouts:
    lib/<app>/<context>/...                 single app
    apps/<umbrella_app>/lib/<app>/...       umbrella app

The "context" of a file is the first directory below `lib/<app>/`; for a
top-level context module (`lib/<app>/accounts.ex`) it is the file stem.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_LIB = re.compile(r"(?:^|/)lib/([^/]+)/(.+)$")
_UMBRELLA = re.compile(r"(?:^|/)apps/([^/]+)/lib/")
_UNDERSCORE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@dataclass(frozen=True, slots=True)
class ProjectPath:
    """Decomposed `lib/<app>/<rest>` path.

    Attributes:
        prefix: Everything up to and including `lib/<app>/`
        app: OTP app directory under lib/
        rest: Remainder below the app directory
    """

    prefix: str
    app: str
    rest: str

    @property
    def parts(self) -> tuple[str, ...]:
        """Components of rest."""
        return tuple(self.rest.split("/"))

    @property
    def is_top_level(self) -> bool:
        """True for files directly inside lib/<app>/."""
        return "/" not in self.rest

    @property
    def context(self) -> str:
        """First directory below the app, file stem for top-level files."""
        first = self.parts[0]
        return first[: -len(".ex")] if first.endswith(".ex") else first

    @property
    def app_module(self) -> str:
        """Camelized app name (`my_app` -> `MyApp`)."""
        return camelize(self.app)


def split_project_path(path: str) -> ProjectPath | None:
    """Locate `lib/<app>/` in path.

    Returns:
        ProjectPath, None if path is not below a lib/<app>/ directory
    """
    match = _LIB.search(path)
    if match is None:
        return None
    return ProjectPath(prefix=path[: match.start(2)], app=match.group(1), rest=match.group(2))


def umbrella_app(path: str) -> str | None:
    """Umbrella app name for `apps/<name>/lib/...` paths."""
    match = _UMBRELLA.search(path)
    return match.group(1) if match else None


def app_name(path: str) -> str | None:
    """App owning path: umbrella app first, then lib/<app>/."""
    umbrella = umbrella_app(path)
    if umbrella is not None:
        return umbrella
    project = split_project_path(path)
    return project.app if project else None


def is_test_path(path: str) -> bool:
    """True for test sources."""
    return path.startswith("test/") or "/test/" in path


def is_web_app(app: str, suffixes: tuple[str, ...]) -> bool:
    """True if app name ends with one of suffixes."""
    return any(app.endswith(suffix) for suffix in suffixes)


def basename(path: str) -> str:
    """Last path component."""
    return path.rsplit("/", 1)[-1]


def dirname(path: str) -> str:
    """Path without last component, "" for bare names."""
    return path.rsplit("/", 1)[0] if "/" in path else ""


def join(*parts: str) -> str:
    """Join non-empty parts with forward slashes."""
    return "/".join(part.strip("/") for part in parts if part)


def camelize(name: str) -> str:
    """snake_case to CamelCase (`workspace_members` -> `WorkspaceMembers`)."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def underscore(name: str) -> str:
    """CamelCase to snake_case (`WorkspaceMembers` -> `workspace_members`)."""
    return _UNDERSCORE_BOUNDARY.sub("_", name).lower()
