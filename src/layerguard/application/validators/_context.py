"""Architectural context resolution for boundary modules.

A context is the directory grouping that owns a Domain/Application/
Infrastructure triad. Contexts nest:

    lib/my_app/domain.ex                        -> MyApp
    lib/my_app/notifications/infrastructure.ex  -> MyApp.Notifications
    lib/my_app/documents/notes/domain.ex        -> MyApp.Documents.Notes
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from layerguard.application.rules._paths import app_name, camelize, dirname, split_project_path
from layerguard.domain.model.enums import Layer
from layerguard.domain.model.module_ref import ModuleRef
from layerguard.domain.model.syntax import Directive

if TYPE_CHECKING:
    from layerguard.domain.model.source_unit import SourceUnit

LAYER_SEGMENTS = frozenset({"Domain", "Application", "ApplicationLayer", "Infrastructure"})
LAYER_DIRECTORIES = ("domain", "application", "infrastructure")

BOUNDARY_FILES: dict[str, Layer] = {
    "domain.ex": Layer.DOMAIN,
    "application_layer.ex": Layer.APPLICATION,
    "application.ex": Layer.APPLICATION,
    "infrastructure.ex": Layer.INFRASTRUCTURE,
}

_LIB_DIRECTORY = re.compile(r"(?:^|/)lib/(.+)/[^/]+\.ex$")
_OTP_APPLICATION = ModuleRef(("Application",))


@dataclass(frozen=True, slots=True)
class BoundaryContext:
    """Resolved context of a boundary module.

    Attributes:
        prefix: Context module prefix (`MyApp.Notifications`)
        directory: Context directory on disk, probed for sibling layer files
        layer: Layer the module belongs to
        located: Directory lies below lib/<app>/, so sibling files can be probed
    """

    prefix: ModuleRef
    directory: str
    layer: Layer
    located: bool = True

    @property
    def domain(self) -> ModuleRef:
        """Context's own Domain boundary."""
        return self.prefix.child("Domain")

    @property
    def applications(self) -> tuple[ModuleRef, ModuleRef]:
        """Both accepted names of the context's Application boundary."""
        return self.prefix.child("Application"), self.prefix.child("ApplicationLayer")

    def ancestor_domains(self) -> tuple[ModuleRef, ...]:
        """Domain boundaries of enclosing contexts, nearest first."""
        return tuple(ancestor.child("Domain") for ancestor in self.prefix.ancestors())

    def sibling(self, filename: str) -> str:
        """Path of a layer file next to this context's boundary files."""
        return f"{self.directory}/{filename}" if self.directory else filename


def is_otp_application(unit: SourceUnit) -> bool:
    """True for the OTP lifecycle module.

    That is a module with `use Application`, or `<App>.Application`
    directly in `lib/<app>/`.
    """
    for node in unit.syntax_tree.nodes():
        if isinstance(node, Directive) and node.kind == "use" and node.base == _OTP_APPLICATION:
            return True
    project = split_project_path(unit.path)
    if project is None or not project.is_top_level:
        return False
    module = unit.declaration.module if unit.declaration is not None else unit.module_name
    return module == ModuleRef((project.app_module, "Application"))


def boundary_layer(unit: SourceUnit) -> Layer:
    """Layer from the boundary file name first, then the classified layer.

    `application.ex` holding the OTP lifecycle module keeps its classified layer.
    """
    if unit.filename == "application.ex" and is_otp_application(unit):
        return unit.layer
    return BOUNDARY_FILES.get(unit.filename, unit.layer)


def path_prefix(path: str) -> ModuleRef | None:
    """Context prefix derived from the directories below lib/.

    Layer directories and everything below them are not part of the
    context. The app module is not repeated when the directory path
    already starts with the app name.
    """
    app = app_name(path)
    if app is None:
        return None
    app_module = camelize(app)
    match = _LIB_DIRECTORY.search(path)
    if match is None:
        return ModuleRef.try_parse(app_module)

    parts: list[str] = []
    for part in match.group(1).split("/"):
        if part in LAYER_DIRECTORIES:
            break
        parts.append(camelize(part))
    if parts and parts[0] == app_module:
        parts = parts[1:]
    return ModuleRef.try_parse(".".join([app_module, *parts]))


def context_directory(path: str) -> str:
    """Path before the first layer directory, else the file's directory."""
    indexes = [index for directory in LAYER_DIRECTORIES if (index := path.find(f"/{directory}/")) >= 0]
    if indexes:
        return path[: min(indexes)]
    return dirname(path)


def resolve_context(unit: SourceUnit, module: ModuleRef) -> BoundaryContext | None:
    """Context of a declared boundary module.

    The module-name segments before the first layer segment form the
    prefix; names without a layer segment fall back to the path.

    Returns:
        Context, None when no prefix can be derived
    """
    prefix: ModuleRef | None = None
    for index, segment in enumerate(module.segments):
        if segment in LAYER_SEGMENTS:
            if index > 0:
                prefix = ModuleRef(module.segments[:index])
            break
    if prefix is None:
        prefix = path_prefix(unit.path)
    if prefix is None:
        return None
    return BoundaryContext(
        prefix=prefix,
        directory=context_directory(unit.path),
        layer=boundary_layer(unit),
        located=split_project_path(unit.path) is not None,
    )
