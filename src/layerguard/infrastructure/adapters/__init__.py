"""Infrastructure adapters for external interfaces."""

from layerguard.infrastructure.adapters.cached_parser import CachedSourceParser
from layerguard.infrastructure.adapters.elixir_parser import ElixirSourceParser
from layerguard.infrastructure.adapters.local_file_system import LocalFileSystem
from layerguard.infrastructure.adapters.memory_file_system import MemoryFileSystem

__all__ = [
    "CachedSourceParser",
    "ElixirSourceParser",
    "LocalFileSystem",
    "MemoryFileSystem",
]
