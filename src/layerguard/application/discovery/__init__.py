"""Source file discovery."""

from layerguard.application.discovery.files import discover_sources, matches, read_sources

__all__ = [
    "discover_sources",
    "matches",
    "read_sources",
]
