"""Configuration discovery and loading."""

from layerguard.infrastructure.config.loader import (
    config_from_mapping,
    discover_config,
    find_config_file,
    load_config,
)

__all__ = [
    "config_from_mapping",
    "discover_config",
    "find_config_file",
    "load_config",
]
