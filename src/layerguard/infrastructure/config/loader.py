"""TOML configuration loading.

Configuration lives in `[tool.layerguard]` of a `pyproject.toml` or at the
top level of a `layerguard.toml`:

    [tool.layerguard]
    include = ["apps/**/*.ex"]
    min_severity = "normal"
    workers = 4
    excluded_apps = ["my_tools"]

    [tool.layerguard.layers]
    domain = ['\\.Domain\\b', "/domain/"]

    [tool.layerguard.rules.use_case_adoption]
    severity = "low"
    with_clause_threshold = 6

    [tool.layerguard.rules.no_logger_in_domain]
    enabled = false

Every key is validated here; a typo fails the run before any file is read.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path

from layerguard.domain.exceptions.validation import ConfigurationError
from layerguard.domain.model.configuration import DEFAULT_LAYER_PATTERNS, LinterConfig, RuleConfig
from layerguard.domain.model.enums import Layer, Severity

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("layerguard.toml", "pyproject.toml")

_TOP_LEVEL_KEYS = frozenset(
    {"include", "exclude", "layers", "rules", "min_severity", "workers", "excluded_apps"}
)
_RULE_KEYS = frozenset({"enabled", "severity", "exit_status"})


def find_config_file(start: Path) -> Path | None:
    """Walk up from start to the first directory holding a config.

    `layerguard.toml` wins over `pyproject.toml` in the same directory. A
    `pyproject.toml` without a `[tool.layerguard]` table is skipped.

    Returns:
        Path of the config file, None if none found
    """
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.parents):
        for filename in CONFIG_FILENAMES:
            path = candidate / filename
            if not path.is_file():
                continue
            if filename == "pyproject.toml" and "layerguard" not in _read(path).get("tool", {}):
                continue
            return path
    return None


def load_config(path: Path) -> LinterConfig:
    """Load configuration from a TOML file.

    Args:
        path: `pyproject.toml` or `layerguard.toml`

    Returns:
        Validated LinterConfig (defaults for a file without settings)

    Raises:
        ConfigurationError: If the file is unreadable, not TOML, or holds bad values
    """
    document = _read(path)
    if path.name == "pyproject.toml":
        section = document.get("tool", {}).get("layerguard", {})
    else:
        section = document
    logger.debug("loaded configuration from %s", path)
    return config_from_mapping(section)


def discover_config(start: Path) -> LinterConfig:
    """Configuration found above start, defaults if there is none."""
    path = find_config_file(start)
    if path is None:
        logger.debug("no configuration found above %s, using defaults", start)
        return LinterConfig()
    return load_config(path)


def _read(path: Path) -> dict[str, object]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except OSError as e:
        raise ConfigurationError(str(path), f"cannot read: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(str(path), f"invalid TOML: {e}") from e


def config_from_mapping(section: Mapping[str, object]) -> LinterConfig:
    """Build LinterConfig from a parsed `[tool.layerguard]` table.

    Raises:
        ConfigurationError: On unknown keys or malformed values
    """
    if not isinstance(section, Mapping):
        raise ConfigurationError("tool.layerguard", "must be a table")
    unknown = set(section) - _TOP_LEVEL_KEYS
    if unknown:
        raise ConfigurationError("tool.layerguard", f"unknown key {sorted(unknown)[0]!r}")

    defaults = LinterConfig()
    rules_section = section.get("rules", {})
    if not isinstance(rules_section, Mapping):
        raise ConfigurationError("rules", "must be a table")

    return LinterConfig(
        layer_patterns=_layer_patterns(section.get("layers")),
        include=_strings(section, "include", defaults.include),
        exclude=_strings(section, "exclude", defaults.exclude),
        rules={rule_id: _rule_config(rule_id, value) for rule_id, value in rules_section.items()},
        min_severity=_severity("min_severity", section.get("min_severity", defaults.min_severity.name.lower())),
        workers=_integer(section, "workers", defaults.workers),
        excluded_apps=frozenset(_strings(section, "excluded_apps", ())),
    )


def _strings(section: Mapping[str, object], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(key, "must be a list of strings")
    return tuple(value)


def _integer(section: Mapping[str, object], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(key, f"must be an integer, got {value!r}")
    return value


def _severity(subject: str, value: object) -> Severity:
    if not isinstance(value, str):
        raise ConfigurationError(subject, f"must be a severity name, got {value!r}")
    try:
        return Severity.parse(value)
    except ValueError as e:
        raise ConfigurationError(subject, str(e)) from e


def _layer_patterns(value: object) -> tuple[tuple[Layer, tuple[str, ...]], ...]:
    """Replace the pattern groups named in `layers`, keep the default order."""
    if value is None:
        return DEFAULT_LAYER_PATTERNS
    if not isinstance(value, Mapping):
        raise ConfigurationError("layers", "must be a table")

    overrides: dict[Layer, tuple[str, ...]] = {}
    for name, patterns in value.items():
        try:
            layer = Layer(name)
        except ValueError:
            raise ConfigurationError("layers", f"unknown layer {name!r}") from None
        if layer is Layer.UNKNOWN:
            raise ConfigurationError("layers", "the unknown layer is the fallback and takes no patterns")
        overrides[layer] = _strings(value, name, ())

    return tuple((layer, overrides.get(layer, patterns)) for layer, patterns in DEFAULT_LAYER_PATTERNS)


def _rule_config(rule_id: str, value: object) -> RuleConfig:
    if isinstance(value, bool):
        # shorthand: `rule_id = false`
        return RuleConfig(enabled=value)
    if not isinstance(value, Mapping):
        raise ConfigurationError(rule_id, "must be a table or a boolean")

    enabled = value.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigurationError(rule_id, "'enabled' must be a boolean")
    severity = value.get("severity")
    exit_status = value.get("exit_status")
    if exit_status is not None and (isinstance(exit_status, bool) or not isinstance(exit_status, int)):
        raise ConfigurationError(rule_id, "'exit_status' must be an integer")

    return RuleConfig(
        enabled=enabled,
        severity=_severity(f"{rule_id}.severity", severity) if severity is not None else None,
        exit_status=exit_status,
        params={key: item for key, item in value.items() if key not in _RULE_KEYS},
    )
