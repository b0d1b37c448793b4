"""pytest plugin for layerguard.

Provides fixtures for architecture linting in tests:
    layerguard_config: Linter configuration (override in conftest.py)
    layerguard_result: LintResult for the project under test

Configuration (pytest.ini or pyproject.toml):
    layerguard_root: Project directory to lint (default: rootdir)

Example:
    from layerguard.presentation.pytest_plugin import assert_clean

    def test_architecture(layerguard_result):
        assert_clean(layerguard_result)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

# Register fixtures from fixtures module
from layerguard.presentation.pytest_plugin.fixtures import (
    assert_clean,
    layerguard_config,
    layerguard_result,
)

if TYPE_CHECKING:
    import pytest

__all__ = [
    "assert_clean",
    "layerguard_config",
    "layerguard_result",
]


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register ini options."""
    parser.addini("layerguard_root", "Project directory linted by layerguard fixtures", default=".")


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest plugin with markers."""
    config.addinivalue_line(
        "markers",
        "architecture: mark test as architecture lint test",
    )
