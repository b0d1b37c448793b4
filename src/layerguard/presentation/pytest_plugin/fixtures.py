"""pytest fixtures for architecture linting.

User overrides layerguard_config in their conftest.py.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from layerguard.domain.exceptions.violation import BoundaryViolationError
from layerguard.domain.model.configuration import LinterConfig
from layerguard.domain.model.result import LintResult
from layerguard.infrastructure.config import discover_config
from layerguard.presentation.runner import lint_project


def _get_ini_value(config: pytest.Config, name: str, default: str) -> str:
    """Get ini value from pytest config with fallback."""
    value = config.getini(name)
    if value:
        return str(value)
    return default


def project_root(config: pytest.Config) -> Path:
    """Directory to lint: `layerguard_root` relative to the pytest rootdir."""
    root_dir = Path(str(getattr(config, "rootpath", ".")))
    return root_dir / _get_ini_value(config, "layerguard_root", ".")


@pytest.fixture(scope="session")
def layerguard_config(request: pytest.FixtureRequest) -> LinterConfig:
    """Configuration discovered above the project root.

    Override this fixture in conftest.py to configure rules in code.

    Returns:
        LinterConfig from `layerguard.toml`/`pyproject.toml`, defaults if absent
    """
    return discover_config(project_root(request.config))


@pytest.fixture(scope="session")
def layerguard_result(request: pytest.FixtureRequest, layerguard_config: LinterConfig) -> LintResult:
    """Lint result for the configured project root.

    Raises:
        FileNotFoundError: If layerguard_root does not exist
    """
    root = project_root(request.config)
    if not root.is_dir():
        raise FileNotFoundError(
            f"layerguard_root '{root}' does not exist. Configure layerguard_root in pytest.ini or pyproject.toml."
        )
    return lint_project(root, layerguard_config)


def assert_clean(result: LintResult) -> None:
    """Assert that no issue affects the exit status.

    Raises:
        BoundaryViolationError: With every reported issue if the run failed
    """
    if not result.passed:
        raise BoundaryViolationError(result.issues)
