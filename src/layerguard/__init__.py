"""layerguard - architecture linter for layered Elixir umbrella projects."""

__version__ = "0.1.0"

from layerguard.application.services import LintEngine
from layerguard.domain.model.configuration import LinterConfig, RuleConfig
from layerguard.presentation.runner import lint_project

__all__ = ["LintEngine", "LinterConfig", "RuleConfig", "lint_project", "__version__"]
