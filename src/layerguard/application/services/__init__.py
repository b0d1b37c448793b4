"""Application services.

- LintEngine: per-file pipeline, barrier, graph validation
- IssueReporter: deterministic ordering and exit status
"""

from layerguard.application.services.engine import LintEngine
from layerguard.application.services.issue_reporter import IssueReporter

__all__ = [
    "IssueReporter",
    "LintEngine",
]
