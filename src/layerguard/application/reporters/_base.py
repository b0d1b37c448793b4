"""Base reporter class for output formatting.

Provides default implementation of ReporterProtocol.
Concrete reporters inherit from this.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from layerguard.domain.model.result import LintResult


class BaseReporter(ABC):
    """Base class for reporters implementing ReporterProtocol.

    Concrete reporters must implement the report() method.
    layerguard provides PlainTextReporter, JsonReporter and ConsoleReporter.

    Example:
        class CountReporter(BaseReporter):
            def report(self, result: LintResult) -> None:
                self._output.write(f"{result.issue_count}\\n")
    """

    def __init__(self, output: TextIO | None = None) -> None:
        """Initialize reporter.

        Args:
            output: Output stream (default: sys.stdout)
        """
        self._output = output if output is not None else sys.stdout

    @abstractmethod
    def report(self, result: LintResult) -> None:
        """Report lint result.

        Args:
            result: Ordered issues and exit status
        """
