"""Console reporter: LintResult -> rich formatted output."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from itertools import groupby
from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.table import Table

from layerguard.application.reporters._base import BaseReporter
from layerguard.domain.model.enums import Severity

if TYPE_CHECKING:
    from layerguard.domain.model.issue import Issue
    from layerguard.domain.model.result import LintResult

_SEVERITY_STYLE = {
    Severity.LOW: "dim",
    Severity.NORMAL: "yellow",
    Severity.HIGH: "red",
    Severity.HIGHER: "bold red",
}


@dataclass(frozen=True, slots=True)
class ConsoleConfig:
    """Configuration for console reporter.

    Attributes:
        show_messages: Print full remediation messages below each table
        max_issues: Max issues to display. None = unlimited
        width: Console width in columns
    """

    show_messages: bool = False
    max_issues: int | None = None
    width: int = 120

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.max_issues is not None and self.max_issues < 0:
            raise ValueError(f"max_issues must be >= 0, got {self.max_issues}")


class ConsoleReporter(BaseReporter):
    """Console reporter: one rich table per file.

    `render()` returns the formatted string; `report()` writes it to the
    output stream.
    """

    def __init__(self, output: TextIO | None = None, config: ConsoleConfig | None = None) -> None:
        """Initialize reporter.

        Args:
            output: Output stream (default: sys.stdout)
            config: Reporter configuration. Uses defaults if None.
        """
        super().__init__(output)
        self._config = config or ConsoleConfig()

    def report(self, result: LintResult) -> None:
        """Write rich formatted result to the output stream."""
        self._output.write(self.render(result))

    def render(self, result: LintResult) -> str:
        """Format lint result as rich formatted string."""
        output = StringIO()
        console = Console(file=output, force_terminal=True, width=self._config.width)

        issues = result.issues
        if self._config.max_issues is not None:
            issues = issues[: self._config.max_issues]

        self._render_header(console, result)
        for file, file_issues in groupby(issues, key=lambda issue: issue.file):
            self._render_file(console, file, tuple(file_issues))
        if len(issues) < result.issue_count:
            console.print(f"[dim]... {result.issue_count - len(issues)} more issue(s) not shown[/dim]")
        self._render_footer(console, result)

        return output.getvalue()

    def _render_header(self, console: Console, result: LintResult) -> None:
        console.print()
        console.rule("[bold]ARCHITECTURE LINT[/bold]")
        console.print()
        console.print(f"[bold]Files:[/bold] {result.files_checked}  [bold]Issues:[/bold] {result.issue_count}")
        console.print()

    def _render_file(self, console: Console, file: str, issues: tuple[Issue, ...]) -> None:
        table = Table(title=file, title_justify="left", show_lines=False, expand=True)
        table.add_column("Line", justify="right", style="cyan", no_wrap=True)
        table.add_column("Severity", no_wrap=True)
        table.add_column("Rule", no_wrap=True)
        table.add_column("Trigger")

        for issue in issues:
            style = _SEVERITY_STYLE[issue.severity]
            table.add_row(
                str(issue.line),
                f"[{style}]{issue.severity.name.lower()}[/{style}]",
                issue.rule_id,
                issue.trigger,
            )
        console.print(table)

        if self._config.show_messages:
            for issue in issues:
                console.print(f"  {issue.line}: {issue.message}", markup=False, highlight=False)
        console.print()

    def _render_footer(self, console: Console, result: LintResult) -> None:
        if result.passed:
            console.print("[bold green]PASSED[/bold green]")
        else:
            console.print(f"[bold red]FAILED[/bold red] (exit status {result.exit_status})")
