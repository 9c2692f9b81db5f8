"""Rich terminal formatter."""

from io import StringIO
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import AnalysisResult, Severity
from .base import BaseFormatter

_SEVERITY_STYLE = {
    Severity.ERROR: "red bold",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


def _severity_label(severity: Severity) -> str:
    style = _SEVERITY_STYLE[severity]
    return f"[{style}]{severity.value}[/{style}]"


class RichFormatter(BaseFormatter):
    """Summary panel followed by a table of findings."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, result: AnalysisResult) -> None:
        self._print(self.console, result)

    def format(self, result: AnalysisResult) -> str:
        buffer = StringIO()
        self._print(Console(file=buffer, force_terminal=False, width=120), result)
        return buffer.getvalue()

    # -- private helpers --

    def _print(self, console: Console, result: AnalysisResult) -> None:
        console.print(self._summary(result))
        console.print()
        if not result.findings:
            console.print("[green]No code smells found.[/green]")
            return

        table = Table(title="Findings", expand=True)
        table.add_column("Location", style="yellow", no_wrap=True)
        table.add_column("Severity", width=8)
        table.add_column("Rule", style="magenta", no_wrap=True)
        table.add_column("Message", ratio=3)

        for finding in result.findings:
            loc = finding.location
            message = escape(finding.message)
            if finding.suggested_fix:
                message += f"\n[dim]-> {escape(finding.suggested_fix)}[/dim]"
            table.add_row(
                escape(f"{loc.file}:{loc.line}"),
                _severity_label(finding.severity),
                finding.rule_id,
                message,
            )
        console.print(table)

    def _summary(self, result: AnalysisResult) -> Panel:
        counts = result.counts_by_severity()
        text = (
            f"Analyzed [bold]{result.files_analyzed}[/bold] files "
            f"([red]{result.files_failed}[/red] failed)  |  "
            f"{_severity_label(Severity.ERROR)} {counts['error']}  "
            f"{_severity_label(Severity.WARNING)} {counts['warning']}  "
            f"{_severity_label(Severity.INFO)} {counts['info']}"
        )
        if result.cancelled:
            text += "  |  [yellow]interrupted, results are partial[/yellow]"
        by_rule = sorted(result.counts_by_rule().items())
        if by_rule:
            text += "\n" + "  ".join(
                f"[magenta]{escape(rule)}[/magenta] {count}" for rule, count in by_rule
            )
        return Panel(text, title="[bold cyan]Summary[/bold cyan]", expand=False)
