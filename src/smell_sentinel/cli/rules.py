"""List registered rules."""

from rich.table import Table

from ..rules import RULES
from . import app
from ._common import console


@app.command()
def rules() -> None:
    """
    List every rule with its default severity and category.

    Advisory rules are off unless named with [bold]--rules[/bold] or in the
    configuration file. Internal rules are always reported.
    """
    table = Table(title="Rules", expand=False)
    table.add_column("Rule", style="magenta", no_wrap=True)
    table.add_column("Severity", width=8)
    table.add_column("Category", style="cyan")
    table.add_column("Default", width=8)
    table.add_column("Summary")

    for rule in RULES:
        if rule.is_internal:
            default = "[dim]always[/dim]"
        elif rule.enabled_by_default:
            default = "[green]on[/green]"
        else:
            default = "[yellow]off[/yellow]"
        table.add_row(
            rule.rule_id, rule.default_severity.value, rule.category, default, rule.summary
        )

    console.print(table)
