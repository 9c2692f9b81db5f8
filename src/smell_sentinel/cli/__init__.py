"""CLI entry point: registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="smell-sentinel",
    help="smell-sentinel - Static code-smell detection for Java sources",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _show_version(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]smell-sentinel[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def _root(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=_show_version,
        is_eager=True,
    ),
) -> None:
    """Detect nullable returns, flag parameters, loop-invariant call chains
    and incomplete setter-based construction in Java code."""


def main() -> None:
    app()


# Import subcommands to register them
from .check import check as _check  # noqa: F401, E402
from .rules import rules as _rules  # noqa: F401, E402
