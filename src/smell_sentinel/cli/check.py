"""Main analysis command."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..engine import AnalysisEngine
from ..exceptions import SentinelError
from ..file_ops import safe_write_file
from ..formatters import get_formatter
from ..logging_config import setup_logging
from ..models import EXIT_INTERRUPTED, EXIT_USAGE, Severity
from . import app
from ._common import ReportFormat, console, err_console, resolve_config


@app.command()
def check(
    paths: List[Path] = typer.Argument(
        ...,
        help="Java files or directories to analyze",
    ),
    rules: Optional[str] = typer.Option(
        None,
        "-r",
        "--rules",
        help="Comma-separated rule ids to report (default: all non-advisory rules)",
    ),
    min_severity: Optional[Severity] = typer.Option(
        None,
        "-s",
        "--min-severity",
        help="Exit 1 only for findings at or above this severity",
        case_sensitive=False,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel workers (default: CPU count, at most 8)",
        min=1,
        max=64,
    ),
    output_format: Optional[ReportFormat] = typer.Option(
        None,
        "-f",
        "--format",
        help="Output format",
        case_sensitive=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Write the report to a file instead of the terminal",
        file_okay=True,
        dir_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append the run log (INFO and above) to this file",
        file_okay=True,
        dir_okay=False,
    ),
):
    """
    Analyze Java sources for code smells.

    Exit status is 0 when nothing reaches the minimum severity, 1 when
    something does, 2 when the run cannot start and 130 when interrupted.

    [bold cyan]Examples:[/bold cyan]

      smell-sentinel check src/main/java

      smell-sentinel check . --format json --output report.json

      smell-sentinel check Foo.java --rules flag-parameter,nullable-return
    """
    try:
        logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    except OSError as e:
        err_console.print(
            f"[red]Error:[/red] cannot open log file {escape(str(log_file))}: {e.strerror}"
        )
        raise typer.Exit(EXIT_USAGE)

    try:
        settings = resolve_config(
            config=config,
            rules=rules,
            min_severity=min_severity.value if min_severity else None,
            workers=workers,
            output_format=output_format.value if output_format else None,
        )
        engine = AnalysisEngine(settings)
        result = engine.run(paths)

        formatter = get_formatter(settings.output_format)
        if output is not None:
            safe_write_file(output, formatter.format(result))
            console.print(f"[green]Report written to {escape(str(output))}[/green]")
        else:
            formatter.render(result)

        if result.cancelled:
            err_console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(result.exit_code(settings.min_severity))

    except typer.Exit:
        raise

    except SentinelError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_USAGE)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        err_console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(EXIT_INTERRUPTED)
