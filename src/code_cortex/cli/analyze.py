"""Main analysis command."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..analyzers import create_analyzer
from ..exceptions import CodeCortexError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Project root to analyze (default: current directory)",
    ),
    analyzer: Optional[str] = typer.Option(
        None,
        "--analyzer",
        "-a",
        help="Analyzer to use: project | laravel | auto",
        click_type=click.Choice(["project", "laravel", "auto"], case_sensitive=False),
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
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
        help="Also append log records to this file",
        dir_okay=False,
    ),
):
    """
    Walk a project and report metrics per driver.

    [bold cyan]Examples:[/bold cyan]

      code-cortex analyze ./app --analyzer laravel

      code-cortex analyze . --json
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)

    try:
        if not path.exists():
            console.print(f'[red]Error:[/red] Path "{path}" does not exist.')
            raise typer.Exit(1)

        settings = resolve_config(
            config=config,
            analyzer=analyzer.lower() if analyzer else None,
            verbose=verbose,
            quiet=quiet,
        )

        runner = create_analyzer(settings.analyzer, settings, root=path)
        logger.info(f"Using {runner.name} analyzer")
        result = runner.analyze(path)

        get_formatter("json" if json_output else "rich").render(result)

    except typer.Exit:
        raise

    except CodeCortexError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)
