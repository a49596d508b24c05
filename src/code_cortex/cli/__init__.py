"""CLI entry point — registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="code-cortex",
    help="Code Cortex - Driver-based code metrics for PHP, JavaScript and Laravel projects",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Analyze a codebase with hierarchical file-type drivers.

    [bold cyan]Examples:[/bold cyan]

      code-cortex analyze ./src

      code-cortex analyze . --analyzer laravel

      code-cortex analyze . --json

      code-cortex drivers
    """
    if version:
        console.print(f"[bold cyan]Code Cortex[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .drivers import analyzers as _analyzers, drivers as _drivers, hierarchy as _hierarchy  # noqa: F401, E402


def main(args: Optional[list] = None) -> None:
    app(args=args)
