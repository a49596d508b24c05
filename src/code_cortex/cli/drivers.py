"""Introspection commands: drivers, hierarchy, analyzers."""

from typing import Dict, List

import typer
from rich.table import Table
from rich.tree import Tree

from ..analyzers import ANALYZERS
from ..drivers import Driver
from ..registry import default_registry, laravel_registry
from . import app
from ._common import console


@app.command()
def drivers(
    laravel: bool = typer.Option(
        False,
        "--laravel",
        help="Include drivers only active in Laravel mode",
    ),
):
    """List drivers in resolution order (highest priority first)."""
    registry = laravel_registry() if laravel else default_registry()

    table = Table(title="Available Drivers (sorted by priority)", title_justify="left")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Driver", style="bold cyan")
    table.add_column("Extends")
    table.add_column("Priority", justify="right")
    table.add_column("Extensions")
    table.add_column("Patterns")

    for index, driver in enumerate(registry, 1):
        table.add_row(
            str(index),
            driver.name,
            driver.extends or "-",
            str(driver.priority),
            ", ".join(sorted(driver.extensions)) or "N/A",
            ", ".join(p.pattern for p in driver.include_patterns) or "-",
        )

    console.print(table)


@app.command()
def hierarchy():
    """Show how drivers specialize one another."""
    children: Dict[str, List[Driver]] = {}
    roots: List[Driver] = []
    for driver in sorted(laravel_registry(), key=lambda d: (d.priority, d.name)):
        if driver.extends is None:
            roots.append(driver)
        else:
            children.setdefault(driver.extends, []).append(driver)

    tree = Tree("[bold]Drivers[/bold]")

    def add(node: Tree, driver: Driver) -> None:
        branch = node.add(f"[cyan]{driver.name}[/cyan] [dim](priority {driver.priority})[/dim]")
        for child in children.get(driver.name, []):
            add(branch, child)

    for root in roots:
        add(tree, root)

    console.print(tree)
    console.print(
        "\nA specialized driver runs every layer of its base before its own, so its "
        "records contain all of the base's metrics. Higher priority drivers are matched first."
    )


@app.command()
def analyzers():
    """Describe the available analyzers."""
    table = Table(title="Available Analyzers", title_justify="left")
    table.add_column("Name", style="bold cyan")
    table.add_column("Description")

    for name, analyzer_class in ANALYZERS.items():
        table.add_row(name, analyzer_class.description)
    table.add_row("auto", "Pick laravel or project by inspecting the target directory")

    console.print(table)
