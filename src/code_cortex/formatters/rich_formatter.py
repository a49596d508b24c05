"""Rich terminal formatter for Code Cortex."""

import io
import os
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..walker import AnalysisResult
from .base import BaseFormatter

TOP_FINDINGS = 5
TOP_DUPLICATES = 3


def _percent(part: float, whole: float) -> str:
    return f"{part / whole * 100:.2f}%" if whole else "0.00%"


def _cell(value: Any) -> str:
    """Section values are scalars or ``{value, percentage}`` mappings."""
    if isinstance(value, dict) and "value" in value:
        pct = value.get("percentage")
        return f"{value['value']} ({pct:.2f}%)" if pct else str(value["value"])
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if value is None:
        return "N/A"
    return str(value)


def _score_label(score: int) -> str:
    if score >= 80:
        return f"[green bold]{score}/100[/green bold]"
    elif score >= 60:
        return f"[yellow]{score}/100[/yellow]"
    else:
        return f"[red bold]{score}/100[/red bold]"


def _metric_table(title: str) -> Table:
    table = Table(title=title, title_justify="left", show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="cyan", min_width=40)
    table.add_column("Value", justify="right")
    return table


class RichFormatter(BaseFormatter):
    """Summary, per-driver breakdowns and the Laravel report as rich tables."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, result: AnalysisResult) -> None:
        self._render_to(self.console, result)

    def format(self, result: AnalysisResult) -> str:
        buffer = io.StringIO()
        self._render_to(Console(file=buffer, width=100, color_system=None), result)
        return buffer.getvalue()

    def _render_to(self, console: Console, result: AnalysisResult) -> None:
        self._print_summary(console, result)
        self._print_aggregate(console, result)
        self._print_drivers(console, result)
        if result.enhanced is not None:
            self._print_laravel(console, result.enhanced)
        console.print(f"\n[dim]Analysis completed in {result.stats.duration:.2f}s[/dim]")

    # ── Summary ────────────────────────────────────────────────

    def _print_summary(self, console: Console, result: AnalysisResult) -> None:
        stats = result.stats
        console.print(Panel(f"[bold]{result.root}[/bold]", title="[bold cyan]Code Cortex[/bold cyan]", expand=False))

        table = _metric_table("Summary")
        table.add_row("Directories", str(len(stats.directories)))
        table.add_row("Files", str(stats.total_files))
        table.add_row("  Analyzed", str(stats.analyzed_files))
        table.add_row("  Skipped", str(stats.skipped_files))
        if stats.parse_errors:
            table.add_row("  Parse Errors", f"[yellow]{stats.parse_errors}[/yellow]")
        console.print(table)

        by_driver = _metric_table("Files by Language/Framework")
        for name, metrics in result.driver_metrics.items():
            files = metrics.get("files", 0)
            if files > 0:
                by_driver.add_row(f"  {name}", f"{files} ({_percent(files, stats.analyzed_files)})")
        if by_driver.row_count:
            console.print()
            console.print(by_driver)

    def _print_aggregate(self, console: Console, result: AnalysisResult) -> None:
        m = result.aggregate
        loc = m.get("loc", 0)

        size = _metric_table("Size (Aggregate)")
        size.add_row("  Lines of Code (LOC)", str(loc))
        if loc > 0:
            for label, key in (
                ("  Comment Lines of Code (CLOC)", "cloc"),
                ("  Non-Comment Lines of Code (NCLOC)", "ncloc"),
                ("  Logical Lines of Code (LLOC)", "lloc"),
            ):
                size.add_row(label, f"{m.get(key, 0)} ({_percent(m.get(key, 0), loc)})")
        console.print()
        console.print(size)

        complexity = m.get("complexity", 0)
        if complexity:
            table = _metric_table("Cyclomatic Complexity (Aggregate)")
            table.add_row("  Total Complexity", str(complexity))
            units = m.get("functions", 0) + m.get("methods", 0)
            if units > 0:
                table.add_row("  Average Complexity", f"{complexity / units:.2f}")
            console.print()
            console.print(table)

    # ── Per driver ─────────────────────────────────────────────

    def _print_drivers(self, console: Console, result: AnalysisResult) -> None:
        for driver in result.drivers:
            metrics = result.driver_metrics.get(driver.name)
            if not metrics or metrics.get("files", 0) <= 0:
                continue

            sections = driver.format_metrics(metrics)
            if not sections:
                continue

            console.print()
            console.rule(f"[bold]{driver.name} Metrics[/bold]")
            for title, fields in sections.items():
                table = _metric_table(title)
                for key, value in fields.items():
                    table.add_row(f"  {key}", _cell(value))
                console.print(table)

    # ── Laravel ────────────────────────────────────────────────

    def _print_laravel(self, console: Console, enhanced: Any) -> None:
        console.print()
        console.rule("[bold]Laravel Analysis Report[/bold]")

        info = _metric_table("Project Information")
        info.add_row("  Type", str(enhanced.project_type))
        if enhanced.laravel_version:
            info.add_row("  Laravel Version", enhanced.laravel_version)
        info.add_row("  Code Quality Score", _score_label(enhanced.code_quality_score))
        console.print(info)

        if enhanced.frontend_stack:
            console.print("\n[bold]Frontend Stack[/bold]")
            for tech in enhanced.frontend_stack:
                console.print(f"  - {tech}")

        dead_code = enhanced.dead_code
        if dead_code:
            table = _metric_table("Dead Code Analysis")
            table.add_row("  Unused Classes", str(len(dead_code["unusedClasses"])))
            table.add_row("  Unused Methods", str(len(dead_code["unusedMethods"])))
            table.add_row("  Unused Imports", str(len(dead_code["unusedImports"])))
            table.add_row("  Unused Variables", str(len(dead_code["unusedVariables"])))
            console.print()
            console.print(table)

            classes = dead_code["unusedClasses"]
            if classes:
                console.print("\n  Unused Classes Details:")
                for item in classes[:TOP_FINDINGS]:
                    console.print(f"    - {item['name']} ({os.path.basename(item['file'])}:{item['line']})")
                if len(classes) > TOP_FINDINGS:
                    console.print(f"    ... and {len(classes) - TOP_FINDINGS} more")

        duplicates = enhanced.duplicate_code
        if duplicates:
            console.print("\n[bold]Duplicate Code Analysis[/bold]")
            console.print(f"  Duplicate Blocks Found: {len(duplicates)}")
            for index, duplicate in enumerate(duplicates[:TOP_DUPLICATES], 1):
                first = os.path.basename(duplicate["file1"])
                second = os.path.basename(duplicate["file2"])
                console.print(f"    {index}. {first} <-> {second}")
                if duplicate["similarities"]:
                    similarity = duplicate["similarities"][0]["similarity"]
                    console.print(f"       Similarity: {similarity * 100:.1f}%")

        console.print("\n[bold]Recommendations[/bold]")
        if enhanced.recommendations:
            for index, recommendation in enumerate(enhanced.recommendations, 1):
                console.print(f"  {index}. {recommendation}")
        else:
            console.print("  [green]No major issues found.[/green]")
