"""Verdict command - combine dimension scores into a viability verdict."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from ..models import ViabilityVerdict
from ..viability import calculate_viability
from . import app, console

_VERDICT_STYLES = {
    "strong": "green",
    "mixed": "yellow",
    "weak": "red",
    "none": "red",
}


def _score_option(name: str):
    return typer.Option(f"--{name}", min=0.0, max=10.0, help=f"{name.capitalize()} score (0-10).")


def _print_verdict(result: ViabilityVerdict) -> None:
    style = _VERDICT_STYLES.get(result.verdict.value, "white")
    header = f"[bold {style}]{result.calibrated_verdict_label or result.verdict_label}[/bold {style}]"
    body = (
        f"{header}\n"
        f"Overall: {result.overall_score:.1f}/10  "
        f"({result.available_dimensions}/{result.total_dimensions} dimensions, "
        f"{result.confidence.value} confidence)\n"
        f"{result.verdict_description}"
    )
    console.print(Panel(body, title="Viability Verdict"))

    if result.dimensions:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Dimension")
        table.add_column("Score", justify="right")
        table.add_column("Weight", justify="right")
        table.add_column("Status")
        for dim in result.dimensions:
            table.add_row(dim.name, f"{dim.score:.1f}", f"{dim.weight:.0%}", dim.status.value)
        console.print(table)

    if result.weakest_dimension:
        console.print(f"[bold]Weakest:[/bold] {result.weakest_dimension.name}")
    for item in result.dealbreakers:
        console.print(f"[red]✗ {item}[/red]")
    for flag in result.red_flags:
        console.print(f"[yellow]! {flag.title}:[/yellow] {flag.message}")
    if result.recommendations:
        console.print("\n[bold]Next steps:[/bold]")
        for i, rec in enumerate(result.recommendations, 1):
            console.print(f"  {i}. {rec}")


@app.command()
def verdict(
    pain: Annotated[float | None, _score_option("pain")] = None,
    market: Annotated[float | None, _score_option("market")] = None,
    competition: Annotated[float | None, _score_option("competition")] = None,
    timing: Annotated[float | None, _score_option("timing")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the verdict as JSON.")] = False,
):
    """Compute a viability verdict from raw dimension scores.

    Omitted dimensions are treated as not analyzed; the remaining weights
    renormalize.
    """
    result = calculate_viability(pain=pain, market=market, competition=competition, timing=timing)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        _print_verdict(result)
