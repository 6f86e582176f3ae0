"""Analyze command - run the pain pipeline over a records file."""

from __future__ import annotations

import asyncio
import json
from typing import Annotated

import typer
from rich.table import Table

from ..config import get_settings
from ..embeddings import AnchorCache, create_embedding_backend
from ..errors import RecordLoadError
from ..loaders import load_records, load_themes
from ..logging_config import configure_logging, get_logger
from ..pipeline import PainAnalysisResult, run_pain_analysis
from ..praise_filter import PraiseFilter
from . import app, console, err_console


def _result_payload(result: PainAnalysisResult) -> dict:
    return {
        "records_in": result.records_in,
        "signals": len(result.signals),
        "duplicates_removed": result.duplicates_removed,
        "praise_removed": result.praise_removed,
        "summary": result.summary.model_dump(mode="json"),
        "calibrated": result.calibrated.model_dump(mode="json"),
        "themes": [t.model_dump(mode="json") for t in result.themes],
    }


def _print_result(result: PainAnalysisResult) -> None:
    summary = result.summary
    calibrated = result.calibrated

    console.print(
        f"\n[bold]Pain score:[/bold] {calibrated.score:.1f}/10 "
        f"([cyan]{calibrated.confidence.value}[/cyan] confidence)"
    )
    console.print(f"  {calibrated.reasoning}\n")

    table = Table(title="Signal Summary", show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Records", str(result.records_in))
    table.add_row("Signals", str(summary.total_signals))
    table.add_row("Average score", f"{summary.average_score:.2f}")
    table.add_row("High / Medium / Low", f"{summary.high_intensity_count} / {summary.medium_intensity_count} / {summary.low_intensity_count}")
    table.add_row("Solution seeking", str(summary.solution_seeking_count))
    table.add_row("Willingness to pay", str(summary.willingness_to_pay_count))
    table.add_row("Duplicates removed", str(result.duplicates_removed))
    table.add_row("Praise removed", str(result.praise_removed))
    table.add_row("Recency", f"{summary.recency_score:.2f}")
    table.add_row("Velocity", summary.discussion_velocity.trend.value)
    console.print(table)

    if summary.top_sources:
        console.print("[bold]Top sources:[/bold] " + ", ".join(f"{s.name} ({s.count})" for s in summary.top_sources))
    if summary.strongest_signals:
        console.print("[bold]Strongest signals:[/bold] " + ", ".join(summary.strongest_signals))
    for quote in summary.wtp_quotes:
        console.print(f'  [green]WTP[/green] "{quote.text[:120]}" ({quote.source})')

    if result.themes:
        themes_table = Table(title="Theme Resonance", show_header=True, header_style="bold")
        themes_table.add_column("Theme")
        themes_table.add_column("Tier")
        themes_table.add_column("Resonance")
        for theme in result.themes:
            themes_table.add_row(theme.name, theme.tier.value, theme.resonance.value if theme.resonance else "-")
        console.print(themes_table)


@app.command()
def analyze(
    records_path: Annotated[str, typer.Argument(help="JSON file with a list of records.")],
    themes_path: Annotated[
        str | None,
        typer.Option("--themes", "-t", help="JSON file with themes to score for resonance."),
    ] = None,
    no_praise_filter: Annotated[
        bool,
        typer.Option("--no-praise-filter", help="Skip the embedding praise filter."),
    ] = False,
    dedupe: Annotated[
        bool,
        typer.Option("--dedupe", help="Remove near-duplicate texts before aggregation."),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON."),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level: DEBUG, INFO, WARNING, ERROR. Defaults to the log_level setting."),
    ] = None,
    log_json: Annotated[
        bool,
        typer.Option("--log-json", help="Output logs as JSON."),
    ] = False,
):
    """Score records, filter praise and summarize the pain they express."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level, log_json or settings.log_json)
    logger = get_logger(__name__)

    try:
        records = load_records(records_path)
        themes = load_themes(themes_path) if themes_path else []
    except RecordLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    praise_filter = None
    if not no_praise_filter:
        if not settings.openai_api_key:
            err_console.print("[yellow]OPENAI_API_KEY not set; skipping praise filter[/yellow]")
        else:
            praise_filter = PraiseFilter(create_embedding_backend(settings), AnchorCache(), settings)

    logger.info("analyze_started", records=len(records), themes=len(themes), praise_filter=praise_filter is not None)

    result = asyncio.run(
        run_pain_analysis(records, praise_filter=praise_filter, themes=themes, settings=settings, dedupe=dedupe)
    )

    if as_json:
        typer.echo(json.dumps(_result_payload(result), indent=2))
    else:
        _print_result(result)
