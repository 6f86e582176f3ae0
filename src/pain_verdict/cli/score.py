"""Score command - per-text pain breakdown."""

from __future__ import annotations

import typer
from rich.table import Table

from ..pain_scorer import detect_emotion, score_text
from . import app, console


@app.command()
def score(
    text: str = typer.Argument(..., help="Text to score."),
    engagement: float = typer.Option(1.0, "--engagement", "-e", min=0.0, help="Normalized engagement score."),
):
    """Score a single text for pain and show the breakdown."""
    result = score_text(text, engagement_score=engagement)

    table = Table(title="Pain Score", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Score", f"{result.score:.1f}/10")
    table.add_row("Intensity", result.intensity.value)
    table.add_row("Signals", ", ".join(result.signals) or "-")
    table.add_row(
        "Tier hits",
        f"high={result.high_count} medium={result.medium_count} low={result.low_count} "
        f"solution={result.solution_count}",
    )
    table.add_row("Solution seeking", "yes" if result.solution_seeking else "no")
    table.add_row("WTP confidence", result.wtp_confidence.value)
    table.add_row("WTP exclusion", "yes" if result.has_wtp_exclusion else "no")
    table.add_row("Negative context", "yes" if result.has_negative_context else "no")
    table.add_row("Emotion", detect_emotion(text).value)

    console.print(table)
