"""CLI subpackage for Pain Verdict.

Provides a modular CLI structure with commands organized by function.
"""

from __future__ import annotations

import typer
from rich.console import Console

# Create main app
app = typer.Typer(
    name="pain-verdict",
    help="Score pain in short texts and combine research dimensions into a viability verdict.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        from .. import __version__

        console.print(f"pain-verdict {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """Pain Verdict - score pain signals and compute viability verdicts."""
    pass


# Import and register command modules
from . import analyze, score, verdict  # noqa: E402, F401
