"""Check command: validate the event source without computing scores."""

from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from . import app
from ._common import console, resolve_config
from ..exceptions import RepoAffinityError
from ..logging_config import setup_logging
from ..registry import assign
from ..scoring import EventScorer
from ..source import load_events


@app.command()
def check(
    data_dir: Optional[Path] = typer.Argument(
        None,
        help="Directory of event files (default: ./data)",
        file_okay=False,
        dir_okay=True,
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Load and score every event, reporting counts per category."""
    setup_logging(verbose=verbose, quiet=not verbose)

    try:
        settings = resolve_config(data_dir=data_dir, config=config)
        events = load_events(settings.data_path)
        scorer = EventScorer(settings.weights)
        counts: Counter = Counter()
        for event in events:
            scorer.weight(event.category)
            counts[event.category] += 1
        registry = assign(events)
    except RepoAffinityError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Events in {settings.data_dir}", header_style="bold cyan")
    table.add_column("Category")
    table.add_column("Weight", justify="right")
    table.add_column("Events", justify="right")
    for category, n in counts.most_common():
        table.add_row(category, str(scorer.weight(category)), str(n))
    console.print(table)

    console.print(
        f"[green]OK[/green] {len(events)} events, "
        f"{registry.user_count} users, {registry.repo_count} repositories"
    )
