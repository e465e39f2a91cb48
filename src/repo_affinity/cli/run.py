"""Run command: compute and write recommendations."""

from pathlib import Path
from typing import Optional

import typer

from . import app
from ._common import console, resolve_config, stats_table
from ..exceptions import RepoAffinityError
from ..logging_config import setup_logging
from ..pipeline import run_pipeline


@app.command()
def run(
    data_dir: Optional[Path] = typer.Argument(
        None,
        help="Directory of event files (default: ./data)",
        file_okay=False,
        dir_okay=True,
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o",
        help="Path of the recommendation artifact (default: ./output)",
    ),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f",
        help="Artifact format: tsv or jsonl",
    ),
    min_rating: Optional[int] = typer.Option(
        None, "--min-rating",
        help="Minimum aggregated user/repository score to keep",
        min=0,
    ),
    max_rel: Optional[int] = typer.Option(
        None, "--max-rel",
        help="Maximum entries kept per row after each truncation",
        min=1,
    ),
    affinity_mode: Optional[str] = typer.Option(
        None, "--affinity-mode",
        help="Repository affinity formulation: joined or transpose",
    ),
    exclude_self: Optional[bool] = typer.Option(
        None, "--exclude-self/--include-self",
        help="Drop a repository's affinity with itself",
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w",
        help="Threads used for row propagation",
        min=1,
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
    show_stats: bool = typer.Option(
        False, "--stats",
        help="Print per-matrix statistics after the run",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Append logs to this file"),
):
    """Compute recommendations for every user and write the artifact."""
    setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)

    try:
        settings = resolve_config(
            data_dir=data_dir,
            config=config,
            output=str(output) if output is not None else None,
            output_format=output_format,
            min_user_rating=min_rating,
            max_rel_repo=max_rel,
            affinity_mode=affinity_mode,
            exclude_self_affinity=exclude_self,
            workers=workers,
            verbose=verbose,
            quiet=quiet,
        )

        if quiet:
            result = run_pipeline(settings)
        else:
            with console.status("[bold cyan]Starting...[/bold cyan]") as status:
                result = run_pipeline(
                    settings,
                    on_stage=lambda name: status.update(f"[bold cyan]{name}...[/bold cyan]"),
                )
    except RepoAffinityError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not quiet:
        users = result.registry.user_count
        with_recs = users - result.stats["final"].empty_rows
        console.print(
            f"[green]Wrote recommendations to {result.output}[/green] "
            f"({with_recs}/{users} users with recommendations, "
            f"{result.registry.repo_count} repositories)"
        )
    if show_stats:
        console.print(stats_table(result.stats))
