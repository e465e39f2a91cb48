"""Shared CLI helpers."""

from pathlib import Path
from typing import Dict, Optional

from rich.console import Console
from rich.table import Table

from ..config import RecommenderConfig, load_config
from ..stats import MatrixStats

console = Console()


def resolve_config(
    data_dir: Optional[Path] = None,
    config: Optional[Path] = None,
    **overrides,
) -> RecommenderConfig:
    """Build the run configuration from CLI options."""
    if data_dir is not None:
        overrides["data_dir"] = str(data_dir)
    return load_config(config_file=config, **overrides)


def stats_table(stats: Dict[str, MatrixStats]) -> Table:
    """Render per-matrix statistics as a rich table."""
    table = Table(title="Matrix statistics", show_header=True, header_style="bold cyan")
    table.add_column("Matrix")
    table.add_column("Rows", justify="right")
    table.add_column("Entries", justify="right")
    table.add_column("Empty rows", justify="right")
    table.add_column("Mean row", justify="right")
    table.add_column("Median row", justify="right")
    table.add_column("Max row", justify="right")
    table.add_column("Max score", justify="right")

    for name, s in stats.items():
        table.add_row(
            name,
            str(s.rows),
            str(s.nnz),
            str(s.empty_rows),
            f"{s.mean_row_length:.1f}",
            f"{s.median_row_length:.1f}",
            str(s.max_row_length),
            str(s.max_score),
        )
    return table
