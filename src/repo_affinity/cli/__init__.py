"""CLI entry point — registers all subcommands."""

import typer

app = typer.Typer(
    name="repo-affinity",
    help="repo-affinity - Repository recommendations from GitHub activity events",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .run import run as _run  # noqa: F401, E402
from .check import check as _check  # noqa: F401, E402


def main() -> None:
    app()
