"""
Logging for recommendation runs.

Every module logs under the ``repo_affinity`` namespace. The pipeline
reports one INFO line per stage (loading, indexing, aggregation,
propagation, composition, writing) plus matrix sizes, and per-file and
per-shard detail at DEBUG. Records go to stderr through a rich handler,
so stdout stays free for the CLI summary and the artifact is never mixed
with log output.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "repo_affinity"

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
    # quiet wins: a scripted run asked for errors only
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.INFO


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route repo_affinity logs to stderr, and optionally to a file.

    Called once per CLI invocation. Existing root handlers are replaced,
    so repeated invocations in one process (tests) do not stack handlers.

    Args:
        verbose: Show per-file and per-shard DEBUG detail, with source paths
            and locals in tracebacks
        quiet: Only report errors
        log_file: Append plain-text records to this file as well

    Returns:
        The ``repo_affinity`` logger
    """
    level = _level(verbose, quiet)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # Event names and paths are data, not rich markup
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger for a repo_affinity module.

    Args:
        name: Usually ``__name__``; names outside the package are nested
              under ``repo_affinity`` so one level setting covers them.
              If None, returns the root repo_affinity logger.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
