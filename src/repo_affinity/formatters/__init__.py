"""Output formatters for recommendation artifacts."""

from .base import BaseFormatter
from .jsonl_formatter import JsonlFormatter
from .tsv_formatter import TsvFormatter


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "tsv", "jsonl"

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "tsv": TsvFormatter,
        "jsonl": JsonlFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "TsvFormatter",
    "JsonlFormatter",
    "get_formatter",
]
