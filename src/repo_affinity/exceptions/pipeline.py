"""Pipeline exceptions: loading events, scoring them, writing the artifact."""

from pathlib import Path
from typing import Iterable, Optional

from .base import RepoAffinityError


class LoadError(RepoAffinityError):
    """Base class for errors raised while reading the event source."""

    pass


class DataSourceError(LoadError):
    """Raised when the data directory or one of its files cannot be read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot read event source: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class MalformedRecordError(LoadError):
    """Raised when a record does not decode to a ``{type, user, repo}`` event."""

    def __init__(self, path: Path, record: int, reason: str):
        super().__init__(
            f"Malformed event record #{record} in {path}",
            details={"path": str(path), "record": str(record), "reason": reason},
        )
        self.path = path
        self.record = record
        self.reason = reason


class ScoringError(RepoAffinityError):
    """Base class for event scoring errors."""

    pass


class UnknownCategoryError(ScoringError):
    """Raised for an event category outside the weight table.

    This is a data-contract violation with the event source and is always
    fatal: events are never dropped or given a default weight.
    """

    def __init__(self, category: str, known: Optional[Iterable[str]] = None):
        details = {"category": category}
        if known is not None:
            details["known"] = ", ".join(sorted(known))
        super().__init__(f"Unknown event category: {category!r}", details=details)
        self.category = category


class OutputError(RepoAffinityError):
    """Raised when the recommendation artifact cannot be created or written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot write recommendations: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
