"""Event source: read serialized events from a directory of files.

Each file is a stream of JSON objects separated by whitespace (usually one
per line). Every object must carry string ``type``, ``user`` and ``repo``
fields; other fields are ignored. Any unreadable path or malformed record
aborts the load.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator, List, Union

from .exceptions import DataSourceError, MalformedRecordError
from .logging_config import get_logger
from .models import Event

logger = get_logger(__name__)

_decoder = json.JSONDecoder()
_REQUIRED_FIELDS = ("type", "user", "repo")


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _to_event(obj: object, path: Path, record: int) -> Event:
    if not isinstance(obj, dict):
        raise MalformedRecordError(path, record, f"expected an object, got {type(obj).__name__}")
    for key in _REQUIRED_FIELDS:
        value = obj.get(key)
        if not isinstance(value, str):
            raise MalformedRecordError(path, record, f"field {key!r} missing or not a string")
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            # e.g. a lone surrogate escape such as "\ud800"
            raise MalformedRecordError(path, record, f"field {key!r} is not valid UTF-8") from None
    return Event(category=obj["type"], user=obj["user"], repository=obj["repo"])


def parse_events(text: str, path: Path) -> Iterator[Event]:
    """Decode every record in ``text``; ``path`` is only used in errors."""
    pos = _skip_whitespace(text, 0)
    record = 0
    while pos < len(text):
        record += 1
        try:
            obj, pos = _decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            raise MalformedRecordError(path, record, e.msg) from e
        if pos < len(text) and not text[pos].isspace():
            raise MalformedRecordError(path, record, "records must be separated by whitespace")
        yield _to_event(obj, path, record)
        pos = _skip_whitespace(text, pos)


def iter_events(path: Union[str, Path]) -> Iterator[Event]:
    """Yield the events stored in a single file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DataSourceError(path, str(e)) from e
    yield from parse_events(text, path)


def event_files(data_dir: Union[str, Path]) -> List[Path]:
    """Regular, non-hidden files directly inside ``data_dir``, sorted by name."""
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise DataSourceError(data_dir, "not a directory")
    try:
        entries = sorted(data_dir.iterdir())
    except OSError as e:
        raise DataSourceError(data_dir, str(e)) from e
    return [p for p in entries if p.is_file() and not p.name.startswith(".")]


def load_events(data_dir: Union[str, Path]) -> List[Event]:
    """Load every event under ``data_dir``.

    Raises:
        DataSourceError: If the directory or a file cannot be read
        MalformedRecordError: If a record is not a valid event
    """
    events: List[Event] = []
    files = event_files(data_dir)
    for path in files:
        before = len(events)
        events.extend(iter_events(path))
        logger.debug(f"Loaded {len(events) - before} events from {path.name}")

    logger.info(f"Loaded {len(events)} events from {len(files)} files in {data_dir}")
    return events
