"""Affinity aggregation: fold weighted events into sparse score matrices.

The same event stream is aggregated twice, once per direction:

    USER_TO_REPO: row = user index, column = repository index
    REPO_TO_USER: row = repository index, column = user index

Raw sums of the two directions are transposes of each other. After
accumulation every entry below ``min_rating`` is dropped (never clamped).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional

from .logging_config import get_logger
from .models import AffinityMatrix, Event
from .registry import IdentityRegistry
from .scoring import EventScorer

logger = get_logger(__name__)


class Direction(Enum):
    """Which side of an event becomes the matrix row."""

    USER_TO_REPO = "user_to_repo"
    REPO_TO_USER = "repo_to_user"


def accumulate(
    events: Iterable[Event],
    registry: IdentityRegistry,
    direction: Direction,
    scorer: Optional[EventScorer] = None,
) -> List[Dict[int, int]]:
    """Sum event weights per ``(source, target)`` cell, without any threshold.

    Raises:
        UnknownCategoryError: If an event's category has no weight.
        KeyError: If an event names a user or repository the registry lacks.
    """
    scorer = scorer or EventScorer()
    user_index = registry.user_index_of
    repo_index = registry.repo_index_of

    if direction is Direction.USER_TO_REPO:
        sums: List[Dict[int, int]] = [{} for _ in range(registry.user_count)]
        for event in events:
            row = sums[user_index[event.user]]
            target = repo_index[event.repository]
            row[target] = row.get(target, 0) + scorer.weight(event.category)
    else:
        sums = [{} for _ in range(registry.repo_count)]
        for event in events:
            row = sums[repo_index[event.repository]]
            target = user_index[event.user]
            row[target] = row.get(target, 0) + scorer.weight(event.category)

    return sums


def prune(sums: List[Dict[int, int]], min_rating: int, target_count: int) -> AffinityMatrix:
    """Keep only entries whose accumulated score is at least ``min_rating``."""
    rows = [{t: s for t, s in row.items() if s >= min_rating} for row in sums]
    return AffinityMatrix.from_dicts(rows, target_count=target_count)


def aggregate(
    events: Iterable[Event],
    registry: IdentityRegistry,
    direction: Direction,
    min_rating: int = 10,
    scorer: Optional[EventScorer] = None,
) -> AffinityMatrix:
    """Aggregate events into a thresholded affinity matrix for ``direction``."""
    sums = accumulate(events, registry, direction, scorer)
    if direction is Direction.USER_TO_REPO:
        target_count = registry.repo_count
    else:
        target_count = registry.user_count

    matrix = prune(sums, min_rating, target_count)

    raw = sum(len(row) for row in sums)
    logger.debug(
        f"{direction.value}: {len(matrix)} rows, {raw} raw cells, "
        f"{matrix.nnz} kept at min_rating={min_rating}"
    )
    return matrix
