"""Sparse row helpers shared by the propagation stages.

Rows are lists of ``(target, score)`` pairs. Products accumulate into a
plain dict per output row; Python integers do not overflow, so scores of
any magnitude are exact.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Sequence

from .logging_config import get_logger
from .models import AffinityMatrix, Row

logger = get_logger(__name__)

# Below this many rows, sharding costs more than it saves
_MIN_ROWS_PER_SHARD = 64


def top_k(scores: Dict[int, int], k: int) -> Row:
    """The ``k`` highest-scoring entries, descending.

    Equal scores are ordered by ascending target index, so the cutoff
    at ``k`` is deterministic.
    """
    ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:k]


def multiply_row(left: Row, right: AffinityMatrix) -> Dict[int, int]:
    """Row vector ``left`` times sparse matrix ``right``.

    For each ``(mid, s1)`` in ``left`` and each ``(target, s2)`` in
    ``right[mid]``, ``s1 * s2`` is added into ``target``.
    """
    acc: Dict[int, int] = {}
    for mid, s1 in left:
        for target, s2 in right[mid]:
            acc[target] = acc.get(target, 0) + s1 * s2
    return acc


def transpose(matrix: AffinityMatrix) -> AffinityMatrix:
    """Swap sources and targets; each output row is ordered by target index."""
    rows: List[Row] = [[] for _ in range(matrix.target_count)]
    for source, row in enumerate(matrix):
        for target, score in row:
            rows[target].append((source, score))
    return AffinityMatrix(rows=rows, target_count=len(matrix))


def map_rows(fn: Callable[[int], Row], count: int, workers: int = 1) -> List[Row]:
    """Compute ``fn(i)`` for every row index, optionally across threads.

    Rows are independent given fully-built inputs, so shards need no
    synchronization. The result is in row order regardless of ``workers``,
    and the first exception raised by any shard propagates.
    """
    if workers <= 1 or count < 2 * _MIN_ROWS_PER_SHARD:
        return [fn(i) for i in range(count)]

    shard_size = max(_MIN_ROWS_PER_SHARD, -(-count // workers))
    bounds = [(start, min(start + shard_size, count)) for start in range(0, count, shard_size)]
    logger.debug(f"Sharding {count} rows into {len(bounds)} shards over {workers} workers")

    def _run_shard(bound: Sequence[int]) -> List[Row]:
        start, stop = bound
        return [fn(i) for i in range(start, stop)]

    rows: List[Row] = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        for shard in executor.map(_run_shard, bounds):
            rows.extend(shard)
    return rows
