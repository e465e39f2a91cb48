"""Co-occurrence propagation: repository -> repository affinity.

Two repositories are related when the same user scored both. The affinity
of ``(r1, r2)`` is the sum over shared users ``u`` of
``repo_to_user[r1][u] * user_to_repo[u][r2]``, i.e. the sparse product

    repo_repo = repo_to_user . user_to_repo

Each row is then cut to its ``k`` strongest entries. No minimum score is
applied here; the aggregation threshold already pruned both input legs.
"""

from __future__ import annotations

from typing import Optional

from .logging_config import get_logger
from .models import AffinityMatrix, Row
from .sparse import map_rows, multiply_row, top_k, transpose

logger = get_logger(__name__)


def propagate(
    repo_to_user: AffinityMatrix,
    user_to_repo: AffinityMatrix,
    repo_count: int,
    k: int = 100,
    exclude_self: bool = False,
    workers: int = 1,
) -> AffinityMatrix:
    """Repository -> repository affinity truncated to the top ``k`` per row.

    Args:
        repo_to_user: Thresholded repository -> user scores
        user_to_repo: Thresholded user -> repository scores
        repo_count: Number of repositories (rows of the result)
        k: Maximum entries kept per row
        exclude_self: Drop the ``(r, r)`` cell of every row before ranking
        workers: Threads used to shard rows
    """

    def _row(r1: int) -> Row:
        if r1 >= len(repo_to_user):
            return []
        scores = multiply_row(repo_to_user[r1], user_to_repo)
        if exclude_self:
            scores.pop(r1, None)
        return top_k(scores, k)

    rows = map_rows(_row, repo_count, workers)
    matrix = AffinityMatrix(rows=rows, target_count=repo_count)
    logger.debug(f"repo_to_repo: {len(matrix)} rows, {matrix.nnz} entries (k={k})")
    return matrix


def propagate_transpose(
    user_to_repo: AffinityMatrix,
    repo_count: Optional[int] = None,
    k: int = 100,
    exclude_self: bool = False,
    workers: int = 1,
) -> AffinityMatrix:
    """Single-matrix variant: ``(user_to_repo)^T . user_to_repo``.

    With the same threshold on both directions the thresholded repo -> user
    matrix is exactly the transpose of user -> repo, so this gives the same
    scores as ``propagate`` without aggregating the events a second time.
    """
    if repo_count is None:
        repo_count = user_to_repo.target_count
    return propagate(
        transpose(user_to_repo),
        user_to_repo,
        repo_count,
        k=k,
        exclude_self=exclude_self,
        workers=workers,
    )
