"""Recommendation composition: the second propagation hop.

    final = user_to_repo . repo_repo

A user's score for repository ``r2`` sums ``s1 * s2`` over every
repository ``r1`` the user scored (``s1``) that is related to ``r2``
(``s2``). Rows are cut to the top ``k``.
"""

from __future__ import annotations

from .logging_config import get_logger
from .models import AffinityMatrix, Row
from .sparse import map_rows, multiply_row, top_k

logger = get_logger(__name__)


def compose(
    user_to_repo: AffinityMatrix,
    repo_to_repo: AffinityMatrix,
    k: int = 100,
    workers: int = 1,
) -> AffinityMatrix:
    """Final user -> repository recommendations, top ``k`` per user.

    A user with no scored repositories gets an empty row.
    """

    def _row(user: int) -> Row:
        return top_k(multiply_row(user_to_repo[user], repo_to_repo), k)

    rows = map_rows(_row, len(user_to_repo), workers)
    matrix = AffinityMatrix(rows=rows, target_count=repo_to_repo.target_count)

    empty = sum(1 for row in matrix if not row)
    logger.debug(
        f"recommendations: {len(matrix)} users, {matrix.nnz} entries, "
        f"{empty} users without recommendations (k={k})"
    )
    return matrix
