"""Summary statistics for affinity matrices."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict

import numpy as np

from .models import AffinityMatrix


@dataclass(frozen=True)
class MatrixStats:
    """Shape and density of one affinity matrix."""

    rows: int
    nnz: int
    empty_rows: int
    mean_row_length: float
    median_row_length: float
    max_row_length: int
    max_score: int

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def summarize(matrix: AffinityMatrix) -> MatrixStats:
    """Compute row-length and score statistics for ``matrix``."""
    if len(matrix) == 0:
        return MatrixStats(0, 0, 0, 0.0, 0.0, 0, 0)

    lengths = np.fromiter((len(row) for row in matrix), dtype=np.int64, count=len(matrix))
    # Scores are unbounded Python ints; take the max without a numpy cast
    max_score = max((score for row in matrix for _, score in row), default=0)

    return MatrixStats(
        rows=len(matrix),
        nnz=int(lengths.sum()),
        empty_rows=int(np.count_nonzero(lengths == 0)),
        mean_row_length=float(lengths.mean()),
        median_row_length=float(np.median(lengths)),
        max_row_length=int(lengths.max()),
        max_score=max_score,
    )
