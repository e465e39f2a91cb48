"""Core data models: events and sparse affinity matrices."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence, Tuple

# (target index, accumulated score)
Entry = Tuple[int, int]
Row = List[Entry]


@dataclass(frozen=True)
class Event:
    """A single activity event: ``user`` did ``category`` on ``repository``."""

    category: str
    user: str
    repository: str


@dataclass
class AffinityMatrix:
    """Sparse score matrix with a dense outer index.

    Row ``i`` holds the ``(target, score)`` entries of source index ``i``.
    Rows are never mutated once the producing stage has finished.

    Attributes:
        rows: One sparse row per source index
        target_count: Number of valid target indices (columns)
    """

    rows: List[Row] = field(default_factory=list)
    target_count: int = 0

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    @property
    def nnz(self) -> int:
        """Number of stored entries across all rows."""
        return sum(len(row) for row in self.rows)

    def get(self, source: int, target: int) -> int:
        """Score at ``(source, target)``, 0 when the cell is absent."""
        for t, score in self.rows[source]:
            if t == target:
                return score
        return 0

    @classmethod
    def from_dicts(cls, rows: Sequence[Dict[int, int]], target_count: int) -> "AffinityMatrix":
        """Build a matrix from per-row dicts, ordering each row by target index."""
        return cls(rows=[sorted(row.items()) for row in rows], target_count=target_count)
