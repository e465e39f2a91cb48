"""Event scoring: map an event category to its positive integer weight."""

from typing import Dict, Mapping, Optional

from .exceptions import UnknownCategoryError

# Signal strength per category. Watching is the strongest interest signal.
DEFAULT_WEIGHTS: Dict[str, int] = {
    "WatchEvent": 10,
    "ForkEvent": 6,
    "IssuesEvent": 1,
    "PullRequestEvent": 2,
}


class EventScorer:
    """Fixed category -> weight table.

    Unknown categories raise ``UnknownCategoryError``; they are never
    skipped or default-scored.
    """

    def __init__(self, weights: Optional[Mapping[str, int]] = None):
        self._weights = dict(DEFAULT_WEIGHTS if weights is None else weights)

    @property
    def categories(self) -> frozenset:
        return frozenset(self._weights)

    def weight(self, category: str) -> int:
        try:
            return self._weights[category]
        except KeyError:
            raise UnknownCategoryError(category, known=self._weights) from None

    def __repr__(self) -> str:
        return f"EventScorer({self._weights!r})"


_default_scorer = EventScorer()


def weight(category: str) -> int:
    """Weight of ``category`` in the default table."""
    return _default_scorer.weight(category)
