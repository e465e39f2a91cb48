"""Base formatter interface for recommendation artifacts."""

from abc import ABC, abstractmethod
from typing import Iterator, List, Tuple

from ..models import AffinityMatrix
from ..registry import IdentityRegistry

# (repository name, score), best first
Ranked = List[Tuple[str, int]]


class BaseFormatter(ABC):
    """Renders one line per user, in registry index order."""

    @abstractmethod
    def format_line(self, user: str, ranked: Ranked) -> str:
        """Return the line (without newline) for one user."""

    def lines(self, final: AffinityMatrix, registry: IdentityRegistry) -> Iterator[str]:
        for user, row in enumerate(final):
            ranked = [(registry.repo_name(repo), score) for repo, score in row]
            yield self.format_line(registry.user_name(user), ranked)

    def format(self, final: AffinityMatrix, registry: IdentityRegistry) -> str:
        return "".join(f"{line}\n" for line in self.lines(final, registry))
