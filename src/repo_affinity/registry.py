"""Identity registry: dense zero-based indices for users and repositories."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .models import Event


@dataclass
class IdentityRegistry:
    """Bidirectional name <-> index lookup for users and repositories.

    Indices are assigned in order of first appearance. They are stable only
    within a single run and carry no ranking meaning.
    """

    index_to_user: List[str] = field(default_factory=list)
    index_to_repo: List[str] = field(default_factory=list)
    user_index_of: Dict[str, int] = field(default_factory=dict)
    repo_index_of: Dict[str, int] = field(default_factory=dict)

    @property
    def user_count(self) -> int:
        return len(self.index_to_user)

    @property
    def repo_count(self) -> int:
        return len(self.index_to_repo)

    def user_name(self, index: int) -> str:
        return self.index_to_user[index]

    def repo_name(self, index: int) -> str:
        return self.index_to_repo[index]


def assign(events: Iterable[Event]) -> IdentityRegistry:
    """Deduplicate users and repositories and give each a dense index."""
    users: Dict[str, None] = {}
    repos: Dict[str, None] = {}
    for event in events:
        users.setdefault(event.user)
        repos.setdefault(event.repository)

    index_to_user = list(users)
    index_to_repo = list(repos)
    return IdentityRegistry(
        index_to_user=index_to_user,
        index_to_repo=index_to_repo,
        user_index_of={name: i for i, name in enumerate(index_to_user)},
        repo_index_of={name: i for i, name in enumerate(index_to_repo)},
    )
