"""Tab-separated formatter: ``user<TAB>[("repo", score), ...]``."""

import json

from .base import BaseFormatter, Ranked

# The user column must not contain the field or line separators
_USER_ESCAPES = str.maketrans({"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"})


def escape_user(name: str) -> str:
    """Backslash-escape separators so a user name always fits one field."""
    return name.translate(_USER_ESCAPES)


class TsvFormatter(BaseFormatter):
    """User name, a tab, then the ranked list as quoted tuples."""

    def format_line(self, user: str, ranked: Ranked) -> str:
        pairs = ", ".join(f"({json.dumps(repo, ensure_ascii=False)}, {score})" for repo, score in ranked)
        return f"{escape_user(user)}\t[{pairs}]"
