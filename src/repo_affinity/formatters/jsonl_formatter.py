"""JSON Lines formatter for recommendation artifacts."""

import json

from .base import BaseFormatter, Ranked


class JsonlFormatter(BaseFormatter):
    """One ``{"user": ..., "recommendations": [[repo, score], ...]}`` object per line."""

    def format_line(self, user: str, ranked: Ranked) -> str:
        data = {"user": user, "recommendations": [[repo, score] for repo, score in ranked]}
        return json.dumps(data, ensure_ascii=False)
