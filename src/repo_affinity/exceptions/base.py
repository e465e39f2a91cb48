"""Root of the repo-affinity error hierarchy.

Every failure a run can hit (unreadable event source, malformed record,
unknown event category, unwritable artifact, bad configuration) is raised
as a subclass of ``RepoAffinityError``. The CLI catches this one type and
prints ``str(error)`` as the diagnostic, so the ``details`` mapping is what
an operator sees next to the message, e.g.::

    Malformed event record #3 in data/part-000.json (path=..., record=3, reason=...)
"""

from typing import Dict, Optional


class RepoAffinityError(Exception):
    """Base exception for all repo-affinity errors.

    Attributes:
        message: One-line description of what failed
        details: Context such as the offending path, record or category,
            rendered as ``key=value`` pairs after the message
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
