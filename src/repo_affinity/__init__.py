"""
repo-affinity - Repository recommendations from GitHub activity events.

Events are folded into sparse user -> repository scores, propagated into
repository -> repository affinity through shared users, and propagated
once more into a ranked top-K recommendation list per user.
"""

__version__ = "0.1.0"

from .config import RecommenderConfig, load_config
from .models import AffinityMatrix, Event
from .pipeline import RecommendationResult, recommend, run_pipeline
from .registry import IdentityRegistry

__all__ = [
    "run_pipeline",  # Full run: load, compute, write
    "recommend",  # In-memory computation
    "load_config",
    "RecommenderConfig",
    "RecommendationResult",
    "Event",
    "AffinityMatrix",
    "IdentityRegistry",
]
