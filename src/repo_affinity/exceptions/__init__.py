"""Exception hierarchy for repo-affinity."""

from .base import RepoAffinityError
from .config import ConfigurationError, InvalidConfigError
from .pipeline import (
    DataSourceError,
    LoadError,
    MalformedRecordError,
    OutputError,
    ScoringError,
    UnknownCategoryError,
)

__all__ = [
    "RepoAffinityError",
    "LoadError",
    "DataSourceError",
    "MalformedRecordError",
    "ScoringError",
    "UnknownCategoryError",
    "OutputError",
    "ConfigurationError",
    "InvalidConfigError",
]
