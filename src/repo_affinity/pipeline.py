"""Pipeline — the top-level orchestrator for a recommendation run.

Stages run strictly in sequence; each one finishes its output matrix
before the next starts:
    1. Load events from the data directory
    2. Assign dense user / repository indices
    3. Aggregate user -> repo (and repo -> user) scores, thresholded
    4. Propagate repo -> repo affinity, top-K per row
    5. Compose final user -> repo recommendations, top-K per row
    6. Write the artifact

Usage:
    from repo_affinity.pipeline import run_pipeline
    from repo_affinity.config import load_config

    result = run_pipeline(load_config(data_dir="./data"))
    print(result.stats["final"].nnz)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

from .aggregation import Direction, aggregate
from .composition import compose
from .config import RecommenderConfig
from .logging_config import get_logger
from .models import AffinityMatrix, Event
from .propagation import propagate, propagate_transpose
from .registry import IdentityRegistry, assign
from .scoring import EventScorer
from .sink import write_recommendations
from .source import load_events
from .stats import MatrixStats, summarize

logger = get_logger(__name__)

StageCallback = Callable[[str], None]


@dataclass
class AggregatedScores:
    """Output of stages 2-3: everything later stages need from the events."""

    registry: IdentityRegistry
    user_to_repo: AffinityMatrix
    repo_to_user: Optional[AffinityMatrix] = None


@dataclass
class RecommendationResult:
    """The output of a full run.

    Attributes:
        registry:     Index <-> name mappings for users and repositories.
        user_to_repo: Thresholded user -> repository scores.
        repo_to_repo: Top-K repository affinity.
        final:        Top-K recommendations per user.
        stats:        MatrixStats keyed by "user_to_repo", "repo_to_repo", "final".
        output:       Path of the written artifact, if one was written.
    """

    registry: IdentityRegistry
    user_to_repo: AffinityMatrix
    repo_to_repo: AffinityMatrix
    final: AffinityMatrix
    stats: Dict[str, MatrixStats] = field(default_factory=dict)
    output: Optional[Path] = None


def _stage(name: str, on_stage: Optional[StageCallback]) -> None:
    logger.info(name)
    if on_stage is not None:
        on_stage(name)


def aggregate_scores(
    events: Sequence[Event],
    config: RecommenderConfig,
    on_stage: Optional[StageCallback] = None,
) -> AggregatedScores:
    """Build the registry and the thresholded score matrices.

    Raises:
        UnknownCategoryError: If any event has a category without a weight
    """
    _stage("Assigning user and repository indices", on_stage)
    registry = assign(events)
    logger.info(f"{registry.user_count} users, {registry.repo_count} repositories")

    scorer = EventScorer(config.weights)

    _stage("Aggregating user -> repository scores", on_stage)
    user_to_repo = aggregate(
        events, registry, Direction.USER_TO_REPO, config.min_user_rating, scorer
    )

    repo_to_user = None
    if config.affinity_mode == "joined":
        _stage("Aggregating repository -> user scores", on_stage)
        repo_to_user = aggregate(
            events, registry, Direction.REPO_TO_USER, config.min_user_rating, scorer
        )

    return AggregatedScores(registry, user_to_repo, repo_to_user)


def propagate_scores(
    scores: AggregatedScores,
    config: RecommenderConfig,
    on_stage: Optional[StageCallback] = None,
) -> RecommendationResult:
    """Run the two propagation hops over already aggregated scores."""
    registry = scores.registry
    k = config.max_rel_repo

    _stage("Propagating repository -> repository affinity", on_stage)
    if scores.repo_to_user is not None:
        repo_to_repo = propagate(
            scores.repo_to_user,
            scores.user_to_repo,
            registry.repo_count,
            k=k,
            exclude_self=config.exclude_self_affinity,
            workers=config.workers,
        )
    else:
        repo_to_repo = propagate_transpose(
            scores.user_to_repo,
            registry.repo_count,
            k=k,
            exclude_self=config.exclude_self_affinity,
            workers=config.workers,
        )

    _stage("Composing user recommendations", on_stage)
    final = compose(scores.user_to_repo, repo_to_repo, k=k, workers=config.workers)

    stats = {
        "user_to_repo": summarize(scores.user_to_repo),
        "repo_to_repo": summarize(repo_to_repo),
        "final": summarize(final),
    }
    for name, s in stats.items():
        logger.info(f"{name}: {s.rows} rows, {s.nnz} entries, {s.empty_rows} empty")

    return RecommendationResult(
        registry=registry,
        user_to_repo=scores.user_to_repo,
        repo_to_repo=repo_to_repo,
        final=final,
        stats=stats,
    )


def recommend(
    events: Sequence[Event],
    config: Optional[RecommenderConfig] = None,
    on_stage: Optional[StageCallback] = None,
) -> RecommendationResult:
    """Compute recommendations for in-memory events without touching disk."""
    config = config or RecommenderConfig()
    return propagate_scores(aggregate_scores(events, config, on_stage), config, on_stage)


def run_pipeline(
    config: Optional[RecommenderConfig] = None,
    on_stage: Optional[StageCallback] = None,
) -> RecommendationResult:
    """Execute the full run: load, compute, write.

    Any error aborts the run. Load and scoring errors are raised before
    anything is written; the artifact is written atomically at the end.

    Raises:
        LoadError: If the event source cannot be read or decoded
        UnknownCategoryError: If an event category has no weight
        OutputError: If the artifact cannot be written
    """
    config = config or RecommenderConfig()

    _stage("Loading events", on_stage)
    events = load_events(config.data_path)
    scores = aggregate_scores(events, config, on_stage)
    # Everything later stages need is now in the score matrices
    del events

    result = propagate_scores(scores, config, on_stage)

    _stage("Writing recommendations", on_stage)
    result.output = write_recommendations(
        result.final, result.registry, config.output_path, config.output_format
    )
    return result
