"""Tests for repo_affinity.propagation."""

from repo_affinity.aggregation import Direction, aggregate
from repo_affinity.models import AffinityMatrix, Event
from repo_affinity.propagation import propagate, propagate_transpose
from repo_affinity.registry import assign


def _matrices(events, min_rating=10):
    registry = assign(events)
    user_to_repo = aggregate(events, registry, Direction.USER_TO_REPO, min_rating)
    repo_to_user = aggregate(events, registry, Direction.REPO_TO_USER, min_rating)
    return registry, user_to_repo, repo_to_user


class TestPropagate:
    """Repository affinity via shared users."""

    def test_same_user_self_pairing(self, alice_twice):
        registry, u2r, r2u = _matrices(alice_twice)
        result = propagate(r2u, u2r, registry.repo_count)
        assert result.rows == [[(0, 400)]]

    def test_sample_scores(self, sample_events):
        registry, u2r, r2u = _matrices(sample_events)
        result = propagate(r2u, u2r, registry.repo_count)
        assert result.rows == [
            [(0, 200), (1, 100), (2, 100)],
            [(1, 200), (0, 100)],
            [(0, 100), (2, 100)],
        ]

    def test_truncates_to_k(self, sample_events):
        registry, u2r, r2u = _matrices(sample_events)
        result = propagate(r2u, u2r, registry.repo_count, k=2)
        # X ties Y and Z at 100; the lower index wins
        assert result.rows[0] == [(0, 200), (1, 100)]
        assert all(len(row) <= 2 for row in result)

    def test_exclude_self(self, sample_events):
        registry, u2r, r2u = _matrices(sample_events)
        result = propagate(r2u, u2r, registry.repo_count, exclude_self=True)
        assert result.rows == [
            [(1, 100), (2, 100)],
            [(0, 100)],
            [(0, 100)],
        ]

    def test_pruned_input_gives_empty_rows(self):
        registry, u2r, r2u = _matrices([Event("IssuesEvent", "dave", "W")])
        result = propagate(r2u, u2r, registry.repo_count)
        assert result.rows == [[]]

    def test_no_threshold_at_this_stage(self):
        # Product of two small-but-kept scores stays even though it is tiny
        r2u = AffinityMatrix(rows=[[(0, 1)]], target_count=1)
        u2r = AffinityMatrix(rows=[[(0, 1)]], target_count=1)
        assert propagate(r2u, u2r, 1).rows == [[(0, 1)]]

    def test_workers_do_not_change_result(self):
        events = [
            Event("WatchEvent", f"user{u}", f"repo{(u * 7 + j) % 150}")
            for u in range(60)
            for j in range(5)
        ]
        registry, u2r, r2u = _matrices(events)
        sequential = propagate(r2u, u2r, registry.repo_count, k=10)
        threaded = propagate(r2u, u2r, registry.repo_count, k=10, workers=4)
        assert threaded.rows == sequential.rows


class TestPropagateTranspose:
    """Single-matrix formulation."""

    def test_matches_joined_under_shared_threshold(self, sample_events):
        registry, u2r, r2u = _matrices(sample_events)
        joined = propagate(r2u, u2r, registry.repo_count)
        single = propagate_transpose(u2r, registry.repo_count)
        assert single.rows == joined.rows

    def test_repo_count_defaults_to_columns(self, sample_events):
        registry, u2r, _ = _matrices(sample_events)
        assert len(propagate_transpose(u2r)) == registry.repo_count

    def test_scaling_weights_scales_by_square(self, sample_events):
        doubled = [e for e in sample_events for _ in range(2)]
        _, u2r, _ = _matrices(sample_events, min_rating=0)
        _, u2r_2, _ = _matrices(doubled, min_rating=0)
        base = propagate_transpose(u2r)
        scaled = propagate_transpose(u2r_2)
        assert scaled.rows == [[(t, 4 * s) for t, s in row] for row in base.rows]
