"""End-to-end tests for repo_affinity.pipeline."""

import json

import pytest

from repo_affinity.config import RecommenderConfig
from repo_affinity.exceptions import LoadError, MalformedRecordError, UnknownCategoryError
from repo_affinity.models import Event
from repo_affinity.pipeline import aggregate_scores, recommend, run_pipeline


class TestRecommend:
    """In-memory runs."""

    def test_single_pair_scenario(self, alice_twice):
        """Same pair twice: 20 -> 400 -> 8000."""
        result = recommend(alice_twice)
        assert result.user_to_repo.rows == [[(0, 20)]]
        assert result.repo_to_repo.rows == [[(0, 400)]]
        assert result.final.rows == [[(0, 8000)]]

    def test_below_threshold_scenario(self):
        """A lone IssuesEvent is pruned and leaves every stage empty."""
        result = recommend([Event("IssuesEvent", "dave", "W")])
        assert result.registry.user_count == 1
        assert result.user_to_repo.rows == [[]]
        assert result.repo_to_repo.rows == [[]]
        assert result.final.rows == [[]]

    def test_empty_input(self):
        result = recommend([])
        assert result.registry.user_count == 0
        assert len(result.final) == 0
        assert result.stats["final"].rows == 0

    def test_sample_final_scores(self, sample_events):
        result = recommend(sample_events)
        names = [
            [(result.registry.repo_name(r), s) for r, s in row] for row in result.final
        ]
        assert names == [
            [("X", 3000), ("Y", 3000), ("Z", 1000)],
            [("X", 3000), ("Z", 2000), ("Y", 1000)],
            [("Y", 2000), ("X", 1000)],
        ]

    def test_unknown_category_aborts(self, sample_events):
        with pytest.raises(UnknownCategoryError):
            recommend(sample_events + [Event("MemberEvent", "alice", "X")])

    def test_transpose_mode_matches_joined(self, sample_events):
        joined = recommend(sample_events, RecommenderConfig(affinity_mode="joined"))
        single = recommend(sample_events, RecommenderConfig(affinity_mode="transpose"))
        assert single.repo_to_repo.rows == joined.repo_to_repo.rows
        assert single.final.rows == joined.final.rows

    def test_transpose_mode_skips_repo_to_user(self, sample_events):
        scores = aggregate_scores(sample_events, RecommenderConfig(affinity_mode="transpose"))
        assert scores.repo_to_user is None

    def test_weight_scaling(self, sample_events):
        """Scaling weights by c scales repo affinity by c**2 and final scores by c**3."""
        base_weights = RecommenderConfig().weights
        c = 3
        base = recommend(sample_events, RecommenderConfig(min_user_rating=0))
        scaled = recommend(
            sample_events,
            RecommenderConfig(
                min_user_rating=0, weights={k: v * c for k, v in base_weights.items()}
            ),
        )
        assert scaled.repo_to_repo.rows == [
            [(t, s * c**2) for t, s in row] for row in base.repo_to_repo
        ]
        assert scaled.final.rows == [[(t, s * c**3) for t, s in row] for row in base.final]

    def test_raising_threshold_empties_everything(self, sample_events):
        result = recommend(sample_events, RecommenderConfig(min_user_rating=1000))
        assert all(not row for row in result.final)

    def test_k_bounds_every_row(self, sample_events):
        result = recommend(sample_events, RecommenderConfig(max_rel_repo=1))
        assert all(len(row) <= 1 for row in result.repo_to_repo)
        assert all(len(row) <= 1 for row in result.final)

    def test_exclude_self_affinity(self, sample_events):
        result = recommend(sample_events, RecommenderConfig(exclude_self_affinity=True))
        for r, row in enumerate(result.repo_to_repo):
            assert r not in dict(row)

    def test_stage_callback(self, alice_twice):
        stages = []
        recommend(alice_twice, on_stage=stages.append)
        assert stages[0] == "Assigning user and repository indices"
        assert stages[-1] == "Composing user recommendations"

    def test_workers_do_not_change_result(self):
        events = [
            Event("WatchEvent", f"user{u}", f"repo{(u * 13 + j) % 200}")
            for u in range(300)
            for j in range(4)
        ]
        sequential = recommend(events, RecommenderConfig(max_rel_repo=10))
        threaded = recommend(events, RecommenderConfig(max_rel_repo=10, workers=4))
        assert threaded.final.rows == sequential.final.rows


class TestRunPipeline:
    """Full runs against the filesystem."""

    def test_writes_artifact(self, tmp_path, data_dir):
        output = tmp_path / "output"
        result = run_pipeline(RecommenderConfig(data_dir=str(data_dir), output=str(output)))
        assert result.output == output
        assert output.read_text().splitlines() == [
            'alice\t[("X", 3000), ("Y", 3000), ("Z", 1000)]',
            'bob\t[("X", 3000), ("Z", 2000), ("Y", 1000)]',
            'carol\t[("Y", 2000), ("X", 1000)]',
        ]

    def test_jsonl_output(self, tmp_path, data_dir):
        output = tmp_path / "recs.jsonl"
        run_pipeline(
            RecommenderConfig(data_dir=str(data_dir), output=str(output), output_format="jsonl")
        )
        first = json.loads(output.read_text().splitlines()[0])
        assert first == {"user": "alice", "recommendations": [["X", 3000], ["Y", 3000], ["Z", 1000]]}

    def test_empty_data_dir_writes_empty_artifact(self, tmp_path):
        data = tmp_path / "data"
        data.mkdir()
        output = tmp_path / "output"
        run_pipeline(RecommenderConfig(data_dir=str(data), output=str(output)))
        assert output.read_text() == ""

    def test_load_error_writes_nothing(self, tmp_path, data_dir):
        (data_dir / "part-002.json").write_text("{not json")
        output = tmp_path / "output"
        with pytest.raises(LoadError):
            run_pipeline(RecommenderConfig(data_dir=str(data_dir), output=str(output)))
        assert not output.exists()

    def test_unencodable_name_is_a_load_error(self, tmp_path, data_dir):
        (data_dir / "part-002.json").write_text(
            r'{"type":"WatchEvent","user":"u\ud800","repo":"r"}' + "\n"
        )
        output = tmp_path / "output"
        with pytest.raises(MalformedRecordError):
            run_pipeline(RecommenderConfig(data_dir=str(data_dir), output=str(output)))
        assert not output.exists()

    def test_unknown_category_writes_nothing(self, tmp_path, data_dir):
        (data_dir / "part-002.json").write_text(
            '{"type": "DeleteEvent", "user": "alice", "repo": "X"}\n'
        )
        output = tmp_path / "output"
        with pytest.raises(UnknownCategoryError):
            run_pipeline(RecommenderConfig(data_dir=str(data_dir), output=str(output)))
        assert not output.exists()

    def test_stats_reported(self, tmp_path, data_dir):
        result = run_pipeline(
            RecommenderConfig(data_dir=str(data_dir), output=str(tmp_path / "output"))
        )
        assert set(result.stats) == {"user_to_repo", "repo_to_repo", "final"}
        assert result.stats["final"].nnz == 8
