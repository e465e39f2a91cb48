"""Shared test fixtures for repo-affinity tests."""

import json
import os

import pytest

from repo_affinity.models import Event


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Keep user-level and project-level config files out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for key in list(os.environ):
        if key.startswith("REPO_AFFINITY_"):
            monkeypatch.delenv(key)
    return project


@pytest.fixture
def alice_twice():
    """The same user watching the same repository twice."""
    return [
        Event("WatchEvent", "alice", "X"),
        Event("WatchEvent", "alice", "X"),
    ]


@pytest.fixture
def sample_events():
    """Three users over three repositories.

    Index order is alice=0, bob=1, carol=2 and X=0, Y=1, Z=2.
    Thresholded user -> repo scores (min 10):
        alice: X=10, Y=6+2+2=10
        bob:   X=10, Z=10
        carol: Y=10 (Z=1 is pruned)
    """
    return [
        Event("WatchEvent", "alice", "X"),
        Event("ForkEvent", "alice", "Y"),
        Event("PullRequestEvent", "alice", "Y"),
        Event("PullRequestEvent", "alice", "Y"),
        Event("WatchEvent", "bob", "X"),
        Event("WatchEvent", "bob", "Z"),
        Event("IssuesEvent", "carol", "Z"),
        Event("WatchEvent", "carol", "Y"),
    ]


def _write_events(path, events):
    """Write events as one JSON record per line."""
    lines = [
        json.dumps({"type": e.category, "user": e.user, "repo": e.repository})
        for e in events
    ]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def write_events():
    """Helper writing events to a file, one JSON record per line."""
    return _write_events


@pytest.fixture
def data_dir(tmp_path, sample_events):
    """A data directory holding the sample events split over two files."""
    directory = tmp_path / "data"
    directory.mkdir()
    _write_events(directory / "part-000.json", sample_events[:4])
    _write_events(directory / "part-001.json", sample_events[4:])
    return directory
