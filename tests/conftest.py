"""Shared test fixtures for repo-statter tests."""

from datetime import datetime, timedelta, timezone

import pytest

from repo_statter.classification import ConfiguredFileClassifier
from repo_statter.models import CommitRecord, FileChange

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

_classifier = ConfiguredFileClassifier()


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


def _make_change(path="src/app.py", added=10, deleted=0, bytes_per_line=50, **kwargs):
    return FileChange(
        path=path,
        lines_added=added,
        lines_deleted=deleted,
        file_type=kwargs.pop("file_type", _classifier.file_type(path)),
        bytes_added=kwargs.pop("bytes_added", added * bytes_per_line),
        bytes_deleted=kwargs.pop("bytes_deleted", deleted * bytes_per_line),
        **kwargs,
    )


def _make_commit(
    sha="c0",
    author="Alice",
    hours=0.0,
    message="Add feature",
    files=None,
    added=None,
    deleted=None,
    email=None,
):
    """Build a commit whose aggregate totals default to the sum of its files."""
    if files is None:
        files = [_make_change(added=added or 0, deleted=deleted or 0)]
    lines_added = sum(f.lines_added for f in files) if added is None else added
    lines_deleted = sum(f.lines_deleted for f in files) if deleted is None else deleted
    return CommitRecord(
        sha=sha,
        author_name=author,
        author_email=email or f"{author.lower()}@example.com",
        timestamp=BASE_TIME + timedelta(hours=hours),
        message=message,
        lines_added=lines_added,
        lines_deleted=lines_deleted,
        files=tuple(files),
        bytes_added=sum(f.bytes_added or 0 for f in files),
        bytes_deleted=sum(f.bytes_deleted or 0 for f in files),
    )


@pytest.fixture
def make_change():
    """Factory for FileChange with bytes estimated at 50 per line."""
    return _make_change


@pytest.fixture
def make_commit():
    """Factory for CommitRecord; ``hours`` offsets from a fixed base time."""
    return _make_commit


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def sample_commits():
    """A small mixed history: two authors, tests, docs, a merge and a bot bump."""
    return [
        _make_commit("a1", "Alice", 0, "Initial commit", [_make_change("src/app.py", 100)]),
        _make_commit(
            "b1",
            "Bob",
            5,
            "Add tests for parser",
            [_make_change("tests/test_app.py", 40), _make_change("src/app.py", 5, 2)],
        ),
        _make_commit("a2", "Alice", 30, "Update docs", [_make_change("README.md", 20, 3)]),
        _make_commit(
            "m1",
            "Alice",
            50,
            "Merge branch 'feature' into main",
            [_make_change("src/app.py", 300, 100)],
        ),
        _make_commit(
            "d1",
            "dependabot[bot]",
            60,
            "chore: update dependencies",
            [_make_change("requirements.txt", 1, 1)],
        ),
        _make_commit(
            "b2",
            "Bob",
            72,
            "Refactor parser and remove dead code",
            [_make_change("src/parser.py", 15, 60), _make_change("logo.png", 0, 0, bytes_added=2048)],
        ),
    ]
