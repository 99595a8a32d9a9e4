"""Tests for the exception hierarchy."""

from pathlib import Path

from repo_statter.exceptions import (
    AnalysisError,
    CacheBootstrapError,
    CacheError,
    EmptyInputError,
    GitSourceError,
    RepositoryStateError,
    RepoStatterError,
)


class TestHierarchy:
    """Every error is catchable as RepoStatterError."""

    def test_cache_errors(self):
        assert issubclass(CacheBootstrapError, CacheError)
        assert issubclass(RepositoryStateError, CacheError)
        assert issubclass(CacheError, RepoStatterError)

    def test_analysis_errors(self):
        assert issubclass(EmptyInputError, AnalysisError)
        assert issubclass(GitSourceError, AnalysisError)
        assert issubclass(AnalysisError, RepoStatterError)


class TestMessages:
    """Details are appended to the message."""

    def test_plain_message(self):
        assert str(RepoStatterError("boom")) == "boom"

    def test_details_rendered(self):
        err = EmptyInputError("contributor stats")
        assert str(err).startswith("Cannot compute contributor stats from an empty list of commits")
        assert "operation=contributor stats" in str(err)

    def test_repository_state_error_fields(self):
        err = RepositoryStateError(Path("/repo"), "timed out", timed_out=True)
        assert err.timed_out
        assert err.returncode is None
        assert "timed_out=true" in str(err)

    def test_git_source_error_returncode(self):
        err = GitSourceError(Path("/repo"), "not a git repository", returncode=128)
        assert err.details["returncode"] == "128"

    def test_details_are_stringified(self):
        err = GitSourceError(Path("/repo"), "not a git repository", returncode=128)
        assert err.details == {"repo_path": str(Path("/repo")), "reason": "not a git repository", "returncode": "128"}

    def test_to_dict(self):
        err = EmptyInputError("word frequencies", what="messages")
        data = err.to_dict()
        assert data["type"] == "EmptyInputError"
        assert data["message"] == err.message
        assert data["details"]["input"] == "messages"
