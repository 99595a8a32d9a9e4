"""Tests for top-commit leaderboards."""

from repo_statter.classification import CommitClassification
from repo_statter.metrics.awards import (
    top_commits_by_bytes_added,
    top_commits_by_bytes_removed,
    top_commits_by_files_modified,
    top_commits_by_lines_added,
    top_commits_by_lines_removed,
)
from repo_statter.models import CommitRecord


class NothingIsReal:
    """Classifier that flags every commit as automated."""

    def classify(self, message):
        return CommitClassification(is_merge=False, is_automated=True)


class TestTopCommits:
    """Test the five leaderboards."""

    def test_lines_added_excludes_merges_and_bots(self, sample_commits):
        awards = top_commits_by_lines_added(sample_commits)
        shas = [a.sha for a in awards]
        assert "m1" not in shas
        assert "d1" not in shas
        assert shas[0] == "a1"
        assert awards[0].value == 100

    def test_limited_to_five(self, make_commit):
        commits = [make_commit(str(i), hours=i, added=i + 1) for i in range(8)]
        awards = top_commits_by_lines_added(commits)
        assert [a.value for a in awards] == [8, 7, 6, 5, 4]

    def test_ties_keep_input_order(self, make_commit):
        commits = [make_commit(s, added=10) for s in ("x", "y", "z")]
        assert [a.sha for a in top_commits_by_lines_added(commits)] == ["x", "y", "z"]

    def test_lines_removed(self, sample_commits):
        awards = top_commits_by_lines_removed(sample_commits)
        assert awards[0].sha == "b2"
        assert awards[0].value == 60

    def test_files_modified(self, sample_commits):
        awards = top_commits_by_files_modified(sample_commits)
        assert [a.sha for a in awards[:2]] == ["b1", "b2"]
        assert awards[0].value == 2

    def test_bytes(self, sample_commits):
        added = top_commits_by_bytes_added(sample_commits)
        removed = top_commits_by_bytes_removed(sample_commits)
        assert added[0].sha == "a1"
        assert added[0].value == 5000
        assert removed[0].sha == "b2"
        assert removed[0].value == 3000

    def test_missing_aggregate_bytes_fall_back_to_files(self, make_change, make_commit, base_time):
        commits = [
            make_commit("has", added=1),
            CommitRecord(
                "none", "Bob", "bob@example.com", base_time, "Change", 10, 4,
                files=(make_change("src/app.py", 10, 4),),
            ),
        ]
        added = top_commits_by_bytes_added(commits)
        removed = top_commits_by_bytes_removed(commits)
        assert [(a.sha, a.value) for a in added] == [("none", 500), ("has", 50)]
        assert [(a.sha, a.value) for a in removed] == [("none", 200), ("has", 0)]

    def test_award_carries_commit_details(self, make_commit, base_time):
        award = top_commits_by_lines_added([make_commit("abc", "Carol", 2, "Add parser", added=3)])[0]
        assert award.author_name == "Carol"
        assert award.message == "Add parser"
        assert award.date == base_time.replace(hour=14)

    def test_classifier_is_pluggable(self, sample_commits):
        assert top_commits_by_lines_added(sample_commits, classifier=NothingIsReal()) == []
