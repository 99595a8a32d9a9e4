"""Tests for file type stats, file heat and top files."""

import math
from datetime import timedelta

import pytest

from repo_statter.config import FileHeatConfig
from repo_statter.metrics.files import (
    TOP_FILES_LIMIT,
    file_heat,
    file_type_stats,
    top_files_by_churn,
    top_files_by_size,
)


class TestFileTypeStats:
    """Test file_type_stats."""

    def test_percentages_sum_to_100(self, sample_commits):
        stats = file_type_stats(sample_commits)
        assert sum(s.percentage for s in stats) == pytest.approx(100.0)

    def test_sorted_by_lines(self, make_commit, make_change):
        commits = [
            make_commit("1", files=[make_change("a.py", 10), make_change("b.md", 30)]),
            make_commit("2", files=[make_change("c.py", 5)]),
        ]
        stats = file_type_stats(commits)
        assert [(s.file_type, s.lines) for s in stats] == [("Markdown", 30), ("Python", 15)]

    def test_current_files_filter(self, make_commit, make_change):
        commits = [make_commit("1", files=[make_change("keep.py", 10), make_change("gone.md", 30)])]
        stats = file_type_stats(commits, current_files={"keep.py"})
        assert [s.file_type for s in stats] == ["Python"]
        assert stats[0].percentage == pytest.approx(100.0)

    def test_no_lines_gives_zero_percentages(self, make_commit, make_change):
        commits = [make_commit("1", files=[make_change("logo.png", 0)])]
        stats = file_type_stats(commits)
        assert stats[0].percentage == 0.0


class TestFileHeat:
    """Test file_heat scoring and ranking."""

    def test_single_fresh_commit_scores_one(self, make_commit, make_change, base_time):
        """Once-committed file modified right now: 0.4 * 1 + 0.6 * 1."""
        commits = [make_commit("1", files=[make_change("src/app.py", 10)])]
        config = FileHeatConfig(frequency_weight=0.4, recency_weight=0.6)
        records = file_heat(commits, config, now=base_time)
        assert len(records) == 1
        assert records[0].heat_score == pytest.approx(1.0)
        assert records[0].commit_count == 1

    def test_recency_decays_exponentially(self, make_commit, make_change, base_time):
        commits = [make_commit("1", files=[make_change("src/app.py", 10)])]
        records = file_heat(commits, FileHeatConfig(), now=base_time + timedelta(days=30))
        assert records[0].heat_score == pytest.approx(0.4 + 0.6 * math.exp(-1))

    def test_sorted_descending_and_truncated(self, make_commit, make_change, base_time):
        commits = [
            make_commit(str(i), hours=i, files=[make_change(f"f{j}.py", 1) for j in range(i + 1)])
            for i in range(5)
        ]
        config = FileHeatConfig(max_files_displayed=3)
        records = file_heat(commits, config, now=base_time + timedelta(hours=5))
        assert len(records) == 3
        scores = [r.heat_score for r in records]
        assert scores == sorted(scores, reverse=True)
        assert records[0].path == "f0.py"

    def test_net_lines_floored_but_churn_not(self, make_commit, make_change, base_time):
        commits = [
            make_commit("1", files=[make_change("old.py", 10)]),
            make_commit("2", hours=1, files=[make_change("old.py", 0, 40)]),
        ]
        record = file_heat(commits, now=base_time)[0]
        assert record.net_lines == 1
        assert record.churn == 50
        assert record.last_modified == base_time + timedelta(hours=1)

    def test_empty_commits(self):
        assert file_heat([]) == []

    def test_idempotent(self, sample_commits, base_time):
        now = base_time + timedelta(days=10)
        assert file_heat(sample_commits, now=now) == file_heat(sample_commits, now=now)


class TestTopFiles:
    """Test top_files_by_size and top_files_by_churn."""

    def test_size_excludes_non_positive(self, make_commit, make_change):
        commits = [
            make_commit("1", files=[make_change("big.py", 100), make_change("empty.py", 5, 5)]),
            make_commit("2", files=[make_change("shrunk.py", 1, 10)]),
        ]
        top = top_files_by_size(commits)
        assert [t.path for t in top] == ["big.py"]
        assert top[0].percentage == pytest.approx(100.0)

    def test_churn_includes_everything(self, make_commit, make_change):
        commits = [
            make_commit("1", files=[make_change("big.py", 100), make_change("empty.py", 5, 5)]),
            make_commit("2", files=[make_change("shrunk.py", 1, 10)]),
        ]
        top = top_files_by_churn(commits)
        assert [(t.path, t.value) for t in top] == [("big.py", 100), ("shrunk.py", 11), ("empty.py", 10)]

    def test_capped(self, make_commit, make_change):
        commits = [make_commit("1", files=[make_change(f"f{i}.py", i + 1) for i in range(30)])]
        assert len(top_files_by_size(commits)) == TOP_FILES_LIMIT
        assert len(top_files_by_churn(commits)) == TOP_FILES_LIMIT
