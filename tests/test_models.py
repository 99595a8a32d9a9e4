"""Tests for data model helpers."""

from datetime import datetime, timezone

import pytest

from repo_statter.models import CategoryBreakdown, CommitRecord, FileChange


class TestCommitRecord:
    """Test CommitRecord normalization."""

    def test_naive_timestamp_becomes_utc(self):
        commit = CommitRecord("a", "Alice", "a@x", datetime(2024, 1, 1), "msg", 1, 0)
        assert commit.timestamp.tzinfo == timezone.utc

    def test_files_stored_as_tuple(self):
        change = FileChange("a.py", 1, 0, "Python")
        commit = CommitRecord("a", "Alice", "a@x", datetime(2024, 1, 1), "msg", 1, 0, files=[change])
        assert commit.files == (change,)

    def test_net_bytes_treats_missing_as_zero(self):
        commit = CommitRecord("a", "Alice", "a@x", datetime(2024, 1, 1), "msg", 1, 0, bytes_added=100)
        assert commit.net_bytes == 100


class TestCategoryBreakdown:
    """Test category bookkeeping."""

    def test_add_keeps_sum_equal_to_total(self):
        b = CategoryBreakdown()
        b.add("application", 10)
        b.add("test", 5)
        assert b.total == 15
        assert b.category_sum() == 15

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            CategoryBreakdown().add("vendor", 1)

    def test_merge_subtract_copy(self):
        a = CategoryBreakdown()
        a.add("build", 4)
        b = a.copy()
        b.add("other", 2)
        a.merge(b)
        assert a.build == 8
        assert a.total == 10
        a.subtract(b)
        assert a == CategoryBreakdown(total=4, build=4)
