"""Tests for the cache document codec."""

import json

import pytest

from repo_statter.cache.serialization import (
    KIND_COMMITS,
    KIND_FILE_ANALYSIS,
    SCHEMA_VERSION,
    CacheMetadata,
    CorruptEntryError,
    commit_from_dict,
    commit_to_dict,
    decode_entry,
    encode_entry,
    payload_size,
)


def make_metadata(**kwargs):
    values = dict(created_at=100.0, last_accessed=150.0, size=2, state_fingerprint="abc", repository_path="/r")
    values.update(kwargs)
    return CacheMetadata(**values)


class TestCommitCodec:
    """Test commit record conversion."""

    def test_round_trip_restores_aware_datetimes(self, sample_commits):
        for commit in sample_commits:
            restored = commit_from_dict(json.loads(json.dumps(commit_to_dict(commit))))
            assert restored == commit
            assert restored.timestamp.tzinfo is not None

    def test_rename_marker_survives(self, make_commit, make_change):
        commit = make_commit("r", files=[make_change("new/a.py", 1, old_path="old/a.py")])
        restored = commit_from_dict(commit_to_dict(commit))
        assert restored.files[0].is_rename
        assert restored.files[0].old_path == "old/a.py"


class TestEntryCodec:
    """Test the envelope around every stored payload."""

    def test_round_trip(self):
        raw = encode_entry(KIND_COMMITS, [1, 2], make_metadata())
        payload, metadata = decode_entry(raw, KIND_COMMITS)
        assert payload == [1, 2]
        assert metadata == make_metadata()

    def test_bytes_accepted(self):
        raw = encode_entry(KIND_COMMITS, [], make_metadata()).encode("utf-8")
        assert decode_entry(raw, KIND_COMMITS)[0] == []

    def test_payload_size_is_utf8_length(self):
        assert payload_size(["é"]) == len(json.dumps(["é"]).encode("utf-8"))

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[]",
            json.dumps({"version": SCHEMA_VERSION + 1, "kind": KIND_COMMITS, "payload": [], "metadata": {}}),
            json.dumps({"version": SCHEMA_VERSION, "kind": KIND_COMMITS, "metadata": {}}),
            json.dumps({"version": SCHEMA_VERSION, "kind": KIND_COMMITS, "payload": [], "metadata": {"size": 1}}),
            12345,
        ],
    )
    def test_corrupt_documents(self, raw):
        with pytest.raises(CorruptEntryError):
            decode_entry(raw, KIND_COMMITS)

    def test_wrong_kind_is_corrupt(self):
        raw = encode_entry(KIND_FILE_ANALYSIS, {}, make_metadata())
        with pytest.raises(CorruptEntryError):
            decode_entry(raw, KIND_COMMITS)
