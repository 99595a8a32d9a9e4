"""JSON document codec for cache entries.

Every entry is one JSON document::

    {"version": 1, "kind": "commits", "payload": [...], "metadata": {...}}

Datetimes are stored as ISO-8601 strings and rebuilt as timezone-aware
datetimes on the way back. Any structural problem raises CorruptEntryError,
which the store turns into a cache miss.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from ..models import CommitRecord, FileAnalysisResult, FileChange

SCHEMA_VERSION = 1

KIND_COMMITS = "commits"
KIND_FILE_ANALYSIS = "file_analysis"


class CorruptEntryError(ValueError):
    """Raised when a stored document cannot be decoded."""


@dataclass
class CacheMetadata:
    created_at: float  # unix seconds
    last_accessed: float  # unix seconds
    size: int  # byte length of the serialized payload
    state_fingerprint: str
    repository_path: str


def file_change_to_dict(change: FileChange) -> dict[str, Any]:
    return asdict(change)


def file_change_from_dict(data: dict[str, Any]) -> FileChange:
    return FileChange(
        path=str(data["path"]),
        lines_added=int(data["lines_added"]),
        lines_deleted=int(data["lines_deleted"]),
        file_type=str(data["file_type"]),
        bytes_added=_optional_int(data.get("bytes_added")),
        bytes_deleted=_optional_int(data.get("bytes_deleted")),
        old_path=data.get("old_path"),
    )


def commit_to_dict(commit: CommitRecord) -> dict[str, Any]:
    return {
        "sha": commit.sha,
        "author_name": commit.author_name,
        "author_email": commit.author_email,
        "timestamp": commit.timestamp.isoformat(),
        "message": commit.message,
        "lines_added": commit.lines_added,
        "lines_deleted": commit.lines_deleted,
        "bytes_added": commit.bytes_added,
        "bytes_deleted": commit.bytes_deleted,
        "files": [file_change_to_dict(f) for f in commit.files],
    }


def commit_from_dict(data: dict[str, Any]) -> CommitRecord:
    return CommitRecord(
        sha=str(data["sha"]),
        author_name=str(data["author_name"]),
        author_email=str(data["author_email"]),
        timestamp=datetime.fromisoformat(data["timestamp"]),
        message=str(data["message"]),
        lines_added=int(data["lines_added"]),
        lines_deleted=int(data["lines_deleted"]),
        bytes_added=_optional_int(data.get("bytes_added")),
        bytes_deleted=_optional_int(data.get("bytes_deleted")),
        files=tuple(file_change_from_dict(f) for f in data["files"]),
    )


def file_analysis_to_dict(result: FileAnalysisResult) -> dict[str, Any]:
    return asdict(result)


def file_analysis_from_dict(data: dict[str, Any]) -> FileAnalysisResult:
    return FileAnalysisResult(
        path=str(data["path"]),
        language=str(data["language"]),
        complexity=float(data["complexity"]),
        lines=int(data["lines"]),
        size_bytes=int(data["size_bytes"]),
        is_binary=bool(data.get("is_binary", False)),
    )


def encode_entry(kind: str, payload: Any, metadata: CacheMetadata) -> str:
    document = {
        "version": SCHEMA_VERSION,
        "kind": kind,
        "payload": payload,
        "metadata": asdict(metadata),
    }
    return json.dumps(document)


def payload_size(payload: Any) -> int:
    """Byte length of the payload as it is serialized."""
    return len(json.dumps(payload).encode("utf-8"))


def decode_entry(raw: Any, kind: str) -> tuple[Any, CacheMetadata]:
    """Parse a stored document into (raw payload, metadata).

    Raises:
        CorruptEntryError: On invalid JSON, a schema version mismatch, the
            wrong entry kind or missing metadata fields.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str):
        raise CorruptEntryError(f"unexpected stored type {type(raw).__name__}")
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptEntryError(f"invalid JSON: {e}") from e

    if not isinstance(document, dict):
        raise CorruptEntryError("document is not an object")
    if document.get("version") != SCHEMA_VERSION:
        raise CorruptEntryError(f"schema version {document.get('version')!r} != {SCHEMA_VERSION}")
    if document.get("kind") != kind:
        raise CorruptEntryError(f"entry kind {document.get('kind')!r} != {kind!r}")
    if "payload" not in document:
        raise CorruptEntryError("document has no payload")

    return document["payload"], decode_metadata(document.get("metadata"))


def decode_metadata(data: Any) -> CacheMetadata:
    if not isinstance(data, dict):
        raise CorruptEntryError("document has no metadata")
    try:
        return CacheMetadata(
            created_at=float(data["created_at"]),
            last_accessed=float(data["last_accessed"]),
            size=int(data["size"]),
            state_fingerprint=str(data["state_fingerprint"]),
            repository_path=str(data["repository_path"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CorruptEntryError(f"invalid metadata: {e}") from e


def decode_commits(payload: Any) -> list[CommitRecord]:
    if not isinstance(payload, list):
        raise CorruptEntryError("commit payload is not a list")
    try:
        return [commit_from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError) as e:
        raise CorruptEntryError(f"invalid commit record: {e}") from e


def decode_file_analysis(payload: Any) -> FileAnalysisResult:
    if not isinstance(payload, dict):
        raise CorruptEntryError("file analysis payload is not an object")
    try:
        return file_analysis_from_dict(payload)
    except (KeyError, TypeError, ValueError) as e:
        raise CorruptEntryError(f"invalid file analysis: {e}") from e


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)
