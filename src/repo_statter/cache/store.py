"""
Persistent cache for commit snapshots and per-file analysis results.

Uses diskcache for the on-disk storage, one Cache directory per partition:

    <base_path>/commits    commit-record lists, one entry per (repo, fingerprint)
    <base_path>/analysis   FileAnalysisResult, one entry per (repo, fingerprint, file)

Each stored value is a JSON document carrying the payload plus metadata
(created_at, last_accessed, size, fingerprint, repository path). Expiry is
evaluated here rather than by diskcache because it has two independent rules:
idle time since the last read and total age since creation.

Only opening the storage can fail loudly. Unreadable, mismatched or expired
entries are logged and reported as misses so a broken cache never blocks a
report.
"""

from __future__ import annotations

import hashlib
import sqlite3
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Sequence, Union

import diskcache

from ..config import CacheConfig
from ..exceptions import CacheBootstrapError
from ..logging_config import get_logger
from ..models import CommitRecord, FileAnalysisResult
from .serialization import (
    KIND_COMMITS,
    KIND_FILE_ANALYSIS,
    CacheMetadata,
    CorruptEntryError,
    commit_to_dict,
    decode_commits,
    decode_entry,
    decode_file_analysis,
    encode_entry,
    file_analysis_to_dict,
    payload_size,
)

logger = get_logger(__name__)

COMMITS_PARTITION = "commits"
ANALYSIS_PARTITION = "analysis"
PARTITIONS = (COMMITS_PARTITION, ANALYSIS_PARTITION)

_KIND_BY_PARTITION = {COMMITS_PARTITION: KIND_COMMITS, ANALYSIS_PARTITION: KIND_FILE_ANALYSIS}
_DECODER_BY_PARTITION: dict[str, Callable[[Any], Any]] = {
    COMMITS_PARTITION: decode_commits,
    ANALYSIS_PARTITION: decode_file_analysis,
}

# Per-entry storage failures that degrade to a miss
_STORAGE_ERRORS = (OSError, sqlite3.Error, diskcache.Timeout)


@dataclass
class CacheStats:
    total_entries: int
    total_size: int
    oldest_entry: Optional[datetime]
    newest_entry: Optional[datetime]


def entry_id(purpose: str, repo_path: str, fingerprint: str, file_path: Optional[str] = None) -> str:
    """Fixed-length identifier for one cache entry."""
    digest = hashlib.sha256()
    for part in (purpose, repo_path, fingerprint) + ((file_path,) if file_path is not None else ()):
        digest.update(part.encode("utf-8"))
        digest.update(b"\0")
    return f"{purpose}-{digest.hexdigest()[:16]}"


class AnalysisCache:
    """
    Whole-result cache keyed by repository path and state fingerprint.

    Entry lifecycle: absent -> fresh -> stale-but-present -> expired. A read
    that hits refreshes ``last_accessed`` and persists it before returning.
    Two writers racing on one key leave the later write in place; entries are
    always reproducible from the repository.

    Usage:
        with AnalysisCache(base_path, idle_timeout_seconds=3600) as cache:
            commits = cache.get_commits(repo, fingerprint)
            if commits is None:
                commits = source.load()
                cache.set_commits(repo, fingerprint, commits)
    """

    def __init__(
        self,
        base_path: Union[str, Path],
        idle_timeout_seconds: Optional[float] = None,
        max_age_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
        cleanup_on_open: bool = True,
    ):
        """
        Open (creating if needed) both cache partitions.

        Args:
            base_path: Directory holding the partitions
            idle_timeout_seconds: Expire entries not read for this long (None = never)
            max_age_seconds: Expire entries created this long ago (None = never)
            clock: Source of the current unix time, injectable for tests
            cleanup_on_open: Sweep expired and corrupt entries once opened

        Raises:
            CacheBootstrapError: If the storage directories cannot be created
        """
        self.base_path = Path(base_path)
        self.idle_timeout_seconds = idle_timeout_seconds
        self.max_age_seconds = max_age_seconds
        self._clock = clock
        self._partitions: dict[str, diskcache.Cache] = {}

        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            for name in PARTITIONS:
                self._partitions[name] = diskcache.Cache(str(self.base_path / name))
        except _STORAGE_ERRORS as e:
            self.close()
            raise CacheBootstrapError(self.base_path, str(e)) from e

        logger.debug(
            "Cache initialized at %s (idle_timeout=%s, max_age=%s)",
            self.base_path,
            idle_timeout_seconds,
            max_age_seconds,
        )

        if cleanup_on_open:
            self.cleanup_expired()

    @classmethod
    def from_config(cls, config: CacheConfig, **kwargs: Any) -> AnalysisCache:
        return cls(
            config.base_path,
            idle_timeout_seconds=config.idle_timeout_seconds,
            max_age_seconds=config.max_age_seconds,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Commit snapshots

    def get_commits(self, repo_path: Union[str, Path], fingerprint: str) -> Optional[list[CommitRecord]]:
        """Return the cached commit list, or None on a miss."""
        repo = _normalize_repo(repo_path)
        key = entry_id(COMMITS_PARTITION, repo, fingerprint)
        commits = self._read(COMMITS_PARTITION, key)
        if commits is None:
            return None
        logger.info("Cache hit for commits (%s, %d commits)", key, len(commits))
        return commits

    def set_commits(
        self, repo_path: Union[str, Path], fingerprint: str, commits: Sequence[CommitRecord]
    ) -> None:
        repo = _normalize_repo(repo_path)
        key = entry_id(COMMITS_PARTITION, repo, fingerprint)
        payload = [commit_to_dict(c) for c in commits]
        if self._write(COMMITS_PARTITION, key, payload, repo, fingerprint):
            logger.info("Cache updated for commits (%s, %d commits)", key, len(payload))

    # ------------------------------------------------------------------
    # Per-file analysis

    def get_file_analysis(
        self, repo_path: Union[str, Path], fingerprint: str, file_path: str
    ) -> Optional[FileAnalysisResult]:
        repo = _normalize_repo(repo_path)
        key = entry_id(ANALYSIS_PARTITION, repo, fingerprint, file_path)
        return self._read(ANALYSIS_PARTITION, key)

    def set_file_analysis(
        self,
        repo_path: Union[str, Path],
        fingerprint: str,
        file_path: str,
        result: FileAnalysisResult,
    ) -> None:
        repo = _normalize_repo(repo_path)
        key = entry_id(ANALYSIS_PARTITION, repo, fingerprint, file_path)
        self._write(ANALYSIS_PARTITION, key, file_analysis_to_dict(result), repo, fingerprint)

    # ------------------------------------------------------------------
    # Maintenance

    def is_expired(self, metadata: CacheMetadata, now: Optional[float] = None) -> bool:
        """An entry is expired when either the idle timeout or the max age has elapsed."""
        now = self._clock() if now is None else now
        if self.idle_timeout_seconds is not None and now - metadata.last_accessed > self.idle_timeout_seconds:
            return True
        if self.max_age_seconds is not None and now - metadata.created_at > self.max_age_seconds:
            return True
        return False

    def cleanup_expired(self) -> int:
        """Delete expired and unreadable entries in both partitions.

        Returns:
            Number of entries deleted
        """
        started = time.monotonic()
        deleted = 0
        for name, keys in self._iter_partition_keys():
            kind = _KIND_BY_PARTITION[name]
            decode_payload = _DECODER_BY_PARTITION[name]
            partition = self._partitions[name]
            for key in keys:
                try:
                    raw = partition.get(key)
                    if raw is None:
                        continue
                    try:
                        payload, metadata = decode_entry(raw, kind)
                        decode_payload(payload)
                    except CorruptEntryError as e:
                        logger.debug("Removing corrupt cache entry %s: %s", key, e)
                        partition.delete(key)
                        deleted += 1
                        continue
                    if self.is_expired(metadata):
                        partition.delete(key)
                        deleted += 1
                except _STORAGE_ERRORS as e:
                    logger.warning("Cache cleanup skipped %s/%s: %s", name, key, e)

        logger.info(
            "Cache cleanup completed: %d deleted in %.1fms", deleted, (time.monotonic() - started) * 1000
        )
        return deleted

    def clear_cache(self) -> int:
        """Delete every entry regardless of expiry.

        Returns:
            Number of entries deleted
        """
        deleted = 0
        for name in PARTITIONS:
            try:
                deleted += self._partitions[name].clear()
            except _STORAGE_ERRORS as e:
                logger.warning("Failed to clear cache partition %s: %s", name, e)
        logger.info("Cache cleared: %d entries deleted", deleted)
        return deleted

    def get_cache_stats(self) -> CacheStats:
        """Entry count, total stored size and oldest/newest modification time.

        An entry's modification time is its ``last_accessed`` stamp, which is
        rewritten on every set and every hit.
        """
        total_entries = 0
        total_size = 0
        oldest: Optional[float] = None
        newest: Optional[float] = None

        for name, keys in self._iter_partition_keys():
            kind = _KIND_BY_PARTITION[name]
            partition = self._partitions[name]
            for key in keys:
                try:
                    raw = partition.get(key)
                except _STORAGE_ERRORS as e:
                    logger.debug("Cache stats skipped %s/%s: %s", name, key, e)
                    continue
                if raw is None:
                    continue
                total_entries += 1
                total_size += len(raw.encode("utf-8")) if isinstance(raw, str) else len(raw)
                try:
                    _, metadata = decode_entry(raw, kind)
                except CorruptEntryError:
                    continue
                modified = metadata.last_accessed
                if oldest is None or modified < oldest:
                    oldest = modified
                if newest is None or modified > newest:
                    newest = modified

        return CacheStats(
            total_entries=total_entries,
            total_size=total_size,
            oldest_entry=_to_datetime(oldest),
            newest_entry=_to_datetime(newest),
        )

    def close(self) -> None:
        for partition in self._partitions.values():
            partition.close()
        self._partitions.clear()

    def __enter__(self) -> AnalysisCache:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers

    def _read(self, name: str, key: str) -> Optional[Any]:
        """Decoded value of a live entry, or None.

        ``last_accessed`` is only refreshed once the payload has decoded, so a
        corrupt entry keeps ageing toward its idle timeout.
        """
        partition = self._partitions[name]
        kind = _KIND_BY_PARTITION[name]
        try:
            raw = partition.get(key)
        except _STORAGE_ERRORS as e:
            logger.warning("Cache read error for %s: %s", key, e)
            return None

        if raw is None:
            logger.debug("Cache miss for %s", key)
            return None

        try:
            payload, metadata = decode_entry(raw, kind)
        except CorruptEntryError as e:
            logger.warning("Unreadable cache entry %s: %s", key, e)
            return None

        now = self._clock()
        if self.is_expired(metadata, now):
            logger.debug("Cache expired for %s", key)
            self._delete(partition, key)
            return None

        try:
            value = _DECODER_BY_PARTITION[name](payload)
        except CorruptEntryError as e:
            logger.warning("Cache entry %s has an invalid payload: %s", key, e)
            return None

        metadata.last_accessed = now
        try:
            partition.set(key, encode_entry(kind, payload, metadata))
        except _STORAGE_ERRORS as e:
            logger.warning("Failed to refresh last access for %s: %s", key, e)
        return value

    def _write(self, name: str, key: str, payload: Any, repo: str, fingerprint: str) -> bool:
        now = self._clock()
        metadata = CacheMetadata(
            created_at=now,
            last_accessed=now,
            size=payload_size(payload),
            state_fingerprint=fingerprint,
            repository_path=repo,
        )
        try:
            self._partitions[name].set(key, encode_entry(_KIND_BY_PARTITION[name], payload, metadata))
        except _STORAGE_ERRORS as e:
            logger.warning("Failed to write cache entry %s: %s", key, e)
            return False
        return True

    def _delete(self, partition: diskcache.Cache, key: str) -> None:
        try:
            partition.delete(key)
        except _STORAGE_ERRORS as e:
            logger.warning("Failed to delete cache entry %s: %s", key, e)

    def _iter_partition_keys(self) -> Iterator[tuple[str, list[str]]]:
        for name in PARTITIONS:
            try:
                keys = list(self._partitions[name])
            except _STORAGE_ERRORS as e:
                logger.warning("Cannot list cache partition %s: %s", name, e)
                continue
            yield name, keys


def _normalize_repo(repo_path: Union[str, Path]) -> str:
    return str(Path(repo_path).resolve())


def _to_datetime(timestamp: Optional[float]) -> Optional[datetime]:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)
