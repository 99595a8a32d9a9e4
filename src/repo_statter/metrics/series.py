"""Growth curves: time-bucketed series and the per-commit linear series.

Both series end on a cumulative value equal to the sum of every line (and
byte) delta in the input, so nothing here clamps or drops values.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from ..classification import ConfiguredFileClassifier, FileClassifier
from ..models import CategoryBreakdown, CommitRecord, LinearSeriesPoint, TimeSeriesPoint
from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_HOURLY_THRESHOLD_HOURS = 48.0

HOUR = timedelta(hours=1)
DAY = timedelta(days=1)


def commit_bytes(commit: CommitRecord) -> tuple[int, int]:
    """Aggregate bytes for a commit, falling back to its file changes."""
    added = commit.bytes_added
    if added is None:
        added = sum(change.bytes_added or 0 for change in commit.files)
    deleted = commit.bytes_deleted
    if deleted is None:
        deleted = sum(change.bytes_deleted or 0 for change in commit.files)
    return added, deleted


def bucket_width(commits: Sequence[CommitRecord], threshold_hours: float = DEFAULT_HOURLY_THRESHOLD_HOURS) -> timedelta:
    """Hourly buckets for spans under ``threshold_hours``, daily otherwise."""
    timestamps = [c.timestamp for c in commits]
    span = max(timestamps) - min(timestamps)
    return HOUR if span < timedelta(hours=threshold_hours) else DAY


def _bucket_start(ts: datetime, width: timedelta) -> datetime:
    ts = ts.astimezone(timezone.utc)
    if width == HOUR:
        return ts.replace(minute=0, second=0, microsecond=0)
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def _commit_breakdowns(
    commit: CommitRecord, classifier: FileClassifier
) -> tuple[CategoryBreakdown, CategoryBreakdown, CategoryBreakdown, CategoryBreakdown]:
    lines_added = CategoryBreakdown()
    lines_deleted = CategoryBreakdown()
    bytes_added = CategoryBreakdown()
    bytes_deleted = CategoryBreakdown()

    for change in commit.files:
        category = classifier.category(change.path).value
        lines_added.add(category, change.lines_added)
        lines_deleted.add(category, change.lines_deleted)
        bytes_added.add(category, change.bytes_added or 0)
        bytes_deleted.add(category, change.bytes_deleted or 0)

    # The commit aggregate is authoritative; anything its file list does not
    # account for is booked as "other" so the categories still sum to it.
    total_bytes_added, total_bytes_deleted = commit_bytes(commit)
    for breakdown, total in (
        (lines_added, commit.lines_added),
        (lines_deleted, commit.lines_deleted),
        (bytes_added, total_bytes_added),
        (bytes_deleted, total_bytes_deleted),
    ):
        residual = total - breakdown.total
        if residual:
            breakdown.add("other", residual)

    return lines_added, lines_deleted, bytes_added, bytes_deleted


def time_series(
    commits: Sequence[CommitRecord],
    classifier: Optional[FileClassifier] = None,
    hourly_threshold_hours: float = DEFAULT_HOURLY_THRESHOLD_HOURS,
) -> list[TimeSeriesPoint]:
    """Bucket commits by hour or day and carry running totals forward.

    The first point is a synthetic all-zero bucket one width before the first
    real bucket. Every bucket between the first and last commit is present,
    even when no commit falls into it.
    """
    if not commits:
        return []

    classifier = classifier or ConfiguredFileClassifier()
    width = bucket_width(commits, hourly_threshold_hours)

    points: dict[datetime, TimeSeriesPoint] = {}
    for commit in commits:
        start = _bucket_start(commit.timestamp, width)
        point = points.get(start)
        if point is None:
            point = points[start] = TimeSeriesPoint(date=start)
        lines_added, lines_deleted, bytes_added, bytes_deleted = _commit_breakdowns(commit, classifier)
        point.commits += 1
        point.commit_shas.append(commit.sha)
        point.lines_added.merge(lines_added)
        point.lines_deleted.merge(lines_deleted)
        point.bytes_added.merge(bytes_added)
        point.bytes_deleted.merge(bytes_deleted)

    first = min(points)
    last = max(points)
    series = [TimeSeriesPoint(date=first - width)]
    cumulative_lines = CategoryBreakdown()
    cumulative_bytes = CategoryBreakdown()

    current = first
    while current <= last:
        point = points.get(current) or TimeSeriesPoint(date=current)
        cumulative_lines.merge(point.lines_added)
        cumulative_lines.subtract(point.lines_deleted)
        cumulative_bytes.merge(point.bytes_added)
        cumulative_bytes.subtract(point.bytes_deleted)
        point.cumulative_lines = cumulative_lines.copy()
        point.cumulative_bytes = cumulative_bytes.copy()
        series.append(point)
        current += width

    logger.debug(
        f"Time series: {len(series)} {'hourly' if width == HOUR else 'daily'} buckets from {len(commits)} commits"
    )
    return series


def linear_series(
    commits: Sequence[CommitRecord],
    baseline_lines: int = 0,
    baseline_bytes: int = 0,
) -> list[LinearSeriesPoint]:
    """One point per commit in input order, preceded by a baseline point at index 0.

    ``baseline_lines`` and ``baseline_bytes`` seed the running totals when the
    commit list starts part-way through a history.
    """
    if not commits:
        return []

    series = [
        LinearSeriesPoint(
            commit_index=0,
            sha=None,
            date=None,
            cumulative_lines=baseline_lines,
            cumulative_bytes=baseline_bytes,
        )
    ]
    cumulative_lines = baseline_lines
    cumulative_bytes = baseline_bytes

    for index, commit in enumerate(commits, start=1):
        bytes_added, bytes_deleted = commit_bytes(commit)
        net_lines = commit.lines_added - commit.lines_deleted
        net_bytes = bytes_added - bytes_deleted
        cumulative_lines += net_lines
        cumulative_bytes += net_bytes
        series.append(
            LinearSeriesPoint(
                commit_index=index,
                sha=commit.sha,
                date=commit.timestamp,
                lines_added=commit.lines_added,
                lines_deleted=commit.lines_deleted,
                net_lines=net_lines,
                bytes_added=bytes_added,
                bytes_deleted=bytes_deleted,
                net_bytes=net_bytes,
                cumulative_lines=cumulative_lines,
                cumulative_bytes=cumulative_bytes,
            )
        )
    return series
