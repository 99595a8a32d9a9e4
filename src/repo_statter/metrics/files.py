"""File-level metrics: file type distribution, heat ranking, top files.

All three accept an optional ``current_files`` set; when given, only paths in
it are counted, which keeps deleted files out of a report of the current tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AbstractSet, Optional, Sequence

import numpy as np

from ..config import FileHeatConfig
from ..models import CommitRecord, FileHeatRecord, FileTypeStats, TopFileStats

TOP_FILES_LIMIT = 20

_SECONDS_PER_DAY = 86400.0


@dataclass
class _FileTally:
    commit_count: int
    last_modified: datetime
    net_lines: int
    churn: int
    file_type: str


def _tally_files(
    commits: Sequence[CommitRecord], current_files: Optional[AbstractSet[str]] = None
) -> dict[str, _FileTally]:
    """One pass over every file change, keyed by path in first-seen order."""
    tallies: dict[str, _FileTally] = {}
    for commit in commits:
        for change in commit.files:
            if current_files is not None and change.path not in current_files:
                continue
            tally = tallies.get(change.path)
            if tally is None:
                tallies[change.path] = _FileTally(
                    commit_count=1,
                    last_modified=commit.timestamp,
                    net_lines=change.net_lines,
                    churn=change.churn,
                    file_type=change.file_type,
                )
                continue
            tally.commit_count += 1
            tally.net_lines += change.net_lines
            tally.churn += change.churn
            if commit.timestamp > tally.last_modified:
                tally.last_modified = commit.timestamp
    return tallies


def file_type_stats(
    commits: Sequence[CommitRecord], current_files: Optional[AbstractSet[str]] = None
) -> list[FileTypeStats]:
    """Lines added per file type with each type's share of the total."""
    lines_by_type: dict[str, int] = {}
    for commit in commits:
        for change in commit.files:
            if current_files is not None and change.path not in current_files:
                continue
            lines_by_type[change.file_type] = lines_by_type.get(change.file_type, 0) + change.lines_added

    total = sum(lines_by_type.values())
    stats = [
        FileTypeStats(
            file_type=file_type,
            lines=lines,
            percentage=(lines / total) * 100 if total > 0 else 0.0,
        )
        for file_type, lines in lines_by_type.items()
    ]
    return sorted(stats, key=lambda s: -s.lines)


def file_heat(
    commits: Sequence[CommitRecord],
    config: Optional[FileHeatConfig] = None,
    current_files: Optional[AbstractSet[str]] = None,
    now: Optional[datetime] = None,
) -> list[FileHeatRecord]:
    """Rank files by heat score.

    heat = commit_count * frequency_weight
           + exp(-days_since_last_modified / recency_decay_days) * recency_weight

    Results are sorted by heat descending (ties keep first-seen order) and
    truncated to ``config.max_files_displayed``. ``net_lines`` is floored to 1
    so purely-deleted files still have a visible size; ``churn`` is not.
    """
    config = config or FileHeatConfig()
    now = now or datetime.now(timezone.utc)
    tallies = _tally_files(commits, current_files)
    if not tallies:
        return []

    paths = list(tallies)
    counts = np.array([tallies[p].commit_count for p in paths], dtype=float)
    # Future timestamps (clock skew) count as "just modified"
    days_since = np.array(
        [max(0.0, (now - tallies[p].last_modified).total_seconds() / _SECONDS_PER_DAY) for p in paths]
    )
    recency = np.exp(-days_since / config.recency_decay_days)
    scores = counts * config.frequency_weight + recency * config.recency_weight

    order = np.argsort(-scores, kind="stable")[: config.max_files_displayed]
    return [
        FileHeatRecord(
            path=paths[i],
            heat_score=float(scores[i]),
            commit_count=tallies[paths[i]].commit_count,
            last_modified=tallies[paths[i]].last_modified,
            net_lines=max(tallies[paths[i]].net_lines, 1),
            churn=tallies[paths[i]].churn,
            file_type=tallies[paths[i]].file_type,
        )
        for i in order
    ]


def _ranked(values: dict[str, int], limit: int) -> list[TopFileStats]:
    top = sorted(values.items(), key=lambda item: -item[1])[:limit]
    total = sum(value for _, value in top)
    return [
        TopFileStats(path=path, value=value, percentage=(value / total) * 100 if total > 0 else 0.0)
        for path, value in top
    ]


def top_files_by_size(
    commits: Sequence[CommitRecord],
    current_files: Optional[AbstractSet[str]] = None,
    limit: int = TOP_FILES_LIMIT,
) -> list[TopFileStats]:
    """Largest files by net lines; files with zero or negative size are left out."""
    tallies = _tally_files(commits, current_files)
    sizes = {path: t.net_lines for path, t in tallies.items() if t.net_lines > 0}
    return _ranked(sizes, limit)


def top_files_by_churn(
    commits: Sequence[CommitRecord],
    current_files: Optional[AbstractSet[str]] = None,
    limit: int = TOP_FILES_LIMIT,
) -> list[TopFileStats]:
    """Most rewritten files by lines added plus lines deleted."""
    tallies = _tally_files(commits, current_files)
    return _ranked({path: t.churn for path, t in tallies.items()}, limit)
