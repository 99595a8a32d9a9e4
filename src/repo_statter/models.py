"""Data models for commit records and the metrics derived from them.

CommitRecord and FileChange are the pipeline's input and are frozen: no
calculator ever mutates them. Everything else is rebuilt from scratch on every
pipeline run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class FileChange:
    path: str
    lines_added: int
    lines_deleted: int
    file_type: str
    bytes_added: Optional[int] = None
    bytes_deleted: Optional[int] = None
    old_path: Optional[str] = None  # set when the change is a rename/move

    @property
    def is_rename(self) -> bool:
        return self.old_path is not None

    @property
    def net_lines(self) -> int:
        return self.lines_added - self.lines_deleted

    @property
    def churn(self) -> int:
        return self.lines_added + self.lines_deleted


@dataclass(frozen=True)
class CommitRecord:
    sha: str
    author_name: str
    author_email: str
    timestamp: datetime  # timezone-aware, naive values are taken as UTC
    message: str
    lines_added: int
    lines_deleted: int
    files: tuple[FileChange, ...] = ()
    bytes_added: Optional[int] = None
    bytes_deleted: Optional[int] = None

    def __post_init__(self) -> None:
        if self.timestamp.tzinfo is None:
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=timezone.utc))
        if not isinstance(self.files, tuple):
            object.__setattr__(self, "files", tuple(self.files))

    @property
    def net_lines(self) -> int:
        return self.lines_added - self.lines_deleted

    @property
    def net_bytes(self) -> int:
        return (self.bytes_added or 0) - (self.bytes_deleted or 0)

    @property
    def lines_changed(self) -> int:
        return self.lines_added + self.lines_deleted


@dataclass
class ContributorStats:
    name: str
    commits: int = 0
    lines_added: int = 0
    lines_deleted: int = 0


@dataclass
class ContributorAward:
    name: str
    commits: int
    average_lines_changed: float


@dataclass
class FileTypeStats:
    file_type: str
    lines: int
    percentage: float


CATEGORY_FIELDS = ("application", "test", "build", "documentation", "other")


@dataclass
class CategoryBreakdown:
    """Per-category totals; the five categories always sum to ``total``."""

    total: int = 0
    application: int = 0
    test: int = 0
    build: int = 0
    documentation: int = 0
    other: int = 0

    def add(self, category: str, value: int) -> None:
        if category not in CATEGORY_FIELDS:
            raise ValueError(f"Unknown file category: {category}")
        self.total += value
        setattr(self, category, getattr(self, category) + value)

    def merge(self, other: CategoryBreakdown) -> None:
        self.total += other.total
        for name in CATEGORY_FIELDS:
            setattr(self, name, getattr(self, name) + getattr(other, name))

    def subtract(self, other: CategoryBreakdown) -> None:
        self.total -= other.total
        for name in CATEGORY_FIELDS:
            setattr(self, name, getattr(self, name) - getattr(other, name))

    def copy(self) -> CategoryBreakdown:
        return CategoryBreakdown(
            total=self.total,
            application=self.application,
            test=self.test,
            build=self.build,
            documentation=self.documentation,
            other=self.other,
        )

    def category_sum(self) -> int:
        return sum(getattr(self, name) for name in CATEGORY_FIELDS)


@dataclass
class TimeSeriesPoint:
    date: datetime  # bucket start (UTC)
    commits: int = 0
    commit_shas: list[str] = field(default_factory=list)
    lines_added: CategoryBreakdown = field(default_factory=CategoryBreakdown)
    lines_deleted: CategoryBreakdown = field(default_factory=CategoryBreakdown)
    cumulative_lines: CategoryBreakdown = field(default_factory=CategoryBreakdown)
    bytes_added: CategoryBreakdown = field(default_factory=CategoryBreakdown)
    bytes_deleted: CategoryBreakdown = field(default_factory=CategoryBreakdown)
    cumulative_bytes: CategoryBreakdown = field(default_factory=CategoryBreakdown)


@dataclass
class LinearSeriesPoint:
    commit_index: int
    sha: Optional[str]  # None for the synthetic baseline point
    date: Optional[datetime]
    lines_added: int = 0
    lines_deleted: int = 0
    net_lines: int = 0
    bytes_added: int = 0
    bytes_deleted: int = 0
    net_bytes: int = 0
    cumulative_lines: int = 0
    cumulative_bytes: int = 0


@dataclass
class FileHeatRecord:
    path: str
    heat_score: float
    commit_count: int
    last_modified: datetime
    net_lines: int  # floored to 1 for display
    churn: int
    file_type: str


@dataclass
class TopFileStats:
    path: str
    value: int
    percentage: float


@dataclass
class CommitAward:
    sha: str
    author_name: str
    date: datetime
    message: str
    value: int


@dataclass
class WordFrequencyEntry:
    word: str
    count: int
    size: float


@dataclass(frozen=True)
class FileAnalysisResult:
    """Per-file analysis stored in the cache's analysis partition."""

    path: str
    language: str
    complexity: float
    lines: int
    size_bytes: int
    is_binary: bool = False


@dataclass
class Awards:
    top_contributors: list[ContributorStats] = field(default_factory=list)
    most_files_modified: list[CommitAward] = field(default_factory=list)
    most_bytes_added: list[CommitAward] = field(default_factory=list)
    most_bytes_removed: list[CommitAward] = field(default_factory=list)
    most_lines_added: list[CommitAward] = field(default_factory=list)
    most_lines_removed: list[CommitAward] = field(default_factory=list)
    lowest_average_lines_changed: list[ContributorAward] = field(default_factory=list)
    highest_average_lines_changed: list[ContributorAward] = field(default_factory=list)


@dataclass
class ReportMetrics:
    """Everything a report needs, derived from one commit list."""

    total_commits: int
    contributors: list[ContributorStats]
    file_types: list[FileTypeStats]
    file_heat: list[FileHeatRecord]
    top_files_by_size: list[TopFileStats]
    top_files_by_churn: list[TopFileStats]
    time_series: list[TimeSeriesPoint]
    linear_series: list[LinearSeriesPoint]
    awards: Awards
    word_frequencies: list[WordFrequencyEntry]

    @property
    def total_lines_of_code(self) -> int:
        if not self.linear_series:
            return 0
        return self.linear_series[-1].cumulative_lines

    @property
    def total_code_churn(self) -> int:
        return sum(p.lines_added + p.lines_deleted for p in self.linear_series)
