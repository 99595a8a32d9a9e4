"""Metric calculators over commit lists."""

from .awards import (
    top_commits_by_bytes_added,
    top_commits_by_bytes_removed,
    top_commits_by_files_modified,
    top_commits_by_lines_added,
    top_commits_by_lines_removed,
)
from .contributors import (
    average_lines_changed_by_contributor,
    contributor_stats,
    highest_average_lines_changed,
    lowest_average_lines_changed,
)
from .files import file_heat, file_type_stats, top_files_by_churn, top_files_by_size
from .pipeline import MetricsPipeline
from .series import linear_series, time_series

__all__ = [
    "MetricsPipeline",
    "average_lines_changed_by_contributor",
    "contributor_stats",
    "file_heat",
    "file_type_stats",
    "highest_average_lines_changed",
    "linear_series",
    "lowest_average_lines_changed",
    "time_series",
    "top_commits_by_bytes_added",
    "top_commits_by_bytes_removed",
    "top_commits_by_files_modified",
    "top_commits_by_lines_added",
    "top_commits_by_lines_removed",
    "top_files_by_churn",
    "top_files_by_size",
]
