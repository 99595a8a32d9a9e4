"""
repo-statter - Git repository statistics

Derives contributor totals, file type distributions, growth curves, file heat
rankings, commit awards and commit message word frequencies from a
repository's history, with a disk cache for commit snapshots.
"""

__version__ = "0.1.0"

from .api import analyze_repository
from .cache import AnalysisCache, RepositoryStateHasher
from .config import RepoStatterConfig, load_config
from .metrics import MetricsPipeline
from .models import CommitRecord, FileChange, ReportMetrics
from .text import TextProcessor

__all__ = [
    "analyze_repository",  # Main entry point
    "AnalysisCache",
    "CommitRecord",
    "FileChange",
    "MetricsPipeline",
    "RepoStatterConfig",
    "ReportMetrics",
    "RepositoryStateHasher",
    "TextProcessor",
    "load_config",
]
