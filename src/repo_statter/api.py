"""Public API for repo-statter.

Example:
    >>> from repo_statter import analyze_repository
    >>> metrics = analyze_repository("/path/to/repo")
    >>> metrics.contributors[0].name
    'Alice'
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol, Union

from .cache import AnalysisCache, RepositoryStateHasher
from .classification import ConfiguredFileClassifier
from .config import RepoStatterConfig, load_config
from .git import GitCommitSource
from .logging_config import get_logger
from .metrics import MetricsPipeline
from .models import CommitRecord, ReportMetrics

logger = get_logger(__name__)


class CommitSource(Protocol):
    def get_commits(self, repo_path: Union[str, Path]) -> list[CommitRecord]: ...


def load_commits(
    repo_path: Union[str, Path],
    source: CommitSource,
    cache: Optional[AnalysisCache] = None,
    hasher: Optional[RepositoryStateHasher] = None,
) -> list[CommitRecord]:
    """Cached commit snapshot for the repository's current state, or a fresh read.

    The strict HEAD lookup runs first so that an unreadable repository stops
    here instead of being hashed into a fingerprint without a HEAD.
    """
    if cache is None:
        return source.get_commits(repo_path)

    hasher = hasher or RepositoryStateHasher()
    head = hasher.get_head_commit(repo_path)
    fingerprint = hasher.fingerprint(repo_path)
    logger.debug(f"Repository {repo_path} at {head[:12]} has fingerprint {fingerprint}")

    commits = cache.get_commits(repo_path, fingerprint)
    if commits is not None:
        return commits

    commits = source.get_commits(repo_path)
    cache.set_commits(repo_path, fingerprint, commits)
    return commits


def analyze_repository(
    repo_path: Union[str, Path] = ".",
    config: Optional[RepoStatterConfig] = None,
    cache: Optional[AnalysisCache] = None,
    source: Optional[CommitSource] = None,
    hasher: Optional[RepositoryStateHasher] = None,
    current_files_only: bool = False,
    now: Optional[datetime] = None,
) -> ReportMetrics:
    """Compute every report metric for a repository.

    Flow: fingerprint the repository, look up the cached commit snapshot,
    read fresh commits on a miss and write them back, then run the metrics
    pipeline. Metrics themselves are never cached.

    Args:
        repo_path: Repository root
        config: Configuration (default: ``load_config()``)
        cache: Cache to use; when omitted one is opened from ``config.cache``
            if caching is enabled
        source: Commit source (default: GitCommitSource)
        hasher: Repository state hasher (default: RepositoryStateHasher)
        current_files_only: Restrict file metrics to paths tracked at HEAD
        now: Reference time for file heat recency

    Raises:
        RepositoryStateError: If HEAD cannot be resolved while caching
        GitSourceError: If the repository history cannot be read
        EmptyInputError: If the repository has no commits to analyze
    """
    config = config or load_config()
    file_classifier = ConfiguredFileClassifier(config.file_categories)
    git_source = GitCommitSource(config.analysis, file_classifier)
    source = source or git_source

    logger.info(f"Starting analysis of {repo_path}")

    owns_cache = cache is None and config.cache.enabled
    if owns_cache:
        cache = AnalysisCache.from_config(config.cache)
    try:
        commits = load_commits(repo_path, source, cache, hasher)
    finally:
        if owns_cache and cache is not None:
            cache.close()

    current_files = git_source.list_tracked_files(repo_path) if current_files_only else None
    pipeline = MetricsPipeline(config, file_classifier=file_classifier)
    return pipeline.run(commits, current_files=current_files, now=now)
