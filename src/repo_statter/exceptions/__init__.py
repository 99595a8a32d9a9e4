"""Exception hierarchy for repo-statter."""

from .analysis import AnalysisError, EmptyInputError, GitSourceError
from .base import RepoStatterError
from .cache import CacheBootstrapError, CacheError, RepositoryStateError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "RepoStatterError",
    "AnalysisError",
    "EmptyInputError",
    "GitSourceError",
    "CacheError",
    "CacheBootstrapError",
    "RepositoryStateError",
    "ConfigurationError",
    "InvalidConfigError",
]
