"""Cache exceptions.

Only the failures modelled here ever leave the cache layer. Unreadable or
expired entries are logged and reported as misses instead.
"""

from pathlib import Path
from typing import Optional

from .base import RepoStatterError


class CacheError(RepoStatterError):
    """Base class for fatal cache errors."""

    pass


class CacheBootstrapError(CacheError):
    """Raised when the cache storage location cannot be created or opened."""

    def __init__(self, base_path: Path, reason: str):
        super().__init__(
            f"Failed to initialize cache storage at {base_path}",
            details={"base_path": base_path, "reason": reason},
        )
        self.base_path = base_path
        self.reason = reason


class RepositoryStateError(CacheError):
    """Raised when the repository HEAD cannot be resolved for a cache key.

    Without a HEAD commit no staleness decision can be made, so this is never
    downgraded to a cache miss.
    """

    def __init__(self, repo_path: Path, reason: str, timed_out: bool = False, returncode: Optional[int] = None):
        details: dict = {"repo_path": repo_path, "reason": reason}
        if timed_out:
            details["timed_out"] = "true"
        if returncode is not None:
            details["returncode"] = returncode
        super().__init__(f"Failed to get git state for {repo_path}", details=details)
        self.repo_path = repo_path
        self.reason = reason
        self.timed_out = timed_out
        self.returncode = returncode
