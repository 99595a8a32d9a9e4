"""Analysis-related exceptions: caller contract violations and source failures."""

from pathlib import Path
from typing import Optional

from .base import RepoStatterError


class AnalysisError(RepoStatterError):
    """Base class for metric computation errors."""

    pass


class EmptyInputError(AnalysisError):
    """Raised when a calculator that requires data is handed none.

    An empty result would be indistinguishable from "zero real data", so
    calculators that cannot give a meaningful answer raise instead.
    """

    def __init__(self, operation: str, what: str = "commits"):
        super().__init__(
            f"Cannot compute {operation} from an empty list of {what}",
            details={"operation": operation, "input": what},
        )
        self.operation = operation
        self.what = what


class GitSourceError(AnalysisError):
    """Raised when commit history cannot be read from a repository."""

    def __init__(self, repo_path: Path, reason: str, returncode: Optional[int] = None):
        details: dict = {"repo_path": repo_path, "reason": reason}
        if returncode is not None:
            details["returncode"] = returncode
        super().__init__(f"Cannot read git history: {repo_path}", details=details)
        self.repo_path = repo_path
        self.reason = reason
        self.returncode = returncode
