"""Root of the repo-statter exception hierarchy."""

from typing import Any, Dict, Mapping, Optional


class RepoStatterError(Exception):
    """Base exception for all repo-statter errors.

    ``details`` carries the context a user needs to act on the failure
    (repository path, git return code, offending config key). Values are
    stored as strings so the error renders the same in a terminal and in
    ``--json`` output.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = {k: str(v) for k, v in (details or {}).items()}

    def to_dict(self) -> Dict[str, Any]:
        return {"type": type(self).__name__, "message": self.message, "details": dict(self.details)}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message
