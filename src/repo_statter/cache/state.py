"""Repository state fingerprints used as cache keys.

Two lookups live here with deliberately different failure modes:

* ``fingerprint()`` is lenient. Each git lookup that fails (no remote, no
  commits, not a repository) is left out of the hash input, so it always
  returns a value.
* ``head_state_hash()`` is strict. It resolves HEAD under a hard timeout and
  raises RepositoryStateError on timeout, spawn failure or non-zero exit.
"""

from __future__ import annotations

import hashlib
import subprocess
from pathlib import Path
from typing import Optional, Union

from ..exceptions import RepositoryStateError
from ..logging_config import get_logger

logger = get_logger(__name__)

HEAD_LOOKUP_TIMEOUT_SECONDS = 5.0
FINGERPRINT_LENGTH = 16


class RepositoryStateHasher:
    """Derive stable identifiers from repository identity and HEAD."""

    def __init__(self, git_executable: str = "git", timeout: float = HEAD_LOOKUP_TIMEOUT_SECONDS):
        self.git_executable = git_executable
        self.timeout = timeout

    def fingerprint(self, repo_path: Union[str, Path]) -> str:
        """Short fingerprint of (path, HEAD, origin URL, root commit).

        Identical inputs always give the same fingerprint; moving HEAD or
        changing the remote changes it.
        """
        resolved = str(Path(repo_path).resolve())
        inputs = [resolved]

        for args in (
            ("rev-parse", "HEAD"),
            ("config", "--get", "remote.origin.url"),
            ("rev-list", "--max-parents=0", "HEAD"),
        ):
            value = self._try_git(resolved, *args)
            if value:
                inputs.append(value)

        combined = "|".join(inputs)
        return hashlib.sha256(combined.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]

    def get_head_commit(self, repo_path: Union[str, Path]) -> str:
        """Resolve HEAD, failing loudly.

        Raises:
            RepositoryStateError: If git cannot be run, exits non-zero, prints
                nothing, or does not finish within ``self.timeout`` seconds.
                On timeout the child process is killed before raising.
        """
        path = Path(repo_path)
        try:
            result = subprocess.run(
                [self.git_executable, "rev-parse", "HEAD"],
                cwd=str(path),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            # subprocess.run kills the child before re-raising
            raise RepositoryStateError(
                path, f"git rev-parse HEAD timed out after {self.timeout:g}s", timed_out=True
            )
        except OSError as e:
            raise RepositoryStateError(path, f"failed to spawn git process: {e}")

        if result.returncode != 0:
            raise RepositoryStateError(
                path, result.stderr.strip() or "git rev-parse HEAD failed", returncode=result.returncode
            )

        head = result.stdout.strip()
        if not head:
            raise RepositoryStateError(path, "git rev-parse HEAD printed nothing")
        return head

    def head_state_hash(self, repo_path: Union[str, Path]) -> str:
        """Full sha256 of the resolved path and HEAD commit (strict)."""
        resolved = str(Path(repo_path).resolve())
        head = self.get_head_commit(resolved)
        digest = hashlib.sha256()
        digest.update(resolved.encode("utf-8"))
        digest.update(head.encode("utf-8"))
        return digest.hexdigest()

    def _try_git(self, repo_path: str, *args: str) -> Optional[str]:
        try:
            result = subprocess.run(
                [self.git_executable, "-C", repo_path, *args],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("git %s unavailable for %s: %s", " ".join(args), repo_path, e)
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None


def compute_state_fingerprint(repo_path: Union[str, Path]) -> str:
    """Fingerprint with the default hasher."""
    return RepositoryStateHasher().fingerprint(repo_path)
