"""Read commit history from a git repository via subprocess."""

from __future__ import annotations

import subprocess
from datetime import datetime, timezone
from fnmatch import fnmatch
from pathlib import Path
from typing import Optional, Sequence, Union

from ..classification import ConfiguredFileClassifier, FileClassifier
from ..config import AnalysisOptions
from ..exceptions import GitSourceError
from ..logging_config import get_logger
from ..models import CommitRecord, FileChange

logger = get_logger(__name__)

# Separators emitted by the log format: record start, field, end of header
_RS = "\x1e"
_FS = "\x1f"
_EOH = "\x1d"
_LOG_FORMAT = "--format=%x1e%H%x1f%an%x1f%ae%x1f%at%x1f%B%x1d"


def parse_rename(path: str) -> tuple[str, Optional[str]]:
    """Split a numstat path into (new_path, old_path).

    Handles both ``old => new`` and the compact ``src/{old => new}/file.py``
    forms. ``old_path`` is None when the path is not a rename.
    """
    if " => " not in path:
        return path, None

    if "{" in path and "}" in path:
        prefix, rest = path.split("{", 1)
        inner, suffix = rest.split("}", 1)
        old_part, new_part = inner.split(" => ", 1)
        old_path = f"{prefix}{old_part}{suffix}".replace("//", "/")
        new_path = f"{prefix}{new_part}{suffix}".replace("//", "/")
        return new_path, old_path

    old_path, new_path = path.split(" => ", 1)
    return new_path, old_path


class GitCommitSource:
    """Produce CommitRecords from ``git log --numstat``, oldest commit first.

    Byte counts are estimated as lines * ``bytes_per_line_estimate``; binary
    files (``-`` in numstat) carry no lines and therefore no bytes. Paths
    matching an exclude pattern are dropped before totals are computed.
    """

    # Maximum git log output size (200MB) to prevent OOM on huge repos
    _MAX_OUTPUT_BYTES = 200 * 1024 * 1024
    _TIMEOUT_SECONDS = 120

    def __init__(
        self,
        options: Optional[AnalysisOptions] = None,
        classifier: Optional[FileClassifier] = None,
        git_executable: str = "git",
    ):
        self.options = options or AnalysisOptions()
        self.classifier = classifier or ConfiguredFileClassifier()
        self.git_executable = git_executable

    def get_commits(self, repo_path: Union[str, Path]) -> list[CommitRecord]:
        """Walk the repository history.

        Raises:
            GitSourceError: If the path is not a readable git repository.
        """
        repo = Path(repo_path).resolve()
        raw = self._run_git_log(repo)
        commits = self.parse_log(raw)
        logger.info(f"Read {len(commits)} commits from {repo}")
        return commits

    def list_tracked_files(self, repo_path: Union[str, Path]) -> set[str]:
        """Paths tracked at HEAD, used to keep deleted files out of file metrics."""
        repo = Path(repo_path).resolve()
        try:
            result = subprocess.run(
                [self.git_executable, "-C", str(repo), "ls-files"],
                capture_output=True,
                text=True,
                timeout=30,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise GitSourceError(repo, f"git ls-files failed: {e}") from e
        if result.returncode != 0:
            raise GitSourceError(repo, result.stderr.strip() or "git ls-files failed", result.returncode)
        return {line for line in result.stdout.splitlines() if line}

    def _build_command(self, repo: Path) -> list[str]:
        cmd = [self.git_executable, "-C", str(repo), "log", _LOG_FORMAT, "--numstat", "--reverse"]
        if self.options.max_commits:
            cmd.append(f"-n{self.options.max_commits}")
        return cmd

    def _run_git_log(self, repo: Path) -> str:
        try:
            # Stream so that unbounded output never sits in memory at once
            proc = subprocess.Popen(
                self._build_command(repo),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise GitSourceError(repo, f"cannot run git: {e}") from e

        try:
            chunks = []
            total_size = 0
            truncated = False
            stdout = proc.stdout
            if stdout is None:
                raise GitSourceError(repo, "git log produced no output stream")
            while True:
                chunk = stdout.read(1024 * 1024)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > self._MAX_OUTPUT_BYTES:
                    logger.warning(
                        "git log output exceeded %dMB limit, truncating",
                        self._MAX_OUTPUT_BYTES // (1024 * 1024),
                    )
                    proc.kill()
                    truncated = True
                    break
                chunks.append(chunk)

            try:
                proc.wait(timeout=self._TIMEOUT_SECONDS)
            except subprocess.TimeoutExpired as e:
                proc.kill()
                proc.wait()
                raise GitSourceError(repo, "git log timed out") from e

            if proc.returncode != 0 and not truncated:
                stderr = proc.stderr.read() if proc.stderr else ""
                raise GitSourceError(repo, stderr.strip() or "git log failed", proc.returncode)
            raw = "".join(chunks)
            if truncated:
                # Drop the partial record at the cut
                cut = raw.rfind(_RS)
                raw = raw[:cut] if cut > 0 else ""
            return raw
        finally:
            if proc.stdout:
                proc.stdout.close()
            if proc.stderr:
                proc.stderr.close()

    def parse_log(self, raw: str) -> list[CommitRecord]:
        """Parse ``git log`` output produced with this source's format string."""
        commits = []
        for record in raw.split(_RS):
            if not record.strip():
                continue
            commit = self._parse_record(record)
            if commit is not None:
                commits.append(commit)
        return commits

    def _parse_record(self, record: str) -> Optional[CommitRecord]:
        header, _, numstat = record.partition(_EOH)
        fields = header.split(_FS, 4)
        if len(fields) != 5:
            logger.debug(f"Skipping malformed git log record: {header[:60]!r}")
            return None
        sha, author_name, author_email, epoch, message = fields
        try:
            timestamp = datetime.fromtimestamp(int(epoch), tz=timezone.utc)
        except ValueError:
            logger.debug(f"Skipping commit {sha} with bad timestamp {epoch!r}")
            return None

        files = self._parse_numstat(numstat)
        lines_added = sum(f.lines_added for f in files)
        lines_deleted = sum(f.lines_deleted for f in files)
        return CommitRecord(
            sha=sha,
            author_name=author_name,
            author_email=author_email,
            timestamp=timestamp,
            message=message.strip(),
            lines_added=lines_added,
            lines_deleted=lines_deleted,
            files=tuple(files),
            bytes_added=sum(f.bytes_added or 0 for f in files),
            bytes_deleted=sum(f.bytes_deleted or 0 for f in files),
        )

    def _parse_numstat(self, numstat: str) -> list[FileChange]:
        per_line = self.options.bytes_per_line_estimate
        files = []
        for line in numstat.splitlines():
            parts = line.split("\t", 2)
            if len(parts) != 3:
                continue
            added_str, deleted_str, raw_path = parts
            path, old_path = parse_rename(raw_path)
            if self.is_excluded(path):
                continue
            # Binary files show "-" for both counts
            added = 0 if added_str == "-" else int(added_str)
            deleted = 0 if deleted_str == "-" else int(deleted_str)
            files.append(
                FileChange(
                    path=path,
                    lines_added=added,
                    lines_deleted=deleted,
                    file_type=self.classifier.file_type(path),
                    bytes_added=added * per_line,
                    bytes_deleted=deleted * per_line,
                    old_path=old_path,
                )
            )
        return files

    def is_excluded(self, path: str, patterns: Optional[Sequence[str]] = None) -> bool:
        """Match ``path`` against glob patterns at any directory depth."""
        patterns = self.options.exclude_patterns if patterns is None else patterns
        name = path.rsplit("/", 1)[-1]
        for pattern in patterns:
            if fnmatch(path, pattern) or fnmatch(name, pattern) or fnmatch(path, f"*/{pattern}"):
                return True
        return False
