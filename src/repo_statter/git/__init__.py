"""Commit history sources."""

from .source import GitCommitSource, parse_rename

__all__ = ["GitCommitSource", "parse_rename"]
