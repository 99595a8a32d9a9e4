"""Pluggable classification of file paths and commit messages.

Calculators never match paths or messages themselves; they ask a
FileClassifier or CommitClassifier, so tests and callers can substitute their
own policy.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import PurePosixPath
from typing import NamedTuple, Optional, Protocol, runtime_checkable

from .config import CommitFilterConfig, FileCategoryConfig


class FileCategory(str, Enum):
    APPLICATION = "application"
    TEST = "test"
    BUILD = "build"
    DOCUMENTATION = "documentation"
    OTHER = "other"


BINARY_FILE_TYPE = "Binary"


@runtime_checkable
class FileClassifier(Protocol):
    def file_type(self, path: str) -> str: ...

    def is_binary(self, path: str) -> bool: ...

    def category(self, path: str) -> FileCategory: ...


class CommitClassification(NamedTuple):
    is_merge: bool
    is_automated: bool

    @property
    def is_real(self) -> bool:
        """True when the commit represents hand-written work."""
        return not (self.is_merge or self.is_automated)


@runtime_checkable
class CommitClassifier(Protocol):
    def classify(self, message: str) -> CommitClassification: ...


class ConfiguredFileClassifier:
    """Classify paths with the extension and pattern tables from configuration.

    Test path patterns win over the file type mapping, so ``tests/foo.py`` is a
    test file rather than application code. Binary files are always OTHER.
    """

    def __init__(self, config: Optional[FileCategoryConfig] = None):
        config = config or FileCategoryConfig()
        self._file_types = {ext.lower(): name for ext, name in config.file_types.items()}
        self._binary_extensions = frozenset(ext.lower() for ext in config.binary_extensions)
        self._test_patterns = tuple(config.test_patterns)
        self._category_mappings = {
            name: FileCategory(category.lower()) for name, category in config.category_mappings.items()
        }

    def _extension(self, path: str) -> str:
        name = PurePosixPath(path).name.lower()
        if name == "dockerfile":
            return ".dockerfile"
        if name in ("makefile", "gnumakefile"):
            return ".makefile"
        if name.startswith(".") and name.count(".") == 1:
            # dotfiles such as .gitignore have no stem
            return name
        return PurePosixPath(name).suffix

    def is_binary(self, path: str) -> bool:
        return self._extension(path) in self._binary_extensions

    def file_type(self, path: str) -> str:
        if self.is_binary(path):
            return BINARY_FILE_TYPE
        ext = self._extension(path)
        if not ext:
            return "Other"
        return self._file_types.get(ext, ext)

    def category(self, path: str) -> FileCategory:
        if self.is_binary(path):
            return FileCategory.OTHER
        # Leading slash so "/tests/" also matches a top-level tests directory
        normalized = "/" + path.replace("\\", "/").lstrip("/")
        if any(pattern in normalized for pattern in self._test_patterns):
            return FileCategory.TEST
        return self._category_mappings.get(self.file_type(path), FileCategory.OTHER)


class PatternCommitClassifier:
    """Flag merge and automated commits by their message.

    Merge patterns are prefixes of the lowercased message; automated patterns
    are regular expressions searched anywhere in it.
    """

    def __init__(self, config: Optional[CommitFilterConfig] = None):
        config = config or CommitFilterConfig()
        self._merge_prefixes = tuple(p.lower() for p in config.merge_patterns)
        self._automated = tuple(re.compile(p, re.IGNORECASE) for p in config.automated_patterns)

    def classify(self, message: str) -> CommitClassification:
        lowered = message.strip().lower()
        is_merge = lowered.startswith(self._merge_prefixes)
        is_automated = any(pattern.search(lowered) for pattern in self._automated)
        return CommitClassification(is_merge=is_merge, is_automated=is_automated)

    def is_real(self, message: str) -> bool:
        return self.classify(message).is_real
