"""Configuration loading and management for repo-statter.

Configuration is a tree of frozen dataclasses, one per concern. Sources are
merged in priority order:
    1. Defaults (defined on each section dataclass)
    2. Global config (~/.repo-statter.toml)
    3. Project config (./repo-statter.toml)
    4. Explicit config file (if given)
    5. Environment variables (REPO_STATTER_<SECTION>_<FIELD>)
    6. Keyword overrides (typically from CLI flags)

Example:
    >>> config = load_config(file_heat={"max_files_displayed": 20})
    >>> config.file_heat.max_files_displayed
    20
"""

from __future__ import annotations

import os
import tempfile
import tomllib
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

ENV_PREFIX = "REPO_STATTER_"
_NOT_SETTABLE = object()

DEFAULT_STOP_WORDS = (
    "the", "is", "are", "was", "were", "been", "be", "have", "has", "had",
    "do", "does", "did", "will", "would", "should", "could", "may", "might", "must",
    "can", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "up", "about", "into", "through", "during", "before",
    "after", "above", "below", "between", "under", "since", "without", "within", "along",
    "following", "across", "behind", "beyond", "plus", "except", "yet", "so",
    "if", "then", "than", "such", "both", "either", "neither", "all", "each",
    "every", "any", "some", "no", "not", "only", "just", "also", "very",
    "too", "quite", "almost", "always", "often", "never", "seldom", "rarely", "usually",
    "generally", "sometimes", "now", "once", "twice", "first", "second", "last",
    "next", "previous", "few", "many", "much", "more", "most", "less", "least",
    "own", "same", "other", "another", "what", "which", "who", "whom",
    "whose", "where", "when", "why", "how", "here", "there", "everywhere",
    "anywhere", "somewhere", "nowhere", "this", "that", "these", "those", "it", "its",
    "they", "them", "their", "theirs", "we", "us", "our", "ours", "you",
    "your", "yours", "he", "him", "his", "she", "her", "hers", "i",
    "me", "my", "mine", "myself", "yourself", "himself", "herself", "itself", "ourselves",
    "yourselves", "themselves", "yes", "as", "because", "while", "until", "although",
    "though", "unless", "however", "therefore", "thus", "hence", "moreover", "furthermore",
    "meanwhile",
)

DEFAULT_FILE_TYPES = {
    ".ts": "TypeScript", ".tsx": "TypeScript", ".js": "JavaScript", ".jsx": "JavaScript",
    ".css": "CSS", ".scss": "SCSS", ".sass": "SCSS", ".html": "HTML", ".json": "JSON",
    ".md": "Markdown", ".py": "Python", ".java": "Java", ".cpp": "C++", ".cc": "C++",
    ".cxx": "C++", ".c": "C", ".go": "Go", ".rs": "Rust", ".php": "PHP", ".rb": "Ruby",
    ".swift": "Swift", ".kt": "Kotlin", ".yaml": "YAML", ".yml": "YAML", ".xml": "XML",
    ".sh": "Shell", ".bash": "Shell", ".zsh": "Shell", ".fish": "Shell",
    ".ps1": "PowerShell", ".psm1": "PowerShell", ".psd1": "PowerShell",
    ".bat": "Batch", ".cmd": "Batch", ".dockerfile": "Dockerfile",
    ".makefile": "Makefile", ".mk": "Makefile", ".gitignore": "Git", ".gitattributes": "Git",
    ".toml": "TOML", ".ini": "INI", ".cfg": "Config", ".conf": "Config",
    ".properties": "Properties", ".env": "Environment", ".sql": "SQL", ".r": "R",
    ".scala": "Scala", ".gradle": "Gradle", ".lua": "Lua", ".vim": "VimScript",
    ".pl": "Perl", ".pm": "Perl", ".rst": "reStructuredText", ".txt": "Text",
}

DEFAULT_BINARY_EXTENSIONS = (
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".ico", ".svg", ".webp",
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    ".zip", ".tar", ".gz", ".bz2", ".7z", ".rar",
    ".exe", ".dll", ".so", ".dylib", ".lib", ".a",
    ".class", ".jar", ".war", ".ear", ".pyc", ".pyo",
    ".ttf", ".otf", ".woff", ".woff2", ".eot",
    ".mp3", ".mp4", ".avi", ".mov", ".wmv", ".flv",
    ".db", ".sqlite", ".sqlite3", ".bin", ".dat", ".img", ".iso",
)

DEFAULT_CATEGORY_MAPPINGS = {
    **{
        lang: "application"
        for lang in (
            "TypeScript", "JavaScript", "Python", "Java", "C++", "C", "Go", "Rust",
            "PHP", "Ruby", "Swift", "Kotlin", "Scala", "R", "Lua", "Perl",
            "CSS", "SCSS", "HTML", "SQL",
        )
    },
    **{
        kind: "build"
        for kind in (
            "JSON", "YAML", "XML", "Shell", "PowerShell", "Batch", "Dockerfile",
            "Makefile", "Git", "TOML", "INI", "Config", "Properties", "Environment",
            "Gradle", "VimScript",
        )
    },
    "Markdown": "documentation",
    "reStructuredText": "documentation",
    "Text": "documentation",
    "Binary": "other",
}

DEFAULT_TEST_PATTERNS = (".test.", ".spec.", "_test.", "/test/", "/tests/", "/__tests__/")

DEFAULT_MERGE_PATTERNS = (
    "merge remote-tracking branch",
    "merge branch",
    "merge pull request",
)

DEFAULT_AUTOMATED_PATTERNS = (
    r"resolved conflict",
    r"resolving conflict",
    r"accept.*conflict",
    r"conflict.*accept",
    r"auto-merge",
    r"automated merge",
    r'revert "',
    r"bump version",
    r"update dependencies",
    r"update dependency",
    r"renovate\[bot\]",
    r"dependabot\[bot\]",
    r"whitesource",
    r"accepting remote",
    r"accepting local",
    r"accepting incoming",
    r"accepting current",
)

DEFAULT_EXCLUDE_PATTERNS = (
    "*.lock",
    "package-lock.json",
    "pnpm-lock.yaml",
    "node_modules/*",
    "dist/*",
    "build/*",
    "vendor/*",
    "coverage/*",
    ".git/*",
    "__pycache__/*",
    "*.pyc",
    ".DS_Store",
)


@dataclass(frozen=True)
class CacheConfig:
    """Commit snapshot cache settings.

    Attributes:
        enabled: Read and write the cache at all
        base_path: Root directory holding both cache partitions
        idle_timeout_seconds: Entry expires this long after its last read (None = never)
        max_age_seconds: Entry expires this long after creation (None = never)
    """

    enabled: bool = True
    base_path: str = str(Path(tempfile.gettempdir()) / "repo-statter-cache")
    idle_timeout_seconds: Optional[float] = 7 * 24 * 3600.0
    max_age_seconds: Optional[float] = 30 * 24 * 3600.0

    def __post_init__(self) -> None:
        if self.idle_timeout_seconds is not None and self.idle_timeout_seconds <= 0:
            raise InvalidConfigError(
                "cache.idle_timeout_seconds", self.idle_timeout_seconds, "must be positive"
            )
        if self.max_age_seconds is not None and self.max_age_seconds <= 0:
            raise InvalidConfigError("cache.max_age_seconds", self.max_age_seconds, "must be positive")


@dataclass(frozen=True)
class AnalysisOptions:
    """Commit extraction and aggregation parameters."""

    max_commits: Optional[int] = None
    bytes_per_line_estimate: int = 50
    # Repositories younger than this are bucketed hourly instead of daily
    time_series_hourly_threshold_hours: float = 48.0
    author_aliases: dict[str, str] = field(default_factory=dict)
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))

    def __post_init__(self) -> None:
        if self.max_commits is not None and self.max_commits < 1:
            raise InvalidConfigError("analysis.max_commits", self.max_commits, "must be at least 1")
        if self.bytes_per_line_estimate < 0:
            raise InvalidConfigError(
                "analysis.bytes_per_line_estimate", self.bytes_per_line_estimate, "must be non-negative"
            )
        if self.time_series_hourly_threshold_hours <= 0:
            raise InvalidConfigError(
                "analysis.time_series_hourly_threshold_hours",
                self.time_series_hourly_threshold_hours,
                "must be positive",
            )


@dataclass(frozen=True)
class FileHeatConfig:
    """File heat scoring.

    heat = commit_count * frequency_weight + exp(-days / recency_decay_days) * recency_weight
    """

    recency_decay_days: float = 30.0
    frequency_weight: float = 0.4
    recency_weight: float = 0.6
    max_files_displayed: int = 100

    def __post_init__(self) -> None:
        if self.recency_decay_days <= 0:
            raise InvalidConfigError(
                "file_heat.recency_decay_days", self.recency_decay_days, "must be positive"
            )
        for name in ("frequency_weight", "recency_weight"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigError(f"file_heat.{name}", value, "must be between 0.0 and 1.0")
        weight_sum = self.frequency_weight + self.recency_weight
        if abs(weight_sum - 1.0) > 0.001:
            raise InvalidConfigError(
                "file_heat.weights", f"{weight_sum:.3f}", "frequency_weight + recency_weight must equal 1.0"
            )
        if self.max_files_displayed < 1:
            raise InvalidConfigError(
                "file_heat.max_files_displayed", self.max_files_displayed, "must be at least 1"
            )


@dataclass(frozen=True)
class WordCloudConfig:
    """Commit message word frequency settings."""

    min_word_length: int = 3
    max_words: int = 100
    min_size: float = 10.0
    max_size: float = 80.0

    def __post_init__(self) -> None:
        if self.min_word_length < 1:
            raise InvalidConfigError("word_cloud.min_word_length", self.min_word_length, "must be at least 1")
        if self.max_words < 1:
            raise InvalidConfigError("word_cloud.max_words", self.max_words, "must be at least 1")
        if self.min_size < 0 or self.max_size < self.min_size:
            raise InvalidConfigError(
                "word_cloud.size_range",
                f"[{self.min_size}, {self.max_size}]",
                "need 0 <= min_size <= max_size",
            )


@dataclass(frozen=True)
class TextAnalysisConfig:
    """Words discarded before counting commit message frequencies."""

    stop_words: list[str] = field(default_factory=lambda: list(DEFAULT_STOP_WORDS))


@dataclass(frozen=True)
class FileCategoryConfig:
    """Path -> file type -> category classification tables."""

    file_types: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_FILE_TYPES))
    binary_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_BINARY_EXTENSIONS))
    test_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_TEST_PATTERNS))
    category_mappings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_MAPPINGS))

    def __post_init__(self) -> None:
        valid = {"application", "test", "build", "documentation", "other"}
        for file_type, category in self.category_mappings.items():
            if category.lower() not in valid:
                raise InvalidConfigError(
                    f"file_categories.category_mappings.{file_type}",
                    category,
                    f"must be one of {sorted(valid)}",
                )


@dataclass(frozen=True)
class CommitFilterConfig:
    """Message patterns marking merge and automated commits (case-insensitive)."""

    merge_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_MERGE_PATTERNS))
    automated_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_AUTOMATED_PATTERNS))


@dataclass(frozen=True)
class RepoStatterConfig:
    """Root configuration object handed to every component."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    analysis: AnalysisOptions = field(default_factory=AnalysisOptions)
    file_heat: FileHeatConfig = field(default_factory=FileHeatConfig)
    word_cloud: WordCloudConfig = field(default_factory=WordCloudConfig)
    text_analysis: TextAnalysisConfig = field(default_factory=TextAnalysisConfig)
    file_categories: FileCategoryConfig = field(default_factory=FileCategoryConfig)
    commit_filters: CommitFilterConfig = field(default_factory=CommitFilterConfig)


DEFAULT_CONFIG = RepoStatterConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> RepoStatterConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit TOML file
        **overrides: Per-section overrides, either a section dataclass or a
            mapping of field values (e.g. ``cache={"enabled": False}``)

    Returns:
        Validated RepoStatterConfig

    Raises:
        ConfigurationError: If a file is missing or malformed, or a section
            contains unknown keys
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, dict[str, Any]] = {}

    global_config = Path.home() / ".repo-statter.toml"
    if global_config.exists():
        _merge_sections(merged, _load_toml_file(global_config))

    project_config = Path.cwd() / "repo-statter.toml"
    if project_config.exists():
        _merge_sections(merged, _load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        _merge_sections(merged, _load_toml_file(config_file))

    _merge_sections(merged, _load_env_vars())

    sections: dict[str, Any] = {}
    for name, value in overrides.items():
        if is_dataclass(value):
            sections[name] = value
            merged.pop(name, None)
        elif isinstance(value, dict):
            merged.setdefault(name, {}).update(value)
        else:
            raise ConfigurationError(f"Override for '{name}' must be a mapping or a section object")

    section_types = get_type_hints(RepoStatterConfig)
    for name, values in merged.items():
        section_cls = section_types.get(name)
        if section_cls is None:
            raise ConfigurationError(f"Unknown configuration section: [{name}]")
        try:
            sections[name] = section_cls(**values)
        except TypeError as e:
            raise ConfigurationError(f"Invalid [{name}] config: {e}")

    try:
        return RepoStatterConfig(**sections)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _merge_sections(dst: dict[str, dict[str, Any]], src: dict[str, Any]) -> None:
    for name, values in src.items():
        if not isinstance(values, dict):
            raise ConfigurationError(f"Configuration key '{name}' must be a [table]")
        dst.setdefault(name, {}).update(values)


def _load_env_vars() -> dict[str, dict[str, Any]]:
    """Collect REPO_STATTER_<SECTION>_<FIELD> overrides for scalar fields.

    Examples: REPO_STATTER_CACHE_ENABLED=false,
    REPO_STATTER_FILE_HEAT_MAX_FILES_DISPLAYED=20.
    """
    result: dict[str, dict[str, Any]] = {}
    section_types = get_type_hints(RepoStatterConfig)

    for section_name, section_cls in section_types.items():
        field_types = get_type_hints(section_cls)
        for f in fields(section_cls):
            env_key = f"{ENV_PREFIX}{section_name.upper()}_{f.name.upper()}"
            env_value = os.environ.get(env_key)
            if env_value is None:
                continue
            try:
                parsed = _parse_env_value(env_value, field_types[f.name])
            except ValueError as e:
                raise InvalidConfigError(env_key, env_value, str(e))
            if parsed is not _NOT_SETTABLE:
                result.setdefault(section_name, {})[f.name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment string into the field's type.

    Returns _NOT_SETTABLE for container fields, which cannot be set from
    the environment.
    """
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        if value.lower() in ("", "none", "null"):
            return None
        non_none = [t for t in args if t is not type(None)]
        type_hint = non_none[0] if non_none else type_hint

    origin = getattr(type_hint, "__origin__", None)
    if origin in (list, dict):
        return _NOT_SETTABLE

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str:
        return value

    return _NOT_SETTABLE


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
