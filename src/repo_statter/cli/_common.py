"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import RepoStatterConfig, load_config

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    no_cache: bool = False,
    cache_dir: Optional[Path] = None,
    max_commits: Optional[int] = None,
) -> RepoStatterConfig:
    """Build configuration from CLI options."""
    overrides: dict = {}
    cache_overrides: dict = {}
    if no_cache:
        cache_overrides["enabled"] = False
    if cache_dir is not None:
        cache_overrides["base_path"] = str(cache_dir)
    if cache_overrides:
        overrides["cache"] = cache_overrides
    if max_commits is not None:
        overrides["analysis"] = {"max_commits": max_commits}
    return load_config(config_file=config, **overrides)


def format_size(num_bytes: int) -> str:
    size = float(num_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"
