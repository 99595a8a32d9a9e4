"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer

from ..cache import AnalysisCache
from ..exceptions import RepoStatterError
from . import app
from ._common import console, format_size, resolve_config

_CACHE_DIR_OPTION = typer.Option(None, "--cache-dir", help="Cache directory (default: from config)")


def _open_cache(cache_dir: Optional[Path]) -> AnalysisCache:
    try:
        settings = resolve_config(cache_dir=cache_dir)
        return AnalysisCache.from_config(settings.cache, cleanup_on_open=False)
    except RepoStatterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def cache_info(cache_dir: Optional[Path] = _CACHE_DIR_OPTION):
    """Show cache information and statistics."""
    with _open_cache(cache_dir) as cache:
        stats = cache.get_cache_stats()

        console.print("[bold cyan]repo-statter Cache Info[/bold cyan]")
        console.print()
        console.print(f"Directory: [blue]{cache.base_path}[/blue]")
        console.print(f"Entries: [yellow]{stats.total_entries}[/yellow]")
        console.print(f"Size: [yellow]{format_size(stats.total_size)}[/yellow]")
        if stats.oldest_entry is not None and stats.newest_entry is not None:
            console.print(f"Oldest: {stats.oldest_entry:%Y-%m-%d %H:%M:%S}")
            console.print(f"Newest: {stats.newest_entry:%Y-%m-%d %H:%M:%S}")


@app.command()
def cache_clear(
    cache_dir: Optional[Path] = _CACHE_DIR_OPTION,
    expired_only: bool = typer.Option(False, "--expired", help="Only remove expired or corrupt entries"),
):
    """Clear the commit cache."""
    with _open_cache(cache_dir) as cache:
        if expired_only:
            removed = cache.cleanup_expired()
            console.print(f"[green]Removed {removed} expired entries[/green]")
        else:
            removed = cache.clear_cache()
            console.print(f"[green]Cache cleared successfully[/green] ({removed} entries)")
