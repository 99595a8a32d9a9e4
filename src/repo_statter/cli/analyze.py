"""Main analysis command."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..api import analyze_repository
from ..exceptions import RepoStatterError
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config
from ._output import metrics_to_json, output_rich


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Repository to analyze (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Read history from git without the commit cache",
    ),
    max_commits: Optional[int] = typer.Option(
        None,
        "--max-commits",
        help="Only analyze the most recent N commits",
        min=1,
    ),
    current_files: bool = typer.Option(
        False,
        "--current-files",
        help="Limit file metrics to files tracked at HEAD",
    ),
    top: int = typer.Option(10, "--top", help="Rows per table", min=1),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
):
    """
    Compute contributor, file and growth statistics for a git repository.

    [bold cyan]Examples:[/bold cyan]

      repo-statter analyze

      repo-statter analyze /path/to/repo --json

      repo-statter analyze --max-commits 500 --no-cache
    """
    logger = setup_logging(verbose=verbose, quiet=json_output and not verbose)

    try:
        settings = resolve_config(config=config, no_cache=no_cache, max_commits=max_commits)
        metrics = analyze_repository(path, config=settings, current_files_only=current_files)
    except RepoStatterError as e:
        if json_output:
            print(json.dumps({"error": e.to_dict()}, indent=2))
        else:
            logger.error(f"{e.__class__.__name__}: {e}")
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    if json_output:
        print(metrics_to_json(metrics))
    else:
        output_rich(metrics, top=top)
