"""CLI entry point; importing the command modules registers them."""

import typer

app = typer.Typer(
    name="repo-statter",
    help="repo-statter - Git repository statistics",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .cache import cache_info as _cache_info, cache_clear as _cache_clear  # noqa: F401, E402
