"""Rendering of ReportMetrics for the terminal and as JSON."""

from __future__ import annotations

import dataclasses
import json

from rich.table import Table

from ..models import CommitAward, ReportMetrics
from ._common import console


def metrics_to_json(metrics: ReportMetrics) -> str:
    data = dataclasses.asdict(metrics)
    data["total_lines_of_code"] = metrics.total_lines_of_code
    data["total_code_churn"] = metrics.total_code_churn
    return json.dumps(data, indent=2, default=str)


def _first_line(message: str, width: int = 60) -> str:
    line = message.splitlines()[0] if message else ""
    return line if len(line) <= width else line[: width - 1] + "…"


def _award_table(title: str, awards: list[CommitAward], unit: str) -> Table:
    table = Table(title=title, show_header=True, title_justify="left")
    table.add_column("Commit", style="dim")
    table.add_column("Author")
    table.add_column(unit, justify="right")
    table.add_column("Message")
    for award in awards:
        table.add_row(award.sha[:8], award.author_name, f"{award.value:,}", _first_line(award.message))
    return table


def output_rich(metrics: ReportMetrics, top: int = 10) -> None:
    console.print()
    console.print(
        f"[bold cyan]REPOSITORY STATS[/bold cyan] -- {metrics.total_commits} commits, "
        f"{len(metrics.contributors)} contributors, "
        f"{metrics.total_lines_of_code:,} lines of code"
    )
    console.print()

    table = Table(title="Contributors", show_header=True, title_justify="left")
    table.add_column("Name", min_width=20)
    table.add_column("Commits", justify="right")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Deleted", justify="right", style="red")
    for c in metrics.contributors[:top]:
        table.add_row(c.name, str(c.commits), f"{c.lines_added:,}", f"{c.lines_deleted:,}")
    console.print(table)

    if metrics.file_types:
        table = Table(title="File types", show_header=True, title_justify="left")
        table.add_column("Type")
        table.add_column("Lines", justify="right")
        table.add_column("Share", justify="right")
        for ft in metrics.file_types[:top]:
            table.add_row(ft.file_type, f"{ft.lines:,}", f"{ft.percentage:.1f}%")
        console.print(table)

    if metrics.file_heat:
        table = Table(title="Hot files", show_header=True, title_justify="left")
        table.add_column("Path")
        table.add_column("Heat", justify="right")
        table.add_column("Commits", justify="right")
        table.add_column("Last modified")
        for record in metrics.file_heat[:top]:
            table.add_row(
                record.path,
                f"{record.heat_score:.2f}",
                str(record.commit_count),
                record.last_modified.strftime("%Y-%m-%d"),
            )
        console.print(table)

    awards = metrics.awards
    for title, entries, unit in (
        ("Most files modified", awards.most_files_modified, "Files"),
        ("Most lines added", awards.most_lines_added, "Lines"),
        ("Most lines removed", awards.most_lines_removed, "Lines"),
    ):
        if entries:
            console.print(_award_table(title, entries, unit))

    if awards.highest_average_lines_changed:
        table = Table(title="Largest average commits", show_header=True, title_justify="left")
        table.add_column("Name")
        table.add_column("Commits", justify="right")
        table.add_column("Avg lines", justify="right")
        for award in awards.highest_average_lines_changed:
            table.add_row(award.name, str(award.commits), f"{award.average_lines_changed:.1f}")
        console.print(table)

    if metrics.word_frequencies:
        words = ", ".join(f"{w.word} ({w.count})" for w in metrics.word_frequencies[: top * 2])
        console.print(f"[bold]Common words:[/bold] {words}")
    console.print()
