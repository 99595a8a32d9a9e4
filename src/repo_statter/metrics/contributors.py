"""Per-contributor aggregation and the average-lines-changed awards."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..classification import CommitClassifier, PatternCommitClassifier
from ..exceptions import EmptyInputError
from ..models import CommitRecord, ContributorAward, ContributorStats

# Contributors with fewer qualifying commits are left out of the averages
MIN_COMMITS_FOR_AVERAGE = 5
AWARD_LIMIT = 5


def _author_key(commit: CommitRecord, aliases: Optional[Mapping[str, str]]) -> str:
    if aliases:
        return aliases.get(commit.author_name, commit.author_name)
    return commit.author_name


def contributor_stats(
    commits: Sequence[CommitRecord],
    author_aliases: Optional[Mapping[str, str]] = None,
) -> list[ContributorStats]:
    """Fold commits into one ContributorStats per author.

    Sorted by commit count descending; contributors with equal counts keep
    the order in which they first appear in ``commits``.

    Raises:
        EmptyInputError: If ``commits`` is empty.
    """
    if not commits:
        raise EmptyInputError("contributor stats")

    by_author: dict[str, ContributorStats] = {}
    for commit in commits:
        name = _author_key(commit, author_aliases)
        stats = by_author.get(name)
        if stats is None:
            stats = by_author[name] = ContributorStats(name=name)
        stats.commits += 1
        stats.lines_added += commit.lines_added
        stats.lines_deleted += commit.lines_deleted

    # sorted() is stable, so insertion order breaks ties
    return sorted(by_author.values(), key=lambda s: -s.commits)


def average_lines_changed_by_contributor(
    commits: Sequence[CommitRecord],
    classifier: Optional[CommitClassifier] = None,
    author_aliases: Optional[Mapping[str, str]] = None,
    min_commits: int = MIN_COMMITS_FOR_AVERAGE,
) -> list[ContributorAward]:
    """Average lines changed per real commit, for contributors with enough commits.

    Merge and automated commits are dropped first; contributors left with
    fewer than ``min_commits`` commits are skipped silently.
    """
    classifier = classifier or PatternCommitClassifier()
    totals: dict[str, list[int]] = {}

    for commit in commits:
        if not classifier.classify(commit.message).is_real:
            continue
        name = _author_key(commit, author_aliases)
        entry = totals.setdefault(name, [0, 0])
        entry[0] += 1
        entry[1] += commit.lines_changed

    return [
        ContributorAward(name=name, commits=count, average_lines_changed=changed / count)
        for name, (count, changed) in totals.items()
        if count >= min_commits
    ]


def lowest_average_lines_changed(
    commits: Sequence[CommitRecord],
    classifier: Optional[CommitClassifier] = None,
    author_aliases: Optional[Mapping[str, str]] = None,
) -> list[ContributorAward]:
    awards = average_lines_changed_by_contributor(commits, classifier, author_aliases)
    return sorted(awards, key=lambda a: a.average_lines_changed)[:AWARD_LIMIT]


def highest_average_lines_changed(
    commits: Sequence[CommitRecord],
    classifier: Optional[CommitClassifier] = None,
    author_aliases: Optional[Mapping[str, str]] = None,
) -> list[ContributorAward]:
    awards = average_lines_changed_by_contributor(commits, classifier, author_aliases)
    return sorted(awards, key=lambda a: -a.average_lines_changed)[:AWARD_LIMIT]
