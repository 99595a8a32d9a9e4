"""Top-commit leaderboards.

Each leaderboard drops merge and automated commits, ranks the rest by one
value and keeps the first five. Commits with equal values stay in input order.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..classification import CommitClassifier, PatternCommitClassifier
from ..models import CommitAward, CommitRecord
from .series import commit_bytes

AWARD_LIMIT = 5


def _top_commits(
    commits: Sequence[CommitRecord],
    value_of: Callable[[CommitRecord], int],
    classifier: Optional[CommitClassifier],
    limit: int,
) -> list[CommitAward]:
    classifier = classifier or PatternCommitClassifier()
    candidates = []
    for commit in commits:
        if not classifier.classify(commit.message).is_real:
            continue
        candidates.append((value_of(commit), commit))

    ranked = sorted(candidates, key=lambda item: -item[0])[:limit]
    return [
        CommitAward(
            sha=commit.sha,
            author_name=commit.author_name,
            date=commit.timestamp,
            message=commit.message,
            value=value,
        )
        for value, commit in ranked
    ]


def top_commits_by_files_modified(
    commits: Sequence[CommitRecord],
    classifier: Optional[CommitClassifier] = None,
    limit: int = AWARD_LIMIT,
) -> list[CommitAward]:
    return _top_commits(commits, lambda c: len(c.files), classifier, limit)


def top_commits_by_bytes_added(
    commits: Sequence[CommitRecord],
    classifier: Optional[CommitClassifier] = None,
    limit: int = AWARD_LIMIT,
) -> list[CommitAward]:
    """Commits without aggregate byte counts are ranked by the sum of their file changes."""
    return _top_commits(commits, lambda c: commit_bytes(c)[0], classifier, limit)


def top_commits_by_bytes_removed(
    commits: Sequence[CommitRecord],
    classifier: Optional[CommitClassifier] = None,
    limit: int = AWARD_LIMIT,
) -> list[CommitAward]:
    return _top_commits(commits, lambda c: commit_bytes(c)[1], classifier, limit)


def top_commits_by_lines_added(
    commits: Sequence[CommitRecord],
    classifier: Optional[CommitClassifier] = None,
    limit: int = AWARD_LIMIT,
) -> list[CommitAward]:
    return _top_commits(commits, lambda c: c.lines_added, classifier, limit)


def top_commits_by_lines_removed(
    commits: Sequence[CommitRecord],
    classifier: Optional[CommitClassifier] = None,
    limit: int = AWARD_LIMIT,
) -> list[CommitAward]:
    return _top_commits(commits, lambda c: c.lines_deleted, classifier, limit)
