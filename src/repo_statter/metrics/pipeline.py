"""Run every metric calculator over one commit list."""

from __future__ import annotations

from datetime import datetime
from typing import AbstractSet, Optional, Sequence

from ..classification import (
    CommitClassifier,
    ConfiguredFileClassifier,
    FileClassifier,
    PatternCommitClassifier,
)
from ..config import RepoStatterConfig
from ..exceptions import EmptyInputError
from ..logging_config import get_logger
from ..models import Awards, CommitRecord, ReportMetrics
from ..text import TextProcessor
from . import awards as award_calcs
from .contributors import (
    contributor_stats,
    highest_average_lines_changed,
    lowest_average_lines_changed,
)
from .files import file_heat, file_type_stats, top_files_by_churn, top_files_by_size
from .series import linear_series, time_series

logger = get_logger(__name__)

TOP_CONTRIBUTORS_LIMIT = 5


class MetricsPipeline:
    """Derives a ReportMetrics bundle from commits.

    The calculators are independent: none reads another's output, and none
    mutates the commit list.
    """

    def __init__(
        self,
        config: Optional[RepoStatterConfig] = None,
        file_classifier: Optional[FileClassifier] = None,
        commit_classifier: Optional[CommitClassifier] = None,
        text_processor: Optional[TextProcessor] = None,
    ):
        self.config = config or RepoStatterConfig()
        self.file_classifier = file_classifier or ConfiguredFileClassifier(self.config.file_categories)
        self.commit_classifier = commit_classifier or PatternCommitClassifier(self.config.commit_filters)
        self.text_processor = text_processor or TextProcessor(self.config.text_analysis)

    def run(
        self,
        commits: Sequence[CommitRecord],
        current_files: Optional[AbstractSet[str]] = None,
        now: Optional[datetime] = None,
    ) -> ReportMetrics:
        """Compute every metric family.

        Raises:
            EmptyInputError: If ``commits`` is empty.
        """
        if not commits:
            raise EmptyInputError("metrics pipeline")

        aliases = self.config.analysis.author_aliases
        classifier = self.commit_classifier

        contributors = contributor_stats(commits, author_aliases=aliases)
        awards = Awards(
            top_contributors=contributors[:TOP_CONTRIBUTORS_LIMIT],
            most_files_modified=award_calcs.top_commits_by_files_modified(commits, classifier),
            most_bytes_added=award_calcs.top_commits_by_bytes_added(commits, classifier),
            most_bytes_removed=award_calcs.top_commits_by_bytes_removed(commits, classifier),
            most_lines_added=award_calcs.top_commits_by_lines_added(commits, classifier),
            most_lines_removed=award_calcs.top_commits_by_lines_removed(commits, classifier),
            lowest_average_lines_changed=lowest_average_lines_changed(commits, classifier, aliases),
            highest_average_lines_changed=highest_average_lines_changed(commits, classifier, aliases),
        )

        metrics = ReportMetrics(
            total_commits=len(commits),
            contributors=contributors,
            file_types=file_type_stats(commits, current_files),
            file_heat=file_heat(commits, self.config.file_heat, current_files, now=now),
            top_files_by_size=top_files_by_size(commits, current_files),
            top_files_by_churn=top_files_by_churn(commits, current_files),
            time_series=time_series(
                commits,
                self.file_classifier,
                self.config.analysis.time_series_hourly_threshold_hours,
            ),
            linear_series=linear_series(commits),
            awards=awards,
            word_frequencies=self.text_processor.process_commit_messages(
                [c.message for c in commits], self.config.word_cloud
            ),
        )
        logger.info(
            f"Computed metrics for {len(commits)} commits: "
            f"{len(contributors)} contributors, {len(metrics.file_heat)} hot files"
        )
        return metrics
