"""Word frequencies from commit messages.

Messages are lowercased, stripped of everything but ``[a-z0-9]`` and
whitespace, and split into tokens. Stop words, short tokens and purely
numeric tokens are dropped before counting; the most frequent words are then
rescaled into a display size range.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Optional, Sequence

import numpy as np

from ..config import TextAnalysisConfig, WordCloudConfig
from ..exceptions import EmptyInputError
from ..models import WordFrequencyEntry

_NON_WORD_RE = re.compile(r"[^a-z0-9\s]")
_NUMERIC_RE = re.compile(r"^\d+$")


class TextProcessor:
    """Tokenize and rank words from commit messages."""

    def __init__(self, config: Optional[TextAnalysisConfig] = None):
        config = config or TextAnalysisConfig()
        self.stop_words = frozenset(w.lower() for w in config.stop_words)

    def extract_words(self, messages: Iterable[str]) -> list[str]:
        words: list[str] = []
        for message in messages:
            words.extend(_NON_WORD_RE.sub(" ", message.lower()).split())
        return words

    def filter_stop_words(self, words: Iterable[str], min_word_length: int = 3) -> list[str]:
        return [
            word
            for word in words
            if len(word) >= min_word_length and word not in self.stop_words and not _NUMERIC_RE.match(word)
        ]

    def word_frequencies(
        self, words: Sequence[str], config: Optional[WordCloudConfig] = None
    ) -> list[WordFrequencyEntry]:
        """Top ``max_words`` by count, sizes scaled linearly into [min_size, max_size].

        Equal counts first seen earlier rank first. When every retained word
        has the same count, each one gets ``min_size``.
        """
        config = config or WordCloudConfig()
        # most_common() keeps insertion order among equal counts
        top = Counter(words).most_common(config.max_words)
        if not top:
            return []

        counts = np.array([count for _, count in top], dtype=float)
        low = counts.min()
        spread = counts.max() - low
        if spread == 0:
            spread = 1.0
        sizes = config.min_size + (config.max_size - config.min_size) * (counts - low) / spread

        return [
            WordFrequencyEntry(word=word, count=count, size=float(size))
            for (word, count), size in zip(top, sizes)
        ]

    def process_commit_messages(
        self, messages: Sequence[str], config: Optional[WordCloudConfig] = None
    ) -> list[WordFrequencyEntry]:
        """Word frequency table for a list of commit messages.

        Raises:
            EmptyInputError: If ``messages`` is empty.
        """
        if not messages:
            raise EmptyInputError("commit message processing", what="messages")
        config = config or WordCloudConfig()
        words = self.filter_stop_words(self.extract_words(messages), config.min_word_length)
        return self.word_frequencies(words, config)
