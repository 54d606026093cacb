# src/analysis/frequency.py - v1
"""Word count, character count and top-K word frequency tables."""

from __future__ import annotations

import logging
from collections import Counter

from textscope.analysis.shingles import split_words
from textscope.core.errors import DecodingError
from textscope.core.models import TextStats, WordFrequency

logger = logging.getLogger(__name__)


def decode_text(raw_bytes: bytes) -> str:
    """Decode UTF-8 strictly (a leading BOM is dropped).

    Raises:
        DecodingError: If the bytes are not valid UTF-8.
    """
    try:
        return raw_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DecodingError(
            f"Content is not valid UTF-8 (byte {e.start}: {e.reason})"
        ) from e


class FrequencyAnalyzer:
    """Compute text statistics and frequency tables."""

    def __init__(
        self,
        top_k: int = 10,
        min_word_length: int = 3,
        stop_words: frozenset[str] = frozenset(),
    ) -> None:
        self.top_k = top_k
        self.min_word_length = min_word_length
        self._stop_words = stop_words

    def analyze(self, text: str) -> TextStats:
        """Word count (unfiltered), character count and top words of ``text``."""
        return TextStats(
            word_count=len(split_words(text)),
            character_count=len(text),
            top_words=self.top_words(text),
        )

    def top_words(
        self,
        text: str,
        k: int | None = None,
        min_length: int | None = None,
    ) -> list[WordFrequency]:
        """Most frequent lowercased words, ties kept in first-occurrence order.

        Args:
            text: Decoded text.
            k: Table size. Defaults to the analyzer's ``top_k``.
            min_length: Minimum word length. Defaults to the analyzer's setting.
        """
        k = self.top_k if k is None else k
        min_length = self.min_word_length if min_length is None else min_length

        # Counter keeps first-insertion order and sorted() is stable,
        # so equal counts stay in order of first appearance.
        counts = Counter(
            w for w in (t.lower() for t in split_words(text))
            if len(w) >= min_length and w not in self._stop_words
        )
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [WordFrequency(word=w, count=c) for w, c in ranked[:k]]
