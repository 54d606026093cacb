# src/analysis/shingles.py - v1
"""Word tokenization and n-gram shingling for similarity comparison.

Text is lowercased and split on whitespace. Short tokens and stop words are
dropped before shingles of each configured order are built. Orders that need
more words than remain simply produce nothing.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from textscope.config.stopwords import DEFAULT_STOP_WORDS

_WHITESPACE_RE = re.compile(r"[ \t\r\n]+")
_PUNCTUATION_RE = re.compile(r"""[.,!?;:()\[\]{}"']""")

DEFAULT_ORDERS: tuple[int, ...] = (2, 3, 4)


def split_words(text: str) -> list[str]:
    """Split on space, tab, CR and LF, dropping empty tokens."""
    return [t for t in _WHITESPACE_RE.split(text) if t]


class ShingleIndexer:
    """Build normalized word lists and shingle sets from raw text."""

    def __init__(
        self,
        min_word_length: int = 3,
        orders: Iterable[int] = DEFAULT_ORDERS,
        stop_words: frozenset[str] = DEFAULT_STOP_WORDS,
        strip_punctuation: bool = False,
    ) -> None:
        self.min_word_length = min_word_length
        self.orders = tuple(sorted(set(orders)))
        if not self.orders or self.orders[0] < 1:
            raise ValueError(f"Shingle orders must be positive, got {self.orders}")
        self._stop_words = stop_words
        self._strip_punctuation = strip_punctuation

    def tokenize(self, text: str) -> list[str]:
        """Lowercase, split, then drop short tokens and stop words."""
        text = text.lower()
        if self._strip_punctuation:
            text = _PUNCTUATION_RE.sub(" ", text)
        return [
            w for w in split_words(text)
            if len(w) >= self.min_word_length and w not in self._stop_words
        ]

    @staticmethod
    def shingle(words: Sequence[str], n: int) -> set[str]:
        """All runs of ``n`` consecutive words, joined by single spaces."""
        if n < 1:
            raise ValueError(f"Shingle order must be >= 1, got {n}")
        return {" ".join(words[i : i + n]) for i in range(len(words) - n + 1)}

    def shingle_set(self, text: str) -> set[str]:
        """Union of shingles of every configured order."""
        words = self.tokenize(text)
        shingles: set[str] = set()
        for n in self.orders:
            shingles |= self.shingle(words, n)
        return shingles
