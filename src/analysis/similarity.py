# src/analysis/similarity.py - v2
"""Jaccard similarity of shingle sets across a document corpus.

Every call recomputes shingles from the live corpus; nothing is cached.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from textscope.analysis.frequency import decode_text
from textscope.analysis.shingles import ShingleIndexer
from textscope.core.errors import DecodingError
from textscope.core.models import Document, SimilarityResult

logger = logging.getLogger(__name__)


def jaccard_similarity(a: set[str], b: set[str]) -> float:
    """|a ∩ b| / |a ∪ b|, with 1.0 for two empty sets and 0.0 if only one is empty."""
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def rank_results(results: Iterable[SimilarityResult]) -> list[SimilarityResult]:
    """Sort by percentage descending, then document id ascending."""
    return sorted(results, key=lambda r: (-r.similarity_percentage, r.document_id))


class SimilarityEngine:
    """Compare one document's shingles against other documents."""

    def __init__(self, indexer: ShingleIndexer, threshold: float = 0.3) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self.indexer = indexer
        self.threshold = threshold

    def shingles_for(self, document: Document) -> set[str]:
        """Shingle set of a stored document (decoded as UTF-8)."""
        return self.indexer.shingle_set(decode_text(document.content))

    def score(self, target_shingles: set[str], other: Document) -> SimilarityResult | None:
        """Similarity of ``other`` to the target, or None if not above threshold."""
        similarity = jaccard_similarity(target_shingles, self.shingles_for(other))
        logger.debug("Similarity with %s: %.4f", other.id, similarity)
        if similarity <= self.threshold:
            return None
        return SimilarityResult(
            document_id=other.id,
            document_name=other.name,
            similarity_percentage=round(similarity * 100, 2),
        )

    def compare_all(
        self,
        target: Document,
        corpus: Iterable[Document],
        target_shingles: set[str] | None = None,
        skip_undecodable: bool = False,
    ) -> list[SimilarityResult]:
        """Rank every corpus document (except the target itself) by similarity.

        Args:
            target: Document being analyzed.
            corpus: Documents to compare against; the target may be included.
            target_shingles: Precomputed shingles of the target, if available.
            skip_undecodable: Log and skip corpus documents that are not UTF-8
                instead of raising DecodingError.

        Returns:
            Results strictly above the threshold, best first.
        """
        if target_shingles is None:
            target_shingles = self.shingles_for(target)
        results: list[SimilarityResult] = []
        for other in corpus:
            if other.id == target.id:
                continue
            try:
                result = self.score(target_shingles, other)
            except DecodingError:
                if not skip_undecodable:
                    raise
                logger.warning("Skipping corpus document %s: not valid UTF-8", other.id)
                continue
            if result is not None:
                results.append(result)
        return rank_results(results)
