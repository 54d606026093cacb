# tests/unit/analysis/test_unit_similarity.py - v2
"""Tests for analysis/similarity.py."""

from __future__ import annotations

import itertools

import pytest

from textscope.analysis.shingles import ShingleIndexer
from textscope.analysis.similarity import (
    SimilarityEngine,
    jaccard_similarity,
    rank_results,
)
from textscope.core.errors import DecodingError
from textscope.core.models import SimilarityResult
from tests.conftest import make_document

_SETS = [
    set(),
    {"a"},
    {"a", "b"},
    {"b", "c", "d"},
    {"x y", "y z", "x y z"},
]


class TestJaccard:
    def test_empty_conventions(self):
        assert jaccard_similarity(set(), set()) == 1.0
        assert jaccard_similarity(set(), {"a"}) == 0.0
        assert jaccard_similarity({"a"}, set()) == 0.0

    def test_partial_overlap(self):
        assert jaccard_similarity({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)

    @pytest.mark.parametrize("a,b", list(itertools.product(_SETS, repeat=2)))
    def test_bounds_and_symmetry(self, a, b):
        value = jaccard_similarity(a, b)
        assert 0.0 <= value <= 1.0
        assert value == jaccard_similarity(b, a)

    @pytest.mark.parametrize("a", _SETS)
    def test_reflexive(self, a):
        assert jaccard_similarity(a, a) == 1.0


class TestRankResults:
    def test_percentage_desc_then_id_asc(self):
        results = [
            SimilarityResult(document_id="b", similarity_percentage=50.0),
            SimilarityResult(document_id="c", similarity_percentage=75.0),
            SimilarityResult(document_id="a", similarity_percentage=50.0),
        ]
        assert [r.document_id for r in rank_results(results)] == ["c", "a", "b"]


class TestSimilarityEngine:
    def _engine(self, threshold: float = 0.3, **kwargs) -> SimilarityEngine:
        return SimilarityEngine(ShingleIndexer(**kwargs), threshold=threshold)

    def test_shared_trigram_found(self):
        target = make_document("A", "the quick brown fox jumps")
        other = make_document("B", "the quick brown fox runs")
        results = self._engine(threshold=0.0, orders=[3]).compare_all(target, [target, other])
        assert len(results) == 1
        assert results[0].document_id == "B"
        assert results[0].similarity_percentage > 0

    def test_self_excluded_by_identity_not_content(self):
        target = make_document("A", "alpha beta gamma delta")
        twin = make_document("A2", "alpha beta gamma delta")
        results = self._engine().compare_all(target, [target, twin])
        assert [(r.document_id, r.similarity_percentage) for r in results] == [("A2", 100.0)]

    def test_threshold_is_strict(self):
        target = make_document("A", "one1 two2")
        other = make_document("B", "one1 three3")
        # word sets {one1, two2} vs {one1, three3}: 1/3
        engine = SimilarityEngine(
            ShingleIndexer(min_word_length=1, orders=[1], stop_words=frozenset()),
            threshold=1 / 3,
        )
        assert engine.compare_all(target, [other]) == []

    def test_percentage_rounded_to_two_decimals(self):
        target = make_document("A", "one1 two2")
        other = make_document("B", "one1 three3")
        engine = SimilarityEngine(
            ShingleIndexer(min_word_length=1, orders=[1], stop_words=frozenset()),
            threshold=0.1,
        )
        (result,) = engine.compare_all(target, [other])
        assert result.similarity_percentage == 33.33
        assert result.document_name == "B.txt"

    def test_two_empty_shingle_sets_are_identical(self):
        target = make_document("A", "hi")
        other = make_document("B", "yo")
        results = self._engine().compare_all(target, [other])
        assert [r.similarity_percentage for r in results] == [100.0]

    def test_sorted_with_id_tiebreak(self):
        target = make_document("T", "red green blue black")
        corpus = [
            make_document("z", "red green blue black"),
            make_document("m", "red green blue white"),
            make_document("a", "red green blue black"),
        ]
        engine = SimilarityEngine(
            ShingleIndexer(min_word_length=1, orders=[1], stop_words=frozenset()),
            threshold=0.1,
        )
        results = engine.compare_all(target, corpus)
        assert [r.document_id for r in results] == ["a", "z", "m"]
        assert results[2].similarity_percentage == 60.0

    def test_undecodable_member_raises(self):
        target = make_document("A", "alpha beta gamma")
        bad = make_document("B", b"\xff\xfe\xfa")
        with pytest.raises(DecodingError):
            self._engine().compare_all(target, [bad])

    def test_undecodable_member_skipped_on_request(self):
        target = make_document("A", "alpha beta gamma")
        bad = make_document("B", b"\xff\xfe\xfa")
        twin = make_document("C", "alpha beta gamma")
        results = self._engine().compare_all(target, [bad, twin], skip_undecodable=True)
        assert [r.document_id for r in results] == ["C"]

    def test_precomputed_target_shingles_used(self):
        target = make_document("A", b"\xff\xfe")
        other = make_document("B", "alpha beta gamma")
        engine = self._engine()
        shingles = engine.indexer.shingle_set("alpha beta gamma")
        results = engine.compare_all(target, [other], target_shingles=shingles)
        assert [(r.document_id, r.similarity_percentage) for r in results] == [("B", 100.0)]

    def test_invalid_threshold(self):
        with pytest.raises(ValueError, match="threshold"):
            SimilarityEngine(ShingleIndexer(), threshold=1.2)
