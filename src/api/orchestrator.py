# src/api/orchestrator.py - v2
"""Analysis orchestrator: frequency stats + corpus similarity + word cloud.

The only component that walks the whole corpus and talks to the renderer.
Corpus documents are fetched concurrently (bounded by a semaphore) and ranked
by the similarity engine only after every fetch has finished.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from textscope.analysis.frequency import FrequencyAnalyzer, decode_text
from textscope.analysis.shingles import ShingleIndexer
from textscope.analysis.similarity import SimilarityEngine
from textscope.config.settings import Settings
from textscope.config.stopwords import load_stop_words
from textscope.core.errors import DependencyUnavailableError, NotFoundError
from textscope.core.models import AnalysisReport, Document, DocumentSummary
from textscope.rendering.base_renderer import BaseWordCloudRenderer
from textscope.storage.content_store import ContentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AnalysisOrchestrator:
    """Compose FrequencyAnalyzer and SimilarityEngine over a ContentStore."""

    def __init__(
        self,
        store: ContentStore,
        frequency: FrequencyAnalyzer,
        similarity: SimilarityEngine,
        renderer: BaseWordCloudRenderer | None = None,
        store_timeout_s: float = 5.0,
        max_concurrent_fetches: int = 8,
        wordcloud_top_k: int = 100,
        wordcloud_min_word_length: int = 1,
    ) -> None:
        self._store = store
        self._frequency = frequency
        self._similarity = similarity
        self._renderer = renderer
        self._store_timeout_s = store_timeout_s
        self._max_concurrent = max_concurrent_fetches
        self._wordcloud_top_k = wordcloud_top_k
        self._wordcloud_min_word_length = wordcloud_min_word_length

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: ContentStore,
        renderer: BaseWordCloudRenderer | None = None,
    ) -> AnalysisOrchestrator:
        """Wire analyzers from settings. The stop-word set is loaded once here."""
        stop_words = load_stop_words(settings.stop_words_file)
        indexer = ShingleIndexer(
            min_word_length=settings.shingle_min_word_length,
            orders=settings.shingle_orders_list,
            stop_words=stop_words,
            strip_punctuation=settings.shingle_strip_punctuation,
        )
        frequency = FrequencyAnalyzer(
            top_k=settings.top_k_words,
            min_word_length=settings.frequency_min_word_length,
            stop_words=stop_words if settings.frequency_exclude_stop_words else frozenset(),
        )
        return cls(
            store=store,
            frequency=frequency,
            similarity=SimilarityEngine(indexer, threshold=settings.similarity_threshold),
            renderer=renderer,
            store_timeout_s=settings.store_timeout_s,
            max_concurrent_fetches=settings.max_concurrent_fetches,
            wordcloud_top_k=settings.wordcloud_top_k,
            wordcloud_min_word_length=settings.wordcloud_min_word_length,
        )

    async def analyze(self, document_id: str) -> AnalysisReport:
        """Frequency statistics and ranked similar documents for one document.

        Raises:
            NotFoundError: Unknown ``document_id``.
            StorageInconsistentError: The target or a corpus member lost its bytes.
            DecodingError: The target is not valid UTF-8.
            DependencyUnavailableError: A store call failed or timed out.
        """
        target = await self._with_timeout(self._store.get(document_id), "get")
        text = decode_text(target.content)
        stats = self._frequency.analyze(text)

        corpus = await self._with_timeout(self._store.list_all(), "list_all")
        others = [s for s in corpus if s.id != target.id]
        logger.info("Comparing %s against %d corpus documents", document_id, len(others))

        fetched = await self._fetch_corpus(others)
        similar = self._similarity.compare_all(
            target,
            fetched,
            target_shingles=self._similarity.indexer.shingle_set(text),
            skip_undecodable=True,
        )

        logger.info(
            "Analysis complete: document_id=%s, words=%d, similar=%d",
            document_id, stats.word_count, len(similar),
        )
        return AnalysisReport(
            id=target.id,
            name=target.name,
            hash=target.hash,
            word_count=stats.word_count,
            character_count=stats.character_count,
            top_words=stats.top_words,
            similar_documents=similar,
        )

    async def generate_word_cloud(self, document_id: str) -> bytes:
        """Render the document's top words and return the image bytes.

        Raises:
            NotFoundError: Unknown ``document_id``.
            DecodingError: The document is not valid UTF-8.
            RenderingFailedError: The renderer answered with a failure.
            DependencyUnavailableError: A store or the renderer is unreachable.
        """
        if self._renderer is None:
            raise DependencyUnavailableError("word cloud renderer", "no renderer configured")

        document = await self._with_timeout(self._store.get(document_id), "get")
        text = decode_text(document.content)
        frequencies = self._frequency.top_words(
            text,
            k=self._wordcloud_top_k,
            min_length=self._wordcloud_min_word_length,
        )
        logger.info("Rendering word cloud for %s (%d words)", document_id, len(frequencies))
        return await self._renderer.render(frequencies)

    async def _fetch_corpus(self, others: list[DocumentSummary]) -> list[Document]:
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def fetch(summary: DocumentSummary) -> Document | None:
            async with semaphore:
                try:
                    return await self._with_timeout(self._store.get(summary.id), "get")
                except NotFoundError:
                    logger.warning("Corpus document %s vanished during analysis", summary.id)
                    return None

        tasks = [asyncio.ensure_future(fetch(s)) for s in others]
        try:
            documents = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        return [d for d in documents if d is not None]

    async def _with_timeout(self, call: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._store_timeout_s)
        except asyncio.TimeoutError as e:
            raise DependencyUnavailableError(
                "content store", f"{operation} timed out after {self._store_timeout_s}s",
            ) from e
