# src/api/facade.py - v2
"""Public API facade: the boundary the transport layer calls.

Usage:
    from textscope.api.facade import TextScope
    scope = TextScope.from_settings(load_settings())
    outcome = await scope.upload("notes.txt", data)
    if outcome.ok:
        report = await scope.analyze(outcome.value.id)

Every operation returns an ``Outcome``: either a payload or one of the
``ErrorKind`` values. Domain failures never escape as exceptions; anything
else (a programming error) propagates unchanged.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import TypeVar

from textscope.api.models import DocumentPayload, Outcome, UploadResult, WordCloudImage
from textscope.api.orchestrator import AnalysisOrchestrator
from textscope.config.settings import Settings
from textscope.core.errors import ErrorKind, TextScopeError
from textscope.core.models import AnalysisReport, DocumentSummary
from textscope.logging.context import clear_context, set_document_context, set_request_context
from textscope.rendering.base_renderer import BaseWordCloudRenderer
from textscope.storage.content_store import ContentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TextScope:
    """Upload, fetch, analyze and render stored text documents."""

    def __init__(
        self,
        store: ContentStore,
        orchestrator: AnalysisOrchestrator,
        renderer: BaseWordCloudRenderer | None = None,
    ) -> None:
        self._store = store
        self._orchestrator = orchestrator
        self._renderer = renderer

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        store: ContentStore | None = None,
        renderer: BaseWordCloudRenderer | None = None,
    ) -> TextScope:
        """Build the facade, creating store and renderer from settings if omitted."""
        settings = settings or Settings()
        if store is None:
            from textscope.storage.store_factory import create_content_store

            store = create_content_store(settings)
        if renderer is None:
            from textscope.rendering.renderer_factory import create_renderer

            renderer = create_renderer(settings)
        orchestrator = AnalysisOrchestrator.from_settings(settings, store, renderer)
        return cls(store=store, orchestrator=orchestrator, renderer=renderer)

    async def upload(self, name: str, content: bytes) -> Outcome[UploadResult]:
        """Store a file; identical bytes always resolve to the same id."""

        async def op() -> UploadResult:
            ref = await self._store.put(name, content)
            set_document_context(ref.id)
            return UploadResult(
                id=ref.id, name=ref.name, location=ref.location, deduplicated=not ref.created,
            )

        return await self._run("upload", None, op)

    async def get_document(self, document_id: str) -> Outcome[DocumentPayload]:
        """Fetch a stored file byte-exactly, with its content hash."""

        async def op() -> DocumentPayload:
            doc = await self._store.get(document_id)
            return DocumentPayload(id=doc.id, name=doc.name, content=doc.content, hash=doc.hash)

        return await self._run("get_document", document_id, op)

    async def describe_document(self, document_id: str) -> Outcome[DocumentSummary]:
        """Name and creation time of a stored file, without reading its bytes."""
        return await self._run(
            "describe_document", document_id, lambda: self._store.get_summary(document_id),
        )

    async def list_documents(self) -> Outcome[list[DocumentSummary]]:
        """Enumerate stored files (no content)."""
        return await self._run("list_documents", None, self._store.list_all)

    async def analyze(self, document_id: str) -> Outcome[AnalysisReport]:
        """Word statistics and similar documents for one stored file."""
        return await self._run(
            "analyze", document_id, lambda: self._orchestrator.analyze(document_id),
        )

    async def get_word_cloud(self, document_id: str) -> Outcome[WordCloudImage]:
        """Rendered word cloud of one stored file."""

        async def op() -> WordCloudImage:
            image = await self._orchestrator.generate_word_cloud(document_id)
            content_type = self._renderer.content_type if self._renderer else "image/png"
            return WordCloudImage(document_id=document_id, content=image, content_type=content_type)

        return await self._run("get_word_cloud", document_id, op)

    async def aclose(self) -> None:
        """Release renderer and store resources."""
        if self._renderer is not None:
            await self._renderer.aclose()
        self._store.close()

    async def _run(
        self,
        operation: str,
        document_id: str | None,
        fn: Callable[[], Awaitable[T]],
    ) -> Outcome[T]:
        set_request_context(uuid.uuid4().hex[:12], operation, document_id)
        try:
            return Outcome.success(await fn())
        except TextScopeError as e:
            _log_failure(operation, e)
            return Outcome.failure(e)
        finally:
            clear_context()


def _log_failure(operation: str, error: TextScopeError) -> None:
    """Client errors are routine; integrity problems are logged loudly."""
    if error.kind is ErrorKind.STORAGE_INCONSISTENT:
        logger.error("%s failed with storage inconsistency: %s", operation, error)
    elif error.kind.is_client_error:
        logger.info("%s rejected (%s): %s", operation, error.kind.value, error)
    else:
        logger.warning("%s failed (%s): %s", operation, error.kind.value, error)
