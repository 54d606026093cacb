# tests/unit/api/test_unit_facade.py - v1
"""Tests for api/facade.py and api/models.py."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from textscope.api.facade import TextScope
from textscope.api.models import Outcome, UploadResult
from textscope.api.orchestrator import AnalysisOrchestrator
from textscope.core.errors import (
    DecodingError,
    DependencyUnavailableError,
    ErrorKind,
    InvalidInputError,
    NotFoundError,
    RenderingFailedError,
    StorageInconsistentError,
)
from textscope.logging.context import get_context
from textscope.rendering.quickchart_renderer import QuickChartRenderer
from tests.conftest import PNG_BYTES, FakeRenderer


@pytest.fixture
def scope(settings, content_store, fake_renderer) -> TextScope:
    return TextScope.from_settings(settings, store=content_store, renderer=fake_renderer)


def _scope_with_failing_orchestrator(content_store, error: Exception) -> TextScope:
    orchestrator = MagicMock(spec=AnalysisOrchestrator)
    orchestrator.analyze = AsyncMock(side_effect=error)
    orchestrator.generate_word_cloud = AsyncMock(side_effect=error)
    return TextScope(store=content_store, orchestrator=orchestrator)


class TestOutcome:
    def test_success(self):
        outcome = Outcome.success(UploadResult(id="a", name="n", location="/x"))
        assert outcome.ok
        assert outcome.value.id == "a"
        assert outcome.error is None
        assert not outcome.retryable

    def test_failure(self):
        outcome = Outcome.failure(NotFoundError("x"))
        assert not outcome.ok
        assert outcome.value is None
        assert outcome.error is ErrorKind.NOT_FOUND
        assert "'x'" in outcome.detail
        assert outcome.is_client_error

    def test_retryable_only_for_dependency_unavailable(self):
        assert Outcome.failure(DependencyUnavailableError("redis", "down")).retryable
        assert not Outcome.failure(RenderingFailedError(500, "x")).retryable

    def test_serializes_kind_as_string(self):
        data = Outcome.failure(DecodingError("bad bytes")).model_dump(mode="json")
        assert data["error"] == "decoding_error"


class TestUploadAndGet:
    @pytest.mark.asyncio
    async def test_round_trip(self, scope):
        data = "héllo\r\nwörld\x00".encode("utf-8")
        uploaded = await scope.upload("notes.txt", data)
        assert uploaded.ok
        assert not uploaded.value.deduplicated
        fetched = await scope.get_document(uploaded.value.id)
        assert fetched.ok
        assert fetched.value.content == data
        assert fetched.value.name == "notes.txt"
        assert len(fetched.value.hash) == 64

    @pytest.mark.asyncio
    async def test_duplicate_upload_flagged(self, scope):
        first = await scope.upload("a.txt", b"same bytes")
        second = await scope.upload("b.txt", b"same bytes")
        assert second.value.id == first.value.id
        assert second.value.name == "a.txt"
        assert second.value.deduplicated

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,content", [("", b"x"), ("  ", b"x"), ("a.txt", b"")])
    async def test_invalid_input(self, scope, name, content):
        outcome = await scope.upload(name, content)
        assert outcome.error is ErrorKind.INVALID_INPUT

    @pytest.mark.asyncio
    async def test_get_unknown(self, scope):
        outcome = await scope.get_document("nope")
        assert outcome.error is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_get_with_missing_blob(self, scope, content_store, blob_store):
        uploaded = await scope.upload("a.txt", b"content that will vanish")
        record = await content_store.get(uploaded.value.id)
        await blob_store.delete(record.blob_ref)
        outcome = await scope.get_document(uploaded.value.id)
        assert outcome.error is ErrorKind.STORAGE_INCONSISTENT
        assert not outcome.is_client_error

    @pytest.mark.asyncio
    async def test_describe_document(self, scope):
        uploaded = await scope.upload("notes.txt", b"metadata only")
        outcome = await scope.describe_document(uploaded.value.id)
        assert outcome.ok
        assert outcome.value.id == uploaded.value.id
        assert outcome.value.name == "notes.txt"
        assert not hasattr(outcome.value, "content")

    @pytest.mark.asyncio
    async def test_describe_unknown(self, scope):
        outcome = await scope.describe_document("nope")
        assert outcome.error is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_list(self, scope):
        await scope.upload("one.txt", b"1")
        await scope.upload("two.txt", b"2")
        outcome = await scope.list_documents()
        assert [s.name for s in outcome.value] == ["one.txt", "two.txt"]


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_report(self, scope):
        uploaded = await scope.upload("pets.txt", b"cat dog cat bird")
        outcome = await scope.analyze(uploaded.value.id)
        assert outcome.ok
        assert outcome.value.word_count == 4
        assert outcome.value.character_count == 16

    @pytest.mark.asyncio
    async def test_unknown_is_not_found(self, scope):
        outcome = await scope.analyze("missing")
        assert outcome.error is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_binary_is_decoding_error(self, scope):
        uploaded = await scope.upload("img.bin", b"\x89PNG\xff\xfe")
        outcome = await scope.analyze(uploaded.value.id)
        assert outcome.error is ErrorKind.DECODING_ERROR

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error,kind", [
        (StorageInconsistentError("d", "ab/abc"), ErrorKind.STORAGE_INCONSISTENT),
        (DependencyUnavailableError("content store", "timed out"), ErrorKind.DEPENDENCY_UNAVAILABLE),
        (InvalidInputError("bad"), ErrorKind.INVALID_INPUT),
    ])
    async def test_error_kinds_mapped(self, content_store, error, kind):
        scope = _scope_with_failing_orchestrator(content_store, error)
        outcome = await scope.analyze("d")
        assert outcome.error is kind
        assert outcome.detail == str(error)

    @pytest.mark.asyncio
    async def test_programming_errors_propagate(self, content_store):
        scope = _scope_with_failing_orchestrator(content_store, KeyError("bug"))
        with pytest.raises(KeyError):
            await scope.analyze("d")

    @pytest.mark.asyncio
    async def test_context_cleared_after_call(self, scope):
        await scope.analyze("missing")
        assert get_context().as_dict() == {}

    @pytest.mark.asyncio
    async def test_inconsistency_logged_as_error(self, content_store, caplog):
        scope = _scope_with_failing_orchestrator(
            content_store, StorageInconsistentError("d", "ab/abc"),
        )
        with caplog.at_level(logging.INFO, logger="textscope.api.facade"):
            await scope.analyze("d")
        assert [r.levelno for r in caplog.records] == [logging.ERROR]

    @pytest.mark.asyncio
    async def test_not_found_logged_as_info(self, content_store, caplog):
        scope = _scope_with_failing_orchestrator(content_store, NotFoundError("d"))
        with caplog.at_level(logging.INFO, logger="textscope.api.facade"):
            await scope.analyze("d")
        assert [r.levelno for r in caplog.records] == [logging.INFO]


class TestWordCloud:
    @pytest.mark.asyncio
    async def test_image_returned(self, scope, fake_renderer):
        uploaded = await scope.upload("a.txt", b"cat dog cat")
        outcome = await scope.get_word_cloud(uploaded.value.id)
        assert outcome.ok
        assert outcome.value.content == PNG_BYTES
        assert outcome.value.content_type == "image/png"
        assert outcome.value.document_id == uploaded.value.id
        assert len(fake_renderer.calls) == 1

    @pytest.mark.asyncio
    async def test_renderer_failure(self, settings, content_store):
        scope = TextScope.from_settings(
            settings, store=content_store, renderer=FakeRenderer(fail_status=500),
        )
        uploaded = await scope.upload("a.txt", b"cat dog cat")
        outcome = await scope.get_word_cloud(uploaded.value.id)
        assert outcome.error is ErrorKind.RENDERING_FAILED
        assert "500" in outcome.detail

    @pytest.mark.asyncio
    async def test_unknown_document(self, scope):
        outcome = await scope.get_word_cloud("missing")
        assert outcome.error is ErrorKind.NOT_FOUND


class TestFromSettings:
    @pytest.mark.asyncio
    async def test_builds_default_collaborators(self, settings):
        scope = TextScope.from_settings(settings)
        try:
            assert isinstance(scope._renderer, QuickChartRenderer)
            outcome = await scope.upload("a.txt", b"hello")
            assert outcome.ok
            assert outcome.value.location.startswith(str(settings.storage_root.resolve()))
        finally:
            await scope.aclose()
