# tests/conftest.py - v1
"""Shared test fixtures for all unit and integration tests.

Provides settings isolated from .env, filesystem-backed stores under tmp_path,
sample documents and a fake word-cloud renderer. No network access.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from textscope.config.settings import Settings
from textscope.core.errors import RenderingFailedError
from textscope.core.models import Document, WordFrequency
from textscope.rendering.base_renderer import BaseWordCloudRenderer
from textscope.storage.content_store import ContentStore
from textscope.storage.fingerprint import blob_ref_for_hash, compute_content_hash
from textscope.storage.local_blob_store import LocalBlobStore
from textscope.storage.sqlite_metadata_store import SqliteMetadataStore

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


class FakeRenderer(BaseWordCloudRenderer):
    """Records the frequency tables it was asked to render."""

    def __init__(self, image: bytes = PNG_BYTES, fail_status: int | None = None) -> None:
        self.image = image
        self.fail_status = fail_status
        self.calls: list[list[WordFrequency]] = []

    async def render(self, frequencies: list[WordFrequency]) -> bytes:
        self.calls.append(frequencies)
        if self.fail_status is not None:
            raise RenderingFailedError(self.fail_status, "renderer exploded")
        return self.image

    @property
    def content_type(self) -> str:
        return "image/png"


def make_document(doc_id: str, text: str | bytes, name: str | None = None) -> Document:
    """Build an in-memory Document without touching a store."""
    content = text.encode("utf-8") if isinstance(text, str) else text
    content_hash = compute_content_hash(content)
    return Document(
        id=doc_id,
        name=name or f"{doc_id}.txt",
        content_hash=content_hash,
        size=len(content),
        created_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
        blob_ref=blob_ref_for_hash(content_hash),
        content=content,
    )


# === FIXTURES: Configuration ===


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings that ignore any local .env and store under tmp_path."""
    return Settings(_env_file=None, storage_root=tmp_path / "store")


# === FIXTURES: Stores ===


@pytest.fixture
def blob_store(tmp_path: Path) -> LocalBlobStore:
    return LocalBlobStore(root=tmp_path / "blobs")


@pytest.fixture
def metadata_store(tmp_path: Path):
    store = SqliteMetadataStore(db_path=tmp_path / "meta.db")
    yield store
    store.close()


@pytest.fixture
def content_store(metadata_store, blob_store) -> ContentStore:
    return ContentStore(metadata_store=metadata_store, blob_store=blob_store)


# === FIXTURES: Collaborators ===


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()
