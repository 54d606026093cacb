# src/storage/store_factory.py - v1
"""Factory for content store instantiation."""

from __future__ import annotations

from pathlib import Path

from textscope.config.settings import Settings
from textscope.storage.base_metadata_store import BaseMetadataStore
from textscope.storage.content_store import ContentStore
from textscope.storage.local_blob_store import LocalBlobStore


def create_metadata_store(settings: Settings | None = None) -> BaseMetadataStore:
    """Instantiate the configured metadata backend.

    Args:
        settings: Application settings. Defaults to SQLite under the default root.

    Returns:
        Configured BaseMetadataStore implementation.
    """
    backend = "sqlite" if settings is None else settings.storage_backend
    root = _storage_root(settings)

    if backend == "sqlite":
        from textscope.storage.sqlite_metadata_store import SqliteMetadataStore
        return SqliteMetadataStore(db_path=root / "textscope.db")

    if backend == "json":
        from textscope.storage.json_metadata_store import JsonMetadataStore
        return JsonMetadataStore(root=root / "metadata")

    if backend == "redis":
        from textscope.storage.redis_metadata_store import RedisMetadataStore
        if settings is None or not settings.redis_url:
            raise ValueError("REDIS_URL must be set when STORAGE_BACKEND=redis")
        return RedisMetadataStore(
            redis_url=settings.redis_url, socket_timeout=settings.store_timeout_s,
        )

    raise ValueError(f"Unsupported storage backend: {backend!r}")


def create_content_store(settings: Settings | None = None) -> ContentStore:
    """Build a ContentStore with the configured metadata backend and local blobs."""
    root = _storage_root(settings)
    return ContentStore(
        metadata_store=create_metadata_store(settings),
        blob_store=LocalBlobStore(root=root / "blobs"),
    )


def _storage_root(settings: Settings | None) -> Path:
    root = Path("~/.textscope/store") if settings is None else settings.storage_root
    return root.expanduser()
