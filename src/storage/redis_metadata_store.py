# src/storage/redis_metadata_store.py - v2
"""Redis-based metadata store (STORAGE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for multi-instance deployments sharing one corpus. The hash claim is
a ``SET NX``, so only one identity can ever own a given content hash.

Commands run on a worker thread; ``socket_timeout`` bounds how long that
thread can stay blocked on an unresponsive server.
"""

from __future__ import annotations

import asyncio
import logging

from textscope.core.models import DocumentRecord
from textscope.storage.base_metadata_store import BaseMetadataStore

logger = logging.getLogger(__name__)

_DOC_PREFIX = "textscope:doc:"
_HASH_PREFIX = "textscope:hash:"
_INDEX_KEY = "textscope:doc:__index__"


class RedisMetadataStore(BaseMetadataStore):
    """Redis-backed metadata store for distributed deployments."""

    def __init__(self, redis_url: str, socket_timeout: float | None = None) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        self.unavailable_errors = (
            redis.exceptions.ConnectionError,
            redis.exceptions.TimeoutError,
            OSError,
        )

    async def insert_unique(self, record: DocumentRecord) -> tuple[DocumentRecord, bool]:
        if await asyncio.to_thread(self._claim, record):
            return record, True

        existing = await self.get_by_hash(record.content_hash)
        if existing is None:
            raise RuntimeError(
                f"Hash {record.content_hash} is claimed but its record is missing"
            )
        logger.debug("Hash %s already owned by %s", record.content_hash, existing.id)
        return existing, False

    async def get(self, document_id: str) -> DocumentRecord | None:
        return await asyncio.to_thread(self._load, document_id)

    async def get_by_hash(self, content_hash: str) -> DocumentRecord | None:
        return await asyncio.to_thread(self._load_by_hash, content_hash)

    async def list_all(self) -> list[DocumentRecord]:
        return await asyncio.to_thread(self._load_all)

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()

    def _claim(self, record: DocumentRecord) -> bool:
        doc_key = f"{_DOC_PREFIX}{record.id}"
        # Record first, claim second: whoever sees the claim can read the record.
        self._client.set(doc_key, record.model_dump_json())
        if self._client.set(f"{_HASH_PREFIX}{record.content_hash}", record.id, nx=True):
            self._client.rpush(_INDEX_KEY, record.id)
            return True
        self._client.delete(doc_key)
        return False

    def _load(self, document_id: str) -> DocumentRecord | None:
        data = self._client.get(f"{_DOC_PREFIX}{document_id}")
        if data is None:
            return None
        return DocumentRecord.model_validate_json(data)

    def _load_by_hash(self, content_hash: str) -> DocumentRecord | None:
        owner = self._client.get(f"{_HASH_PREFIX}{content_hash}")
        return None if owner is None else self._load(owner)

    def _load_all(self) -> list[DocumentRecord]:
        records = (self._load(i) for i in self._client.lrange(_INDEX_KEY, 0, -1))
        return [r for r in records if r is not None]
