# src/storage/content_store.py - v1
"""Content-addressed document store: dedup by SHA-256, stable identities.

Composes a metadata store (records, hash uniqueness) with a blob store
(bytes). Ingestion is idempotent by content hash; retrieval distinguishes a
missing record from a record whose bytes have disappeared.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from textscope.core.errors import (
    BlobMissingError,
    DependencyUnavailableError,
    InvalidInputError,
    NotFoundError,
    StorageInconsistentError,
)
from textscope.core.models import Document, DocumentRecord, DocumentRef, DocumentSummary
from textscope.storage.base_blob_store import BaseBlobStore
from textscope.storage.base_metadata_store import BaseMetadataStore
from textscope.storage.fingerprint import (
    blob_ref_for_hash,
    compute_content_hash,
    generate_document_id,
)

logger = logging.getLogger(__name__)


class ContentStore:
    """Owns document bytes and metadata."""

    def __init__(
        self,
        metadata_store: BaseMetadataStore,
        blob_store: BaseBlobStore,
    ) -> None:
        self._metadata = metadata_store
        self._blobs = blob_store

    async def put(self, name: str, content: bytes) -> DocumentRef:
        """Store ``content`` under a new identity, or return the existing one.

        Args:
            name: Display name (e.g. the uploaded file name).
            content: Raw bytes.

        Returns:
            DocumentRef with ``created=False`` when the bytes were already stored.

        Raises:
            InvalidInputError: If name or content is empty.
            DependencyUnavailableError: If a backend cannot be reached.
        """
        if not name or not name.strip():
            raise InvalidInputError("Document name must not be empty")
        if not content:
            raise InvalidInputError("Document content must not be empty")

        content_hash = compute_content_hash(content)
        logger.info("Storing %s (%d bytes, hash=%s)", name, len(content), content_hash)

        try:
            existing = await self._metadata.get_by_hash(content_hash)
            if existing is not None:
                logger.info("Content already stored as %s, skipping write", existing.id)
                return self._to_ref(existing, created=False)

            blob_ref = blob_ref_for_hash(content_hash)
            await self._blobs.write(blob_ref, content)

            record = DocumentRecord(
                id=generate_document_id(),
                name=name,
                content_hash=content_hash,
                size=len(content),
                created_at=datetime.now(timezone.utc),
                blob_ref=blob_ref,
            )
            stored, created = await self._metadata.insert_unique(record)
        except self._metadata.unavailable_errors as e:
            raise DependencyUnavailableError("content store", str(e)) from e

        if created:
            logger.info("Stored document %s (%s)", stored.id, name)
        else:
            logger.info("Concurrent upload won for hash %s, reusing %s", content_hash, stored.id)
        return self._to_ref(stored, created=created)

    async def get(self, document_id: str) -> Document:
        """Fetch a document with its bytes.

        Raises:
            NotFoundError: No record for ``document_id``.
            StorageInconsistentError: Record exists but the bytes are missing
                or no longer match the recorded hash.
            DependencyUnavailableError: If a backend cannot be reached.
        """
        record = await self._get_record(document_id)

        try:
            content = await self._blobs.read(record.blob_ref)
        except BlobMissingError as e:
            logger.error(
                "Storage inconsistency: document %s has no blob at %s",
                document_id, record.blob_ref,
            )
            raise StorageInconsistentError(document_id, record.blob_ref) from e
        except OSError as e:
            raise DependencyUnavailableError("blob store", str(e)) from e

        if compute_content_hash(content) != record.content_hash:
            logger.error(
                "Storage inconsistency: blob %s of document %s does not match its hash",
                record.blob_ref, document_id,
            )
            raise StorageInconsistentError(document_id, record.blob_ref)

        return Document(**record.model_dump(), content=content)

    async def get_summary(self, document_id: str) -> DocumentSummary:
        """Fetch listing data for one document without reading its bytes."""
        record = await self._get_record(document_id)
        return _to_summary(record)

    async def list_all(self) -> list[DocumentSummary]:
        """Enumerate every stored document in insertion order."""
        try:
            records = await self._metadata.list_all()
        except self._metadata.unavailable_errors as e:
            raise DependencyUnavailableError("metadata store", str(e)) from e
        return [_to_summary(r) for r in records]

    def close(self) -> None:
        self._metadata.close()

    async def _get_record(self, document_id: str) -> DocumentRecord:
        try:
            record = await self._metadata.get(document_id)
        except self._metadata.unavailable_errors as e:
            raise DependencyUnavailableError("metadata store", str(e)) from e
        if record is None:
            logger.warning("Document %s not found", document_id)
            raise NotFoundError(document_id)
        return record

    def _to_ref(self, record: DocumentRecord, created: bool) -> DocumentRef:
        return DocumentRef(
            id=record.id,
            name=record.name,
            location=self._blobs.locate(record.blob_ref),
            created=created,
        )


def _to_summary(record: DocumentRecord) -> DocumentSummary:
    return DocumentSummary(id=record.id, name=record.name, created_at=record.created_at)
