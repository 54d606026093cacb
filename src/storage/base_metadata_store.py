# src/storage/base_metadata_store.py - v1
"""Abstract metadata store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from textscope.core.models import DocumentRecord


class BaseMetadataStore(ABC):
    """Unified interface for document metadata backends.

    Implementations must make ``insert_unique`` atomic with respect to the
    content hash: two concurrent inserts of the same hash yield one record.
    ``unavailable_errors`` lists the backend exceptions that mean the store
    cannot be reached, as opposed to a bug or bad data.
    """

    unavailable_errors: tuple[type[BaseException], ...] = (OSError,)

    @abstractmethod
    async def insert_unique(self, record: DocumentRecord) -> tuple[DocumentRecord, bool]:
        """Insert ``record`` unless its content hash is already stored.

        Returns:
            (stored record, created). When the hash already existed the
            returned record is the existing one and ``created`` is False.
        """

    @abstractmethod
    async def get(self, document_id: str) -> DocumentRecord | None:
        """Retrieve a record by identity."""

    @abstractmethod
    async def get_by_hash(self, content_hash: str) -> DocumentRecord | None:
        """Retrieve a record by content hash."""

    @abstractmethod
    async def list_all(self) -> list[DocumentRecord]:
        """All records in insertion order."""

    def close(self) -> None:
        """Release backend resources."""
