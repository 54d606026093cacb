# src/storage/base_blob_store.py - v1
"""Abstract byte-blob store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseBlobStore(ABC):
    """Write-once, read-by-reference storage for document bytes."""

    @abstractmethod
    async def write(self, ref: str, content: bytes) -> None:
        """Store ``content`` under ``ref``. Rewriting identical bytes is a no-op."""

    @abstractmethod
    async def read(self, ref: str) -> bytes:
        """Return the bytes for ``ref``.

        Raises:
            BlobMissingError: If nothing is stored under ``ref``.
        """

    @abstractmethod
    async def exists(self, ref: str) -> bool:
        """Check whether ``ref`` has stored bytes."""

    @abstractmethod
    async def delete(self, ref: str) -> None:
        """Remove the blob if present (administrative path only)."""

    @abstractmethod
    def locate(self, ref: str) -> str:
        """Human-readable location of ``ref`` (path or URL)."""
