# src/storage/local_blob_store.py - v2
"""Local filesystem blob store (default backend).

File I/O runs on a worker thread so a slow disk cannot stall the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from textscope.core.errors import BlobMissingError
from textscope.storage.base_blob_store import BaseBlobStore

logger = logging.getLogger(__name__)


class LocalBlobStore(BaseBlobStore):
    """Store blobs as files under a root directory."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, ref: str) -> Path:
        """Resolve a reference to a path, refusing escapes from the root."""
        path = (self._root / ref).resolve()
        if self._root.resolve() not in path.parents:
            raise ValueError(f"Blob reference escapes store root: {ref!r}")
        return path

    async def write(self, ref: str, content: bytes) -> None:
        await asyncio.to_thread(self._write, self._resolve(ref), content)

    async def read(self, ref: str) -> bytes:
        path = self._resolve(ref)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise BlobMissingError(ref) from e

    async def exists(self, ref: str) -> bool:
        return await asyncio.to_thread(self._resolve(ref).is_file)

    async def delete(self, ref: str) -> None:
        await asyncio.to_thread(self._resolve(ref).unlink, missing_ok=True)

    def locate(self, ref: str) -> str:
        return str(self._resolve(ref))

    @staticmethod
    def _write(path: Path, content: bytes) -> None:
        """Write atomically: temp file in the target directory, then rename."""
        if path.exists():
            logger.debug("Blob %s already present, skipping write", path.name)
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
