# src/storage/json_metadata_store.py - v2
"""JSON file-based metadata store (STORAGE_BACKEND=json).

Layout under the store root:
    records/<id>.json     one record per document
    hashes/<sha256>       claim file holding the owning document id

A record only counts as stored once its hash claim points at it. Claims are
published with ``os.link`` from a fully written temp file, which fails if the
claim already exists, so the dedup check-then-write is atomic even across
processes sharing the directory. File I/O runs on a worker thread.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from textscope.core.models import DocumentRecord
from textscope.storage.base_metadata_store import BaseMetadataStore

logger = logging.getLogger(__name__)


class JsonMetadataStore(BaseMetadataStore):
    """File-based metadata store using JSON files."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()
        self._records = self._root / "records"
        self._hashes = self._root / "hashes"
        self._records.mkdir(parents=True, exist_ok=True)
        self._hashes.mkdir(parents=True, exist_ok=True)

    async def insert_unique(self, record: DocumentRecord) -> tuple[DocumentRecord, bool]:
        if await asyncio.to_thread(self._publish, record):
            return record, True

        existing = await self.get_by_hash(record.content_hash)
        if existing is None:
            raise RuntimeError(
                f"Hash {record.content_hash} is claimed but its record is unreadable"
            )
        logger.debug("Hash %s already owned by %s", record.content_hash, existing.id)
        return existing, False

    async def get(self, document_id: str) -> DocumentRecord | None:
        return await asyncio.to_thread(self._load, document_id)

    async def get_by_hash(self, content_hash: str) -> DocumentRecord | None:
        return await asyncio.to_thread(self._load_by_hash, content_hash)

    async def list_all(self) -> list[DocumentRecord]:
        return await asyncio.to_thread(self._load_all)

    def _publish(self, record: DocumentRecord) -> bool:
        """Write the record, then claim its hash. Returns False if another id owns it."""
        record_path = self._record_path(record.id)
        _atomic_write(record_path, record.model_dump_json(indent=2))
        if self._claim_hash(record.content_hash, record.id):
            return True
        record_path.unlink(missing_ok=True)
        return False

    def _load(self, document_id: str) -> DocumentRecord | None:
        path = self._record_path(document_id)
        if not path.is_file():
            return None
        record = DocumentRecord(**json.loads(path.read_text(encoding="utf-8")))
        if self._claim_owner(record.content_hash) != record.id:
            return None
        return record

    def _load_by_hash(self, content_hash: str) -> DocumentRecord | None:
        owner = self._claim_owner(content_hash)
        return None if owner is None else self._load(owner)

    def _load_all(self) -> list[DocumentRecord]:
        """All claimed records, ordered by creation time then identity."""
        records: list[DocumentRecord] = []
        for path in self._records.glob("*.json"):
            try:
                record = DocumentRecord(**json.loads(path.read_text(encoding="utf-8")))
            except (OSError, ValueError):
                logger.warning("Skipping unreadable metadata file %s", path, exc_info=True)
                continue
            if self._claim_owner(record.content_hash) == record.id:
                records.append(record)
        records.sort(key=lambda r: (r.created_at, r.id))
        return records

    def _claim_hash(self, content_hash: str, document_id: str) -> bool:
        """Publish the hash claim. Returns False if another id owns it."""
        claim = self._hashes / content_hash
        fd, tmp_name = tempfile.mkstemp(dir=self._hashes, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(document_id)
            os.link(tmp_name, claim)
            return True
        except FileExistsError:
            return False
        finally:
            Path(tmp_name).unlink(missing_ok=True)

    def _claim_owner(self, content_hash: str) -> str | None:
        claim = self._hashes / content_hash
        try:
            return claim.read_text(encoding="utf-8").strip() or None
        except FileNotFoundError:
            return None

    def _record_path(self, document_id: str) -> Path:
        safe_id = document_id.replace("/", "_").replace("\\", "_")
        return self._records / f"{safe_id}.json"


def _atomic_write(path: Path, text: str) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
