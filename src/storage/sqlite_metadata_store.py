# src/storage/sqlite_metadata_store.py - v2
"""SQLite-based metadata store (STORAGE_BACKEND=sqlite, default).

Uses stdlib sqlite3. Dedup atomicity comes from the UNIQUE constraint on
content_hash: the insert is ``ON CONFLICT DO NOTHING`` followed by a read of
whichever row owns the hash.

Queries run on a worker thread (``asyncio.to_thread``) so a slow or locked
database never stalls the event loop and caller timeouts can fire. One
connection is shared between worker threads and serialized by a lock.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path

from textscope.core.models import DocumentRecord
from textscope.storage.base_metadata_store import BaseMetadataStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    content_hash TEXT NOT NULL UNIQUE,
    size INTEGER NOT NULL,
    created_at TEXT NOT NULL,
    blob_ref TEXT NOT NULL
);
"""

_COLUMNS = "id, name, content_hash, size, created_at, blob_ref"


class SqliteMetadataStore(BaseMetadataStore):
    """SQLite-backed metadata store."""

    unavailable_errors = (sqlite3.OperationalError, OSError)

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def insert_unique(self, record: DocumentRecord) -> tuple[DocumentRecord, bool]:
        created = await asyncio.to_thread(self._insert, record)
        if created:
            return record, True

        existing = await self.get_by_hash(record.content_hash)
        if existing is None:
            # Conflict reported but no row: the id collided, not the hash.
            raise sqlite3.IntegrityError(f"Could not insert document {record.id!r}")
        logger.debug("Hash %s already owned by %s", record.content_hash, existing.id)
        return existing, False

    async def get(self, document_id: str) -> DocumentRecord | None:
        return await asyncio.to_thread(
            self._fetch_one, f"SELECT {_COLUMNS} FROM documents WHERE id = ?", document_id,
        )

    async def get_by_hash(self, content_hash: str) -> DocumentRecord | None:
        return await asyncio.to_thread(
            self._fetch_one,
            f"SELECT {_COLUMNS} FROM documents WHERE content_hash = ?",
            content_hash,
        )

    async def list_all(self) -> list[DocumentRecord]:
        return await asyncio.to_thread(self._fetch_all)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()

    def _insert(self, record: DocumentRecord) -> bool:
        with self._lock:
            cursor = self._conn.execute(
                f"""INSERT INTO documents ({_COLUMNS})
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(content_hash) DO NOTHING""",
                (
                    record.id,
                    record.name,
                    record.content_hash,
                    record.size,
                    record.created_at.isoformat(),
                    record.blob_ref,
                ),
            )
            self._conn.commit()
            return cursor.rowcount == 1

    def _fetch_one(self, query: str, key: str) -> DocumentRecord | None:
        with self._lock:
            row = self._conn.execute(query, (key,)).fetchone()
        return None if row is None else _row_to_record(row)

    def _fetch_all(self) -> list[DocumentRecord]:
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM documents ORDER BY seq"
            ).fetchall()
        return [_row_to_record(row) for row in rows]


def _row_to_record(row: tuple) -> DocumentRecord:
    return DocumentRecord(
        id=row[0],
        name=row[1],
        content_hash=row[2],
        size=row[3],
        created_at=datetime.fromisoformat(row[4]),
        blob_ref=row[5],
    )
