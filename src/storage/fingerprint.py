# src/storage/fingerprint.py - v1
"""Content hashing and identity generation for the content store.

The content hash is only a dedup key. Document identities come from a
separate random scheme so they never depend on name, timestamp or bytes.
"""

from __future__ import annotations

import hashlib
import uuid


def compute_content_hash(raw_bytes: bytes) -> str:
    """SHA-256 on raw document bytes, as 64 lowercase hex characters."""
    return hashlib.sha256(raw_bytes).hexdigest()


def generate_document_id() -> str:
    """Generate a fresh opaque document identity (32 hex characters)."""
    return uuid.uuid4().hex


def blob_ref_for_hash(content_hash: str) -> str:
    """Derive the blob reference for a content hash: ``ab/abcdef...``.

    Identical bytes always map to the same reference, so concurrent writers
    of the same content target one blob.
    """
    if len(content_hash) < 3:
        raise ValueError(f"Content hash too short: {content_hash!r}")
    return f"{content_hash[:2]}/{content_hash}"
