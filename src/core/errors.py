# src/core/errors.py - v1
"""Error taxonomy shared by storage, analysis, rendering and the facade.

Components raise these exceptions; only ``api.facade`` turns them into
tagged ``Outcome`` values. Every kind stays distinguishable to the caller.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure kinds surfaced at the boundary."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    STORAGE_INCONSISTENT = "storage_inconsistent"
    DECODING_ERROR = "decoding_error"
    RENDERING_FAILED = "rendering_failed"
    DEPENDENCY_UNAVAILABLE = "dependency_unavailable"

    @property
    def is_client_error(self) -> bool:
        """True for caller mistakes, False for server-side failures."""
        return self in (ErrorKind.INVALID_INPUT, ErrorKind.NOT_FOUND)

    @property
    def retryable(self) -> bool:
        return self is ErrorKind.DEPENDENCY_UNAVAILABLE


class TextScopeError(Exception):
    """Base class for all domain failures."""

    kind: ErrorKind


class InvalidInputError(TextScopeError):
    """Empty name or empty content on ingestion."""

    kind = ErrorKind.INVALID_INPUT


class NotFoundError(TextScopeError):
    """No document with the requested identity."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(f"Document {document_id!r} not found")


class StorageInconsistentError(TextScopeError):
    """Metadata record exists but its backing blob is missing."""

    kind = ErrorKind.STORAGE_INCONSISTENT

    def __init__(self, document_id: str, blob_ref: str) -> None:
        self.document_id = document_id
        self.blob_ref = blob_ref
        super().__init__(
            f"Document {document_id!r} has metadata but blob {blob_ref!r} is missing"
        )


class DecodingError(TextScopeError):
    """Content cannot be decoded as UTF-8 text."""

    kind = ErrorKind.DECODING_ERROR


class RenderingFailedError(TextScopeError):
    """The word-cloud renderer answered with a non-success response."""

    kind = ErrorKind.RENDERING_FAILED

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Renderer returned HTTP {status_code}: {detail}")


class DependencyUnavailableError(TextScopeError):
    """A store or the renderer is unreachable or timed out."""

    kind = ErrorKind.DEPENDENCY_UNAVAILABLE

    def __init__(self, dependency: str, reason: str) -> None:
        self.dependency = dependency
        self.reason = reason
        super().__init__(f"{dependency} unavailable: {reason}")


class BlobMissingError(Exception):
    """Raised by blob stores when a reference has no stored bytes.

    Kept outside the domain hierarchy: ``ContentStore`` translates it into
    ``StorageInconsistentError`` once it knows the owning document.
    """

    def __init__(self, blob_ref: str) -> None:
        self.blob_ref = blob_ref
        super().__init__(f"Blob {blob_ref!r} not found")
