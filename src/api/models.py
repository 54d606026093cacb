# src/api/models.py - v1
"""API-level models: boundary payloads and the tagged Outcome wrapper."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

from textscope.core.errors import ErrorKind, TextScopeError

T = TypeVar("T")


class UploadResult(BaseModel):
    """Return value of an upload."""

    id: str
    name: str
    location: str
    deduplicated: bool = False


class DocumentPayload(BaseModel):
    """A stored document as handed to the transport layer."""

    id: str
    name: str
    content: bytes
    hash: str


class WordCloudImage(BaseModel):
    """Rendered word cloud."""

    document_id: str
    content: bytes
    content_type: str = "image/png"


class Outcome(BaseModel, Generic[T]):
    """Success payload or one enumerated error kind, never both."""

    ok: bool
    value: T | None = None
    error: ErrorKind | None = None
    detail: str | None = None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: TextScopeError) -> Outcome[T]:
        return cls(ok=False, error=error.kind, detail=str(error))

    @property
    def is_client_error(self) -> bool:
        return self.error is not None and self.error.is_client_error

    @property
    def retryable(self) -> bool:
        return self.error is not None and self.error.retryable
