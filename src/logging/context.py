# src/logging/context.py - v1
"""Contextual logging support: attach request_id, operation, document_id to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per boundary operation.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_document_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document_id", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    operation: str | None = None
    document_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        operation=_operation.get(),
        document_id=_document_id.get(),
    )


def set_request_context(
    request_id: str, operation: str, document_id: str | None = None,
) -> None:
    """Set request-level context (called once per boundary operation)."""
    _request_id.set(request_id)
    _operation.set(operation)
    _document_id.set(document_id)


def set_document_context(document_id: str) -> None:
    """Attach the document being worked on (e.g. once an upload has an id)."""
    _document_id.set(document_id)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _operation.set(None)
    _document_id.set(None)
