# src/logging/logger.py - v2
"""Formatters and ``setup_logging`` for the ``textscope`` logger tree.

Modules log through ``logging.getLogger(__name__)``; the request context set
by the facade (request id, operation, document id) is attached here.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from textscope.logging.context import get_context

_TEXT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s%(request)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with the request context under ``context``."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Single-line format for terminals: ``[operation] (document)`` after the logger name."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        request = ""
        if ctx.operation:
            request += f" [{ctx.operation}]"
        if ctx.document_id:
            request += f" ({ctx.document_id})"
        record.request = request
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """Attach a stderr handler (and optionally a rotating file) to ``textscope``.

    Safe to call more than once; earlier handlers are replaced.
    """
    root_logger = logging.getLogger("textscope")
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from textscope.logging.handlers import create_rotating_handler

        handlers.append(create_rotating_handler(log_file, rotation=rotation, retention=retention))
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
