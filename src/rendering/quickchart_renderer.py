# src/rendering/quickchart_renderer.py - v1
"""QuickChart word-cloud adapter implementing BaseWordCloudRenderer.

Posts the frequency table as JSON and returns the image body. The table is
sent either as a word -> count mapping or as ``word:count`` lines with
``useWordList`` set, depending on ``payload_style``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Literal

import httpx

from textscope.core.errors import DependencyUnavailableError, RenderingFailedError
from textscope.core.models import WordFrequency
from textscope.rendering.base_renderer import BaseWordCloudRenderer

logger = logging.getLogger(__name__)

_MAX_DETAIL_CHARS = 500


class QuickChartRenderer(BaseWordCloudRenderer):
    """HTTP client for a QuickChart-compatible word-cloud endpoint."""

    def __init__(
        self,
        api_url: str = "https://quickchart.io/wordcloud",
        width: int = 800,
        height: int = 400,
        image_format: Literal["png", "svg"] = "png",
        font_scale: int = 15,
        colors: list[str] | None = None,
        payload_style: Literal["mapping", "lines"] = "mapping",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_url = api_url
        self._width = width
        self._height = height
        self._format = image_format
        self._font_scale = font_scale
        self._colors = colors or []
        self._payload_style = payload_style
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def content_type(self) -> str:
        return "image/svg+xml" if self._format == "svg" else "image/png"

    def build_payload(self, frequencies: list[WordFrequency]) -> dict[str, Any]:
        """Request body in the shape the endpoint expects."""
        payload: dict[str, Any] = {
            "width": self._width,
            "height": self._height,
            "format": self._format,
            "fontScale": self._font_scale,
        }
        if self._colors:
            payload["colors"] = self._colors
        if self._payload_style == "lines":
            payload["text"] = "\n".join(f"{f.word}:{f.count}" for f in frequencies)
            payload["useWordList"] = True
        else:
            payload["text"] = {f.word: f.count for f in frequencies}
        return payload

    async def render(self, frequencies: list[WordFrequency]) -> bytes:
        client = self._get_client()
        payload = self.build_payload(frequencies)

        t0 = time.monotonic()
        try:
            response = await client.post(self._api_url, json=payload, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise DependencyUnavailableError("word cloud renderer", f"timed out: {e}") from e
        except httpx.TransportError as e:
            raise DependencyUnavailableError("word cloud renderer", str(e)) from e
        latency = int((time.monotonic() - t0) * 1000)

        if not response.is_success:
            detail = response.text[:_MAX_DETAIL_CHARS]
            logger.warning(
                "Word cloud renderer returned HTTP %d after %dms: %s",
                response.status_code, latency, detail,
            )
            raise RenderingFailedError(response.status_code, detail)

        logger.info(
            "Rendered word cloud (%d words, %d bytes) in %dms",
            len(frequencies), len(response.content), latency,
        )
        return response.content

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client
