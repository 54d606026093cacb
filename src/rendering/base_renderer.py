# src/rendering/base_renderer.py - v1
"""Abstract word-cloud renderer interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from textscope.core.models import WordFrequency


class BaseWordCloudRenderer(ABC):
    """Turns a frequency table into a raster image."""

    @abstractmethod
    async def render(self, frequencies: list[WordFrequency]) -> bytes:
        """Render the table and return the raw image bytes.

        Raises:
            RenderingFailedError: The renderer answered with a failure.
            DependencyUnavailableError: The renderer could not be reached.
        """

    @property
    @abstractmethod
    def content_type(self) -> str:
        """MIME type of the rendered image."""

    async def aclose(self) -> None:
        """Release network resources."""
