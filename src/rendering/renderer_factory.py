# src/rendering/renderer_factory.py - v1
"""Factory for the word-cloud renderer."""

from __future__ import annotations

from textscope.config.settings import Settings
from textscope.rendering.base_renderer import BaseWordCloudRenderer
from textscope.rendering.quickchart_renderer import QuickChartRenderer


def create_renderer(settings: Settings | None = None) -> BaseWordCloudRenderer:
    """Instantiate the renderer from settings (QuickChart defaults if None)."""
    if settings is None:
        return QuickChartRenderer()
    return QuickChartRenderer(
        api_url=settings.wordcloud_api_url,
        width=settings.wordcloud_width,
        height=settings.wordcloud_height,
        image_format=settings.wordcloud_format,
        font_scale=settings.wordcloud_font_scale,
        colors=settings.wordcloud_colors_list,
        payload_style=settings.wordcloud_payload_style,
        timeout=settings.wordcloud_timeout_s,
    )
