"""textscope: deduplicating text store with frequency and similarity analysis."""

from textscope.version import __version__

__all__ = ["__version__"]
