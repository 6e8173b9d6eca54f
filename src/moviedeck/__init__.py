"""Swipe-style movie discovery on top of the TVDB catalog."""

from .errors import MoviedeckError

__version__ = "0.1.0"

__all__ = ["MoviedeckError", "__version__"]
