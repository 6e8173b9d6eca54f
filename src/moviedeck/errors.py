from __future__ import annotations


class MoviedeckError(RuntimeError):
    """Base class for errors moviedeck surfaces to its callers."""


__all__ = ["MoviedeckError"]
