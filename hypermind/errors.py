"""Exceptions raised by the HyperMind context store."""

from __future__ import annotations


class HyperMindError(Exception):
    """Base class for HyperMind errors."""


class EmptyStackError(HyperMindError, IndexError):
    """Raised when popping from an empty scope stack."""

    def __init__(self, message: str = "Cannot pop from empty scope stack"):
        super().__init__(message)


class StoreClosedError(HyperMindError):
    """Raised when a closed HyperMind instance is used."""


__all__ = ["EmptyStackError", "HyperMindError", "StoreClosedError"]
