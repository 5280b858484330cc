"""Exceptions shared across the package."""

from __future__ import annotations

__all__ = ["ConfigurationError"]


class ConfigurationError(ValueError):
    """Raised when an algorithm, population or operator is misconfigured."""
