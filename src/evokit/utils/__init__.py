"""Utility helpers shared across the package."""

from .seed import RandomSource, rng_factory

__all__ = ["RandomSource", "rng_factory"]
