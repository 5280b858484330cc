"""Random generator management.

Operators never touch global random state: every draw goes through a
generator handed to them, normally a :class:`numpy.random.Generator` built by
:func:`rng_factory`. Any object matching :class:`RandomSource` works, which is
how tests inject fixed draws.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import numpy as np

from ..config.settings import get_settings

__all__ = ["RandomSource", "rng_factory"]

logger = logging.getLogger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    """Subset of :class:`numpy.random.Generator` used by the operators."""

    def random(self) -> float:
        """Uniform float in ``[0, 1)``."""

    def integers(self, low: int, high: int) -> int:
        """Uniform integer in ``[low, high)``."""


def rng_factory(seed: int | None = None) -> np.random.Generator:
    """Return a PCG64 generator.

    ``seed`` falls back to ``get_settings().random_seed`` and then to fresh OS
    entropy.
    """

    if seed is None:
        seed = get_settings().random_seed
    if seed is not None:
        logger.debug("Seeding random generator with %s", seed)
    return np.random.default_rng(seed)
