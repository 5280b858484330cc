"""Replacement operators deciding who survives into the next generation.

The functions are pure: they return the next generation and leave their
inputs untouched. :meth:`evokit.ga.population.Population.replacement` installs
the result.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping, Sequence

from ..config.schemas import ReplacementOptions, parse_options
from .individual import Individual

__all__ = [
    "ReplacementMethod",
    "rank",
    "generational",
    "comma_strategy",
    "plus_strategy",
    "separate_competition",
    "replace",
]

logger = logging.getLogger(__name__)


class ReplacementMethod(str, Enum):
    GENERATIONAL = "generational"
    COMMA_STRATEGY = "comma_strategy"
    PLUS_STRATEGY = "plus_strategy"
    SEPARATE_COMPETITION = "separate_competition"


def rank(individuals: Sequence[Individual]) -> list[Individual]:
    """Sort by fitness, descending; equal fitness keeps the input order."""

    return sorted(individuals, key=lambda ind: ind.fitness, reverse=True)


def generational(children: Sequence[Individual]) -> list[Individual]:
    return list(children)


def comma_strategy(children: Sequence[Individual], size: int) -> list[Individual]:
    """(mu, lambda): the best ``size`` children; parents are discarded."""

    return rank(children)[:size]


def plus_strategy(
    parents: Sequence[Individual], children: Sequence[Individual], size: int
) -> list[Individual]:
    """(mu + lambda): the best ``size`` of parents and children together."""

    return rank([*parents, *children])[:size]


def separate_competition(
    parents: Sequence[Individual],
    children: Sequence[Individual],
    current_size: int,
    generation_gap: int,
) -> list[Individual]:
    """Best ``current_size - generation_gap`` parents followed by the best ``generation_gap`` children."""

    kept = max(0, current_size - generation_gap)
    return rank(parents)[:kept] + rank(children)[:generation_gap]


def replace(
    parents: Sequence[Individual],
    children: Sequence[Individual],
    current_size: int,
    method: ReplacementMethod | str = ReplacementMethod.GENERATIONAL,
    options: ReplacementOptions | Mapping[str, Any] | None = None,
) -> list[Individual]:
    """Return the next generation. Unknown methods are treated as ``generational``."""

    opts = parse_options(ReplacementOptions, options)
    try:
        method = ReplacementMethod(method)
    except ValueError:
        logger.debug("Unknown replacement method %r; using generational", method)
        method = ReplacementMethod.GENERATIONAL

    size = opts.new_generation_size or current_size
    if method is ReplacementMethod.COMMA_STRATEGY:
        return comma_strategy(children, size)
    if method is ReplacementMethod.PLUS_STRATEGY:
        return plus_strategy(parents, children, size)
    if method is ReplacementMethod.SEPARATE_COMPETITION:
        return separate_competition(parents, children, current_size, opts.generation_gap)
    return generational(children)
