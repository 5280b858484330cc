"""Grouping of selected parents into crossover groups."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from ..config.constants import DEFAULT_GROUP_SIZE
from ..exceptions import ConfigurationError
from ..utils.seed import RandomSource
from .individual import Individual

__all__ = ["GroupingMethod", "random_groups", "group_parents"]

logger = logging.getLogger(__name__)


class GroupingMethod(str, Enum):
    RANDOM = "random"


def random_groups(
    parents: Sequence[Individual], n: int, rng: RandomSource, group_size: int = DEFAULT_GROUP_SIZE
) -> list[list[Individual]]:
    """``n`` groups whose members are drawn uniformly, with replacement, from ``parents``."""

    size = len(parents)
    return [
        [parents[int(rng.integers(0, size))] for _ in range(group_size)]
        for _ in range(n)
    ]


def group_parents(
    parents: Sequence[Individual],
    n: int,
    rng: RandomSource,
    method: GroupingMethod | str = GroupingMethod.RANDOM,
    group_size: int = DEFAULT_GROUP_SIZE,
) -> list[list[Individual]]:
    """Build ``n`` groups of ``group_size`` parents for crossover.

    An empty ``parents`` sequence or ``n == 0`` yields no groups. Unknown
    methods use random grouping.
    """

    if group_size < 1:
        raise ConfigurationError(f"group_size must be at least 1, got {group_size}")
    if not parents or n <= 0:
        return []

    try:
        method = GroupingMethod(method)
    except ValueError:
        logger.debug("Unknown grouping method %r; using random", method)
        method = GroupingMethod.RANDOM

    return random_groups(parents, n, rng, group_size)
