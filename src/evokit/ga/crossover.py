"""Crossover operators.

Each operator receives one group of parents and returns zero or more
individuals; :func:`crossover_groups` applies an operator to every group and
concatenates the results. Offspring genomes are rebuilt with positional keys
and their fitness is evaluated on construction.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Mapping, Sequence

from ..config.constants import DEFAULT_CROSSOVER_PROBABILITY
from ..config.schemas import CrossoverOptions, parse_options
from ..utils.seed import RandomSource
from .individual import Individual

if TYPE_CHECKING:  # pragma: no cover
    from .algorithm import EvolutionaryAlgorithm

__all__ = [
    "CrossoverMethod",
    "one_point_crossover",
    "mean_crossover",
    "crossover_groups",
]

logger = logging.getLogger(__name__)


class CrossoverMethod(str, Enum):
    ONE_POINT = "one_point"
    MEAN = "mean"


def _skip(probability: float, rng: RandomSource) -> bool:
    return probability < 1 and rng.random() >= probability


def one_point_crossover(
    group: Sequence[Individual],
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    *,
    probability: float = DEFAULT_CROSSOVER_PROBABILITY,
    different_points: bool = False,
) -> list[Individual]:
    """Single cut-and-splice of the first two parents of ``group``.

    ``child_a = p1[:cut1] + p2[cut2:]`` and ``child_b = p2[:cut2] + p1[cut1:]``.
    Cut points are interior (``1 <= cut <= len - 1``); without
    ``different_points`` both parents share one cut drawn against the shorter
    genome. Parents shorter than two genes produce nothing. When the
    ``probability`` gate skips the group, its members are returned as they are.
    """

    if not group:
        return []
    if len(group) == 1:
        return [group[0]]
    if _skip(probability, rng):
        logger.debug("One-point crossover skipped by probability gate")
        return list(group)

    p1 = group[0].to_array()
    p2 = group[1].to_array()
    if len(p1) < 2 or len(p2) < 2:
        return []

    if different_points:
        cut1 = int(rng.integers(1, len(p1)))
        cut2 = int(rng.integers(1, len(p2)))
    else:
        cut1 = cut2 = int(rng.integers(1, min(len(p1), len(p2))))

    offspring = (p1[:cut1] + p2[cut2:], p2[:cut2] + p1[cut1:])
    return [algorithm.from_values(values) for values in offspring if values]


def mean_crossover(
    group: Sequence[Individual],
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    *,
    probability: float = DEFAULT_CROSSOVER_PROBABILITY,
) -> list[Individual]:
    """Gene-wise arithmetic mean of the first two parents.

    The child is as long as the shorter parent. A skipped group, or a group of
    one, yields its first member unchanged.
    """

    if not group:
        return []
    if _skip(probability, rng):
        logger.debug("Mean crossover skipped by probability gate")
        return [group[0]]
    if len(group) == 1:
        return [group[0]]

    values = [(a + b) / 2 for a, b in zip(group[0].to_array(), group[1].to_array())]
    if not values:
        return []
    return [algorithm.from_values(values)]


def crossover_groups(
    groups: Sequence[Sequence[Individual]],
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    method: CrossoverMethod | str = CrossoverMethod.ONE_POINT,
    options: CrossoverOptions | Mapping[str, Any] | None = None,
) -> list[Individual]:
    """Recombine every group and concatenate the offspring.

    Unknown methods fall back to ``one_point``.
    """

    if not groups:
        return []

    opts = parse_options(CrossoverOptions, options)
    try:
        method = CrossoverMethod(method)
    except ValueError:
        logger.debug("Unknown crossover method %r; using one_point", method)
        method = CrossoverMethod.ONE_POINT

    operator: Callable[[Sequence[Individual]], list[Individual]]
    if method is CrossoverMethod.MEAN:
        operator = partial(
            mean_crossover, algorithm=algorithm, rng=rng, probability=opts.probability
        )
    else:
        operator = partial(
            one_point_crossover,
            algorithm=algorithm,
            rng=rng,
            probability=opts.probability,
            different_points=opts.different_points,
        )

    children: list[Individual] = []
    for group in groups:
        children.extend(operator(group))
    return children
