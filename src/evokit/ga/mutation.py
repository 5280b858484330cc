"""Mutation operators.

Value mutations (``uniform_mutation``, ``extremal_mutation``) perturb genes in
place of their keys; segment mutations (``shrink``, ``growth``, ``swap``,
``replace``) edit the linearised genome. Parents are never modified: every
operator reads a working copy of the parent's values and builds a new
individual, which evaluates its own fitness.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Hashable, Mapping, Sequence

from ..config.constants import (
    DEFAULT_MAX_PERCENT_CHANGE,
    DEFAULT_MAX_SEGMENT_SIZE,
    DEFAULT_MUTATION_PROBABILITY,
    MAX_MUTATION_ATTEMPTS,
)
from ..config.schemas import MutationOptions, parse_options
from ..exceptions import ConfigurationError
from ..utils.seed import RandomSource
from .individual import Individual

if TYPE_CHECKING:  # pragma: no cover
    from .algorithm import EvolutionaryAlgorithm

__all__ = [
    "MutationMethod",
    "uniform_mutation",
    "extremal_mutation",
    "shrink_mutation",
    "growth_mutation",
    "swap_mutation",
    "replace_mutation",
    "mutate",
]

logger = logging.getLogger(__name__)


class MutationMethod(str, Enum):
    UNIFORM = "uniform_mutation"
    EXTREMAL = "extremal_mutation"
    SHRINK = "shrink_mutation"
    GROWTH = "growth_mutation"
    SWAP = "swap_mutation"
    REPLACE = "replace_mutation"

    @property
    def requires_variable_length(self) -> bool:
        return self is MutationMethod.SHRINK


def _per_gene(
    parent: Individual,
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    probability: float,
    perturb: Callable[[float], float],
) -> Individual:
    genes = dict(parent.genes)

    def generate(_individual: Individual, key: Hashable, _index: int) -> float:
        value = genes[key]
        return perturb(value) if rng.random() < probability else value

    return algorithm.make_individual(genes.keys(), generate)


def _with_keys(
    keys: Sequence[Hashable], values: Sequence[float], algorithm: "EvolutionaryAlgorithm"
) -> Individual:
    return algorithm.make_individual(keys, lambda _ind, _key, idx: values[idx])


def _random_values(algorithm: "EvolutionaryAlgorithm", rng: RandomSource, size: int) -> list[float]:
    return [algorithm.random_value(rng) for _ in range(size)]


def uniform_mutation(
    parent: Individual,
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    *,
    probability: float = DEFAULT_MUTATION_PROBABILITY,
    max_percent_change: float = DEFAULT_MAX_PERCENT_CHANGE,
) -> Individual:
    """Shift each gene, with ``probability``, by ``U(-max_change, max_change)``.

    ``max_change = (max - min) * max_percent_change``. The shifted value is
    rounded under integer encoding and clamped to the interval.
    """

    low, high = algorithm.interval
    max_change = (high - low) * max_percent_change

    def perturb(value: float) -> float:
        change = rng.random() * max_change * 2 - max_change
        return algorithm.clamp(algorithm.coerce(value + change))

    return _per_gene(parent, algorithm, rng, probability, perturb)


def extremal_mutation(
    parent: Individual,
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    *,
    probability: float = DEFAULT_MUTATION_PROBABILITY,
) -> Individual:
    """Replace each gene, with ``probability``, by one of the interval bounds."""

    low, high = algorithm.bounds

    def perturb(_value: float) -> float:
        return high if rng.random() > 0.5 else low

    return _per_gene(parent, algorithm, rng, probability, perturb)


def shrink_mutation(
    parent: Individual,
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    *,
    max_shrink_size: int = DEFAULT_MAX_SEGMENT_SIZE,
) -> Individual | None:
    """Delete a random slice of up to ``max_shrink_size`` genes.

    Returns ``None`` when nothing would be left.
    """

    values = parent.to_array()
    start = int(rng.integers(0, len(values) + 1))
    size = int(rng.integers(0, max_shrink_size + 1))
    del values[start : start + size]
    return algorithm.from_values(values) if values else None


def growth_mutation(
    parent: Individual,
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    *,
    max_growth_size: int = DEFAULT_MAX_SEGMENT_SIZE,
) -> Individual | None:
    """Insert up to ``max_growth_size`` random genes at a random position."""

    values = parent.to_array()
    position = int(rng.integers(0, len(values) + 1))
    size = int(rng.integers(0, max_growth_size + 1))
    values[position:position] = _random_values(algorithm, rng, size)
    return algorithm.from_values(values) if values else None


def swap_mutation(
    parent: Individual,
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    *,
    max_swap_size: int = DEFAULT_MAX_SEGMENT_SIZE,
) -> Individual:
    """Exchange two non-overlapping segments of equal length.

    The segment length is drawn from ``[0, min(max_swap_size, len // 2)]``; the
    first segment starts in ``[0, len - 2 * size]`` and the second one starts
    no earlier than the end of the first. Gene keys are preserved.
    """

    keys = parent.keys()
    values = parent.to_array()
    length = len(values)

    size = int(rng.integers(0, min(max_swap_size, length // 2) + 1))
    if size > 0:
        first = int(rng.integers(0, length - 2 * size + 1))
        second = int(rng.integers(first + size, length - size + 1))
        values[first : first + size], values[second : second + size] = (
            values[second : second + size],
            values[first : first + size],
        )
    return _with_keys(keys, values, algorithm)


def replace_mutation(
    parent: Individual,
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    *,
    max_replace_size: int = DEFAULT_MAX_SEGMENT_SIZE,
    max_insert_size: int = DEFAULT_MAX_SEGMENT_SIZE,
) -> Individual | None:
    """Swap a random slice for a freshly generated one of random length.

    Up to ``max_replace_size`` genes starting at a random position are removed
    and up to ``max_insert_size`` random genes are inserted in their place.
    """

    values = parent.to_array()
    start = int(rng.integers(0, len(values))) if values else 0
    removed = int(rng.integers(0, max_replace_size + 1))
    inserted = int(rng.integers(0, max_insert_size + 1))
    values[start : start + removed] = _random_values(algorithm, rng, inserted)
    return algorithm.from_values(values) if values else None


def _operator(
    method: MutationMethod, opts: MutationOptions
) -> Callable[[Individual, "EvolutionaryAlgorithm", RandomSource], Individual | None]:
    if method is MutationMethod.EXTREMAL:
        return lambda p, a, r: extremal_mutation(p, a, r, probability=opts.probability)
    if method is MutationMethod.SHRINK:
        return lambda p, a, r: shrink_mutation(p, a, r, max_shrink_size=opts.max_shrink_size)
    if method is MutationMethod.GROWTH:
        return lambda p, a, r: growth_mutation(p, a, r, max_growth_size=opts.max_growth_size)
    if method is MutationMethod.SWAP:
        return lambda p, a, r: swap_mutation(p, a, r, max_swap_size=opts.max_swap_size)
    if method is MutationMethod.REPLACE:
        return lambda p, a, r: replace_mutation(
            p,
            a,
            r,
            max_replace_size=opts.max_replace_size,
            max_insert_size=opts.max_insert_size,
        )
    return lambda p, a, r: uniform_mutation(
        p,
        a,
        r,
        probability=opts.probability,
        max_percent_change=opts.max_percent_change,
    )


def mutate(
    parents: Sequence[Individual],
    algorithm: "EvolutionaryAlgorithm",
    rng: RandomSource,
    method: MutationMethod | str = MutationMethod.UNIFORM,
    options: MutationOptions | Mapping[str, Any] | None = None,
) -> list[Individual]:
    """Produce one mutated child per parent, preserving order.

    A mutation that empties the genome is retried on the same parent.
    Unknown methods fall back to ``uniform_mutation``.

    Raises
    ------
    ConfigurationError
        If ``shrink_mutation`` is requested on a fixed-gene algorithm.
    RuntimeError
        If a parent keeps producing empty genomes.
    """

    if not parents:
        return []

    opts = parse_options(MutationOptions, options)
    try:
        method = MutationMethod(method)
    except ValueError:
        logger.debug("Unknown mutation method %r; using uniform_mutation", method)
        method = MutationMethod.UNIFORM

    if method.requires_variable_length and not algorithm.variable_length:
        raise ConfigurationError(f"{method.value} requires a variable-length algorithm")

    operator = _operator(method, opts)
    children: list[Individual] = []
    for parent in parents:
        for attempt in range(MAX_MUTATION_ATTEMPTS):
            child = operator(parent, algorithm, rng)
            if child is not None:
                break
            logger.debug("%s produced an empty genome; retry %d", method.value, attempt + 1)
        else:
            raise RuntimeError(
                f"{method.value} produced only empty genomes after {MAX_MUTATION_ATTEMPTS} attempts"
            )
        children.append(child)
    return children
