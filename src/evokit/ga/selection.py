"""Parent selection operators.

Every function takes a snapshot of the population (a plain sequence of
individuals) and returns the chosen parents, duplicates allowed. Nothing here
mutates its input.

Roulette variants clamp negative fitness to zero. A roulette whose total weight
is zero cannot pick anybody and yields an empty list; that is a valid result,
not an error.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Mapping, Sequence

import numpy as np

from ..config.schemas import SelectionOptions, parse_options
from ..utils.seed import RandomSource
from .individual import Individual

__all__ = [
    "SelectionMethod",
    "RouletteMethod",
    "best_selection",
    "random_selection",
    "roulette_selection",
    "remainder_selection",
    "stochastic_universal_sampling",
    "select_parents",
]

logger = logging.getLogger(__name__)


class SelectionMethod(str, Enum):
    BEST = "best"
    RANDOM = "random"
    ROULETTE = "roulette"


class RouletteMethod(str, Enum):
    WITH_REPLACEMENT = "with_replacement"
    WITHOUT_REPLACEMENT = "without_replacement"
    REMAINDER_WITH_REPLACEMENT = "remainder_with_replacement"
    REMAINDER_WITHOUT_REPLACEMENT = "remainder_without_replacement"
    UNIVERSAL = "universal"

    @classmethod
    def _missing_(cls, value: object) -> "RouletteMethod | None":
        # legacy spelling
        if value == "univerzal":
            return cls.UNIVERSAL
        return None


def _clamped_weights(individuals: Sequence[Individual]) -> np.ndarray:
    return np.array([max(0.0, ind.fitness) for ind in individuals], dtype=float)


def _spin(weights: np.ndarray, position: float) -> int:
    """Index owning ``position`` on the cumulative weight curve.

    Slot ``i`` covers ``[c[i-1], c[i])``, so zero-weight slots are never hit.
    """

    cumulative = np.cumsum(weights)
    idx = int(np.searchsorted(cumulative, position, side="right"))
    if idx >= len(weights):
        # position rounded onto the total; fall back to the last live slot
        idx = int(np.flatnonzero(weights > 0)[-1])
    return idx


def best_selection(individuals: Sequence[Individual], n: int) -> list[Individual]:
    """The ``n`` fittest individuals, descending; ties keep population order."""

    return sorted(individuals, key=lambda ind: ind.fitness, reverse=True)[: max(0, n)]


def random_selection(
    individuals: Sequence[Individual], n: int, rng: RandomSource
) -> list[Individual]:
    """``n`` uniform draws with replacement."""

    if not individuals:
        return []
    size = len(individuals)
    return [individuals[int(rng.integers(0, size))] for _ in range(max(0, n))]


def _draw(
    individuals: Sequence[Individual],
    weights: np.ndarray,
    n: int,
    rng: RandomSource,
    *,
    replace: bool,
) -> list[Individual]:
    """Independent roulette draws; ``replace=False`` burns one unit per draw."""

    weights = weights.copy()
    roulette_size = float(weights.sum())
    chosen: list[Individual] = []
    while len(chosen) < n:
        if roulette_size <= 0:
            logger.debug(
                "Roulette exhausted after %d of %d draws", len(chosen), n
            )
            break
        idx = _spin(weights, rng.random() * roulette_size)
        chosen.append(individuals[idx])
        if not replace:
            weights[idx] = max(0.0, weights[idx] - 1.0)
            roulette_size = float(weights.sum())
    return chosen


def roulette_selection(
    individuals: Sequence[Individual],
    n: int,
    rng: RandomSource,
    *,
    replace: bool = True,
) -> list[Individual]:
    """Fitness proportionate selection.

    With ``replace=False`` every draw lowers the chosen individual's weight by
    one (never below zero) so a weight of ``k`` allows roughly ``k`` draws.
    Drawing stops early once the roulette is empty.
    """

    weights = _clamped_weights(individuals)
    if n <= 0 or weights.sum() == 0:
        logger.debug("Roulette size is zero; no parents selected")
        return []
    return _draw(individuals, weights, n, rng, replace=replace)


def remainder_selection(
    individuals: Sequence[Individual],
    n: int,
    rng: RandomSource,
    *,
    replace: bool = True,
) -> list[Individual]:
    """Remainder stochastic sampling.

    Each individual first receives ``floor(fitness)`` deterministic copies, in
    population order, stopping at ``n``. Remaining slots are filled by roulette
    draws over the fractional parts of the fitness values.
    """

    if n <= 0:
        return []
    weights = _clamped_weights(individuals)

    parents: list[Individual] = []
    for individual, weight in zip(individuals, weights):
        copies = min(int(math.floor(weight)), n - len(parents))
        parents.extend([individual] * copies)
        if len(parents) >= n:
            return parents

    fractions = np.mod(weights, 1.0)
    if fractions.sum() == 0:
        logger.debug("Fractional roulette is empty; returning %d whole-part parents", len(parents))
        return parents

    parents.extend(_draw(individuals, fractions, n - len(parents), rng, replace=replace))
    return parents


def _shuffled_order(size: int, rng: RandomSource) -> list[int]:
    order = list(range(size))
    for a in range(size - 1):
        b = int(rng.integers(a, size))
        order[a], order[b] = order[b], order[a]
    return order


def stochastic_universal_sampling(
    individuals: Sequence[Individual],
    n: int,
    rng: RandomSource,
    *,
    shuffle_order: bool = False,
) -> list[Individual]:
    """Stochastic universal sampling.

    A single random offset in ``[0, F / n)`` is followed by ``n`` equally spaced
    pointers (``F`` being the total clamped fitness). One cursor walks the
    cumulative fitness curve, optionally in shuffled order, and never moves
    backwards, so every individual is picked either ``floor`` or ``ceil`` of its
    expected count.
    """

    weights = _clamped_weights(individuals)
    roulette_size = float(weights.sum())
    if n <= 0 or roulette_size == 0:
        logger.debug("Roulette size is zero; no parents selected")
        return []

    order = _shuffled_order(len(individuals), rng) if shuffle_order else list(range(len(individuals)))

    pointer_step = roulette_size / n
    offset = rng.random() * pointer_step
    last_live = [idx for idx in order if weights[idx] > 0][-1]

    parents: list[Individual] = []
    covered = 0.0
    cursor = 0
    for i in range(n):
        position = offset + i * pointer_step
        while covered <= position and cursor < len(order):
            covered += weights[order[cursor]]
            cursor += 1
        if covered <= position:
            # pointer rounded onto the total
            parents.append(individuals[last_live])
        else:
            parents.append(individuals[order[cursor - 1]])
    return parents


def select_parents(
    individuals: Sequence[Individual],
    method: SelectionMethod | str,
    n: int,
    rng: RandomSource,
    options: SelectionOptions | Mapping[str, Any] | None = None,
) -> list[Individual]:
    """Dispatch to the selection operator named by ``method``.

    Unknown methods select nobody and return an empty list. Unknown roulette
    variants fall back to ``with_replacement``.
    """

    opts = parse_options(SelectionOptions, options)
    try:
        method = SelectionMethod(method)
    except ValueError:
        logger.debug("Unknown selection method %r; no parents selected", method)
        return []

    if method is SelectionMethod.BEST:
        return best_selection(individuals, n)
    if method is SelectionMethod.RANDOM:
        return random_selection(individuals, n, rng)

    try:
        roulette = RouletteMethod(opts.roulette_method)
    except ValueError:
        logger.debug("Unknown roulette method %r; using with_replacement", opts.roulette_method)
        roulette = RouletteMethod.WITH_REPLACEMENT

    if roulette is RouletteMethod.UNIVERSAL:
        return stochastic_universal_sampling(individuals, n, rng, shuffle_order=opts.shuffle_order)
    if roulette in (
        RouletteMethod.REMAINDER_WITH_REPLACEMENT,
        RouletteMethod.REMAINDER_WITHOUT_REPLACEMENT,
    ):
        return remainder_selection(
            individuals,
            n,
            rng,
            replace=roulette is RouletteMethod.REMAINDER_WITH_REPLACEMENT,
        )
    return roulette_selection(
        individuals, n, rng, replace=roulette is RouletteMethod.WITH_REPLACEMENT
    )
