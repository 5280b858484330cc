"""Algorithm configuration: gene layout, value interval, encoding and fitness."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Integral, Real
from typing import TYPE_CHECKING, Any, Hashable, Iterable, Sequence

from ..config.constants import DEFAULT_MAX_VARIABLE_LENGTH, ENCODING_ALIASES
from ..exceptions import ConfigurationError
from ..utils.seed import RandomSource, rng_factory
from .individual import FitnessFunction, GeneGenerator, Individual, positional_keys

if TYPE_CHECKING:  # pragma: no cover
    from .population import Population

__all__ = ["Encoding", "EvolutionaryAlgorithm", "round_half_up"]

logger = logging.getLogger(__name__)


class Encoding(str, Enum):
    """Numeric encoding of gene values."""

    INTEGER = "INTEGER"
    REAL = "REAL"

    @classmethod
    def parse(cls, value: "Encoding | str") -> "Encoding":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ConfigurationError(f"encoding must be a string, got {type(value).__name__}")
        canonical = ENCODING_ALIASES.get(value.strip().upper())
        if canonical is None:
            raise ConfigurationError(f"unknown encoding '{value}'")
        return cls(canonical)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from minus infinity."""

    return int(math.floor(value + 0.5))


def _validate_interval(interval: Any) -> tuple[float, float]:
    if isinstance(interval, (str, bytes)) or not isinstance(interval, Sequence):
        raise ConfigurationError("interval must be a (min, max) pair")
    if len(interval) != 2:
        raise ConfigurationError("interval must contain exactly two values: min and max")
    low, high = interval
    for bound in (low, high):
        if isinstance(bound, bool) or not isinstance(bound, Real) or not math.isfinite(bound):
            raise ConfigurationError(f"interval bounds must be finite numbers, got {bound!r}")
    if low > high:
        raise ConfigurationError(f"interval min must not exceed max: [{low}, {high}]")
    return low, high


def _normalise_genes(genes: Any) -> tuple[Hashable, ...]:
    if genes is None:
        return ()
    if isinstance(genes, str):
        return (genes,)
    return tuple(genes)


@dataclass(frozen=True)
class EvolutionaryAlgorithm:
    """Immutable description of the problem being evolved.

    Parameters
    ----------
    genes:
        Ordered gene keys, or a single key. Ignored when ``variable_length`` is
        set, in which case genomes use positional keys ``0..len-1``.
    interval:
        ``(min, max)`` pair bounding every generated or mutated value.
    encoding:
        :class:`Encoding` or one of ``"INT"``, ``"INTEGER"``, ``"REAL"``.
    fitness_function:
        ``fitness(individual) -> float``; exceptions propagate to the caller.
    variable_length:
        Genomes have a per-individual length in ``[1, max_variable_length]``.
    max_variable_length:
        Upper bound of the random length drawn at seeding time.
    """

    genes: Sequence[Hashable] | Hashable | None
    interval: tuple[float, float]
    encoding: Encoding | str
    fitness_function: FitnessFunction
    variable_length: bool = False
    max_variable_length: int = DEFAULT_MAX_VARIABLE_LENGTH

    def __post_init__(self) -> None:
        object.__setattr__(self, "genes", _normalise_genes(self.genes))
        object.__setattr__(self, "interval", _validate_interval(self.interval))
        object.__setattr__(self, "encoding", Encoding.parse(self.encoding))
        if not callable(self.fitness_function):
            raise ConfigurationError("fitness_function must be callable")
        object.__setattr__(self, "variable_length", bool(self.variable_length))
        if int(self.max_variable_length) < 1:
            raise ConfigurationError("max_variable_length must be at least 1")
        object.__setattr__(self, "max_variable_length", int(self.max_variable_length))
        if not self.variable_length and not self.genes:
            raise ConfigurationError("genes must not be empty unless variable_length is set")

    # Value helpers -----------------------------------------------------------

    @property
    def is_integer(self) -> bool:
        return self.encoding is Encoding.INTEGER

    @property
    def bounds(self) -> tuple[float, float]:
        """Interval usable for clamping; integral under integer encoding."""

        low, high = self.interval
        if self.is_integer and math.ceil(low) <= math.floor(high):
            return math.ceil(low), math.floor(high)
        return low, high

    def coerce(self, value: float) -> float:
        """Apply the encoding to a synthesised value."""

        return round_half_up(value) if self.is_integer else float(value)

    def clamp(self, value: float) -> float:
        low, high = self.bounds
        return max(low, min(high, value))

    def random_value(self, rng: RandomSource) -> float:
        """Uniform draw from the interval, rounded under integer encoding."""

        low, high = self.interval
        return self.clamp(self.coerce(low + rng.random() * (high - low)))

    # Individual factories ----------------------------------------------------

    def make_individual(self, keys: Iterable[Hashable], generator: GeneGenerator) -> Individual:
        return Individual(keys, generator, self.fitness_function)

    def from_values(self, values: Sequence[float]) -> Individual:
        """New individual with positional keys holding ``values``."""

        return Individual.from_values(values, self.fitness_function)

    def keys_for(self, rng: RandomSource) -> Sequence[Hashable]:
        """Gene keys for a freshly seeded individual."""

        if self.variable_length:
            length = int(rng.integers(1, self.max_variable_length + 1))
            return positional_keys(length)
        return self.genes

    # Population seeding ------------------------------------------------------

    def initialize_population(
        self,
        n: int,
        generator: GeneGenerator | None = None,
        *,
        rng: RandomSource | None = None,
    ) -> "Population":
        """Create a population of ``n`` freshly generated individuals.

        ``generator(individual, key, index)`` produces each gene value; the
        default draws uniformly from :attr:`interval`.
        """

        from .population import Population

        if isinstance(n, bool) or not isinstance(n, Integral):
            raise ConfigurationError(f"population size must be an integer, got {n!r}")
        if n < 0:
            raise ConfigurationError(f"population size must be non-negative, got {n}")
        if generator is not None and not callable(generator):
            raise ConfigurationError("generator must be callable")

        n = int(n)
        rng = rng if rng is not None else rng_factory()
        if generator is None:
            def generator(_individual: Individual, _key: Hashable, _index: int) -> float:
                return self.random_value(rng)

        population = Population(self, rng=rng)
        while population.count < n:
            population.push(self.make_individual(self.keys_for(rng), generator))

        logger.info(
            "Initialised population of %d individuals (%s encoding, variable_length=%s)",
            population.count,
            self.encoding.value,
            self.variable_length,
        )
        return population
