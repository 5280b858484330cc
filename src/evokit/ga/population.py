"""Population of individuals and the operator methods acting on it."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping, Sequence

import pandas as pd

from ..config.constants import DEFAULT_GROUP_SIZE
from ..config.schemas import (
    CrossoverOptions,
    MutationOptions,
    ReplacementOptions,
    SelectionOptions,
)
from ..utils.seed import RandomSource, rng_factory
from .crossover import CrossoverMethod, crossover_groups
from .grouping import GroupingMethod, group_parents
from .individual import Individual
from .mutation import MutationMethod, mutate
from .replacement import ReplacementMethod, replace
from .selection import SelectionMethod, select_parents

if TYPE_CHECKING:  # pragma: no cover
    from .algorithm import EvolutionaryAlgorithm

__all__ = ["Population"]

logger = logging.getLogger(__name__)


class Population:
    """Ordered, mutable collection of individuals created by one algorithm.

    Selection, grouping, crossover and mutation read a snapshot of
    :attr:`individuals` and return new sequences; only :meth:`replacement`
    swaps the stored individuals for the next generation. One instance must
    not be driven from several threads at once.
    """

    def __init__(
        self,
        algorithm: "EvolutionaryAlgorithm",
        individuals: Iterable[Individual] | None = None,
        *,
        rng: RandomSource | None = None,
    ) -> None:
        from .algorithm import EvolutionaryAlgorithm

        if not isinstance(algorithm, EvolutionaryAlgorithm):
            raise TypeError("Population requires the EvolutionaryAlgorithm that creates it")
        self.algorithm = algorithm
        self.rng = rng if rng is not None else rng_factory()
        self.individuals: list[Individual] = []
        for individual in individuals or ():
            self.push(individual)

    # Collection protocol -----------------------------------------------------

    @property
    def count(self) -> int:
        return len(self.individuals)

    def push(self, individual: Individual) -> None:
        if not isinstance(individual, Individual):
            raise TypeError(
                f"Population accepts only Individual objects, got {type(individual).__name__}"
            )
        self.individuals.append(individual)

    def has_individual(self, individual: Individual) -> bool:
        return any(member is individual for member in self.individuals)

    __contains__ = has_individual

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self.individuals)

    def snapshot(self) -> tuple[Individual, ...]:
        """Immutable view of the current generation handed to the operators."""

        return tuple(self.individuals)

    def best(self) -> Individual | None:
        """Fittest individual (first one on ties), ``None`` when empty."""

        if not self.individuals:
            return None
        return max(self.individuals, key=lambda ind: ind.fitness)

    def to_frame(self) -> pd.DataFrame:
        """One row per individual: gene columns followed by ``fitness``.

        Genomes of different lengths leave ``NaN`` in the missing columns.
        """

        records = [{**individual.genes, "fitness": individual.fitness} for individual in self.individuals]
        frame = pd.DataFrame.from_records(records)
        if frame.empty:
            return pd.DataFrame(columns=["fitness"])
        columns = [column for column in frame.columns if column != "fitness"]
        return frame[columns + ["fitness"]]

    # Operators ---------------------------------------------------------------

    def get_parents(
        self,
        method: SelectionMethod | str,
        n: int,
        options: SelectionOptions | Mapping[str, Any] | None = None,
    ) -> list[Individual]:
        """Select ``n`` parents (see :mod:`evokit.ga.selection`)."""

        return select_parents(self.snapshot(), method, n, self.rng, options)

    def get_parent_groups(
        self,
        parents: Sequence[Individual],
        n: int,
        method: GroupingMethod | str = GroupingMethod.RANDOM,
        group_size: int = DEFAULT_GROUP_SIZE,
    ) -> list[list[Individual]]:
        """Split ``parents`` into ``n`` crossover groups."""

        return group_parents(parents, n, self.rng, method, group_size)

    def crossover(
        self,
        groups: Sequence[Sequence[Individual]],
        method: CrossoverMethod | str = CrossoverMethod.ONE_POINT,
        options: CrossoverOptions | Mapping[str, Any] | None = None,
    ) -> list[Individual]:
        return crossover_groups(groups, self.algorithm, self.rng, method, options)

    def mutation(
        self,
        parents: Sequence[Individual],
        method: MutationMethod | str = MutationMethod.UNIFORM,
        options: MutationOptions | Mapping[str, Any] | None = None,
    ) -> list[Individual]:
        return mutate(parents, self.algorithm, self.rng, method, options)

    def replacement(
        self,
        parents: Sequence[Individual],
        children: Sequence[Individual],
        method: ReplacementMethod | str = ReplacementMethod.GENERATIONAL,
        options: ReplacementOptions | Mapping[str, Any] | None = None,
    ) -> None:
        """Install the next generation chosen from ``parents`` and ``children``."""

        previous = self.count
        self.individuals = replace(parents, children, previous, method, options)
        logger.debug(
            "Replacement %s: %d -> %d individuals", getattr(method, "value", method), previous, self.count
        )

    def __repr__(self) -> str:
        return f"Population(count={self.count}, encoding={self.algorithm.encoding.value})"
