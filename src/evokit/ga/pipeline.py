"""One generation of the operator pipeline.

:func:`evolve_generation` chains selection, grouping, crossover, mutation and
replacement once, as described by an
:class:`~evokit.config.schemas.OperatorPipelineConfig`. How many generations
to run, and when to stop, stays with the caller.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from ..config.schemas import OperatorPipelineConfig
from .individual import Individual
from .population import Population

__all__ = ["GenerationSummary", "evolve_generation", "summarise"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationSummary:
    size: int
    parents: int
    children: int
    best_fitness: float | None
    average_fitness: float | None
    best_individual: Individual | None


def summarise(population: Population, *, parents: int = 0, children: int = 0) -> GenerationSummary:
    fitness = np.array([ind.fitness for ind in population], dtype=float)
    if fitness.size == 0:
        return GenerationSummary(population.count, parents, children, None, None, None)
    return GenerationSummary(
        size=population.count,
        parents=parents,
        children=children,
        best_fitness=float(fitness.max()),
        average_fitness=float(fitness.mean()),
        best_individual=population.best(),
    )


def evolve_generation(
    population: Population, config: OperatorPipelineConfig | None = None
) -> GenerationSummary:
    """Run every operator once and replace ``population.individuals``.

    ``selection.n`` defaults to the population size and ``grouping.n`` to
    ``ceil(parents / group_size)``.
    """

    config = config or OperatorPipelineConfig()

    n_parents = population.count if config.selection.n is None else config.selection.n
    parents = population.get_parents(config.selection.method, n_parents, config.selection.options)

    group_size = config.grouping.group_size
    n_groups = (
        math.ceil(len(parents) / group_size) if config.grouping.n is None else config.grouping.n
    )
    groups = population.get_parent_groups(parents, n_groups, config.grouping.method, group_size)

    offspring = population.crossover(groups, config.crossover.method, config.crossover.options)
    children = population.mutation(offspring, config.mutation.method, config.mutation.options)

    population.replacement(parents, children, config.replacement.method, config.replacement.options)

    summary = summarise(population, parents=len(parents), children=len(children))
    logger.debug(
        "Generation done: %d parents, %d children, best=%s",
        summary.parents,
        summary.children,
        summary.best_fitness,
    )
    return summary
