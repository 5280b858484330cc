"""Population model and genetic operators."""

from .algorithm import Encoding, EvolutionaryAlgorithm, round_half_up
from .crossover import CrossoverMethod, crossover_groups, mean_crossover, one_point_crossover
from .grouping import GroupingMethod, group_parents, random_groups
from .individual import Individual, positional_keys
from .mutation import (
    MutationMethod,
    extremal_mutation,
    growth_mutation,
    mutate,
    replace_mutation,
    shrink_mutation,
    swap_mutation,
    uniform_mutation,
)
from .pipeline import GenerationSummary, evolve_generation, summarise
from .population import Population
from .replacement import (
    ReplacementMethod,
    comma_strategy,
    generational,
    plus_strategy,
    rank,
    replace,
    separate_competition,
)
from .selection import (
    RouletteMethod,
    SelectionMethod,
    best_selection,
    random_selection,
    remainder_selection,
    roulette_selection,
    select_parents,
    stochastic_universal_sampling,
)

__all__ = [
    "Encoding",
    "EvolutionaryAlgorithm",
    "Individual",
    "Population",
    "round_half_up",
    "positional_keys",
    # selection
    "SelectionMethod",
    "RouletteMethod",
    "best_selection",
    "random_selection",
    "roulette_selection",
    "remainder_selection",
    "stochastic_universal_sampling",
    "select_parents",
    # grouping
    "GroupingMethod",
    "random_groups",
    "group_parents",
    # crossover
    "CrossoverMethod",
    "one_point_crossover",
    "mean_crossover",
    "crossover_groups",
    # mutation
    "MutationMethod",
    "uniform_mutation",
    "extremal_mutation",
    "shrink_mutation",
    "growth_mutation",
    "swap_mutation",
    "replace_mutation",
    "mutate",
    # replacement
    "ReplacementMethod",
    "rank",
    "generational",
    "comma_strategy",
    "plus_strategy",
    "separate_competition",
    "replace",
    # pipeline
    "GenerationSummary",
    "evolve_generation",
    "summarise",
]
