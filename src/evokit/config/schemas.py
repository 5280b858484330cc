"""Pydantic schemas for operator options and generation pipelines.

Each operator family receives its own typed options model:

- :class:`SelectionOptions` for ``Population.get_parents``
- :class:`CrossoverOptions` for ``Population.crossover``
- :class:`MutationOptions` for ``Population.mutation``
- :class:`ReplacementOptions` for ``Population.replacement``

Field names are snake_case; the camelCase spelling (``maxShrinkSize``,
``newGenerationSize``...) is accepted as an alias so option dictionaries
written for other toolkits validate unchanged. :class:`OperatorPipelineConfig`
groups one generation's operator choices and is what YAML files under
``configs/`` are validated against.
"""

from __future__ import annotations

from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..exceptions import ConfigurationError
from .constants import (
    DEFAULT_CROSSOVER_PROBABILITY,
    DEFAULT_GROUP_SIZE,
    DEFAULT_MAX_PERCENT_CHANGE,
    DEFAULT_MAX_SEGMENT_SIZE,
    DEFAULT_MUTATION_PROBABILITY,
)

__all__ = [
    "OptionsModel",
    "SelectionOptions",
    "CrossoverOptions",
    "MutationOptions",
    "ReplacementOptions",
    "SelectionStage",
    "GroupingStage",
    "CrossoverStage",
    "MutationStage",
    "ReplacementStage",
    "OperatorPipelineConfig",
    "parse_options",
]

T = TypeVar("T", bound=BaseModel)


class OptionsModel(BaseModel):
    """Base class: frozen, camelCase aliases, unknown keys rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class SelectionOptions(OptionsModel):
    """Options for parent selection.

    Attributes
    ----------
    roulette_method : str
        Roulette variant used by the ``roulette`` method
        (``with_replacement``, ``without_replacement``,
        ``remainder_with_replacement``, ``remainder_without_replacement``,
        ``universal``).
    shuffle_order : bool
        Shuffle the visiting order before stochastic universal sampling.
    """

    roulette_method: str = Field(default="with_replacement")
    shuffle_order: bool = False


class CrossoverOptions(OptionsModel):
    """Options for crossover.

    Attributes
    ----------
    probability : float
        Probability that a group is actually recombined.
    different_points : bool
        Draw an independent cut point for the second parent (``one_point``).
    """

    probability: float = Field(default=DEFAULT_CROSSOVER_PROBABILITY, ge=0, le=1)
    different_points: bool = False


class MutationOptions(OptionsModel):
    """Options for mutation; each method reads the fields it needs."""

    probability: float = Field(default=DEFAULT_MUTATION_PROBABILITY, ge=0, le=1)
    max_percent_change: float = Field(default=DEFAULT_MAX_PERCENT_CHANGE, ge=0)
    max_shrink_size: int = Field(default=DEFAULT_MAX_SEGMENT_SIZE, ge=0)
    max_growth_size: int = Field(default=DEFAULT_MAX_SEGMENT_SIZE, ge=0)
    max_swap_size: int = Field(default=DEFAULT_MAX_SEGMENT_SIZE, ge=0)
    max_replace_size: int = Field(default=DEFAULT_MAX_SEGMENT_SIZE, ge=0)
    max_insert_size: int = Field(default=DEFAULT_MAX_SEGMENT_SIZE, ge=0)


class ReplacementOptions(OptionsModel):
    """Options for replacement.

    Attributes
    ----------
    new_generation_size : int, optional
        Size of the next generation for ``comma_strategy`` and
        ``plus_strategy``; ``None`` keeps the current population size.
    generation_gap : int
        Number of children admitted by ``separate_competition``.
    """

    new_generation_size: int | None = Field(default=None, gt=0)
    generation_gap: int = Field(default=0, ge=0)


def parse_options(model: Type[T], options: T | Mapping[str, Any] | None) -> T:
    """Return ``options`` as an instance of ``model``.

    ``None`` yields the defaults, a mapping is validated and an instance of
    ``model`` is returned unchanged. Validation failures are reported as
    :class:`~evokit.exceptions.ConfigurationError`.
    """

    if options is None:
        return model()
    if isinstance(options, model):
        return options
    if isinstance(options, BaseModel):
        options = options.model_dump()
    if not isinstance(options, Mapping):
        raise ConfigurationError(
            f"{model.__name__} expects a mapping, got {type(options).__name__}"
        )
    try:
        return model.model_validate(dict(options))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid {model.__name__}:\n{exc}") from exc


# Pipeline ------------------------------------------------------------------


class SelectionStage(OptionsModel):
    method: str = "best"
    n: int | None = Field(default=None, ge=0, description="None selects population size")
    options: SelectionOptions = Field(default_factory=SelectionOptions)


class GroupingStage(OptionsModel):
    method: str = "random"
    n: int | None = Field(
        default=None, ge=0, description="None builds ceil(parents / group_size) groups"
    )
    group_size: int = Field(default=DEFAULT_GROUP_SIZE, ge=1)


class CrossoverStage(OptionsModel):
    method: str = "one_point"
    options: CrossoverOptions = Field(default_factory=CrossoverOptions)


class MutationStage(OptionsModel):
    method: str = "uniform_mutation"
    options: MutationOptions = Field(default_factory=MutationOptions)


class ReplacementStage(OptionsModel):
    method: str = "generational"
    options: ReplacementOptions = Field(default_factory=ReplacementOptions)


class OperatorPipelineConfig(OptionsModel):
    """Operator choices for one generation, in execution order."""

    selection: SelectionStage = Field(default_factory=SelectionStage)
    grouping: GroupingStage = Field(default_factory=GroupingStage)
    crossover: CrossoverStage = Field(default_factory=CrossoverStage)
    mutation: MutationStage = Field(default_factory=MutationStage)
    replacement: ReplacementStage = Field(default_factory=ReplacementStage)
