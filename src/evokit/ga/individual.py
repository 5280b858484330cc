"""Immutable individuals (genome plus fitness)."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Hashable, Iterable, Iterator, Mapping, Sequence

__all__ = [
    "FitnessFunction",
    "GeneGenerator",
    "Individual",
    "positional_keys",
]

FitnessFunction = Callable[["Individual"], float]
"""Signature of the user supplied fitness function."""

GeneGenerator = Callable[["Individual", Hashable, int], float]
"""Signature ``generator(individual, key, index) -> value`` used to build genes."""


def positional_keys(length: int) -> range:
    """Gene keys ``0..length-1`` used by variable-length genomes."""

    return range(length)


class Individual:
    """A candidate solution: an ordered genome and its fitness.

    The genome is built once, in key order, by calling ``generator(individual,
    key, index)`` for every key; the generator sees the genes built so far
    through ``individual.genes``. ``fitness_function`` is then evaluated exactly
    once against the complete genome. Neither ``genes`` nor ``fitness`` can be
    changed afterwards: a different genome means a new ``Individual``.
    """

    __slots__ = ("_genes", "_fitness")

    def __init__(
        self,
        keys: Iterable[Hashable],
        generator: GeneGenerator,
        fitness_function: FitnessFunction,
    ) -> None:
        genes: dict[Hashable, float] = {}
        object.__setattr__(self, "_genes", MappingProxyType(genes))
        for index, key in enumerate(keys):
            genes[key] = generator(self, key, index)
        object.__setattr__(self, "_fitness", float(fitness_function(self)))

    @classmethod
    def from_values(
        cls, values: Sequence[float], fitness_function: FitnessFunction
    ) -> "Individual":
        """Build an individual with positional keys from ``values``."""

        return cls(positional_keys(len(values)), lambda _ind, _key, idx: values[idx], fitness_function)

    @classmethod
    def from_mapping(
        cls, genes: Mapping[Hashable, float], fitness_function: FitnessFunction
    ) -> "Individual":
        """Build an individual keeping the keys (and order) of ``genes``."""

        return cls(genes.keys(), lambda _ind, key, _idx: genes[key], fitness_function)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def genes(self) -> Mapping[Hashable, float]:
        return self._genes

    @property
    def fitness(self) -> float:
        return self._fitness

    def keys(self) -> list[Hashable]:
        return list(self._genes.keys())

    def to_array(self) -> list[float]:
        """Gene values in key order."""

        return list(self._genes.values())

    def to_dict(self) -> dict[str, Any]:
        return {"genes": dict(self._genes), "fitness": self._fitness}

    def __len__(self) -> int:
        return len(self._genes)

    def __iter__(self) -> Iterator[float]:
        return iter(self._genes.values())

    def __str__(self) -> str:
        parts = [f"{key}: {value}" for key, value in self._genes.items()]
        parts.append(f"fitness: {self._fitness}")
        return ", ".join(parts)

    def __repr__(self) -> str:
        return f"Individual(genes={dict(self._genes)!r}, fitness={self._fitness!r})"
