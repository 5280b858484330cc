from __future__ import annotations

from typing import Callable, Iterable, Iterator, Sequence

import numpy as np
import pytest

from evokit.config.settings import reset_settings_cache
from evokit.ga import EvolutionaryAlgorithm, Individual


class ScriptedRNG:
    """Generator stand-in replaying fixed draws.

    ``random()`` cycles through ``randoms`` and ``integers(low, high)`` through
    ``integers``; a scripted integer outside ``[low, high)`` is a test bug.
    """

    def __init__(self, randoms: Iterable[float] = (0.5,), integers: Iterable[int] = (0,)) -> None:
        self._randoms = list(randoms)
        self._integers = list(integers)
        self._r = 0
        self._i = 0
        self.integer_calls: list[tuple[int, int]] = []

    def random(self) -> float:
        value = self._randoms[self._r % len(self._randoms)]
        self._r += 1
        return value

    def integers(self, low: int, high: int) -> int:
        value = self._integers[self._i % len(self._integers)]
        self._i += 1
        self.integer_calls.append((low, high))
        assert low <= value < high, f"scripted integer {value} outside [{low}, {high})"
        return value


def genome_sum(individual: Individual) -> float:
    return float(sum(individual.to_array()))


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("EVOKIT_RANDOM_SEED", raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20240611)


@pytest.fixture
def scripted_rng() -> Callable[..., ScriptedRNG]:
    return ScriptedRNG


@pytest.fixture
def real_algorithm() -> EvolutionaryAlgorithm:
    return EvolutionaryAlgorithm(["x", "y", "z"], (-5.0, 5.0), "REAL", genome_sum)


@pytest.fixture
def int_algorithm() -> EvolutionaryAlgorithm:
    return EvolutionaryAlgorithm(["a", "b", "c", "d"], (0, 10), "INT", genome_sum)


@pytest.fixture
def variable_algorithm() -> EvolutionaryAlgorithm:
    return EvolutionaryAlgorithm(
        None, (0, 10), "REAL", genome_sum, variable_length=True, max_variable_length=12
    )


@pytest.fixture
def with_fitness() -> Callable[[Sequence[float]], list[Individual]]:
    """Build one single-gene individual per value; fitness equals the gene."""

    def build(values: Sequence[float]) -> list[Individual]:
        return [Individual.from_values([value], genome_sum) for value in values]

    return build
