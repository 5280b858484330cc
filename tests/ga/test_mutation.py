from __future__ import annotations

from collections import Counter

import pytest

from evokit.exceptions import ConfigurationError
from evokit.ga import EvolutionaryAlgorithm, Individual, mutation


def _fitness(individual: Individual) -> float:
    return float(sum(individual.to_array()))


@pytest.fixture
def variable() -> EvolutionaryAlgorithm:
    return EvolutionaryAlgorithm(None, (0, 10), "REAL", _fitness, variable_length=True)


def _genome(*values: float) -> Individual:
    return Individual.from_values(list(values), _fitness)


def test_uniform_mutation_under_integer_encoding_stays_integral(int_algorithm, rng) -> None:
    parents = int_algorithm.initialize_population(30, rng=rng).individuals

    children = mutation.mutate(parents, int_algorithm, rng, "uniform_mutation", {"probability": 1.0})

    assert len(children) == len(parents)
    for child in children:
        assert child.keys() == ["a", "b", "c", "d"]
        for value in child.to_array():
            assert float(value).is_integer()
            assert 0 <= value <= 10


def test_uniform_mutation_real_values_are_clamped(real_algorithm, rng) -> None:
    parents = real_algorithm.initialize_population(30, rng=rng).individuals

    children = mutation.mutate(
        parents, real_algorithm, rng, options={"probability": 1.0, "max_percent_change": 2.0}
    )

    for child in children:
        assert all(-5.0 <= value <= 5.0 for value in child.to_array())


def test_uniform_mutation_shift_is_bounded(real_algorithm, scripted_rng) -> None:
    parent = Individual.from_mapping({"x": 0.0, "y": 1.0, "z": 2.0}, _fitness)
    # gate draw then change draw per gene: change = r * 2 * max_change - max_change
    rng = scripted_rng(randoms=[0.0, 0.75])

    child = mutation.uniform_mutation(parent, real_algorithm, rng, probability=0.5, max_percent_change=0.1)

    assert child.to_array() == pytest.approx([0.5, 1.5, 2.5])
    assert child.fitness == pytest.approx(4.5)


def test_zero_probability_keeps_values_but_builds_new_individuals(real_algorithm, rng) -> None:
    parents = real_algorithm.initialize_population(5, rng=rng).individuals

    children = mutation.mutate(parents, real_algorithm, rng, "uniform_mutation", {"probability": 0.0})

    for parent, child in zip(parents, children):
        assert child is not parent
        assert dict(child.genes) == dict(parent.genes)
        assert child.fitness == parent.fitness


def test_extremal_mutation_uses_interval_bounds(int_algorithm, rng) -> None:
    parents = int_algorithm.initialize_population(10, rng=rng).individuals

    children = mutation.mutate(parents, int_algorithm, rng, "extremal_mutation", {"probability": 1.0})

    values = Counter(value for child in children for value in child.to_array())
    assert set(values) == {0, 10}


def test_parents_are_not_modified(variable, rng) -> None:
    parent = _genome(1, 2, 3, 4, 5, 6)

    for method in mutation.MutationMethod:
        mutation.mutate([parent], variable, rng, method, {"probability": 1.0})

    assert parent.to_array() == [1, 2, 3, 4, 5, 6]


def test_shrink_removes_a_bounded_slice(variable, rng) -> None:
    parent = _genome(*range(10))

    for _ in range(50):
        (child,) = mutation.mutate([parent], variable, rng, "shrink_mutation", {"max_shrink_size": 3})
        assert 7 <= len(child) <= 10
        assert child.keys() == list(range(len(child)))


def test_shrink_retries_until_genome_is_not_empty(variable, rng) -> None:
    parent = _genome(4.0)

    for _ in range(30):
        (child,) = mutation.mutate([parent], variable, rng, "shrink_mutation")
        assert child.to_array() == [4.0]


def test_mutation_gives_up_on_persistently_empty_genomes(variable, scripted_rng) -> None:
    # start 0, size 1: a one-gene genome is always emptied
    with pytest.raises(RuntimeError):
        mutation.mutate([_genome(4.0)], variable, scripted_rng(integers=[0, 1]), "shrink_mutation")


def test_growth_inserts_random_segment(variable, scripted_rng) -> None:
    rng = scripted_rng(randoms=[0.25, 0.5], integers=[1, 2])

    child = mutation.growth_mutation(_genome(1, 2, 3), variable, rng)

    assert child.to_array() == [1, 2.5, 5.0, 2, 3]
    assert child.keys() == [0, 1, 2, 3, 4]


def test_growth_length_is_bounded(variable, rng) -> None:
    parent = _genome(1, 2, 3)

    for _ in range(30):
        (child,) = mutation.mutate([parent], variable, rng, "growth_mutation", {"maxGrowthSize": 2})
        assert 3 <= len(child) <= 5
        assert all(0 <= value <= 10 for value in child.to_array())


def test_swap_exchanges_disjoint_segments(variable, scripted_rng) -> None:
    rng = scripted_rng(integers=[2, 1, 5])

    child = mutation.swap_mutation(_genome(*range(10)), variable, rng)

    assert child.to_array() == [0, 5, 6, 3, 4, 1, 2, 7, 8, 9]
    assert rng.integer_calls == [(0, 6), (0, 7), (3, 9)]


def test_swap_keeps_fixed_gene_keys(int_algorithm, rng) -> None:
    parent = Individual.from_mapping({"a": 1, "b": 2, "c": 3, "d": 4}, _fitness)

    for _ in range(20):
        (child,) = mutation.mutate([parent], int_algorithm, rng, "swap_mutation")
        assert child.keys() == ["a", "b", "c", "d"]
        assert sorted(child.to_array()) == [1, 2, 3, 4]


def test_replace_swaps_slice_for_new_values(variable, scripted_rng) -> None:
    rng = scripted_rng(randoms=[0.5], integers=[2, 2, 1])

    child = mutation.replace_mutation(_genome(1, 2, 3, 4, 5, 6), variable, rng)

    assert child.to_array() == [1, 2, 5.0, 5, 6]


def test_replace_length_change_is_bounded(variable, rng) -> None:
    parent = _genome(*range(8))

    for _ in range(30):
        (child,) = mutation.mutate(
            [parent], variable, rng, "replace_mutation", {"max_replace_size": 2, "max_insert_size": 1}
        )
        assert 6 <= len(child) <= 9


def test_shrink_needs_variable_length(real_algorithm, rng) -> None:
    parents = real_algorithm.initialize_population(2, rng=rng).individuals

    with pytest.raises(ConfigurationError, match="shrink_mutation"):
        mutation.mutate(parents, real_algorithm, rng, "shrink_mutation")


@pytest.mark.parametrize("method", ["growth_mutation", "replace_mutation"])
def test_growth_and_replace_rekey_fixed_gene_genomes(real_algorithm, rng, method: str) -> None:
    parents = real_algorithm.initialize_population(4, rng=rng).individuals

    children = mutation.mutate(parents, real_algorithm, rng, method, {"maxInsertSize": 3})

    assert len(children) == len(parents)
    for child in children:
        assert len(child) >= 1
        assert child.keys() == list(range(len(child)))
        assert all(-5 <= value <= 5 for value in child.to_array())


def test_growth_on_fixed_genes_appends_positional_keys(real_algorithm, scripted_rng) -> None:
    parent = Individual.from_mapping({"x": 1.0, "y": 2.0, "z": 3.0}, _fitness)
    rng = scripted_rng(randoms=[0.5], integers=[3, 1])

    (child,) = mutation.mutate([parent], real_algorithm, rng, "growth_mutation")

    assert child.to_array() == [1.0, 2.0, 3.0, 0.0]
    assert child.keys() == [0, 1, 2, 3]
    assert child.fitness == 6.0


def test_unknown_method_defaults_to_uniform(real_algorithm, rng) -> None:
    parents = real_algorithm.initialize_population(3, rng=rng).individuals

    children = mutation.mutate(parents, real_algorithm, rng, "gaussian")

    assert [child.keys() for child in children] == [["x", "y", "z"]] * 3


def test_empty_input_yields_empty_output(real_algorithm, rng) -> None:
    assert mutation.mutate([], real_algorithm, rng) == []
