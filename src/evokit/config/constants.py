"""Central defaults used by the algorithm configuration and the operators.

Values that several operators share (segment sizes, probabilities, default
method names) are collected here so the option schemas, the operators and the
tests agree on the same numbers.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "DEFAULT_CROSSOVER_PROBABILITY",
    "DEFAULT_GROUP_SIZE",
    "DEFAULT_MAX_PERCENT_CHANGE",
    "DEFAULT_MAX_SEGMENT_SIZE",
    "DEFAULT_MAX_VARIABLE_LENGTH",
    "DEFAULT_MUTATION_PROBABILITY",
    "ENCODING_ALIASES",
    "MAX_MUTATION_ATTEMPTS",
]


# Genome shape --------------------------------------------------------------

DEFAULT_MAX_VARIABLE_LENGTH: Final[int] = 100
"""Upper bound for the random length of variable-length genomes."""

ENCODING_ALIASES: Final[dict[str, str]] = {
    "INT": "INTEGER",
    "INTEGER": "INTEGER",
    "REAL": "REAL",
    "FLOAT": "REAL",
}


# Operator defaults ---------------------------------------------------------

DEFAULT_GROUP_SIZE: Final[int] = 2
"""Number of parents handed to each crossover call."""

DEFAULT_CROSSOVER_PROBABILITY: Final[float] = 1.0

DEFAULT_MUTATION_PROBABILITY: Final[float] = 0.1
"""Per-gene probability used by the value mutations."""

DEFAULT_MAX_PERCENT_CHANGE: Final[float] = 1.0
"""Fraction of the interval width a uniform mutation may move a gene."""

DEFAULT_MAX_SEGMENT_SIZE: Final[int] = 5
"""Default upper bound for shrink, growth, swap, replace and insert segments."""

MAX_MUTATION_ATTEMPTS: Final[int] = 1000
"""Retries allowed when a mutation keeps producing an empty genome."""
