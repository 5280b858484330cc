"""Generic evolutionary-algorithm toolkit."""

from .exceptions import ConfigurationError
from .ga import (
    Encoding,
    EvolutionaryAlgorithm,
    Individual,
    Population,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Encoding",
    "EvolutionaryAlgorithm",
    "Individual",
    "Population",
    "__version__",
]
