"""
Toy fitness functions for exercising breeding runs.

All functions take a genome and return a fitness to be maximised, so
minimisation benchmarks are negated.
"""

from typing import Callable, Dict, Sequence

import numpy as np

from .parameters import ConfigurationError


def onemax(genome: Sequence[float]) -> float:
    """Number of genes equal to 1."""
    return float(np.sum(np.asarray(genome) == 1))


def sphere(genome: Sequence[float]) -> float:
    """Negated sum of squares; optimum 0 at the origin."""
    x = np.asarray(genome, dtype=float)
    return -float(np.sum(x * x))


def rastrigin(genome: Sequence[float]) -> float:
    """Negated Rastrigin function; optimum 0 at the origin."""
    x = np.asarray(genome, dtype=float)
    return -float(10.0 * len(x) + np.sum(x * x - 10.0 * np.cos(2.0 * np.pi * x)))


PROBLEMS: Dict[str, Callable[[Sequence[float]], float]] = {
    'onemax': onemax,
    'sphere': sphere,
    'rastrigin': rastrigin,
}


def get_problem(name: str) -> Callable[[Sequence[float]], float]:
    """
    Look up a fitness function by name.

    Raises:
        ConfigurationError: If the name is unknown
    """
    try:
        return PROBLEMS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown problem '{name}'. Available: {', '.join(sorted(PROBLEMS))}"
        )
