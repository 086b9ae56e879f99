"""
Mutation and crossover operators for vector individuals.

Operators never modify their arguments in place: each one returns new
individuals together with a short operation log, which the variation
pipelines store in ``metadata["operators"]``.
"""

from typing import List, Tuple
import numpy as np

from ..data_models import Individual
from .species import VectorSpecies


def reset_mutation(
    individual: Individual,
    species: VectorSpecies,
    rng: np.random.Generator
) -> Tuple[Individual, List[str]]:
    """
    Replace each gene, with probability ``mutation_prob``, by a fresh random
    value in the gene bounds.

    Args:
        individual: Individual to mutate
        species: Species holding bounds and rates
        rng: Random number generator

    Returns:
        Tuple of (mutated_individual, operation_log)
    """
    mutated = individual.copy()
    changed = []
    for i in range(len(mutated.genome)):
        if rng.random() < species.mutation_prob:
            mutated.genome[i] = species.random_gene(rng)
            changed.append(i)

    mutated.evaluated = False
    return mutated, [f"reset_mutation: {len(changed)} genes reset"]


def gauss_mutation(
    individual: Individual,
    species: VectorSpecies,
    rng: np.random.Generator
) -> Tuple[Individual, List[str]]:
    """
    Add N(0, ``mutation_stdev``) noise to each gene with probability
    ``mutation_prob``, clamping the result into the gene bounds.

    Returns:
        Tuple of (mutated_individual, operation_log)
    """
    mutated = individual.copy()
    changed = 0
    for i in range(len(mutated.genome)):
        if rng.random() < species.mutation_prob:
            noisy = mutated.genome[i] + rng.normal(0.0, species.mutation_stdev)
            mutated.genome[i] = species.clamp_gene(float(noisy))
            changed += 1

    mutated.evaluated = False
    return mutated, [f"gauss_mutation(stdev={species.mutation_stdev}): {changed} genes perturbed"]


def mutate(
    individual: Individual,
    species: VectorSpecies,
    rng: np.random.Generator
) -> Tuple[Individual, List[str]]:
    """Apply the species' configured mutation operator."""
    if species.mutation_type == "gauss":
        return gauss_mutation(individual, species, rng)
    return reset_mutation(individual, species, rng)


def one_point_crossover(
    parent_a: Individual,
    parent_b: Individual,
    rng: np.random.Generator
) -> Tuple[Individual, Individual, List[str]]:
    """
    Swap the tails of two parents after a random cut point.

    Returns:
        Tuple of (child_a, child_b, operation_log)
    """
    child_a = parent_a.copy()
    child_b = parent_b.copy()
    length = min(len(child_a), len(child_b))
    if length < 2:
        return child_a, child_b, ["one_point_crossover: genome too short, copied"]

    cut = int(rng.integers(1, length))
    child_a.genome[cut:length], child_b.genome[cut:length] = (
        child_b.genome[cut:length], child_a.genome[cut:length]
    )
    child_a.evaluated = child_b.evaluated = False
    return child_a, child_b, [f"one_point_crossover(cut={cut})"]


def two_point_crossover(
    parent_a: Individual,
    parent_b: Individual,
    rng: np.random.Generator
) -> Tuple[Individual, Individual, List[str]]:
    """
    Swap the segment between two random cut points.

    Returns:
        Tuple of (child_a, child_b, operation_log)
    """
    child_a = parent_a.copy()
    child_b = parent_b.copy()
    length = min(len(child_a), len(child_b))
    if length < 2:
        return child_a, child_b, ["two_point_crossover: genome too short, copied"]

    lo, hi = sorted(int(c) for c in rng.choice(length + 1, size=2, replace=False))
    child_a.genome[lo:hi], child_b.genome[lo:hi] = child_b.genome[lo:hi], child_a.genome[lo:hi]
    child_a.evaluated = child_b.evaluated = False
    return child_a, child_b, [f"two_point_crossover(cuts={lo},{hi})"]


def uniform_crossover(
    parent_a: Individual,
    parent_b: Individual,
    swap_prob: float,
    rng: np.random.Generator
) -> Tuple[Individual, Individual, List[str]]:
    """
    Swap each gene independently with probability ``swap_prob``.

    Returns:
        Tuple of (child_a, child_b, operation_log)
    """
    child_a = parent_a.copy()
    child_b = parent_b.copy()
    swapped = 0
    for i in range(min(len(child_a), len(child_b))):
        if rng.random() < swap_prob:
            child_a.genome[i], child_b.genome[i] = child_b.genome[i], child_a.genome[i]
            swapped += 1

    child_a.evaluated = child_b.evaluated = False
    return child_a, child_b, [f"uniform_crossover: {swapped} genes swapped"]


def crossover(
    parent_a: Individual,
    parent_b: Individual,
    species: VectorSpecies,
    rng: np.random.Generator
) -> Tuple[Individual, Individual, List[str]]:
    """Apply the species' configured crossover operator."""
    if species.crossover_type == "two":
        return two_point_crossover(parent_a, parent_b, rng)
    if species.crossover_type == "any":
        return uniform_crossover(parent_a, parent_b, species.crossover_prob, rng)
    return one_point_crossover(parent_a, parent_b, rng)
