"""
EvolutionState: everything a breeding run shares.

Holds the parameter database, the output, one random stream per breeding
thread, the current population and the generation counter. The generational
loop itself lives in ``orchestration``; this module only sets the state up
and provides the evaluate/breed steps it calls.
"""

from typing import Callable, List, Optional, Sequence

import numpy as np

from .data_models import Individual, Population, Subpopulation
from .output import Output
from .parameters import Parameter, ParameterDatabase
from .species import Species

P_SEED = "seed"
P_BREEDTHREADS = "breedthreads"
P_GENERATIONS = "generations"
P_POP = "pop"
P_SUBPOPS = "subpops"
P_SUBPOP = "subpop"
P_SIZE = "size"
P_SPECIES = "species"
P_BREED = "breed"
P_PROBLEM = "eval.problem"

DEFAULT_SPECIES = "vector.species"
DEFAULT_BREEDER = "breed.simple"


def create_random_streams(seed: Optional[int], count: int) -> List[np.random.Generator]:
    """
    Independent random generators, one per breeding thread.

    All streams are spawned from one ``SeedSequence`` so a seed reproduces
    the whole run for a fixed thread count.
    """
    seed_sequence = np.random.SeedSequence(seed)
    return [np.random.default_rng(child) for child in seed_sequence.spawn(count)]


class EvolutionState:
    """
    Shared run state.

    Attributes:
        parameters: Parameter database
        output: Message sink
        random: One generator per breeding thread (``random[thread]``)
        population: Current generation
        generation: Generation counter (0-based)
        generations: Number of generations to run
        breedthreads: Requested number of breeding threads
        breeder: Breeder that produces each new population
        problem: Fitness function ``genome -> float`` (maximised)
    """

    def __init__(self, parameters: ParameterDatabase, output: Optional[Output] = None):
        self.parameters = parameters
        self.output = output if output is not None else Output()
        self.random: List[np.random.Generator] = []
        self.population: Optional[Population] = None
        self.generation = 0
        self.generations = 1
        self.breedthreads = 1
        self.seed: Optional[int] = None
        self.breeder = None
        self.problem: Optional[Callable[[Sequence[float]], float]] = None

    def setup(self) -> None:
        """
        Read run parameters and build every component.

        Raises:
            ConfigurationError: On any invalid parameter
        """
        from .breeder import Breeder
        from .problems import get_problem

        params = self.parameters

        self.seed = params.get_int(Parameter(P_SEED))
        self.breedthreads = params.get_int(Parameter(P_BREEDTHREADS), fallback=1)
        if self.breedthreads < 1:
            self.output.fatal("breedthreads must be >= 1", Parameter(P_BREEDTHREADS))
        self.random = create_random_streams(self.seed, self.breedthreads)

        self.generations = params.get_int(Parameter(P_GENERATIONS), fallback=1)
        if self.generations < 1:
            self.output.fatal("generations must be >= 1", Parameter(P_GENERATIONS))

        problem_name = params.get_string(Parameter(P_PROBLEM))
        if problem_name is not None:
            self.problem = get_problem(problem_name)

        self.population = self.setup_population(Parameter(P_POP))

        p = Parameter(P_BREED)
        if not params.exists(p):
            params.set(p, DEFAULT_BREEDER)
        self.breeder = params.get_instance(p, None, Breeder)
        self.breeder.setup(self, p)
        self.output.exit_if_errors()

    def setup_population(self, base: Parameter) -> Population:
        params = self.parameters
        num_subpops = params.get_int(base.push(P_SUBPOPS), fallback=1)
        if num_subpops < 1:
            self.output.fatal("Population must have at least one subpopulation", base.push(P_SUBPOPS))

        subpops = []
        for x in range(num_subpops):
            sub_base = base.push(P_SUBPOP, x)
            size = params.get_int(sub_base.push(P_SIZE))
            if size is None or size < 1:
                self.output.fatal("Subpopulation size must be an integer >= 1", sub_base.push(P_SIZE))

            species_param = sub_base.push(P_SPECIES)
            if not params.exists(species_param):
                params.set(species_param, DEFAULT_SPECIES)
            species = params.get_instance(species_param, None, Species)
            species.setup(self, species_param)
            subpops.append(Subpopulation(species=species, size=size, individuals=[]))

        return Population(subpops=subpops)

    def initialize_population(self) -> None:
        """Fill every subpopulation with fresh random individuals."""
        for subpop in self.population.subpops:
            subpop.individuals = [
                subpop.species.new_individual(self, 0) for _ in range(subpop.size)
            ]
        self.generation = 0

    def evaluate(self) -> int:
        """
        Assign fitness to every individual that needs it.

        Returns:
            Number of evaluations performed
        """
        if self.problem is None:
            self.output.fatal("No fitness problem configured", Parameter(P_PROBLEM))
        count = 0
        for subpop in self.population.subpops:
            for ind in subpop.individuals:
                if not ind.evaluated:
                    ind.fitness.value = float(self.problem(ind.genome))
                    ind.evaluated = True
                    count += 1
        return count

    def breed(self) -> None:
        """Replace the population with the next generation."""
        self.population = self.breeder.breed_population(self)
        self.generation += 1

    def best_individual(self, subpop: int = 0) -> Individual:
        sub = self.population.subpops[subpop]
        return sub.individuals[sub.best_index()]
