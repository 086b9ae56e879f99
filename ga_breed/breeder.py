"""
Breeders: drive the pipeline trees that produce each new population.

SimpleBreeder splits every subpopulation into one contiguous chunk per
breeding thread, copies elites into the tail of the new subpopulation and
lets each thread fill its chunk from its own clone of the species' pipeline.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, TYPE_CHECKING

from .breed.pipeline import duplicate_produced
from .breed.source import KEY_PARENTS, BreedingError, SelectionMethod
from .data_models import Population
from .parameters import Parameter

if TYPE_CHECKING:
    from .evolution import EvolutionState

P_ELITE = "elite"
P_SEQUENTIAL = "sequential"
P_CLONE = "clone-pipeline-and-population"


class Breeder(ABC):
    """Produces the next population from the current one."""

    def setup(self, state: "EvolutionState", base: Parameter) -> None:
        pass

    @abstractmethod
    def breed_population(self, state: "EvolutionState") -> Population:
        pass


@dataclass
class BreederThread:
    """
    One unit of parallel breeding work.

    Attributes:
        breeder: Breeder that owns the work
        new_population: Population being filled
        num_inds: Chunk length per subpopulation
        starts: Chunk start per subpopulation
        thread: Thread index (selects ``state.random[thread]``)
    """
    breeder: "SimpleBreeder"
    new_population: Population
    num_inds: List[int]
    starts: List[int]
    thread: int

    def run(self, state: "EvolutionState") -> None:
        self.breeder.breed_pop_chunk(
            self.new_population, state, self.num_inds, self.starts, self.thread
        )


class SimpleBreeder(Breeder):
    """
    Generational breeder with elitism and optional sequential breeding.

    Parameters (base ``breed``):
        elite.<i>: int >= 0, elites kept in subpopulation i (default 0)
        sequential: bool, breed one subpopulation per generation in turn
        clone-pipeline-and-population: bool, default true; every thread
            breeds from its own clone of the pipeline
    """

    def __init__(self):
        self.elite: List[int] = []
        self.sequential = False
        self.clone_pipeline_and_population = True

    def setup(self, state, base: Parameter) -> None:
        params = state.parameters
        num_subpops = len(state.population.subpops)

        self.elite = []
        for x in range(num_subpops):
            e = params.get_int(base.push(P_ELITE, x), fallback=0)
            size = state.population.subpops[x].size
            if e < 0:
                state.output.error(f"The number of elites for subpop {x} must be >= 0", base.push(P_ELITE, x))
            elif e >= size:
                state.output.error(
                    f"The number of elites for subpop {x} must be less than its size ({size})",
                    base.push(P_ELITE, x),
                )
            self.elite.append(e)

        self.sequential = params.get_boolean(base.push(P_SEQUENTIAL), fallback=False)
        if self.sequential and num_subpops == 1:
            state.output.warning(
                "Sequential breeding with a single subpopulation breeds it every generation.",
                base.push(P_SEQUENTIAL),
            )

        self.clone_pipeline_and_population = params.get_boolean(base.push(P_CLONE), fallback=True)
        if not self.clone_pipeline_and_population and state.breedthreads > 1:
            state.output.fatal(
                "clone-pipeline-and-population may only be false when breedthreads is 1",
                base.push(P_CLONE),
            )
        state.output.exit_if_errors()

    def should_breed_subpop(self, state, subpop: int) -> bool:
        """In sequential mode only one subpopulation is bred per generation."""
        if not self.sequential:
            return True
        return subpop == state.generation % len(state.population.subpops)

    def num_elites(self, subpop: int) -> int:
        return self.elite[subpop] if subpop < len(self.elite) else 0

    def compute_chunks(self, state, num_threads: int):
        """
        Split the non-elite part of every bred subpopulation among threads.

        Returns:
            Tuple of (num_inds, starts), each indexed ``[thread][subpop]``
        """
        num_subpops = len(state.population.subpops)
        num_inds = [[0] * num_subpops for _ in range(num_threads)]
        starts = [[0] * num_subpops for _ in range(num_threads)]

        for x, subpop in enumerate(state.population.subpops):
            if not self.should_breed_subpop(state, x):
                continue
            length = subpop.size - self.num_elites(x)
            per_thread, remainder = divmod(length, num_threads)
            position = 0
            for t in range(num_threads):
                num_inds[t][x] = per_thread + (1 if t < remainder else 0)
                starts[t][x] = position
                position += num_inds[t][x]
        return num_inds, starts

    def breed_population(self, state) -> Population:
        new_population = state.population.empty_clone()

        for x, subpop in enumerate(state.population.subpops):
            if not self.should_breed_subpop(state, x):
                new_population.subpops[x].individuals = list(subpop.individuals)

        self.load_elites(state, new_population)

        largest = max(subpop.size for subpop in state.population.subpops)
        num_threads = min(state.breedthreads, largest)
        if num_threads < state.breedthreads:
            state.output.warn_once(
                f"Largest subpopulation size ({largest}) is smaller than the number of "
                f"breed threads ({state.breedthreads}), so fewer breed threads will be created."
            )

        num_inds, starts = self.compute_chunks(state, num_threads)
        workers = [
            BreederThread(self, new_population, num_inds[t], starts[t], t)
            for t in range(num_threads)
        ]

        if num_threads == 1:
            workers[0].run(state)
        else:
            with ThreadPoolExecutor(max_workers=num_threads) as executor:
                futures = [executor.submit(worker.run, state) for worker in workers]
                # re-raises the first worker failure
                for future in futures:
                    future.result()

        return new_population

    def breed_pop_chunk(self, new_population, state, num_inds, starts, thread) -> None:
        """
        Fill ``[starts[x], starts[x] + num_inds[x])`` of every subpopulation.

        Raises:
            BreedingError: If the pipeline produces nothing or overruns the
                chunk
        """
        for x in range(len(new_population.subpops)):
            if num_inds[x] == 0 or not self.should_breed_subpop(state, x):
                continue

            species = state.population.subpops[x].species
            if self.clone_pipeline_and_population:
                pipe = species.pipe_prototype.clone()
            else:
                pipe = species.pipe_prototype

            upper = num_inds[x]
            chunk = []
            misc = {KEY_PARENTS: {}}

            pipe.prepare_to_produce(state, x, thread)
            while len(chunk) < upper:
                before = len(chunk)
                n = pipe.produce(1, upper - len(chunk), x, chunk, state, thread, misc)
                if n <= 0:
                    raise BreedingError(
                        f"Pipeline for subpop {x} produced no individuals (thread {thread})"
                    )
                # a bare selection method hands back members of the old generation
                if isinstance(pipe, SelectionMethod):
                    duplicate_produced(chunk, before)
                if len(chunk) - before != n:
                    raise BreedingError(
                        f"Pipeline for subpop {x} reported {n} individuals but appended "
                        f"{len(chunk) - before} (thread {thread})"
                    )
                if len(chunk) > upper:
                    raise BreedingError(
                        f"Whoa! A breeding pipeline overwrote the space of another pipeline "
                        f"in subpop {x}. You need to check your breeding pipeline code "
                        f"(in produce()). Chunk size {upper}, produced {len(chunk)}."
                    )
            pipe.finish_producing(state, x, thread)

            target = new_population.subpops[x].individuals
            for q, ind in enumerate(chunk):
                ind.metadata["generation"] = state.generation + 1
                ind.metadata["parents"] = list(misc[KEY_PARENTS].get(q, []))
                target[starts[x] + q] = ind

    def load_elites(self, state, new_population: Population) -> None:
        """Copy the best individuals of each bred subpopulation into its tail."""
        for x, subpop in enumerate(state.population.subpops):
            if not self.should_breed_subpop(state, x):
                continue
            e = self.num_elites(x)
            if e == 0:
                continue
            ranked = sorted(
                range(len(subpop.individuals)),
                key=lambda i: subpop.individuals[i].fitness.value,
                reverse=True,
            )
            target = new_population.subpops[x].individuals
            for k, index in enumerate(ranked[:e]):
                elite = subpop.individuals[index].copy()
                elite.metadata["generation"] = state.generation + 1
                elite.metadata["parents"] = [index]
                elite.metadata["operators"] = ["elite"]
                target[subpop.size - e + k] = elite
