"""
Variation pipelines for vector individuals.
"""

from typing import List

from ..breed.pipeline import BreedingPipeline
from ..breed.source import KEY_PARENTS, wants_parents
from ..parameters import Parameter
from .operators import crossover, mutate

P_VECTOR = "vector"
P_MUTATE = "mutate"
P_XOVER = "xover"
P_TOSS = "toss"


def _log_operators(individual, op_log: List[str]) -> None:
    individual.metadata["operators"] = list(individual.metadata.get("operators", [])) + op_log


class VectorMutationPipeline(BreedingPipeline):
    """
    Mutates whatever its child produces using the species' mutation
    operator. With probability ``1 - likelihood`` the batch passes through
    unmodified.
    """

    num_sources = 1

    def default_base(self) -> Parameter:
        return Parameter(P_VECTOR).push(P_MUTATE)

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        start = len(inds)
        n = self.produce_from(self.sources[0], min_inds, max_inds, subpop, inds, state, thread, misc)

        rng = state.random[thread]
        if self.likelihood < 1.0 and rng.random() >= self.likelihood:
            return n

        species = state.population.subpops[subpop].species
        for q in range(start, start + n):
            mutated, op_log = mutate(inds[q], species, rng)
            _log_operators(mutated, op_log)
            inds[q] = mutated
        return n


class VectorCrossoverPipeline(BreedingPipeline):
    """
    Crosses one individual from each child and emits both offspring, or only
    the first when ``toss`` is set. The two children may be the same source
    (``same``). With probability ``1 - likelihood`` the parents are copied
    through unchanged.

    Parameters (default base ``vector.xover``):
        toss: bool, default false
    """

    num_sources = 2

    def __init__(self):
        super().__init__()
        self.toss = False

    def default_base(self) -> Parameter:
        return Parameter(P_VECTOR).push(P_XOVER)

    @property
    def typical_inds_produced(self) -> int:
        return 1 if self.toss else 2

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        self.toss = state.parameters.get_boolean(
            base.push(P_TOSS), self.default_base().push(P_TOSS), False
        )

    def _one_parent(self, source, subpop, state, thread, record):
        parents = []
        parents_misc = {KEY_PARENTS: {}} if record else None
        self.produce_from(source, 1, 1, subpop, parents, state, thread, parents_misc)
        record_of = parents_misc[KEY_PARENTS].get(0, []) if record else []
        return parents[0], list(record_of)

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        n = min(max(self.typical_inds_produced, min_inds), max_inds)
        record = wants_parents(misc)
        rng = state.random[thread]
        species = state.population.subpops[subpop].species

        produced = 0
        while produced < n:
            parent_a, record_a = self._one_parent(self.sources[0], subpop, state, thread, record)
            parent_b, record_b = self._one_parent(self.sources[1], subpop, state, thread, record)

            if rng.random() < self.likelihood:
                child_a, child_b, op_log = crossover(parent_a, parent_b, species, rng)
                _log_operators(child_a, op_log)
                _log_operators(child_b, op_log)
                merged = sorted(set(record_a) | set(record_b))
                offspring = [(child_a, merged), (child_b, merged)]
            else:
                offspring = [(parent_a, record_a), (parent_b, record_b)]

            if self.toss:
                offspring = offspring[:1]
            for child, parents in offspring:
                if produced >= n:
                    break
                inds.append(child)
                if record:
                    misc[KEY_PARENTS][len(inds) - 1] = list(parents)
                produced += 1

        return produced
