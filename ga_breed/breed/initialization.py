"""
InitializationPipeline: a leaf that creates brand-new individuals.
"""

from ..parameters import Parameter
from .pipeline import BreedingPipeline
from .source import KEY_PARENTS, wants_parents

P_INIT = "init"


class InitializationPipeline(BreedingPipeline):
    """
    Ignores ``min`` and always produces exactly ``max`` fresh individuals
    from the subpopulation's species. Fresh individuals have no parents.
    """

    num_sources = 0

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_INIT)

    @property
    def typical_inds_produced(self) -> int:
        return 1

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        self.warn_likelihood_unused(state, base)

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        species = state.population.subpops[subpop].species
        record = wants_parents(misc)
        for _ in range(max_inds):
            inds.append(species.new_individual(state, thread))
            if record:
                misc[KEY_PARENTS][len(inds) - 1] = []
        return max_inds
