"""
RepeatPipeline: one individual per generation, copied on demand.
"""

from ..parameters import Parameter
from .pipeline import BreedingPipeline
from .source import KEY_PARENTS, wants_parents

P_REPEAT = "repeat"


class RepeatPipeline(BreedingPipeline):
    """
    The first call after ``prepare_to_produce`` pulls a single individual
    from the child. Every call, including that first one, then appends
    ``min`` independent copies of it.
    """

    num_sources = 1

    def __init__(self):
        super().__init__()
        self.individual = None
        self.parents = None

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_REPEAT)

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        self.warn_likelihood_unused(state, base)

    def prepare_to_produce(self, state, subpop: int, thread: int) -> None:
        super().prepare_to_produce(state, subpop, thread)
        self.individual = None
        self.parents = None

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        record = wants_parents(misc)
        if self.individual is None:
            scratch = []
            scratch_misc = {KEY_PARENTS: {}} if record else None
            self.produce_from(self.sources[0], 1, 1, subpop, scratch, state, thread, scratch_misc)
            self.individual = scratch[0]
            if record:
                self.parents = scratch_misc[KEY_PARENTS].get(0)

        for _ in range(min_inds):
            inds.append(self.individual.copy())
            if record and self.parents is not None:
                misc[KEY_PARENTS][len(inds) - 1] = list(self.parents)
        return min_inds
