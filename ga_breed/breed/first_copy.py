"""
FirstCopyPipeline: one special individual per generation.
"""

from ..parameters import Parameter
from .pipeline import BreedingPipeline

P_FIRST_COPY = "first-copy"


class FirstCopyPipeline(BreedingPipeline):
    """
    The first unit after ``prepare_to_produce`` comes from child 0, every
    later unit from child 1. Typically child 0 copies the best individual
    forward (a per-thread elite) and child 1 is the normal breeding tree.
    """

    num_sources = 2

    def __init__(self):
        super().__init__()
        self.first_time = True

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_FIRST_COPY)

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        self.warn_likelihood_unused(state, base)

    def prepare_to_produce(self, state, subpop: int, thread: int) -> None:
        super().prepare_to_produce(state, subpop, thread)
        self.first_time = True

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        n = 0
        if self.first_time:
            self.first_time = False
            n = self.produce_from(self.sources[0], 1, 1, subpop, inds, state, thread, misc)
            if n >= min_inds:
                return n

        return n + self.produce_from(
            self.sources[1], min_inds - n, max_inds - n, subpop, inds, state, thread, misc
        )
