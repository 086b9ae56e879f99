"""
BufferedBreedingPipeline: decouple caller granularity from child granularity.
"""

from collections import deque

from ..parameters import Parameter
from .pipeline import BreedingPipeline
from .source import KEY_PARENTS, wants_parents

P_BUFFERED = "buffered"
P_BUFSIZE = "num-inds"


class BufferedBreedingPipeline(BreedingPipeline):
    """
    Asks its child for exactly ``num-inds`` individuals at a time and hands
    them out one by one, oldest first.

    The buffer is emptied at ``prepare_to_produce``; leftovers never carry
    into the next generation. Each call returns exactly ``min`` individuals.

    Parameters (default base ``breed.buffered``):
        num-inds: int >= 1, buffer size
    """

    num_sources = 1

    def __init__(self):
        super().__init__()
        self.buffer_size = 1
        self.buffer = deque()

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_BUFFERED)

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        self.buffer_size = state.parameters.get_int(
            base.push(P_BUFSIZE), default.push(P_BUFSIZE), 1
        )
        if self.buffer_size < 1:
            state.output.fatal(
                "BufferedBreedingPipeline's number of individuals must be >= 1.",
                base.push(P_BUFSIZE),
                default.push(P_BUFSIZE),
            )
        self.buffer = deque()
        self.warn_likelihood_unused(state, base)

    @property
    def typical_inds_produced(self) -> int:
        return 1

    def prepare_to_produce(self, state, subpop: int, thread: int) -> None:
        super().prepare_to_produce(state, subpop, thread)
        self.buffer.clear()

    def _refill(self, subpop, state, thread, record: bool) -> None:
        refill = []
        refill_misc = {KEY_PARENTS: {}} if record else None
        n = self.produce_from(
            self.sources[0], self.buffer_size, self.buffer_size,
            subpop, refill, state, thread, refill_misc
        )
        for q in range(n):
            parents = refill_misc[KEY_PARENTS].get(q) if record else None
            self.buffer.append((refill[q], parents))

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        record = wants_parents(misc)
        for _ in range(min_inds):
            if not self.buffer:
                self._refill(subpop, state, thread, record)
            ind, parents = self.buffer.popleft()
            inds.append(ind)
            if record and parents is not None:
                misc[KEY_PARENTS][len(inds) - 1] = list(parents)
        return min_inds
