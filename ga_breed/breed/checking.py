"""
CheckingPipeline: produce, validate, retry, then fall back.
"""

from typing import List

from ..data_models import Individual
from ..parameters import Parameter
from .pipeline import BreedingPipeline, transfer_parents
from .source import KEY_PARENTS, wants_parents

P_CHECK = "check"
P_NUMTIMES = "num-times"


class CheckingPipeline(BreedingPipeline):
    """
    Tries child 0 up to ``num-times`` times, keeping the first batch that
    passes ``all_valid``; if none does, child 1 fulfils the quota instead.

    The default ``all_valid`` accepts everything. Subclass and override it to
    impose a real constraint.

    Parameters (default base ``breed.check``):
        num-times: int >= 1, attempts before falling back
    """

    num_sources = 2

    def __init__(self):
        super().__init__()
        self.num_times = 1

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_CHECK)

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        self.num_times = state.parameters.get_int(
            base.push(P_NUMTIMES), default.push(P_NUMTIMES), 1
        )
        if self.num_times < 1:
            state.output.fatal(
                "CheckingPipeline must have a num-times value >= 1.",
                base.push(P_NUMTIMES),
                default.push(P_NUMTIMES),
            )
        self.warn_likelihood_unused(state, base)

    def all_valid(self, inds: List[Individual], subpop: int, state, thread: int) -> bool:
        """Whether a freshly produced batch is acceptable."""
        return True

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        record = wants_parents(misc)
        for _ in range(self.num_times):
            scratch = []
            scratch_misc = {KEY_PARENTS: {}} if record else None
            n = self.produce_from(
                self.sources[0], min_inds, max_inds, subpop, scratch, state, thread, scratch_misc
            )
            if self.all_valid(scratch, subpop, state, thread):
                start = len(inds)
                inds.extend(scratch)
                transfer_parents(scratch_misc, misc, 0, start, n)
                return n

        return self.produce_from(
            self.sources[1], min_inds, max_inds, subpop, inds, state, thread, misc
        )
