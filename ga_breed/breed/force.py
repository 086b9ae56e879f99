"""
ForceBreedingPipeline: always pull fixed-size chunks from the child.
"""

from ..parameters import Parameter
from .pipeline import BreedingPipeline
from .source import BreedingError

P_FORCE = "force"
P_NUMINDS = "num-inds"


class ForceBreedingPipeline(BreedingPipeline):
    """
    Asks its child for exactly ``k`` individuals at a time, with ``k`` the
    configured chunk size, until the clamped target is reached.

    Parameters (default base ``breed.force``):
        num-inds: int >= 1, chunk size
    """

    num_sources = 1

    def __init__(self):
        super().__init__()
        self.num_inds = 1

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_FORCE)

    @property
    def typical_inds_produced(self) -> int:
        return self.num_inds

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        self.num_inds = state.parameters.get_int(base.push(P_NUMINDS), default.push(P_NUMINDS))
        if self.num_inds is None or self.num_inds < 1:
            state.output.fatal(
                "ForceBreedingPipeline must produce at least 1 child at a time",
                base.push(P_NUMINDS),
                default.push(P_NUMINDS),
            )
        self.warn_likelihood_unused(state, base)

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        n = min(max(self.num_inds, min_inds), max_inds)
        total = 0
        while total < n:
            k = min(self.num_inds, n - total)
            produced = self.produce_from(self.sources[0], k, k, subpop, inds, state, thread, misc)
            if produced <= 0:
                raise BreedingError(
                    f"ForceBreedingPipeline at {self.my_base} asked its child for {k} "
                    "individuals and received none"
                )
            total += produced
        return total
