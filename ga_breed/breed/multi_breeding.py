"""
MultiBreedingPipeline: pick one child per call by probability.
"""

from ..parameters import Parameter
from ..random_choice import organize_distribution, pick_from_distribution
from .pipeline import P_SOURCE, BreedingPipeline
from .source import P_PROB

P_MULTIBREED = "multibreed"
P_GEN_MAX = "generate-max"


class MultiBreedingPipeline(BreedingPipeline):
    """
    Holds any number of children, each with a ``prob`` weight. Every call
    draws one child and lets it fulfil the whole request.

    If all weights are zero the children are chosen uniformly and a warning
    is printed. With ``generate-max`` every call is normalized to the
    largest typical count among the children.

    Parameters (default base ``breed.multibreed``):
        num-sources: int >= 1
        source.<i>.prob: float >= 0, required per child
        generate-max: bool, default true
    """

    def __init__(self):
        super().__init__()
        self.generate_max = True
        self.max_generatable = 0
        self.distribution = None

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_MULTIBREED)

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        params = state.parameters

        weights = []
        for x, source in enumerate(self.sources):
            if source.probability < 0.0:
                state.output.error(
                    "Pipe #" + str(x) + " must have a probability >= 0.0",
                    base.push(P_SOURCE, x, P_PROB),
                )
            weights.append(max(source.probability, 0.0))
        state.output.exit_if_errors()

        if sum(weights) == 0.0:
            state.output.warning(
                "MultiBreedingPipeline's children all have zero probabilities "
                "-- this will be treated as a uniform distribution.",
                base.push(P_SOURCE),
            )
        self.distribution = organize_distribution(weights, allow_all_zeros=True)

        self.generate_max = params.get_boolean(
            base.push(P_GEN_MAX), default.push(P_GEN_MAX), True
        )
        self.max_generatable = 0
        self.warn_likelihood_unused(state, base)

    @property
    def typical_inds_produced(self) -> int:
        if self.max_generatable == 0:
            self.max_generatable = self.max_child_production
        return self.max_generatable

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        index = pick_from_distribution(self.distribution, state.random[thread].random())
        source = self.sources[index]

        if self.generate_max:
            n = min(max(self.typical_inds_produced, min_inds), max_inds)
            return self.produce_from(source, n, n, subpop, inds, state, thread, misc)

        return self.produce_from(source, min_inds, max_inds, subpop, inds, state, thread, misc)
