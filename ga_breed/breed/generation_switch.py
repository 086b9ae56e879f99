"""
GenerationSwitchPipeline: one child early in the run, another later.
"""

from ..parameters import Parameter
from .pipeline import BreedingPipeline

P_SWITCH = "generation-switch"
P_SWITCHAT = "switch-at"
P_GENERATE_MAX = "generate-max"


class GenerationSwitchPipeline(BreedingPipeline):
    """
    Uses child 0 while ``generation < switch-at``, child 1 from then on.

    The generation is read once at ``prepare_to_produce`` and kept on the
    node, so every ``produce`` call of a chunk sees the same value.

    Parameters (default base ``breed.generation-switch``):
        switch-at: int >= 0
        generate-max: bool, default true
    """

    num_sources = 2

    def __init__(self):
        super().__init__()
        self.generation_switch = 0
        self.generate_max = True
        self.max_generatable = 0
        self.current_generation = 0

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_SWITCH)

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        params = state.parameters

        self.generation_switch = params.get_int(base.push(P_SWITCHAT), default.push(P_SWITCHAT))
        if self.generation_switch is None or self.generation_switch < 0:
            state.output.fatal(
                "GenerationSwitchPipeline must have a switch-at >= 0",
                base.push(P_SWITCHAT),
                default.push(P_SWITCHAT),
            )

        self.generate_max = params.get_boolean(
            base.push(P_GENERATE_MAX), default.push(P_GENERATE_MAX), True
        )
        self.max_generatable = 0
        self.warn_likelihood_unused(state, base)

    @property
    def typical_inds_produced(self) -> int:
        if self.max_generatable == 0:
            self.max_generatable = self.max_child_production
        return self.max_generatable

    def prepare_to_produce(self, state, subpop: int, thread: int) -> None:
        super().prepare_to_produce(state, subpop, thread)
        self.current_generation = state.generation

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        source = self.sources[0] if self.current_generation < self.generation_switch else self.sources[1]

        if self.generate_max:
            n = min(max(self.typical_inds_produced, min_inds), max_inds)
            return self.produce_from(source, n, n, subpop, inds, state, thread, misc)

        return self.produce_from(source, min_inds, max_inds, subpop, inds, state, thread, misc)
