"""
Identity pipelines: ReproductionPipeline and StubPipeline.
"""

from typing import Optional

from ..parameters import Parameter
from .pipeline import BreedingPipeline, duplicate_produced
from .source import BreedingError, BreedingSource, SelectionMethod

P_REPRODUCE = "reproduce"
P_MUSTCLONE = "must-clone"
P_STUB = "stub"
P_STUB_SOURCE = "stub-source"


class ReproductionPipeline(BreedingPipeline):
    """
    Pass-through of a single child.

    Hands ``(min, max, misc)`` to its child unchanged and returns the
    child's count. Individuals are duplicated when the child is a selection
    method, or always when ``must-clone`` is true.

    Parameters (default base ``breed.reproduce``):
        must-clone: bool, default false
    """

    num_sources = 1

    def __init__(self):
        super().__init__()
        self.must_clone = False

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_REPRODUCE)

    @property
    def typical_inds_produced(self) -> int:
        return self.sources[0].typical_inds_produced

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        self.must_clone = state.parameters.get_boolean(
            base.push(P_MUSTCLONE), default.push(P_MUSTCLONE), False
        )

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        start = len(inds)
        n = self.sources[0].produce(min_inds, max_inds, subpop, inds, state, thread, misc)
        if self.must_clone or isinstance(self.sources[0], SelectionMethod):
            duplicate_produced(inds, start)
        return n


class StubPipeline(ReproductionPipeline):
    """
    Reproduction with a private stub subtree.

    ``stub-source`` names a pipeline fragment built at setup. Placeholders
    (``stub``) anywhere below this pipeline's own children are bound to that
    fragment, and placeholders inside the fragment are bound to whatever
    source this pipeline itself receives. The fragment is always wired
    first, so resolution proceeds from the innermost fragment outward.

    Parameters (default base ``breed.stub``):
        stub-source: class name of the stub fragment (required)
    """

    def __init__(self):
        super().__init__()
        self.stub_source: Optional[BreedingSource] = None
        self.stubs_filled = False

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_STUB)

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        p = base.push(P_STUB_SOURCE)
        d = default.push(P_STUB_SOURCE)
        if not state.parameters.exists(p, d):
            state.output.fatal("StubPipeline requires a stub-source.", p, d)
        self.stub_source = state.parameters.get_instance(p, d, BreedingSource)
        self.stub_source.setup(state, p)
        state.output.exit_if_errors()

    def fill_stubs(self, state, source: Optional[BreedingSource]) -> None:
        if self.stubs_filled:
            raise BreedingError(
                f"StubPipeline at {self.my_base} had its stubs filled twice; "
                "fill_stubs must run exactly once per run"
            )
        self.stubs_filled = True
        self.stub_source.fill_stubs(state, source)
        super().fill_stubs(state, self.stub_source)
