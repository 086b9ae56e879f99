"""
BreedingPipeline: base class of every composite producer.

A pipeline owns an ordered list of child sources read from
``base.source.0``, ``base.source.1``... Two child values are special:

- ``same``: reuse the previous child (the tree becomes a DAG)
- ``stub``: leave a placeholder, bound later by ``fill_stubs``
"""

from typing import Any, Dict, Iterator, List, Optional

from ..data_models import Individual
from ..parameters import Parameter
from .source import (
    KEY_PARENTS,
    BreedingSource,
    SelectionMethod,
    StubPlaceholder,
    wants_parents,
)

P_LIKELIHOOD = "likelihood"
P_NUMSOURCES = "num-sources"
P_SOURCE = "source"
V_SAME = "same"
V_STUB = "stub"

# num_sources value meaning "read num-sources from the parameters"
DYNAMIC_SOURCES = -1


def duplicate_produced(inds: List[Individual], start: int) -> None:
    """Replace every individual from ``start`` on with an independent copy."""
    for q in range(start, len(inds)):
        inds[q] = inds[q].copy()


def transfer_parents(
    from_misc: Optional[Dict[str, Any]],
    to_misc: Optional[Dict[str, Any]],
    from_start: int,
    to_start: int,
    count: int
) -> None:
    """Copy parent records for ``count`` positions between two side channels."""
    if not wants_parents(from_misc) or not wants_parents(to_misc):
        return
    source_records = from_misc[KEY_PARENTS]
    target_records = to_misc[KEY_PARENTS]
    for q in range(count):
        record = source_records.get(from_start + q)
        if record is not None:
            target_records[to_start + q] = list(record)


class BreedingPipeline(BreedingSource):
    """
    Composite producer with child sources and a likelihood.

    Subclasses set ``num_sources`` to a fixed arity or leave it at
    ``DYNAMIC_SOURCES`` to read ``num-sources`` from the parameters.
    """

    num_sources = DYNAMIC_SOURCES

    def __init__(self):
        super().__init__()
        self.sources: List[BreedingSource] = []
        self.likelihood = 1.0
        self.my_base: Optional[Parameter] = None

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        self.my_base = base
        default = self.default_base()
        params = state.parameters

        self.likelihood = params.get_float(
            base.push(P_LIKELIHOOD), default.push(P_LIKELIHOOD), 1.0
        )
        if not 0.0 <= self.likelihood <= 1.0:
            state.output.fatal(
                "Breeding pipeline likelihood must be a value between 0.0 and 1.0 inclusive",
                base.push(P_LIKELIHOOD),
                default.push(P_LIKELIHOOD),
            )

        num_sources = self.num_sources
        if num_sources == DYNAMIC_SOURCES:
            num_sources = params.get_int(base.push(P_NUMSOURCES), default.push(P_NUMSOURCES))
            if num_sources is None or num_sources < 1:
                state.output.fatal(
                    "Breeding pipeline num-sources value must be provided and > 0",
                    base.push(P_NUMSOURCES),
                    default.push(P_NUMSOURCES),
                )

        self.sources = []
        for x in range(num_sources):
            p = base.push(P_SOURCE, x)
            d = default.push(P_SOURCE, x)
            value = params.get_string(p, d)
            if value == V_SAME:
                if x == 0:
                    state.output.fatal('Source #0 cannot be declared with the value "same".', p, d)
                self.sources.append(self.sources[x - 1])
            elif value == V_STUB:
                self.sources.append(StubPlaceholder())
            else:
                source = params.get_instance(p, d, BreedingSource)
                source.setup(state, p)
                self.sources.append(source)

        state.output.exit_if_errors()

    def warn_likelihood_unused(self, state, base: Parameter) -> None:
        """For policies that ignore likelihood."""
        if self.likelihood < 1.0:
            default = self.default_base()
            state.output.warning(
                f"{type(self).__name__} does not respond to the 'likelihood' parameter.",
                base.push(P_LIKELIHOOD),
                default.push(P_LIKELIHOOD),
            )

    def distinct_sources(self) -> Iterator[BreedingSource]:
        """Children in order, each shared child only once."""
        seen = set()
        for source in self.sources:
            if id(source) in seen:
                continue
            seen.add(id(source))
            yield source

    @property
    def min_child_production(self) -> int:
        if not self.sources:
            return 0
        return min(source.typical_inds_produced for source in self.sources)

    @property
    def max_child_production(self) -> int:
        if not self.sources:
            return 0
        return max(source.typical_inds_produced for source in self.sources)

    @property
    def typical_inds_produced(self) -> int:
        return self.min_child_production

    def fill_stubs(self, state, source: Optional[BreedingSource]) -> None:
        # placeholders are replaced in place; a "same" slot holding the
        # same placeholder is replaced too
        for x, child in enumerate(self.sources):
            if isinstance(child, StubPlaceholder):
                if source is not None:
                    self.sources[x] = source
        for child in self.distinct_sources():
            if child is not source and not isinstance(child, StubPlaceholder):
                child.fill_stubs(state, source)

    def prepare_to_produce(self, state, subpop: int, thread: int) -> None:
        for source in self.distinct_sources():
            source.prepare_to_produce(state, subpop, thread)

    def finish_producing(self, state, subpop: int, thread: int) -> None:
        for source in self.distinct_sources():
            source.finish_producing(state, subpop, thread)

    def produce_from(
        self,
        source: BreedingSource,
        min_inds: int,
        max_inds: int,
        subpop: int,
        inds: List[Individual],
        state,
        thread: int,
        misc: Optional[Dict[str, Any]] = None
    ) -> int:
        """
        Ask ``source`` for individuals, duplicating them if it selected them.

        Returns:
            Number of individuals appended
        """
        start = len(inds)
        n = source.produce(min_inds, max_inds, subpop, inds, state, thread, misc)
        if isinstance(source, SelectionMethod):
            duplicate_produced(inds, start)
        return n
