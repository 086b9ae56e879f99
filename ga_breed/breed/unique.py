"""
UniquePipeline: keep only individuals not already in the subpopulation.
"""

from ..parameters import Parameter
from .pipeline import BreedingPipeline
from .source import KEY_PARENTS, wants_parents

P_UNIQUE = "unique"
P_GEN_MAX = "generate-max"
P_RETRIES = "duplicate-retries"


class UniquePipeline(BreedingPipeline):
    """
    Filters out children equal to any individual of the subpopulation as it
    stood at ``prepare_to_produce``.

    The seen-set is not extended with newly produced individuals, so two
    offspring of one generation may still equal each other. If the retries
    run out before the floor is met, the remainder is padded with whatever
    the child produces, duplicates included.

    Retry rounds stop as soon as the floor is met instead of always running
    all of them.

    Parameters (default base ``breed.unique``):
        generate-max: bool, default true (floor is ``max`` rather than ``min``)
        duplicate-retries: int >= 0, default 0
    """

    num_sources = 1

    def __init__(self):
        super().__init__()
        self.generate_max = True
        self.num_duplicate_retries = 0
        self.seen = set()

    def default_base(self) -> Parameter:
        return Parameter("breed").push(P_UNIQUE)

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        params = state.parameters

        self.generate_max = params.get_boolean(
            base.push(P_GEN_MAX), default.push(P_GEN_MAX), True
        )
        self.num_duplicate_retries = params.get_int(
            base.push(P_RETRIES), default.push(P_RETRIES), 0
        )
        if self.num_duplicate_retries < 0:
            state.output.fatal(
                "The number of retries for duplicates must be an integer >= 0.",
                base.push(P_RETRIES),
                default.push(P_RETRIES),
            )
        self.warn_likelihood_unused(state, base)

    def prepare_to_produce(self, state, subpop: int, thread: int) -> None:
        super().prepare_to_produce(state, subpop, thread)
        self.seen = set(
            ind for ind in state.population.subpops[subpop].individuals if ind is not None
        )

    def _remove_duplicates(self, inds, start, num, misc) -> int:
        """
        Drop members of ``inds[start:start + num]`` already seen.

        Removal swaps the last batch member into the hole, so order is not
        preserved. Returns the number of survivors.
        """
        record = wants_parents(misc)
        i = start
        while i < start + num:
            if inds[i] in self.seen:
                last = start + num - 1
                inds[i] = inds[last]
                if record:
                    records = misc[KEY_PARENTS]
                    moved = records.pop(last, None)
                    if moved is not None and i != last:
                        records[i] = moved
                    elif i != last:
                        records.pop(i, None)
                del inds[last]
                num -= 1
            else:
                i += 1
        return num

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        start = len(inds)
        floor = max_inds if self.generate_max else min_inds
        n = 0

        for _ in range(self.num_duplicate_retries + 1):
            if n >= floor:
                break
            lo = min(max(min_inds - n, 1), max_inds - n)
            produced = self.produce_from(
                self.sources[0], lo, max_inds - n, subpop, inds, state, thread, misc
            )
            n += self._remove_duplicates(inds, start + n, produced, misc)

        if n < floor:
            n += self.produce_from(
                self.sources[0], floor - n, max_inds - n, subpop, inds, state, thread, misc
            )

        return n
