"""
BreedingSource: the capability every producer shares.

A source is asked to append between ``min_inds`` and ``max_inds`` individuals
to an output list and to report how many it appended. Leaves (selection
methods, initialization) read the old subpopulation; composites pull from
their children.

Lifecycle per run::

    setup(state, base)            once, reads parameters
    fill_stubs(state, source)     once, binds stub placeholders
    prepare_to_produce(...)       once per generation/subpopulation/thread
    produce(...)                  any number of times
    finish_producing(...)         end of the chunk
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..data_models import Individual
from ..parameters import Parameter

if TYPE_CHECKING:
    from ..evolution import EvolutionState

# misc key under which parent records travel: {output position: [old indices]}
KEY_PARENTS = "parents"

NO_PROBABILITY = -1.0

P_PROB = "prob"


class BreedingError(Exception):
    """Raised when a producer breaks the production contract."""
    pass


def wants_parents(misc: Optional[Dict[str, Any]]) -> bool:
    """True if the caller asked for parent records."""
    return misc is not None and misc.get(KEY_PARENTS) is not None


class BreedingSource(ABC):
    """
    Root of every producer.

    Attributes:
        probability: Weight used when a parent picks among siblings, or
            ``NO_PROBABILITY`` when none was configured
    """

    def __init__(self):
        self.probability = NO_PROBABILITY

    @abstractmethod
    def default_base(self) -> Parameter:
        """Parameter base consulted when a key is missing under ``base``."""

    @property
    def typical_inds_produced(self) -> int:
        """Number of individuals a ``produce`` call normally yields."""
        return 1

    def setup(self, state: "EvolutionState", base: Parameter) -> None:
        default = self.default_base()
        if not state.parameters.exists(base.push(P_PROB), default.push(P_PROB)):
            self.probability = NO_PROBABILITY
        else:
            self.probability = state.parameters.get_float(base.push(P_PROB), default.push(P_PROB))
            if self.probability < 0.0:
                state.output.error(
                    "A breeding source's probability must be a number >= 0.0, "
                    "or unset",
                    base.push(P_PROB),
                    default.push(P_PROB),
                )

    def fill_stubs(self, state: "EvolutionState", source: Optional["BreedingSource"]) -> None:
        """Bind stub placeholders below this node to ``source``."""
        pass

    def prepare_to_produce(self, state: "EvolutionState", subpop: int, thread: int) -> None:
        pass

    def finish_producing(self, state: "EvolutionState", subpop: int, thread: int) -> None:
        pass

    @abstractmethod
    def produce(
        self,
        min_inds: int,
        max_inds: int,
        subpop: int,
        inds: List[Individual],
        state: "EvolutionState",
        thread: int,
        misc: Optional[Dict[str, Any]] = None
    ) -> int:
        """
        Append between ``min_inds`` and ``max_inds`` individuals to ``inds``.

        Args:
            min_inds: Fewest individuals acceptable
            max_inds: Most individuals acceptable
            subpop: Subpopulation being bred
            inds: Output list (appended to, never reordered before the
                position it had on entry)
            state: Run state
            thread: Breeding thread index (selects the random stream)
            misc: Optional side channel, passed through untouched by
                pipelines that delegate verbatim

        Returns:
            Number of individuals appended
        """

    def clone(self) -> "BreedingSource":
        """
        Deep copy of this node and everything below it.

        Children shared through ``same`` stay shared inside the copy.
        """
        return copy.deepcopy(self)


class SelectionMethod(BreedingSource):
    """
    Leaf source that picks existing individuals from the old subpopulation.

    Each pick returns the individual itself, not a copy; any pipeline that
    may modify what it receives must duplicate it first.
    """

    INDS_PRODUCED = 1

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        start = len(inds)
        n = min(max(self.INDS_PRODUCED, min_inds), max_inds)
        old_inds = state.population.subpops[subpop].individuals
        record = wants_parents(misc)
        for q in range(n):
            index = self.produce_index(subpop, state, thread)
            inds.append(old_inds[index])
            if record:
                misc[KEY_PARENTS][start + q] = [index]
        return n

    @abstractmethod
    def produce_index(self, subpop: int, state: "EvolutionState", thread: int) -> int:
        """Index of one selected individual in the old subpopulation."""


class StubPlaceholder(BreedingSource):
    """
    Child slot configured as ``stub``.

    Stands in for a source that is bound later by ``fill_stubs``. Producing
    from a placeholder that was never bound is an assembly error.
    """

    def default_base(self) -> Parameter:
        return Parameter("breed").push("stub-placeholder")

    def produce(self, min_inds, max_inds, subpop, inds, state, thread, misc=None) -> int:
        raise BreedingError(
            "A stub placeholder was asked to produce individuals; "
            "it was never bound to a source by fill_stubs"
        )
