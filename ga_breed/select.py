"""
Selection methods: leaves that pick existing individuals.

Each method returns the chosen individual itself (see
``SelectionMethod``); pipelines above it duplicate before modifying.
"""

import math
from typing import List, Optional

from .breed.source import BreedingSource, SelectionMethod
from .parameters import Parameter
from .random_choice import organize_distribution, pick_from_distribution

P_SELECT = "select"
P_SIZE = "size"
P_PICKWORST = "pick-worst"
P_N = "n"
P_NUMSELECTS = "num-selects"


class TournamentSelection(SelectionMethod):
    """
    Picks the best (or worst) of ``size`` individuals chosen uniformly with
    replacement.

    A fractional size such as 2.3 means a tournament of 3 with probability
    0.3 and of 2 otherwise.

    Parameters (default base ``select.tournament``):
        size: float >= 1
        pick-worst: bool, default false
    """

    def __init__(self):
        super().__init__()
        self.size = 2
        self.probability_of_bigger = 0.0
        self.pick_worst = False

    def default_base(self) -> Parameter:
        return Parameter(P_SELECT).push("tournament")

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        params = state.parameters

        size = params.get_float(base.push(P_SIZE), default.push(P_SIZE), 2.0)
        if size < 1.0:
            state.output.fatal("Tournament size must be >= 1.", base.push(P_SIZE), default.push(P_SIZE))
        self.size = int(math.floor(size))
        self.probability_of_bigger = size - self.size
        self.pick_worst = params.get_boolean(
            base.push(P_PICKWORST), default.push(P_PICKWORST), False
        )

    def tournament_size(self, rng) -> int:
        if self.probability_of_bigger > 0.0 and rng.random() < self.probability_of_bigger:
            return self.size + 1
        return self.size

    def better(self, first, second) -> bool:
        if self.pick_worst:
            return second.fitness.better_than(first.fitness)
        return first.fitness.better_than(second.fitness)

    def produce_index(self, subpop, state, thread) -> int:
        rng = state.random[thread]
        old_inds = state.population.subpops[subpop].individuals
        best = int(rng.integers(len(old_inds)))
        for _ in range(1, self.tournament_size(rng)):
            j = int(rng.integers(len(old_inds)))
            if self.better(old_inds[j], old_inds[best]):
                best = j
        return best


class BestSelection(SelectionMethod):
    """
    Picks uniformly among the ``n`` fittest (or least fit) individuals.

    The ranking is computed once per chunk at ``prepare_to_produce``.

    Parameters (default base ``select.best``):
        n: int >= 1
        pick-worst: bool, default false
    """

    def __init__(self):
        super().__init__()
        self.best_n = 1
        self.pick_worst = False
        self.sorted_indices: List[int] = []

    def default_base(self) -> Parameter:
        return Parameter(P_SELECT).push("best")

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        params = state.parameters

        self.best_n = params.get_int(base.push(P_N), default.push(P_N), 1)
        if self.best_n < 1:
            state.output.fatal("n must be an integer greater than 0", base.push(P_N), default.push(P_N))
        self.pick_worst = params.get_boolean(
            base.push(P_PICKWORST), default.push(P_PICKWORST), False
        )

    def prepare_to_produce(self, state, subpop, thread) -> None:
        old_inds = state.population.subpops[subpop].individuals
        self.sorted_indices = sorted(
            range(len(old_inds)),
            key=lambda i: old_inds[i].fitness.value,
            reverse=not self.pick_worst,
        )

    def produce_index(self, subpop, state, thread) -> int:
        n = min(self.best_n, len(self.sorted_indices))
        return self.sorted_indices[int(state.random[thread].integers(n))]

    def finish_producing(self, state, subpop, thread) -> None:
        self.sorted_indices = []


class RandomSelection(SelectionMethod):
    """Picks an individual uniformly at random."""

    def default_base(self) -> Parameter:
        return Parameter(P_SELECT).push("random")

    def produce_index(self, subpop, state, thread) -> int:
        old_inds = state.population.subpops[subpop].individuals
        return int(state.random[thread].integers(len(old_inds)))


class FirstSelection(SelectionMethod):
    """Always picks the first individual. Mostly useful in tests."""

    def default_base(self) -> Parameter:
        return Parameter(P_SELECT).push("first")

    def produce_index(self, subpop, state, thread) -> int:
        return 0


class MultiSelection(SelectionMethod):
    """
    Delegates each pick to one of several selection methods, chosen by
    their ``prob`` weights.

    Parameters (default base ``select.multiselect``):
        num-selects: int >= 1
        select.<i>: class name of each selection method
        select.<i>.prob: float >= 0
    """

    def __init__(self):
        super().__init__()
        self.selects: List[SelectionMethod] = []
        self.distribution = None

    def default_base(self) -> Parameter:
        return Parameter(P_SELECT).push("multiselect")

    def setup(self, state, base: Parameter) -> None:
        super().setup(state, base)
        default = self.default_base()
        params = state.parameters

        num_selects = params.get_int(base.push(P_NUMSELECTS), default.push(P_NUMSELECTS))
        if num_selects is None or num_selects < 1:
            state.output.fatal(
                "The number of MultiSelection sub-selection methods must be >= 1.",
                base.push(P_NUMSELECTS),
                default.push(P_NUMSELECTS),
            )

        self.selects = []
        weights = []
        for x in range(num_selects):
            p = base.push(P_SELECT, x)
            d = default.push(P_SELECT, x)
            select = params.get_instance(p, d, SelectionMethod)
            select.setup(state, p)
            if select.probability < 0.0:
                state.output.error(
                    "MultiSelection select #" + str(x) + " must have a probability >= 0.0",
                    p.push("prob"),
                )
            self.selects.append(select)
            weights.append(max(select.probability, 0.0))
        state.output.exit_if_errors()

        if sum(weights) == 0.0:
            state.output.warning(
                "MultiSelection's sub-selection methods all have zero probabilities "
                "-- this will be treated as a uniform distribution.",
                base.push(P_SELECT),
            )
        self.distribution = organize_distribution(weights, allow_all_zeros=True)

    def fill_stubs(self, state, source: Optional[BreedingSource]) -> None:
        for select in self.selects:
            select.fill_stubs(state, source)

    def prepare_to_produce(self, state, subpop, thread) -> None:
        for select in self.selects:
            select.prepare_to_produce(state, subpop, thread)

    def produce_index(self, subpop, state, thread) -> int:
        index = pick_from_distribution(self.distribution, state.random[thread].random())
        return self.selects[index].produce_index(subpop, state, thread)

    def finish_producing(self, state, subpop, thread) -> None:
        for select in self.selects:
            select.finish_producing(state, subpop, thread)
