"""
Species: factory for individuals and owner of the breeding pipeline.
"""

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

from .breed.source import BreedingSource
from .data_models import Individual
from .parameters import Parameter

if TYPE_CHECKING:
    from .evolution import EvolutionState

P_PIPE = "pipe"


class Species(ABC):
    """
    Knows how to create new individuals and which pipeline breeds them.

    ``setup`` builds the pipeline prototype from ``<base>.pipe``, runs its
    setup and wires its stubs once. Breeding threads work on clones of the
    prototype, never on the prototype itself.
    """

    def __init__(self):
        self.pipe_prototype: Optional[BreedingSource] = None

    @abstractmethod
    def default_base(self) -> Parameter:
        pass

    def setup(self, state: "EvolutionState", base: Parameter) -> None:
        default = self.default_base()
        p = base.push(P_PIPE)
        d = default.push(P_PIPE)
        self.pipe_prototype = state.parameters.get_instance(p, d, BreedingSource)
        self.pipe_prototype.setup(state, p)
        state.output.exit_if_errors()
        # top of the tree: any stub left unbound stays a placeholder
        self.pipe_prototype.fill_stubs(state, None)

    @abstractmethod
    def new_individual(self, state: "EvolutionState", thread: int) -> Individual:
        """Create a fresh random individual using ``state.random[thread]``."""
