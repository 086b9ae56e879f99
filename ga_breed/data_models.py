"""
Data models for breeding runs.

Core data structures representing individuals, their fitness, subpopulations
and lineage records.
"""

from dataclasses import dataclass, field
from typing import Optional, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .species import Species


@dataclass
class Fitness:
    """
    Single-objective fitness. Larger values are better.

    Attributes:
        value: Fitness value (``-inf`` until evaluated)
    """
    value: float = float("-inf")

    def better_than(self, other: "Fitness") -> bool:
        return self.value > other.value

    def equivalent_to(self, other: "Fitness") -> bool:
        return self.value == other.value

    def copy(self) -> "Fitness":
        return Fitness(self.value)


@dataclass(eq=False)
class Individual:
    """
    Represents a single candidate solution.

    Equality and hashing are value-based on the genome only, so two
    independently produced individuals with the same genes compare equal
    regardless of fitness or metadata. Do not mutate the genome of an
    individual while it is stored in a set.

    Attributes:
        genome: List of genes
        fitness: Fitness object
        evaluated: Whether fitness reflects the current genome
        metadata: Additional information (parents, operator log, etc.)
    """
    genome: list
    fitness: Fitness = field(default_factory=Fitness)
    evaluated: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def copy(self) -> "Individual":
        """
        Create an independent duplicate of this individual.

        Returns:
            New Individual with copied genome, fitness and metadata
        """
        return Individual(
            genome=list(self.genome),
            fitness=self.fitness.copy(),
            evaluated=self.evaluated,
            metadata=self.metadata.copy(),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        return list(self.genome) == list(other.genome)

    def __hash__(self) -> int:
        return hash(tuple(self.genome))

    def __len__(self) -> int:
        return len(self.genome)


@dataclass
class Subpopulation:
    """
    One independently bred pool of individuals.

    Attributes:
        species: Species that creates and breeds these individuals
        size: Target number of individuals
        individuals: Current generation (read-only while breeding)
    """
    species: "Species"
    size: int
    individuals: list[Optional[Individual]] = field(default_factory=list)

    def empty_clone(self) -> "Subpopulation":
        """Same species and size, every slot empty."""
        return Subpopulation(
            species=self.species,
            size=self.size,
            individuals=[None] * self.size,
        )

    def best_index(self) -> int:
        """Index of the fittest individual (first one on ties)."""
        if not self.individuals:
            raise ValueError("Subpopulation is empty")
        best = 0
        for i in range(1, len(self.individuals)):
            if self.individuals[i].fitness.better_than(self.individuals[best].fitness):
                best = i
        return best

    def __len__(self) -> int:
        return len(self.individuals)


@dataclass
class Population:
    """All subpopulations of a run."""
    subpops: list[Subpopulation]

    def empty_clone(self) -> "Population":
        return Population(subpops=[subpop.empty_clone() for subpop in self.subpops])

    def __len__(self) -> int:
        return len(self.subpops)


@dataclass
class LineageRecord:
    """
    Tracks provenance of a bred individual.

    Attributes:
        generation: Generation the child was bred in
        subpop: Subpopulation index
        index: Position of the child in the new subpopulation
        parent_indices: Positions of its parents in the previous generation
        operators: Variation operators applied to it
        fitness: Fitness of the child once evaluated
    """
    generation: int
    subpop: int
    index: int
    parent_indices: list[int]
    operators: list[str] = field(default_factory=list)
    fitness: Optional[float] = None

    def __post_init__(self):
        """Validate lineage record."""
        if self.generation < 0:
            raise ValueError(f"Invalid generation: {self.generation}")
        if self.index < 0:
            raise ValueError(f"Invalid index: {self.index}")

    def to_dict(self) -> dict[str, Any]:
        """
        Convert lineage record to dictionary for CSV export.

        Returns:
            Dictionary with string-serializable values
        """
        return {
            "generation": self.generation,
            "subpop": self.subpop,
            "index": self.index,
            "parent_indices": ",".join(str(p) for p in self.parent_indices),
            "operators": "; ".join(self.operators),
            "fitness": "" if self.fitness is None else self.fitness,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineageRecord":
        """
        Create lineage record from dictionary (e.g., from CSV).

        Args:
            data: Dictionary with lineage information

        Returns:
            LineageRecord instance
        """
        parents = data.get("parent_indices") or ""
        fitness = data.get("fitness")
        return cls(
            generation=int(data["generation"]),
            subpop=int(data["subpop"]),
            index=int(data["index"]),
            parent_indices=[int(p) for p in parents.split(",")] if parents else [],
            operators=data["operators"].split("; ") if data.get("operators") else [],
            fitness=float(fitness) if fitness not in (None, "") else None,
        )
