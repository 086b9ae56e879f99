"""
VectorSpecies: fixed-length numeric genomes.
"""

from ..data_models import Individual
from ..parameters import Parameter
from ..species import Species

P_VECTOR = "vector"
P_SPECIES = "species"
P_GENOME_SIZE = "genome-size"
P_GENE_TYPE = "gene-type"
P_MIN_GENE = "min-gene"
P_MAX_GENE = "max-gene"
P_MUTATION_TYPE = "mutation-type"
P_MUTATION_PROB = "mutation-prob"
P_MUTATION_STDEV = "mutation-stdev"
P_CROSSOVER_TYPE = "crossover-type"
P_CROSSOVER_PROB = "crossover-prob"

GENE_TYPES = ("int", "float")
MUTATION_TYPES = ("reset", "gauss")
CROSSOVER_TYPES = ("one", "two", "any")


class VectorSpecies(Species):
    """
    Species of fixed-length vectors with genes in ``[min-gene, max-gene]``.

    Parameters (default base ``vector.species``):
        genome-size: int >= 1
        gene-type: "int" or "float", default "float"
        min-gene, max-gene: gene bounds, default 0 and 1
        mutation-type: "reset" or "gauss", default "reset"
        mutation-prob: per-gene probability in [0, 1], default 1/genome-size
        mutation-stdev: gauss step size, default 0.1
        crossover-type: "one", "two" or "any", default "one"
        crossover-prob: per-gene swap probability for "any", default 0.5
        pipe: root breeding pipeline
    """

    def __init__(self):
        super().__init__()
        self.genome_size = 1
        self.gene_type = "float"
        self.min_gene = 0.0
        self.max_gene = 1.0
        self.mutation_type = "reset"
        self.mutation_prob = 1.0
        self.mutation_stdev = 0.1
        self.crossover_type = "one"
        self.crossover_prob = 0.5

    def default_base(self) -> Parameter:
        return Parameter(P_VECTOR).push(P_SPECIES)

    def setup(self, state, base: Parameter) -> None:
        default = self.default_base()
        params = state.parameters
        output = state.output

        self.genome_size = params.get_int(base.push(P_GENOME_SIZE), default.push(P_GENOME_SIZE))
        if self.genome_size is None or self.genome_size < 1:
            output.fatal("genome-size must be an integer >= 1", base.push(P_GENOME_SIZE), default.push(P_GENOME_SIZE))

        self.gene_type = params.get_string(base.push(P_GENE_TYPE), default.push(P_GENE_TYPE), "float")
        if self.gene_type not in GENE_TYPES:
            output.error(f"gene-type must be one of {GENE_TYPES}", base.push(P_GENE_TYPE), default.push(P_GENE_TYPE))

        self.min_gene = params.get_float(base.push(P_MIN_GENE), default.push(P_MIN_GENE), 0.0)
        self.max_gene = params.get_float(base.push(P_MAX_GENE), default.push(P_MAX_GENE), 1.0)
        if self.max_gene < self.min_gene:
            output.error("max-gene must be >= min-gene", base.push(P_MAX_GENE), default.push(P_MAX_GENE))

        self.mutation_type = params.get_string(
            base.push(P_MUTATION_TYPE), default.push(P_MUTATION_TYPE), "reset"
        )
        if self.mutation_type not in MUTATION_TYPES:
            output.error(
                f"mutation-type must be one of {MUTATION_TYPES}",
                base.push(P_MUTATION_TYPE), default.push(P_MUTATION_TYPE)
            )

        self.mutation_prob = params.get_float(
            base.push(P_MUTATION_PROB), default.push(P_MUTATION_PROB), 1.0 / self.genome_size
        )
        if not 0.0 <= self.mutation_prob <= 1.0:
            output.error(
                "mutation-prob must be between 0.0 and 1.0 inclusive",
                base.push(P_MUTATION_PROB), default.push(P_MUTATION_PROB)
            )

        self.mutation_stdev = params.get_float(
            base.push(P_MUTATION_STDEV), default.push(P_MUTATION_STDEV), 0.1
        )
        if self.mutation_stdev < 0.0:
            output.error(
                "mutation-stdev must be >= 0.0",
                base.push(P_MUTATION_STDEV), default.push(P_MUTATION_STDEV)
            )

        self.crossover_type = params.get_string(
            base.push(P_CROSSOVER_TYPE), default.push(P_CROSSOVER_TYPE), "one"
        )
        if self.crossover_type not in CROSSOVER_TYPES:
            output.error(
                f"crossover-type must be one of {CROSSOVER_TYPES}",
                base.push(P_CROSSOVER_TYPE), default.push(P_CROSSOVER_TYPE)
            )

        self.crossover_prob = params.get_float(
            base.push(P_CROSSOVER_PROB), default.push(P_CROSSOVER_PROB), 0.5
        )
        if not 0.0 <= self.crossover_prob <= 1.0:
            output.error(
                "crossover-prob must be between 0.0 and 1.0 inclusive",
                base.push(P_CROSSOVER_PROB), default.push(P_CROSSOVER_PROB)
            )

        output.exit_if_errors()
        super().setup(state, base)

    def random_gene(self, rng):
        if self.gene_type == "int":
            return int(rng.integers(int(self.min_gene), int(self.max_gene) + 1))
        return float(rng.uniform(self.min_gene, self.max_gene))

    def clamp_gene(self, value):
        value = min(max(value, self.min_gene), self.max_gene)
        if self.gene_type == "int":
            return int(round(value))
        return float(value)

    def new_individual(self, state, thread) -> Individual:
        rng = state.random[thread]
        return Individual(genome=[self.random_gene(rng) for _ in range(self.genome_size)])
