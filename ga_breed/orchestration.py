"""
Orchestration module for breeding runs.

Implements the generational loop: set up, initialize, then evaluate and
breed until the configured number of generations has been bred.
"""

from typing import Any, Dict, List, Optional
from pathlib import Path

from .data_models import LineageRecord
from .evolution import EvolutionState
from .io_utils import load_parameter_file, save_lineage_log, save_metadata, save_population_csv
from .output import Output


def collect_lineage(state: EvolutionState) -> List[LineageRecord]:
    """
    Lineage records for every individual bred in the current generation.

    Individuals copied forward unchanged (sequential breeding) carry an
    older generation number and are skipped.
    """
    records = []
    for subpop_index, subpop in enumerate(state.population.subpops):
        for index, ind in enumerate(subpop.individuals):
            if ind.metadata.get("generation") != state.generation:
                continue
            records.append(
                LineageRecord(
                    generation=state.generation,
                    subpop=subpop_index,
                    index=index,
                    parent_indices=list(ind.metadata.get("parents", [])),
                    operators=list(ind.metadata.get("operators", [])),
                    fitness=ind.fitness.value if ind.evaluated else None,
                )
            )
    return records


def run_evolution(run_config: Dict[str, Any]) -> EvolutionState:
    """
    Run a complete breeding experiment.

    Args:
        run_config: Run configuration dict from YAML

    Algorithm:
        1. Load the parameter file (``run_config['params']``) and overrides
        2. Set up the EvolutionState (population, species, pipelines, breeder)
        3. Initialize and evaluate generation 0
        4. For each generation: breed, evaluate, record lineage
        5. Save final population, lineage log and run metadata
        6. Print summary report

    Returns:
        Final EvolutionState
    """
    quiet = bool(run_config.get('quiet', False))
    output = Output(quiet=quiet)

    output.message("=" * 70)
    output.message("BREEDING RUN")
    output.message("=" * 70)

    params_path = run_config['params']
    output.message(f"Loading parameters from: {params_path}")
    overrides = dict(run_config.get('overrides') or {})
    if run_config.get('random_seed') is not None:
        overrides['seed'] = run_config['random_seed']
    parameters = load_parameter_file(params_path, overrides)

    state = EvolutionState(parameters, output)
    state.setup()
    output.message(f"Random seed: {state.seed}")
    output.message(f"Breed threads: {state.breedthreads}")
    for x, subpop in enumerate(state.population.subpops):
        output.message(
            f"Subpop {x}: size {subpop.size}, pipeline {type(subpop.species.pipe_prototype).__name__}"
        )

    output_root: Optional[Path] = None
    overwrite = False
    if run_config.get('output'):
        output_root = Path(run_config['output']['root'])
        overwrite = run_config['output'].get('overwrite', False)
        if output_root.exists() and not overwrite:
            raise FileExistsError(
                f"Output directory already exists: {output_root}\n"
                f"Set 'output.overwrite: true' in config to overwrite"
            )
        output_root.mkdir(parents=True, exist_ok=overwrite)
        output.message(f"Output directory: {output_root}")
    output.message("")

    state.initialize_population()
    evaluations = state.evaluate()
    output.message(f"Generation 0: best fitness {state.best_individual().fitness.value:.4f}")

    lineage_records: List[LineageRecord] = []
    for _ in range(state.generations):
        state.breed()
        evaluations += state.evaluate()
        lineage_records.extend(collect_lineage(state))
        best = state.best_individual()
        output.message(f"Generation {state.generation}: best fitness {best.fitness.value:.4f}")

    best = state.best_individual()

    if output_root is not None:
        population_path = save_population_csv(
            state.population, output_root / 'final_population.csv', overwrite=overwrite
        )
        lineage_log_path = save_lineage_log(
            lineage_records, output_root / 'lineage_log.csv', overwrite=overwrite
        )
        save_metadata(
            {
                'params': str(params_path),
                'seed': state.seed,
                'generations': state.generations,
                'evaluations': evaluations,
                'best_fitness': best.fitness.value,
                'best_genome': list(best.genome),
                'warnings': list(output.warnings),
            },
            output_root / 'run_metadata.yaml',
            overwrite=overwrite,
        )

    unused = parameters.unaccessed()
    if unused:
        output.warning(f"Parameters never read (check for typos): {', '.join(unused)}")

    output.message("")
    output.message("=" * 70)
    output.message("SUMMARY")
    output.message("=" * 70)
    output.message(f"Generations bred: {state.generation}")
    output.message(f"Evaluations: {evaluations}")
    output.message(f"Best fitness: {best.fitness.value:.4f}")
    output.message(f"Lineage records: {len(lineage_records)}")
    if output_root is not None:
        output.message(f"Final population: {population_path}")
        output.message(f"Lineage log: {lineage_log_path}")

    return state
