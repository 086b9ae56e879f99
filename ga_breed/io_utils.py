"""
I/O utilities for breeding runs.

Handles population CSV serialization, lineage logging, parameter files and
run metadata sidecars.
"""

import csv
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from datetime import datetime
import yaml

from .data_models import Fitness, Individual, LineageRecord, Population
from .parameters import ParameterDatabase

POPULATION_COLUMNS = ['subpop', 'index', 'fitness', 'evaluated', 'genome']
LINEAGE_COLUMNS = ['generation', 'subpop', 'index', 'parent_indices', 'operators', 'fitness']


def _format_genome(genome: list) -> str:
    return " ".join(str(gene) for gene in genome)


def _parse_gene(text: str):
    value = float(text)
    if value.is_integer() and "." not in text and "e" not in text.lower():
        return int(value)
    return value


def save_population_csv(
    population: Population,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save every individual of a population to CSV.

    CSV format:
        subpop,index,fitness,evaluated,genome
        0,0,7.0,True,1 0 1 1 0 1 1 1 1 0
        ...

    Args:
        population: Population to save
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(POPULATION_COLUMNS)

        for subpop_index, subpop in enumerate(population.subpops):
            for index, ind in enumerate(subpop.individuals):
                if ind is None:
                    continue
                fitness = ind.fitness.value if ind.evaluated else ""
                writer.writerow([subpop_index, index, fitness, ind.evaluated, _format_genome(ind.genome)])

    return output_path


def load_population_csv(csv_path: Union[str, Path]) -> Dict[int, List[Individual]]:
    """
    Load individuals saved by ``save_population_csv``.

    Args:
        csv_path: Path to CSV file

    Returns:
        Dictionary mapping subpopulation index to its individuals, in the
        order of their ``index`` column

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If CSV format is invalid
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    rows: Dict[int, List[tuple]] = {}
    with open(csv_path, 'r') as f:
        reader = csv.DictReader(f)

        if not all(col in (reader.fieldnames or []) for col in POPULATION_COLUMNS):
            raise ValueError(
                f"Invalid CSV format in {csv_path}. Expected columns: {','.join(POPULATION_COLUMNS)}"
            )

        for line, row in enumerate(reader, start=2):
            try:
                subpop = int(row['subpop'])
                index = int(row['index'])
                genome = [_parse_gene(gene) for gene in row['genome'].split()]
                evaluated = row['evaluated'].strip().lower() == 'true'
                fitness = Fitness(float(row['fitness'])) if row['fitness'] else Fitness()
            except ValueError as e:
                raise ValueError(f"Invalid row {line} in {csv_path}: {e}")

            ind = Individual(genome=genome, fitness=fitness, evaluated=evaluated)
            rows.setdefault(subpop, []).append((index, ind))

    return {
        subpop: [ind for _, ind in sorted(entries, key=lambda entry: entry[0])]
        for subpop, entries in sorted(rows.items())
    }


def save_lineage_log(
    lineage_records: list[LineageRecord],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save lineage records to CSV file.

    Args:
        lineage_records: List of LineageRecord objects
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved lineage log

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Lineage log already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=LINEAGE_COLUMNS)
        writer.writeheader()

        for record in lineage_records:
            writer.writerow(record.to_dict())

    return output_path


def load_lineage_log(csv_path: Union[str, Path]) -> list[LineageRecord]:
    """Read back a lineage log written by ``save_lineage_log``."""
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"Lineage log not found: {csv_path}")

    with open(csv_path, 'r') as f:
        return [LineageRecord.from_dict(row) for row in csv.DictReader(f)]


def load_parameter_file(
    param_path: Union[str, Path],
    overrides: Optional[Dict[str, Any]] = None
) -> ParameterDatabase:
    """
    Load a breeding parameter file, applying optional overrides on top.

    Args:
        param_path: Path to parameter YAML file
        overrides: Nested or dotted parameters that replace file values

    Returns:
        ParameterDatabase

    Raises:
        ConfigurationError: If the file is missing or not valid YAML
    """
    parameters = ParameterDatabase.from_file(param_path)
    if overrides:
        parameters.update(overrides)
    return parameters


def save_metadata(
    metadata: dict,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save metadata to YAML sidecar file.

    Args:
        metadata: Metadata dictionary
        output_path: Path for output YAML
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved metadata file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Metadata file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    metadata = dict(metadata)
    metadata.setdefault('saved_at', datetime.now().isoformat())
    with open(output_path, 'w') as f:
        yaml.dump(metadata, f, default_flow_style=False, sort_keys=False)

    return output_path
