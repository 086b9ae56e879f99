"""
Breeding pipeline composition engine.

This package builds each new generation of an evolutionary run from a tree
of composable producers assembled from a YAML parameter file.

Key Features:
- Demand-driven production with (min, max) quota negotiation
- Policies for buffering, retry/fallback, forcing, switching, uniqueness
- Two-phase wiring of shared stub subtrees
- Per-thread breeding on cloned pipeline trees

Modules:
- parameters: YAML parameter database and class resolution
- registry: Short names for configurable classes
- output: Messages, warnings and collected configuration errors
- data_models: Core data structures (Individual, Population, LineageRecord)
- random_choice: Weighted choice among siblings
- breed: BreedingSource, BreedingPipeline and the composition policies
- select: Selection methods
- species / vector: Individual factories, operators and variation pipelines
- evolution / breeder: Run state and the multi-threaded breeder
- orchestration / cli: Generational runner and command-line entry
"""

__version__ = "0.1.0"

from .data_models import Fitness, Individual, LineageRecord, Population, Subpopulation
from .parameters import ConfigurationError, Parameter, ParameterDatabase
from .breed import BreedingError

__all__ = [
    "Fitness",
    "Individual",
    "LineageRecord",
    "Population",
    "Subpopulation",
    "ConfigurationError",
    "Parameter",
    "ParameterDatabase",
    "BreedingError",
]
