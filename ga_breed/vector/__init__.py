"""
Fixed-length vector individuals: species, operators and variation pipelines.
"""

from .species import VectorSpecies
from .pipelines import VectorCrossoverPipeline, VectorMutationPipeline

__all__ = [
    "VectorSpecies",
    "VectorMutationPipeline",
    "VectorCrossoverPipeline",
]
