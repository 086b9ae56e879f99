"""
Breeding pipelines: composable producers of the next generation.
"""

from .source import (
    KEY_PARENTS,
    NO_PROBABILITY,
    BreedingError,
    BreedingSource,
    SelectionMethod,
    StubPlaceholder,
)
from .pipeline import DYNAMIC_SOURCES, BreedingPipeline
from .buffered import BufferedBreedingPipeline
from .checking import CheckingPipeline
from .first_copy import FirstCopyPipeline
from .force import ForceBreedingPipeline
from .generation_switch import GenerationSwitchPipeline
from .initialization import InitializationPipeline
from .multi_breeding import MultiBreedingPipeline
from .repeat import RepeatPipeline
from .reproduction import ReproductionPipeline, StubPipeline
from .unique import UniquePipeline

__all__ = [
    'KEY_PARENTS',
    'NO_PROBABILITY',
    'DYNAMIC_SOURCES',
    'BreedingError',
    'BreedingSource',
    'SelectionMethod',
    'StubPlaceholder',
    'BreedingPipeline',
    'BufferedBreedingPipeline',
    'CheckingPipeline',
    'FirstCopyPipeline',
    'ForceBreedingPipeline',
    'GenerationSwitchPipeline',
    'InitializationPipeline',
    'MultiBreedingPipeline',
    'RepeatPipeline',
    'ReproductionPipeline',
    'StubPipeline',
    'UniquePipeline',
]
