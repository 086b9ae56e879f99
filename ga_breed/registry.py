"""
Short names for the classes a parameter file can instantiate.

The names match each component's default parameter base, so
``pipe: breed.force`` picks ForceBreedingPipeline and its defaults live
under ``breed.force.*``.
"""

import importlib
from typing import Dict, Optional, Union

_BUILTIN: Dict[str, str] = {
    # composite pipelines
    "breed.buffered": "ga_breed.breed.buffered:BufferedBreedingPipeline",
    "breed.check": "ga_breed.breed.checking:CheckingPipeline",
    "breed.first-copy": "ga_breed.breed.first_copy:FirstCopyPipeline",
    "breed.force": "ga_breed.breed.force:ForceBreedingPipeline",
    "breed.generation-switch": "ga_breed.breed.generation_switch:GenerationSwitchPipeline",
    "breed.init": "ga_breed.breed.initialization:InitializationPipeline",
    "breed.multibreed": "ga_breed.breed.multi_breeding:MultiBreedingPipeline",
    "breed.repeat": "ga_breed.breed.repeat:RepeatPipeline",
    "breed.reproduce": "ga_breed.breed.reproduction:ReproductionPipeline",
    "breed.stub": "ga_breed.breed.reproduction:StubPipeline",
    "breed.unique": "ga_breed.breed.unique:UniquePipeline",
    # selection methods
    "select.best": "ga_breed.select:BestSelection",
    "select.first": "ga_breed.select:FirstSelection",
    "select.multiselect": "ga_breed.select:MultiSelection",
    "select.random": "ga_breed.select:RandomSelection",
    "select.tournament": "ga_breed.select:TournamentSelection",
    # vector representation
    "vector.species": "ga_breed.vector.species:VectorSpecies",
    "vector.mutate": "ga_breed.vector.pipelines:VectorMutationPipeline",
    "vector.xover": "ga_breed.vector.pipelines:VectorCrossoverPipeline",
    # breeders
    "breed.simple": "ga_breed.breeder:SimpleBreeder",
}

_custom: Dict[str, type] = {}


def register(name: str, cls: type) -> None:
    """Make ``cls`` available to parameter files under ``name``."""
    _custom[name] = cls


def lookup(name: str) -> Optional[type]:
    """Return the class registered under ``name``, or None."""
    if name in _custom:
        return _custom[name]
    target: Union[str, None] = _BUILTIN.get(name)
    if target is None:
        return None
    module_name, class_name = target.split(":")
    return getattr(importlib.import_module(module_name), class_name)


def registered_names() -> list[str]:
    return sorted(set(_BUILTIN) | set(_custom))
