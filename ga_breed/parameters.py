"""
Parameter database for breeding runs.

Loads YAML parameter files and exposes them as a flat, dotted key space
(``pop.subpop.0.species.pipe.source.0``). Every lookup takes a primary
parameter and an optional default parameter; the default is consulted only
when the primary key is absent. Components use their own default base
(``breed.force``, ``select.tournament``...) as the fallback so that a run
file can set a value once for every pipeline of a given kind.
"""

import importlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Set, Union

import yaml


class ConfigurationError(Exception):
    """Raised when configuration is invalid"""
    pass


@dataclass(frozen=True)
class Parameter:
    """A dotted parameter name such as ``breed.force.num-inds``."""
    name: str

    def push(self, *parts: Any) -> "Parameter":
        """Return a new parameter with ``parts`` appended."""
        suffix = ".".join(str(part) for part in parts)
        if not self.name:
            return Parameter(suffix)
        return Parameter(f"{self.name}.{suffix}")

    def __str__(self) -> str:
        return self.name


def flatten_config(config: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """
    Flatten a nested mapping into dotted keys.

    Keys that already contain dots are kept as they are, so both of these
    describe the same parameter::

        pop: {subpop: {0: {size: 10}}}
        pop.subpop.0.size: 10

    Args:
        config: Nested mapping (typically straight from ``yaml.safe_load``)
        prefix: Key prefix for recursion

    Returns:
        Dictionary mapping dotted names to leaf values
    """
    flat = {}
    for key, value in config.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(flatten_config(value, name))
        else:
            flat[name] = value
    return flat


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from YAML file"""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")
    return config


class ParameterDatabase:
    """
    Hierarchical key lookup over a flattened YAML configuration.

    Values are converted on access. A value that is present but cannot be
    converted to the requested type raises ``ConfigurationError``; a value
    that is absent returns the caller's ``fallback``.
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = flatten_config(values or {})
        self._accessed: Set[str] = set()

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ParameterDatabase":
        return cls(load_config(config_path))

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "ParameterDatabase":
        return cls(values)

    def set(self, param: Union[Parameter, str], value: Any) -> None:
        """Set (or override) a single parameter."""
        self._values[str(param)] = value

    def update(self, values: Dict[str, Any]) -> None:
        """Merge a nested or dotted mapping into the database."""
        self._values.update(flatten_config(values))

    def _lookup(self, param: Optional[Parameter], default: Optional[Parameter]):
        for candidate in (param, default):
            if candidate is None:
                continue
            key = str(candidate)
            if key in self._values and self._values[key] is not None:
                self._accessed.add(key)
                return key, self._values[key]
        return None, None

    def exists(self, param: Optional[Parameter], default: Optional[Parameter] = None) -> bool:
        key, _ = self._lookup(param, default)
        return key is not None

    def get_value(self, param: Optional[Parameter], default: Optional[Parameter] = None) -> Any:
        _, value = self._lookup(param, default)
        return value

    def get_string(
        self,
        param: Optional[Parameter],
        default: Optional[Parameter] = None,
        fallback: Optional[str] = None
    ) -> Optional[str]:
        key, value = self._lookup(param, default)
        if key is None:
            return fallback
        return str(value)

    def get_int(
        self,
        param: Optional[Parameter],
        default: Optional[Parameter] = None,
        fallback: Optional[int] = None
    ) -> Optional[int]:
        key, value = self._lookup(param, default)
        if key is None:
            return fallback
        # bool is an int subclass; "true" is never a valid count
        if isinstance(value, bool):
            raise ConfigurationError(f"Parameter {key} must be an integer, got: {value!r}")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        try:
            return int(str(value).strip())
        except ValueError:
            raise ConfigurationError(f"Parameter {key} must be an integer, got: {value!r}")

    def get_float(
        self,
        param: Optional[Parameter],
        default: Optional[Parameter] = None,
        fallback: Optional[float] = None
    ) -> Optional[float]:
        key, value = self._lookup(param, default)
        if key is None:
            return fallback
        if isinstance(value, bool):
            raise ConfigurationError(f"Parameter {key} must be a number, got: {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Parameter {key} must be a number, got: {value!r}")

    def get_boolean(
        self,
        param: Optional[Parameter],
        default: Optional[Parameter] = None,
        fallback: bool = False
    ) -> bool:
        key, value = self._lookup(param, default)
        if key is None:
            return fallback
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in ("true", "yes", "1"):
            return True
        if text in ("false", "no", "0"):
            return False
        raise ConfigurationError(f"Parameter {key} must be true or false, got: {value!r}")

    def get_instance(
        self,
        param: Parameter,
        default: Optional[Parameter] = None,
        expected_type: Optional[type] = None
    ) -> Any:
        """
        Instantiate the class named by a parameter.

        The value may be a registered name (``breed.force``) or a dotted
        import path (``mypackage.pipes.MyPipeline``).

        Raises:
            ConfigurationError: If the parameter is missing, the class cannot
                be found, or it is not a subclass of ``expected_type``
        """
        name = self.get_string(param, default)
        if name is None:
            raise ConfigurationError(
                f"No class specified for parameter {param}"
                + (f" (or default {default})" if default is not None else "")
            )
        cls = resolve_class(name)
        if expected_type is not None and not issubclass(cls, expected_type):
            raise ConfigurationError(
                f"Class {name} given for parameter {param} is not a {expected_type.__name__}"
            )
        return cls()

    def unaccessed(self) -> list[str]:
        """Parameter names that were never read (often typos in a run file)."""
        return sorted(key for key in self._values if key not in self._accessed)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)


def resolve_class(name: str) -> type:
    """Resolve a registered name or dotted import path to a class."""
    from .registry import lookup, registered_names

    cls = lookup(name)
    if cls is not None:
        return cls

    module_name, _, class_name = name.rpartition(".")
    if not module_name:
        raise ConfigurationError(
            f"Unknown class name: {name}. Registered names: {', '.join(registered_names())}"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import module for class {name}: {e}")
    try:
        return getattr(module, class_name)
    except AttributeError:
        raise ConfigurationError(f"Module {module_name} has no class {class_name}")
