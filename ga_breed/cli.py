"""
CLI module for breeding runs.

Handles run configuration loading, validation, and dispatch to the runner.
"""

from typing import Dict, Any
from pathlib import Path
import yaml


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration file must contain a mapping")

    # relative parameter paths are resolved against the run file
    params = config.get('params')
    if isinstance(params, str) and not Path(params).is_absolute():
        candidate = config_file.parent / params
        if candidate.exists():
            config['params'] = str(candidate)

    return config


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if 'params' not in config:
        raise ConfigValidationError("Missing required field: 'params'")

    params_path = Path(config['params'])
    if not params_path.exists():
        raise ConfigValidationError(f"Parameter file not found: {params_path}")

    if 'overrides' in config and config['overrides'] is not None:
        if not isinstance(config['overrides'], dict):
            raise ConfigValidationError("'overrides' must be a dictionary")

    if 'random_seed' in config and config['random_seed'] is not None:
        seed = config['random_seed']
        if not isinstance(seed, int) or isinstance(seed, bool) or seed < 0:
            raise ConfigValidationError(
                f"'random_seed' must be a non-negative integer, got: {seed}"
            )

    if 'output' in config:
        if not isinstance(config['output'], dict):
            raise ConfigValidationError("'output' must be a dictionary")

        if 'root' not in config['output']:
            raise ConfigValidationError("Missing required field: 'output.root'")

    if 'quiet' in config and not isinstance(config['quiet'], bool):
        raise ConfigValidationError(f"'quiet' must be true or false, got: {config['quiet']}")


def run_from_config(config_path: str):
    """
    Load run configuration and execute the breeding run.

    This is the main entry point called by breed_cli.py.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Final EvolutionState

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
        ConfigurationError: If the parameter file is invalid
        BreedingError: If a pipeline breaks the production contract
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print(f"Validating configuration...")
    validate_run_config(config)

    from .orchestration import run_evolution
    state = run_evolution(config)

    print("\nRun completed successfully!")
    return state
