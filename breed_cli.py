#!/usr/bin/env python3
"""
Breeding run CLI - Minimal entry point.

This is the command-line interface for the breeding pipeline engine.
All configuration is specified in YAML files: a run file naming a
parameter file, plus the parameter file describing population, species
and pipeline tree.

Usage:
    python3 breed_cli.py run_config.yaml
    python3 breed_cli.py --config run_config.yaml
    python3 breed_cli.py --help

Examples:
    # OneMax with tournament selection, crossover and mutation
    python3 breed_cli.py configs/onemax_run.yaml

    # Sphere with a generation switch, stub wiring and uniqueness
    python3 breed_cli.py configs/sphere_run.yaml
"""

import sys


def main():
    """Main entry point for the breeding CLI."""
    if len(sys.argv) < 2 or sys.argv[1] in ['-h', '--help', 'help']:
        print(__doc__)
        sys.exit(0 if len(sys.argv) > 1 else 1)

    config_path = sys.argv[1]

    if config_path.startswith('--config='):
        config_path = config_path.split('=', 1)[1]
    elif config_path == '--config':
        if len(sys.argv) < 3:
            print("Error: --config requires an argument")
            print(__doc__)
            sys.exit(1)
        config_path = sys.argv[2]

    from ga_breed.breed import BreedingError
    from ga_breed.cli import ConfigValidationError, run_from_config
    from ga_breed.parameters import ConfigurationError

    try:
        run_from_config(config_path)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except (FileNotFoundError, FileExistsError, ConfigValidationError, ConfigurationError, BreedingError) as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
