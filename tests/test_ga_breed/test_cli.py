"""
Tests for run configuration handling and the end-to-end runner.
"""

import tempfile
import unittest
from pathlib import Path

import yaml

from ga_breed.cli import (
    ConfigValidationError,
    load_run_config,
    run_from_config,
    validate_run_config,
)
from ga_breed.io_utils import load_lineage_log, load_population_csv
from ga_breed.orchestration import run_evolution

SMALL_PARAMS = """\
seed: 5
generations: 3
breedthreads: 2
eval.problem: onemax
pop.subpops: 1
pop.subpop.0.size: 12
pop.subpop.0.species: vector.species
pop.subpop.0.species.genome-size: 10
pop.subpop.0.species.gene-type: int
pop.subpop.0.species.min-gene: 0
pop.subpop.0.species.max-gene: 1
pop.subpop.0.species.pipe: vector.mutate
pop.subpop.0.species.pipe.source.0: vector.xover
pop.subpop.0.species.pipe.source.0.source.0: select.tournament
pop.subpop.0.species.pipe.source.0.source.1: same
select.tournament.size: 2
breed.elite.0: 1
"""


class TestRunConfig(unittest.TestCase):
    """Test loading and validating run configuration files."""

    def setUp(self):
        """Create temporary directory with a parameter file."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)
        self.params_path = self.temp_path / "params.yaml"
        self.params_path.write_text(SMALL_PARAMS)

    def tearDown(self):
        """Clean up temporary directory."""
        self.temp_dir.cleanup()

    def write_run(self, config, name="run.yaml"):
        path = self.temp_path / name
        with open(path, 'w') as f:
            yaml.dump(config, f)
        return path

    def test_valid_config(self):
        """Test a complete configuration passes validation."""
        validate_run_config({
            'params': str(self.params_path),
            'overrides': {'generations': 1},
            'random_seed': 3,
            'quiet': True,
            'output': {'root': str(self.temp_path / 'out')},
        })

    def test_missing_params(self):
        """Test params is required."""
        with self.assertRaises(ConfigValidationError):
            validate_run_config({})

    def test_missing_params_file(self):
        """Test the parameter file must exist."""
        with self.assertRaises(ConfigValidationError):
            validate_run_config({'params': str(self.temp_path / 'nope.yaml')})

    def test_invalid_fields(self):
        """Test malformed optional fields are rejected."""
        base = {'params': str(self.params_path)}
        bad_values = [
            {'overrides': ['seed', 1]},
            {'random_seed': -1},
            {'random_seed': 'seven'},
            {'random_seed': True},
            {'output': {'overwrite': True}},
            {'output': 'out'},
            {'quiet': 'yes'},
        ]
        for extra in bad_values:
            with self.subTest(extra=extra):
                with self.assertRaises(ConfigValidationError):
                    validate_run_config({**base, **extra})

    def test_load_missing_file(self):
        """Test a missing run file raises FileNotFoundError."""
        with self.assertRaises(FileNotFoundError):
            load_run_config(str(self.temp_path / 'missing.yaml'))

    def test_load_empty_file(self):
        """Test an empty run file is rejected."""
        path = self.temp_path / 'empty.yaml'
        path.write_text("")
        with self.assertRaises(ConfigValidationError):
            load_run_config(str(path))

    def test_load_invalid_yaml(self):
        """Test malformed YAML is rejected."""
        path = self.temp_path / 'bad.yaml'
        path.write_text("params: [unclosed\n")
        with self.assertRaises(ConfigValidationError):
            load_run_config(str(path))

    def test_relative_params_resolved(self):
        """Test params paths are relative to the run file."""
        path = self.write_run({'params': 'params.yaml'})
        config = load_run_config(str(path))
        self.assertEqual(Path(config['params']), self.params_path)


class TestRunEvolution(unittest.TestCase):
    """Test complete runs."""

    def setUp(self):
        """Create temporary directory with a parameter file."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)
        self.params_path = self.temp_path / "params.yaml"
        self.params_path.write_text(SMALL_PARAMS)

    def tearDown(self):
        """Clean up temporary directory."""
        self.temp_dir.cleanup()

    def test_run_from_config_writes_outputs(self):
        """Test a run saves population, lineage and metadata."""
        out = self.temp_path / 'out'
        run_path = self.temp_path / 'run.yaml'
        with open(run_path, 'w') as f:
            yaml.dump({'params': 'params.yaml', 'quiet': True, 'output': {'root': str(out)}}, f)

        state = run_from_config(str(run_path))

        self.assertEqual(state.generation, 3)
        population = load_population_csv(out / 'final_population.csv')
        self.assertEqual(len(population[0]), 12)
        self.assertTrue(all(ind.evaluated for ind in population[0]))

        records = load_lineage_log(out / 'lineage_log.csv')
        self.assertEqual(len(records), 36)
        self.assertEqual({r.generation for r in records}, {1, 2, 3})
        self.assertTrue(all(r.parent_indices for r in records))

        with open(out / 'run_metadata.yaml') as f:
            metadata = yaml.safe_load(f)
        self.assertEqual(metadata['seed'], 5)
        self.assertEqual(metadata['generations'], 3)

    def test_existing_output_requires_overwrite(self):
        """Test an existing output directory is not reused by default."""
        out = self.temp_path / 'out'
        out.mkdir()
        config = {'params': str(self.params_path), 'quiet': True, 'output': {'root': str(out)}}
        with self.assertRaises(FileExistsError):
            run_evolution(config)

        config['output']['overwrite'] = True
        run_evolution(config)
        self.assertTrue((out / 'final_population.csv').exists())

    def test_same_seed_same_result(self):
        """Test runs with one seed are reproducible across threads."""
        config = {'params': str(self.params_path), 'quiet': True, 'random_seed': 21}
        first = run_evolution(config).population.subpops[0].individuals
        second = run_evolution(config).population.subpops[0].individuals
        self.assertEqual(
            [ind.genome for ind in first],
            [ind.genome for ind in second],
        )

    def test_overrides_applied(self):
        """Test overrides replace parameter file values."""
        config = {
            'params': str(self.params_path),
            'quiet': True,
            'overrides': {'generations': 1},
        }
        state = run_evolution(config)
        self.assertEqual(state.generation, 1)


if __name__ == '__main__':
    unittest.main()
