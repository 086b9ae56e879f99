"""
Tests for EvolutionState setup and the multi-threaded SimpleBreeder.
"""

import unittest

from breeding_fakes import FRESH_GENOME_START, CountingSpecies
from ga_breed.breed import BreedingError, ReproductionPipeline
from ga_breed.breeder import SimpleBreeder
from ga_breed.evolution import EvolutionState, create_random_streams
from ga_breed.output import Output
from ga_breed.parameters import ConfigurationError, ParameterDatabase


def breeding_params(size=10, threads=1, elites=0, pipe="select.first", extra=None):
    params = {
        "seed": 11,
        "breedthreads": threads,
        "pop.subpops": 1,
        "pop.subpop.0.size": size,
        "pop.subpop.0.species": "test.species",
        "pop.subpop.0.species.pipe": "breed.reproduce",
        "pop.subpop.0.species.pipe.source.0": pipe,
        "breed.elite.0": elites,
    }
    params.update(extra or {})
    return params


def ready_state(params):
    """Set up, initialize and give individual i fitness i."""
    state = EvolutionState(ParameterDatabase.from_dict(params), Output(quiet=True))
    state.setup()
    state.initialize_population()
    for subpop in state.population.subpops:
        for i, ind in enumerate(subpop.individuals):
            ind.fitness.value = float(i)
            ind.evaluated = True
    return state


class TestEvolutionState(unittest.TestCase):
    """Test run state setup."""

    def test_setup_builds_components(self):
        """Test population, species, pipeline and breeder are built."""
        state = ready_state(breeding_params(threads=3))

        self.assertEqual(len(state.random), 3)
        self.assertIsInstance(state.breeder, SimpleBreeder)
        subpop = state.population.subpops[0]
        self.assertIsInstance(subpop.species, CountingSpecies)
        self.assertIsInstance(subpop.species.pipe_prototype, ReproductionPipeline)
        self.assertEqual(len(subpop.individuals), 10)

    def test_random_streams_are_reproducible_and_distinct(self):
        """Test streams from one seed repeat across runs but differ per thread."""
        first = [rng.random() for rng in create_random_streams(5, 3)]
        second = [rng.random() for rng in create_random_streams(5, 3)]
        self.assertEqual(first, second)
        self.assertEqual(len(set(first)), 3)

    def test_invalid_breedthreads(self):
        """Test breedthreads below 1 is fatal."""
        with self.assertRaises(ConfigurationError):
            ready_state(breeding_params(threads=0))

    def test_invalid_subpop_size(self):
        """Test a missing subpopulation size is fatal."""
        params = breeding_params()
        del params["pop.subpop.0.size"]
        with self.assertRaises(ConfigurationError):
            ready_state(params)

    def test_evaluate_requires_problem(self):
        """Test evaluate without eval.problem is fatal."""
        state = ready_state(breeding_params())
        with self.assertRaises(ConfigurationError):
            state.evaluate()


class TestSimpleBreeder(unittest.TestCase):
    """Test chunking, elitism and threaded breeding."""

    def test_chunks_sum_to_non_elite_size(self):
        """Test per-thread chunks partition size minus elites."""
        state = ready_state(breeding_params(size=10, threads=3, elites=2))
        num_inds, starts = state.breeder.compute_chunks(state, 3)

        lengths = [num_inds[t][0] for t in range(3)]
        self.assertEqual(sum(lengths), 8)
        self.assertEqual(lengths, [3, 3, 2])
        self.assertEqual([starts[t][0] for t in range(3)], [0, 3, 6])

    def test_multi_thread_fills_every_slot(self):
        """Test a threaded breed leaves no empty slot."""
        state = ready_state(breeding_params(size=25, threads=4, pipe="select.random"))
        state.breed()

        individuals = state.population.subpops[0].individuals
        self.assertEqual(len(individuals), 25)
        self.assertNotIn(None, individuals)
        self.assertEqual(state.generation, 1)
        for ind in individuals:
            self.assertEqual(ind.metadata["generation"], 1)
            self.assertEqual(len(ind.metadata["parents"]), 1)

    def test_offspring_are_new_objects(self):
        """Test bred individuals never alias the previous generation."""
        state = ready_state(breeding_params(size=6, threads=2))
        old = state.population.subpops[0].individuals
        state.breed()

        new = state.population.subpops[0].individuals
        self.assertTrue(all(ind == old[0] for ind in new))
        self.assertFalse(any(ind is old[0] for ind in new))
        self.assertTrue(all(ind.metadata["parents"] == [0] for ind in new))

    def test_selection_as_whole_pipeline_copies(self):
        """Test a bare selection method never puts old individuals in the new population."""
        state = ready_state(breeding_params(
            size=6, threads=2, extra={"pop.subpop.0.species.pipe": "select.first"}
        ))
        old = state.population.subpops[0].individuals
        state.breed()

        new = state.population.subpops[0].individuals
        self.assertEqual(len({id(ind) for ind in new}), 6)
        self.assertFalse(any(ind is old[0] for ind in new))
        self.assertTrue(all(ind == old[0] for ind in new))
        self.assertNotIn("generation", old[0].metadata)
        self.assertNotIn("parents", old[0].metadata)

    def test_elites_are_copies_of_best(self):
        """Test elites fill the tail as copies of the best individuals."""
        state = ready_state(breeding_params(size=10, elites=2))
        old = state.population.subpops[0].individuals
        state.breed()

        new = state.population.subpops[0].individuals
        self.assertEqual(new[8], old[9])
        self.assertEqual(new[9], old[8])
        self.assertIsNot(new[8], old[9])
        self.assertEqual(new[8].metadata["operators"], ["elite"])

    def test_too_many_elites(self):
        """Test elites must be fewer than the subpopulation size."""
        with self.assertRaises(ConfigurationError):
            ready_state(breeding_params(size=4, elites=4))

    def test_thread_count_reduced_for_small_subpops(self):
        """Test more threads than individuals warns once and still breeds."""
        state = ready_state(breeding_params(size=2, threads=4))
        state.breed()
        state.breed()

        self.assertNotIn(None, state.population.subpops[0].individuals)
        reduced = [w for w in state.output.warnings if "fewer breed threads" in w]
        self.assertEqual(len(reduced), 1)

    def test_no_clone_with_threads_is_fatal(self):
        """Test sharing one pipeline across threads is rejected."""
        params = breeding_params(threads=2, extra={"breed.clone-pipeline-and-population": False})
        with self.assertRaises(ConfigurationError):
            ready_state(params)

    def test_no_clone_single_thread(self):
        """Test the prototype itself breeds when cloning is off."""
        params = breeding_params(threads=1, extra={"breed.clone-pipeline-and-population": False})
        state = ready_state(params)
        state.breed()
        self.assertNotIn(None, state.population.subpops[0].individuals)

    def test_zero_production_raises(self):
        """Test a pipeline producing nothing fails the breed."""
        state = ready_state(breeding_params(threads=2, pipe="test.empty"))
        with self.assertRaises(BreedingError):
            state.breed()

    def test_overrun_raises(self):
        """Test a pipeline writing past its chunk fails the breed."""
        state = ready_state(breeding_params(threads=1, pipe="test.greedy"))
        with self.assertRaises(BreedingError):
            state.breed()

    def test_sequential_breeds_one_subpop_per_generation(self):
        """Test sequential mode copies the other subpopulations forward."""
        params = breeding_params(extra={
            "pop.subpops": 2,
            "pop.subpop.1.size": 10,
            "pop.subpop.1.species": "test.species",
            "pop.subpop.1.species.pipe": "breed.init",
            "breed.sequential": True,
        })
        state = ready_state(params)
        old_second = list(state.population.subpops[1].individuals)

        state.breed()
        self.assertEqual(state.population.subpops[1].individuals, old_second)
        self.assertTrue(all(
            a is b for a, b in zip(state.population.subpops[1].individuals, old_second)
        ))

        state.breed()
        bred = state.population.subpops[1].individuals
        self.assertTrue(all(ind.genome[0] >= FRESH_GENOME_START + 10 for ind in bred))


if __name__ == '__main__':
    unittest.main()
