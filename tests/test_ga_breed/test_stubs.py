"""
Tests for stub placeholders and two-phase StubPipeline wiring.
"""

import unittest

from breeding_fakes import RecordingSource, build_pipeline, make_state
from ga_breed import registry
from ga_breed.breed import BreedingError, StubPipeline, StubPlaceholder
from ga_breed.breed.reproduction import ReproductionPipeline
from ga_breed.parameters import ConfigurationError, Parameter
from ga_breed.select import TournamentSelection


class WiringLogPipeline(ReproductionPipeline):
    """Reproduction that logs which source it was wired to."""

    def setup(self, state, base):
        super().setup(state, base)
        self.label = state.parameters.get_string(base.push("label"))

    def fill_stubs(self, state, source):
        state.wiring_log.append((self.label, getattr(source, "label", None)))
        super().fill_stubs(state, source)


registry.register("test.wiring", WiringLogPipeline)


def chain_params():
    """Three StubPipelines, each nested in the previous one's children."""
    params = {}
    for base, label in [
        ("pipe", "SA"),
        ("pipe.source.0", "SB"),
        ("pipe.source.0.source.0", "SC"),
    ]:
        params[base] = "breed.stub"
        params[f"{base}.stub-source"] = "test.wiring"
        params[f"{base}.stub-source.label"] = label
        params[f"{base}.stub-source.source.0"] = "stub"
    params["pipe.source.0.source.0.source.0"] = "stub"
    return params


class TestStubPipeline(unittest.TestCase):
    """Test stub wiring order and resolution."""

    def setUp(self):
        """Set up a three-level stub chain and a real source."""
        self.state = make_state(chain_params())
        self.state.wiring_log = []
        param = Parameter("pipe")
        self.pipeline = self.state.parameters.get_instance(param)
        self.pipeline.setup(self.state, param)
        self.real = RecordingSource()
        self.real.label = "R"

    def test_nested_children_wired_outermost_first(self):
        """Test stubs nested through children are wired from the top down."""
        self.pipeline.fill_stubs(self.state, self.real)

        self.assertIsInstance(self.pipeline, StubPipeline)
        self.assertEqual(self.state.wiring_log, [("SA", "R"), ("SB", "SA"), ("SC", "SB")])

    def test_chain_resolves_to_real_source(self):
        """Test producing from the top travels down the chain to the real source."""
        self.pipeline.fill_stubs(self.state, self.real)

        inds = []
        n = self.pipeline.produce(1, 1, 0, inds, self.state, 0)

        self.assertEqual(n, 1)
        self.assertEqual(self.real.requests, [(1, 1)])

        innermost = self.pipeline.sources[0].sources[0]
        self.assertIs(innermost.sources[0], innermost.stub_source)

    def test_filled_twice_is_error(self):
        """Test a StubPipeline refuses a second wiring."""
        self.pipeline.fill_stubs(self.state, self.real)
        with self.assertRaises(BreedingError):
            self.pipeline.fill_stubs(self.state, self.real)

    def test_clone_after_wiring_is_independent(self):
        """Test a clone keeps its own internally consistent wiring."""
        self.pipeline.fill_stubs(self.state, self.real)
        clone = self.pipeline.clone()

        self.assertIsNot(clone.stub_source, self.pipeline.stub_source)
        innermost = clone.sources[0].sources[0]
        self.assertIs(innermost.sources[0], innermost.stub_source)

    def test_unbound_stub_raises_on_produce(self):
        """Test a placeholder never bound is an assembly error."""
        self.pipeline.fill_stubs(self.state, None)

        fragment = self.pipeline.stub_source
        self.assertIsInstance(fragment.sources[0], StubPlaceholder)
        with self.assertRaises(BreedingError):
            self.pipeline.produce(1, 1, 0, [], self.state, 0)


class TestStubSourceChain(unittest.TestCase):
    """Test stub fragments nested through stub-source."""

    def setUp(self):
        """Set up a stub whose stub-source is itself a stub."""
        self.state = make_state({
            "pipe": "breed.stub",
            "pipe.source.0": "test.wiring",
            "pipe.source.0.label": "TOP",
            "pipe.source.0.source.0": "stub",
            "pipe.stub-source": "breed.stub",
            "pipe.stub-source.source.0": "test.wiring",
            "pipe.stub-source.source.0.label": "MID",
            "pipe.stub-source.source.0.source.0": "stub",
            "pipe.stub-source.stub-source": "test.wiring",
            "pipe.stub-source.stub-source.label": "DEEP",
            "pipe.stub-source.stub-source.source.0": "stub",
        })
        self.state.wiring_log = []
        param = Parameter("pipe")
        self.pipeline = self.state.parameters.get_instance(param)
        self.pipeline.setup(self.state, param)
        self.real = RecordingSource()
        self.real.label = "R"

    def test_real_source_wired_to_deepest_first(self):
        """Test the real source reaches the deepest stub fragment first."""
        self.pipeline.fill_stubs(self.state, self.real)
        self.assertEqual(
            self.state.wiring_log,
            [("DEEP", "R"), ("MID", "DEEP"), ("TOP", None)],
        )

    def test_production_reaches_real_source(self):
        """Test producing from the top ends at the real source."""
        self.pipeline.fill_stubs(self.state, self.real)

        inds = []
        self.assertEqual(self.pipeline.produce(1, 1, 0, inds, self.state, 0), 1)
        self.assertEqual(self.real.requests, [(1, 1)])

        middle = self.pipeline.stub_source
        self.assertIs(self.pipeline.sources[0].sources[0], middle)
        self.assertIs(middle.sources[0].sources[0], middle.stub_source)
        self.assertIs(middle.stub_source.sources[0], self.real)


class TestStubInjection(unittest.TestCase):
    """Test a stub fragment supplying the selection used below it."""

    def test_selection_injected_into_crossover(self):
        """Test both crossover stubs are bound to the stub-source."""
        state = make_state({
            "pipe": "breed.stub",
            "pipe.stub-source": "select.tournament",
            "pipe.source.0": "vector.xover",
            "pipe.source.0.source.0": "stub",
            "pipe.source.0.source.1": "stub",
        })
        pipeline = build_pipeline(state)

        xover = pipeline.sources[0]
        self.assertIsInstance(pipeline.stub_source, TournamentSelection)
        self.assertIs(xover.sources[0], pipeline.stub_source)
        self.assertIs(xover.sources[1], pipeline.stub_source)

    def test_missing_stub_source(self):
        """Test stub-source is required."""
        state = make_state({
            "pipe": "breed.stub",
            "pipe.source.0": "test.recording",
        })
        with self.assertRaises(ConfigurationError):
            build_pipeline(state)


if __name__ == '__main__':
    unittest.main()
