"""Tests for seed derivation and the simulation RNG."""

import pytest

from arena.exceptions import MissingRNGError
from arena.util.rng import SimulationRNG, require_rng_param, seed_from_value


class TestSeedFromValue:
    def test_integers_pass_through(self):
        assert seed_from_value(42) == 42
        assert seed_from_value(0) == 0

    def test_integers_are_masked_to_32_bits(self):
        assert seed_from_value(-1) == 0xFFFFFFFF
        assert seed_from_value(2**40 + 5) == 5

    def test_numeric_strings_parse(self):
        assert seed_from_value("42") == 42
        assert seed_from_value(" 17 ") == 17

    def test_text_seeds_are_stable(self):
        assert seed_from_value("my-run") == seed_from_value("my-run")
        assert seed_from_value("my-run") != seed_from_value("my-other-run")
        assert 0 <= seed_from_value("my-run") <= 0xFFFFFFFF

    def test_floats(self):
        assert seed_from_value(7.9) == 7
        assert seed_from_value(float("nan")) == 0

    def test_none_draws_a_seed(self):
        assert 0 <= seed_from_value(None) <= 0xFFFFFFFF


class TestSimulationRNG:
    def test_same_seed_same_sequence(self):
        first = SimulationRNG("alpha")
        second = SimulationRNG("alpha")
        assert [first.random() for _ in range(10)] == [second.random() for _ in range(10)]

    def test_reseed_restarts_sequence(self):
        rng = SimulationRNG(5)
        values = [rng.random() for _ in range(5)]
        assert rng.reseed(5) == 5
        assert [rng.random() for _ in range(5)] == values
        assert rng.seed_value == 5

    def test_require_rng_param(self, seeded_rng):
        assert require_rng_param(seeded_rng, "test") is seeded_rng
        with pytest.raises(MissingRNGError, match="test context"):
            require_rng_param(None, "test context")
