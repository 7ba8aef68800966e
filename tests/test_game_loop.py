"""Tests for the fixed-timestep accumulator loop."""

import pytest

from arena.config.world import FIXED_TIMESTEP, MAX_FRAME_DELTA, MAX_STEPS_PER_POLL
from arena.game_loop import FixedTimestepLoop


@pytest.fixture
def loop(world):
    return FixedTimestepLoop(world)


class TestAdvance:
    def test_one_timestep_runs_one_tick(self, loop):
        assert loop.advance(FIXED_TIMESTEP) == 1
        assert loop.world.tick == 1
        assert loop.accumulator == pytest.approx(0.0)

    def test_partial_time_accumulates(self, loop):
        assert loop.advance(0.01) == 0
        assert loop.accumulator == pytest.approx(0.01)
        assert loop.advance(0.01) == 1
        assert loop.accumulator == pytest.approx(0.02 - FIXED_TIMESTEP)

    def test_step_cap_discards_remainder(self, loop):
        steps = loop.advance(1.0)
        assert steps == MAX_STEPS_PER_POLL
        assert loop.world.tick == MAX_STEPS_PER_POLL
        assert loop.accumulator == 0.0
        assert loop.discarded_time == pytest.approx(
            MAX_FRAME_DELTA - MAX_STEPS_PER_POLL * FIXED_TIMESTEP
        )

    def test_invalid_elapsed_is_ignored(self, loop):
        assert loop.advance(-1.0) == 0
        assert loop.advance(float("nan")) == 0
        assert loop.advance(float("inf")) == 0
        assert loop.world.tick == 0
        assert loop.accumulator == 0.0

    def test_speed_multiplies_elapsed_time(self, loop):
        assert loop.advance(0.02) == 1
        loop.speed = 2.0
        assert loop.advance(0.02) == 2
        assert loop.total_steps == 3


class TestPause:
    def test_paused_loop_does_not_advance(self, loop):
        loop.pause()
        assert loop.advance(0.1) == 0
        assert loop.world.tick == 0
        loop.resume()
        assert loop.advance(FIXED_TIMESTEP) == 1

    def test_toggle_pause(self, loop):
        assert loop.toggle_pause() is True
        assert loop.paused
        assert loop.toggle_pause() is False

    def test_step_once_ignores_and_restores_pause(self, loop):
        loop.pause()
        loop.step_once()
        assert loop.world.tick == 1
        assert loop.paused

        loop.resume()
        loop.step_once()
        assert loop.world.tick == 2
        assert not loop.paused

    def test_reset_keeps_pause_state(self, loop):
        loop.advance(0.01)
        loop.pause()
        loop.reset()
        assert loop.paused
        assert loop.accumulator == 0.0
        assert loop.world.tick == 0


class TestSpeed:
    @pytest.mark.parametrize(
        "value,expected",
        [(100.0, 10.0), (0.0, 0.1), (-5.0, 0.1), (2.5, 2.5), (float("nan"), 1.0), (float("inf"), 1.0)],
    )
    def test_speed_is_clamped(self, loop, value, expected):
        loop.speed = value
        assert loop.speed == expected
