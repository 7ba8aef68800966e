"""Fixed-timestep scheduling on top of World.step.

The presentation layer polls ``advance`` with however much wall-clock time
has passed; the loop turns that into a whole number of fixed-size ticks.
At most ``max_steps_per_poll`` ticks run per poll. When that cap is hit,
the rest of the accumulated time is discarded instead of carried over, so
a slow host falls behind real time rather than spiralling.
"""

import logging
import math
from typing import Optional

from arena.config.simulation_config import SeedValue, SimulationConfig
from arena.config.world import (
    FIXED_TIMESTEP,
    MAX_FRAME_DELTA,
    MAX_SPEED_MULTIPLIER,
    MAX_STEPS_PER_POLL,
    MIN_SPEED_MULTIPLIER,
)
from arena.world import World

logger = logging.getLogger(__name__)


class FixedTimestepLoop:
    """Accumulator loop driving a World.

    Args:
        world: The world to advance
        timestep: Simulated seconds per tick
        max_steps_per_poll: Cap on ticks run by one ``advance`` call
        max_frame_delta: Wall-clock deltas above this are truncated
    """

    def __init__(
        self,
        world: World,
        timestep: float = FIXED_TIMESTEP,
        max_steps_per_poll: int = MAX_STEPS_PER_POLL,
        max_frame_delta: float = MAX_FRAME_DELTA,
    ) -> None:
        self.world = world
        self.timestep = timestep if timestep > 0 else FIXED_TIMESTEP
        self.max_steps_per_poll = max(1, int(max_steps_per_poll))
        self.max_frame_delta = max(self.timestep, max_frame_delta)
        self._accumulator = 0.0
        self._paused = False
        self._speed = 1.0
        self.total_steps = 0
        self.discarded_time = 0.0

    @property
    def accumulator(self) -> float:
        return self._accumulator

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def speed(self) -> float:
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        if not (value == value and math.isfinite(value)):
            value = 1.0
        self._speed = max(MIN_SPEED_MULTIPLIER, min(MAX_SPEED_MULTIPLIER, value))

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def toggle_pause(self) -> bool:
        """Flip the pause state and return the new one."""
        self._paused = not self._paused
        return self._paused

    def advance(self, elapsed_seconds: float) -> int:
        """Feed wall-clock time in and run the ticks it pays for.

        Args:
            elapsed_seconds: Wall-clock time since the previous poll

        Returns:
            Number of ticks run
        """
        if self._paused:
            return 0
        if not (elapsed_seconds > 0 and math.isfinite(elapsed_seconds)):
            return 0

        self._accumulator += min(elapsed_seconds, self.max_frame_delta) * self._speed

        steps = 0
        while self._accumulator >= self.timestep and steps < self.max_steps_per_poll:
            self.world.step(self.timestep)
            self._accumulator -= self.timestep
            steps += 1

        if steps >= self.max_steps_per_poll:
            if self._accumulator > 0:
                logger.debug("Step cap hit, discarding %.4fs of simulated time", self._accumulator)
            self.discarded_time += self._accumulator
            self._accumulator = 0.0

        self.total_steps += steps
        return steps

    def step_once(self) -> None:
        """Run exactly one tick regardless of pause state, then restore it."""
        was_paused = self._paused
        self._paused = False
        try:
            self.world.step(self.timestep)
            self.total_steps += 1
        finally:
            self._paused = was_paused

    def reset(self, config: Optional[SimulationConfig] = None, seed: SeedValue = None) -> None:
        """Reset the world and the accumulator, keeping the pause state."""
        was_paused = self._paused
        self.world.reset(config=config, seed=seed)
        self._accumulator = 0.0
        self.total_steps = 0
        self.discarded_time = 0.0
        self._paused = was_paused
