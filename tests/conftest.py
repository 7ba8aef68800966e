"""Pytest configuration and fixtures for strategy arena tests."""

import random

import pytest

from arena.config.simulation_config import AgentConfig, SimulationConfig
from arena.entities.agent import Agent
from arena.entities.traits import Traits
from arena.strategies.base import StrategyKind


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def default_config():
    """Default configuration with a fixed seed."""
    return SimulationConfig(seed=42).sanitized()


@pytest.fixture
def world(default_config):
    """A world spawned from the default configuration."""
    from arena.world import World

    return World(default_config)


@pytest.fixture
def empty_world():
    """A world with no agents, no food and no population floor.

    Tests place exactly the agents they need with ``spawn_agent``.
    """
    from arena.world import World

    config = SimulationConfig(seed=7).with_overrides(
        **{
            "world.initial_agent_count": 0,
            "world.initial_food_count": 0,
            "evolution.min_population": 0,
        }
    )
    return World(config)


@pytest.fixture
def make_agent():
    """Factory for standalone agents (not tracked by any world)."""
    counter = iter(range(1000, 100000))

    def _make(
        strategy=StrategyKind.PASSIVE,
        energy=100.0,
        x=100.0,
        y=100.0,
        traits=None,
    ) -> Agent:
        return Agent().reset_for_spawn(
            next(counter),
            x,
            y,
            traits or Traits(),
            strategy,
            energy,
            AgentConfig(),
        )

    return _make
