"""TickContext - explicit per-tick state handed to every system.

The World builds one TickContext at the start of a tick and passes it
through the phases. Systems read the entity lists, grids, configuration
and RNG from it and never hold on to any of them after the call.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from arena.config.simulation_config import SimulationConfig
    from arena.entities.agent import Agent
    from arena.entities.food import Food
    from arena.spatial.grid import SpatialGrid


@dataclass
class TickContext:
    """Explicit per-tick state passed through the update phases.

    Attributes:
        tick: Number of the tick being computed (first tick is 1)
        dt: Fixed timestep in simulated seconds
        rng: The world RNG, the only randomness source systems may use
        config: Configuration snapshot, constant for the whole tick
        width: Current world width
        height: Current world height
        agents: Live agent list (may contain agents that die this tick)
        food: Live food list
        agent_grid: Spatial index over agents
        food_grid: Spatial index over food
        spawned_agents: Agents created during the tick (births and floor spawns)
    """

    tick: int
    dt: float
    rng: random.Random
    config: SimulationConfig
    width: float
    height: float
    agents: List[Agent]
    food: List[Food]
    agent_grid: SpatialGrid
    food_grid: SpatialGrid
    spawned_agents: List[Agent] = field(default_factory=list)

    def live_agent_count(self) -> int:
        return sum(1 for agent in self.agents if agent.alive)
