"""World: owns all entities and runs one deterministic tick at a time.

The World exclusively owns the agent and food lists, their pools and
spatial grids, the RNG and the active configuration. ``step`` runs exactly
one fixed-size tick:

    pending config swap -> MOVEMENT -> INTERACTION -> EVOLUTION -> CLEANUP
    -> food replenishment policies -> stats refresh

Two Worlds built from the same configuration and seed, stepped with the
same sequence of timesteps, produce identical trajectories.
"""

import dataclasses
import logging
import math
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from arena.config.record import ConfigRecord, export_record, record_to_config
from arena.config.simulation_config import SeedValue, SimulationConfig
from arena.config.world import FIXED_TIMESTEP, MIN_WORLD_SIZE
from arena.entities.agent import Agent
from arena.entities.food import Food
from arena.entities.traits import Traits, random_traits
from arena.object_pool import AgentPool, FoodPool, IdAllocator
from arena.snapshot import WorldSnapshot, build_snapshot
from arena.spatial.grid import SpatialGrid
from arena.stats import WorldStats, compute_stats
from arena.strategies.base import StrategyKind
from arena.strategies.registry import pick_strategy
from arena.systems.base import BaseSystem, SystemResult
from arena.systems.evolution import EvolutionSystem
from arena.systems.interaction import InteractionEvent, InteractionSystem
from arena.systems.lifecycle import EntityLifecycleSystem
from arena.systems.movement import MovementSystem
from arena.tick_context import TickContext
from arena.util.rng import SimulationRNG

logger = logging.getLogger(__name__)


@runtime_checkable
class FoodReplenishmentPolicy(Protocol):
    """External collaborator deciding when and where food appears.

    The World calls ``replenish`` once per tick after cleanup. The policy
    adds food only through ``world.acquire_food``.
    """

    def replenish(self, world: "World") -> None:
        ...


class World:
    """The simulation world.

    Args:
        config: Configuration (sanitised on entry); defaults to SimulationConfig()
        seed: Optional seed overriding ``config.seed``
    """

    def __init__(self, config: Optional[SimulationConfig] = None, seed: SeedValue = None):
        config = (config or SimulationConfig()).sanitized()
        if seed is not None:
            config = dataclasses.replace(config, seed=seed)
        self._config = config
        self._pending_config: Optional[SimulationConfig] = None

        self.rng = SimulationRNG(0)
        self._ids = IdAllocator()
        self.agent_pool = AgentPool(self._ids, max_size=config.evolution.max_agents * 2)
        self.food_pool = FoodPool(self._ids)

        self._width = config.world.width
        self._height = config.world.height
        cell_size = config.agents.vision_radius
        self.agent_grid: SpatialGrid[Agent] = SpatialGrid(self._width, self._height, cell_size)
        self.food_grid: SpatialGrid[Food] = SpatialGrid(self._width, self._height, cell_size)

        self._agents: List[Agent] = []
        self._food: List[Food] = []
        self._food_policies: List[FoodReplenishmentPolicy] = []

        self.movement = MovementSystem(self)
        self.interaction = InteractionSystem(self)
        self.evolution = EvolutionSystem(self)
        self.lifecycle = EntityLifecycleSystem(self)
        self._systems: List[BaseSystem] = sorted(
            [self.movement, self.interaction, self.evolution, self.lifecycle],
            key=lambda system: system.phase.value,
        )
        self.last_results: Dict[str, SystemResult] = {}

        self.tick = 0
        self._stats = WorldStats()
        self.reset()

    # Configuration

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def seed(self) -> int:
        """The 32-bit seed the current run was started from."""
        return self.rng.seed_value

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def apply_config(self, config: SimulationConfig) -> None:
        """Queue ``config`` to replace the active one at the next tick boundary.

        Nothing reads the new values mid-tick. Queuing twice before a tick
        keeps only the latest config.
        """
        config = config.sanitized()
        if config.version <= self._config.version:
            config = dataclasses.replace(config, version=self._config.version + 1)
        self._pending_config = config

    def _apply_pending_config(self) -> None:
        pending = self._pending_config
        if pending is None:
            return
        self._pending_config = None
        previous = self._config
        self._config = pending
        if (pending.world.width, pending.world.height) != (self._width, self._height):
            self.resize(pending.world.width, pending.world.height)
        if pending.agents != previous.agents:
            for agent in self._agents:
                agent.apply_limits(pending.agents)
        logger.info("Applied config version %d (was %d)", pending.version, previous.version)

    # Lifecycle

    def reset(self, config: Optional[SimulationConfig] = None, seed: SeedValue = None) -> None:
        """Re-seed the RNG, empty pools and grids and respawn the initial world.

        Args:
            config: New configuration (defaults to the current one, including
                any config queued with apply_config)
            seed: Seed override; otherwise ``config.seed`` is used
        """
        if config is not None:
            self._config = config.sanitized()
        elif self._pending_config is not None:
            self._config = self._pending_config
        self._pending_config = None
        if seed is not None:
            self._config = dataclasses.replace(self._config, seed=seed)

        seed_value = self.rng.reseed(self._config.seed)

        for agent in self._agents:
            self.agent_pool.release(agent)
        for food in self._food:
            self.food_pool.release(food)
        self._agents.clear()
        self._food.clear()
        self.agent_grid.clear()
        self.food_grid.clear()
        self._ids.reset()

        self._width = self._config.world.width
        self._height = self._config.world.height
        self.agent_grid.resize(self._width, self._height)
        self.food_grid.resize(self._width, self._height)

        for system in self._systems:
            system.reset()
        self.tick = 0
        self.last_results = {}

        world_config = self._config.world
        agent_count = min(world_config.resolve_agent_count(), self._config.evolution.max_agents)
        for _ in range(agent_count):
            x, y = self.random_position()
            self.spawn_agent(
                x,
                y,
                random_traits(self.rng),
                pick_strategy(world_config.strategy_ratios, self.rng),
                self._config.agents.starting_energy,
            )
        for _ in range(world_config.resolve_food_count()):
            x, y = self.random_position()
            self.acquire_food(x, y)

        self._refresh_stats()
        logger.info(
            "World reset: seed=%d, %d agents, %d food, %.0fx%.0f",
            seed_value,
            len(self._agents),
            len(self._food),
            self._width,
            self._height,
        )

    def step(self, dt: float = FIXED_TIMESTEP) -> WorldStats:
        """Run exactly one tick.

        Args:
            dt: Timestep in simulated seconds (non-positive or non-finite
                values fall back to FIXED_TIMESTEP)

        Returns:
            Statistics after the tick
        """
        if not (dt > 0 and math.isfinite(dt)):
            dt = FIXED_TIMESTEP
        self._apply_pending_config()
        self.tick += 1
        self.lifecycle.begin_tick()

        ctx = self.build_context(dt)
        results = {}
        for system in self._systems:
            results[system.name] = system.update(ctx)
        self.last_results = results

        for policy in self._food_policies:
            policy.replenish(self)

        return self._refresh_stats()

    def build_context(self, dt: float = FIXED_TIMESTEP) -> TickContext:
        """Per-tick state for the systems, sharing the World's own lists and grids."""
        return TickContext(
            tick=self.tick,
            dt=dt,
            rng=self.rng,
            config=self._config,
            width=self._width,
            height=self._height,
            agents=self._agents,
            food=self._food,
            agent_grid=self.agent_grid,
            food_grid=self.food_grid,
        )

    def _refresh_stats(self) -> WorldStats:
        self._stats = compute_stats(self.tick, self._agents, len(self._food), self.lifecycle)
        return self._stats

    # Spawning hooks

    def random_position(self) -> tuple:
        """Uniform position inside the bounds, keeping the spawn margin."""
        margin = self._config.world.spawn_margin
        x = self.rng.uniform(margin, max(margin, self._width - margin))
        y = self.rng.uniform(margin, max(margin, self._height - margin))
        return x, y

    def _clamp_position(self, x: float, y: float) -> tuple:
        if x != x:
            x = 0.0
        if y != y:
            y = 0.0
        return max(0.0, min(self._width, x)), max(0.0, min(self._height, y))

    def spawn_agent(
        self,
        x: float,
        y: float,
        traits: Traits,
        strategy: StrategyKind,
        energy: float,
        generation: int = 0,
    ) -> Agent:
        """Draw an agent from the pool and start tracking it."""
        x, y = self._clamp_position(x, y)
        heading = self.rng.uniform(0.0, 2.0 * math.pi)
        agent = self.agent_pool.acquire(
            x,
            y,
            traits,
            strategy,
            energy,
            self._config.agents,
            heading=heading,
            generation=generation,
        )
        self._agents.append(agent)
        self.agent_grid.insert(agent)
        return agent

    def acquire_food(self, x: float, y: float, energy_value: Optional[float] = None) -> Food:
        """Insert a new food item at (x, y).

        This is the hook for the external replenishment policy. Positions
        are clamped into the world and negative values to 0.

        Args:
            x: X position
            y: Y position
            energy_value: Energy the food gives (defaults to the configured food value)

        Returns:
            The tracked Food instance
        """
        x, y = self._clamp_position(x, y)
        if energy_value is None:
            energy_value = self._config.interaction.food_value
        elif not energy_value == energy_value:
            energy_value = 0.0
        food = self.food_pool.acquire(x, y, max(0.0, energy_value))
        self._food.append(food)
        self.food_grid.insert(food)
        return food

    def attach_food_policy(self, policy: FoodReplenishmentPolicy) -> None:
        """Register a replenishment policy, called once per tick after cleanup."""
        self._food_policies.append(policy)

    def detach_food_policy(self, policy: FoodReplenishmentPolicy) -> None:
        if policy in self._food_policies:
            self._food_policies.remove(policy)

    def resize(self, width: float, height: float) -> None:
        """Change the world bounds, clamp entities into them and rebuild the grids."""
        width = max(MIN_WORLD_SIZE, width) if width == width else self._width
        height = max(MIN_WORLD_SIZE, height) if height == height else self._height
        self._width = width
        self._height = height
        self._config = dataclasses.replace(
            self._config,
            world=dataclasses.replace(self._config.world, width=width, height=height),
        )
        for entity in (*self._agents, *self._food):
            entity.pos.set(*self._clamp_position(entity.pos.x, entity.pos.y))
        self.agent_grid.resize(width, height)
        self.food_grid.resize(width, height)

    # Read-only views

    @property
    def stats(self) -> WorldStats:
        return self._stats

    def live_agents(self) -> List[Agent]:
        return [agent for agent in self._agents if agent.alive]

    def live_food(self) -> List[Food]:
        return [food for food in self._food if food.alive]

    @property
    def heatmap(self) -> Dict[str, Dict[str, Dict[str, int]]]:
        return self.interaction.get_heatmap()

    @property
    def recent_events(self) -> List[InteractionEvent]:
        return self.interaction.get_recent_events()

    def set_performance_mode(self, enabled: bool) -> None:
        self.interaction.set_performance_mode(enabled)

    def snapshot(self, include_memory: bool = True) -> WorldSnapshot:
        return build_snapshot(self, include_memory=include_memory)

    # Export / import

    def export_record(self) -> ConfigRecord:
        """Record of the current configuration and the seed this run used."""
        seed = self._config.seed if self._config.seed is not None else self.seed
        return export_record(self._config, seed=seed)

    @classmethod
    def from_record(
        cls, record: ConfigRecord, base: Optional[SimulationConfig] = None
    ) -> "World":
        return cls(record_to_config(record, base))

    def get_debug_info(self) -> Dict[str, Any]:
        return {
            "tick": self.tick,
            "seed": self.seed,
            "config_version": self._config.version,
            "systems": [system.get_debug_info() for system in self._systems],
            "agent_pool": self.agent_pool.get_stats(),
            "food_pool": self.food_pool.get_stats(),
            "agent_grid": self.agent_grid.get_stats(),
            "food_grid": self.food_grid.get_stats(),
        }
