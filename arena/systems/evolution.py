"""Evolution system: ageing, reproduction and the population floor.

Runs after interactions so it sees this tick's energy changes and deaths.

Reproduction is energy-gated: an agent above the reproduction threshold,
off its reproduction cooldown, while the population is under the cap,
pays the reproduction cost and spawns a mutated child nearby.

The population floor is an explicit anti-extinction policy. When fewer
than ``min_population`` agents are alive after the tick's deaths, random
agents are synthesised (no parent, no cost) until the floor is restored.
"""

import logging
import math
from typing import Any, Dict

from arena.entities.agent import DEATH_OLD_AGE, Agent
from arena.entities.traits import random_traits
from arena.evolution.mutation import mutate_strategy, mutate_traits
from arena.strategies.registry import pick_strategy
from arena.systems.base import BaseSystem, SystemResult
from arena.tick_context import TickContext
from arena.update_phases import UpdatePhase, runs_in_phase

logger = logging.getLogger(__name__)


@runs_in_phase(UpdatePhase.EVOLUTION)
class EvolutionSystem(BaseSystem):
    """Ages agents, handles reproduction and enforces the population floor."""

    def __init__(self, world) -> None:
        super().__init__(world, "Evolution")
        self._births = 0
        self._floor_spawns = 0
        self._old_age_deaths = 0

    def _do_update(self, ctx: TickContext) -> SystemResult:
        died = self._age_agents(ctx)
        births = self._reproduce(ctx)
        floor_spawns = self.enforce_population_floor(ctx)
        return SystemResult(
            entities_spawned=births + floor_spawns,
            entities_removed=died,
            details={"births": births, "floor_spawns": floor_spawns, "old_age_deaths": died},
        )

    def _age_agents(self, ctx: TickContext) -> int:
        max_age = ctx.config.evolution.max_age
        died = 0
        for agent in ctx.agents:
            if not agent.alive:
                continue
            agent.age += ctx.dt
            if agent.reproduction_cooldown > 0:
                agent.reproduction_cooldown -= 1
            if agent.age > max_age:
                agent.mark_dead(DEATH_OLD_AGE)
                died += 1
        self._old_age_deaths += died
        return died

    def _reproduce(self, ctx: TickContext) -> int:
        rules = ctx.config.evolution
        live = ctx.live_agent_count()
        births = 0
        # Children are appended to ctx.agents; iterate a snapshot so they wait a tick
        for parent in list(ctx.agents):
            if live >= rules.max_agents:
                break
            if not parent.can_reproduce(rules.reproduction_threshold):
                continue
            self.reproduce(parent, ctx)
            live += 1
            births += 1
        self._births += births
        return births

    def reproduce(self, parent: Agent, ctx: TickContext) -> Agent:
        """Spawn one child of ``parent`` and charge the parent for it.

        The parent loses exactly ``reproduction_cost``; the child starts with
        ``reproduction_cost * child_energy_fraction``.

        Returns:
            The newly spawned child
        """
        rules = ctx.config.evolution
        rng = ctx.rng

        parent.energy -= rules.reproduction_cost
        parent.clamp_energy()
        parent.reproduction_cooldown = rules.reproduction_cooldown

        angle = rng.uniform(0.0, 2.0 * math.pi)
        offset = rng.uniform(0.0, rules.spawn_offset)
        x = min(ctx.width, max(0.0, parent.pos.x + math.cos(angle) * offset))
        y = min(ctx.height, max(0.0, parent.pos.y + math.sin(angle) * offset))

        traits = mutate_traits(parent.traits, rules.mutation_chance, rules.mutation_magnitude, rng)
        strategy = mutate_strategy(parent.strategy, rules.strategy_mutation_chance, rng)
        child = self._world.spawn_agent(
            x,
            y,
            traits,
            strategy,
            rules.reproduction_cost * rules.child_energy_fraction,
            generation=parent.generation + 1,
        )
        ctx.spawned_agents.append(child)
        self._world.lifecycle.record_birth()
        logger.debug(
            "Agent %d (%s) reproduced: child %d (%s)",
            parent.id,
            parent.strategy.value,
            child.id,
            child.strategy.value,
        )
        return child

    def enforce_population_floor(self, ctx: TickContext) -> int:
        """Spawn random agents until at least ``min_population`` are alive.

        Returns:
            Number of agents spawned
        """
        config = ctx.config
        floor = config.evolution.min_population
        live = ctx.live_agent_count()
        if live >= floor:
            return 0

        needed = floor - live
        for _ in range(needed):
            x, y = self._world.random_position()
            child = self._world.spawn_agent(
                x,
                y,
                random_traits(ctx.rng),
                pick_strategy(config.world.strategy_ratios, ctx.rng),
                config.agents.starting_energy,
            )
            ctx.spawned_agents.append(child)
            self._world.lifecycle.record_floor_spawn()

        self._floor_spawns += needed
        logger.info("Population %d below floor %d, spawned %d agents", live, floor, needed)
        return needed

    def reset(self) -> None:
        super().reset()
        self._births = 0
        self._floor_spawns = 0
        self._old_age_deaths = 0

    def get_debug_info(self) -> Dict[str, Any]:
        info = super().get_debug_info()
        info.update(
            {
                "births": self._births,
                "floor_spawns": self._floor_spawns,
                "old_age_deaths": self._old_age_deaths,
            }
        )
        return info
