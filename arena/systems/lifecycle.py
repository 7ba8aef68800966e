"""Entity lifecycle management system.

This system is the single owner of entity removal. Other systems only mark
entities dead; at the CLEANUP phase this one drops them from the World's
lists and spatial grids and hands them back to their pools.

It also keeps the lifecycle counters (births, floor spawns, deaths by
cause, food consumed), both cumulative and for the current tick.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict

from arena.entities.agent import DEATH_COMBAT, DEATH_OLD_AGE, DEATH_STARVATION
from arena.systems.base import BaseSystem, SystemResult
from arena.tick_context import TickContext
from arena.update_phases import UpdatePhase, runs_in_phase

if TYPE_CHECKING:
    from arena.world import World

logger = logging.getLogger(__name__)

DEATH_CAUSES = (DEATH_STARVATION, DEATH_COMBAT, DEATH_OLD_AGE)


@runs_in_phase(UpdatePhase.CLEANUP)
class EntityLifecycleSystem(BaseSystem):
    """Single owner of entity removal logic and lifecycle tracking.

    Attributes:
        _births_this_tick: Reproduction births in the current tick
        _floor_spawns_this_tick: Population-floor spawns in the current tick
        _deaths_this_tick: Agent deaths removed in the current tick
        _total_births: Reproduction births since reset
        _total_floor_spawns: Floor spawns since reset
        _total_deaths: Agent deaths since reset
        _death_causes: Cumulative deaths per cause
    """

    def __init__(self, world: "World") -> None:
        super().__init__(world, "EntityLifecycle")
        self._reset_counters()

    def _reset_counters(self) -> None:
        self._births_this_tick = 0
        self._floor_spawns_this_tick = 0
        self._deaths_this_tick = 0
        self._food_consumed_this_tick = 0
        self._total_births = 0
        self._total_floor_spawns = 0
        self._total_deaths = 0
        self._total_food_consumed = 0
        self._death_causes: Dict[str, int] = {cause: 0 for cause in DEATH_CAUSES}

    def begin_tick(self) -> None:
        """Reset per-tick counters. Called by the World before the first phase."""
        self._births_this_tick = 0
        self._floor_spawns_this_tick = 0
        self._deaths_this_tick = 0
        self._food_consumed_this_tick = 0

    def record_birth(self) -> None:
        """Record a reproduction birth."""
        self._births_this_tick += 1
        self._total_births += 1

    def record_floor_spawn(self) -> None:
        """Record a population-floor spawn (kept apart from births)."""
        self._floor_spawns_this_tick += 1
        self._total_floor_spawns += 1

    def _do_update(self, ctx: TickContext) -> SystemResult:
        removed_agents = self._remove_dead_agents(ctx)
        removed_food = self._remove_consumed_food(ctx)
        return SystemResult(
            entities_removed=removed_agents + removed_food,
            details={"agents_removed": removed_agents, "food_removed": removed_food},
        )

    def _remove_dead_agents(self, ctx: TickContext) -> int:
        dead = [agent for agent in ctx.agents if not agent.alive]
        if not dead:
            return 0
        # Keep list identity: the World and the context share this list
        ctx.agents[:] = [agent for agent in ctx.agents if agent.alive]
        pool = self._world.agent_pool
        for agent in dead:
            cause = agent.death_cause or DEATH_STARVATION
            self._death_causes[cause] = self._death_causes.get(cause, 0) + 1
            logger.debug("Agent %d (%s) died: %s", agent.id, agent.strategy.value, cause)
            ctx.agent_grid.remove(agent)
            pool.release(agent)
        self._deaths_this_tick += len(dead)
        self._total_deaths += len(dead)
        return len(dead)

    def _remove_consumed_food(self, ctx: TickContext) -> int:
        eaten = [food for food in ctx.food if not food.alive]
        if not eaten:
            return 0
        ctx.food[:] = [food for food in ctx.food if food.alive]
        pool = self._world.food_pool
        for food in eaten:
            ctx.food_grid.remove(food)
            pool.release(food)
        self._food_consumed_this_tick += len(eaten)
        self._total_food_consumed += len(eaten)
        return len(eaten)

    @property
    def births_this_tick(self) -> int:
        return self._births_this_tick

    @property
    def floor_spawns_this_tick(self) -> int:
        return self._floor_spawns_this_tick

    @property
    def deaths_this_tick(self) -> int:
        return self._deaths_this_tick

    @property
    def total_births(self) -> int:
        return self._total_births

    @property
    def total_floor_spawns(self) -> int:
        return self._total_floor_spawns

    @property
    def total_deaths(self) -> int:
        return self._total_deaths

    @property
    def total_food_consumed(self) -> int:
        return self._total_food_consumed

    def death_causes(self) -> Dict[str, int]:
        return dict(self._death_causes)

    def reset(self) -> None:
        super().reset()
        self._reset_counters()

    def get_debug_info(self) -> Dict[str, Any]:
        info = super().get_debug_info()
        info.update(
            {
                "total_births": self._total_births,
                "total_floor_spawns": self._total_floor_spawns,
                "total_deaths": self._total_deaths,
                "death_causes": self.death_causes(),
                "total_food_consumed": self._total_food_consumed,
            }
        )
        return info
