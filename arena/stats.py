"""Aggregate per-tick statistics exposed to the UI collaborator."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable

from arena.entities.agent import Agent
from arena.strategies.base import StrategyKind


@dataclass(frozen=True)
class WorldStats:
    """Read-only summary of the world after a tick.

    Attributes:
        tick: Number of ticks run since reset
        population: Live agent count
        strategy_counts: Live agents per strategy display name
        average_energy: Mean energy of live agents (0 with no agents)
        food_count: Live food count
        births: Cumulative reproduction births
        births_this_tick: Reproduction births in the last tick
        floor_spawns: Cumulative population-floor spawns
        floor_spawns_this_tick: Floor spawns in the last tick
        deaths: Cumulative agent deaths
        deaths_this_tick: Agent deaths in the last tick
        death_causes: Cumulative deaths per cause
        food_consumed: Cumulative food items eaten
    """

    tick: int = 0
    population: int = 0
    strategy_counts: Dict[str, int] = field(default_factory=dict)
    average_energy: float = 0.0
    food_count: int = 0
    births: int = 0
    births_this_tick: int = 0
    floor_spawns: int = 0
    floor_spawns_this_tick: int = 0
    deaths: int = 0
    deaths_this_tick: int = 0
    death_causes: Dict[str, int] = field(default_factory=dict)
    food_consumed: int = 0

    def count(self, kind: StrategyKind) -> int:
        return self.strategy_counts.get(kind.value, 0)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_stats(
    tick: int,
    agents: Iterable[Agent],
    food_count: int,
    lifecycle,
) -> WorldStats:
    """Build a WorldStats from the live entities and lifecycle counters.

    Args:
        tick: Current tick
        agents: Agent list (dead agents are ignored)
        food_count: Number of live food items
        lifecycle: The EntityLifecycleSystem holding the counters
    """
    counts = {kind.value: 0 for kind in StrategyKind}
    total_energy = 0.0
    population = 0
    for agent in agents:
        if not agent.alive:
            continue
        counts[agent.strategy.value] += 1
        total_energy += agent.energy
        population += 1

    return WorldStats(
        tick=tick,
        population=population,
        strategy_counts=counts,
        average_energy=total_energy / population if population else 0.0,
        food_count=food_count,
        births=lifecycle.total_births,
        births_this_tick=lifecycle.births_this_tick,
        floor_spawns=lifecycle.total_floor_spawns,
        floor_spawns_this_tick=lifecycle.floor_spawns_this_tick,
        deaths=lifecycle.total_deaths,
        deaths_this_tick=lifecycle.deaths_this_tick,
        death_causes=lifecycle.death_causes(),
        food_consumed=lifecycle.total_food_consumed,
    )
