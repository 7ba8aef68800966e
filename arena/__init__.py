"""Strategy arena: a deterministic hawk/dove multi-agent simulation.

Agents wander a bounded 2D arena, eat food and meet each other. On
meeting, each side picks FIGHT, SHARE, FLEE or IGNORE according to its
strategy and memory, and a payoff matrix moves energy between them.
Agents reproduce with mutation when rich and die when drained or old.

Public API:

- ``World``: owns all state and runs one tick per ``step()``
- ``FixedTimestepLoop``: turns wall-clock time into whole ticks
- ``SimulationConfig``: the immutable configuration value
"""

from arena.config.simulation_config import SimulationConfig
from arena.game_loop import FixedTimestepLoop
from arena.stats import WorldStats
from arena.world import FoodReplenishmentPolicy, World

__all__ = [
    "FixedTimestepLoop",
    "FoodReplenishmentPolicy",
    "SimulationConfig",
    "World",
    "WorldStats",
]

__version__ = "0.1.0"
