"""Object pooling for agents and food.

Agents and food are created and destroyed constantly; the pools keep
released instances on a free list and hand them back out instead of
allocating. Every acquire goes through the entity's ``reset_for_spawn``
with a fresh id, so no logical state survives a recycle.
"""

import logging
from typing import Callable, Generic, List, Set, TypeVar

from arena.entities.agent import Agent
from arena.entities.food import Food
from arena.entities.traits import Traits
from arena.exceptions import PoolError
from arena.strategies.base import StrategyKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IdAllocator:
    """Monotonic entity id source shared by all pools of one World."""

    def __init__(self, start: int = 0) -> None:
        self._next = start

    def next_id(self) -> int:
        value = self._next
        self._next += 1
        return value

    def reset(self, start: int = 0) -> None:
        self._next = start

    @property
    def peek(self) -> int:
        return self._next


class ObjectPool(Generic[T]):
    """Free-list pool with active-set tracking.

    Args:
        factory: Creates a blank instance when the free list is empty
        initial_size: Number of instances to pre-allocate
        max_size: Maximum number of idle instances kept for reuse
    """

    def __init__(self, factory: Callable[[], T], initial_size: int = 0, max_size: int = 1000):
        self._factory = factory
        self._max_size = max(0, max_size)
        self._free: List[T] = [factory() for _ in range(max(0, min(initial_size, self._max_size)))]
        self._active: Set[T] = set()
        self._created = len(self._free)
        self._reused = 0

    def acquire(self) -> T:
        """Get a blank-or-recycled instance; the caller must reset it."""
        if self._free:
            obj = self._free.pop()
            self._reused += 1
        else:
            obj = self._factory()
            self._created += 1
        self._active.add(obj)
        return obj

    def release(self, obj: T) -> None:
        """Return an active instance to the pool.

        Raises:
            PoolError: If ``obj`` was not acquired from this pool or was
                already released
        """
        if obj not in self._active:
            raise PoolError(f"{obj!r} is not active in this pool")
        self._active.remove(obj)
        if len(self._free) < self._max_size:
            self._free.append(obj)
        else:
            logger.debug("Pool full (%d idle), dropping %r", self._max_size, obj)

    def clear(self) -> None:
        """Clear the pool and active set."""
        self._free.clear()
        self._active.clear()

    @property
    def active_count(self) -> int:
        return len(self._active)

    def get_stats(self) -> dict:
        """Get pool statistics for monitoring.

        Returns:
            Dictionary with pool size, active count and allocation counters
        """
        return {
            "pool_size": len(self._free),
            "active_count": len(self._active),
            "total_capacity": len(self._free) + len(self._active),
            "created": self._created,
            "reused": self._reused,
        }


class AgentPool:
    """Pool of Agent instances."""

    def __init__(self, ids: IdAllocator, initial_size: int = 50, max_size: int = 1000):
        self._ids = ids
        self._pool: ObjectPool[Agent] = ObjectPool(Agent, initial_size, max_size)

    def acquire(
        self,
        x: float,
        y: float,
        traits: Traits,
        strategy: StrategyKind,
        energy: float,
        agent_config,
        heading: float = 0.0,
        generation: int = 0,
    ) -> Agent:
        """Get an Agent fully reset for a new spawn.

        Args:
            x: Spawn x position
            y: Spawn y position
            traits: Trait values
            strategy: Strategy kind
            energy: Starting energy
            agent_config: AgentConfig limits
            heading: Initial direction of travel (radians)
            generation: Lineage depth

        Returns:
            An Agent ready to be added to the world
        """
        agent = self._pool.acquire()
        return agent.reset_for_spawn(
            self._ids.next_id(),
            x,
            y,
            traits,
            strategy,
            energy,
            agent_config,
            heading=heading,
            generation=generation,
        )

    def release(self, agent: Agent) -> None:
        agent.mark_dead()
        self._pool.release(agent)

    def get_stats(self) -> dict:
        return self._pool.get_stats()


class FoodPool:
    """Pool of Food instances."""

    def __init__(self, ids: IdAllocator, initial_size: int = 100, max_size: int = 2000):
        self._ids = ids
        self._pool: ObjectPool[Food] = ObjectPool(Food, initial_size, max_size)

    def acquire(self, x: float, y: float, energy_value: float) -> Food:
        """Get a Food object reset for a new spawn."""
        food = self._pool.acquire()
        return food.reset_for_spawn(self._ids.next_id(), x, y, energy_value)

    def release(self, food: Food) -> None:
        food.mark_dead()
        self._pool.release(food)

    def get_stats(self) -> dict:
        return self._pool.get_stats()
