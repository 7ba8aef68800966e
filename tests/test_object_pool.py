"""Tests for entity pooling."""

import pytest

from arena.config.simulation_config import AgentConfig
from arena.entities.traits import Traits
from arena.exceptions import PoolError
from arena.object_pool import AgentPool, FoodPool, IdAllocator, ObjectPool
from arena.strategies.base import Action, Outcome, StrategyKind


def _acquire(pool, x=10.0, y=20.0, strategy=StrategyKind.PASSIVE):
    return pool.acquire(x, y, Traits(), strategy, 100.0, AgentConfig())


class TestAgentPool:
    def test_recycled_agent_is_fully_reset(self):
        pool = AgentPool(IdAllocator())
        agent = _acquire(pool, strategy=StrategyKind.AGGRESSIVE)
        first_id = agent.id

        agent.remember_encounter(42, Action.FIGHT, Outcome.WON, 10.0, 3)
        agent.set_cooldown(42, 60)
        agent.age = 99.0
        agent.reproduction_cooldown = 50
        agent.energy = 3.0
        agent.acc.set(5.0, 5.0)
        agent.mark_dead("combat")
        pool.release(agent)

        again = pool.acquire(
            1.0, 2.0, Traits(aggression=0.1), StrategyKind.TIT_FOR_TAT, 80.0, AgentConfig()
        )

        assert again is agent
        assert again.id != first_id
        assert again.alive
        assert again.death_cause is None
        assert len(again.memory) == 0
        assert again.cooldowns == {}
        assert again.age == 0.0
        assert again.reproduction_cooldown == 0
        assert again.energy == 80.0
        assert again.strategy is StrategyKind.TIT_FOR_TAT
        assert again.traits.aggression == 0.1
        assert (again.pos.x, again.pos.y) == (1.0, 2.0)
        assert (again.acc.x, again.acc.y) == (0.0, 0.0)
        assert again.generation == 0

    def test_ids_are_never_reused(self):
        pool = AgentPool(IdAllocator())
        seen = set()
        for _ in range(20):
            agent = _acquire(pool)
            assert agent.id not in seen
            seen.add(agent.id)
            pool.release(agent)

    def test_double_release_raises(self):
        pool = AgentPool(IdAllocator())
        agent = _acquire(pool)
        pool.release(agent)
        with pytest.raises(PoolError):
            pool.release(agent)

    def test_stats_track_reuse(self):
        pool = AgentPool(IdAllocator(), initial_size=0)
        agent = _acquire(pool)
        pool.release(agent)
        _acquire(pool)
        stats = pool.get_stats()
        assert stats["created"] == 1
        assert stats["reused"] == 1
        assert stats["active_count"] == 1


class TestFoodPool:
    def test_food_reset_and_negative_value(self):
        ids = IdAllocator()
        pool = FoodPool(ids)
        food = pool.acquire(5.0, 6.0, -3.0)
        assert food.alive
        assert food.energy_value == 0.0

        food.consume()
        pool.release(food)
        again = pool.acquire(7.0, 8.0, 25.0)
        assert again is food
        assert again.alive
        assert again.energy_value == 25.0

    def test_consume_only_once(self):
        food = FoodPool(IdAllocator()).acquire(0.0, 0.0, 25.0)
        assert food.consume() == 25.0
        assert food.consume() == 0.0


class TestObjectPool:
    def test_max_size_bounds_free_list(self):
        pool = ObjectPool(object, initial_size=0, max_size=2)
        items = [pool.acquire() for _ in range(4)]
        for item in items:
            pool.release(item)
        assert pool.get_stats()["pool_size"] == 2
        assert pool.active_count == 0

    def test_release_foreign_object_raises(self):
        pool = ObjectPool(object)
        with pytest.raises(PoolError):
            pool.release(object())

    def test_clear_forgets_active_and_idle(self):
        pool = ObjectPool(object, initial_size=3)
        held = pool.acquire()
        pool.clear()
        assert pool.get_stats()["pool_size"] == 0
        assert pool.active_count == 0
        with pytest.raises(PoolError):
            pool.release(held)

    def test_shared_id_allocator(self):
        ids = IdAllocator()
        agent = _acquire(AgentPool(ids))
        food = FoodPool(ids).acquire(0.0, 0.0, 1.0)
        assert food.id == agent.id + 1
