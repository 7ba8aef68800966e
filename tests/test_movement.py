"""Tests for steering forces, boundaries and movement costs."""

import pytest

from arena.config.simulation_config import SimulationConfig
from arena.entities.traits import Traits
from arena.math_utils import Vector2
from arena.strategies.base import StrategyKind
from arena.systems.movement import flee_force, is_threat, seek_force, separation_force
from arena.world import World


def _world(**overrides):
    base = {
        "world.initial_agent_count": 0,
        "world.initial_food_count": 0,
        "evolution.min_population": 0,
    }
    base.update(overrides)
    return World(SimulationConfig(seed=3).with_overrides(**base))


class TestSteeringForces:
    def test_seek_is_limited_to_max_force(self, make_agent):
        agent = make_agent()
        force = seek_force(agent, Vector2(1000.0, 1000.0))
        assert force.length() <= agent.max_force + 1e-9

    def test_seek_at_target_is_zero(self, make_agent):
        agent = make_agent(x=50.0, y=50.0)
        force = seek_force(agent, Vector2(50.0, 50.0))
        assert (force.x, force.y) == (0.0, 0.0)

    def test_flee_points_away_within_vision(self, make_agent):
        agent = make_agent(x=100.0, y=100.0)
        agent.vel.set(0.0, 0.0)
        force = flee_force(agent, Vector2(120.0, 100.0))
        assert force.x < 0
        assert force.y == pytest.approx(0.0)

    def test_flee_ignores_threats_beyond_vision(self, make_agent):
        agent = make_agent(x=100.0, y=100.0)
        force = flee_force(agent, Vector2(100.0 + agent.vision_radius + 1, 100.0))
        assert (force.x, force.y) == (0.0, 0.0)

    def test_separation_pushes_away(self, make_agent):
        agent = make_agent(x=100.0, y=100.0)
        agent.vel.set(0.0, 0.0)
        neighbor = make_agent(x=110.0, y=100.0)
        force = separation_force(agent, [neighbor], 30.0)
        assert force.x < 0

    def test_separation_ignores_coincident_and_distant(self, make_agent):
        agent = make_agent(x=100.0, y=100.0)
        same_spot = make_agent(x=100.0, y=100.0)
        far = make_agent(x=200.0, y=100.0)
        force = separation_force(agent, [same_spot, far], 30.0)
        assert (force.x, force.y) == (0.0, 0.0)

    def test_threat_detection(self, make_agent):
        assert is_threat(make_agent(StrategyKind.AGGRESSIVE, traits=Traits(aggression=0.0)), 0.7)
        assert is_threat(make_agent(traits=Traits(aggression=0.9)), 0.7)
        assert not is_threat(make_agent(traits=Traits(aggression=0.5)), 0.7)


class TestMovementSystem:
    def test_agents_move_and_pay_energy(self):
        world = _world()
        agent = world.spawn_agent(300, 300, Traits(), StrategyKind.PASSIVE, 100.0)
        start = agent.pos.copy()

        world.movement.update(world.build_context())

        assert agent.pos != start
        assert agent.energy < 100.0
        assert world.agent_grid.cell_of(agent) == world.agent_grid._get_cell(
            agent.pos.x, agent.pos.y
        )

    def test_stamina_reduces_costs(self):
        world = _world()
        tough = world.spawn_agent(200, 200, Traits(stamina=1.5), StrategyKind.PASSIVE, 100.0)
        frail = world.spawn_agent(600, 400, Traits(stamina=0.5), StrategyKind.PASSIVE, 100.0)

        world.movement.update(world.build_context())

        assert 100.0 - tough.energy < 100.0 - frail.energy

    def test_starving_agent_dies(self):
        world = _world()
        agent = world.spawn_agent(300, 300, Traits(), StrategyKind.PASSIVE, 0.001)

        world.movement.update(world.build_context())

        assert not agent.alive
        assert agent.death_cause == "starvation"

    def test_bounce_keeps_agents_inside(self):
        world = _world()
        agent = world.spawn_agent(300, 300, Traits(), StrategyKind.PASSIVE, 100.0)
        agent.pos.set(-80.0, world.height + 80.0)

        world.movement.update(world.build_context())

        padding = world.config.movement.boundary_hard_padding
        assert padding <= agent.pos.x <= world.width - padding
        assert padding <= agent.pos.y <= world.height - padding

    def test_wrap_teleports_across_edges(self):
        world = _world(**{"movement.boundary_mode": "wrap"})
        agent = world.spawn_agent(world.width - 0.1, 300, Traits(), StrategyKind.PASSIVE, 100.0)
        agent.vel.set(agent.max_speed, 0.0)

        world.movement.update(world.build_context())

        assert 0.0 <= agent.pos.x < world.width / 2

    def test_seeks_visible_food(self):
        world = _world()
        agent = world.spawn_agent(300, 300, Traits(), StrategyKind.PASSIVE, 100.0)
        agent.vel.set(0.0, 0.0)
        world.acquire_food(340, 300)

        world.movement.update(world.build_context())

        assert agent.vel.x > 0
        assert agent.vel.y == pytest.approx(0.0)

    def test_hungry_agent_flees_threat(self):
        world = _world()
        agent = world.spawn_agent(300, 300, Traits(), StrategyKind.PASSIVE, 20.0)
        agent.vel.set(0.0, 0.0)
        hawk = world.spawn_agent(330, 300, Traits(), StrategyKind.AGGRESSIVE, 100.0)
        hawk.vel.set(0.0, 0.0)
        world.acquire_food(360, 300)

        world.movement.update(world.build_context())

        assert agent.vel.x < 0
