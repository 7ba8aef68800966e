"""Steering-based movement system.

Per live agent, per tick:

1. separation from agents inside the crowd radius
2. flee from the nearest threat when low on energy, otherwise
3. arrive at the nearest visible food, otherwise
4. wander along a jittered wander circle

The steering sum is limited to the agent's max force. Boundary handling
adds its own corrective force (bounce) or teleports (wrap), then the agent
integrates and pays movement and metabolic energy costs.
"""

import logging
import math
from typing import Any, Dict, Iterable, Optional

from arena.config.simulation_config import BoundaryMode, MovementConfig
from arena.entities.agent import DEATH_STARVATION, Agent
from arena.entities.food import Food
from arena.math_utils import Vector2
from arena.strategies.base import StrategyKind
from arena.systems.base import BaseSystem, SystemResult
from arena.tick_context import TickContext
from arena.update_phases import UpdatePhase, runs_in_phase

logger = logging.getLogger(__name__)

_ARRIVAL_EPSILON = 0.01


def seek_force(agent: Agent, target: Vector2, speed: Optional[float] = None) -> Vector2:
    """Steering force towards ``target`` at ``speed`` (defaults to max speed)."""
    steer = Vector2(target.x - agent.pos.x, target.y - agent.pos.y)
    if steer.length() < _ARRIVAL_EPSILON:
        return steer.set(0.0, 0.0)
    steer.set_mag_inplace(agent.max_speed if speed is None else speed)
    steer.sub_inplace(agent.vel)
    return steer.limit_inplace(agent.max_force)


def arrive_force(agent: Agent, target: Vector2, slow_radius: float) -> Vector2:
    """Seek that decelerates linearly inside ``slow_radius``."""
    distance = agent.pos.distance_to(target)
    speed = agent.max_speed
    if slow_radius > 0 and distance < slow_radius:
        speed = agent.max_speed * (distance / slow_radius)
    return seek_force(agent, target, speed)


def flee_force(agent: Agent, threat: Vector2) -> Vector2:
    """Steer away from ``threat``, harder the closer it is.

    Threats beyond the agent's vision produce no force.
    """
    steer = Vector2(agent.pos.x - threat.x, agent.pos.y - threat.y)
    distance = steer.length()
    if distance > agent.vision_radius or agent.vision_radius <= 0:
        return steer.set(0.0, 0.0)
    strength = 1.0 - distance / agent.vision_radius
    steer.set_mag_inplace(agent.max_speed * strength)
    steer.sub_inplace(agent.vel)
    return steer.limit_inplace(agent.max_force)


def separation_force(agent: Agent, neighbors: Iterable[Agent], radius: float) -> Vector2:
    """Average push away from neighbours closer than ``radius``.

    Each neighbour contributes its offset divided by the squared distance,
    so closer neighbours push harder. Coincident agents are ignored.
    """
    steer = Vector2()
    count = 0
    radius_sq = radius * radius
    for other in neighbors:
        if other is agent or not other.alive:
            continue
        dx = agent.pos.x - other.pos.x
        dy = agent.pos.y - other.pos.y
        dist_sq = dx * dx + dy * dy
        if 0 < dist_sq < radius_sq:
            steer.x += dx / dist_sq
            steer.y += dy / dist_sq
            count += 1

    if count > 0:
        steer.div_inplace(count)
        steer.set_mag_inplace(agent.max_speed)
        steer.sub_inplace(agent.vel)
        steer.limit_inplace(agent.max_force)
    return steer


def is_threat(other: Agent, threat_aggression: float) -> bool:
    return other.strategy is StrategyKind.AGGRESSIVE or other.traits.aggression > threat_aggression


@runs_in_phase(UpdatePhase.MOVEMENT)
class MovementSystem(BaseSystem):
    """Moves every live agent and charges its energy costs."""

    def __init__(self, world) -> None:
        super().__init__(world, "Movement")
        self._total_distance = 0.0
        self._starved = 0

    def _do_update(self, ctx: TickContext) -> SystemResult:
        config = ctx.config
        rules = config.movement
        low_energy = config.agents.low_energy_threshold
        crowd_radius = config.interaction.interaction_radius
        max_age = config.evolution.max_age

        moved = 0
        starved = 0
        steering = Vector2()
        for agent in ctx.agents:
            if not agent.alive:
                continue

            neighbors = ctx.agent_grid.query_near(agent, agent.vision_radius)
            steering.set(0.0, 0.0)

            if neighbors:
                steering.add_inplace(
                    separation_force(agent, neighbors, crowd_radius).mul_inplace(
                        rules.separation_weight
                    )
                )

            threat = None
            if agent.energy < low_energy:
                threat = self._closest_threat(agent, neighbors, rules.threat_aggression)

            if threat is not None:
                steering.add_inplace(flee_force(agent, threat.pos).mul_inplace(rules.flee_weight))
            else:
                food = self._closest_food(agent, ctx)
                if food is not None:
                    steering.add_inplace(
                        arrive_force(agent, food.pos, rules.arrive_slow_radius).mul_inplace(
                            rules.food_seek_weight
                        )
                    )
                else:
                    steering.add_inplace(self._wander(agent, rules, ctx))

            steering.limit_inplace(agent.max_force)
            agent.apply_force(steering)

            if rules.boundary_mode is BoundaryMode.BOUNCE:
                agent.apply_force(self._boundary_force(agent, rules, ctx.width, ctx.height))

            distance = agent.integrate(ctx.dt, rules.friction)
            self._enforce_bounds(agent, rules, ctx.width, ctx.height)
            ctx.agent_grid.update(agent)
            self._total_distance += distance
            moved += 1

            stamina = agent.traits.stamina
            movement_cost = distance * rules.movement_cost_factor / stamina
            age_factor = 1.0 + (agent.age / max_age) * rules.age_metabolism_factor
            base_cost = rules.base_tick_cost * age_factor / stamina
            agent.spend_energy(movement_cost + base_cost)
            if agent.is_exhausted:
                agent.mark_dead(DEATH_STARVATION)
                starved += 1

        self._starved += starved
        return SystemResult(
            entities_affected=moved,
            entities_removed=starved,
            details={"moved": moved, "starved": starved},
        )

    @staticmethod
    def _closest_threat(
        agent: Agent, neighbors: Iterable[Agent], threat_aggression: float
    ) -> Optional[Agent]:
        closest = None
        closest_dist_sq = math.inf
        for other in neighbors:
            if not other.alive or not is_threat(other, threat_aggression):
                continue
            dist_sq = agent.pos.distance_squared_to(other.pos)
            if dist_sq < closest_dist_sq:
                closest_dist_sq = dist_sq
                closest = other
        return closest

    @staticmethod
    def _closest_food(agent: Agent, ctx: TickContext) -> Optional[Food]:
        closest = None
        closest_dist_sq = math.inf
        for food in ctx.food_grid.query_radius(agent.pos, agent.vision_radius):
            dist_sq = agent.pos.distance_squared_to(food.pos)
            if dist_sq < closest_dist_sq:
                closest_dist_sq = dist_sq
                closest = food
        return closest

    @staticmethod
    def _wander(agent: Agent, rules: MovementConfig, ctx: TickContext) -> Vector2:
        agent.wander_angle += (ctx.rng.random() - 0.5) * rules.wander_smoothness * math.pi

        heading = agent.vel.copy()
        if heading.length_squared() > 0:
            heading.normalize_inplace()
        else:
            heading.set(1.0, 0.0)

        target = Vector2(
            agent.pos.x
            + heading.x * rules.wander_distance
            + math.cos(agent.wander_angle) * rules.wander_radius,
            agent.pos.y
            + heading.y * rules.wander_distance
            + math.sin(agent.wander_angle) * rules.wander_radius,
        )
        return seek_force(agent, target).mul_inplace(rules.wander_strength / 100.0)

    @staticmethod
    def _boundary_force(
        agent: Agent, rules: MovementConfig, width: float, height: float
    ) -> Vector2:
        margin = rules.boundary_margin
        desired_x = None
        desired_y = None
        if agent.pos.x < margin:
            desired_x = agent.max_speed
        elif agent.pos.x > width - margin:
            desired_x = -agent.max_speed
        if agent.pos.y < margin:
            desired_y = agent.max_speed
        elif agent.pos.y > height - margin:
            desired_y = -agent.max_speed

        if desired_x is None and desired_y is None:
            return Vector2()

        desired = Vector2(
            agent.vel.x if desired_x is None else desired_x,
            agent.vel.y if desired_y is None else desired_y,
        )
        desired.set_mag_inplace(agent.max_speed)
        desired.sub_inplace(agent.vel)
        return desired.limit_inplace(agent.max_force * rules.boundary_force_multiplier)

    @staticmethod
    def _enforce_bounds(agent: Agent, rules: MovementConfig, width: float, height: float) -> None:
        pos = agent.pos
        if rules.boundary_mode is BoundaryMode.WRAP:
            if not 0.0 <= pos.x < width:
                pos.x %= width
                if pos.x >= width:
                    pos.x = 0.0
            if not 0.0 <= pos.y < height:
                pos.y %= height
                if pos.y >= height:
                    pos.y = 0.0
            return

        padding = min(rules.boundary_hard_padding, width / 2, height / 2)
        pos.x = max(padding, min(width - padding, pos.x))
        pos.y = max(padding, min(height - padding, pos.y))

    def reset(self) -> None:
        super().reset()
        self._total_distance = 0.0
        self._starved = 0

    def get_debug_info(self) -> Dict[str, Any]:
        info = super().get_debug_info()
        info.update({"total_distance": self._total_distance, "starved": self._starved})
        return info
