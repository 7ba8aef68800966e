"""Agent entity: kinematics, energy, strategy and encounter state.

Agents are pooled. ``reset_for_spawn`` is the only initialisation path and
re-seeds every logical field, so a recycled object carries nothing over
from its previous life.
"""

import math
from typing import Dict, Optional

from arena.config.agents import DEFAULT_MEMORY_SIZE, MAX_ENERGY
from arena.entities.base import Entity
from arena.entities.memory import EncounterMemory, EncounterRecord
from arena.entities.traits import Traits
from arena.math_utils import Vector2
from arena.strategies.base import Action, Outcome, StrategyKind

DEATH_STARVATION = "starvation"
DEATH_COMBAT = "combat"
DEATH_OLD_AGE = "old_age"


class Agent(Entity):
    """A mobile entity with energy, traits and a strategy.

    Attributes:
        vel: Velocity (pixels per second)
        acc: Acceleration accumulated from steering forces this tick
        traits: Heritable trait multipliers
        energy: Current energy, kept in [0, max_energy]
        age: Simulated seconds since spawn
        strategy: Behavioural policy kind
        memory: Bounded memory of past opponents
        cooldowns: Opponent id -> ticks until the pair may interact again
        reproduction_cooldown: Ticks until this agent may reproduce again
        wander_angle: Current angle on the wander circle (radians)
        death_cause: Why the agent died, once it has
    """

    __slots__ = (
        "vel",
        "acc",
        "traits",
        "energy",
        "max_energy",
        "age",
        "strategy",
        "memory",
        "cooldowns",
        "reproduction_cooldown",
        "wander_angle",
        "max_speed",
        "max_force",
        "vision_radius",
        "generation",
        "death_cause",
    )

    def __init__(self) -> None:
        super().__init__()
        self.vel = Vector2()
        self.acc = Vector2()
        self.traits = Traits()
        self.energy = 0.0
        self.max_energy = MAX_ENERGY
        self.age = 0.0
        self.strategy = StrategyKind.RANDOM
        self.memory = EncounterMemory(DEFAULT_MEMORY_SIZE)
        self.cooldowns: Dict[int, int] = {}
        self.reproduction_cooldown = 0
        self.wander_angle = 0.0
        self.max_speed = 0.0
        self.max_force = 0.0
        self.vision_radius = 0.0
        self.generation = 0
        self.death_cause: Optional[str] = None

    def reset_for_spawn(
        self,
        entity_id: int,
        x: float,
        y: float,
        traits: Traits,
        strategy: StrategyKind,
        energy: float,
        agent_config,
        heading: float = 0.0,
        generation: int = 0,
    ) -> "Agent":
        """Fully re-initialise this agent for a new life.

        Args:
            entity_id: Freshly allocated id
            x: Spawn x position
            y: Spawn y position
            traits: Trait values (clamped into range)
            strategy: Strategy kind
            energy: Starting energy (clamped into range)
            agent_config: AgentConfig supplying speed, force, vision and memory limits
            heading: Initial direction of travel (radians)
            generation: 0 for spawned agents, parent generation + 1 for children

        Returns:
            self, for chaining
        """
        self.id = entity_id
        self.alive = True
        self.pos.set(x, y)
        self.traits = traits.clamped()
        self.strategy = strategy
        self.max_energy = agent_config.max_energy
        self.energy = 0.0
        self.gain_energy(energy)
        self.age = 0.0
        self.memory.clear(agent_config.memory_size)
        self.cooldowns.clear()
        self.reproduction_cooldown = 0
        self.wander_angle = heading
        self.generation = generation
        self.death_cause = None
        self._derive_limits(agent_config)

        self.vel.set(math.cos(heading), math.sin(heading)).mul_inplace(self.max_speed)
        self.acc.set(0.0, 0.0)
        return self

    def _derive_limits(self, agent_config) -> None:
        self.max_speed = min(agent_config.max_speed, agent_config.default_speed * self.traits.speed)
        self.max_force = agent_config.max_force
        self.vision_radius = agent_config.vision_radius * self.traits.vision

    def apply_limits(self, agent_config) -> None:
        """Re-derive config-dependent limits for a live agent after a config swap.

        Energy is clamped to the new maximum and memory shrinks to the new
        capacity, dropping the oldest records.
        """
        self.max_energy = agent_config.max_energy
        self.clamp_energy()
        self.memory.resize(agent_config.memory_size)
        self._derive_limits(agent_config)
        self.vel.limit_inplace(self.max_speed)

    # Kinematics

    def apply_force(self, force: Vector2) -> None:
        self.acc.add_inplace(force)

    def apply_impulse(self, impulse: Vector2) -> None:
        """Add an instantaneous velocity change (used for knockback)."""
        self.vel.add_inplace(impulse)

    def integrate(self, dt: float, friction: float) -> float:
        """Advance velocity and position by one step.

        Returns:
            Distance travelled this step
        """
        self.vel.x += self.acc.x * dt
        self.vel.y += self.acc.y * dt
        self.vel.mul_inplace(friction)
        self.vel.limit_inplace(self.max_speed)

        dx = self.vel.x * dt
        dy = self.vel.y * dt
        self.pos.x += dx
        self.pos.y += dy
        self.acc.set(0.0, 0.0)
        return math.sqrt(dx * dx + dy * dy)

    # Energy

    def gain_energy(self, amount: float) -> float:
        """Add energy (capped at max_energy) and return the amount actually gained."""
        before = self.energy
        self.energy = min(self.max_energy, self.energy + max(0.0, amount))
        return self.energy - before

    def spend_energy(self, amount: float) -> float:
        """Remove energy (floored at 0) and return the amount actually spent."""
        before = self.energy
        self.energy = max(0.0, self.energy - max(0.0, amount))
        return before - self.energy

    def clamp_energy(self) -> None:
        if self.energy != self.energy:
            self.energy = 0.0
        self.energy = max(0.0, min(self.max_energy, self.energy))

    @property
    def is_exhausted(self) -> bool:
        return self.energy <= 0.0

    # Pair cooldowns

    def is_on_cooldown(self, opponent_id: int) -> bool:
        return self.cooldowns.get(opponent_id, 0) > 0

    def set_cooldown(self, opponent_id: int, ticks: int) -> None:
        if ticks > 0:
            self.cooldowns[opponent_id] = ticks
        else:
            self.cooldowns.pop(opponent_id, None)

    def tick_cooldowns(self) -> None:
        """Count every pair cooldown down by one tick, dropping expired ones."""
        if not self.cooldowns:
            return
        expired = []
        for opponent_id, remaining in self.cooldowns.items():
            if remaining <= 1:
                expired.append(opponent_id)
            else:
                self.cooldowns[opponent_id] = remaining - 1
        for opponent_id in expired:
            del self.cooldowns[opponent_id]

    # Memory

    def remember_encounter(
        self,
        opponent_id: int,
        opponent_action: Action,
        outcome: Outcome,
        energy_change: float,
        tick: int,
    ) -> EncounterRecord:
        return self.memory.remember(opponent_id, opponent_action, outcome, energy_change, tick)

    def recall(self, opponent_id: int) -> Optional[EncounterRecord]:
        return self.memory.recall(opponent_id)

    # Lifecycle

    def mark_dead(self, cause: Optional[str] = None) -> None:
        if self.alive:
            self.death_cause = cause
        self.alive = False

    def can_reproduce(self, threshold: float) -> bool:
        return self.alive and self.reproduction_cooldown <= 0 and self.energy > threshold
