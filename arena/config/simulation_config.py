"""Simulation configuration dataclasses.

The World is built from one immutable ``SimulationConfig`` value. Runtime
edits produce a new value (``with_overrides``) with a bumped ``version``
that the World swaps in at the next tick boundary.

All external numbers go through ``sanitized()``, which clamps them into
valid ranges rather than rejecting them: negative costs become 0,
probabilities are squeezed into [0, 1], ratios are renormalised, and
non-finite values fall back to their defaults.
"""

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from arena.config import agents as agent_defaults
from arena.config import evolution as evolution_defaults
from arena.config import interaction as interaction_defaults
from arena.config import world as world_defaults
from arena.payoff import PayoffMatrix
from arena.strategies.base import StrategyKind
from arena.strategies.registry import DEFAULT_STRATEGY_RATIOS, normalize_ratios
from arena.util.enum_utils import coerce_enum

logger = logging.getLogger(__name__)


class BoundaryMode(Enum):
    """How agents are kept inside the arena."""

    BOUNCE = "bounce"
    WRAP = "wrap"


def _finite(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _clamp(value: Any, low: float, high: float, default: float) -> float:
    return max(low, min(high, _finite(value, default)))


def _non_negative(value: Any, default: float) -> float:
    return max(0.0, _finite(value, default))


def _count(value: Any, default: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    number = _finite(value, -1.0)
    if number < 0:
        return default
    return int(round(number))


def _warn_adjusted(section: str, raw: Any, cleaned: Any, skip: tuple = ()) -> Any:
    """Log every field ``sanitized`` had to change, then return ``cleaned``."""
    for config_field in dataclasses.fields(cleaned):
        if config_field.name in skip:
            continue
        before = getattr(raw, config_field.name)
        after = getattr(cleaned, config_field.name)
        if before != after:
            logger.warning(
                "Config %s.%s=%r is out of range, using %r",
                section,
                config_field.name,
                before,
                after,
            )
    return cleaned


@dataclass(frozen=True)
class AgentConfig:
    """Per-agent kinematic and energy limits."""

    default_speed: float = agent_defaults.DEFAULT_SPEED
    max_speed: float = agent_defaults.MAX_SPEED
    max_force: float = agent_defaults.MAX_FORCE
    vision_radius: float = agent_defaults.VISION_RADIUS
    starting_energy: float = agent_defaults.STARTING_ENERGY
    max_energy: float = agent_defaults.MAX_ENERGY
    low_energy_threshold: float = agent_defaults.LOW_ENERGY_THRESHOLD
    memory_size: int = agent_defaults.DEFAULT_MEMORY_SIZE

    def sanitized(self) -> "AgentConfig":
        max_energy = _finite(self.max_energy, agent_defaults.MAX_ENERGY)
        if max_energy <= 0:
            max_energy = agent_defaults.MAX_ENERGY
        max_speed = _non_negative(self.max_speed, agent_defaults.MAX_SPEED)
        cleaned = AgentConfig(
            default_speed=_clamp(self.default_speed, 0.0, max_speed, agent_defaults.DEFAULT_SPEED),
            max_speed=max_speed,
            max_force=_non_negative(self.max_force, agent_defaults.MAX_FORCE),
            vision_radius=_non_negative(self.vision_radius, agent_defaults.VISION_RADIUS),
            starting_energy=_clamp(
                self.starting_energy, 0.0, max_energy, agent_defaults.STARTING_ENERGY
            ),
            max_energy=max_energy,
            low_energy_threshold=_clamp(
                self.low_energy_threshold, 0.0, max_energy, agent_defaults.LOW_ENERGY_THRESHOLD
            ),
            memory_size=max(1, int(_finite(self.memory_size, agent_defaults.DEFAULT_MEMORY_SIZE))),
        )
        return _warn_adjusted("agents", self, cleaned)


@dataclass(frozen=True)
class MovementConfig:
    """Steering, friction, metabolism and boundary handling."""

    friction: float = agent_defaults.FRICTION
    base_tick_cost: float = agent_defaults.BASE_TICK_COST
    movement_cost_factor: float = agent_defaults.MOVEMENT_COST_FACTOR
    age_metabolism_factor: float = agent_defaults.AGE_METABOLISM_FACTOR
    separation_weight: float = agent_defaults.SEPARATION_WEIGHT
    flee_weight: float = agent_defaults.FLEE_WEIGHT
    food_seek_weight: float = agent_defaults.FOOD_SEEK_WEIGHT
    arrive_slow_radius: float = agent_defaults.ARRIVE_SLOW_RADIUS
    threat_aggression: float = agent_defaults.THREAT_AGGRESSION
    wander_distance: float = agent_defaults.WANDER_DISTANCE
    wander_radius: float = agent_defaults.WANDER_RADIUS
    wander_strength: float = agent_defaults.WANDER_STRENGTH
    wander_smoothness: float = agent_defaults.WANDER_SMOOTHNESS
    boundary_mode: BoundaryMode = BoundaryMode(agent_defaults.BOUNDARY_MODE)
    boundary_margin: float = agent_defaults.BOUNDARY_MARGIN
    boundary_force_multiplier: float = agent_defaults.BOUNDARY_FORCE_MULTIPLIER
    boundary_hard_padding: float = agent_defaults.BOUNDARY_HARD_PADDING

    def sanitized(self) -> "MovementConfig":
        mode = coerce_enum(BoundaryMode, self.boundary_mode)
        if mode is None:
            logger.warning("Unknown boundary mode %r, using bounce", self.boundary_mode)
            mode = BoundaryMode.BOUNCE
        cleaned = MovementConfig(
            friction=_clamp(self.friction, 0.0, 1.0, agent_defaults.FRICTION),
            base_tick_cost=_non_negative(self.base_tick_cost, agent_defaults.BASE_TICK_COST),
            movement_cost_factor=_non_negative(
                self.movement_cost_factor, agent_defaults.MOVEMENT_COST_FACTOR
            ),
            age_metabolism_factor=_non_negative(
                self.age_metabolism_factor, agent_defaults.AGE_METABOLISM_FACTOR
            ),
            separation_weight=_non_negative(
                self.separation_weight, agent_defaults.SEPARATION_WEIGHT
            ),
            flee_weight=_non_negative(self.flee_weight, agent_defaults.FLEE_WEIGHT),
            food_seek_weight=_non_negative(self.food_seek_weight, agent_defaults.FOOD_SEEK_WEIGHT),
            arrive_slow_radius=_non_negative(
                self.arrive_slow_radius, agent_defaults.ARRIVE_SLOW_RADIUS
            ),
            threat_aggression=_clamp(
                self.threat_aggression, 0.0, 1.0, agent_defaults.THREAT_AGGRESSION
            ),
            wander_distance=_non_negative(self.wander_distance, agent_defaults.WANDER_DISTANCE),
            wander_radius=_non_negative(self.wander_radius, agent_defaults.WANDER_RADIUS),
            wander_strength=_non_negative(self.wander_strength, agent_defaults.WANDER_STRENGTH),
            wander_smoothness=_clamp(
                self.wander_smoothness, 0.0, 2.0, agent_defaults.WANDER_SMOOTHNESS
            ),
            boundary_mode=mode,
            boundary_margin=_non_negative(self.boundary_margin, agent_defaults.BOUNDARY_MARGIN),
            boundary_force_multiplier=_non_negative(
                self.boundary_force_multiplier, agent_defaults.BOUNDARY_FORCE_MULTIPLIER
            ),
            boundary_hard_padding=_non_negative(
                self.boundary_hard_padding, agent_defaults.BOUNDARY_HARD_PADDING
            ),
        )
        return _warn_adjusted("movement", self, cleaned, skip=("boundary_mode",))


@dataclass(frozen=True)
class InteractionConfig:
    """Food consumption and encounter rules."""

    collision_radius: float = interaction_defaults.COLLISION_RADIUS
    food_size: float = interaction_defaults.FOOD_SIZE
    food_value: float = interaction_defaults.FOOD_VALUE
    interaction_cooldown: int = interaction_defaults.INTERACTION_COOLDOWN
    knockback_force: float = interaction_defaults.KNOCKBACK_FORCE
    fight_cost: float = interaction_defaults.FIGHT_COST
    fight_afford_multiplier: float = interaction_defaults.FIGHT_AFFORD_MULTIPLIER
    cooperative_hungry_energy: float = interaction_defaults.COOPERATIVE_HUNGRY_ENERGY
    cooperative_fight_chance: float = interaction_defaults.COOPERATIVE_FIGHT_CHANCE
    passive_flee_aggression: float = interaction_defaults.PASSIVE_FLEE_AGGRESSION
    max_recent_events: int = interaction_defaults.MAX_RECENT_EVENTS
    payoff: PayoffMatrix = field(default_factory=PayoffMatrix)

    @property
    def food_reach(self) -> float:
        """Centre distance at which an agent eats a food item."""
        return self.collision_radius + self.food_size

    @property
    def interaction_radius(self) -> float:
        """Centre distance at which two agents meet."""
        return self.collision_radius * 2

    def sanitized(self) -> "InteractionConfig":
        payoff = self.payoff
        if not isinstance(payoff, PayoffMatrix):
            payoff = PayoffMatrix.from_dict(payoff)
        cleaned = InteractionConfig(
            collision_radius=_non_negative(
                self.collision_radius, interaction_defaults.COLLISION_RADIUS
            ),
            food_size=_non_negative(self.food_size, interaction_defaults.FOOD_SIZE),
            food_value=_non_negative(self.food_value, interaction_defaults.FOOD_VALUE),
            interaction_cooldown=int(
                _non_negative(self.interaction_cooldown, interaction_defaults.INTERACTION_COOLDOWN)
            ),
            knockback_force=_non_negative(
                self.knockback_force, interaction_defaults.KNOCKBACK_FORCE
            ),
            fight_cost=_non_negative(self.fight_cost, interaction_defaults.FIGHT_COST),
            fight_afford_multiplier=_non_negative(
                self.fight_afford_multiplier, interaction_defaults.FIGHT_AFFORD_MULTIPLIER
            ),
            cooperative_hungry_energy=_non_negative(
                self.cooperative_hungry_energy, interaction_defaults.COOPERATIVE_HUNGRY_ENERGY
            ),
            cooperative_fight_chance=_clamp(
                self.cooperative_fight_chance,
                0.0,
                1.0,
                interaction_defaults.COOPERATIVE_FIGHT_CHANCE,
            ),
            passive_flee_aggression=_clamp(
                self.passive_flee_aggression, 0.0, 1.0, interaction_defaults.PASSIVE_FLEE_AGGRESSION
            ),
            max_recent_events=int(
                _non_negative(self.max_recent_events, interaction_defaults.MAX_RECENT_EVENTS)
            ),
            payoff=payoff,
        )
        return _warn_adjusted("interaction", self, cleaned, skip=("payoff",))


@dataclass(frozen=True)
class EvolutionConfig:
    """Reproduction, mutation and population limits."""

    reproduction_threshold: float = evolution_defaults.REPRODUCTION_THRESHOLD
    reproduction_cost: float = evolution_defaults.REPRODUCTION_COST
    child_energy_fraction: float = evolution_defaults.CHILD_ENERGY_FRACTION
    reproduction_cooldown: int = evolution_defaults.REPRODUCTION_COOLDOWN
    spawn_offset: float = evolution_defaults.SPAWN_OFFSET
    mutation_chance: float = evolution_defaults.MUTATION_CHANCE
    mutation_magnitude: float = evolution_defaults.MUTATION_MAGNITUDE
    strategy_mutation_chance: float = evolution_defaults.STRATEGY_MUTATION_CHANCE
    max_agents: int = evolution_defaults.MAX_AGENTS
    min_population: int = evolution_defaults.MIN_POPULATION
    max_age: float = evolution_defaults.MAX_AGE

    def sanitized(self) -> "EvolutionConfig":
        threshold = _non_negative(
            self.reproduction_threshold, evolution_defaults.REPRODUCTION_THRESHOLD
        )
        max_agents = int(_non_negative(self.max_agents, evolution_defaults.MAX_AGENTS))
        max_age = _finite(self.max_age, evolution_defaults.MAX_AGE)
        if max_age <= 0:
            max_age = evolution_defaults.MAX_AGE
        cleaned = EvolutionConfig(
            reproduction_threshold=threshold,
            # The parent must never be driven below zero by its own offspring
            reproduction_cost=_clamp(
                self.reproduction_cost, 0.0, threshold, evolution_defaults.REPRODUCTION_COST
            ),
            child_energy_fraction=_clamp(
                self.child_energy_fraction, 0.0, 1.0, evolution_defaults.CHILD_ENERGY_FRACTION
            ),
            reproduction_cooldown=int(
                _non_negative(self.reproduction_cooldown, evolution_defaults.REPRODUCTION_COOLDOWN)
            ),
            spawn_offset=_non_negative(self.spawn_offset, evolution_defaults.SPAWN_OFFSET),
            mutation_chance=_clamp(
                self.mutation_chance, 0.0, 1.0, evolution_defaults.MUTATION_CHANCE
            ),
            mutation_magnitude=_non_negative(
                self.mutation_magnitude, evolution_defaults.MUTATION_MAGNITUDE
            ),
            strategy_mutation_chance=_clamp(
                self.strategy_mutation_chance,
                0.0,
                1.0,
                evolution_defaults.STRATEGY_MUTATION_CHANCE,
            ),
            max_agents=max_agents,
            min_population=min(
                max_agents,
                int(_non_negative(self.min_population, evolution_defaults.MIN_POPULATION)),
            ),
            max_age=max_age,
        )
        return _warn_adjusted("evolution", self, cleaned)


@dataclass(frozen=True)
class WorldConfig:
    """Arena geometry and initial spawn configuration.

    ``initial_agent_count`` / ``initial_food_count`` of None means the
    count is derived from the matching density and the arena area.
    """

    width: float = world_defaults.WORLD_WIDTH
    height: float = world_defaults.WORLD_HEIGHT
    initial_agent_count: Optional[int] = world_defaults.INITIAL_AGENT_COUNT
    initial_food_count: Optional[int] = world_defaults.INITIAL_FOOD_COUNT
    agent_density: float = world_defaults.AGENT_DENSITY
    food_density: float = world_defaults.FOOD_DENSITY
    spawn_margin: float = world_defaults.SPAWN_MARGIN
    strategy_ratios: Mapping[StrategyKind, float] = field(
        default_factory=lambda: dict(DEFAULT_STRATEGY_RATIOS)
    )

    def resolve_agent_count(self) -> int:
        if self.initial_agent_count is not None:
            return self.initial_agent_count
        return int(round(self.width * self.height * self.agent_density))

    def resolve_food_count(self) -> int:
        if self.initial_food_count is not None:
            return self.initial_food_count
        return int(round(self.width * self.height * self.food_density))

    def sanitized(self) -> "WorldConfig":
        width = max(world_defaults.MIN_WORLD_SIZE, _finite(self.width, world_defaults.WORLD_WIDTH))
        height = max(
            world_defaults.MIN_WORLD_SIZE, _finite(self.height, world_defaults.WORLD_HEIGHT)
        )
        cleaned = WorldConfig(
            width=width,
            height=height,
            initial_agent_count=_count(
                self.initial_agent_count, world_defaults.INITIAL_AGENT_COUNT
            ),
            initial_food_count=_count(self.initial_food_count, world_defaults.INITIAL_FOOD_COUNT),
            agent_density=_non_negative(self.agent_density, world_defaults.AGENT_DENSITY),
            food_density=_non_negative(self.food_density, world_defaults.FOOD_DENSITY),
            spawn_margin=_clamp(
                self.spawn_margin, 0.0, min(width, height) / 2, world_defaults.SPAWN_MARGIN
            ),
            strategy_ratios=normalize_ratios(self.strategy_ratios),
        )
        return _warn_adjusted("world", self, cleaned, skip=("strategy_ratios",))


SeedValue = Union[int, str, None]


@dataclass(frozen=True)
class SimulationConfig:
    """Aggregate configuration for one World.

    Attributes:
        seed: Numeric or string seed (None picks a random one at reset)
        version: Bumped on every runtime edit so the World can detect swaps
    """

    seed: SeedValue = None
    version: int = 0
    world: WorldConfig = field(default_factory=WorldConfig)
    agents: AgentConfig = field(default_factory=AgentConfig)
    movement: MovementConfig = field(default_factory=MovementConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    evolution: EvolutionConfig = field(default_factory=EvolutionConfig)

    def sanitized(self) -> "SimulationConfig":
        """Return a copy with every section clamped into its valid range."""
        return dataclasses.replace(
            self,
            world=self.world.sanitized(),
            agents=self.agents.sanitized(),
            movement=self.movement.sanitized(),
            interaction=self.interaction.sanitized(),
            evolution=self.evolution.sanitized(),
        )

    def with_overrides(self, **changes: Any) -> "SimulationConfig":
        """Return an edited, sanitised copy with a bumped version.

        Top-level keys replace whole sections or the seed. Dotted keys
        (``"evolution.mutation_chance"``) edit single fields.
        """
        sections: Dict[str, Dict[str, Any]] = {}
        top: Dict[str, Any] = {}
        for key, value in changes.items():
            section, _, name = key.partition("__") if "__" in key else key.partition(".")
            if name:
                sections.setdefault(section, {})[name] = value
            else:
                top[key] = value

        for section, values in sections.items():
            current = top.get(section, getattr(self, section))
            top[section] = dataclasses.replace(current, **values)

        return dataclasses.replace(self, version=self.version + 1, **top).sanitized()

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a JSON-friendly dictionary."""
        data: Dict[str, Any] = {"seed": self.seed, "version": self.version}
        for section in _SECTIONS:
            values = {}
            for item in dataclasses.fields(getattr(self, section)):
                value = getattr(getattr(self, section), item.name)
                if isinstance(value, Enum):
                    value = value.value
                elif isinstance(value, PayoffMatrix):
                    value = value.to_dict()
                elif item.name == "strategy_ratios":
                    value = {kind.value: ratio for kind, ratio in value.items()}
                values[item.name] = value
            data[section] = values
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimulationConfig":
        """Create a sanitised config from a dictionary, ignoring unknown keys."""
        if not isinstance(data, Mapping):
            logger.warning("Configuration must be a mapping, using defaults")
            return cls().sanitized()

        kwargs: Dict[str, Any] = {}
        for section, section_cls in _SECTIONS.items():
            raw = data.get(section)
            if not isinstance(raw, Mapping):
                continue
            known = {item.name for item in dataclasses.fields(section_cls)}
            values = {key: value for key, value in raw.items() if key in known}
            if "payoff" in values:
                values["payoff"] = PayoffMatrix.from_dict(values["payoff"])
            kwargs[section] = section_cls(**values)

        seed = data.get("seed")
        if seed is not None and not isinstance(seed, (int, str)):
            seed = str(seed)
        version = int(_non_negative(data.get("version", 0), 0))
        return cls(seed=seed, version=version, **kwargs).sanitized()


_SECTIONS = {
    "world": WorldConfig,
    "agents": AgentConfig,
    "movement": MovementConfig,
    "interaction": InteractionConfig,
    "evolution": EvolutionConfig,
}
