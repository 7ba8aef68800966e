"""Versioned export/import record for simulation configurations.

The record captures everything needed to reproduce a run's initial state:
the seed, initial counts, strategy mix and the rule parameters. Importing
the same record with the same seed spawns an identical initial world.

JSON layout (version 1)::

    {
      "version": 1,
      "seed": 42,
      "world": {"agentCount": 30, "foodCount": 60, "strategyRatios": {...}},
      "params": {"maxAgents": 150, "mutationChance": 0.1, ...},
      "rules": {"fightCost": 10, "foodValue": 25, "payoff": {"FIGHT_FIGHT": [-20, -20], ...}}
    }

Loading is forgiving: malformed fields are dropped with a warning and the
base configuration's value is kept; numbers are clamped by
``SimulationConfig.sanitized``. Only text that is not JSON at all raises.
"""

import dataclasses
import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from arena.config.simulation_config import BoundaryMode, SimulationConfig
from arena.config.world import CONFIG_RECORD_VERSION
from arena.exceptions import PersistenceError
from arena.payoff import PayoffMatrix
from arena.strategies.registry import normalize_ratios
from arena.util.enum_utils import coerce_enum

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _RecordModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WorldRecord(_RecordModel):
    """Initial population section."""

    agent_count: Optional[float] = Field(default=None, alias="agentCount")
    food_count: Optional[float] = Field(default=None, alias="foodCount")
    strategy_ratios: Optional[Dict[str, Any]] = Field(default=None, alias="strategyRatios")


class ParamsRecord(_RecordModel):
    """Evolution and movement parameters."""

    max_agents: Optional[float] = Field(default=None, alias="maxAgents")
    min_population: Optional[float] = Field(default=None, alias="minPopulation")
    mutation_chance: Optional[float] = Field(default=None, alias="mutationChance")
    mutation_magnitude: Optional[float] = Field(default=None, alias="mutationMagnitude")
    strategy_mutation_chance: Optional[float] = Field(
        default=None, alias="strategyMutationChance"
    )
    vision_radius: Optional[float] = Field(default=None, alias="visionRadius")
    boundary_mode: Optional[str] = Field(default=None, alias="boundaryMode")


class RulesRecord(_RecordModel):
    """Encounter rules."""

    fight_cost: Optional[float] = Field(default=None, alias="fightCost")
    food_value: Optional[float] = Field(default=None, alias="foodValue")
    payoff: Optional[Dict[str, Any]] = None


class ConfigRecord(_RecordModel):
    """Top-level export record."""

    version: int = CONFIG_RECORD_VERSION
    seed: Optional[Union[int, str]] = None
    world: WorldRecord = Field(default_factory=WorldRecord)
    params: ParamsRecord = Field(default_factory=ParamsRecord)
    rules: RulesRecord = Field(default_factory=RulesRecord)


def export_record(config: SimulationConfig, seed: Optional[Union[int, str]] = None) -> ConfigRecord:
    """Build a record from a configuration.

    Args:
        config: The configuration to export
        seed: Seed to store (defaults to ``config.seed``); pass the World's
            resolved seed so a randomly seeded run can be replayed
    """
    world = config.world
    evolution = config.evolution
    return ConfigRecord(
        version=CONFIG_RECORD_VERSION,
        seed=config.seed if seed is None else seed,
        world=WorldRecord(
            agent_count=world.resolve_agent_count(),
            food_count=world.resolve_food_count(),
            strategy_ratios={kind.value: ratio for kind, ratio in world.strategy_ratios.items()},
        ),
        params=ParamsRecord(
            max_agents=evolution.max_agents,
            min_population=evolution.min_population,
            mutation_chance=evolution.mutation_chance,
            mutation_magnitude=evolution.mutation_magnitude,
            strategy_mutation_chance=evolution.strategy_mutation_chance,
            vision_radius=config.agents.vision_radius,
            boundary_mode=config.movement.boundary_mode.value,
        ),
        rules=RulesRecord(
            fight_cost=config.interaction.fight_cost,
            food_value=config.interaction.food_value,
            payoff=config.interaction.payoff.to_dict(),
        ),
    )


def record_to_json(record: ConfigRecord) -> str:
    """Serialize a record to indented JSON using the camelCase field names."""
    data = record.model_dump(by_alias=True)
    return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")


def _validate_lenient(model: Type[M], raw: Any, section: str) -> M:
    """Validate ``raw`` into ``model``, dropping fields that fail validation."""
    if raw is None:
        return model()
    if not isinstance(raw, Mapping):
        logger.warning("Config record section %r is not an object, ignoring it", section)
        return model()

    data = dict(raw)
    while True:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            bad_keys = {error["loc"][0] for error in exc.errors() if error["loc"]}
            bad_keys &= set(data)
            if not bad_keys:
                logger.warning("Config record section %r is invalid, ignoring it", section)
                return model()
            for key in sorted(bad_keys, key=str):
                logger.warning("Ignoring malformed %s.%s=%r", section, key, data[key])
                del data[key]


def load_record(source: Union[str, bytes, Mapping[str, Any]]) -> ConfigRecord:
    """Parse a record from JSON text or an already-decoded mapping.

    Raises:
        PersistenceError: If ``source`` is not valid JSON
    """
    if isinstance(source, (str, bytes)):
        try:
            raw = orjson.loads(source)
        except orjson.JSONDecodeError as exc:
            raise PersistenceError(f"Config record is not valid JSON: {exc}") from exc
    else:
        raw = source

    if not isinstance(raw, Mapping):
        logger.warning("Config record must be a JSON object, using defaults")
        return ConfigRecord()

    version = raw.get("version", CONFIG_RECORD_VERSION)
    if version != CONFIG_RECORD_VERSION:
        logger.warning(
            "Unsupported config record version %r (expected %d), importing best-effort",
            version,
            CONFIG_RECORD_VERSION,
        )
        version = CONFIG_RECORD_VERSION

    seed = raw.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, (int, str))):
        if isinstance(seed, float) and seed == seed and abs(seed) != float("inf"):
            seed = int(seed)
        else:
            logger.warning("Ignoring malformed seed %r", seed)
            seed = None

    return ConfigRecord(
        version=version,
        seed=seed,
        world=_validate_lenient(WorldRecord, raw.get("world"), "world"),
        params=_validate_lenient(ParamsRecord, raw.get("params"), "params"),
        rules=_validate_lenient(RulesRecord, raw.get("rules"), "rules"),
    )


def _round_count(value: Optional[float]) -> Optional[int]:
    if value is None or value != value or abs(value) == float("inf"):
        return None
    return max(0, int(round(value)))


def record_to_config(
    record: ConfigRecord, base: Optional[SimulationConfig] = None
) -> SimulationConfig:
    """Overlay a record on ``base`` and return the sanitised result.

    Fields the record leaves out keep the base value. World dimensions are
    never part of the record; they come from ``base``.
    """
    base = base or SimulationConfig()

    world_changes: Dict[str, Any] = {}
    agent_count = _round_count(record.world.agent_count)
    if agent_count is not None:
        world_changes["initial_agent_count"] = agent_count
    food_count = _round_count(record.world.food_count)
    if food_count is not None:
        world_changes["initial_food_count"] = food_count
    if record.world.strategy_ratios is not None:
        world_changes["strategy_ratios"] = normalize_ratios(record.world.strategy_ratios)

    params = record.params
    evolution_changes: Dict[str, Any] = {}
    max_agents = _round_count(params.max_agents)
    if max_agents is not None:
        evolution_changes["max_agents"] = max_agents
    min_population = _round_count(params.min_population)
    if min_population is not None:
        evolution_changes["min_population"] = min_population
    for name in ("mutation_chance", "mutation_magnitude", "strategy_mutation_chance"):
        value = getattr(params, name)
        if value is not None:
            evolution_changes[name] = value

    agent_changes: Dict[str, Any] = {}
    if params.vision_radius is not None:
        agent_changes["vision_radius"] = params.vision_radius

    movement_changes: Dict[str, Any] = {}
    if params.boundary_mode is not None:
        mode = coerce_enum(BoundaryMode, params.boundary_mode)
        if mode is None:
            logger.warning("Ignoring unknown boundary mode %r", params.boundary_mode)
        else:
            movement_changes["boundary_mode"] = mode

    interaction_changes: Dict[str, Any] = {}
    if record.rules.fight_cost is not None:
        interaction_changes["fight_cost"] = record.rules.fight_cost
    if record.rules.food_value is not None:
        interaction_changes["food_value"] = record.rules.food_value
    if record.rules.payoff is not None:
        interaction_changes["payoff"] = PayoffMatrix.from_dict(record.rules.payoff)

    return dataclasses.replace(
        base,
        seed=record.seed if record.seed is not None else base.seed,
        version=base.version + 1,
        world=dataclasses.replace(base.world, **world_changes),
        agents=dataclasses.replace(base.agents, **agent_changes),
        movement=dataclasses.replace(base.movement, **movement_changes),
        interaction=dataclasses.replace(base.interaction, **interaction_changes),
        evolution=dataclasses.replace(base.evolution, **evolution_changes),
    ).sanitized()
