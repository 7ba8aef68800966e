"""Named scenario presets.

A preset sets the initial population, food and strategy mix (and
optionally a few rule parameters) on top of an existing configuration.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from arena.config.simulation_config import BoundaryMode, SimulationConfig
from arena.exceptions import ConfigurationError
from arena.strategies.base import StrategyKind

logger = logging.getLogger(__name__)


def _ratios(
    aggressive: float, passive: float, cooperative: float, tit_for_tat: float, random_: float
) -> Dict[StrategyKind, float]:
    return {
        StrategyKind.AGGRESSIVE: aggressive,
        StrategyKind.PASSIVE: passive,
        StrategyKind.COOPERATIVE: cooperative,
        StrategyKind.TIT_FOR_TAT: tit_for_tat,
        StrategyKind.RANDOM: random_,
    }


@dataclass(frozen=True)
class Preset:
    """A named starting scenario."""

    key: str
    name: str
    description: str
    strategy_ratios: Mapping[StrategyKind, float]
    agent_count: int
    food_count: int
    food_value: Optional[float] = None
    mutation_chance: Optional[float] = None
    boundary_mode: Optional[BoundaryMode] = None


PRESETS: Dict[str, Preset] = {
    preset.key: preset
    for preset in (
        Preset(
            "HawkDove5050",
            "Hawk vs Dove (50/50)",
            "Classic game theory setup with equal aggressive and passive agents",
            _ratios(0.5, 0.5, 0.0, 0.0, 0.0),
            agent_count=40,
            food_count=60,
        ),
        Preset(
            "HawkInvasion",
            "Hawk Invasion",
            "Small aggressive population invading a passive community",
            _ratios(0.1, 0.9, 0.0, 0.0, 0.0),
            agent_count=50,
            food_count=80,
        ),
        Preset(
            "TitForTatMinority",
            "TitForTat Minority",
            "Can a reciprocating minority survive among hawks and doves?",
            _ratios(0.4, 0.4, 0.0, 0.2, 0.0),
            agent_count=40,
            food_count=50,
        ),
        Preset(
            "Scarcity",
            "Scarcity",
            "Limited resources force competition",
            _ratios(0.3, 0.3, 0.2, 0.2, 0.0),
            agent_count=50,
            food_count=20,
        ),
        Preset(
            "Abundance",
            "Abundance",
            "Plenty of resources, cooperation thrives",
            _ratios(0.2, 0.2, 0.3, 0.2, 0.1),
            agent_count=40,
            food_count=150,
        ),
        Preset(
            "Balanced",
            "Balanced Mix",
            "All strategies represented equally",
            _ratios(0.2, 0.2, 0.2, 0.2, 0.2),
            agent_count=50,
            food_count=75,
        ),
        Preset(
            "CooperativeWorld",
            "Cooperative World",
            "Mostly cooperative and TitForTat strategies",
            _ratios(0.1, 0.1, 0.4, 0.4, 0.0),
            agent_count=40,
            food_count=60,
        ),
        Preset(
            "Chaos",
            "Chaos",
            "Highly aggressive environment",
            _ratios(0.6, 0.1, 0.1, 0.1, 0.1),
            agent_count=60,
            food_count=40,
        ),
    )
}

DEFAULT_PRESET = "Balanced"


def list_presets() -> List[str]:
    return list(PRESETS)


def get_preset(name: str) -> Preset:
    """Look up a preset by key, ignoring case.

    Raises:
        ConfigurationError: If no preset has that name
    """
    wanted = str(name).strip().lower()
    for key, preset in PRESETS.items():
        if key.lower() == wanted:
            return preset
    raise ConfigurationError(f"Unknown preset {name!r}; choose from {', '.join(PRESETS)}")


def apply_preset(config: SimulationConfig, name: str) -> SimulationConfig:
    """Return ``config`` with the preset's scenario applied."""
    preset = get_preset(name)
    overrides = {
        "world": dataclasses.replace(
            config.world,
            initial_agent_count=preset.agent_count,
            initial_food_count=preset.food_count,
            strategy_ratios=dict(preset.strategy_ratios),
        )
    }
    if preset.food_value is not None:
        overrides["interaction.food_value"] = preset.food_value
    if preset.mutation_chance is not None:
        overrides["evolution.mutation_chance"] = preset.mutation_chance
    if preset.boundary_mode is not None:
        overrides["movement.boundary_mode"] = preset.boundary_mode

    logger.info("Applying preset %s (%s)", preset.key, preset.name)
    return config.with_overrides(**overrides)
