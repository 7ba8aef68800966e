"""Shared helpers for the arena package."""

from arena.util.enum_utils import coerce_enum
from arena.util.rng import SimulationRNG, require_rng_param, seed_from_value

__all__ = ["SimulationRNG", "coerce_enum", "require_rng_param", "seed_from_value"]
