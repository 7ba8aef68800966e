"""Mutation operations for offspring.

Each trait independently shifts with probability ``chance`` by a uniform
delta in [-magnitude, +magnitude], then is clamped to its valid range.
Strategy mutation is separate and rarer: the child switches to one of the
other strategy kinds, chosen uniformly.
"""

import random
from typing import Optional

from arena.entities.traits import TRAIT_BOUNDS, TRAIT_NAMES, Traits
from arena.strategies.base import StrategyKind
from arena.strategies.registry import pick_other_strategy
from arena.util.rng import require_rng_param


def mutate_continuous_trait(
    value: float,
    min_val: float,
    max_val: float,
    chance: float,
    magnitude: float,
    rng: Optional[random.Random] = None,
) -> float:
    """Mutate a continuous trait value with a bounded uniform shift.

    Args:
        value: Current trait value
        min_val: Minimum allowed value
        max_val: Maximum allowed value
        chance: Probability of mutation (0.0-1.0)
        magnitude: Largest absolute shift
        rng: The world RNG (required)

    Returns:
        The (possibly) mutated value, clamped to [min_val, max_val]
    """
    rng = require_rng_param(rng, "mutate_continuous_trait")
    if rng.random() < chance:
        value += rng.uniform(-magnitude, magnitude)
    return max(min_val, min(max_val, value))


def mutate_traits(
    parent: Traits, chance: float, magnitude: float, rng: Optional[random.Random] = None
) -> Traits:
    """Return a per-trait mutated copy of ``parent``."""
    rng = require_rng_param(rng, "mutate_traits")
    values = {}
    for name in TRAIT_NAMES:
        low, high = TRAIT_BOUNDS[name]
        values[name] = mutate_continuous_trait(
            getattr(parent, name), low, high, chance, magnitude, rng
        )
    return Traits(**values)


def mutate_strategy(
    parent: StrategyKind, chance: float, rng: Optional[random.Random] = None
) -> StrategyKind:
    """Keep the parent's strategy unless a mutation roll picks another one."""
    rng = require_rng_param(rng, "mutate_strategy")
    if rng.random() < chance:
        return pick_other_strategy(parent, rng)
    return parent
