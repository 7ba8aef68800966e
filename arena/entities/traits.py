"""Heritable agent traits.

Each trait is a float multiplier with its own valid range. Traits are
copied and mutated on reproduction (see ``arena.evolution.mutation``).
"""

import random
from dataclasses import asdict, dataclass
from typing import Dict, Tuple

# Valid (min, max) range per trait
TRAIT_BOUNDS: Dict[str, Tuple[float, float]] = {
    "speed": (0.5, 1.5),
    "vision": (0.5, 2.0),
    "aggression": (0.0, 1.0),
    "stamina": (0.5, 1.5),
}

TRAIT_NAMES = tuple(TRAIT_BOUNDS)

# Range used for freshly spawned (non-inherited) traits
RANDOM_INIT_RANGE = (0.8, 1.2)


def clamp_trait(name: str, value: float) -> float:
    """Clamp a single trait value into its valid range."""
    low, high = TRAIT_BOUNDS[name]
    if value != value:
        return low
    return max(low, min(high, value))


@dataclass
class Traits:
    """Bounded float modifiers distinguishing individual agents.

    Attributes:
        speed: Scales the agent's max speed
        vision: Scales the agent's vision radius
        aggression: Fight propensity as perceived by others (0-1)
        stamina: Divides movement and metabolic energy costs
    """

    speed: float = 1.0
    vision: float = 1.0
    aggression: float = 0.5
    stamina: float = 1.0

    def clamped(self) -> "Traits":
        """Return a copy with every trait inside TRAIT_BOUNDS."""
        return Traits(**{name: clamp_trait(name, getattr(self, name)) for name in TRAIT_NAMES})

    def copy(self) -> "Traits":
        return Traits(self.speed, self.vision, self.aggression, self.stamina)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


DEFAULT_TRAITS = Traits()


def random_traits(rng: random.Random) -> Traits:
    """Generate traits for a non-inherited spawn.

    Speed, vision and stamina are drawn from 0.8-1.2; aggression covers
    its full 0-1 range.
    """
    low, high = RANDOM_INIT_RANGE
    return Traits(
        speed=rng.uniform(low, high),
        vision=rng.uniform(low, high),
        aggression=rng.random(),
        stamina=rng.uniform(low, high),
    )
