"""RNG utilities for deterministic simulation.

The world owns exactly one SimulationRNG and hands it to every system
through the tick context. Nothing in the arena package touches the
module-level ``random`` functions; ``tests/test_rng_policy.py`` enforces it.
"""

import hashlib
import logging
import os
import random
from typing import Optional, Union

from arena.exceptions import MissingRNGError

logger = logging.getLogger(__name__)

SEED_MASK = 0xFFFFFFFF

SeedValue = Union[int, float, str, None]


def seed_from_value(value: SeedValue) -> int:
    """Derive a 32-bit seed from a numeric or string value.

    Integers (and integral floats) pass through masked to 32 bits, numeric
    strings are parsed as integers, and any other string is hashed with
    SHA-256 so that "my-run" always produces the same seed. ``None`` draws
    a fresh seed from the operating system.

    Args:
        value: The user-supplied seed

    Returns:
        A non-negative 32-bit integer seed
    """
    if value is None:
        seed = int.from_bytes(os.urandom(4), "big")
        logger.info("No seed supplied, using random seed %d", seed)
        return seed

    if isinstance(value, bool):
        return int(value)

    if isinstance(value, int):
        return value & SEED_MASK

    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value) & SEED_MASK

    text = str(value).strip()
    try:
        return int(text, 10) & SEED_MASK
    except ValueError:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return int.from_bytes(digest[:4], "big")


class SimulationRNG(random.Random):
    """Seeded random source that remembers the seed it was built from."""

    def __init__(self, seed: SeedValue = None) -> None:
        self._seed_value = seed_from_value(seed)
        super().__init__(self._seed_value)

    @property
    def seed_value(self) -> int:
        """The 32-bit seed this generator was last (re)seeded with."""
        return self._seed_value

    def reseed(self, seed: SeedValue = None) -> int:
        """Restart the sequence from a new seed and return that seed."""
        self._seed_value = seed_from_value(seed)
        self.seed(self._seed_value)
        return self._seed_value


def require_rng_param(rng: Optional[random.Random], context: str) -> random.Random:
    """Validate that an RNG parameter was provided, failing loudly if not.

    Use this in functions that require an RNG instead of silently creating
    an unseeded fallback.

    Args:
        rng: The RNG that should have been provided
        context: Description of where this is called from (for error messages)

    Returns:
        The validated RNG

    Raises:
        MissingRNGError: If rng is None
    """
    if rng is None:
        raise MissingRNGError(f"RNG required: {context}. Pass the world RNG explicitly.")
    return rng
