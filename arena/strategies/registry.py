"""Strategy lookup and spawn-ratio handling."""

import logging
import random
from typing import Any, Dict, Mapping

from arena.config.evolution import STRATEGY_SPAWN
from arena.strategies.base import Strategy, StrategyKind
from arena.strategies.policies import (
    AggressiveStrategy,
    CooperativeStrategy,
    PassiveStrategy,
    RandomStrategy,
    TitForTatStrategy,
)
from arena.util.enum_utils import coerce_enum

logger = logging.getLogger(__name__)

_NORMALIZED_TOLERANCE = 1e-9

_STRATEGIES: Dict[StrategyKind, Strategy] = {
    StrategyKind.AGGRESSIVE: AggressiveStrategy(),
    StrategyKind.PASSIVE: PassiveStrategy(),
    StrategyKind.COOPERATIVE: CooperativeStrategy(),
    StrategyKind.TIT_FOR_TAT: TitForTatStrategy(),
    StrategyKind.RANDOM: RandomStrategy(),
}

DEFAULT_STRATEGY_RATIOS: Dict[StrategyKind, float] = {
    StrategyKind[name]: float(value) for name, value in STRATEGY_SPAWN.items()
}


def get_strategy(kind: StrategyKind) -> Strategy:
    """Get the shared strategy instance for a kind."""
    return _STRATEGIES[kind]


def parse_strategy_kind(value: Any) -> StrategyKind:
    """Parse "TitForTat", "tit_for_tat", StrategyKind members, ... ."""
    kind = coerce_enum(StrategyKind, value)
    if kind is None:
        raise ValueError(f"Unknown strategy: {value!r}")
    return kind


def normalize_ratios(ratios: Any) -> Dict[StrategyKind, float]:
    """Sanitise a spawn-ratio mapping so it sums to 1.

    Negative, non-numeric and non-finite values count as 0 and unknown
    names are ignored. A mapping whose total is 0 (or that is not a
    mapping at all) falls back to ``DEFAULT_STRATEGY_RATIOS``.

    Args:
        ratios: Mapping of strategy name or kind to weight

    Returns:
        A dict with an entry for every StrategyKind, summing to 1.0
    """
    cleaned = {kind: 0.0 for kind in StrategyKind}
    if isinstance(ratios, Mapping):
        for key, value in ratios.items():
            kind = coerce_enum(StrategyKind, key)
            if kind is None:
                logger.warning("Ignoring spawn ratio for unknown strategy %r", key)
                continue
            try:
                weight = float(value)
            except (TypeError, ValueError):
                continue
            if weight != weight or weight == float("inf"):
                continue
            cleaned[kind] += max(0.0, weight)

    total = sum(cleaned.values())
    if total <= 0:
        if ratios:
            logger.warning("Strategy spawn ratios sum to 0, using default distribution")
        cleaned = dict(DEFAULT_STRATEGY_RATIOS)
        total = sum(cleaned.values())

    # Already normalised input passes through untouched so re-imports are exact
    if abs(total - 1.0) <= _NORMALIZED_TOLERANCE:
        return {kind: cleaned[kind] for kind in StrategyKind}
    return {kind: cleaned[kind] / total for kind in StrategyKind}


def pick_strategy(ratios: Mapping[StrategyKind, float], rng: random.Random) -> StrategyKind:
    """Weighted draw of a strategy kind.

    Args:
        ratios: Normalised ratios (see normalize_ratios)
        rng: The world RNG

    Returns:
        The chosen StrategyKind
    """
    roll = rng.random() * sum(ratios.values())
    chosen = StrategyKind.RANDOM
    for kind in StrategyKind:
        weight = ratios.get(kind, 0.0)
        if weight <= 0:
            continue
        chosen = kind
        roll -= weight
        if roll <= 0:
            return kind
    # Float rounding can leave a sliver; fall back to the last weighted kind
    return chosen


def pick_other_strategy(current: StrategyKind, rng: random.Random) -> StrategyKind:
    """Uniformly pick a strategy different from ``current``."""
    others = [kind for kind in StrategyKind if kind is not current]
    return rng.choice(others)
