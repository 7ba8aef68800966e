"""Encounter strategies (hawk, dove, cooperator, tit-for-tat, random)."""

from arena.strategies.base import Action, Outcome, Strategy, StrategyKind
from arena.strategies.registry import (
    DEFAULT_STRATEGY_RATIOS,
    get_strategy,
    normalize_ratios,
    parse_strategy_kind,
    pick_other_strategy,
    pick_strategy,
)

__all__ = [
    "Action",
    "DEFAULT_STRATEGY_RATIOS",
    "Outcome",
    "Strategy",
    "StrategyKind",
    "get_strategy",
    "normalize_ratios",
    "parse_strategy_kind",
    "pick_other_strategy",
    "pick_strategy",
]
