"""Payoff matrix for agent-agent encounters.

The matrix stores one canonical ordering per unordered action pair
(FIGHT before SHARE before FLEE). Looking up the reverse ordering swaps the
delta pair. IGNORE is not part of the matrix: any encounter where either
side ignores the other yields (0, 0).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from arena.config.interaction import PAYOFF
from arena.strategies.base import Action

logger = logging.getLogger(__name__)

DeltaPair = Tuple[float, float]

# Canonical ordering used for keys ("FIGHT_SHARE", never "SHARE_FIGHT")
ACTION_ORDER = (Action.FIGHT, Action.SHARE, Action.FLEE)

PAYOFF_KEYS = tuple(
    f"{first.value}_{second.value}"
    for index, first in enumerate(ACTION_ORDER)
    for second in ACTION_ORDER[index:]
)

_ZERO: DeltaPair = (0.0, 0.0)


def payoff_key(first: Action, second: Action) -> Tuple[str, bool]:
    """Return the canonical key for an action pair and whether it was mirrored."""
    if ACTION_ORDER.index(first) <= ACTION_ORDER.index(second):
        return f"{first.value}_{second.value}", False
    return f"{second.value}_{first.value}", True


def _default_entries() -> Dict[str, DeltaPair]:
    return {key: (float(a), float(b)) for key, (a, b) in PAYOFF.items()}


@dataclass(frozen=True)
class PayoffMatrix:
    """Immutable lookup from an action pair to an energy-delta pair.

    Attributes:
        entries: Canonical key -> (first delta, second delta)
    """

    entries: Mapping[str, DeltaPair] = field(default_factory=_default_entries)

    def lookup(self, first: Action, second: Action) -> DeltaPair:
        """Energy deltas for ``first`` (caller) and ``second`` (opponent)."""
        if first is Action.IGNORE or second is Action.IGNORE:
            return _ZERO
        key, mirrored = payoff_key(first, second)
        a, b = self.entries.get(key, _ZERO)
        if mirrored:
            return b, a
        return a, b

    def with_entry(self, key: str, deltas: DeltaPair) -> "PayoffMatrix":
        """Return a copy with one canonical entry replaced."""
        if key not in PAYOFF_KEYS:
            raise KeyError(f"Unknown payoff entry: {key}")
        updated = dict(self.entries)
        updated[key] = (float(deltas[0]), float(deltas[1]))
        return PayoffMatrix(updated)

    def to_dict(self) -> Dict[str, list]:
        """Convert to a JSON-friendly dictionary."""
        return {key: [self.entries[key][0], self.entries[key][1]] for key in PAYOFF_KEYS}

    @classmethod
    def from_dict(cls, data: Any) -> "PayoffMatrix":
        """Build a matrix from a mapping, keeping defaults for malformed entries.

        Keys are matched case-insensitively. Each value must be a
        two-element sequence of finite numbers; anything else is logged and
        ignored.
        """
        entries = _default_entries()
        if not isinstance(data, Mapping):
            if data is not None:
                logger.warning("Payoff matrix must be a mapping, got %s", type(data).__name__)
            return cls(entries)

        for raw_key, value in data.items():
            key = str(raw_key).upper()
            if key not in entries:
                logger.warning("Ignoring unknown payoff entry %r", raw_key)
                continue
            pair = _parse_pair(value)
            if pair is None:
                logger.warning("Ignoring malformed payoff entry %s=%r", key, value)
                continue
            entries[key] = pair
        return cls(entries)


def _parse_pair(value: Any):
    if isinstance(value, (str, bytes)) or not hasattr(value, "__len__") or len(value) != 2:
        return None
    try:
        a, b = float(value[0]), float(value[1])
    except (TypeError, ValueError):
        return None
    if a != a or b != b or abs(a) == float("inf") or abs(b) == float("inf"):
        return None
    return a, b
