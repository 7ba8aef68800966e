"""Base class for simulation systems.

Every system follows the same contract:

- one responsibility per system
- dependencies injected at construction (the owning World)
- can be disabled without code changes
- declares its UpdatePhase with ``@runs_in_phase``
- reports what it did through a ``SystemResult``
- exposes its state through ``get_debug_info()``
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

__all__ = [
    "SystemResult",
    "BaseSystem",
]

if TYPE_CHECKING:
    from arena.tick_context import TickContext
    from arena.update_phases import UpdatePhase
    from arena.world import World


@dataclass
class SystemResult:
    """Result of one system update.

    Attributes:
        entities_affected: Number of entities that were modified
        entities_spawned: Number of new entities created
        entities_removed: Number of entities killed or consumed
        skipped: Whether the update was skipped (system disabled)
        details: System-specific counters (e.g. {"food_eaten": 3})
    """

    entities_affected: int = 0
    entities_spawned: int = 0
    entities_removed: int = 0
    skipped: bool = False
    details: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def skipped_result() -> "SystemResult":
        """Create a result for when system update was skipped."""
        return SystemResult(skipped=True)


class BaseSystem(ABC):
    """Abstract base class for all simulation systems.

    Subclasses implement ``_do_update``; ``update`` handles the enabled
    check and update counting.
    """

    # Class-level phase declaration (set by @runs_in_phase decorator)
    _phase: Optional["UpdatePhase"] = None

    def __init__(self, world: "World", name: str) -> None:
        """Initialize the system.

        Args:
            world: The owning World (pools and bookkeeping)
            name: Human-readable name for this system
        """
        self._world = world
        self._name = name
        self._enabled = True
        self._update_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @property
    def update_count(self) -> int:
        """Number of times update() has run."""
        return self._update_count

    @property
    def phase(self) -> Optional["UpdatePhase"]:
        return self._phase

    def update(self, ctx: "TickContext") -> SystemResult:
        """Run the system for one tick.

        Args:
            ctx: State of the tick being computed

        Returns:
            SystemResult describing what the system did
        """
        if not self._enabled:
            return SystemResult.skipped_result()

        result = self._do_update(ctx)
        self._update_count += 1
        return result

    @abstractmethod
    def _do_update(self, ctx: "TickContext") -> SystemResult:
        """Implement system-specific update logic."""

    def reset(self) -> None:
        """Forget per-run state. Called by World.reset()."""
        self._update_count = 0

    def get_debug_info(self) -> Dict[str, Any]:
        """Return debug information about this system's state."""
        return {
            "name": self._name,
            "enabled": self._enabled,
            "update_count": self._update_count,
            "phase": self._phase.name if self._phase else None,
        }

    def __repr__(self) -> str:
        phase_str = f", phase={self._phase.name}" if self._phase else ""
        return f"{self.__class__.__name__}(name={self._name!r}, enabled={self._enabled}{phase_str})"
