"""Update phase definitions for explicit execution ordering.

One tick runs its systems strictly in phase order, each phase completing
before the next begins:

    MOVEMENT -> INTERACTION -> EVOLUTION -> CLEANUP

Later phases read kinematic and energy state written by earlier ones, so
the order is part of the simulation's semantics.
Systems declare their phase with ``@runs_in_phase``; the World sorts its
systems by that declaration.
"""

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

__all__ = [
    "UpdatePhase",
    "PHASE_DESCRIPTIONS",
    "runs_in_phase",
    "get_system_phase",
]

if TYPE_CHECKING:
    from arena.systems.base import BaseSystem


class UpdatePhase(Enum):
    """Phases of a simulation tick, in execution order."""

    MOVEMENT = 1  # Steering, integration, boundaries, metabolism
    INTERACTION = 2  # Food consumption, agent encounters
    EVOLUTION = 3  # Ageing, reproduction, population floor
    CLEANUP = 4  # Remove dead entities, return them to pools


PHASE_DESCRIPTIONS: Dict[UpdatePhase, str] = {
    UpdatePhase.MOVEMENT: "Steering and moving agents",
    UpdatePhase.INTERACTION: "Resolving food and agent encounters",
    UpdatePhase.EVOLUTION: "Ageing, reproducing and enforcing the population floor",
    UpdatePhase.CLEANUP: "Removing dead entities",
}


def runs_in_phase(phase: UpdatePhase) -> Callable:
    """Decorator to declare which phase a system runs in.

    Example:
        @runs_in_phase(UpdatePhase.MOVEMENT)
        class MovementSystem(BaseSystem):
            def _do_update(self, ctx: TickContext) -> SystemResult:
                ...
    """

    def decorator(cls):
        cls._phase = phase
        return cls

    return decorator


def get_system_phase(system: "BaseSystem") -> Optional[UpdatePhase]:
    """Get the phase a system is declared to run in."""
    return getattr(system, "_phase", None)
