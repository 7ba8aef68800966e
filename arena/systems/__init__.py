"""Simulation systems, one per tick phase."""

from arena.systems.base import BaseSystem, SystemResult
from arena.systems.evolution import EvolutionSystem
from arena.systems.interaction import (
    EncounterResolution,
    InteractionEvent,
    InteractionKind,
    InteractionSystem,
    OutcomeHeatmap,
)
from arena.systems.lifecycle import EntityLifecycleSystem
from arena.systems.movement import MovementSystem

__all__ = [
    "BaseSystem",
    "EncounterResolution",
    "EntityLifecycleSystem",
    "EvolutionSystem",
    "InteractionEvent",
    "InteractionKind",
    "InteractionSystem",
    "MovementSystem",
    "OutcomeHeatmap",
    "SystemResult",
]
