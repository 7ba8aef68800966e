"""Entity model: agents, food and their supporting value types."""

from arena.entities.agent import DEATH_COMBAT, DEATH_OLD_AGE, DEATH_STARVATION, Agent
from arena.entities.base import Entity
from arena.entities.food import Food
from arena.entities.memory import EncounterMemory, EncounterRecord
from arena.entities.traits import DEFAULT_TRAITS, TRAIT_BOUNDS, Traits, random_traits

__all__ = [
    "Agent",
    "DEATH_COMBAT",
    "DEATH_OLD_AGE",
    "DEATH_STARVATION",
    "DEFAULT_TRAITS",
    "EncounterMemory",
    "EncounterRecord",
    "Entity",
    "Food",
    "TRAIT_BOUNDS",
    "Traits",
    "random_traits",
]
