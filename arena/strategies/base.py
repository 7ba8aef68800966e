"""Strategy contract and the closed sets of actions, outcomes and kinds.

Each strategy is a small stateless object with a single decision function.
The interaction system looks the strategy up by ``StrategyKind`` and asks
it for an ``Action``; strategies never mutate agents themselves.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from arena.config.simulation_config import SimulationConfig
    from arena.entities.agent import Agent
    from arena.entities.memory import EncounterRecord

__all__ = [
    "Action",
    "Outcome",
    "StrategyKind",
    "Strategy",
    "is_low_energy",
    "can_afford_fight",
    "is_stronger",
]


class Action(Enum):
    """What an agent does when it meets another agent."""

    FIGHT = "FIGHT"
    SHARE = "SHARE"
    FLEE = "FLEE"
    IGNORE = "IGNORE"


class Outcome(Enum):
    """How an encounter went from one side's point of view."""

    WON = "won"
    LOST = "lost"
    TIE = "tie"

    @classmethod
    def classify(cls, own_delta: float, other_delta: float) -> "Outcome":
        """Compare net energy deltas of the two sides."""
        if own_delta > other_delta:
            return cls.WON
        if own_delta < other_delta:
            return cls.LOST
        return cls.TIE


class StrategyKind(Enum):
    """The closed set of behavioural policies."""

    AGGRESSIVE = "Aggressive"
    PASSIVE = "Passive"
    COOPERATIVE = "Cooperative"
    TIT_FOR_TAT = "TitForTat"
    RANDOM = "Random"


@runtime_checkable
class Strategy(Protocol):
    """Capability every strategy provides."""

    kind: StrategyKind

    def decide_action(
        self,
        agent: "Agent",
        other: "Agent",
        memory: Optional["EncounterRecord"],
        rng: random.Random,
        config: "SimulationConfig",
    ) -> Action:
        """Choose an action against ``other``.

        Args:
            agent: The deciding agent
            other: The opponent
            memory: What ``agent`` remembers of ``other`` (None on first meeting)
            rng: The world RNG (the only source of randomness allowed)
            config: Current simulation configuration

        Returns:
            The chosen Action
        """
        ...


def is_low_energy(agent: "Agent", config: "SimulationConfig") -> bool:
    """Check if energy is critically low."""
    return agent.energy < config.agents.low_energy_threshold


def can_afford_fight(agent: "Agent", config: "SimulationConfig") -> bool:
    """Check if the agent has enough energy to pay the fight surcharge."""
    rules = config.interaction
    return agent.energy > rules.fight_cost * rules.fight_afford_multiplier


def is_stronger(agent: "Agent", other: "Agent") -> bool:
    """Compare energy weighted by aggression."""
    return agent.energy * agent.traits.aggression > other.energy * other.traits.aggression
