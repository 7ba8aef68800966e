"""The five encounter policies.

Each class is stateless; a single shared instance per kind lives in the
registry. Randomness always comes from the rng argument.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Optional

from arena.strategies.base import (
    Action,
    StrategyKind,
    can_afford_fight,
    is_low_energy,
    is_stronger,
)

if TYPE_CHECKING:
    from arena.config.simulation_config import SimulationConfig
    from arena.entities.agent import Agent
    from arena.entities.memory import EncounterRecord


class AggressiveStrategy:
    """Hawk: always fights unless critically low on energy."""

    kind = StrategyKind.AGGRESSIVE

    def decide_action(
        self,
        agent: "Agent",
        other: "Agent",
        memory: Optional["EncounterRecord"],
        rng: random.Random,
        config: "SimulationConfig",
    ) -> Action:
        if is_low_energy(agent, config):
            return Action.FLEE
        return Action.FIGHT


class PassiveStrategy:
    """Dove: never fights, flees from visibly aggressive agents."""

    kind = StrategyKind.PASSIVE

    def decide_action(
        self,
        agent: "Agent",
        other: "Agent",
        memory: Optional["EncounterRecord"],
        rng: random.Random,
        config: "SimulationConfig",
    ) -> Action:
        if other.traits.aggression > config.interaction.passive_flee_aggression:
            return Action.FLEE
        return Action.SHARE


class CooperativeStrategy:
    """Prefers to share, retaliates against remembered aggressors.

    A cooperative agent that is stronger than its opponent and getting
    hungry will occasionally try to take resources by force.
    """

    kind = StrategyKind.COOPERATIVE

    def decide_action(
        self,
        agent: "Agent",
        other: "Agent",
        memory: Optional["EncounterRecord"],
        rng: random.Random,
        config: "SimulationConfig",
    ) -> Action:
        if memory is not None and memory.last_action is Action.FIGHT:
            if can_afford_fight(agent, config):
                return Action.FIGHT
            return Action.FLEE

        if is_low_energy(agent, config):
            return Action.SHARE

        rules = config.interaction
        if is_stronger(agent, other) and agent.energy < rules.cooperative_hungry_energy:
            if rng.random() < rules.cooperative_fight_chance:
                return Action.FIGHT

        return Action.SHARE


class TitForTatStrategy:
    """Cooperates on first contact, then mirrors the opponent's last action."""

    kind = StrategyKind.TIT_FOR_TAT

    def decide_action(
        self,
        agent: "Agent",
        other: "Agent",
        memory: Optional["EncounterRecord"],
        rng: random.Random,
        config: "SimulationConfig",
    ) -> Action:
        if is_low_energy(agent, config):
            return Action.FLEE

        if memory is None:
            return Action.SHARE

        if memory.last_action is Action.FIGHT:
            if can_afford_fight(agent, config):
                return Action.FIGHT
            return Action.FLEE

        # SHARE, FLEE and IGNORE are all answered with cooperation
        return Action.SHARE


class RandomStrategy:
    """Control baseline: picks uniformly, avoiding fights when starving."""

    kind = StrategyKind.RANDOM

    ALL_ACTIONS = (Action.FIGHT, Action.SHARE, Action.FLEE, Action.IGNORE)
    SAFE_ACTIONS = (Action.SHARE, Action.FLEE, Action.IGNORE)

    def decide_action(
        self,
        agent: "Agent",
        other: "Agent",
        memory: Optional["EncounterRecord"],
        rng: random.Random,
        config: "SimulationConfig",
    ) -> Action:
        if is_low_energy(agent, config):
            return rng.choice(self.SAFE_ACTIONS)
        return rng.choice(self.ALL_ACTIONS)
