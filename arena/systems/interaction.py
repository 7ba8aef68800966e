"""Interaction system: food consumption and agent-agent encounters.

Food: every live food item within collision radius + food size of a live
agent is eaten by that agent.

Encounters: for each live agent, every live neighbour within the
interaction radius that is not on cooldown and has not already been paired
with it this tick is met once. Both sides choose an action from their
strategy and memory, the payoff matrix gives the energy deltas, FIGHT pays
a surcharge, a FIGHT knocks both agents apart, memories and cooldowns are
updated and agents drained to zero die.

An agent that dies in an encounter is skipped by pairings that have not
started yet; encounters already resolved against it stand.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Set, Tuple

from arena.config.interaction import MAX_RECENT_EVENTS
from arena.config.simulation_config import SimulationConfig
from arena.entities.agent import DEATH_COMBAT, Agent
from arena.strategies.base import Action, Outcome, StrategyKind
from arena.strategies.registry import get_strategy
from arena.systems.base import BaseSystem, SystemResult
from arena.tick_context import TickContext
from arena.update_phases import UpdatePhase, runs_in_phase

logger = logging.getLogger(__name__)


class InteractionKind(Enum):
    """Presentation event types."""

    CONSUME = "consume"
    FIGHT = "fight"
    SHARE = "share"
    FLEE = "flee"


@dataclass(frozen=True)
class InteractionEvent:
    """Something worth drawing an effect for.

    Attributes:
        kind: What happened
        x: Event position (food position, or midpoint of the two agents)
        y: Event position
        agent_ids: Agents involved
        tick: Tick the event happened on
    """

    kind: InteractionKind
    x: float
    y: float
    agent_ids: Tuple[int, ...]
    tick: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "x": self.x,
            "y": self.y,
            "agent_ids": list(self.agent_ids),
            "tick": self.tick,
        }


@dataclass(frozen=True)
class EncounterResolution:
    """Full accounting of one resolved encounter, first agent first.

    ``applied`` is the net delta each side received before clamping:
    ``payoff - surcharge``.
    """

    first_id: int
    second_id: int
    actions: Tuple[Action, Action]
    payoff: Tuple[float, float]
    surcharges: Tuple[float, float]
    applied: Tuple[float, float]
    knockback: bool
    outcomes: Tuple[Outcome, Outcome]


class OutcomeHeatmap:
    """Cumulative strategy-vs-strategy outcome counts.

    Each engaged encounter (no IGNORE on either side) is recorded from both
    sides, so ``cell(a, b)`` holds how strategy ``a`` fared against
    strategy ``b``.
    """

    def __init__(self) -> None:
        self._cells: Dict[Tuple[StrategyKind, StrategyKind], Dict[str, int]] = {}

    def record(self, own: StrategyKind, other: StrategyKind, outcome: Outcome) -> None:
        cell = self._cells.get((own, other))
        if cell is None:
            cell = self._cells[(own, other)] = {"wins": 0, "losses": 0, "ties": 0, "total": 0}
        if outcome is Outcome.WON:
            cell["wins"] += 1
        elif outcome is Outcome.LOST:
            cell["losses"] += 1
        else:
            cell["ties"] += 1
        cell["total"] += 1

    def cell(self, own: StrategyKind, other: StrategyKind) -> Dict[str, int]:
        return dict(self._cells.get((own, other), {"wins": 0, "losses": 0, "ties": 0, "total": 0}))

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, int]]]:
        """Nested {own: {other: counts}} keyed by strategy display names."""
        return {
            own.value: {other.value: self.cell(own, other) for other in StrategyKind}
            for own in StrategyKind
        }

    def clear(self) -> None:
        self._cells.clear()


@runs_in_phase(UpdatePhase.INTERACTION)
class InteractionSystem(BaseSystem):
    """Resolves food consumption and pairwise encounters."""

    def __init__(self, world) -> None:
        super().__init__(world, "Interaction")
        self._max_events = MAX_RECENT_EVENTS
        self._events: Deque[InteractionEvent] = deque(maxlen=MAX_RECENT_EVENTS)
        self._heatmap = OutcomeHeatmap()
        self._performance_mode = False
        self._food_eaten = 0
        self._encounters = 0
        self._fights = 0
        self._combat_deaths = 0

    def set_performance_mode(self, enabled: bool) -> None:
        """Skip event and heatmap bookkeeping when enabled."""
        self._performance_mode = enabled
        if enabled:
            self._events.clear()

    @property
    def performance_mode(self) -> bool:
        return self._performance_mode

    def get_recent_events(self) -> List[InteractionEvent]:
        """Events produced by the last tick (oldest first)."""
        return list(self._events)

    def get_heatmap(self) -> Dict[str, Dict[str, Dict[str, int]]]:
        return self._heatmap.to_dict()

    @property
    def heatmap(self) -> OutcomeHeatmap:
        return self._heatmap

    def _do_update(self, ctx: TickContext) -> SystemResult:
        max_events = ctx.config.interaction.max_recent_events
        if max_events != self._max_events:
            self._max_events = max_events
            self._events = deque(maxlen=max_events)
        else:
            self._events.clear()

        for agent in ctx.agents:
            if agent.alive:
                agent.tick_cooldowns()

        eaten = self._consume_food(ctx)
        encounters, deaths = self._resolve_encounters(ctx)

        self._food_eaten += eaten
        self._combat_deaths += deaths
        return SystemResult(
            entities_affected=encounters * 2,
            entities_removed=eaten + deaths,
            details={"food_eaten": eaten, "encounters": encounters, "combat_deaths": deaths},
        )

    def _consume_food(self, ctx: TickContext) -> int:
        reach = ctx.config.interaction.food_reach
        eaten = 0
        for agent in ctx.agents:
            if not agent.alive:
                continue
            for food in ctx.food_grid.query_radius(agent.pos, reach):
                if not food.alive:
                    continue
                agent.gain_energy(food.consume())
                eaten += 1
                self._add_event(
                    InteractionKind.CONSUME, food.pos.x, food.pos.y, (agent.id,), ctx.tick
                )
        return eaten

    def _resolve_encounters(self, ctx: TickContext) -> Tuple[int, int]:
        radius = ctx.config.interaction.interaction_radius
        resolved: Set[Tuple[int, int]] = set()
        encounters = 0
        deaths = 0
        for agent in ctx.agents:
            if not agent.alive:
                continue
            for other in ctx.agent_grid.query_near(agent, radius):
                if not agent.alive:
                    break
                if not other.alive or other.id == agent.id:
                    continue
                if agent.is_on_cooldown(other.id):
                    continue
                pair = (agent.id, other.id) if agent.id < other.id else (other.id, agent.id)
                if pair in resolved:
                    continue
                resolved.add(pair)

                self.resolve_encounter(agent, other, ctx.tick, ctx.config, ctx.rng)
                encounters += 1
                for participant in (agent, other):
                    if not participant.alive:
                        deaths += 1
        return encounters, deaths

    def resolve_encounter(
        self,
        first: Agent,
        second: Agent,
        tick: int,
        config: SimulationConfig,
        rng,
    ) -> EncounterResolution:
        """Resolve one encounter between two live agents.

        Args:
            first: The agent whose turn it is
            second: Its neighbour
            tick: Current tick (memory timestamp)
            config: Configuration for this tick
            rng: The world RNG

        Returns:
            EncounterResolution with every intermediate quantity
        """
        rules = config.interaction

        first_action = get_strategy(first.strategy).decide_action(
            first, second, first.recall(second.id), rng, config
        )
        second_action = get_strategy(second.strategy).decide_action(
            second, first, second.recall(first.id), rng, config
        )

        payoff = rules.payoff.lookup(first_action, second_action)
        engaged = first_action is not Action.IGNORE and second_action is not Action.IGNORE
        surcharges = (
            rules.fight_cost if engaged and first_action is Action.FIGHT else 0.0,
            rules.fight_cost if engaged and second_action is Action.FIGHT else 0.0,
        )
        applied = (payoff[0] - surcharges[0], payoff[1] - surcharges[1])

        first.energy += applied[0]
        second.energy += applied[1]
        first.clamp_energy()
        second.clamp_energy()

        knockback = first_action is Action.FIGHT or second_action is Action.FIGHT
        if knockback:
            self._knock_apart(first, second, rules.knockback_force)

        outcomes = (
            Outcome.classify(applied[0], applied[1]),
            Outcome.classify(applied[1], applied[0]),
        )
        first.remember_encounter(second.id, second_action, outcomes[0], applied[0], tick)
        second.remember_encounter(first.id, first_action, outcomes[1], applied[1], tick)

        cooldown = rules.interaction_cooldown
        first.set_cooldown(second.id, cooldown)
        second.set_cooldown(first.id, cooldown)

        for agent in (first, second):
            if agent.is_exhausted:
                agent.mark_dead(DEATH_COMBAT)

        self._encounters += 1
        if knockback:
            self._fights += 1

        if not self._performance_mode:
            if engaged:
                self._heatmap.record(first.strategy, second.strategy, outcomes[0])
                self._heatmap.record(second.strategy, first.strategy, outcomes[1])
            kind = self._event_kind(first_action, second_action)
            if kind is not None:
                self._add_event(
                    kind,
                    (first.pos.x + second.pos.x) / 2,
                    (first.pos.y + second.pos.y) / 2,
                    (first.id, second.id),
                    tick,
                )

        return EncounterResolution(
            first_id=first.id,
            second_id=second.id,
            actions=(first_action, second_action),
            payoff=payoff,
            surcharges=surcharges,
            applied=applied,
            knockback=knockback,
            outcomes=outcomes,
        )

    @staticmethod
    def _knock_apart(first: Agent, second: Agent, force: float) -> None:
        axis = second.pos - first.pos
        if axis.length_squared() == 0:
            axis.set(1.0, 0.0)
        axis.normalize_inplace().mul_inplace(force)
        second.apply_impulse(axis)
        first.apply_impulse(-axis)

    @staticmethod
    def _event_kind(first: Action, second: Action) -> Optional[InteractionKind]:
        if first is Action.FIGHT or second is Action.FIGHT:
            return InteractionKind.FIGHT
        if first is Action.SHARE and second is Action.SHARE:
            return InteractionKind.SHARE
        if first is Action.FLEE or second is Action.FLEE:
            return InteractionKind.FLEE
        return None

    def _add_event(
        self,
        kind: InteractionKind,
        x: float,
        y: float,
        agent_ids: Tuple[int, ...],
        tick: int,
    ) -> None:
        if self._performance_mode or self._max_events <= 0:
            return
        self._events.append(InteractionEvent(kind, x, y, agent_ids, tick))

    def reset(self) -> None:
        super().reset()
        self._events.clear()
        self._heatmap.clear()
        self._food_eaten = 0
        self._encounters = 0
        self._fights = 0
        self._combat_deaths = 0

    def get_debug_info(self) -> Dict[str, Any]:
        info = super().get_debug_info()
        info.update(
            {
                "food_eaten": self._food_eaten,
                "encounters": self._encounters,
                "fights": self._fights,
                "combat_deaths": self._combat_deaths,
                "performance_mode": self._performance_mode,
            }
        )
        return info
