"""Tests for strategy decisions and spawn ratios."""

from collections import Counter

import pytest

from arena.config.simulation_config import SimulationConfig
from arena.entities.memory import EncounterRecord
from arena.entities.traits import Traits
from arena.strategies.base import Action, Outcome, StrategyKind
from arena.strategies.registry import (
    DEFAULT_STRATEGY_RATIOS,
    get_strategy,
    normalize_ratios,
    parse_strategy_kind,
    pick_other_strategy,
    pick_strategy,
)


@pytest.fixture
def config():
    return SimulationConfig().sanitized()


def _memory_of(action: Action) -> EncounterRecord:
    return EncounterRecord(
        opponent_id=2, last_action=action, outcome=Outcome.LOST, energy_change=-10.0, timestamp=1
    )


def _decide(kind, agent, other, memory, rng, config):
    return get_strategy(kind).decide_action(agent, other, memory, rng, config)


class TestAggressive:
    def test_fights_when_healthy(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.AGGRESSIVE, energy=100.0)
        other = make_agent()
        assert _decide(StrategyKind.AGGRESSIVE, agent, other, None, seeded_rng, config) is Action.FIGHT

    def test_flees_when_low(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.AGGRESSIVE, energy=20.0)
        other = make_agent()
        assert _decide(StrategyKind.AGGRESSIVE, agent, other, None, seeded_rng, config) is Action.FLEE


class TestPassive:
    def test_shares_with_calm_opponent(self, make_agent, seeded_rng, config):
        agent = make_agent()
        other = make_agent(traits=Traits(aggression=0.3))
        assert _decide(StrategyKind.PASSIVE, agent, other, None, seeded_rng, config) is Action.SHARE

    def test_flees_from_aggressive_opponent(self, make_agent, seeded_rng, config):
        agent = make_agent()
        other = make_agent(traits=Traits(aggression=0.9))
        assert _decide(StrategyKind.PASSIVE, agent, other, None, seeded_rng, config) is Action.FLEE


class TestCooperative:
    def test_shares_by_default(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.COOPERATIVE, energy=100.0)
        other = make_agent()
        assert (
            _decide(StrategyKind.COOPERATIVE, agent, other, None, seeded_rng, config)
            is Action.SHARE
        )

    def test_retaliates_when_it_can_afford_to(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.COOPERATIVE, energy=100.0)
        other = make_agent()
        memory = _memory_of(Action.FIGHT)
        assert (
            _decide(StrategyKind.COOPERATIVE, agent, other, memory, seeded_rng, config)
            is Action.FIGHT
        )

    def test_flees_remembered_aggressor_when_weak(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.COOPERATIVE, energy=10.0)
        other = make_agent()
        memory = _memory_of(Action.FIGHT)
        assert (
            _decide(StrategyKind.COOPERATIVE, agent, other, memory, seeded_rng, config)
            is Action.FLEE
        )

    def test_low_energy_shares(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.COOPERATIVE, energy=10.0)
        other = make_agent()
        assert (
            _decide(StrategyKind.COOPERATIVE, agent, other, None, seeded_rng, config)
            is Action.SHARE
        )


class TestTitForTat:
    def test_opens_with_share(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.TIT_FOR_TAT)
        other = make_agent()
        assert (
            _decide(StrategyKind.TIT_FOR_TAT, agent, other, None, seeded_rng, config)
            is Action.SHARE
        )

    @pytest.mark.parametrize(
        "remembered,expected",
        [
            (Action.FIGHT, Action.FIGHT),
            (Action.SHARE, Action.SHARE),
            (Action.FLEE, Action.SHARE),
            (Action.IGNORE, Action.SHARE),
        ],
    )
    def test_mirrors_last_action(self, make_agent, seeded_rng, config, remembered, expected):
        agent = make_agent(StrategyKind.TIT_FOR_TAT)
        other = make_agent()
        memory = _memory_of(remembered)
        assert (
            _decide(StrategyKind.TIT_FOR_TAT, agent, other, memory, seeded_rng, config)
            is expected
        )

    def test_flees_when_low(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.TIT_FOR_TAT, energy=5.0)
        other = make_agent()
        memory = _memory_of(Action.FIGHT)
        assert (
            _decide(StrategyKind.TIT_FOR_TAT, agent, other, memory, seeded_rng, config)
            is Action.FLEE
        )


class TestRandom:
    def test_covers_every_action(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.RANDOM)
        other = make_agent()
        seen = Counter(
            _decide(StrategyKind.RANDOM, agent, other, None, seeded_rng, config)
            for _ in range(200)
        )
        assert set(seen) == set(Action)

    def test_never_fights_when_low(self, make_agent, seeded_rng, config):
        agent = make_agent(StrategyKind.RANDOM, energy=5.0)
        other = make_agent()
        for _ in range(200):
            action = _decide(StrategyKind.RANDOM, agent, other, None, seeded_rng, config)
            assert action is not Action.FIGHT


class TestRatios:
    def test_normalizes_to_one(self):
        ratios = normalize_ratios({"Aggressive": 3, "Passive": 1})
        assert ratios[StrategyKind.AGGRESSIVE] == pytest.approx(0.75)
        assert ratios[StrategyKind.PASSIVE] == pytest.approx(0.25)
        assert ratios[StrategyKind.RANDOM] == 0.0
        assert sum(ratios.values()) == pytest.approx(1.0)

    def test_zero_sum_falls_back_to_defaults(self):
        assert normalize_ratios({"Aggressive": 0, "Passive": -4}) == pytest.approx(
            DEFAULT_STRATEGY_RATIOS
        )
        assert normalize_ratios("garbage") == pytest.approx(DEFAULT_STRATEGY_RATIOS)

    def test_bad_values_count_as_zero(self):
        ratios = normalize_ratios(
            {"Aggressive": "x", "Passive": float("nan"), "Cooperative": 2, "Mystery": 5}
        )
        assert ratios[StrategyKind.COOPERATIVE] == 1.0

    def test_normalized_input_is_unchanged(self):
        ratios = normalize_ratios(DEFAULT_STRATEGY_RATIOS)
        assert ratios == DEFAULT_STRATEGY_RATIOS

    def test_pick_strategy_respects_weights(self, seeded_rng):
        ratios = normalize_ratios({"TitForTat": 1})
        picks = {pick_strategy(ratios, seeded_rng) for _ in range(50)}
        assert picks == {StrategyKind.TIT_FOR_TAT}

    def test_pick_strategy_distribution(self, seeded_rng):
        ratios = normalize_ratios({"Aggressive": 1, "Passive": 1})
        picks = Counter(pick_strategy(ratios, seeded_rng) for _ in range(2000))
        assert set(picks) == {StrategyKind.AGGRESSIVE, StrategyKind.PASSIVE}
        assert 800 < picks[StrategyKind.AGGRESSIVE] < 1200

    def test_pick_other_strategy(self, seeded_rng):
        for kind in StrategyKind:
            for _ in range(20):
                assert pick_other_strategy(kind, seeded_rng) is not kind

    def test_parse_strategy_kind(self):
        assert parse_strategy_kind("TitForTat") is StrategyKind.TIT_FOR_TAT
        assert parse_strategy_kind("tit_for_tat") is StrategyKind.TIT_FOR_TAT
        with pytest.raises(ValueError):
            parse_strategy_kind("Hawk")
