"""Tests for food consumption and pairwise encounter resolution."""

import pytest

from arena.entities.traits import Traits
from arena.strategies.base import Action, Outcome, StrategyKind
from arena.systems.interaction import InteractionKind


class _FixedStrategy:
    def __init__(self, action):
        self.action = action

    def decide_action(self, agent, other, memory, rng, config):
        return self.action


def _resolve(world, first, second, tick=1):
    return world.interaction.resolve_encounter(first, second, tick, world.config, world.rng)


class TestResolveEncounter:
    def test_share_share_gains_without_knockback(self, empty_world):
        first = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.PASSIVE, 100.0)
        second = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.PASSIVE, 100.0)
        vel_before = (first.vel.copy(), second.vel.copy())

        result = _resolve(empty_world, first, second)

        assert result.actions == (Action.SHARE, Action.SHARE)
        assert result.applied == (15.0, 15.0)
        assert result.knockback is False
        assert first.energy == 115.0
        assert second.energy == 115.0
        assert first.vel == vel_before[0]
        assert second.vel == vel_before[1]
        assert first.alive and second.alive
        assert result.outcomes == (Outcome.TIE, Outcome.TIE)

    def test_fight_against_share_pays_surcharge(self, empty_world):
        hawk = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.AGGRESSIVE, 100.0)
        dove = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.PASSIVE, 100.0)

        result = _resolve(empty_world, hawk, dove)

        assert result.actions == (Action.FIGHT, Action.SHARE)
        assert result.payoff == (30.0, -10.0)
        assert result.surcharges == (10.0, 0.0)
        assert result.applied == (20.0, -10.0)
        assert hawk.energy == 120.0
        assert dove.energy == 90.0
        assert result.outcomes == (Outcome.WON, Outcome.LOST)

    def test_applied_delta_is_payoff_minus_surcharge(self, empty_world):
        pairs = [
            (StrategyKind.AGGRESSIVE, StrategyKind.AGGRESSIVE),
            (StrategyKind.AGGRESSIVE, StrategyKind.PASSIVE),
            (StrategyKind.PASSIVE, StrategyKind.AGGRESSIVE),
            (StrategyKind.TIT_FOR_TAT, StrategyKind.COOPERATIVE),
            (StrategyKind.RANDOM, StrategyKind.RANDOM),
        ]
        payoff = empty_world.config.interaction.payoff
        fight_cost = empty_world.config.interaction.fight_cost
        for kind_a, kind_b in pairs * 5:
            first = empty_world.spawn_agent(100, 100, Traits(), kind_a, 100.0)
            second = empty_world.spawn_agent(110, 100, Traits(), kind_b, 100.0)
            result = _resolve(empty_world, first, second)

            expected = payoff.lookup(*result.actions)
            assert result.payoff == expected
            engaged = Action.IGNORE not in result.actions
            for side in (0, 1):
                surcharge = fight_cost if engaged and result.actions[side] is Action.FIGHT else 0.0
                assert result.surcharges[side] == surcharge
                assert result.applied[side] == expected[side] - surcharge
            assert first.energy == pytest.approx(100.0 + result.applied[0])
            assert second.energy == pytest.approx(100.0 + result.applied[1])

    def test_knockback_pushes_agents_apart(self, empty_world):
        first = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.AGGRESSIVE, 100.0)
        second = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.AGGRESSIVE, 100.0)
        first_vel = first.vel.copy()
        second_vel = second.vel.copy()
        force = empty_world.config.interaction.knockback_force

        result = _resolve(empty_world, first, second)

        assert result.knockback is True
        assert first.vel.x == pytest.approx(first_vel.x - force)
        assert second.vel.x == pytest.approx(second_vel.x + force)
        assert first.vel.y == pytest.approx(first_vel.y)

    def test_fight_against_ignore_skips_surcharge(self, empty_world, monkeypatch):
        strategies = {
            StrategyKind.AGGRESSIVE: _FixedStrategy(Action.FIGHT),
            StrategyKind.RANDOM: _FixedStrategy(Action.IGNORE),
        }
        monkeypatch.setattr("arena.systems.interaction.get_strategy", strategies.__getitem__)
        first = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.AGGRESSIVE, 100.0)
        second = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.RANDOM, 100.0)

        result = _resolve(empty_world, first, second)

        assert result.payoff == (0.0, 0.0)
        assert result.surcharges == (0.0, 0.0)
        assert first.energy == 100.0
        assert second.energy == 100.0
        # Coincident agents are still separated along the x axis
        assert result.knockback is True

    def test_memory_and_cooldowns_are_symmetric(self, empty_world):
        hawk = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.AGGRESSIVE, 100.0)
        dove = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.PASSIVE, 100.0)

        _resolve(empty_world, hawk, dove, tick=9)

        hawk_memory = hawk.recall(dove.id)
        dove_memory = dove.recall(hawk.id)
        assert hawk_memory.last_action is Action.SHARE
        assert hawk_memory.outcome is Outcome.WON
        assert hawk_memory.energy_change == 20.0
        assert hawk_memory.timestamp == 9
        assert dove_memory.last_action is Action.FIGHT
        assert dove_memory.outcome is Outcome.LOST
        cooldown = empty_world.config.interaction.interaction_cooldown
        assert hawk.cooldowns[dove.id] == cooldown
        assert dove.cooldowns[hawk.id] == cooldown

    def test_drained_agent_dies_in_combat(self, empty_world):
        first = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.AGGRESSIVE, 30.0)
        second = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.AGGRESSIVE, 100.0)

        _resolve(empty_world, first, second)

        assert first.energy == 0.0
        assert not first.alive
        assert first.death_cause == "combat"
        assert second.alive
        assert second.energy == 70.0


class TestInteractionPhase:
    def test_each_pair_meets_once_per_tick(self, empty_world):
        first = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.PASSIVE, 100.0)
        second = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.PASSIVE, 100.0)

        result = empty_world.interaction.update(empty_world.build_context())

        assert result.details["encounters"] == 1
        assert first.energy == 115.0
        assert second.energy == 115.0

    def test_cooldown_blocks_repeat_encounters(self, empty_world):
        first = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.PASSIVE, 100.0)
        second = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.PASSIVE, 100.0)

        empty_world.interaction.update(empty_world.build_context())
        result = empty_world.interaction.update(empty_world.build_context())

        assert result.details["encounters"] == 0
        assert first.energy == 115.0
        assert second.energy == 115.0

    def test_agents_out_of_range_do_not_meet(self, empty_world):
        empty_world.spawn_agent(100, 100, Traits(), StrategyKind.PASSIVE, 100.0)
        empty_world.spawn_agent(131, 100, Traits(), StrategyKind.PASSIVE, 100.0)

        result = empty_world.interaction.update(empty_world.build_context())

        assert result.details["encounters"] == 0

    def test_dead_agent_skips_later_pairings(self, empty_world):
        doomed = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.AGGRESSIVE, 30.0)
        rival = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.AGGRESSIVE, 100.0)
        bystander = empty_world.spawn_agent(100, 115, Traits(), StrategyKind.PASSIVE, 100.0)

        empty_world.interaction.update(empty_world.build_context())

        assert not doomed.alive
        assert doomed.recall(rival.id) is not None
        assert doomed.recall(bystander.id) is None
        assert bystander.recall(doomed.id) is None
        # The bystander still meets the surviving rival
        assert bystander.recall(rival.id) is not None

    def test_food_within_reach_is_eaten(self, empty_world):
        agent = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.PASSIVE, 100.0)
        near = empty_world.acquire_food(115, 100)
        far = empty_world.acquire_food(130, 100)

        empty_world.interaction.update(empty_world.build_context())

        assert not near.alive
        assert far.alive
        assert agent.energy == 125.0
        events = empty_world.recent_events
        assert [event.kind for event in events] == [InteractionKind.CONSUME]
        assert events[0].agent_ids == (agent.id,)

    def test_events_are_cleared_each_tick(self, empty_world):
        empty_world.spawn_agent(100, 100, Traits(), StrategyKind.PASSIVE, 100.0)
        empty_world.acquire_food(105, 100)

        empty_world.interaction.update(empty_world.build_context())
        assert len(empty_world.recent_events) == 1
        empty_world.interaction.update(empty_world.build_context())
        assert empty_world.recent_events == []

    def test_performance_mode_skips_bookkeeping(self, empty_world):
        empty_world.set_performance_mode(True)
        empty_world.spawn_agent(100, 100, Traits(), StrategyKind.PASSIVE, 100.0)
        empty_world.spawn_agent(110, 100, Traits(), StrategyKind.PASSIVE, 100.0)

        empty_world.interaction.update(empty_world.build_context())

        assert empty_world.recent_events == []
        assert empty_world.heatmap["Passive"]["Passive"]["total"] == 0

    def test_heatmap_records_both_sides(self, empty_world):
        hawk = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.AGGRESSIVE, 100.0)
        dove = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.PASSIVE, 100.0)

        _resolve(empty_world, hawk, dove)

        heatmap = empty_world.heatmap
        assert heatmap["Aggressive"]["Passive"] == {"wins": 1, "losses": 0, "ties": 0, "total": 1}
        assert heatmap["Passive"]["Aggressive"] == {"wins": 0, "losses": 1, "ties": 0, "total": 1}

    def test_heatmap_skips_ignored_encounters(self, empty_world, monkeypatch):
        monkeypatch.setattr(
            "arena.systems.interaction.get_strategy", lambda kind: _FixedStrategy(Action.IGNORE)
        )
        first = empty_world.spawn_agent(100, 100, Traits(), StrategyKind.RANDOM, 100.0)
        second = empty_world.spawn_agent(110, 100, Traits(), StrategyKind.RANDOM, 100.0)

        _resolve(empty_world, first, second)

        assert empty_world.heatmap["Random"]["Random"] == {
            "wins": 0,
            "losses": 0,
            "ties": 0,
            "total": 0,
        }
        # The encounter still counts for memory and cooldowns
        assert first.is_on_cooldown(second.id)
