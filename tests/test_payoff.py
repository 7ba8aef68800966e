"""Tests for the payoff matrix."""

import pytest

from arena.payoff import PAYOFF_KEYS, PayoffMatrix, payoff_key
from arena.strategies.base import Action


class TestLookup:
    def test_default_entries(self):
        matrix = PayoffMatrix()
        assert matrix.lookup(Action.FIGHT, Action.FIGHT) == (-20.0, -20.0)
        assert matrix.lookup(Action.FIGHT, Action.SHARE) == (30.0, -10.0)
        assert matrix.lookup(Action.SHARE, Action.SHARE) == (15.0, 15.0)
        assert matrix.lookup(Action.FLEE, Action.FLEE) == (0.0, 0.0)

    def test_reverse_order_is_mirrored(self):
        matrix = PayoffMatrix()
        assert matrix.lookup(Action.SHARE, Action.FIGHT) == (-10.0, 30.0)
        assert matrix.lookup(Action.FLEE, Action.FIGHT) == (0.0, 10.0)
        assert matrix.lookup(Action.FLEE, Action.SHARE) == (0.0, 5.0)

    @pytest.mark.parametrize("other", list(Action))
    def test_ignore_is_always_zero(self, other):
        matrix = PayoffMatrix()
        assert matrix.lookup(Action.IGNORE, other) == (0.0, 0.0)
        assert matrix.lookup(other, Action.IGNORE) == (0.0, 0.0)

    def test_payoff_key_canonical(self):
        assert payoff_key(Action.SHARE, Action.FIGHT) == ("FIGHT_SHARE", True)
        assert payoff_key(Action.FIGHT, Action.FLEE) == ("FIGHT_FLEE", False)


class TestEditing:
    def test_with_entry_returns_new_matrix(self):
        matrix = PayoffMatrix()
        edited = matrix.with_entry("SHARE_SHARE", (20, 20))
        assert edited.lookup(Action.SHARE, Action.SHARE) == (20.0, 20.0)
        assert matrix.lookup(Action.SHARE, Action.SHARE) == (15.0, 15.0)

    def test_with_entry_rejects_unknown_key(self):
        with pytest.raises(KeyError):
            PayoffMatrix().with_entry("SHARE_FIGHT", (1, 1))

    def test_to_dict_has_every_canonical_key(self):
        data = PayoffMatrix().to_dict()
        assert tuple(data) == PAYOFF_KEYS
        assert data["FIGHT_SHARE"] == [30.0, -10.0]


class TestFromDict:
    def test_round_trip(self):
        matrix = PayoffMatrix().with_entry("FIGHT_FLEE", (12.5, -1))
        assert PayoffMatrix.from_dict(matrix.to_dict()) == matrix

    def test_keys_are_case_insensitive(self):
        matrix = PayoffMatrix.from_dict({"share_share": [1, 2]})
        assert matrix.lookup(Action.SHARE, Action.SHARE) == (1.0, 2.0)

    def test_malformed_entries_keep_defaults(self, caplog):
        matrix = PayoffMatrix.from_dict(
            {
                "FIGHT_FIGHT": "nope",
                "FIGHT_SHARE": [1],
                "SHARE_SHARE": [float("nan"), 1],
                "SHARE_FIGHT": [5, 5],
                "FLEE_FLEE": [3, 4],
            }
        )
        assert matrix.lookup(Action.FIGHT, Action.FIGHT) == (-20.0, -20.0)
        assert matrix.lookup(Action.FIGHT, Action.SHARE) == (30.0, -10.0)
        assert matrix.lookup(Action.SHARE, Action.SHARE) == (15.0, 15.0)
        assert matrix.lookup(Action.FLEE, Action.FLEE) == (3.0, 4.0)
        assert "Ignoring" in caplog.text

    def test_non_mapping_gives_defaults(self):
        assert PayoffMatrix.from_dict([1, 2, 3]) == PayoffMatrix()
        assert PayoffMatrix.from_dict(None) == PayoffMatrix()
