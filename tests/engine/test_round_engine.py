"""
Bank Dice - Round Engine Tests

Roll arithmetic, zone transitions, banking and roller rotation.
"""

import pytest

from src.engine.base import RollKind, RollRecord, RoundState, Zone
from src.engine.errors import ConfigurationError, InvalidRollValue
from src.engine.round_engine import RoundEngine


def values(engine, order, *totals):
    for total in totals:
        engine.apply_roll(RollKind.VALUE, total, order)


# === Start Game ===


class TestStartGame:
    """Tests for RoundEngine.start_game()."""

    @pytest.mark.parametrize("rounds", [7, 18, 30])
    @pytest.mark.parametrize("count", [3, 6, 8])
    def test_valid_setup(self, rounds, count):
        ids = [f"p{i}" for i in range(count)]
        e = RoundEngine()
        e.start_game(ids, rounds)
        assert e.max_rounds == rounds
        assert e.round_number == 1
        assert e.active_players == frozenset(ids)

    def test_rejects_rounds_below_7(self, three_ids):
        with pytest.raises(ConfigurationError, match="Rounds"):
            RoundEngine().start_game(three_ids, 6)

    def test_rejects_rounds_above_30(self, three_ids):
        with pytest.raises(ConfigurationError, match="Rounds"):
            RoundEngine().start_game(three_ids, 31)

    def test_rejects_players_below_3(self):
        with pytest.raises(ConfigurationError, match="Players"):
            RoundEngine().start_game(["a", "b"], 7)

    def test_rejects_players_above_8(self):
        with pytest.raises(ConfigurationError, match="Players"):
            RoundEngine().start_game([f"p{i}" for i in range(9)], 7)

    def test_accepts_generator(self):
        e = RoundEngine()
        e.start_game((f"p{i}" for i in range(3)), 7)
        assert len(e.active_players) == 3

    def test_restart_resets_round_number(self, engine, three_ids):
        values(engine, three_ids, 6, 6, 6)
        engine.force_end_round()
        engine.next_round(three_ids)
        engine.start_game(three_ids, 10)
        assert engine.round_number == 1
        assert engine.pot == 0
        assert engine.max_rounds == 10

    def test_state_snapshot(self, engine, three_ids):
        assert engine.state == RoundState(
            round_number=1, roll_count=0, pot=0,
            active_players=frozenset(three_ids), roller_index=0,
        )


# === Safety Zone ===


class TestSafetyZone:
    """Rolls 1-3 only add to the pot."""

    def test_seven_adds_70(self, engine, three_ids):
        result = engine.apply_roll(RollKind.SEVEN, None, three_ids)
        assert result.round_ended_by_seven is False
        assert result.pot_delta == 70
        assert result.zone is Zone.SAFETY
        assert engine.pot == 70
        assert engine.roll_count == 1
        assert not engine.is_round_over

    def test_doubles_adds_sum(self, engine, three_ids):
        result = engine.apply_roll(RollKind.DOUBLES, 8, three_ids)
        assert result.round_ended_by_seven is False
        assert engine.pot == 8

    def test_doubles_does_not_double(self, engine, three_ids):
        values(engine, three_ids, 10)
        engine.apply_roll(RollKind.DOUBLES, 4, three_ids)
        assert engine.pot == 14

    def test_value_adds_sum(self, engine, three_ids):
        engine.apply_roll(RollKind.VALUE, 9, three_ids)
        assert engine.pot == 9

    def test_three_sevens(self, engine, three_ids):
        for _ in range(3):
            engine.apply_roll(RollKind.SEVEN, None, three_ids)
        assert engine.pot == 210
        assert not engine.is_round_over

    def test_zone_independent_of_kind_order(self, engine, three_ids):
        zones = [
            engine.apply_roll(RollKind.SEVEN, None, three_ids).zone,
            engine.apply_roll(RollKind.DOUBLES, 6, three_ids).zone,
            engine.apply_roll(RollKind.VALUE, 5, three_ids).zone,
            engine.apply_roll(RollKind.VALUE, 5, three_ids).zone,
        ]
        assert zones == [Zone.SAFETY, Zone.SAFETY, Zone.SAFETY, Zone.PRESS]

    def test_is_safety_zone_query(self, engine, three_ids):
        assert engine.is_safety_zone
        values(engine, three_ids, 4, 4)
        assert engine.is_safety_zone
        values(engine, three_ids, 4)
        assert not engine.is_safety_zone

    def test_string_kind_accepted(self, engine, three_ids):
        engine.apply_roll("value", 5, three_ids)
        assert engine.pot == 5


# === Banking Window ===


class TestCanBankNow:
    """Banking opens at roll 3 and stays open."""

    def test_not_allowed_before_roll_3(self, engine, three_ids):
        assert engine.can_bank_now is False
        values(engine, three_ids, 5)
        assert engine.can_bank_now is False
        values(engine, three_ids, 5)
        assert engine.can_bank_now is False
        values(engine, three_ids, 5)
        assert engine.can_bank_now is True

    def test_stays_open(self, engine, three_ids):
        values(engine, three_ids, 5, 5, 5, 5, 5, 5)
        assert engine.can_bank_now is True

    def test_scenario_a(self, engine, three_ids):
        values(engine, three_ids, 6, 6, 6)
        assert engine.pot == 18
        assert engine.can_bank_now is True


# === Press Zone ===


class TestPressZone:
    """From roll 4, doubles double and a seven wipes the round."""

    def test_scenario_b_doubles_doubles_pot(self, engine, three_ids):
        values(engine, three_ids, 6, 6, 6)
        result = engine.apply_roll(RollKind.DOUBLES, 4, three_ids)
        assert result.round_ended_by_seven is False
        assert result.zone is Zone.PRESS
        assert result.pot_delta == 18
        assert engine.pot == 36

    def test_doubles_multiply_not_add(self, engine, three_ids):
        values(engine, three_ids, 5, 5, 5)
        engine.apply_roll(RollKind.DOUBLES, 12, three_ids)
        assert engine.pot == 30

    def test_repeated_doubles(self, engine, three_ids):
        values(engine, three_ids, 2, 2, 2)
        engine.apply_roll(RollKind.DOUBLES, 2, three_ids)
        engine.apply_roll(RollKind.DOUBLES, 2, three_ids)
        assert engine.pot == 24

    def test_value_adds(self, engine, three_ids):
        values(engine, three_ids, 6, 6, 6, 8)
        assert engine.pot == 26

    def test_seven_wipes_pot_and_ends_round(self, engine, three_ids):
        values(engine, three_ids, 10, 10, 10)
        result = engine.apply_roll(RollKind.SEVEN, None, three_ids)
        assert result.round_ended_by_seven is True
        assert result.pot_delta == -30
        assert engine.pot == 0

    def test_force_end_round_clears_active(self, engine, three_ids):
        values(engine, three_ids, 10, 10, 10)
        engine.apply_roll(RollKind.SEVEN, None, three_ids)
        engine.force_end_round()
        assert engine.active_players == frozenset()
        assert engine.is_round_over

    def test_seven_does_not_move_roller(self, engine, three_ids):
        values(engine, three_ids, 10, 10, 10)
        engine.set_roller_index(2, three_ids)
        engine.apply_roll(RollKind.SEVEN, None, three_ids)
        assert engine.roller_index == 2

    def test_record_from_dice_seven(self, engine, three_ids):
        values(engine, three_ids, 10, 10, 10)
        result = engine.apply_record(RollRecord.from_dice(3, 4), three_ids)
        assert result.round_ended_by_seven is True
        assert engine.pot == 0

    def test_record_from_dice_doubles(self, engine, three_ids):
        values(engine, three_ids, 6, 6, 6)
        result = engine.apply_record(RollRecord.from_dice(5, 5), three_ids)
        assert result.zone is Zone.PRESS
        assert engine.pot == 36


# === Invalid Rolls ===


class TestInvalidRolls:
    """Rejected rolls leave the round untouched."""

    @pytest.mark.parametrize("total", [None, 0, 1, 13, 20])
    def test_doubles_out_of_range(self, engine, three_ids, total):
        with pytest.raises(InvalidRollValue, match="Doubles"):
            engine.apply_roll(RollKind.DOUBLES, total, three_ids)

    @pytest.mark.parametrize("total", [None, 1, 13])
    def test_value_out_of_range(self, engine, three_ids, total):
        with pytest.raises(InvalidRollValue, match="Value"):
            engine.apply_roll(RollKind.VALUE, total, three_ids)

    def test_press_zone_doubles_still_validated(self, engine, three_ids):
        values(engine, three_ids, 4, 4, 4)
        with pytest.raises(InvalidRollValue):
            engine.apply_roll(RollKind.DOUBLES, 14, three_ids)
        assert engine.pot == 12

    def test_no_state_mutated(self, engine, three_ids):
        values(engine, three_ids, 4)
        before = engine.state
        with pytest.raises(InvalidRollValue):
            engine.apply_roll(RollKind.VALUE, 13, three_ids)
        assert engine.state == before

    def test_unknown_kind(self, engine, three_ids):
        with pytest.raises(InvalidRollValue, match="Unknown roll kind"):
            engine.apply_roll("snake_eyes", 2, three_ids)
        assert engine.roll_count == 0

    def test_seven_ignores_total(self, engine, three_ids):
        engine.apply_roll(RollKind.SEVEN, 99, three_ids)
        assert engine.pot == 70

    @pytest.mark.parametrize("total", [3, 5, 7, 11])
    def test_odd_doubles_total_accepted(self, engine, three_ids, total):
        """The engine does not check doubles parity; that is an input-layer guard."""
        engine.apply_roll(RollKind.DOUBLES, total, three_ids)
        assert engine.pot == total


# === Banking ===


class TestBankPlayers:
    """Tests for RoundEngine.bank_players()."""

    def test_removes_from_round(self, engine4, four_ids):
        engine4.bank_players([four_ids[1], four_ids[3]])
        assert four_ids[1] not in engine4.active_players
        assert four_ids[3] not in engine4.active_players
        assert four_ids[0] in engine4.active_players
        assert four_ids[2] in engine4.active_players

    def test_idempotent(self, engine4, four_ids):
        engine4.bank_players([four_ids[1]])
        engine4.bank_players([four_ids[1], four_ids[1]])
        assert engine4.active_players == frozenset({four_ids[0], four_ids[2], four_ids[3]})

    def test_unknown_id_is_noop(self, engine4, four_ids):
        engine4.bank_players(["nobody"])
        assert engine4.active_players == frozenset(four_ids)

    def test_round_over_when_all_bank(self, engine, three_ids):
        engine.bank_players(three_ids)
        assert len(engine.active_players) == 0
        assert engine.is_round_over


# === Roller Rotation ===


class TestRollerRotation:
    """Tests for normalize_roller_index() and advance_to_next_roller()."""

    def test_advance_simple(self, engine4, four_ids):
        engine4.advance_to_next_roller(four_ids)
        assert engine4.roller_index == 1

    def test_scenario_d_skips_banked(self, engine4, four_ids):
        engine4.bank_players([four_ids[1]])
        engine4.advance_to_next_roller(four_ids)
        assert engine4.roller_index == 2

    def test_wraps_to_start(self, engine4, four_ids):
        engine4.set_roller_index(3, four_ids)
        engine4.advance_to_next_roller(four_ids)
        assert engine4.roller_index == 0

    def test_wraps_past_banked(self, engine4, four_ids):
        engine4.set_roller_index(2, four_ids)
        engine4.bank_players([four_ids[3], four_ids[0]])
        engine4.advance_to_next_roller(four_ids)
        assert engine4.roller_index == 1

    def test_single_active_stays(self, engine4, four_ids):
        engine4.bank_players(four_ids[:2] + four_ids[3:])
        engine4.set_roller_index(2, four_ids)
        engine4.advance_to_next_roller(four_ids)
        assert engine4.roller_index == 2

    def test_always_lands_on_active(self, engine4, four_ids):
        engine4.bank_players([four_ids[0], four_ids[2]])
        for _ in range(6):
            engine4.advance_to_next_roller(four_ids)
            assert four_ids[engine4.roller_index] in engine4.active_players

    def test_noop_when_nobody_in_round(self, engine, three_ids):
        engine.set_roller_index(1, three_ids)
        engine.force_end_round()
        engine.advance_to_next_roller(three_ids)
        assert engine.roller_index == 1

    def test_normalize_points_to_active(self, engine4, four_ids):
        engine4.set_roller_index(1, four_ids)
        engine4.bank_players([four_ids[1]])
        idx = engine4.normalize_roller_index(four_ids)
        assert idx == 2
        assert four_ids[idx] in engine4.active_players

    def test_normalize_idempotent(self, engine4, four_ids):
        engine4.set_roller_index(2, four_ids)
        assert engine4.normalize_roller_index(four_ids) == 2
        assert engine4.normalize_roller_index(four_ids) == 2

    def test_normalize_wraps(self, engine4, four_ids):
        engine4.set_roller_index(3, four_ids)
        engine4.bank_players([four_ids[3]])
        assert engine4.normalize_roller_index(four_ids) == 0

    def test_normalize_empty_roster(self, engine):
        assert engine.normalize_roller_index([]) == 0

    def test_normalize_nobody_active(self, engine, three_ids):
        engine.set_roller_index(2, three_ids)
        engine.force_end_round()
        assert engine.normalize_roller_index(three_ids) == 0

    def test_roll_normalizes_roller(self, engine4, four_ids):
        engine4.set_roller_index(1, four_ids)
        engine4.bank_players([four_ids[1]])
        engine4.apply_roll(RollKind.VALUE, 6, four_ids)
        assert engine4.roller_index == 2

    def test_roll_does_not_advance_active_roller(self, engine4, four_ids):
        engine4.apply_roll(RollKind.VALUE, 6, four_ids)
        assert engine4.roller_index == 0

    def test_set_roller_index_out_of_range(self, engine, three_ids):
        with pytest.raises(ValueError, match="out of range"):
            engine.set_roller_index(3, three_ids)


# === Next Round ===


class TestNextRound:
    """Tests for RoundEngine.next_round()."""

    def test_resets_pot_and_roll_count(self, engine, three_ids):
        values(engine, three_ids, 6, 6)
        assert engine.pot > 0
        assert engine.roll_count > 0

        engine.next_round(three_ids)
        assert engine.round_number == 2
        assert engine.pot == 0
        assert engine.roll_count == 0
        assert len(engine.active_players) == 3

    def test_restores_banked_players(self, engine, three_ids):
        values(engine, three_ids, 6, 6, 6)
        engine.bank_players(three_ids)
        engine.next_round(three_ids)
        assert engine.active_players == frozenset(three_ids)
        assert engine.can_bank_now is False

    def test_resets_roller(self, engine, three_ids):
        engine.set_roller_index(2, three_ids)
        engine.next_round(three_ids)
        assert engine.roller_index == 0

    def test_increments_by_one(self, engine, three_ids):
        for expected in range(2, 6):
            engine.next_round(three_ids)
            assert engine.round_number == expected

    def test_reset_round_keeps_number(self, engine, three_ids):
        engine.next_round(three_ids)
        values(engine, three_ids, 4)
        engine.reset_round(three_ids)
        assert engine.round_number == 2
        assert engine.pot == 0
