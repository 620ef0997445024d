from datetime import datetime, timezone

import pytest

from arenapairing.constants import GUEST_ID
from arenapairing.controllers.rating import RatingManager, apply, compute_delta, expected_score
from arenapairing.exceptions import InvalidOperandException, UnknownReferenceException
from arenapairing.models.enums import DuelOutcome, RecordStatus
from arenapairing.models.rating import RatingLedger
from arenapairing.models.tournament import TournamentConfig


def _manager(**config):
    return RatingManager(TournamentConfig(seed=11, **config))


def test_equal_ratings_win_moves_half_k():
    assert compute_delta(1000, 1000, DuelOutcome.A_WIN, 32) == 16
    assert compute_delta(1000, 1000, DuelOutcome.B_WIN, 32) == -16
    assert compute_delta(1000, 1000, DuelOutcome.DRAW, 32) == 0


def test_delta_rounds_half_up():
    # raw deltas of exactly +0.5 and -0.5
    assert compute_delta(1000, 1000, DuelOutcome.A_WIN, 1) == 1
    assert compute_delta(1000, 1000, DuelOutcome.B_WIN, 1) == 0


def test_expected_score_favours_higher_rating():
    assert expected_score(1200, 1000) > 0.5
    assert expected_score(1000, 1200) < 0.5
    assert expected_score(1200, 1000) + expected_score(1000, 1200) == pytest.approx(1.0)


def test_apply_and_reverse():
    delta = compute_delta(1130, 987, DuelOutcome.B_WIN, 32)
    assert apply(apply(1130, delta), -delta) == 1130


def test_rating_reversal_scenario():
    manager = _manager()
    ledger = manager.open_ledger({"a": 1000, "b": 1000})

    ledger = manager.record_duel(ledger, "a", "b", DuelOutcome.A_WIN)
    assert manager.current_ratings(ledger) == {"a": 1016, "b": 984}

    ledger = manager.cancel_duel(ledger, ledger.records[0].id)
    assert manager.current_ratings(ledger) == {"a": 1000, "b": 1000}
    assert ledger.records[0].status == RecordStatus.CANCELLED


def test_duels_are_zero_sum():
    manager = _manager()
    ledger = manager.open_ledger({"a": 1250, "b": 980, "c": 1105})
    total = sum(manager.current_ratings(ledger).values())

    duels = [
        ("a", "b", DuelOutcome.B_WIN),
        ("b", "c", DuelOutcome.DRAW),
        ("c", "a", DuelOutcome.A_WIN),
        ("a", "c", DuelOutcome.DRAW),
    ]
    for player_a, player_b, outcome in duels:
        ledger = manager.record_duel(ledger, player_a, player_b, outcome)
        assert sum(manager.current_ratings(ledger).values()) == total

    for record in ledger.records:
        assert record.rating_a_after - record.rating_a_before == -(
            record.rating_b_after - record.rating_b_before
        )


def test_cancelling_an_earlier_duel_replays_later_ones():
    manager = _manager()
    ledger = manager.open_ledger({"a": 1000, "b": 1000, "c": 1000})
    ledger = manager.record_duel(ledger, "a", "b", DuelOutcome.A_WIN)
    ledger = manager.record_duel(ledger, "a", "c", DuelOutcome.A_WIN)

    ledger = manager.cancel_duel(ledger, ledger.records[0].id)

    only_second = manager.open_ledger({"a": 1000, "b": 1000, "c": 1000})
    only_second = manager.record_duel(only_second, "a", "c", DuelOutcome.A_WIN)
    assert manager.current_ratings(ledger) == manager.current_ratings(only_second)
    assert ledger.records[1].rating_a_before == 1000
    assert ledger.records[1].delta == 16


def test_guest_rating_never_changes():
    manager = _manager(guest_rating=1200)
    ledger = manager.open_ledger({"a": None})

    ledger = manager.record_duel(ledger, "a", GUEST_ID, DuelOutcome.A_WIN)

    assert manager.rating_of(ledger, GUEST_ID) == 1200
    assert manager.rating_of(ledger, "a") == 1024
    assert GUEST_ID not in manager.current_ratings(ledger)


def test_missing_rating_uses_default():
    manager = _manager(default_rating=1500)
    ledger = manager.open_ledger({"a": None, "b": 1400})
    assert manager.current_ratings(ledger) == {"a": 1500, "b": 1400}


def test_games_played_counts_active_duels():
    manager = _manager()
    ledger = manager.open_ledger({"a": 1000, "b": 1000, "c": 1000})
    ledger = manager.record_duel(ledger, "a", "b", DuelOutcome.DRAW)
    ledger = manager.record_duel(ledger, "a", "c", DuelOutcome.B_WIN)
    ledger = manager.cancel_duel(ledger, ledger.records[1].id)

    assert manager.games_played(ledger, "a") == 1
    assert manager.games_played(ledger, "c") == 0


def test_duel_errors():
    manager = _manager()
    ledger = manager.open_ledger({"a": 1000, "b": 1000})

    with pytest.raises(UnknownReferenceException):
        manager.record_duel(ledger, "a", "zed", DuelOutcome.A_WIN)
    with pytest.raises(InvalidOperandException):
        manager.record_duel(ledger, "a", "a", DuelOutcome.A_WIN)
    with pytest.raises(UnknownReferenceException):
        manager.cancel_duel(ledger, "duel_missing")

    ledger = manager.record_duel(ledger, "a", "b", DuelOutcome.A_WIN)
    ledger = manager.cancel_duel(ledger, ledger.records[0].id)
    with pytest.raises(InvalidOperandException):
        manager.cancel_duel(ledger, ledger.records[0].id)


def test_new_duel_never_reuses_a_ledger_id():
    ledger = _manager().open_ledger({"a": 1000, "b": 1000, "c": 1000})
    ledger = _manager().record_duel(ledger, "a", "b", DuelOutcome.A_WIN)

    # A manager seeded like the first one draws the same id first
    ledger = _manager().record_duel(ledger, "c", "a", DuelOutcome.A_WIN)
    first, second = ledger.records
    assert first.id != second.id

    ledger = _manager().cancel_duel(ledger, second.id)
    assert [r.status for r in ledger.records] == [RecordStatus.ACTIVE, RecordStatus.CANCELLED]


def test_guest_id_is_reserved():
    manager = _manager()
    with pytest.raises(InvalidOperandException):
        manager.register_player(manager.open_ledger({}), GUEST_ID)


def test_ledger_serialization_keeps_timestamps():
    manager = _manager(k_factor=24)
    ledger = manager.open_ledger({"a": 1000, "b": 1100})
    played_at = datetime(2025, 3, 14, 15, 9, 26, tzinfo=timezone.utc)
    ledger = manager.record_duel(ledger, "a", "b", DuelOutcome.A_WIN, timestamp=played_at)

    restored = RatingLedger.from_dict(ledger.to_dict())

    assert restored.records[0].timestamp == played_at
    assert restored.records[0].k_factor == 24
    assert manager.current_ratings(restored) == manager.current_ratings(ledger)
