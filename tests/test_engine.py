import json
from datetime import datetime, timezone

from arenapairing import CommandResult, CompetitionEngine
from arenapairing.models.enums import DuelOutcome, ErrorKind, FormatStatus, RecordStatus
from arenapairing.models.player import Player
from arenapairing.models.tournament import TournamentConfig


def _players(count):
    return [Player(id=f"p{i}", rank=count - i) for i in range(1, count + 1)]


def _engine(count=6, seed=21, **config):
    return CompetitionEngine(TournamentConfig(seed=seed, **config), players=_players(count))


def _play_swiss_round(engine):
    round_idx = len(engine.swiss.rounds) - 1
    for match in engine.swiss.rounds[round_idx].matches:
        if not match.is_decided:
            assert engine.set_swiss_result(round_idx, match.id, match.slots[0])


def test_command_result_truthiness():
    assert CommandResult(ok=True)
    failed = CommandResult(ok=False, error=ErrorKind.NO_HISTORY, message="nothing")
    assert not failed
    assert "no_history" in repr(failed)


def test_build_bracket_seeds_by_rank():
    engine = CompetitionEngine(
        TournamentConfig(seed=1),
        players=[Player(id="low", rank=1), Player(id="high", rank=9), Player(id="mid", rank=5)],
    )
    result = engine.build_bracket()

    assert result.ok
    assert [p.id for p in result.state.players] == ["high", "mid", "low"]
    assert result.state.rounds[0].matches[0].slots == ("high", "BYE")


def test_bracket_commands_need_a_bracket():
    engine = _engine()
    result = engine.set_bracket_winner(0, 0, "p1")
    assert not result
    assert result.error == ErrorKind.PRECOND_PENDING
    assert result.state is None


def test_bracket_failure_keeps_state():
    engine = _engine(count=4)
    bracket = engine.build_bracket().state
    result = engine.set_bracket_winner(0, 0, "p9")

    assert result.error == ErrorKind.INVALID_OPERAND
    assert result.state is bracket
    assert engine.bracket is bracket


def test_unknown_player_reference():
    result = _engine().start_swiss(["p1", "nobody"])
    assert result.error == ErrorKind.UNKNOWN_REFERENCE
    assert "nobody" in result.message


def test_insufficient_participants():
    result = _engine().build_bracket(["p1"])
    assert result.error == ErrorKind.INSUFFICIENT_PARTICIPANTS


def test_next_round_waits_for_results():
    engine = _engine()
    assert engine.generate_next_swiss_round().error == ErrorKind.PRECOND_PENDING

    engine.start_swiss()
    result = engine.generate_next_swiss_round()
    assert result.error == ErrorKind.PRECOND_PENDING
    assert len(engine.swiss.rounds) == 1


def test_cancel_without_history():
    engine = _engine()
    assert engine.cancel_last_swiss_round().error == ErrorKind.NO_HISTORY

    engine.start_swiss()
    assert engine.cancel_last_swiss_round()
    run = engine.swiss
    result = engine.cancel_last_swiss_round()

    assert result.error == ErrorKind.NO_HISTORY
    assert result.state is run
    assert run.status == FormatStatus.NOT_STARTED


def test_swiss_flow_through_engine():
    engine = _engine(count=5)
    assert engine.start_swiss(seeding="ranked")
    for _ in range(3):
        _play_swiss_round(engine)
        assert engine.generate_next_swiss_round()
    _play_swiss_round(engine)
    assert engine.finish_swiss()

    standings = engine.swiss_standings().state
    ranking = engine.final_standings("swiss").state
    assert [row.player_id for row in standings] == ranking
    assert sum(row.score for row in standings) == 4 * 3


def test_bad_seeding_is_invalid_operand():
    assert _engine().start_swiss(seeding="alphabetical").error == ErrorKind.INVALID_OPERAND


def test_duels_through_engine():
    engine = _engine(count=2)
    stamp = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    result = engine.record_duel("p1", "p2", "a_win", timestamp=stamp)
    assert result
    assert engine.current_ratings() == {"p1": 1016, "p2": 984}

    record_id = result.state.records[0].id
    assert engine.cancel_duel(record_id)
    assert engine.current_ratings() == {"p1": 1000, "p2": 1000}

    again = engine.cancel_duel(record_id)
    assert again.error == ErrorKind.INVALID_OPERAND


def test_duel_errors():
    engine = _engine(count=2)
    ledger = engine.ledger

    bad_outcome = engine.record_duel("p1", "p2", "win")
    assert bad_outcome.error == ErrorKind.INVALID_OPERAND
    assert bad_outcome.state is ledger

    assert engine.record_duel("p1", "ghost", DuelOutcome.DRAW).error == ErrorKind.UNKNOWN_REFERENCE
    assert engine.cancel_duel("duel_missing").error == ErrorKind.UNKNOWN_REFERENCE


def test_duel_against_guest():
    engine = _engine(count=2, guest_rating=1200)
    assert engine.record_duel("p1", "guest", DuelOutcome.A_WIN)
    assert "guest" not in engine.current_ratings()
    assert engine.current_ratings()["p1"] > 1000


def test_roster_ratings():
    engine = CompetitionEngine(
        TournamentConfig(seed=1, default_rating=1100),
        players=_players(2),
        ratings={"p1": 1500},
    )
    assert engine.current_ratings() == {"p1": 1500, "p2": 1100}


def test_hybrid_uses_configured_defaults():
    engine = _engine(count=6, hybrid_group_count=2, hybrid_advance_count=4)
    assert engine.start_hybrid_preliminaries()
    assert len(engine.hybrid.groups) == 2

    assert engine.advance_hybrid_to_bracket().error == ErrorKind.PRECOND_PENDING
    for match in list(engine.hybrid.iter_matches()):
        assert engine.set_preliminary_result(match.id, match.slots[0])

    result = engine.advance_hybrid_to_bracket()
    assert result
    assert len(result.state.bracket.players) == 4

    match = result.state.bracket.rounds[0].matches[0]
    assert engine.set_hybrid_bracket_winner(0, 0, match.slots[0])
    assert engine.final_standings("hybrid").ok


def test_final_standings_errors():
    engine = _engine()
    assert engine.final_standings("chess").error == ErrorKind.INVALID_OPERAND
    assert engine.final_standings("bracket").error == ErrorKind.PRECOND_PENDING


def test_seeded_engines_are_reproducible():
    first, second = _engine(count=7, seed=99), _engine(count=7, seed=99)
    for engine in (first, second):
        engine.start_swiss(seeding="random")
        _play_swiss_round(engine)
        engine.generate_next_swiss_round()
        engine.build_bracket()
    assert first.to_dict() == second.to_dict()


def test_state_round_trip():
    engine = _engine(count=6, hybrid_group_count=2)
    engine.build_bracket()
    engine.start_swiss()
    _play_swiss_round(engine)
    engine.start_hybrid_preliminaries()

    restored = CompetitionEngine.from_dict(engine.to_dict())

    assert restored.to_dict() == engine.to_dict()
    assert restored.swiss == engine.swiss
    assert restored.config.hybrid_group_count == 2


def test_duel_ids_stay_unique_after_reload():
    engine = _engine(count=4, seed=7)
    assert engine.record_duel("p1", "p2", DuelOutcome.A_WIN)

    restored = CompetitionEngine.from_dict(json.loads(json.dumps(engine.to_dict())))
    assert restored.record_duel("p3", "p4", DuelOutcome.B_WIN)
    first, second = restored.ledger.records
    assert first.id != second.id

    assert restored.cancel_duel(second.id)
    assert [r.status for r in restored.ledger.records] == [
        RecordStatus.ACTIVE,
        RecordStatus.CANCELLED,
    ]


def test_reload_continues_the_random_sequence():
    engine = _engine(count=6, seed=7)
    engine.start_swiss(seeding="random")
    restored = CompetitionEngine.from_dict(json.loads(json.dumps(engine.to_dict())))

    for each in (engine, restored):
        _play_swiss_round(each)
        each.generate_next_swiss_round()
    assert restored.swiss == engine.swiss
