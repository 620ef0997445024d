import json

import pytest

from arenapairing.cli import create_parser, dispatch, load_roster, main
from arenapairing.engine import CompetitionEngine
from arenapairing.exceptions import ArenaPairingException
from arenapairing.models.player import Player
from arenapairing.models.tournament import TournamentConfig


def _engine(count=4):
    players = [Player(id=f"p{i}", rank=count - i) for i in range(1, count + 1)]
    return CompetitionEngine(TournamentConfig(seed=5), players=players)


def test_help_and_quit():
    engine = _engine()
    keep_running, output = dispatch(engine, "help")
    assert keep_running
    assert "Available Commands" in output
    assert "swiss" in output

    assert dispatch(engine, "quit") == (False, "Goodbye!")
    assert dispatch(engine, "   ") == (True, "")


def test_unknown_command():
    keep_running, output = dispatch(_engine(), "frobnicate now")
    assert keep_running
    assert "Unknown command: frobnicate" in output


def test_bracket_build_and_show():
    engine = _engine()
    _, output = dispatch(engine, "bracket build")

    assert engine.bracket is not None
    assert "semifinal" in output
    assert "final & third place" in output
    assert dispatch(engine, "bracket show")[1] == output


def test_missing_arguments_show_command_help():
    engine = _engine()
    _, output = dispatch(engine, "bracket win 0")
    assert "toggle a match winner" in output

    _, output = dispatch(engine, "swiss bogus")
    assert "pair the next round" in output


def test_errors_are_reported():
    _, output = dispatch(_engine(), "swiss next")
    assert "precond_pending" in output


def test_duel_record_and_ratings():
    engine = _engine(count=2)
    _, output = dispatch(engine, "duel record p1 p2 a_win")
    assert "p1 1000 -> 1016" in output
    assert "p2 1000 -> 984" in output

    _, ratings = dispatch(engine, "duel ratings")
    assert ratings.splitlines()[0].split() == ["p1", "1016"]


def test_swiss_standings_table():
    engine = _engine()
    dispatch(engine, "swiss start")
    _, output = dispatch(engine, "swiss standings")
    assert output.splitlines()[0].split()[:4] == ["#", "player", "score", "sos"]
    assert len(output.splitlines()) == 5


def test_save_adds_extension(tmp_path):
    engine = _engine()
    dispatch(engine, "swiss start")

    _, output = dispatch(engine, f"save {tmp_path / 'state'}")

    saved = tmp_path / "state.json"
    assert str(saved) in output
    restored = CompetitionEngine.from_dict(json.loads(saved.read_text()))
    assert restored.swiss == engine.swiss


def test_load_roster(tmp_path):
    path = tmp_path / "roster.json"
    path.write_text(
        json.dumps(
            [
                {"id": "ana", "name": "Ana", "rank": 3, "rating": 1200},
                {"id": "ben"},
            ]
        )
    )

    players, ratings = load_roster(path)

    assert [p.id for p in players] == ["ana", "ben"]
    assert players[1].name == "ben"
    assert ratings == {"ana": 1200, "ben": None}


@pytest.mark.parametrize("content", ["{}", "[{\"name\": \"no id\"}]", "oops"])
def test_load_roster_rejects_bad_input(tmp_path, content):
    path = tmp_path / "roster.json"
    path.write_text(content)
    with pytest.raises(ArenaPairingException):
        load_roster(path)


def test_parser_options():
    args = create_parser().parse_args(["--seed", "4", "-v"])
    assert args.seed == 4
    assert args.verbose
    assert args.roster is None


def test_main_fails_on_missing_roster(tmp_path):
    assert main(["--roster", str(tmp_path / "missing.json")]) == 1


def test_malformed_number_shows_command_help():
    _, output = dispatch(_engine(), "bracket win x 0 p1")
    assert "Expected a number, got 'x'" in output
    assert "toggle a match winner" in output


def test_handler_bugs_are_not_reported_as_usage(monkeypatch):
    engine = _engine()

    def broken(*args):
        raise KeyError("internal")

    monkeypatch.setattr(engine, "build_bracket", broken)
    with pytest.raises(KeyError):
        dispatch(engine, "bracket build")


def test_swiss_show_reports_planned_rounds():
    engine = _engine()
    dispatch(engine, "swiss start")
    _, output = dispatch(engine, "swiss show")
    assert "round 1 of 4" in output
