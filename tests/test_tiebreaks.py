from arenapairing.constants import BYE
from arenapairing.controllers.tournament import TiebreakCalculator
from arenapairing.models.tournament import Match, RoundData


def _round(index, *results):
    """results: (first, second, winner) tuples."""
    matches = tuple(
        Match(id=f"r{index}m{i}", slots=(first, second), winner_id=winner)
        for i, (first, second, winner) in enumerate(results)
    )
    return RoundData(index=index, title=f"Round {index + 1}", matches=matches)


def _four_player_rounds():
    return [
        _round(0, ("a", "b", "a"), ("c", "d", "c")),
        _round(1, ("a", "c", "a"), ("b", "d", "b")),
    ]


def test_score_sos_and_sosos():
    calculator = TiebreakCalculator(_four_player_rounds())

    assert [calculator.score(p) for p in "abcd"] == [2, 1, 1, 0]
    assert [calculator.sos(p) for p in "abcd"] == [2, 2, 2, 2]
    assert [calculator.sosos(p) for p in "abcd"] == [4, 4, 4, 4]


def test_bye_counts_as_win_but_adds_no_sos():
    rounds = [_round(0, ("a", BYE, "a"), ("b", "c", "b"))]
    calculator = TiebreakCalculator(rounds)

    assert calculator.score("a") == 1
    assert calculator.sos("a") == 0
    assert calculator.opponents("a") == [BYE]
    assert calculator.sos("c") == 1


def test_calculate_all_tiebreaks_matches_single_calls():
    calculator = TiebreakCalculator(_four_player_rounds())
    tiebreaks = calculator.calculate_all_tiebreaks(list("abcd"))
    for player_id in "abcd":
        assert tiebreaks[player_id] == {
            "score": calculator.score(player_id),
            "sos": calculator.sos(player_id),
            "sosos": calculator.sosos(player_id),
        }


def test_full_ties_keep_input_order():
    calculator = TiebreakCalculator(_four_player_rounds())
    assert calculator.rank(list("abcd")) == list("abcd")
    assert calculator.rank(list("acbd")) == list("acbd")


def test_head_to_head_uses_first_decided_meeting():
    rounds = [_round(0, ("x", "y", "y")), _round(1, ("x", "y", "x"))]
    calculator = TiebreakCalculator(rounds)

    assert calculator.head_to_head("x", "y") == -1
    assert calculator.head_to_head("y", "x") == 1
    assert calculator.rank(["x", "y"]) == ["y", "x"]


def test_head_to_head_ignores_undecided_meetings():
    rounds = [_round(0, ("x", "y", None)), _round(1, ("x", "y", "x"))]
    assert TiebreakCalculator(rounds).head_to_head("x", "y") == 1
    assert TiebreakCalculator(rounds[:1]).head_to_head("x", "y") == 0


def test_standings_share_ranks_for_equal_tiebreaks():
    rows = TiebreakCalculator(_four_player_rounds()).standings(list("abcd"))

    assert [row.player_id for row in rows] == list("abcd")
    assert [row.rank for row in rows] == [1, 2, 2, 4]
    assert rows[0].opponents == ("b", "c")


def test_score_total_equals_decided_matches():
    rounds = _four_player_rounds() + [_round(2, ("a", "d", None), ("b", "c", "c"))]
    calculator = TiebreakCalculator(rounds)

    decided = sum(1 for r in rounds for m in r.matches if m.is_decided)
    assert sum(calculator.score(p) for p in "abcd") == decided
