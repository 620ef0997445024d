import random

import pytest

from arenapairing.controllers.tournament import HybridManager
from arenapairing.exceptions import (
    InsufficientParticipantsException,
    InvalidOperandException,
    PrecondPendingException,
    UnknownReferenceException,
)
from arenapairing.models.enums import FormatStatus, Seeding
from arenapairing.models.player import Player
from arenapairing.pairing import default_group_count, distribute_serpentine, round_robin_pairs


def _players(count):
    return [Player(id=f"p{i}", rank=count - i) for i in range(1, count + 1)]


def _manager(seed=11):
    return HybridManager(random.Random(seed))


def _play_preliminaries(manager, run):
    """First slot wins every preliminary match."""
    for match in list(run.iter_matches()):
        run = manager.set_preliminary_result(run, match.id, match.slots[0])
    return run


def test_serpentine_distribution():
    ids = [str(i) for i in range(1, 9)]
    assert distribute_serpentine(ids, 3) == [["1", "6", "7"], ["2", "5", "8"], ["3", "4"]]
    assert distribute_serpentine(ids, 1) == [ids]


def test_round_robin_pairs_every_pair_once():
    pairs = round_robin_pairs(["a", "b", "c", "d"])
    assert len(pairs) == 6
    assert len({frozenset(p) for p in pairs}) == 6
    assert round_robin_pairs(["a"]) == []


@pytest.mark.parametrize(
    "count, expected", [(2, 1), (5, 1), (6, 2), (10, 2), (11, 3)]
)
def test_default_group_count(count, expected):
    assert default_group_count(count) == expected


def test_start_preliminaries_groups():
    run = _manager().start_preliminaries(_players(6), group_count=2)

    assert [g.player_ids for g in run.groups] == [("p1", "p4", "p5"), ("p2", "p3", "p6")]
    assert all(len(g.matches) == 3 for g in run.groups)
    assert run.status == FormatStatus.IN_PROGRESS
    assert run.bracket is None


def test_default_groups_partition_players():
    run = _manager().start_preliminaries(_players(12), seeding=Seeding.RANDOM)
    members = [pid for group in run.groups for pid in group.player_ids]

    assert len(run.groups) == 3
    assert sorted(members) == sorted(p.id for p in _players(12))


def test_start_preliminaries_errors():
    manager = _manager()
    with pytest.raises(InsufficientParticipantsException):
        manager.start_preliminaries(_players(1))
    with pytest.raises(InvalidOperandException):
        manager.start_preliminaries(_players(4), group_count=5)
    with pytest.raises(InvalidOperandException):
        manager.start_preliminaries(_players(4), group_count=0)
    with pytest.raises(InvalidOperandException):
        manager.start_preliminaries([Player(id="a"), Player(id="a")])


def test_preliminary_result_toggles():
    manager = _manager()
    run = manager.start_preliminaries(_players(4), group_count=1)
    match = run.groups[0].matches[0]

    run = manager.set_preliminary_result(run, match.id, match.slots[1])
    assert manager.scores(run)[match.slots[1]] == 1

    run = manager.set_preliminary_result(run, match.id, match.slots[1])
    assert run.groups[0].matches[0].winner_id is None
    assert sum(manager.scores(run).values()) == 0

    with pytest.raises(InvalidOperandException):
        manager.set_preliminary_result(run, match.id, "p9")
    with pytest.raises(UnknownReferenceException):
        manager.set_preliminary_result(run, "match_missing", "p1")


def test_group_standings():
    manager = _manager()
    run = _play_preliminaries(manager, manager.start_preliminaries(_players(6), group_count=2))

    assert manager.group_standings(run) == [
        [("p1", 2), ("p4", 1), ("p5", 0)],
        [("p2", 2), ("p3", 1), ("p6", 0)],
    ]


def test_advance_requires_complete_preliminaries():
    manager = _manager()
    run = manager.start_preliminaries(_players(6), group_count=2)
    with pytest.raises(PrecondPendingException):
        manager.advance_to_bracket(run, 4)


def test_advance_to_bracket_and_lock():
    manager = _manager()
    run = _play_preliminaries(manager, manager.start_preliminaries(_players(6), group_count=2))

    run = manager.advance_to_bracket(run, 4)

    assert [p.id for p in run.bracket.players] == ["p1", "p2", "p3", "p4"]
    match = run.groups[0].matches[0]
    with pytest.raises(InvalidOperandException):
        manager.set_preliminary_result(run, match.id, match.slots[0])


def test_advance_count_bounds():
    manager = _manager()
    run = _play_preliminaries(manager, manager.start_preliminaries(_players(4), group_count=1))
    with pytest.raises(InsufficientParticipantsException):
        manager.advance_to_bracket(run, 1)
    with pytest.raises(InvalidOperandException):
        manager.advance_to_bracket(run, 5)


def test_bracket_winner_needs_bracket():
    manager = _manager()
    run = manager.start_preliminaries(_players(4), group_count=1)
    with pytest.raises(PrecondPendingException):
        manager.set_bracket_winner(run, 0, 0, "p1")


def test_hybrid_final_standings():
    manager = _manager()
    run = _play_preliminaries(manager, manager.start_preliminaries(_players(6), group_count=2))
    run = manager.advance_to_bracket(run, 4)

    for round_idx in range(len(run.bracket.rounds)):
        for match_idx, match in enumerate(run.bracket.rounds[round_idx].matches):
            if match.is_ready and not match.is_decided:
                run = manager.set_bracket_winner(run, round_idx, match_idx, match.slots[0])

    assert run.status == FormatStatus.FINISHED
    standings = manager.final_standings(run)
    assert sorted(standings[:4]) == ["p1", "p2", "p3", "p4"]
    assert standings[4:] == ["p5", "p6"]


def test_final_standings_before_bracket_uses_scores():
    manager = _manager()
    run = _play_preliminaries(manager, manager.start_preliminaries(_players(6), group_count=2))
    assert manager.final_standings(run) == ["p1", "p2", "p3", "p4", "p5", "p6"]
