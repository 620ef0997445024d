import random

from arenapairing.constants import BYE
from arenapairing.models.enums import RoundKind
from arenapairing.pairing import (
    bracket_layout,
    create_swiss_pairings,
    first_round_slots,
    pair_initial_round,
)


def _pair_sets(pairings):
    return {frozenset((p1, p2)) for p1, p2, _ in pairings}


def test_bracket_layout_eight():
    assert bracket_layout(8) == [
        ("8-player round", RoundKind.STANDARD, 4),
        ("semifinal", RoundKind.SEMIFINAL, 2),
        ("final & third place", RoundKind.FINAL_AND_THIRD, 2),
    ]


def test_bracket_layout_small_sizes():
    assert bracket_layout(2) == [("final", RoundKind.FINAL, 1)]
    assert [title for title, _, _ in bracket_layout(4)] == ["semifinal", "final & third place"]
    assert [count for _, _, count in bracket_layout(32)] == [16, 8, 4, 2, 2]


def test_first_round_slots_byes_go_to_top_seeds():
    ids = ["s1", "s2", "s3", "s4", "s5", "s6"]
    slots = first_round_slots(ids, random.Random(1))

    assert len(slots) == 4
    assert slots[:2] == [("s1", BYE), ("s2", BYE)]
    assert sorted(p for pair in slots[2:] for p in pair) == ["s3", "s4", "s5", "s6"]


def test_first_round_slots_full_bracket_has_no_byes():
    slots = first_round_slots([f"s{i}" for i in range(8)], random.Random(1))
    assert all(BYE not in pair for pair in slots)


def test_pair_initial_round():
    pairings, bye = pair_initial_round(["a", "b", "c", "d", "e"])
    assert pairings == [("a", "b", False), ("c", "d", False)]
    assert bye == "e"

    pairings, bye = pair_initial_round(["a", "b"])
    assert pairings == [("a", "b", False)]
    assert bye is None


def test_swiss_pairing_avoids_known_rematch():
    scores = {"a": 1, "b": 1, "c": 0, "d": 0}
    pairings, bye = create_swiss_pairings(
        list(scores), scores, {frozenset({"a", "b"})}, set(), random.Random(4)
    )

    assert bye is None
    assert not any(rematch for _, _, rematch in pairings)
    assert frozenset({"a", "b"}) not in _pair_sets(pairings)


def test_swiss_pairing_prefers_equal_scores():
    scores = {"a": 2, "b": 2, "c": 0, "d": 0}
    pairings, _ = create_swiss_pairings(list(scores), scores, set(), set(), random.Random(4))
    assert _pair_sets(pairings) == {frozenset({"a", "b"}), frozenset({"c", "d"})}


def test_search_improves_on_greedy():
    # Greedy pairs a-b and leaves c-d, who already met.
    scores = {"a": 3, "b": 2, "c": 1, "d": 0}
    pairings, _ = create_swiss_pairings(
        list(scores), scores, {frozenset({"c", "d"})}, set(), random.Random(0)
    )
    assert _pair_sets(pairings) == {frozenset({"a", "c"}), frozenset({"b", "d"})}


def test_exhausted_search_keeps_greedy_result():
    scores = {"a": 3, "b": 2, "c": 1, "d": 0}
    pairings, _ = create_swiss_pairings(
        list(scores), scores, {frozenset({"c", "d"})}, set(), random.Random(0), max_nodes=0
    )
    assert pairings == [("a", "b", False), ("c", "d", True)]


def test_bye_goes_to_lowest_player_without_one():
    scores = {"a": 2, "b": 1, "c": 0}
    pairings, bye = create_swiss_pairings(list(scores), scores, set(), {"c"}, random.Random(0))
    assert bye == "b"
    assert _pair_sets(pairings) == {frozenset({"a", "c"})}


def test_second_bye_when_everyone_had_one():
    scores = {"a": 2, "b": 1, "c": 0}
    _, bye = create_swiss_pairings(
        list(scores), scores, set(), {"a", "b", "c"}, random.Random(0)
    )
    assert bye == "c"
