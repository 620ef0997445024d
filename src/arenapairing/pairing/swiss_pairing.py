"""Swiss pairing: score-sorted greedy pairing with rematch avoidance."""

# Arena Pairing
# Copyright (C) 2025  Arena Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import random
from typing import List, Mapping, Optional, Sequence, Set, Tuple

from arenapairing.constants import MAX_PAIRING_SEARCH_NODES
from arenapairing.type_hints import ProposedPairing
from arenapairing.utils import setup_logger

logger = setup_logger(__name__)


def pair_initial_round(
    ordered_ids: Sequence[str],
) -> Tuple[List[ProposedPairing], Optional[str]]:
    """Pair the opening round: 1v2, 3v4, ... in the given order.

    With an odd count the last player receives the bye.

    Returns:
        Tuple of (pairings, bye player id)
    """
    players = list(ordered_ids)
    bye_player_id = players.pop() if len(players) % 2 == 1 else None
    pairings = [(players[i], players[i + 1], False) for i in range(0, len(players), 2)]
    return pairings, bye_player_id


def create_swiss_pairings(
    player_ids: Sequence[str],
    scores: Mapping[str, int],
    previous_matches: Set[frozenset],
    bye_history: Set[str],
    rng: random.Random,
    max_nodes: int = MAX_PAIRING_SEARCH_NODES,
) -> Tuple[List[ProposedPairing], Optional[str]]:
    """Create pairings for a Swiss round after the first.

    - player_ids: players to pair
    - scores: current score of every player
    - previous_matches: set of frozenset({id1, id2}) for all earlier real matches
    - bye_history: players who already received a bye
    - rng: random source for the jitter that orders equal scores
    - max_nodes: search budget for rematch avoidance
    Returns: (pairings, bye_player_id), each pairing is (id1, id2, rematch)
    """
    jitter = {player_id: rng.random() for player_id in player_ids}
    sorted_ids = sorted(player_ids, key=lambda p: (-scores[p], jitter[p]))

    bye_player_id = None
    if len(sorted_ids) % 2 == 1:
        bye_player_id = _get_eligible_bye_player(sorted_ids, bye_history)
        sorted_ids.remove(bye_player_id)

    greedy = _create_greedy_pairings(sorted_ids, scores, previous_matches)
    greedy_rematches = sum(1 for _, _, rematch in greedy if rematch)
    if greedy_rematches == 0:
        return greedy, bye_player_id

    search = _RematchSearch(scores, previous_matches, greedy_rematches, max_nodes)
    best = search.run(sorted_ids) or greedy
    rematches = sum(1 for _, _, rematch in best if rematch)
    if rematches:
        logger.warning(f"Pairing requires {rematches} rematch(es)")
    return best, bye_player_id


def _get_eligible_bye_player(sorted_ids: Sequence[str], bye_history: Set[str]) -> str:
    """Lowest-ordered player without a bye, else the lowest-ordered player."""
    for player_id in reversed(sorted_ids):
        if player_id not in bye_history:
            return player_id
    logger.warning(f"All players have had a bye; assigning a second bye to {sorted_ids[-1]}")
    return sorted_ids[-1]


def _candidate_order(
    player_id: str,
    remaining: Sequence[str],
    scores: Mapping[str, int],
    previous_matches: Set[frozenset],
) -> List[str]:
    """Opponents for ``player_id`` in order of preference.

    Never-faced opponents with an equal score first, then any never-faced
    opponent, then the players already met.
    """
    same_score: List[str] = []
    fresh: List[str] = []
    repeats: List[str] = []
    for other in remaining:
        if frozenset({player_id, other}) in previous_matches:
            repeats.append(other)
        elif scores[other] == scores[player_id]:
            same_score.append(other)
        else:
            fresh.append(other)
    return same_score + fresh + repeats


def _create_greedy_pairings(
    sorted_ids: Sequence[str],
    scores: Mapping[str, int],
    previous_matches: Set[frozenset],
) -> List[ProposedPairing]:
    """Pair each unpaired player with its most preferred remaining opponent."""
    pairings: List[ProposedPairing] = []
    remaining = list(sorted_ids)

    while len(remaining) >= 2:
        player1 = remaining.pop(0)
        player2 = _candidate_order(player1, remaining, scores, previous_matches)[0]
        remaining.remove(player2)
        pairings.append(
            (player1, player2, frozenset({player1, player2}) in previous_matches)
        )

    return pairings


class _RematchSearch:
    """Bounded depth-first search for the pairing with the fewest rematches.

    Candidates are explored in greedy preference order and the greedy result
    is the initial upper bound. Branches that cannot beat the best pairing
    found so far are cut; the search stops at the first rematch-free pairing.
    """

    def __init__(
        self,
        scores: Mapping[str, int],
        previous_matches: Set[frozenset],
        upper_bound: int,
        max_nodes: int,
    ) -> None:
        self.scores = scores
        self.previous_matches = previous_matches
        self.best_rematches = upper_bound
        self.best: Optional[List[ProposedPairing]] = None
        self.nodes_left = max_nodes

    def run(self, sorted_ids: Sequence[str]) -> Optional[List[ProposedPairing]]:
        self._search(list(sorted_ids), [], 0)
        if self.nodes_left <= 0:
            logger.debug("Pairing search budget exhausted")
        return self.best

    def _search(
        self, remaining: List[str], chosen: List[ProposedPairing], rematches: int
    ) -> bool:
        """Returns True once a rematch-free pairing has been found."""
        if not remaining:
            if rematches < self.best_rematches:
                self.best_rematches = rematches
                self.best = list(chosen)
            return rematches == 0
        if self.nodes_left <= 0:
            return False
        self.nodes_left -= 1

        player1 = remaining[0]
        rest = remaining[1:]
        for player2 in _candidate_order(player1, rest, self.scores, self.previous_matches):
            rematch = frozenset({player1, player2}) in self.previous_matches
            cost = rematches + (1 if rematch else 0)
            if cost >= self.best_rematches:
                continue
            chosen.append((player1, player2, rematch))
            if self._search([p for p in rest if p != player2], chosen, cost):
                return True
            chosen.pop()
        return False
