"""Tiebreak calculation for Swiss standings.

This module derives scores and the Solkoff-style tiebreaks (SOS, SOSOS) from
round history. Nothing is cached between calls, so edited or cancelled rounds
are always reflected.
"""

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

import functools
from typing import Dict, List, Sequence

from arenapairing.constants import TB_SCORE, TB_SOS, TB_SOSOS
from arenapairing.models.tournament import RoundData, SwissStanding, is_real, opponent_history
from arenapairing.type_hints import OpponentHistory, Ranking
from arenapairing.utils import setup_logger

logger = setup_logger(__name__)

TIEBREAK_ORDER = (TB_SCORE, TB_SOS, TB_SOSOS)


class TiebreakCalculator:
    """Calculates scores and tiebreaks from a sequence of rounds.

    - Score: matches won, byes included
    - SOS: sum of real opponents' scores (byes contribute nothing)
    - SOSOS: sum of real opponents' SOS
    - Head-to-head: result of the first decided meeting of two players
    """

    def __init__(self, rounds: Sequence[RoundData]) -> None:
        self.rounds = tuple(rounds)

    def opponents(self, player_id: str) -> OpponentHistory:
        """Opponent history in round order, ``BYE`` included."""
        return opponent_history(self.rounds, player_id)

    def real_opponents(self, player_id: str) -> List[str]:
        return [opp for opp in self.opponents(player_id) if is_real(opp)]

    def score(self, player_id: str) -> int:
        return sum(
            1
            for round_data in self.rounds
            for match in round_data.matches
            if match.winner_id == player_id
        )

    def sos(self, player_id: str) -> int:
        return sum(self.score(opp) for opp in self.real_opponents(player_id))

    def sosos(self, player_id: str) -> int:
        return sum(self.sos(opp) for opp in self.real_opponents(player_id))

    def calculate_all_tiebreaks(self, player_ids: Sequence[str]) -> Dict[str, Dict[str, int]]:
        """Calculate every tiebreak for every player.

        Scores are computed once and reused for SOS and SOSOS.

        Args:
            player_ids: Players to calculate for

        Returns:
            Mapping of player id to ``{score, sos, sosos}``
        """
        ids = list(player_ids)
        for round_data in self.rounds:
            for match in round_data.matches:
                ids.extend(pid for pid in match.participants if pid not in ids)

        scores = {pid: self.score(pid) for pid in ids}
        opponents = {pid: self.real_opponents(pid) for pid in ids}
        sos = {pid: sum(scores[o] for o in opponents[pid]) for pid in ids}
        sosos = {pid: sum(sos[o] for o in opponents[pid]) for pid in ids}
        return {
            pid: {TB_SCORE: scores[pid], TB_SOS: sos[pid], TB_SOSOS: sosos[pid]}
            for pid in player_ids
        }

    def head_to_head(self, player1: str, player2: str) -> int:
        """Head-to-head result between two players.

        Args:
            player1: First player
            player2: Second player

        Returns:
            1 if player1 won their first decided meeting, -1 if player2 won,
            0 if they never met or no meeting is decided
        """
        for round_data in self.rounds:
            for match in round_data.matches:
                if not (match.has_player(player1) and match.has_player(player2)):
                    continue
                if match.winner_id == player1:
                    return 1
                if match.winner_id == player2:
                    return -1
        return 0

    def rank(self, player_ids: Sequence[str]) -> Ranking:
        """Order players best first.

        Score, SOS and SOSOS descending, then head-to-head. Remaining ties keep
        the input order.
        """
        tiebreaks = self.calculate_all_tiebreaks(player_ids)

        def compare(p1: str, p2: str) -> int:
            for tb_key in TIEBREAK_ORDER:
                tb1 = tiebreaks[p1][tb_key]
                tb2 = tiebreaks[p2][tb_key]
                if tb1 != tb2:
                    return -1 if tb1 > tb2 else 1
            return -self.head_to_head(p1, p2)

        return sorted(player_ids, key=functools.cmp_to_key(compare))

    def standings(self, player_ids: Sequence[str]) -> List[SwissStanding]:
        """Ranked standings table.

        Consecutive players level on score, SOS and SOSOS share a rank
        ("1, 2, 2, 4"), even when head-to-head decided their display order.
        """
        tiebreaks = self.calculate_all_tiebreaks(player_ids)
        rows: List[SwissStanding] = []
        previous_key = None
        for position, player_id in enumerate(self.rank(player_ids), start=1):
            key = tuple(tiebreaks[player_id][tb] for tb in TIEBREAK_ORDER)
            rank = rows[-1].rank if key == previous_key else position
            rows.append(
                SwissStanding(
                    rank=rank,
                    player_id=player_id,
                    score=key[0],
                    sos=key[1],
                    sosos=key[2],
                    opponents=tuple(self.opponents(player_id)),
                )
            )
            previous_key = key
        logger.debug(f"Standings computed for {len(rows)} players")
        return rows
