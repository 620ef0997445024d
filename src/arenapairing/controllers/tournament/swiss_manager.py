"""Swiss league management.

This module handles round generation, result entry, round cancellation and
reshuffling for Swiss runs. Scores are never stored: every decision that
needs them replays the round history through the tiebreak calculator.
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

import random
from dataclasses import replace
from typing import List, Optional, Sequence, Set

from arenapairing.constants import BYE
from arenapairing.controllers.tournament.tiebreak_calculator import TiebreakCalculator
from arenapairing.exceptions import (
    InsufficientParticipantsException,
    InvalidOperandException,
    NoHistoryException,
    PrecondPendingException,
    UnknownReferenceException,
)
from arenapairing.models.enums import RoundKind, Seeding
from arenapairing.models.player import Player, order_players
from arenapairing.models.tournament import Match, RoundData, SwissRun, SwissStanding
from arenapairing.pairing import create_swiss_pairings, pair_initial_round
from arenapairing.type_hints import ProposedPairing, Ranking
from arenapairing.utils import generate_id, setup_logger

logger = setup_logger(__name__)


def previous_matches(rounds: Sequence[RoundData]) -> Set[frozenset]:
    """Set of frozenset({id1, id2}) for every real match in ``rounds``."""
    return {
        frozenset(match.participants)
        for round_data in rounds
        for match in round_data.matches
        if match.is_ready
    }


class SwissManager:
    """Manages round progression and results for Swiss runs.

    This class is responsible for:
    - Pairing the opening round from the seeded order
    - Pairing later rounds from the replayed standings
    - Recording and correcting match results
    - Cancelling, reshuffling and hand-editing the latest round
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def start(self, players: Sequence[Player], seeding: Seeding = Seeding.RANKED) -> SwissRun:
        """Start a Swiss run and pair round 0.

        Raises:
            InsufficientParticipantsException: If fewer than two players
            InvalidOperandException: If a player id appears twice
        """
        if len(players) < 2:
            raise InsufficientParticipantsException(
                f"A Swiss run needs at least 2 players, got {len(players)}"
            )
        ids = [p.id for p in players]
        if len(set(ids)) != len(ids):
            raise InvalidOperandException("Duplicate player ids in Swiss roster")

        run = SwissRun(players=tuple(players), seeding=seeding)
        return self._add_initial_round(run)

    def _add_initial_round(self, run: SwissRun) -> SwissRun:
        ordered = [p.id for p in order_players(run.players, run.seeding, self.rng)]
        pairings, bye_player_id = pair_initial_round(ordered)
        round_data = self._build_round(0, pairings, bye_player_id)
        logger.info(
            f"Created round 1 with {len(run.players)} players "
            f"({run.seeding.value} seeding), bye: {bye_player_id or 'none'}"
        )
        return replace(run, rounds=(round_data,), finished=False)

    def next_round(self, run: SwissRun) -> SwissRun:
        """Pair the next round from the current standings.

        With no rounds recorded the opening round is paired again.

        Raises:
            InsufficientParticipantsException: If fewer than two players
            PrecondPendingException: If the latest round still has open matches
        """
        if len(run.players) < 2:
            raise InsufficientParticipantsException(
                f"A Swiss run needs at least 2 players, got {len(run.players)}"
            )
        if not run.rounds:
            return self._add_initial_round(run)
        if not run.latest_round.is_completed:
            raise PrecondPendingException(
                f"Round {len(run.rounds)} still has undecided matches"
            )

        calculator = TiebreakCalculator(run.rounds)
        player_ids = run.player_ids
        scores = {player_id: calculator.score(player_id) for player_id in player_ids}
        bye_history = {p for p in player_ids if run.has_received_bye(p)}

        pairings, bye_player_id = create_swiss_pairings(
            player_ids, scores, previous_matches(run.rounds), bye_history, self.rng
        )
        round_index = len(run.rounds)
        round_data = self._build_round(round_index, pairings, bye_player_id)

        rematches = sum(1 for _, _, rematch in pairings if rematch)
        logger.info(
            f"Created round {round_index + 1}: {len(pairings)} pairings, "
            f"bye: {bye_player_id or 'none'}, rematches: {rematches}"
        )
        return replace(run, rounds=run.rounds + (round_data,), finished=False)

    def _build_round(
        self, index: int, pairings: List[ProposedPairing], bye_player_id: Optional[str]
    ) -> RoundData:
        matches = [
            Match(id=generate_id("match", self.rng), slots=(p1, p2), rematch=rematch)
            for p1, p2, rematch in pairings
        ]
        if bye_player_id is not None:
            matches.append(
                Match(
                    id=generate_id("match", self.rng),
                    slots=(bye_player_id, BYE),
                    winner_id=bye_player_id,
                )
            )
        return RoundData(
            index=index,
            title=f"Round {index + 1}",
            kind=RoundKind.STANDARD,
            matches=tuple(matches),
        )

    def set_result(
        self,
        run: SwissRun,
        round_idx: int,
        match_id: str,
        winner_id: Optional[str],
        allow_history_edit: bool = False,
    ) -> SwissRun:
        """Set or clear the winner of a Swiss match.

        Args:
            run: Current run
            round_idx: Round index of the match
            match_id: The match
            winner_id: Winning player id, ``None`` to clear the result
            allow_history_edit: Permit correcting a round before the latest one

        Returns:
            The updated run

        Raises:
            UnknownReferenceException: If the round or match does not exist
            InvalidOperandException: If the round is locked, the match is a
                bye, or the winner is not in the match
        """
        if not 0 <= round_idx < len(run.rounds):
            raise UnknownReferenceException(f"No Swiss round {round_idx}")
        round_data = run.rounds[round_idx]
        position = round_data.find_match(match_id)
        if position is None:
            raise UnknownReferenceException(
                f"No match {match_id} in Swiss round {round_idx}"
            )
        if round_idx != len(run.rounds) - 1 and not allow_history_edit:
            raise InvalidOperandException(
                f"Round {round_idx + 1} is locked; only the latest round can be edited"
            )

        match = round_data.matches[position]
        if match.is_bye:
            raise InvalidOperandException(f"Match {match_id} is a bye and cannot be changed")
        if winner_id is not None and not match.has_player(winner_id):
            raise InvalidOperandException(f"Player {winner_id} is not in match {match_id}")

        if round_idx != len(run.rounds) - 1:
            logger.warning(f"Editing result in earlier round {round_idx + 1}")
        logger.debug(f"Round {round_idx + 1} match {match_id}: winner {winner_id}")

        rounds = list(run.rounds)
        rounds[round_idx] = round_data.with_match(position, match.with_winner(winner_id))
        return replace(run, rounds=tuple(rounds))

    def cancel_last_round(self, run: SwissRun) -> SwissRun:
        """Drop the latest round.

        Dropping round 0 returns the run to not started.

        Raises:
            NoHistoryException: If no rounds exist
        """
        if not run.rounds:
            raise NoHistoryException("No Swiss rounds to cancel")
        logger.info(f"Cancelled round {len(run.rounds)}")
        return replace(run, rounds=run.rounds[:-1], finished=False)

    def reshuffle_last_round(self, run: SwissRun) -> SwissRun:
        """Cancel the latest round and pair it again.

        Round 0 is redrawn with the jittered Swiss pairing rather than the
        seeded 1v2, 3v4 order, so a reshuffle can actually change it.

        Raises:
            NoHistoryException: If no rounds exist
        """
        run = self.cancel_last_round(run)
        if run.rounds:
            return self.next_round(run)

        player_ids = run.player_ids
        pairings, bye_player_id = create_swiss_pairings(
            player_ids, {player_id: 0 for player_id in player_ids}, set(), set(), self.rng
        )
        round_data = self._build_round(0, pairings, bye_player_id)
        logger.info(f"Reshuffled round 1, bye: {bye_player_id or 'none'}")
        return replace(run, rounds=(round_data,), finished=False)

    def swap_players(
        self, run: SwissRun, match_a: str, slot_a: int, match_b: str, slot_b: int
    ) -> SwissRun:
        """Exchange two players between undecided matches of the latest round.

        Rematch flags of both matches are refreshed against earlier rounds.

        Raises:
            NoHistoryException: If no rounds exist
            UnknownReferenceException: If a match is not in the latest round
            InvalidOperandException: If a slot index is invalid, a match is
                decided or a bye, or both positions are the same
        """
        if not run.rounds:
            raise NoHistoryException("No Swiss rounds to edit")
        round_data = run.latest_round
        positions = []
        for match_id, slot in ((match_a, slot_a), (match_b, slot_b)):
            position = round_data.find_match(match_id)
            if position is None:
                raise UnknownReferenceException(f"No match {match_id} in the latest round")
            if slot not in (0, 1):
                raise InvalidOperandException(f"Slot must be 0 or 1, got {slot}")
            match = round_data.matches[position]
            if match.is_decided or match.is_bye:
                raise InvalidOperandException(
                    f"Match {match_id} is decided or a bye and cannot be rearranged"
                )
            positions.append(position)
        if positions[0] == positions[1] and slot_a == slot_b:
            raise InvalidOperandException("Cannot swap a slot with itself")

        matches = [list(m.slots) for m in round_data.matches]
        pos_a, pos_b = positions
        matches[pos_a][slot_a], matches[pos_b][slot_b] = (
            matches[pos_b][slot_b],
            matches[pos_a][slot_a],
        )

        history = previous_matches(run.rounds[:-1])
        updated = round_data
        for position in set(positions):
            first, second = matches[position]
            updated = updated.with_match(
                position,
                replace(
                    updated.matches[position],
                    slots=(first, second),
                    rematch=frozenset({first, second}) in history,
                ),
            )
        logger.info(f"Swapped players between matches {match_a} and {match_b}")
        return replace(run, rounds=run.rounds[:-1] + (updated,))

    def finish(self, run: SwissRun) -> SwissRun:
        """Mark the run finished. Standings stay available."""
        if not run.rounds:
            raise PrecondPendingException("Cannot finish a Swiss run with no rounds")
        logger.info(f"Swiss run finished after {len(run.rounds)} round(s)")
        return replace(run, finished=True)

    def standings(self, run: SwissRun) -> List[SwissStanding]:
        return TiebreakCalculator(run.rounds).standings(run.player_ids)

    def final_standings(self, run: SwissRun) -> Ranking:
        """Player ids ordered by the tiebreak ranking."""
        return TiebreakCalculator(run.rounds).rank(run.player_ids)
