"""Single-elimination bracket management.

This module builds brackets from a seeded player list, records winners with
toggle semantics and keeps later rounds consistent by resetting and
re-propagating them after every change.
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
from typing import Dict, List, Optional, Sequence, Tuple

from arenapairing.constants import BYE
from arenapairing.exceptions import (
    InsufficientParticipantsException,
    InvalidOperandException,
    UnknownReferenceException,
)
from arenapairing.models.enums import RoundKind
from arenapairing.models.player import Player
from arenapairing.models.tournament import Bracket, Match, RoundData, is_real
from arenapairing.pairing import bracket_layout, first_round_slots
from arenapairing.type_hints import Ranking, Slots
from arenapairing.utils import generate_id, setup_logger

logger = setup_logger(__name__)


class BracketManager:
    """Manages single-elimination brackets.

    This class is responsible for:
    - Building the round structure and first-round draw
    - Resolving bye matches and propagating their winners
    - Toggling match winners and re-propagating later rounds
    - Producing the final placement order
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def build(self, players: Sequence[Player]) -> Bracket:
        """Build a bracket from a seeded player list.

        Args:
            players: Participants, strongest seed first

        Returns:
            A bracket with bye matches resolved and propagated

        Raises:
            InsufficientParticipantsException: If fewer than two players
            InvalidOperandException: If a player id appears twice
        """
        if len(players) < 2:
            raise InsufficientParticipantsException(
                f"A bracket needs at least 2 players, got {len(players)}"
            )
        ids = [p.id for p in players]
        if len(set(ids)) != len(ids):
            raise InvalidOperandException("Duplicate player ids in bracket roster")

        first_slots = first_round_slots(ids, self.rng)
        rounds: List[RoundData] = []
        for index, (title, kind, match_count) in enumerate(bracket_layout(len(first_slots) * 2)):
            if index == 0:
                matches = tuple(self._first_round_match(slots) for slots in first_slots)
            else:
                matches = tuple(
                    Match(id=generate_id("match", self.rng)) for _ in range(match_count)
                )
            rounds.append(RoundData(index=index, title=title, kind=kind, matches=matches))

        bye_count = sum(1 for slots in first_slots if BYE in slots)
        logger.info(
            f"Built bracket: {len(players)} players, {len(first_slots) * 2} slots, "
            f"{bye_count} bye(s), {len(rounds)} round(s)"
        )
        return Bracket(players=tuple(players), rounds=tuple(self._propagate(rounds, 0)))

    def _first_round_match(self, slots: Slots) -> Match:
        first, second = slots
        winner = first if second == BYE else None
        return Match(id=generate_id("match", self.rng), slots=slots, winner_id=winner)

    def set_winner(
        self, bracket: Bracket, round_idx: int, match_idx: int, player_id: str
    ) -> Bracket:
        """Set or clear the winner of a match.

        Choosing the current winner again clears it. Every later round is
        reset and refilled from the winners that remain.

        Args:
            bracket: Current bracket
            round_idx: Round index
            match_idx: Match index inside the round
            player_id: The player clicked as winner

        Returns:
            The updated bracket

        Raises:
            UnknownReferenceException: If the round or match does not exist
            InvalidOperandException: If the player is not in the match, or the
                match is a bye or still waiting for an opponent
        """
        match = self._get_match(bracket, round_idx, match_idx)
        if match.is_bye:
            raise InvalidOperandException(
                f"Match {match.id} is a bye and is decided automatically"
            )
        if not match.has_player(player_id):
            raise InvalidOperandException(
                f"Player {player_id} is not in match {match.id}"
            )
        if not match.is_ready:
            raise InvalidOperandException(
                f"Match {match.id} is still waiting for an opponent"
            )

        new_winner = None if match.winner_id == player_id else player_id
        rounds = list(bracket.rounds)
        rounds[round_idx] = rounds[round_idx].with_match(match_idx, match.with_winner(new_winner))
        for later in range(round_idx + 1, len(rounds)):
            rounds[later] = replace(
                rounds[later], matches=tuple(m.cleared() for m in rounds[later].matches)
            )

        if new_winner is None:
            logger.info(f"Cleared winner of {rounds[round_idx].title} match {match_idx}")
        else:
            logger.info(
                f"{new_winner} wins {rounds[round_idx].title} match {match_idx}"
            )
        return replace(bracket, rounds=tuple(self._propagate(rounds, round_idx)))

    def propagate(self, bracket: Bracket, from_round: int = 0) -> Bracket:
        """Refill the slots after ``from_round`` from the recorded winners.

        Applying it twice gives the same bracket.
        """
        return replace(bracket, rounds=tuple(self._propagate(list(bracket.rounds), from_round)))

    def _propagate(self, rounds: List[RoundData], from_round: int) -> List[RoundData]:
        for index in range(from_round, len(rounds) - 1):
            current = rounds[index]
            following = rounds[index + 1]
            if following.kind == RoundKind.FINAL_AND_THIRD:
                semi1, semi2 = current.matches
                feeds: List[Slots] = [
                    (semi1.winner_id, semi2.winner_id),
                    (semi1.loser_id, semi2.loser_id),
                ]
            else:
                feeds = [
                    (current.matches[2 * i].winner_id, current.matches[2 * i + 1].winner_id)
                    for i in range(len(following.matches))
                ]

            matches = []
            for match, slots in zip(following.matches, feeds):
                keep = match.winner_id in slots and all(is_real(s) for s in slots)
                matches.append(
                    replace(match, slots=slots, winner_id=match.winner_id if keep else None)
                )
            rounds[index + 1] = replace(following, matches=tuple(matches))
        return rounds

    def reset(self, bracket: Optional[Bracket]) -> None:
        """Discard a bracket. The format returns to not started."""
        if bracket is not None:
            logger.info(f"Bracket with {len(bracket.players)} players reset")

    def final_standings(self, bracket: Bracket) -> Ranking:
        """Placement order of every bracket player.

        Champion, runner-up, third and fourth place come first. Without a
        decided third-place match both semifinal losers share that tier in seed
        order. Everyone else follows by the round they were eliminated in,
        later rounds first, then by seed.
        """
        terminal_index = len(bracket.rounds) - 1
        tiers: Dict[str, int] = {}

        final = bracket.final_match
        if final.is_decided:
            tiers[final.winner_id] = 0
            tiers[final.loser_id] = 1
        else:
            for player_id in final.participants:
                tiers[player_id] = 0

        third = bracket.third_place_match
        if third is not None:
            if third.is_decided:
                tiers[third.winner_id] = 2
                tiers[third.loser_id] = 3
            else:
                for semi in bracket.rounds[terminal_index - 1].matches:
                    if semi.loser_id is not None:
                        tiers[semi.loser_id] = 2

        def placement(player: Player) -> Tuple[int, int]:
            seed = bracket.seed_of(player.id)
            if player.id in tiers:
                return tiers[player.id], seed
            return 4 + terminal_index - self._deepest_round(bracket, player.id), seed

        return [p.id for p in sorted(bracket.players, key=placement)]

    @staticmethod
    def _deepest_round(bracket: Bracket, player_id: str) -> int:
        deepest = 0
        for round_data in bracket.rounds:
            if any(match.has_player(player_id) for match in round_data.matches):
                deepest = round_data.index
        return deepest

    @staticmethod
    def _get_match(bracket: Bracket, round_idx: int, match_idx: int) -> Match:
        if not 0 <= round_idx < len(bracket.rounds):
            raise UnknownReferenceException(f"No bracket round {round_idx}")
        matches = bracket.rounds[round_idx].matches
        if not 0 <= match_idx < len(matches):
            raise UnknownReferenceException(
                f"No match {match_idx} in bracket round {round_idx}"
            )
        return matches[match_idx]
