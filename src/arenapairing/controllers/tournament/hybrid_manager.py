"""Hybrid tournament management.

Round-robin preliminary groups are drawn in snake order, played at their own
pace, and the top scorers across all groups advance into a single-elimination
finals bracket.
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

from arenapairing.controllers.tournament.bracket_manager import BracketManager
from arenapairing.exceptions import (
    InsufficientParticipantsException,
    InvalidOperandException,
    PrecondPendingException,
    UnknownReferenceException,
)
from arenapairing.models.enums import Seeding
from arenapairing.models.player import Player, order_players
from arenapairing.models.tournament import Group, HybridRun, Match
from arenapairing.pairing import default_group_count, distribute_serpentine, round_robin_pairs
from arenapairing.type_hints import Ranking
from arenapairing.utils import generate_id, setup_logger

logger = setup_logger(__name__)


class HybridManager:
    """Manages the preliminary stage of a hybrid run and hands over to a bracket."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        bracket_manager: Optional[BracketManager] = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.bracket_manager = bracket_manager or BracketManager(self.rng)

    def start_preliminaries(
        self,
        players: Sequence[Player],
        group_count: Optional[int] = None,
        seeding: Seeding = Seeding.RANKED,
    ) -> HybridRun:
        """Draw the preliminary groups and schedule their round robins.

        Args:
            players: Participants
            group_count: Number of groups, ``None`` for one per five players
            seeding: Ranked or random draw order

        Returns:
            A hybrid run with every group match scheduled

        Raises:
            InsufficientParticipantsException: If fewer than two players
            InvalidOperandException: If the group count is out of range or a
                player id appears twice
        """
        if len(players) < 2:
            raise InsufficientParticipantsException(
                f"A hybrid run needs at least 2 players, got {len(players)}"
            )
        ids = [p.id for p in players]
        if len(set(ids)) != len(ids):
            raise InvalidOperandException("Duplicate player ids in hybrid roster")
        if group_count is None:
            group_count = default_group_count(len(players))
        if not 1 <= group_count <= len(players):
            raise InvalidOperandException(
                f"Group count must be between 1 and {len(players)}, got {group_count}"
            )

        ordered = order_players(players, seeding, self.rng)
        groups = []
        for index, member_ids in enumerate(
            distribute_serpentine([p.id for p in ordered], group_count)
        ):
            matches = tuple(
                Match(id=generate_id("match", self.rng), slots=pair)
                for pair in round_robin_pairs(member_ids)
            )
            groups.append(Group(index=index, player_ids=tuple(member_ids), matches=matches))

        logger.info(
            f"Started preliminaries: {len(players)} players in {group_count} group(s), "
            f"{sum(len(g.matches) for g in groups)} matches"
        )
        return HybridRun(players=tuple(ordered), groups=tuple(groups), seeding=seeding)

    def set_preliminary_result(self, run: HybridRun, match_id: str, winner_id: str) -> HybridRun:
        """Toggle the winner of a preliminary match.

        Raises:
            UnknownReferenceException: If the match does not exist
            InvalidOperandException: If the finals bracket was already drawn or
                the player is not in the match
        """
        location = run.locate_match(match_id)
        if location is None:
            raise UnknownReferenceException(f"No preliminary match {match_id}")
        if run.bracket is not None:
            raise InvalidOperandException(
                "Preliminary results are locked once the finals bracket exists"
            )
        group_idx, position = location
        match = run.groups[group_idx].matches[position]
        if not match.has_player(winner_id):
            raise InvalidOperandException(f"Player {winner_id} is not in match {match_id}")

        new_winner = None if match.winner_id == winner_id else winner_id
        groups = list(run.groups)
        groups[group_idx] = groups[group_idx].with_match(position, match.with_winner(new_winner))
        logger.debug(f"Group {group_idx + 1} match {match_id}: winner {new_winner}")
        return replace(run, groups=tuple(groups))

    def scores(self, run: HybridRun) -> Dict[str, int]:
        """Preliminary wins per player."""
        scores = {player.id: 0 for player in run.players}
        for match in run.iter_matches():
            if match.winner_id is not None:
                scores[match.winner_id] += 1
        return scores

    def group_standings(self, run: HybridRun) -> List[List[Tuple[str, int]]]:
        """Per group, ``(player_id, score)`` by score descending, draw order on ties."""
        scores = self.scores(run)
        return [
            sorted(
                ((player_id, scores[player_id]) for player_id in group.player_ids),
                key=lambda entry: -entry[1],
            )
            for group in run.groups
        ]

    def _ranked_by_score(self, run: HybridRun, players: Sequence[Player]) -> List[Player]:
        scores = self.scores(run)
        return sorted(players, key=lambda p: -scores[p.id])

    def advance_to_bracket(self, run: HybridRun, advance_count: int) -> HybridRun:
        """Seed the top scorers of all groups into a fresh finals bracket.

        Scores are compared across groups without adjusting for group
        strength or size. Advancing again redraws the bracket.

        Raises:
            PrecondPendingException: If a preliminary match is undecided
            InsufficientParticipantsException: If fewer than two would advance
            InvalidOperandException: If more players would advance than exist
        """
        if not run.groups:
            raise PrecondPendingException("Preliminaries have not started")
        if not run.preliminaries_complete:
            raise PrecondPendingException("Every preliminary match needs a winner first")
        if advance_count < 2:
            raise InsufficientParticipantsException(
                f"At least 2 players must advance, got {advance_count}"
            )
        if advance_count > len(run.players):
            raise InvalidOperandException(
                f"Cannot advance {advance_count} of {len(run.players)} players"
            )

        qualified = self._ranked_by_score(run, run.players)[:advance_count]
        if run.bracket is not None:
            logger.warning("Redrawing the finals bracket")
        bracket = self.bracket_manager.build(qualified)
        logger.info(f"Advanced {advance_count} players to the finals bracket")
        return replace(run, bracket=bracket)

    def set_bracket_winner(
        self, run: HybridRun, round_idx: int, match_idx: int, player_id: str
    ) -> HybridRun:
        if run.bracket is None:
            raise PrecondPendingException("The finals bracket has not been drawn")
        bracket = self.bracket_manager.set_winner(run.bracket, round_idx, match_idx, player_id)
        return replace(run, bracket=bracket)

    def final_standings(self, run: HybridRun) -> Ranking:
        """Bracket placements, then players who did not qualify by preliminary score."""
        if run.bracket is None:
            return [p.id for p in self._ranked_by_score(run, run.players)]
        placed = self.bracket_manager.final_standings(run.bracket)
        rest = [p for p in run.players if p.id not in placed]
        return placed + [p.id for p in self._ranked_by_score(run, rest)]
