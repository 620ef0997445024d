"""Rated duel management.

This module records and cancels duels on an append-only ledger. Ratings are
always re-derived by replaying the active records in chronological order, so
cancelling a duel that is not the latest one still yields exact ratings.
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
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Tuple

from arenapairing.constants import GUEST_ID
from arenapairing.controllers.rating.elo import apply, compute_delta
from arenapairing.exceptions import InvalidOperandException, UnknownReferenceException
from arenapairing.models.enums import DuelOutcome, RecordStatus
from arenapairing.models.rating import RatingLedger, RatingRecord
from arenapairing.models.tournament import TournamentConfig
from arenapairing.utils import generate_id, setup_logger

logger = setup_logger(__name__)


class RatingManager:
    """Records, cancels and replays rated duels.

    The guest opponent (``GUEST_ID``) is always accepted. Its rating is the
    configured guest rating and never moves.
    """

    def __init__(
        self,
        config: Optional[TournamentConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or TournamentConfig()
        self.rng = rng or random.Random(self.config.seed)

    def open_ledger(self, initial_ratings: Mapping[str, Optional[int]]) -> RatingLedger:
        """Create a ledger for a roster.

        Args:
            initial_ratings: Rating per player id; ``None`` uses the default rating

        Returns:
            An empty ledger
        """
        ratings = {
            player_id: self.config.default_rating if rating is None else int(rating)
            for player_id, rating in initial_ratings.items()
        }
        return RatingLedger(initial_ratings=ratings)

    def register_player(
        self, ledger: RatingLedger, player_id: str, rating: Optional[int] = None
    ) -> RatingLedger:
        """Add a player to the ledger's roster."""
        if player_id == GUEST_ID:
            raise InvalidOperandException(f"'{GUEST_ID}' is reserved for the guest opponent")
        ratings = dict(ledger.initial_ratings)
        ratings[player_id] = self.config.default_rating if rating is None else int(rating)
        return replace(ledger, initial_ratings=ratings)

    # ========== Replay ==========

    def replay(self, ledger: RatingLedger) -> Tuple[Dict[str, int], Tuple[RatingRecord, ...]]:
        """Replay every active record from the initial ratings.

        Returns:
            Tuple of (current ratings, records with refreshed pre-ratings and deltas)
        """
        ratings = dict(ledger.initial_ratings)
        refreshed: List[RatingRecord] = []
        for record in ledger.records:
            if not record.is_active:
                refreshed.append(record)
                continue
            rating_a = self._rating(ratings, record.player_a)
            rating_b = self._rating(ratings, record.player_b)
            delta = compute_delta(rating_a, rating_b, record.outcome, record.k_factor)
            self._set_rating(ratings, record.player_a, apply(rating_a, delta))
            self._set_rating(ratings, record.player_b, apply(rating_b, -delta))
            refreshed.append(
                replace(
                    record,
                    rating_a_before=rating_a,
                    rating_b_before=rating_b,
                    delta=delta,
                )
            )
        return ratings, tuple(refreshed)

    def current_ratings(self, ledger: RatingLedger) -> Dict[str, int]:
        ratings, _ = self.replay(ledger)
        return ratings

    def rating_of(self, ledger: RatingLedger, player_id: str) -> int:
        self._require_player(ledger, player_id)
        return self._rating(self.current_ratings(ledger), player_id)

    def games_played(self, ledger: RatingLedger, player_id: str) -> int:
        """Number of active duels involving ``player_id``."""
        self._require_player(ledger, player_id)
        return sum(1 for record in ledger.active_records() if record.involves(player_id))

    # ========== Commands ==========

    def record_duel(
        self,
        ledger: RatingLedger,
        player_a: str,
        player_b: str,
        outcome: DuelOutcome,
        timestamp: Optional[datetime] = None,
    ) -> RatingLedger:
        """Append a rated duel.

        Args:
            ledger: Current ledger
            player_a: First player id
            player_b: Second player id (may be the guest)
            outcome: Result from A's point of view
            timestamp: When the duel was played, defaults to now (UTC)

        Returns:
            New ledger with the record appended

        Raises:
            UnknownReferenceException: If a player is not in the ledger
            InvalidOperandException: If a player duels themselves
        """
        self._require_player(ledger, player_a)
        self._require_player(ledger, player_b)
        if player_a == player_b:
            raise InvalidOperandException(f"Player {player_a} cannot duel themselves")

        ratings = self.current_ratings(ledger)
        rating_a = self._rating(ratings, player_a)
        rating_b = self._rating(ratings, player_b)
        k_factor = self.config.k_factor
        delta = compute_delta(rating_a, rating_b, outcome, k_factor)

        record_id = generate_id("duel", self.rng)
        while ledger.find_record(record_id) is not None:
            record_id = generate_id("duel", self.rng)

        record = RatingRecord(
            id=record_id,
            player_a=player_a,
            player_b=player_b,
            outcome=outcome,
            rating_a_before=rating_a,
            rating_b_before=rating_b,
            delta=delta,
            k_factor=k_factor,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        logger.info(
            f"Recorded duel {record.id}: {player_a} ({rating_a}) vs "
            f"{player_b} ({rating_b}), {outcome.value}, delta {delta:+d}"
        )
        return replace(ledger, records=ledger.records + (record,))

    def cancel_duel(self, ledger: RatingLedger, record_id: str) -> RatingLedger:
        """Cancel a duel and re-derive every later record.

        Raises:
            UnknownReferenceException: If the record does not exist
            InvalidOperandException: If the record is already cancelled
        """
        position = ledger.find_record(record_id)
        if position is None:
            raise UnknownReferenceException(f"No duel record with id {record_id}")
        record = ledger.records[position]
        if not record.is_active:
            raise InvalidOperandException(f"Duel {record_id} is already cancelled")

        records = list(ledger.records)
        records[position] = replace(record, status=RecordStatus.CANCELLED)
        _, refreshed = self.replay(replace(ledger, records=tuple(records)))

        later = len(ledger.records) - position - 1
        if later:
            logger.info(f"Cancelled duel {record_id}; replayed {later} later record(s)")
        else:
            logger.info(f"Cancelled duel {record_id}")
        return replace(ledger, records=refreshed)

    # ========== Helpers ==========

    def _require_player(self, ledger: RatingLedger, player_id: str) -> None:
        if player_id != GUEST_ID and player_id not in ledger.initial_ratings:
            raise UnknownReferenceException(f"Unknown player {player_id}")

    def _rating(self, ratings: Mapping[str, int], player_id: str) -> int:
        if player_id == GUEST_ID:
            return self.config.guest_rating
        return ratings[player_id]

    @staticmethod
    def _set_rating(ratings: Dict[str, int], player_id: str, rating: int) -> None:
        if player_id != GUEST_ID:
            ratings[player_id] = rating
