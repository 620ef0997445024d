"""Rated duel records and the append-only ledger holding them."""

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

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, Optional, Tuple

from dateutil.parser import isoparse

from arenapairing.constants import DEFAULT_K_FACTOR
from arenapairing.models.enums import DuelOutcome, RecordStatus


@dataclass(frozen=True)
class RatingRecord:
    """One rated duel.

    The delta is stored once and applied to player A; player B receives the
    exact negation, so every record is zero-sum.

    Attributes
    ----------
    id : str
        Record identifier.
    player_a : str
        First player id.
    player_b : str
        Second player id.
    outcome : DuelOutcome
        Result from player A's point of view.
    rating_a_before : int
        A's rating when the duel was (re)played.
    rating_b_before : int
        B's rating when the duel was (re)played.
    delta : int
        Rating change applied to A.
    k_factor : int
        K-factor the duel is rated with, kept so replays stay stable.
    status : RecordStatus
        Active records count towards ratings, cancelled ones do not.
    timestamp : datetime or None
        When the duel was recorded.
    """

    id: str
    player_a: str
    player_b: str
    outcome: DuelOutcome
    rating_a_before: int
    rating_b_before: int
    delta: int
    k_factor: int = DEFAULT_K_FACTOR
    status: RecordStatus = RecordStatus.ACTIVE
    timestamp: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE

    @property
    def rating_a_after(self) -> int:
        return self.rating_a_before + self.delta

    @property
    def rating_b_after(self) -> int:
        return self.rating_b_before - self.delta

    def involves(self, player_id: str) -> bool:
        return player_id in (self.player_a, self.player_b)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize record to dictionary."""
        return {
            "id": self.id,
            "player_a": self.player_a,
            "player_b": self.player_b,
            "outcome": self.outcome.value,
            "rating_a_before": self.rating_a_before,
            "rating_b_before": self.rating_b_before,
            "delta": self.delta,
            "k_factor": self.k_factor,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RatingRecord":
        """Deserialize record from dictionary."""
        timestamp = data.get("timestamp")
        return cls(
            id=data["id"],
            player_a=data["player_a"],
            player_b=data["player_b"],
            outcome=DuelOutcome(data["outcome"]),
            rating_a_before=data["rating_a_before"],
            rating_b_before=data["rating_b_before"],
            delta=data["delta"],
            k_factor=data.get("k_factor", DEFAULT_K_FACTOR),
            status=RecordStatus(data.get("status", RecordStatus.ACTIVE.value)),
            timestamp=isoparse(timestamp) if timestamp else None,
        )


@dataclass(frozen=True)
class RatingLedger:
    """Initial ratings plus every duel in chronological order.

    Current ratings are never stored: they are the replay of the active
    records over ``initial_ratings``.

    Attributes
    ----------
    initial_ratings : dict of str to int
        Ratings before the first recorded duel.
    records : tuple of RatingRecord
        Duels, oldest first.
    """

    initial_ratings: Dict[str, int] = field(default_factory=dict)
    records: Tuple[RatingRecord, ...] = ()

    def active_records(self) -> Iterator[RatingRecord]:
        return (record for record in self.records if record.is_active)

    def find_record(self, record_id: str) -> Optional[int]:
        for position, record in enumerate(self.records):
            if record.id == record_id:
                return position
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize ledger to dictionary."""
        return {
            "initial_ratings": dict(self.initial_ratings),
            "records": [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RatingLedger":
        """Deserialize ledger from dictionary."""
        return cls(
            initial_ratings={
                str(k): int(v) for k, v in data.get("initial_ratings", {}).items()
            },
            records=tuple(RatingRecord.from_dict(r) for r in data.get("records", [])),
        )
