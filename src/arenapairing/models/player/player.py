"""A roster participant as seen by the engine."""

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

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from arenapairing.models.enums import Seeding


@dataclass(frozen=True)
class Player:
    """Represents a participant supplied by the roster provider.

    The engine never mutates players. Format-specific statistics (score,
    opponents, SOS) are derived from match history instead of being stored
    here.

    Attributes
    ----------
    id : str
        Unique identifier from the roster.
    name : str
        Display name. Defaults to the id.
    rank : float
        Display rank, higher is stronger. Only used for seeding.
    """

    id: str
    name: str = field(default="")
    rank: float = 0.0

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize player to dictionary."""
        return {"id": self.id, "name": self.name, "rank": self.rank}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Deserialize player from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            rank=data.get("rank", 0.0),
        )


def order_players(
    players: Sequence[Player], seeding: Seeding, rng: random.Random
) -> List[Player]:
    """Order players for an initial draw.

    Ranked seeding sorts by rank, strongest first, keeping roster order
    between equal ranks. Random seeding shuffles with ``rng``.
    """
    if seeding == Seeding.RANKED:
        return sorted(players, key=lambda p: -p.rank)
    shuffled = list(players)
    rng.shuffle(shuffled)
    return shuffled
