"""Match data class."""

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

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from arenapairing.constants import BYE
from arenapairing.type_hints import Slot, Slots


def is_real(slot: Slot) -> bool:
    """True if the slot holds a player id (not BYE, not empty)."""
    return slot is not None and slot != BYE


@dataclass(frozen=True)
class Match:
    """A single pairing of two slots and its result.

    Attributes
    ----------
    id : str
        Match identifier, unique inside its run.
    slots : tuple of (str or None)
        The two participants. Each is a player id, ``BYE`` or ``None``.
    winner_id : str or None
        The winning player id, ``None`` while undecided.
    rematch : bool
        True when the two players already met earlier in the run.
    """

    id: str
    slots: Slots = (None, None)
    winner_id: Optional[str] = None
    rematch: bool = False

    @property
    def is_bye(self) -> bool:
        """A match with a BYE in either slot."""
        return BYE in self.slots

    @property
    def is_ready(self) -> bool:
        """Both slots hold real players, so the match can be decided."""
        return all(is_real(slot) for slot in self.slots)

    @property
    def is_decided(self) -> bool:
        return self.winner_id is not None

    @property
    def participants(self) -> List[str]:
        """Real players in slot order."""
        return [slot for slot in self.slots if is_real(slot)]

    @property
    def loser_id(self) -> Optional[str]:
        """The real participant who is not the winner, ``None`` if unset."""
        if self.winner_id is None:
            return None
        for slot in self.participants:
            if slot != self.winner_id:
                return slot
        return None

    def has_player(self, player_id: str) -> bool:
        return player_id in self.participants

    def opponent_of(self, player_id: str) -> Slot:
        """Slot facing ``player_id`` (a player id or ``BYE``)."""
        first, second = self.slots
        if first == player_id:
            return second
        if second == player_id:
            return first
        return None

    def with_winner(self, winner_id: Optional[str]) -> "Match":
        return replace(self, winner_id=winner_id)

    def cleared(self) -> "Match":
        """Copy with both slots emptied and no winner."""
        return replace(self, slots=(None, None), winner_id=None, rematch=False)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "slots": list(self.slots),
            "winner_id": self.winner_id,
            "rematch": self.rematch,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        first, second = data.get("slots", (None, None))
        return cls(
            id=data["id"],
            slots=(first, second),
            winner_id=data.get("winner_id"),
            rematch=data.get("rematch", False),
        )
