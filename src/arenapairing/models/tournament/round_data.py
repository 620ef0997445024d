"""Data model for tournament round."""

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
from typing import Any, Dict, Optional, Sequence, Tuple

from arenapairing.models.enums import RoundKind
from arenapairing.models.tournament.match import Match
from arenapairing.type_hints import OpponentHistory


@dataclass(frozen=True)
class RoundData:
    """Container for all matches produced together.

    Attributes
    ----------
    index : int
        Round index (0-indexed).
    title : str
        Human-readable title, e.g. "8-player round" or "semifinal".
    kind : RoundKind
        Structural role of the round inside a bracket.
    matches : tuple of Match
        Matches of the round in display order.
    """

    index: int
    title: str = ""
    kind: RoundKind = RoundKind.STANDARD
    matches: Tuple[Match, ...] = ()

    @property
    def is_completed(self) -> bool:
        """Every match of the round has a winner."""
        return all(match.is_decided for match in self.matches)

    def find_match(self, match_id: str) -> Optional[int]:
        """Position of ``match_id`` inside the round, or None."""
        for position, match in enumerate(self.matches):
            if match.id == match_id:
                return position
        return None

    def with_match(self, position: int, match: Match) -> "RoundData":
        """Copy of the round with the match at ``position`` replaced."""
        matches = list(self.matches)
        matches[position] = match
        return replace(self, matches=tuple(matches))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round data to dictionary."""
        return {
            "index": self.index,
            "title": self.title,
            "kind": self.kind.value,
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundData":
        """Deserialize round data from dictionary."""
        return cls(
            index=data["index"],
            title=data.get("title", ""),
            kind=RoundKind(data.get("kind", RoundKind.STANDARD.value)),
            matches=tuple(Match.from_dict(m) for m in data.get("matches", [])),
        )


def opponent_history(rounds: Sequence[RoundData], player_id: str) -> OpponentHistory:
    """Opponents met by ``player_id`` in round order, ``BYE`` for byes."""
    history: OpponentHistory = []
    for round_data in rounds:
        for match in round_data.matches:
            opponent = match.opponent_of(player_id)
            if opponent is not None:
                history.append(opponent)
    return history
