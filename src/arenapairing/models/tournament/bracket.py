"""Single-elimination bracket data class."""

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

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from arenapairing.models.enums import FormatStatus, RoundKind
from arenapairing.models.player import Player
from arenapairing.models.tournament.match import Match
from arenapairing.models.tournament.round_data import RoundData


@dataclass(frozen=True)
class Bracket:
    """An ordered sequence of elimination rounds.

    Attributes
    ----------
    players : tuple of Player
        Participants in seed order (strongest first).
    rounds : tuple of RoundData
        Rounds from the first round to the terminal round.
    """

    players: Tuple[Player, ...]
    rounds: Tuple[RoundData, ...]

    @property
    def size(self) -> int:
        """Number of first-round slots (a power of two)."""
        if not self.rounds:
            return 0
        return len(self.rounds[0].matches) * 2

    @property
    def terminal_round(self) -> RoundData:
        return self.rounds[-1]

    @property
    def final_match(self) -> Match:
        return self.terminal_round.matches[0]

    @property
    def third_place_match(self) -> Optional[Match]:
        if self.terminal_round.kind == RoundKind.FINAL_AND_THIRD:
            return self.terminal_round.matches[1]
        return None

    @property
    def third_place_void(self) -> bool:
        """The third-place match can never be filled.

        Happens when a semifinal was decided by a bye, which leaves one
        semifinal without a loser.
        """
        if self.third_place_match is None or len(self.rounds) < 2:
            return False
        return any(match.is_bye for match in self.rounds[-2].matches)

    @property
    def status(self) -> FormatStatus:
        if not self.rounds:
            return FormatStatus.NOT_STARTED
        if not self.final_match.is_decided:
            return FormatStatus.IN_PROGRESS
        third = self.third_place_match
        if third is not None and not third.is_decided and not self.third_place_void:
            return FormatStatus.IN_PROGRESS
        return FormatStatus.FINISHED

    def seed_of(self, player_id: str) -> int:
        """Seed position (0 is the top seed)."""
        for seed, player in enumerate(self.players):
            if player.id == player_id:
                return seed
        return len(self.players)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize bracket to dictionary."""
        return {
            "players": [p.to_dict() for p in self.players],
            "rounds": [r.to_dict() for r in self.rounds],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bracket":
        """Deserialize bracket from dictionary."""
        return cls(
            players=tuple(Player.from_dict(p) for p in data.get("players", [])),
            rounds=tuple(RoundData.from_dict(r) for r in data.get("rounds", [])),
        )
