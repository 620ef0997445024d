"""Swiss league state."""

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
from typing import Any, Dict, List, Optional, Tuple

from arenapairing.constants import BYE
from arenapairing.models.enums import FormatStatus, Seeding
from arenapairing.models.player import Player
from arenapairing.models.tournament.round_data import RoundData, opponent_history


@dataclass(frozen=True)
class SwissStanding:
    """One row of the Swiss standings table.

    Attributes
    ----------
    rank : int
        Competition rank; players level on score, SOS and SOSOS share it.
    player_id : str
        The player.
    score : int
        Matches won, byes included.
    sos : int
        Sum of real opponents' scores.
    sosos : int
        Sum of real opponents' SOS.
    opponents : tuple of str
        Opponent history in round order, ``BYE`` for byes.
    """

    rank: int
    player_id: str
    score: int
    sos: int
    sosos: int
    opponents: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "player_id": self.player_id,
            "score": self.score,
            "sos": self.sos,
            "sosos": self.sosos,
            "opponents": list(self.opponents),
        }


@dataclass(frozen=True)
class SwissRun:
    """Players and round history of a Swiss league.

    Scores and opponent histories are not stored: they are derived from
    ``rounds`` each time they are needed, so cancelling or editing a round can
    never leave stale counters behind.

    Attributes
    ----------
    players : tuple of Player
        Participants in roster order.
    rounds : tuple of RoundData
        Round history. Only the last round is open for play.
    seeding : Seeding
        How round 0 was ordered; reused when round 0 is paired again after a cancel.
    finished : bool
        Set by the caller once enough rounds have been played.
    """

    players: Tuple[Player, ...]
    rounds: Tuple[RoundData, ...] = ()
    seeding: Seeding = Seeding.RANKED
    finished: bool = field(default=False)

    @property
    def status(self) -> FormatStatus:
        if not self.rounds:
            return FormatStatus.NOT_STARTED
        if self.finished:
            return FormatStatus.FINISHED
        return FormatStatus.IN_PROGRESS

    @property
    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    @property
    def latest_round(self) -> Optional[RoundData]:
        return self.rounds[-1] if self.rounds else None

    def has_received_bye(self, player_id: str) -> bool:
        return BYE in opponent_history(self.rounds, player_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize Swiss run to dictionary."""
        return {
            "players": [p.to_dict() for p in self.players],
            "rounds": [r.to_dict() for r in self.rounds],
            "seeding": self.seeding.value,
            "finished": self.finished,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SwissRun":
        """Deserialize Swiss run from dictionary."""
        return cls(
            players=tuple(Player.from_dict(p) for p in data.get("players", [])),
            rounds=tuple(RoundData.from_dict(r) for r in data.get("rounds", [])),
            seeding=Seeding(data.get("seeding", Seeding.RANKED.value)),
            finished=data.get("finished", False),
        )
