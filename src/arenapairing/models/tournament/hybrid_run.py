"""Hybrid run: round-robin preliminary groups feeding an elimination bracket."""

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
from typing import Any, Dict, Iterator, Optional, Tuple

from arenapairing.models.enums import FormatStatus, Seeding
from arenapairing.models.player import Player
from arenapairing.models.tournament.bracket import Bracket
from arenapairing.models.tournament.match import Match


@dataclass(frozen=True)
class Group:
    """A preliminary group. Matches are a flat list played at the group's pace.

    Attributes
    ----------
    index : int
        Group number (0-indexed).
    player_ids : tuple of str
        Members in the order they were drawn into the group.
    matches : tuple of Match
        Every unordered pair of members exactly once.
    """

    index: int
    player_ids: Tuple[str, ...]
    matches: Tuple[Match, ...] = ()

    @property
    def is_completed(self) -> bool:
        return all(match.is_decided for match in self.matches)

    def with_match(self, position: int, match: Match) -> "Group":
        matches = list(self.matches)
        matches[position] = match
        return replace(self, matches=tuple(matches))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "player_ids": list(self.player_ids),
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Group":
        return cls(
            index=data["index"],
            player_ids=tuple(data.get("player_ids", [])),
            matches=tuple(Match.from_dict(m) for m in data.get("matches", [])),
        )


@dataclass(frozen=True)
class HybridRun:
    """Preliminary groups plus the finals bracket once it has been drawn.

    Attributes
    ----------
    players : tuple of Player
        Participants in seeded (draw) order.
    groups : tuple of Group
        Disjoint round-robin groups.
    bracket : Bracket or None
        Finals bracket, populated by advancing the top players.
    seeding : Seeding
        How the draw order was produced.
    """

    players: Tuple[Player, ...]
    groups: Tuple[Group, ...] = ()
    bracket: Optional[Bracket] = None
    seeding: Seeding = Seeding.RANKED

    @property
    def status(self) -> FormatStatus:
        if not self.groups:
            return FormatStatus.NOT_STARTED
        if self.bracket is not None and self.bracket.status == FormatStatus.FINISHED:
            return FormatStatus.FINISHED
        return FormatStatus.IN_PROGRESS

    @property
    def preliminaries_complete(self) -> bool:
        return all(group.is_completed for group in self.groups)

    def iter_matches(self) -> Iterator[Match]:
        for group in self.groups:
            yield from group.matches

    def locate_match(self, match_id: str) -> Optional[Tuple[int, int]]:
        """(group index, position) of a preliminary match, or None."""
        for group_idx, group in enumerate(self.groups):
            for position, match in enumerate(group.matches):
                if match.id == match_id:
                    return group_idx, position
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize hybrid run to dictionary."""
        return {
            "players": [p.to_dict() for p in self.players],
            "groups": [g.to_dict() for g in self.groups],
            "bracket": self.bracket.to_dict() if self.bracket else None,
            "seeding": self.seeding.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HybridRun":
        """Deserialize hybrid run from dictionary."""
        bracket_data = data.get("bracket")
        return cls(
            players=tuple(Player.from_dict(p) for p in data.get("players", [])),
            groups=tuple(Group.from_dict(g) for g in data.get("groups", [])),
            bracket=Bracket.from_dict(bracket_data) if bracket_data else None,
            seeding=Seeding(data.get("seeding", Seeding.RANKED.value)),
        )
