"""Tournament state models."""

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

from arenapairing.models.tournament.bracket import Bracket
from arenapairing.models.tournament.hybrid_run import Group, HybridRun
from arenapairing.models.tournament.match import Match, is_real
from arenapairing.models.tournament.round_data import RoundData, opponent_history
from arenapairing.models.tournament.swiss_run import SwissRun, SwissStanding
from arenapairing.models.tournament.tournament_config import TournamentConfig

__all__ = [
    "Bracket",
    "Group",
    "HybridRun",
    "Match",
    "RoundData",
    "SwissRun",
    "SwissStanding",
    "TournamentConfig",
    "is_real",
    "opponent_history",
]
