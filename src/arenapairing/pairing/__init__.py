"""Pairing algorithms for brackets, Swiss rounds and preliminary groups."""

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

from arenapairing.pairing.bracket_seeding import bracket_layout, first_round_slots
from arenapairing.pairing.group_pairing import (
    default_group_count,
    distribute_serpentine,
    round_robin_pairs,
)
from arenapairing.pairing.swiss_pairing import create_swiss_pairings, pair_initial_round

__all__ = [
    "bracket_layout",
    "create_swiss_pairings",
    "default_group_count",
    "distribute_serpentine",
    "first_round_slots",
    "pair_initial_round",
    "round_robin_pairs",
]
