"""Preliminary groups: serpentine draw and round-robin schedules."""

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

import math
from itertools import combinations
from typing import List, Sequence, Tuple

from arenapairing.constants import PLAYERS_PER_GROUP_HINT


def default_group_count(player_count: int) -> int:
    """One group per five players, rounded up."""
    return max(1, math.ceil(player_count / PLAYERS_PER_GROUP_HINT))


def distribute_serpentine(ordered_ids: Sequence[str], group_count: int) -> List[List[str]]:
    """Deal players into groups in snake order.

    Passes alternate direction: 0, 1, ..., g-1 then g-1, ..., 0. With a ranked
    order this spreads the strongest players across groups.

    Args:
        ordered_ids: Players in draw order
        group_count: Number of groups (>= 1)

    Returns:
        Group member lists in draw order
    """
    groups: List[List[str]] = [[] for _ in range(group_count)]
    for index, player_id in enumerate(ordered_ids):
        group_index = index % group_count
        if (index // group_count) % 2 == 1:
            group_index = group_count - 1 - group_index
        groups[group_index].append(player_id)
    return groups


def round_robin_pairs(member_ids: Sequence[str]) -> List[Tuple[str, str]]:
    """Every unordered pair of members once, ``(i, j)`` with ``i < j``."""
    return list(combinations(member_ids, 2))
