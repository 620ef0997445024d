"""Bracket seeding: first-round slot layout and round structure."""

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

import random
from typing import List, Sequence, Tuple

from arenapairing.constants import (
    BYE,
    TITLE_FINAL,
    TITLE_FINAL_AND_THIRD,
    TITLE_SEMIFINAL,
    TITLE_STANDARD_TEMPLATE,
)
from arenapairing.models.enums import RoundKind
from arenapairing.type_hints import Slots
from arenapairing.utils import next_power_of_two

# (title, kind, match count) of one bracket round
RoundLayout = Tuple[str, RoundKind, int]


def first_round_slots(seeded_ids: Sequence[str], rng: random.Random) -> List[Slots]:
    """Lay out the first round of a bracket.

    The top ``bye_count`` seeds each face a BYE in the leading matches. The
    remaining players are shuffled with ``rng`` and paired in order.

    Args:
        seeded_ids: Player ids, strongest seed first
        rng: Random source for the unseeded draw

    Returns:
        One ``(slot, slot)`` pair per first-round match
    """
    size = next_power_of_two(len(seeded_ids))
    bye_count = size - len(seeded_ids)

    top_seeds = list(seeded_ids[:bye_count])
    others = list(seeded_ids[bye_count:])
    rng.shuffle(others)

    slots: List[Slots] = [(seed, BYE) for seed in top_seeds]
    for i in range(0, len(others), 2):
        slots.append((others[i], others[i + 1]))
    return slots


def bracket_layout(size: int) -> List[RoundLayout]:
    """Round structure for a bracket of ``size`` slots (a power of two >= 2).

    Rounds halve until four players remain. The semifinal then feeds a terminal
    round holding the final and the third-place match. A two-slot bracket is a
    single final.
    """
    if size == 2:
        return [(TITLE_FINAL, RoundKind.FINAL, 1)]

    layout: List[RoundLayout] = []
    round_size = size
    while round_size > 4:
        layout.append(
            (TITLE_STANDARD_TEMPLATE.format(size=round_size), RoundKind.STANDARD, round_size // 2)
        )
        round_size //= 2
    layout.append((TITLE_SEMIFINAL, RoundKind.SEMIFINAL, 2))
    layout.append((TITLE_FINAL_AND_THIRD, RoundKind.FINAL_AND_THIRD, 2))
    return layout
