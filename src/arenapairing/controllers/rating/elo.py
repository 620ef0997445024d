"""ELO rating calculation for a single duel."""

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

from arenapairing.constants import DRAW_SCORE, ELO_SCALE, LOSS_SCORE, WIN_SCORE
from arenapairing.models.enums import DuelOutcome

_ACTUAL_SCORES = {
    DuelOutcome.A_WIN: WIN_SCORE,
    DuelOutcome.B_WIN: LOSS_SCORE,
    DuelOutcome.DRAW: DRAW_SCORE,
}


def expected_score(rating_a: float, rating_b: float) -> float:
    """Expected score (0-1) for player A against player B."""
    return 1 / (1 + 10 ** ((rating_b - rating_a) / ELO_SCALE))


def actual_score(outcome: DuelOutcome) -> float:
    """Score obtained by player A for ``outcome``."""
    return _ACTUAL_SCORES[outcome]


def compute_delta(
    rating_a: float, rating_b: float, outcome: DuelOutcome, k_factor: float
) -> int:
    """Rating change for player A; player B receives the exact negation.

    The single rounded value is shared by both sides, so the pair of updates
    is always zero-sum. Rounding is half-up.

    Args:
        rating_a: Player A's rating before the duel
        rating_b: Player B's rating before the duel
        outcome: Result from A's point of view
        k_factor: Maximum rating movement for one duel

    Returns:
        Integer delta to add to A and subtract from B
    """
    raw = k_factor * (actual_score(outcome) - expected_score(rating_a, rating_b))
    return math.floor(raw + 0.5)


def apply(rating: int, delta: int) -> int:
    """Apply a delta. Passing ``-delta`` reverses a previous application."""
    return rating + delta
