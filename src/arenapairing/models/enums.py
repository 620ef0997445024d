"""Enumerations shared by the engine models."""

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

from enum import Enum


class ErrorKind(Enum):
    """Failure kinds reported by the command surface."""

    INSUFFICIENT_PARTICIPANTS = "insufficient_participants"
    INVALID_OPERAND = "invalid_operand"
    PRECOND_PENDING = "precond_pending"
    NO_HISTORY = "no_history"
    UNKNOWN_REFERENCE = "unknown_reference"


class FormatStatus(Enum):
    """Lifecycle of a bracket, Swiss or hybrid run."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class Seeding(Enum):
    """How the initial player order is produced."""

    RANKED = "ranked"
    RANDOM = "random"


class RoundKind(Enum):
    """Structural role of a round.

    ``FINAL`` is only used by a two-player bracket, whose single round is the
    final with no third-place match.
    """

    STANDARD = "standard"
    SEMIFINAL = "semifinal"
    FINAL_AND_THIRD = "final_and_third"
    FINAL = "final"


class DuelOutcome(Enum):
    """Result of a rated duel from player A's point of view."""

    A_WIN = "a_win"
    B_WIN = "b_win"
    DRAW = "draw"


class RecordStatus(Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class CompetitionFormat(Enum):
    """Formats run by the competition engine."""

    BRACKET = "bracket"
    SWISS = "swiss"
    HYBRID = "hybrid"
