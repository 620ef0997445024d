"""Exceptions for use in Arena Pairing"""

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

from arenapairing.models.enums import ErrorKind

# ========== Base Application Exception ==========


class ArenaPairingException(Exception):
    """Base exception for all Arena Pairing errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    Each subclass names the ``ErrorKind`` it reports through the command surface.
    """

    kind: ErrorKind = ErrorKind.INVALID_OPERAND


# ========== Engine Exceptions ==========


class InsufficientParticipantsException(ArenaPairingException):
    """Raised when fewer than two players are supplied to a format."""

    kind = ErrorKind.INSUFFICIENT_PARTICIPANTS


class InvalidOperandException(ArenaPairingException):
    """Raised when a winner is not a slot occupant, or a slot is BYE/empty
    when a decision is required."""

    kind = ErrorKind.INVALID_OPERAND


class PrecondPendingException(ArenaPairingException):
    """Raised when an operation needs a fully resolved prior stage."""

    kind = ErrorKind.PRECOND_PENDING


class NoHistoryException(ArenaPairingException):
    """Raised when cancel/reshuffle is requested with no rounds recorded."""

    kind = ErrorKind.NO_HISTORY


class UnknownReferenceException(ArenaPairingException):
    """Raised when a match, round, record or player id does not exist."""

    kind = ErrorKind.UNKNOWN_REFERENCE


# ========== Configuration Exceptions ==========


class ConfigurationException(ArenaPairingException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
