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

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"

# Slot marker for a pairing-allocated bye
BYE = "BYE"

# Opponent id accepted by the rating ledger for players outside the roster
GUEST_ID = "guest"

# Game outcome scores (from player A's point of view)
WIN_SCORE = 1.0
DRAW_SCORE = 0.5
LOSS_SCORE = 0.0

# ELO defaults
DEFAULT_K_FACTOR = 32
DEFAULT_RATING = 1000
DEFAULT_GUEST_RATING = 1000
ELO_SCALE = 400

# Swiss defaults
DEFAULT_SWISS_ROUNDS = 4

# Hybrid defaults
DEFAULT_ADVANCE_COUNT = 8
PLAYERS_PER_GROUP_HINT = 5

# Tiebreak keys
TB_SCORE = "score"
TB_SOS = "sos"
TB_SOSOS = "sosos"

# Bracket round titles
TITLE_SEMIFINAL = "semifinal"
TITLE_FINAL = "final"
TITLE_FINAL_AND_THIRD = "final & third place"
TITLE_STANDARD_TEMPLATE = "{size}-player round"

# Bounded search for rematch-free Swiss pairings
MAX_PAIRING_SEARCH_NODES = 20000

# Logging
LOG_LEVEL_ENV = "ARENAPAIRING_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
