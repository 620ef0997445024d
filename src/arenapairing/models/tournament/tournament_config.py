"""TournamentConfig data class."""

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

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from arenapairing.constants import (
    DEFAULT_ADVANCE_COUNT,
    DEFAULT_GUEST_RATING,
    DEFAULT_K_FACTOR,
    DEFAULT_RATING,
    DEFAULT_SWISS_ROUNDS,
)
from arenapairing.exceptions import InvalidConfigurationException
from arenapairing.models.enums import Seeding


@dataclass
class TournamentConfig:
    """Engine configuration settings.

    Attributes
    ----------
    name : str
        Tournament name.
    k_factor : int
        ELO K-factor applied to every rated duel.
    default_rating : int
        Rating used for roster players without a rating.
    guest_rating : int
        Fixed rating of the guest opponent.
    swiss_rounds : int
        Planned number of Swiss rounds. Informational: the caller decides
        when the league ends.
    hybrid_group_count : int or None
        Number of preliminary groups, ``None`` for one group per five players.
    hybrid_advance_count : int
        Players advancing from the preliminaries to the finals bracket.
    hybrid_seeding : Seeding
        Draw order for the preliminaries.
    seed : int or None
        Seed for the engine's random source. ``None`` draws a fresh seed.
    """

    name: str = "Untitled Tournament"
    k_factor: int = DEFAULT_K_FACTOR
    default_rating: int = DEFAULT_RATING
    guest_rating: int = DEFAULT_GUEST_RATING
    swiss_rounds: int = DEFAULT_SWISS_ROUNDS
    hybrid_group_count: Optional[int] = None
    hybrid_advance_count: int = DEFAULT_ADVANCE_COUNT
    hybrid_seeding: Seeding = Seeding.RANKED
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.hybrid_seeding, str):
            try:
                self.hybrid_seeding = Seeding(self.hybrid_seeding)
            except ValueError as e:
                raise InvalidConfigurationException(
                    f"Unknown seeding mode: {self.hybrid_seeding!r}"
                ) from e
        if self.k_factor <= 0:
            raise InvalidConfigurationException(
                f"k_factor must be positive, got {self.k_factor}"
            )
        if self.swiss_rounds < 1:
            raise InvalidConfigurationException(
                f"swiss_rounds must be at least 1, got {self.swiss_rounds}"
            )
        if self.hybrid_group_count is not None and self.hybrid_group_count < 1:
            raise InvalidConfigurationException(
                f"hybrid_group_count must be at least 1, got {self.hybrid_group_count}"
            )
        if self.hybrid_advance_count < 2:
            raise InvalidConfigurationException(
                f"hybrid_advance_count must be at least 2, got {self.hybrid_advance_count}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "name": self.name,
            "k_factor": self.k_factor,
            "default_rating": self.default_rating,
            "guest_rating": self.guest_rating,
            "swiss_rounds": self.swiss_rounds,
            "hybrid_group_count": self.hybrid_group_count,
            "hybrid_advance_count": self.hybrid_advance_count,
            "hybrid_seeding": self.hybrid_seeding.value,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentConfig":
        """Deserialize configuration from dictionary."""
        return cls(
            name=data.get("name", "Untitled Tournament"),
            k_factor=data.get("k_factor", DEFAULT_K_FACTOR),
            default_rating=data.get("default_rating", DEFAULT_RATING),
            guest_rating=data.get("guest_rating", DEFAULT_GUEST_RATING),
            swiss_rounds=data.get("swiss_rounds", DEFAULT_SWISS_ROUNDS),
            hybrid_group_count=data.get("hybrid_group_count"),
            hybrid_advance_count=data.get("hybrid_advance_count", DEFAULT_ADVANCE_COUNT),
            hybrid_seeding=data.get("hybrid_seeding", Seeding.RANKED.value),
            seed=data.get("seed"),
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "TournamentConfig":
        """Load configuration from a JSON file.

        Raises:
            InvalidConfigurationException: If the file is missing or malformed
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidConfigurationException(
                f"Cannot read configuration from {path}: {e}"
            ) from e
        if not isinstance(data, dict):
            raise InvalidConfigurationException(
                f"Configuration in {path} must be a JSON object"
            )
        return cls.from_dict(data)
