"""Command surface of the competition engine.

``CompetitionEngine`` owns the current bracket, Swiss run, hybrid run and
rating ledger for one roster. Every command validates its input through the
format managers and returns a ``CommandResult``; domain errors never escape
as exceptions.
"""

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
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from arenapairing.controllers.rating import RatingManager
from arenapairing.controllers.tournament import BracketManager, HybridManager, SwissManager
from arenapairing.exceptions import (
    ArenaPairingException,
    InvalidOperandException,
    PrecondPendingException,
    UnknownReferenceException,
)
from arenapairing.models.enums import CompetitionFormat, DuelOutcome, ErrorKind, Seeding
from arenapairing.models.player import Player, order_players
from arenapairing.models.rating import RatingLedger
from arenapairing.models.tournament import Bracket, HybridRun, SwissRun, TournamentConfig
from arenapairing.utils import setup_logger

logger = setup_logger(__name__)


class CommandResult:
    """Result of an engine command.

    Attributes:
        ok: Whether the command succeeded
        state: The updated state on success, the unchanged state on failure
        error: The failure kind, ``None`` on success
        message: Human-readable error message if the command failed
    """

    def __init__(
        self,
        ok: bool,
        state: Any = None,
        error: Optional[ErrorKind] = None,
        message: Optional[str] = None,
    ):
        self.ok = ok
        self.state = state
        self.error = error
        self.message = message

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.ok

    def __repr__(self) -> str:
        if self.ok:
            return "CommandResult(OK)"
        return f"CommandResult(FAILED({self.error.value}), {self.message!r})"


class CompetitionEngine:
    """Main engine class.

    This class coordinates all operations through specialized managers:
    - BracketManager: single-elimination brackets
    - SwissManager: Swiss rounds, results and standings
    - HybridManager: preliminary groups and the finals bracket
    - RatingManager: the rated duel ledger

    All managers share one ``random.Random`` seeded from the configuration, so
    a seeded engine replays identically.
    """

    def __init__(
        self,
        config: Optional[TournamentConfig] = None,
        rng: Optional[random.Random] = None,
        players: Optional[Sequence[Player]] = None,
        ratings: Optional[Mapping[str, Optional[int]]] = None,
    ) -> None:
        self.config = config or TournamentConfig()
        self.rng = rng or random.Random(self.config.seed)

        self.bracket_manager = BracketManager(self.rng)
        self.swiss_manager = SwissManager(self.rng)
        self.hybrid_manager = HybridManager(self.rng, self.bracket_manager)
        self.rating_manager = RatingManager(self.config, self.rng)

        self.players: Dict[str, Player] = {}
        self.bracket: Optional[Bracket] = None
        self.swiss: Optional[SwissRun] = None
        self.hybrid: Optional[HybridRun] = None
        self.ledger: RatingLedger = self.rating_manager.open_ledger({})
        if players:
            self.set_roster(players, ratings)

    # ========== Roster ==========

    def set_roster(
        self,
        players: Sequence[Player],
        ratings: Optional[Mapping[str, Optional[int]]] = None,
    ) -> None:
        """Replace the roster and register each player on the rating ledger.

        Args:
            players: Participants supplied by the roster provider
            ratings: Optional starting rating per player id
        """
        ratings = ratings or {}
        self.players = {p.id: p for p in players}
        ledger = self.ledger
        for player in players:
            if player.id not in ledger.initial_ratings:
                ledger = self.rating_manager.register_player(
                    ledger, player.id, ratings.get(player.id)
                )
        self.ledger = ledger
        logger.info(f"Roster set with {len(self.players)} players")

    def _resolve_players(self, player_ids: Optional[Sequence[str]]) -> List[Player]:
        if player_ids is None:
            return list(self.players.values())
        unknown = [pid for pid in player_ids if pid not in self.players]
        if unknown:
            raise UnknownReferenceException(f"Unknown player(s): {', '.join(unknown)}")
        return [self.players[pid] for pid in player_ids]

    def _run(self, name: str, command: Callable[[], Any], current: Any) -> CommandResult:
        try:
            state = command()
        except ArenaPairingException as e:
            logger.warning(f"{name} rejected ({e.kind.value}): {e}")
            return CommandResult(ok=False, state=current, error=e.kind, message=str(e))
        return CommandResult(ok=True, state=state)

    # ========== Bracket ==========

    def build_bracket(self, player_ids: Optional[Sequence[str]] = None) -> CommandResult:
        """Build a bracket seeded by display rank, strongest first."""

        def command() -> Bracket:
            seeded = order_players(self._resolve_players(player_ids), Seeding.RANKED, self.rng)
            self.bracket = self.bracket_manager.build(seeded)
            return self.bracket

        return self._run("build_bracket", command, self.bracket)

    def set_bracket_winner(self, round_idx: int, match_idx: int, player_id: str) -> CommandResult:
        def command() -> Bracket:
            if self.bracket is None:
                raise PrecondPendingException("No bracket has been built")
            self.bracket = self.bracket_manager.set_winner(
                self.bracket, round_idx, match_idx, player_id
            )
            return self.bracket

        return self._run("set_bracket_winner", command, self.bracket)

    def reset_bracket(self) -> CommandResult:
        def command() -> None:
            self.bracket_manager.reset(self.bracket)
            self.bracket = None

        return self._run("reset_bracket", command, self.bracket)

    # ========== Swiss ==========

    def start_swiss(
        self,
        player_ids: Optional[Sequence[str]] = None,
        seeding: Union[Seeding, str] = Seeding.RANKED,
    ) -> CommandResult:
        def command() -> SwissRun:
            self.swiss = self.swiss_manager.start(
                self._resolve_players(player_ids), _parse_seeding(seeding)
            )
            return self.swiss

        return self._run("start_swiss", command, self.swiss)

    def _swiss_command(self, name: str, update: Callable[[SwissRun], SwissRun]) -> CommandResult:
        def command() -> SwissRun:
            if self.swiss is None:
                raise PrecondPendingException("No Swiss run has been started")
            self.swiss = update(self.swiss)
            return self.swiss

        return self._run(name, command, self.swiss)

    def set_swiss_result(
        self,
        round_idx: int,
        match_id: str,
        winner_id: Optional[str],
        allow_history_edit: bool = False,
    ) -> CommandResult:
        return self._swiss_command(
            "set_swiss_result",
            lambda run: self.swiss_manager.set_result(
                run, round_idx, match_id, winner_id, allow_history_edit
            ),
        )

    def generate_next_swiss_round(self) -> CommandResult:
        """Pair the next round. Rounds past ``config.swiss_rounds`` are allowed but logged."""
        result = self._swiss_command("generate_next_swiss_round", self.swiss_manager.next_round)
        if result and len(result.state.rounds) > self.config.swiss_rounds:
            logger.warning(
                f"Round {len(result.state.rounds)} exceeds the planned "
                f"{self.config.swiss_rounds} Swiss rounds"
            )
        return result

    def cancel_last_swiss_round(self) -> CommandResult:
        """Drop the latest round. With no rounds the result reports ``NO_HISTORY``."""
        if self.swiss is None:
            return CommandResult(
                ok=False,
                state=None,
                error=ErrorKind.NO_HISTORY,
                message="No Swiss rounds to cancel",
            )
        return self._swiss_command(
            "cancel_last_swiss_round", self.swiss_manager.cancel_last_round
        )

    def reshuffle_last_swiss_round(self) -> CommandResult:
        return self._swiss_command(
            "reshuffle_last_swiss_round", self.swiss_manager.reshuffle_last_round
        )

    def swap_swiss_players(
        self, match_a: str, slot_a: int, match_b: str, slot_b: int
    ) -> CommandResult:
        return self._swiss_command(
            "swap_swiss_players",
            lambda run: self.swiss_manager.swap_players(run, match_a, slot_a, match_b, slot_b),
        )

    def finish_swiss(self) -> CommandResult:
        return self._swiss_command("finish_swiss", self.swiss_manager.finish)

    def swiss_standings(self) -> CommandResult:
        def command() -> list:
            if self.swiss is None:
                raise PrecondPendingException("No Swiss run has been started")
            return self.swiss_manager.standings(self.swiss)

        return self._run("swiss_standings", command, None)

    # ========== Hybrid ==========

    def start_hybrid_preliminaries(
        self,
        player_ids: Optional[Sequence[str]] = None,
        group_count: Optional[int] = None,
        seeding: Union[Seeding, str, None] = None,
    ) -> CommandResult:
        """Draw preliminary groups. Unset arguments come from the configuration."""

        def command() -> HybridRun:
            self.hybrid = self.hybrid_manager.start_preliminaries(
                self._resolve_players(player_ids),
                group_count if group_count is not None else self.config.hybrid_group_count,
                _parse_seeding(seeding or self.config.hybrid_seeding),
            )
            return self.hybrid

        return self._run("start_hybrid_preliminaries", command, self.hybrid)

    def _hybrid_command(self, name: str, update: Callable[[HybridRun], HybridRun]) -> CommandResult:
        def command() -> HybridRun:
            if self.hybrid is None:
                raise PrecondPendingException("No hybrid preliminaries have been started")
            self.hybrid = update(self.hybrid)
            return self.hybrid

        return self._run(name, command, self.hybrid)

    def set_preliminary_result(self, match_id: str, winner_id: str) -> CommandResult:
        return self._hybrid_command(
            "set_preliminary_result",
            lambda run: self.hybrid_manager.set_preliminary_result(run, match_id, winner_id),
        )

    def advance_hybrid_to_bracket(self, advance_count: Optional[int] = None) -> CommandResult:
        count = advance_count if advance_count is not None else self.config.hybrid_advance_count
        return self._hybrid_command(
            "advance_hybrid_to_bracket",
            lambda run: self.hybrid_manager.advance_to_bracket(run, count),
        )

    def set_hybrid_bracket_winner(
        self, round_idx: int, match_idx: int, player_id: str
    ) -> CommandResult:
        return self._hybrid_command(
            "set_hybrid_bracket_winner",
            lambda run: self.hybrid_manager.set_bracket_winner(
                run, round_idx, match_idx, player_id
            ),
        )

    # ========== Ratings ==========

    def record_duel(
        self,
        player_a: str,
        player_b: str,
        outcome: Union[DuelOutcome, str],
        timestamp: Optional[datetime] = None,
    ) -> CommandResult:
        def command() -> RatingLedger:
            self.ledger = self.rating_manager.record_duel(
                self.ledger, player_a, player_b, _parse_outcome(outcome), timestamp
            )
            return self.ledger

        return self._run("record_duel", command, self.ledger)

    def cancel_duel(self, record_id: str) -> CommandResult:
        def command() -> RatingLedger:
            self.ledger = self.rating_manager.cancel_duel(self.ledger, record_id)
            return self.ledger

        return self._run("cancel_duel", command, self.ledger)

    def current_ratings(self) -> Dict[str, int]:
        return self.rating_manager.current_ratings(self.ledger)

    # ========== Standings ==========

    def final_standings(self, competition: Union[CompetitionFormat, str]) -> CommandResult:
        """Ordered player ids for a format, best first."""

        def command() -> List[str]:
            fmt = _parse_format(competition)
            if fmt == CompetitionFormat.BRACKET:
                if self.bracket is None:
                    raise PrecondPendingException("No bracket has been built")
                return self.bracket_manager.final_standings(self.bracket)
            if fmt == CompetitionFormat.SWISS:
                if self.swiss is None:
                    raise PrecondPendingException("No Swiss run has been started")
                return self.swiss_manager.final_standings(self.swiss)
            if self.hybrid is None:
                raise PrecondPendingException("No hybrid preliminaries have been started")
            return self.hybrid_manager.final_standings(self.hybrid)

        return self._run("final_standings", command, None)

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize engine state to dictionary.

        The random source state is included so a restored engine keeps
        drawing fresh ids and shuffles instead of replaying the seed.

        Returns:
            Dictionary containing the configuration, roster and every state
        """
        version, internal, gauss_next = self.rng.getstate()
        return {
            "config": self.config.to_dict(),
            "players": [p.to_dict() for p in self.players.values()],
            "bracket": self.bracket.to_dict() if self.bracket else None,
            "swiss": self.swiss.to_dict() if self.swiss else None,
            "hybrid": self.hybrid.to_dict() if self.hybrid else None,
            "ledger": self.ledger.to_dict(),
            "rng_state": [version, list(internal), gauss_next],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompetitionEngine":
        """Deserialize engine state from dictionary."""
        engine = cls(config=TournamentConfig.from_dict(data.get("config", {})))
        engine.players = {
            p.id: p for p in (Player.from_dict(p_data) for p_data in data.get("players", []))
        }
        if data.get("bracket"):
            engine.bracket = Bracket.from_dict(data["bracket"])
        if data.get("swiss"):
            engine.swiss = SwissRun.from_dict(data["swiss"])
        if data.get("hybrid"):
            engine.hybrid = HybridRun.from_dict(data["hybrid"])
        if data.get("ledger"):
            engine.ledger = RatingLedger.from_dict(data["ledger"])
        if data.get("rng_state"):
            version, internal, gauss_next = data["rng_state"]
            # Shared by every manager
            engine.rng.setstate((version, tuple(internal), gauss_next))
        return engine


def _parse_enum(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as e:
        raise InvalidOperandException(f"Unknown {label}: {value!r}") from e


def _parse_seeding(value: Union[Seeding, str]) -> Seeding:
    return _parse_enum(Seeding, value, "seeding")


def _parse_outcome(value: Union[DuelOutcome, str]) -> DuelOutcome:
    return _parse_enum(DuelOutcome, value, "duel outcome")


def _parse_format(value: Union[CompetitionFormat, str]) -> CompetitionFormat:
    return _parse_enum(CompetitionFormat, value, "format")
