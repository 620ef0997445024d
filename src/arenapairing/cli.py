"""Interactive operator shell for Arena Pairing.

This module provides an interactive command-line interface that drives the
competition engine: load a roster, run brackets, Swiss leagues and hybrid
tournaments, record rated duels and save the resulting state.
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

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from arenapairing.constants import SAVE_FILE_EXTENSION
from arenapairing.engine import CommandResult, CompetitionEngine
from arenapairing.exceptions import ArenaPairingException
from arenapairing.models.player import Player
from arenapairing.models.tournament import Bracket, HybridRun, RoundData, SwissRun, TournamentConfig
from arenapairing.utils import set_package_log_level, setup_logger

logger = setup_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


# Command definitions with their subcommands
COMMANDS = {
    "roster": {"description": "List the loaded players", "subcommands": {}},
    "bracket": {
        "description": "Single-elimination bracket",
        "subcommands": {
            "build": "build [ids...] - seed by rank and draw the bracket",
            "win": "win <round> <match> <player> - toggle a match winner",
            "reset": "reset - discard the bracket",
            "show": "show - print the bracket",
        },
    },
    "swiss": {
        "description": "Swiss league",
        "subcommands": {
            "start": "start [ranked|random] - pair the opening round",
            "result": "result <round> <match_id> <winner|none> - set a result",
            "next": "next - pair the next round",
            "cancel": "cancel - drop the latest round",
            "reshuffle": "reshuffle - pair the latest round again",
            "swap": "swap <match_a> <slot_a> <match_b> <slot_b> - exchange two players",
            "finish": "finish - mark the league finished",
            "show": "show - print the latest round",
            "standings": "standings - print the standings table",
        },
    },
    "hybrid": {
        "description": "Round-robin groups feeding a finals bracket",
        "subcommands": {
            "start": "start [groups] - draw the preliminary groups",
            "result": "result <match_id> <winner> - toggle a preliminary winner",
            "advance": "advance [count] - seed the top scorers into the finals",
            "win": "win <round> <match> <player> - toggle a finals winner",
            "show": "show - print groups and finals",
        },
    },
    "duel": {
        "description": "Rated duels",
        "subcommands": {
            "record": "record <player_a> <player_b> <a_win|b_win|draw> - rate a duel",
            "cancel": "cancel <record_id> - cancel a duel and replay later ones",
            "ratings": "ratings - print current ratings",
        },
    },
    "standings": {
        "description": "Final standings: standings <bracket|swiss|hybrid>",
        "subcommands": {"bracket": None, "swiss": None, "hybrid": None},
    },
    "save": {"description": "Save engine state: save <file>", "subcommands": {}},
    "help": {"description": "Show help for a command", "subcommands": {}},
    "quit": {"description": "Exit the shell", "subcommands": {}},
}


def load_roster(path: Path) -> Tuple[List[Player], Dict[str, Optional[int]]]:
    """Load players and optional ratings from a JSON list.

    Each entry is ``{"id": ..., "name": ..., "rank": ..., "rating": ...}``;
    only ``id`` is required.

    Raises:
        ArenaPairingException: If the file cannot be read or is malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ArenaPairingException(f"Cannot read roster from {path}: {e}") from e
    if not isinstance(data, list):
        raise ArenaPairingException(f"Roster in {path} must be a JSON list")

    players = []
    ratings: Dict[str, Optional[int]] = {}
    for entry in data:
        if not isinstance(entry, dict) or "id" not in entry:
            raise ArenaPairingException(f"Roster entry without an id: {entry!r}")
        player = Player.from_dict(entry)
        players.append(player)
        ratings[player.id] = entry.get("rating")
    return players, ratings


# ========== Rendering ==========


def _slot_label(slot: Optional[str]) -> str:
    if slot is None:
        return "?"
    return slot


def format_round(round_data: RoundData, show_ids: bool = False) -> List[str]:
    lines = [f"{Colors.BOLD}{round_data.title}{Colors.ENDC}"]
    for position, match in enumerate(round_data.matches):
        first, second = (_slot_label(s) for s in match.slots)
        label = match.id if show_ids else str(position)
        line = f"  [{label}] {first} vs {second}"
        if match.winner_id is not None:
            line += f"  -> {Colors.OKGREEN}{match.winner_id}{Colors.ENDC}"
        if match.rematch:
            line += f"  {Colors.WARNING}(rematch){Colors.ENDC}"
        lines.append(line)
    return lines


def format_bracket(bracket: Bracket) -> str:
    lines = [f"Bracket: {len(bracket.players)} players, status {bracket.status.value}"]
    for round_data in bracket.rounds:
        lines.extend(format_round(round_data))
    if bracket.third_place_void:
        lines.append("  third place: void (semifinal decided by a bye)")
    return "\n".join(lines)


def format_swiss(run: SwissRun, planned_rounds: Optional[int] = None) -> str:
    if not run.rounds:
        return "Swiss run has no rounds"
    progress = f"round {len(run.rounds)}"
    if planned_rounds:
        progress += f" of {planned_rounds}"
    lines = [f"Swiss: {progress}, status {run.status.value}"]
    lines.extend(format_round(run.latest_round, show_ids=True))
    return "\n".join(lines)


def format_hybrid(run: HybridRun) -> str:
    lines = [f"Hybrid: {len(run.players)} players, status {run.status.value}"]
    for group in run.groups:
        lines.append(f"{Colors.BOLD}Group {group.index + 1}{Colors.ENDC}: {', '.join(group.player_ids)}")
        for match in group.matches:
            first, second = match.slots
            line = f"  [{match.id}] {first} vs {second}"
            if match.winner_id is not None:
                line += f"  -> {Colors.OKGREEN}{match.winner_id}{Colors.ENDC}"
            lines.append(line)
    if run.bracket is not None:
        lines.append(format_bracket(run.bracket))
    return "\n".join(lines)


def _format_result(result: CommandResult) -> str:
    if result:
        state = result.state
        if isinstance(state, Bracket):
            return format_bracket(state)
        if isinstance(state, SwissRun):
            return format_swiss(state)
        if isinstance(state, HybridRun):
            return format_hybrid(state)
        return f"{Colors.OKGREEN}OK{Colors.ENDC}"
    return f"{Colors.FAIL}Error ({result.error.value}): {result.message}{Colors.ENDC}"


def commands_help(command: Optional[str] = None) -> str:
    """Help text for all commands, or one command's subcommands."""
    if command is None:
        lines = [f"{Colors.BOLD}Available Commands:{Colors.ENDC}"]
        for name, info in COMMANDS.items():
            lines.append(f"  {Colors.OKGREEN}{name:12}{Colors.ENDC} - {info['description']}")
        return "\n".join(lines)
    if command not in COMMANDS:
        return f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}"
    info = COMMANDS[command]
    lines = [f"{Colors.BOLD}{command}{Colors.ENDC}: {info['description']}"]
    for name, usage in info["subcommands"].items():
        if usage:
            lines.append(f"  {Colors.OKCYAN}{name:10}{Colors.ENDC} {usage}")
    return "\n".join(lines)


# ========== Dispatch ==========


class UsageError(Exception):
    """Raised when a shell command is missing arguments or has malformed ones."""


def _arg(args: Sequence[str], index: int) -> str:
    if index >= len(args):
        raise UsageError(f"Missing argument {index + 1}")
    return args[index]


def _int_arg(args: Sequence[str], index: int) -> int:
    value = _arg(args, index)
    try:
        return int(value)
    except ValueError as e:
        raise UsageError(f"Expected a number, got {value!r}") from e


def _none_or(value: str) -> Optional[str]:
    return None if value.lower() in ("none", "-") else value


def _bracket(engine: CompetitionEngine, args: Sequence[str]) -> str:
    sub, rest = _arg(args, 0), args[1:]
    if sub == "build":
        return _format_result(engine.build_bracket(list(rest) or None))
    if sub == "win":
        return _format_result(
            engine.set_bracket_winner(_int_arg(rest, 0), _int_arg(rest, 1), _arg(rest, 2))
        )
    if sub == "reset":
        return _format_result(engine.reset_bracket())
    if sub == "show":
        return format_bracket(engine.bracket) if engine.bracket else "No bracket"
    raise UsageError(f"Unknown subcommand: {sub}")


def _swiss(engine: CompetitionEngine, args: Sequence[str]) -> str:
    sub, rest = _arg(args, 0), args[1:]
    if sub == "start":
        return _format_result(engine.start_swiss(seeding=_arg(rest, 0) if rest else "ranked"))
    if sub == "result":
        return _format_result(
            engine.set_swiss_result(_int_arg(rest, 0), _arg(rest, 1), _none_or(_arg(rest, 2)))
        )
    if sub == "next":
        return _format_result(engine.generate_next_swiss_round())
    if sub == "cancel":
        return _format_result(engine.cancel_last_swiss_round())
    if sub == "reshuffle":
        return _format_result(engine.reshuffle_last_swiss_round())
    if sub == "swap":
        return _format_result(
            engine.swap_swiss_players(
                _arg(rest, 0), _int_arg(rest, 1), _arg(rest, 2), _int_arg(rest, 3)
            )
        )
    if sub == "finish":
        return _format_result(engine.finish_swiss())
    if sub == "show":
        if not engine.swiss:
            return "No Swiss run"
        return format_swiss(engine.swiss, engine.config.swiss_rounds)
    if sub == "standings":
        result = engine.swiss_standings()
        if not result:
            return _format_result(result)
        lines = [f"{'#':>3}  {'player':15} {'score':>5} {'sos':>5} {'sosos':>6}  opponents"]
        for row in result.state:
            lines.append(
                f"{row.rank:>3}  {row.player_id:15} {row.score:>5} {row.sos:>5} "
                f"{row.sosos:>6}  {' '.join(row.opponents)}"
            )
        return "\n".join(lines)
    raise UsageError(f"Unknown subcommand: {sub}")


def _hybrid(engine: CompetitionEngine, args: Sequence[str]) -> str:
    sub, rest = _arg(args, 0), args[1:]
    if sub == "start":
        return _format_result(
            engine.start_hybrid_preliminaries(group_count=_int_arg(rest, 0) if rest else None)
        )
    if sub == "result":
        return _format_result(engine.set_preliminary_result(_arg(rest, 0), _arg(rest, 1)))
    if sub == "advance":
        count = _int_arg(rest, 0) if rest else None
        return _format_result(engine.advance_hybrid_to_bracket(count))
    if sub == "win":
        return _format_result(
            engine.set_hybrid_bracket_winner(_int_arg(rest, 0), _int_arg(rest, 1), _arg(rest, 2))
        )
    if sub == "show":
        return format_hybrid(engine.hybrid) if engine.hybrid else "No hybrid run"
    raise UsageError(f"Unknown subcommand: {sub}")


def _duel(engine: CompetitionEngine, args: Sequence[str]) -> str:
    sub, rest = _arg(args, 0), args[1:]
    if sub == "record":
        result = engine.record_duel(_arg(rest, 0), _arg(rest, 1), _arg(rest, 2))
        if not result:
            return _format_result(result)
        record = result.state.records[-1]
        return (
            f"{record.id}: {record.player_a} {record.rating_a_before} -> "
            f"{record.rating_a_after}, {record.player_b} {record.rating_b_before} -> "
            f"{record.rating_b_after}"
        )
    if sub == "cancel":
        return _format_result(engine.cancel_duel(_arg(rest, 0)))
    if sub == "ratings":
        ratings = engine.current_ratings()
        return "\n".join(
            f"  {player_id:15} {rating}"
            for player_id, rating in sorted(ratings.items(), key=lambda item: -item[1])
        )
    raise UsageError(f"Unknown subcommand: {sub}")


def _standings(engine: CompetitionEngine, args: Sequence[str]) -> str:
    result = engine.final_standings(_arg(args, 0))
    if not result:
        return _format_result(result)
    return "\n".join(f"{place:>3}. {player_id}" for place, player_id in enumerate(result.state, 1))


def _save(engine: CompetitionEngine, args: Sequence[str]) -> str:
    path = Path(_arg(args, 0))
    if not path.suffix:
        path = path.with_suffix(SAVE_FILE_EXTENSION)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(engine.to_dict(), f, indent=2)
    logger.info(f"Saved engine state to {path}")
    return f"Saved to {path}"


def _roster(engine: CompetitionEngine, args: Sequence[str]) -> str:
    if not engine.players:
        return "Roster is empty"
    return "\n".join(
        f"  {p.id:15} {p.name:20} rank {p.rank:g}" for p in engine.players.values()
    )


_HANDLERS = {
    "roster": _roster,
    "bracket": _bracket,
    "swiss": _swiss,
    "hybrid": _hybrid,
    "duel": _duel,
    "standings": _standings,
    "save": _save,
}


def dispatch(engine: CompetitionEngine, user_input: str) -> Tuple[bool, str]:
    """Execute one shell line against the engine.

    Args:
        engine: The engine to drive
        user_input: A line such as ``"swiss result 0 match_ab12 alice"``

    Returns:
        Tuple of (keep running, text to print)
    """
    parts = user_input.split()
    if not parts:
        return True, ""

    command = parts[0].lstrip("/")
    args = parts[1:]

    if command in ("quit", "exit", "q"):
        return False, "Goodbye!"
    if command in ("help", "?"):
        return True, commands_help(args[0] if args else None)
    if command not in _HANDLERS:
        return True, (
            f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}\n"
            f"Type {Colors.BOLD}help{Colors.ENDC} to see available commands"
        )

    try:
        return True, _HANDLERS[command](engine, args)
    except UsageError as e:
        return True, f"{Colors.WARNING}{e}{Colors.ENDC}\n{commands_help(command)}"
    except OSError as e:
        logger.error(f"{command} failed: {e}")
        return True, f"{Colors.FAIL}Error: {e}{Colors.ENDC}"


def create_completer() -> NestedCompleter:
    """Create autocomplete completer for interactive mode."""
    completions: Dict[str, Any] = {}
    for cmd, info in COMMANDS.items():
        completions[cmd] = {sub: None for sub in info["subcommands"]} or None
    return NestedCompleter.from_nested_dict(completions)


def run_interactive_mode(engine: CompetitionEngine) -> int:
    """Run the shell with autocomplete until the operator quits."""
    print(f"{Colors.OKBLUE}Arena Pairing{Colors.ENDC}: {engine.config.name}")
    print(f"Type {Colors.BOLD}help{Colors.ENDC} to see all available commands")

    session = PromptSession(
        completer=create_completer(),
        history=InMemoryHistory(),
        style=Style.from_dict({"prompt": "#00aa00 bold"}),
    )

    while True:
        try:
            user_input = session.prompt("arena> ").strip()
        except EOFError:
            break
        keep_running, output = dispatch(engine, user_input)
        if output:
            print(output)
        if not keep_running:
            break
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arena-pairing",
        description="Run brackets, Swiss leagues, hybrid tournaments and rated duels",
    )
    parser.add_argument("--roster", type=Path, help="JSON list of players")
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible draws")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def build_engine(args: argparse.Namespace) -> CompetitionEngine:
    """Create an engine from parsed command-line options."""
    config = TournamentConfig.load(args.config) if args.config else TournamentConfig()
    if args.seed is not None:
        config.seed = args.seed
    engine = CompetitionEngine(config=config)
    if args.roster:
        players, ratings = load_roster(args.roster)
        engine.set_roster(players, ratings)
    return engine


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the arena-pairing shell.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_package_log_level(logging.DEBUG)

    try:
        engine = build_engine(args)
    except ArenaPairingException as e:
        logger.error(f"Startup failed: {e}")
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}", file=sys.stderr)
        return 1

    try:
        return run_interactive_mode(engine)
    except KeyboardInterrupt:
        logger.info("Shell interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
