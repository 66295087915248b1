"""CLI entrypoint for the vim command arcade."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from pathlib import Path

from .models import Buffer, PlayerStats
from .service import DEFAULT_DURATION_SECONDS, HINT_COMMAND, GameService, GameSession

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
DEFAULT_DB_PATH = Path(".vimarcade") / "scores.db"
MENU_QUIT_COMMANDS = {"q"}
FLOW_EXIT_COMMANDS = {":quit", ":exit", ":q"}
GUTTER_WIDTH = 4


def _service(db_path: Path | str = DEFAULT_DB_PATH, duration: float = DEFAULT_DURATION_SECONDS) -> GameService:
    """Create app service with local database path."""
    return GameService(db_path=db_path, duration=duration)


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="vimarcade", description="Arcade drills for vim normal-mode commands")
    parser.add_argument("command", nargs="?", default="play", choices=["play", "scores"])
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="SQLite file for player statistics")
    parser.add_argument("--duration", type=float, default=DEFAULT_DURATION_SECONDS, help="Round length in seconds")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.duration <= 0:
        parser.error("--duration must be positive")

    service = _service(args.db, args.duration)
    try:
        if args.command == "scores":
            _leaderboard_flow(service, print)
            return 0
        return play_shell(service)
    finally:
        service.close()


def play_shell(service: GameService, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run persistent menu-driven shell."""
    username = ""
    while not username:
        username = input_fn("Player name: ").strip()
        if not username:
            print_fn("Player name is required.")

    while True:
        print_fn("\n=== Vim Arcade ===")
        print_fn(f"Player: {username}")
        print_fn("1) Play")
        print_fn("2) Leaderboard")
        print_fn("3) My stats")
        print_fn("q) Quit")
        choice = input_fn("Choose: ").strip().lower()

        if choice == "1":
            _play_flow(service, username, input_fn, print_fn)
        elif choice == "2":
            _leaderboard_flow(service, print_fn)
        elif choice == "3":
            _stats_flow(service, username, print_fn)
        elif choice in MENU_QUIT_COMMANDS:
            return 0
        else:
            print_fn("Invalid choice.")


def render_buffer(buf: Buffer) -> list[str]:
    """Render buffer lines with a caret row marking the cursor."""
    row, col = buf.cursor.row, buf.cursor.col
    marker = " " * (GUTTER_WIDTH + col) + "^"
    rendered: list[str] = []
    if row < 0:
        rendered.append(marker)
    for index, line in enumerate(buf.lines):
        rendered.append(f"{index + 1:>{GUTTER_WIDTH - 1}} {line}")
        if index == row:
            rendered.append(marker)
    if row >= len(buf.lines):
        rendered.append(marker)
    return rendered


def _show_question(session: GameSession, print_fn: PrintFn) -> None:
    print_fn(f"\nScore: {session.score}   Time left: {session.time_left():.0f}s")
    print_fn(f"Prompt: {session.current_question.prompt}")
    for row in render_buffer(session.buffer):
        print_fn(row)


def _play_flow(service: GameService, username: str, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Run one timed round until the clock runs out."""
    try:
        session = service.start_session(username)
    except ValueError as exc:
        print_fn(f"Could not start round: {exc}")
        return

    print_fn(f"\nYou have {session.duration:.0f} seconds.")
    print_fn(f"Type {HINT_COMMAND} for a hint (no point for that question) or :q to leave.")

    while not session.timed_out():
        _show_question(session, print_fn)
        user_input = input_fn("Command: ")
        if user_input.strip().lower() in FLOW_EXIT_COMMANDS:
            session.finish()
            print_fn("Round abandoned. Nothing recorded.")
            return

        result = session.submit(user_input)
        if result.kind == "timeout":
            print_fn("Too late, time is up.")
            break
        if result.kind == "hint":
            print_fn(f"Hint: {result.hint}")
        elif result.kind == "correct":
            print_fn(f"Correct. +{result.points}")
            for row in render_buffer(result.buffer):
                print_fn(row)
        elif result.kind == "wrong":
            print_fn(f"Not quite ({result.command}). Try again.")

    print_fn("\n=== Time's up ===")
    print_fn(f"Final score: {session.score}")
    try:
        stats = service.finish_session(session)
    except ValueError as exc:
        print_fn(f"Could not save score: {exc}")
        return
    _print_stats(stats, print_fn)


def _print_stats(stats: PlayerStats, print_fn: PrintFn) -> None:
    print_fn(f"- games played: {stats.times_played}")
    print_fn(f"- best score: {stats.highest_score}")


def _stats_flow(service: GameService, username: str, print_fn: PrintFn) -> None:
    """Print statistics for the current player."""
    print_fn(f"\n=== Stats: {username} ===")
    stats = service.player_stats(username)
    if stats is None:
        print_fn("No games played yet.")
        return
    _print_stats(stats, print_fn)


def _leaderboard_flow(service: GameService, print_fn: PrintFn) -> None:
    """Print the top players table."""
    players = service.leaderboard()
    print_fn("\n=== Leaderboard ===")
    if not players:
        print_fn("No scores yet.")
        return
    name_width = max(len("Player"), max(len(item.username) for item in players))
    played_width = max(len("Played"), max(len(str(item.times_played)) for item in players))
    best_width = max(len("Best"), max(len(str(item.highest_score)) for item in players))
    header = f"{'#':>2} {'Player':<{name_width}} {'Played':>{played_width}} {'Best':>{best_width}}"
    print_fn(header)
    print_fn("-" * len(header))
    for idx, item in enumerate(players, start=1):
        print_fn(
            f"{idx:>2} "
            f"{item.username:<{name_width}} "
            f"{item.times_played:>{played_width}} "
            f"{item.highest_score:>{best_width}}"
        )


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
