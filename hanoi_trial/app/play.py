from __future__ import annotations

import argparse
import sys
from typing import TextIO

from hanoi_trial.animation import MoveOutcome
from hanoi_trial.app.common import (
    add_common_arguments,
    build_session,
    generate_or_exit,
    resolve_cli_settings,
)
from hanoi_trial.board import InvalidPegError
from hanoi_trial.session import PuzzleSession
from hanoi_trial.text import INVALID_MOVE_MESSAGE, format_board, format_status, format_steps

HELP = """Commands:
  a | b | c   click a peg (lift its top disk, or drop the lifted disk there)
  auto        auto-solve the remaining steps
  steps       show the solution steps around the current one
  reset       restack the disks on peg A
  help        show this help
  quit        leave"""


def _show(session: PuzzleSession, out: TextIO) -> None:
    snapshot = session.game.snapshot()
    print(format_board(snapshot), file=out)
    print(format_status(snapshot, session.solution), file=out)


def run_loop(session: PuzzleSession, lines: TextIO, out: TextIO) -> int:
    game = session.game
    _show(session, out)
    for raw in lines:
        command = raw.strip().lower()
        if not command:
            continue
        if command in {"q", "quit", "exit"}:
            break
        if command in {"h", "help", "?"}:
            print(HELP, file=out)
            continue
        if command == "steps":
            print(format_steps(session.solution, game.progress, window=9), file=out)
            continue
        if command == "reset":
            session.restart()
        elif command == "auto":
            if not session.auto_solve():
                print("Auto-solve is not available right now.", file=out)
            game.scheduler.run_until_idle()
        else:
            try:
                game.click_peg(command)
            except InvalidPegError:
                print(f"Unknown command: {command!r} (type 'help')", file=out)
                continue
            if game.last_outcome is MoveOutcome.INVALID:
                print(INVALID_MOVE_MESSAGE, file=out)
            game.scheduler.run_until_idle()
            game.last_outcome = None
        _show(session, out)
        if game.is_solved or game.is_tower_complete:
            print("Congratulations, the tower is solved!", file=out)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hanoi-trial play", description="Play Tower of Hanoi in the terminal."
    )
    add_common_arguments(parser)
    args = parser.parse_args(argv)

    settings = resolve_cli_settings(args)
    session = build_session(args, settings)
    solution = generate_or_exit(session, args.n_disks)
    if not session.has_board:
        print(format_steps(solution, session.game.progress))
        return 0

    print(HELP)
    return run_loop(session, sys.stdin, sys.stdout)


if __name__ == "__main__":
    raise SystemExit(main())
