from __future__ import annotations

import sys
from typing import Callable

from hanoi_trial.app import auto, play, render, solve
from hanoi_trial.config import DEFAULT_SOLVER_URL, SOLVER_URL_ENV

Handler = Callable[[list[str]], int]

COMMANDS: dict[str, tuple[str, Handler]] = {
    "solve": ("Fetch a solution and print its steps (or just the move count)", solve.main),
    "play": ("Click pegs from the terminal, one command per line", play.main),
    "auto": ("Auto-solve the remaining steps with animated frames", auto.main),
    "render": ("Write a PNG of the board after K solution steps", render.main),
}


def _print_help() -> None:
    print("usage: hanoi-trial <command> <n_disks> [options]\n")
    print("Commands:")
    for name, (desc, _) in COMMANDS.items():
        print(f"  {name:8s} {desc}")
    print(f"\nThe solver defaults to {DEFAULT_SOLVER_URL}; set ${SOLVER_URL_ENV} to change it.")
    print("Run 'hanoi-trial <command> --help' for the options of one command.")


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] in {"-h", "--help", "help"}:
        _print_help()
        return 0

    command, rest = args[0], args[1:]
    entry = COMMANDS.get(command)
    if entry is None:
        print(f"Unknown command: {command}", file=sys.stderr)
        _print_help()
        return 2
    _, handler = entry
    return handler(rest)


if __name__ == "__main__":
    raise SystemExit(main())
