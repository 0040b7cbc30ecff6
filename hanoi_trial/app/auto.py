from __future__ import annotations

import argparse
import sys

from hanoi_trial.app.common import (
    add_common_arguments,
    build_session,
    generate_or_exit,
    resolve_cli_settings,
)
from hanoi_trial.game import GameSnapshot
from hanoi_trial.reporting import build_step_progress_reporter
from hanoi_trial.text import format_board, format_status, format_steps


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hanoi-trial auto", description="Watch the solution play itself."
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--stop-after",
        type=int,
        default=None,
        help="Stop auto-solve once this many steps are completed.",
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Do not print a board after each move."
    )
    parser.add_argument(
        "--progress", action="store_true", help="Show a tqdm progress bar on stderr."
    )
    args = parser.parse_args(argv)

    settings = resolve_cli_settings(args)
    session = build_session(args, settings)
    solution = generate_or_exit(session, args.n_disks)
    if not session.is_playable:
        print(format_steps(solution, session.game.progress))
        return 0

    game = session.game
    reporter = build_step_progress_reporter(
        enabled=args.progress,
        total_steps=solution.final_step_number,
        explicit_request=args.progress,
    )
    last_step = game.current_step

    def on_change(snapshot: GameSnapshot) -> None:
        nonlocal last_step
        reporter.on_progress(snapshot.progress)
        if snapshot.progress.current_step == last_step:
            return
        last_step = snapshot.progress.current_step
        if not args.quiet:
            print(format_board(snapshot))
            print(format_status(snapshot, solution), flush=True)
        completed = len(snapshot.progress.completed_steps)
        if args.stop_after is not None and completed >= args.stop_after:
            game.stop_auto_solve()

    unsubscribe = game.subscribe(on_change)
    try:
        if not session.auto_solve():
            print("Auto-solve could not start.", file=sys.stderr)
            return 1
        game.scheduler.run_until_idle()
    finally:
        unsubscribe()
        reporter.close()

    snapshot = game.snapshot()
    print(format_status(snapshot, solution))
    return 1 if game.last_error is not None else 0


if __name__ == "__main__":
    raise SystemExit(main())
