from __future__ import annotations

import argparse
import json

from hanoi_trial.app.common import (
    add_common_arguments,
    build_session,
    generate_or_exit,
    resolve_cli_settings,
)
from hanoi_trial.progress import Progress
from hanoi_trial.solution import format_play_time
from hanoi_trial.text import format_steps


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hanoi-trial solve", description="Fetch and print a Tower of Hanoi solution."
    )
    add_common_arguments(parser)
    parser.add_argument("--json", action="store_true", help="Print the raw solution JSON.")
    args = parser.parse_args(argv)

    settings = resolve_cli_settings(args)
    session = build_session(args, settings, instant=True)
    solution = generate_or_exit(session, args.n_disks)

    if args.json:
        print(json.dumps(solution.to_dict(), indent=2))
        return 0

    print(f"Disks: {args.n_disks}")
    print(f"Total moves required: {solution.total_steps:,}")
    print(f"Time required: {format_play_time(solution.total_steps)}")
    if solution.is_playable:
        print()
        print(format_steps(solution, Progress()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
