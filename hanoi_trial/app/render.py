from __future__ import annotations

import argparse
from pathlib import Path

from hanoi_trial.app.common import (
    add_common_arguments,
    build_session,
    generate_or_exit,
    resolve_cli_settings,
)
from hanoi_trial.game import GameSnapshot
from hanoi_trial.vision import render_game_image


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hanoi-trial render", description="Render the board as a PNG."
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--after-step",
        type=int,
        default=0,
        help="Play this many solution steps before rendering.",
    )
    parser.add_argument("--out", default="hanoi.png", help="Output PNG path.")
    parser.add_argument("--width", type=int, default=640)
    parser.add_argument("--height", type=int, default=360)
    args = parser.parse_args(argv)

    settings = resolve_cli_settings(args)
    session = build_session(args, settings, instant=True)
    solution = generate_or_exit(session, args.n_disks)
    if not session.has_board:
        raise SystemExit(
            f"{args.n_disks} disks is above the board limit of {session.max_board_disks}."
        )

    game = session.game
    target = max(0, min(args.after_step, solution.final_step_number))
    if target:

        def stop_at_target(snapshot: GameSnapshot) -> None:
            if len(snapshot.progress.completed_steps) >= target:
                game.stop_auto_solve()

        unsubscribe = game.subscribe(stop_at_target)
        try:
            session.auto_solve()
            game.scheduler.run_until_idle()
        finally:
            unsubscribe()

    image = render_game_image(game.snapshot(), size=(args.width, args.height))
    out = Path(args.out)
    out.write_bytes(image.to_bytes())
    print(f"Wrote {out} (after {game.current_step - 1} steps)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
