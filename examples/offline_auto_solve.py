from __future__ import annotations

from pathlib import Path

from hanoi_trial import ManualScheduler, PuzzleSession, SolutionFileSource, TowerGame
from hanoi_trial.text import format_board, format_steps


def main() -> None:
    scheduler = ManualScheduler()
    game = TowerGame(None, scheduler=scheduler)
    source = SolutionFileSource(Path(__file__).parent / "solutions" / "hanoi_3.json")
    session = PuzzleSession(game, source)

    session.generate(3)
    print(format_board(game.snapshot()))

    # Play the first move by hand, then let auto-solve finish the rest.
    game.click_peg("A")
    game.click_peg("C")
    scheduler.advance(game.timings.move_s)

    completions: list[int] = []
    session.auto_solve(on_complete=lambda: completions.append(game.current_step))
    elapsed = scheduler.now()
    scheduler.run_until_idle()

    print(format_board(game.snapshot()))
    print(format_steps(session.solution, game.progress))
    print("Solved:", game.is_solved, "| callbacks:", len(completions))
    print(f"Virtual playback time: {scheduler.now() - elapsed:.1f}s")


if __name__ == "__main__":
    main()
