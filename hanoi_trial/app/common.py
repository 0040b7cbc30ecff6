from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from hanoi_trial.client import SolutionFileSource, SolverClient
from hanoi_trial.config import Settings, load_config, merge_dicts, resolve_settings
from hanoi_trial.game import TowerGame
from hanoi_trial.scheduler import ManualScheduler, RealtimeScheduler
from hanoi_trial.session import PuzzleSession, SolutionSource
from hanoi_trial.solution import Solution


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("n_disks", type=int, help="Number of disks (1-1000).")
    parser.add_argument(
        "--config", help="Path to JSON config (solver, animation, board sections)."
    )
    parser.add_argument(
        "--solver-url",
        default=None,
        help="Solver base URL (default: $HANOI_SOLVER_URL or http://localhost:3001).",
    )
    parser.add_argument(
        "--solution-file",
        default=None,
        help="Read the solver response from a JSON file instead of calling the solver.",
    )
    parser.add_argument("--timeout-s", type=float, default=None)
    parser.add_argument("--max-retries", type=int, default=None)
    parser.add_argument("--travel-ms", type=float, default=None)
    parser.add_argument("--drop-ms", type=float, default=None)
    parser.add_argument("--step-pause-ms", type=float, default=None)
    parser.add_argument(
        "--instant",
        action="store_true",
        help="Skip animation delays (phases still run in order).",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Print debug lines to stderr."
    )


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    solver: dict[str, Any] = {}
    animation: dict[str, Any] = {}
    if args.solver_url is not None:
        solver["base_url"] = args.solver_url
    if args.timeout_s is not None:
        solver["timeout_s"] = args.timeout_s
    if args.max_retries is not None:
        solver["max_retries"] = args.max_retries
    for key in ("travel_ms", "drop_ms", "step_pause_ms"):
        value = getattr(args, key)
        if value is not None:
            animation[key] = value

    overrides: dict[str, Any] = {}
    if solver:
        overrides["solver"] = solver
    if animation:
        overrides["animation"] = animation
    if args.debug:
        overrides["debug"] = True
    return overrides


def resolve_cli_settings(args: argparse.Namespace) -> Settings:
    try:
        config = load_config(args.config) if args.config else {}
        return resolve_settings(merge_dicts(config, _cli_overrides(args)))
    except (OSError, json.JSONDecodeError, ValueError, TypeError) as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc


def build_solver(args: argparse.Namespace, settings: Settings) -> SolutionSource:
    if args.solution_file:
        return SolutionFileSource(args.solution_file)
    return SolverClient.from_settings(settings)


def build_session(
    args: argparse.Namespace, settings: Settings, *, instant: bool | None = None
) -> PuzzleSession:
    use_manual = args.instant if instant is None else instant
    scheduler = ManualScheduler() if use_manual else RealtimeScheduler()
    game = TowerGame(
        None, scheduler=scheduler, timings=settings.timings, debug=settings.debug
    )
    return PuzzleSession(
        game, build_solver(args, settings), max_board_disks=settings.max_board_disks
    )


def generate_or_exit(session: PuzzleSession, n_disks: int) -> Solution:
    solution = session.generate(n_disks)
    if solution is None:
        hint = " (the solver may be unavailable; try again)" if session.error_retryable else ""
        print(f"Error: {session.error}{hint}", file=sys.stderr, flush=True)
        raise SystemExit(2)
    return solution
