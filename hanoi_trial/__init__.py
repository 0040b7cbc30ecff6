"""Tower of Hanoi trial: play or auto-solve a remotely computed solution."""

from __future__ import annotations

from .animation import AnimationSequencer, AnimationTimings, MoveOutcome, Phase
from .autosolve import AutoSolveDriver, DesyncError
from .board import (
    PEGS,
    Board,
    BoardSnapshot,
    Disk,
    EmptyPegError,
    HanoiError,
    InvalidPegError,
    Peg,
    can_move,
    parse_peg,
)
from .client import SolutionFileSource, SolverClient, SolverError, load_solution_file
from .game import GameSnapshot, TowerGame
from .progress import Move, Progress, StepTracker
from .scheduler import ManualScheduler, RealtimeScheduler, Scheduler
from .session import PuzzleSession
from .solution import (
    Solution,
    SolutionFormatError,
    Step,
    format_play_time,
    optimal_step_count,
    parse_solution,
)

__all__ = [
    "PEGS",
    "AnimationSequencer",
    "AnimationTimings",
    "AutoSolveDriver",
    "Board",
    "BoardSnapshot",
    "DesyncError",
    "Disk",
    "EmptyPegError",
    "GameSnapshot",
    "HanoiError",
    "InvalidPegError",
    "ManualScheduler",
    "Move",
    "MoveOutcome",
    "Peg",
    "Phase",
    "Progress",
    "PuzzleSession",
    "RealtimeScheduler",
    "Scheduler",
    "Solution",
    "SolutionFileSource",
    "SolutionFormatError",
    "SolverClient",
    "SolverError",
    "Step",
    "StepTracker",
    "TowerGame",
    "can_move",
    "format_play_time",
    "load_solution_file",
    "optimal_step_count",
    "parse_peg",
    "parse_solution",
]
