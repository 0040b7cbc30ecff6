from __future__ import annotations

from typing import Any, Callable, Protocol

from .autosolve import DesyncError
from .client import SolverError
from .config import MAX_BOARD_DISKS
from .game import TowerGame
from .solution import Solution, format_play_time


class SolutionSource(Protocol):
    def solve(self, n_disks: int) -> Solution: ...


class PuzzleSession:
    """One puzzle page: a solver, the current solution and the game board.

    A failed request leaves the board, progress and previous solution
    untouched and records a message in `error`.
    """

    def __init__(
        self,
        game: TowerGame,
        solver: SolutionSource,
        *,
        max_board_disks: int = MAX_BOARD_DISKS,
    ) -> None:
        self.game = game
        self.solver = solver
        self.max_board_disks = max_board_disks
        self.n_disks: int | None = None
        self.solution: Solution | None = None
        self.error: str | None = None
        self.error_retryable = False

    @property
    def has_board(self) -> bool:
        return self.n_disks is not None and self.n_disks <= self.max_board_disks

    @property
    def is_playable(self) -> bool:
        return self.has_board and self.solution is not None and self.solution.is_playable

    def generate(self, n_disks: int) -> Solution | None:
        self.error = None
        self.error_retryable = False
        try:
            solution = self.solver.solve(n_disks)
        except SolverError as exc:
            self.error = str(exc) or "Failed to generate solution. Please try again."
            self.error_retryable = exc.retryable
            return None
        except (TypeError, ValueError) as exc:
            self.error = str(exc)
            return None

        self.n_disks = n_disks
        self.solution = solution
        if self.has_board:
            self.game.reset(n_disks)
            self.game.set_solution(solution if solution.is_playable else None)
        else:
            self.game.clear()
        return solution

    def restart(self) -> bool:
        if not self.has_board or self.n_disks is None:
            return False
        self.game.reset(self.n_disks)
        playable = self.solution is not None and self.solution.is_playable
        self.game.set_solution(self.solution if playable else None)
        return True

    def auto_solve(
        self,
        on_complete: Callable[[], None] | None = None,
        *,
        on_error: Callable[[DesyncError], None] | None = None,
    ) -> bool:
        if not self.is_playable or self.solution is None:
            return False
        return self.game.start_auto_solve(self.solution, on_complete, on_error=on_error)

    def summary(self) -> dict[str, Any]:
        total = self.solution.total_steps if self.solution else None
        return {
            "n_disks": self.n_disks,
            "total_steps": total,
            "play_time": format_play_time(total) if total is not None else None,
            "has_board": self.has_board,
            "playable": self.is_playable,
            "current_step": self.game.current_step,
            "solved": self.game.is_solved,
            "error": self.error,
        }
