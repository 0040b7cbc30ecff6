from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Callable

from .animation import AnimationSequencer, AnimationTimings, MoveOutcome, Phase
from .autosolve import AutoSolveDriver, DesyncError
from .board import Board, BoardSnapshot, Disk, Peg, parse_peg, validate_n_disks
from .progress import Move, Progress, StepTracker
from .scheduler import RealtimeScheduler, Scheduler
from .solution import Solution

Listener = Callable[["GameSnapshot"], None]


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    board: BoardSnapshot
    phase: Phase
    selected_disk: Disk | None
    selected_peg: Peg | None
    target_peg: Peg | None
    progress: Progress
    is_auto_solving: bool
    last_outcome: MoveOutcome | None = None
    error: str | None = None

    @property
    def is_solved(self) -> bool:
        return self.progress.is_solved

    def to_dict(self) -> dict[str, Any]:
        return {
            "board": self.board.to_dict(),
            "phase": self.phase.value,
            "selected_disk": self.selected_disk,
            "selected_peg": self.selected_peg.value if self.selected_peg else None,
            "target_peg": self.target_peg.value if self.target_peg else None,
            "progress": self.progress.to_dict(),
            "is_auto_solving": self.is_auto_solving,
            "last_outcome": self.last_outcome.value if self.last_outcome else None,
            "error": self.error,
        }


class TowerGame:
    """Game state facade used by the presentation layer.

    Owns the board, the solution progress and the session scheduler. All
    board changes go through the animation sequencer; the scheduler must be
    pumped (`run_until_idle` / `advance`) for moves to complete.
    """

    def __init__(
        self,
        n_disks: int | None = 3,
        *,
        scheduler: Scheduler | None = None,
        timings: AnimationTimings | None = None,
        debug: bool = False,
    ) -> None:
        self.scheduler = scheduler or RealtimeScheduler()
        self.debug = bool(debug)
        self.tracker = StepTracker()
        self.last_outcome: MoveOutcome | None = None
        self._progress = Progress()
        self._listeners: list[Listener] = []
        self.sequencer = AnimationSequencer(
            self.scheduler,
            timings=timings,
            on_settled=self._on_settled,
            on_change=self._notify,
        )
        self.driver = AutoSolveDriver(
            self.sequencer,
            self.tracker,
            get_progress=lambda: self._progress,
            set_progress=self._set_progress,
            on_change=self._notify,
        )
        if n_disks is not None:
            self.reset(n_disks)

    # -- derived state -------------------------------------------------

    @property
    def timings(self) -> AnimationTimings:
        return self.sequencer.timings

    @property
    def n_disks(self) -> int:
        return self.sequencer.board.n_disks

    @property
    def board(self) -> BoardSnapshot:
        return self.sequencer.board.snapshot()

    @property
    def pegs(self) -> dict[str, list[Disk]]:
        return self.board.to_dict()["pegs"]

    @property
    def phase(self) -> Phase:
        return self.sequencer.phase

    @property
    def selected_disk(self) -> Disk | None:
        flight = self.sequencer.flight
        return flight.disk if flight else None

    @property
    def selected_peg(self) -> Peg | None:
        flight = self.sequencer.flight
        return flight.rendered_peg if flight else None

    @property
    def target_peg(self) -> Peg | None:
        flight = self.sequencer.flight
        return flight.target if flight else None

    @property
    def solution(self) -> Solution | None:
        return self.tracker.solution

    @property
    def progress(self) -> Progress:
        return self._progress

    @property
    def current_step(self) -> int:
        return self._progress.current_step

    @property
    def completed_steps(self) -> frozenset[int]:
        return self._progress.completed_steps

    @property
    def is_solved(self) -> bool:
        return self._progress.is_solved

    @property
    def is_tower_complete(self) -> bool:
        """Every disk sits on peg C, whether or not a solution was followed."""

        return self.sequencer.board.is_complete()

    @property
    def is_auto_solving(self) -> bool:
        return self.driver.is_active

    @property
    def last_error(self) -> DesyncError | None:
        return self.driver.error

    def snapshot(self) -> GameSnapshot:
        error = self.driver.error
        return GameSnapshot(
            board=self.board,
            phase=self.phase,
            selected_disk=self.selected_disk,
            selected_peg=self.selected_peg,
            target_peg=self.target_peg,
            progress=self._progress,
            is_auto_solving=self.is_auto_solving,
            last_outcome=self.last_outcome,
            error=str(error) if error else None,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- commands ------------------------------------------------------

    def select_disk(self, peg: Peg | str | int) -> bool:
        peg = parse_peg(peg)
        if self.is_auto_solving:
            return False
        return self.sequencer.lift(peg)

    def place_disk(self, peg: Peg | str | int) -> bool:
        peg = parse_peg(peg)
        if self.is_auto_solving:
            outcome = MoveOutcome.REJECTED
        else:
            outcome = self.sequencer.drop(peg)
        self.last_outcome = outcome
        self._log(f"place {peg}: {outcome.value}")
        self._notify()
        return outcome is MoveOutcome.STARTED

    def click_peg(self, peg: Peg | str | int) -> bool:
        """Select when nothing is lifted, otherwise try to place there."""

        peg = parse_peg(peg)
        if self.is_auto_solving or self.sequencer.is_busy:
            return False
        if self.phase is Phase.LIFTED:
            return self.place_disk(peg)
        return self.select_disk(peg)

    def reset(self, n_disks: int | None = None) -> None:
        """Restack every disk on peg A and rewind progress.

        The loaded solution survives a same-size reset and is dropped when
        the disk count changes.
        """

        n = self.n_disks if n_disks is None else n_disks
        validate_n_disks(n)
        self.driver.stop()
        if n != self.n_disks:
            self.tracker.solution = None
        self.sequencer.attach(Board.initial(n))
        self._reset_state()

    def clear(self) -> None:
        """Empty the board, for puzzles that only report a move count."""

        self.driver.stop()
        self.tracker.solution = None
        self.sequencer.attach(Board())
        self._reset_state()

    def set_solution(self, solution: Solution | None) -> None:
        self.driver.stop()
        self.tracker.solution = solution
        self._notify()

    def start_auto_solve(
        self,
        solution: Solution | None = None,
        on_complete: Callable[[], None] | None = None,
        *,
        on_error: Callable[[DesyncError], None] | None = None,
    ) -> bool:
        solution = solution or self.tracker.solution
        if solution is None or self.sequencer.is_busy:
            return False
        if solution.is_playable and self.current_step > solution.final_step_number:
            # Replaying a finished run needs the tower back on peg A.
            self.reset()
        started = self.driver.start(solution, on_complete, on_error=on_error)
        self._log(f"auto-solve start from step {self.current_step}: {started}")
        return started

    def stop_auto_solve(self) -> None:
        self.driver.stop()

    # -- internals -----------------------------------------------------

    def _reset_state(self) -> None:
        self._progress = Progress()
        self.driver.error = None
        self.last_outcome = None
        self._notify()

    def _set_progress(self, progress: Progress) -> None:
        self._progress = progress

    def _on_settled(self, move: Move) -> None:
        before = self._progress
        after = self.tracker.record_if_matches(before, move)
        self._progress = after
        self._log(
            f"settled {move.disk} {move.from_peg}->{move.to_peg}, "
            f"step {before.current_step} -> {after.current_step}"
        )
        self.driver.on_move_settled(move, before, after)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def _log(self, message: str) -> None:
        if not self.debug:
            return
        print(f"[hanoi-trial debug] {message}", file=sys.stderr, flush=True)
