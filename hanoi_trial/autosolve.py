from __future__ import annotations

import sys
from functools import partial
from typing import Callable

from .animation import AnimationSequencer, MoveOutcome
from .board import Disk, HanoiError, can_move
from .progress import Move, Progress, StepTracker
from .scheduler import TimerHandle
from .solution import Solution, Step


class DesyncError(HanoiError):
    """The board no longer agrees with the solution.

    Never raised out of the scheduler loop; the driver stops and reports it
    through `on_error` and `TowerGame.last_error`.
    """

    def __init__(self, step: Step, actual_disk: Disk | None, reason: str) -> None:
        super().__init__(
            f"step {step.step_number} expects disk {step.disk} on peg {step.from_peg} "
            f"-> {step.to_peg}, found {actual_disk if actual_disk is not None else 'nothing'}: {reason}"
        )
        self.step = step
        self.actual_disk = actual_disk
        self.reason = reason


class AutoSolveDriver:
    """Plays the remaining solution steps through the animation sequencer.

    Each step runs the same Lifted -> Transiting -> Settling cycle as a
    manual move; the next step is scheduled `step_pause_s` after the
    previous one settles.
    """

    def __init__(
        self,
        sequencer: AnimationSequencer,
        tracker: StepTracker,
        *,
        get_progress: Callable[[], Progress],
        set_progress: Callable[[Progress], None],
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.sequencer = sequencer
        self.tracker = tracker
        self._get_progress = get_progress
        self._set_progress = set_progress
        self.on_change = on_change
        self.error: DesyncError | None = None
        self._active = False
        self._run_id = 0
        self._handle: TimerHandle | None = None
        self._on_complete: Callable[[], None] | None = None
        self._on_error: Callable[[DesyncError], None] | None = None

    @property
    def is_active(self) -> bool:
        return self._active

    def start(
        self,
        solution: Solution,
        on_complete: Callable[[], None] | None = None,
        *,
        on_error: Callable[[DesyncError], None] | None = None,
    ) -> bool:
        if self._active or self.sequencer.is_busy or not solution.is_playable:
            return False
        self.sequencer.deselect()
        self.tracker.solution = solution
        self._set_progress(self.tracker.restart_if_finished(self._get_progress()))

        self.error = None
        self._active = True
        self._run_id += 1
        self._on_complete = on_complete
        self._on_error = on_error
        self._changed()
        self._drive(self._run_id)
        return True

    def stop(self) -> None:
        was_active = self._active
        self._active = False
        self._run_id += 1
        self.sequencer.scheduler.cancel(self._handle)
        self._handle = None
        self._on_complete = None
        self._on_error = None
        if was_active:
            self.sequencer.cancel(finish_settling=True)
            self._changed()

    def on_move_settled(self, move: Move, before: Progress, after: Progress) -> None:
        if not self._active:
            return
        if after.current_step == before.current_step:
            step = self.tracker.expected_step(before)
            if step is not None:
                self._fail(DesyncError(step, move.disk, "played move did not match"))
                return
        if self.tracker.expected_step(after) is None:
            self._finish()
            return
        self._handle = self.sequencer.scheduler.call_later(
            self.sequencer.timings.step_pause_s, partial(self._drive, self._run_id)
        )

    def _drive(self, run_id: int) -> None:
        if not self._active or run_id != self._run_id:
            return
        self._handle = None
        step = self.tracker.expected_step(self._get_progress())
        if step is None:
            self._finish()
            return

        board = self.sequencer.board
        actual = board.top(step.from_peg)
        if actual != step.disk:
            self._fail(DesyncError(step, actual, "top disk differs"))
            return
        if not can_move(board, step.from_peg, step.to_peg):
            self._fail(DesyncError(step, actual, "move is not legal on this board"))
            return
        if self.sequencer.run(step.from_peg, step.to_peg) is not MoveOutcome.STARTED:
            self._fail(DesyncError(step, actual, "sequencer refused the move"))

    def _finish(self) -> None:
        callback = self._on_complete
        self._active = False
        self._handle = None
        self._on_complete = None
        self._on_error = None
        self._changed()
        if callback is not None:
            callback()

    def _fail(self, error: DesyncError) -> None:
        callback = self._on_error
        self._active = False
        self._run_id += 1
        self.sequencer.scheduler.cancel(self._handle)
        self._handle = None
        self._on_complete = None
        self._on_error = None
        self.error = error
        print(f"[hanoi-trial] auto-solve stopped: {error}", file=sys.stderr, flush=True)
        self._changed()
        if callback is not None:
            callback(error)

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()
