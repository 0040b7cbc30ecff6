from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from .board import Disk, Peg
from .solution import Solution, Step


@dataclass(frozen=True, slots=True)
class Move:
    from_peg: Peg
    to_peg: Peg
    disk: Disk

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.from_peg.value, "to": self.to_peg.value, "disk": self.disk}


@dataclass(frozen=True, slots=True)
class Progress:
    """How far play has followed the loaded solution.

    `current_step` is the step number expected next; `completed_steps` holds
    every step number matched so far.
    """

    current_step: int = 1
    completed_steps: frozenset[int] = field(default_factory=frozenset)
    is_solved: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_step": self.current_step,
            "completed_steps": sorted(self.completed_steps),
            "is_solved": self.is_solved,
        }


class StepTracker:
    """Matches performed moves against the canonical solution sequence.

    Moves that leave the solution path are still played on the board; they
    simply do not advance progress.
    """

    def __init__(self, solution: Solution | None = None) -> None:
        self.solution = solution

    def expected_step(self, progress: Progress) -> Step | None:
        if self.solution is None:
            return None
        return self.solution.step(progress.current_step)

    def is_finished(self, progress: Progress) -> bool:
        return (
            self.solution is not None
            and self.solution.is_playable
            and progress.current_step > self.solution.final_step_number
        )

    def record_if_matches(self, progress: Progress, move: Move) -> Progress:
        expected = self.expected_step(progress)
        if expected is None or not expected.matches(move.from_peg, move.to_peg, move.disk):
            return progress
        updated = Progress(
            current_step=progress.current_step + 1,
            completed_steps=progress.completed_steps | {expected.step_number},
        )
        return replace(updated, is_solved=self.is_finished(updated))

    def restart_if_finished(self, progress: Progress) -> Progress:
        if self.is_finished(progress):
            return Progress()
        return progress
