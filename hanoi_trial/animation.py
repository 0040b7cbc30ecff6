from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from functools import partial
from typing import Callable

from .board import Board, Disk, Peg, can_move
from .progress import Move
from .scheduler import Scheduler, TimerHandle


class Phase(str, Enum):
    IDLE = "idle"
    LIFTED = "lifted"
    TRANSITING = "transiting"
    SETTLING = "settling"


class MoveOutcome(str, Enum):
    STARTED = "started"
    DESELECTED = "deselected"
    INVALID = "invalid"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class AnimationTimings:
    """Phase dwell times in seconds.

    travel_s: disk held above the target peg before the board changes.
    drop_s: disk settling onto the target after the board changed.
    step_pause_s: gap between auto-solve moves.
    """

    travel_s: float = 0.3
    drop_s: float = 0.3
    step_pause_s: float = 0.1

    def __post_init__(self) -> None:
        for name in ("travel_s", "drop_s", "step_pause_s"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{name} must be a number, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")

    @classmethod
    def from_ms(
        cls, *, travel_ms: float = 300, drop_ms: float = 300, step_pause_ms: float = 100
    ) -> AnimationTimings:
        return cls(
            travel_s=travel_ms / 1000.0,
            drop_s=drop_ms / 1000.0,
            step_pause_s=step_pause_ms / 1000.0,
        )

    @property
    def move_s(self) -> float:
        return self.travel_s + self.drop_s


@dataclass(frozen=True, slots=True)
class MoveInFlight:
    """State handed to each scheduled continuation.

    `board` is the board the move was lifted from and `generation` the
    sequencer epoch at that time; a continuation from an older epoch does
    nothing.
    """

    phase: Phase
    disk: Disk
    source: Peg
    target: Peg | None
    generation: int
    board: Board = field(compare=False, repr=False)

    @property
    def rendered_peg(self) -> Peg:
        if self.phase is Phase.SETTLING and self.target is not None:
            return self.target
        return self.source

    def as_move(self) -> Move:
        if self.target is None:
            raise ValueError("move has no target peg yet")
        return Move(from_peg=self.source, to_peg=self.target, disk=self.disk)


class AnimationSequencer:
    """Drives one disk relocation: Idle -> Lifted -> Transiting -> Settling -> Idle.

    The board only changes at the Transiting -> Settling boundary. Only one
    move may be in Transiting or Settling at a time.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        timings: AnimationTimings | None = None,
        on_settled: Callable[[Move], None] | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.timings = timings or AnimationTimings()
        self.on_settled = on_settled
        self.on_change = on_change
        self._board = Board()
        self._flight: MoveInFlight | None = None
        self._generation = 0
        self._handle: TimerHandle | None = None

    @property
    def board(self) -> Board:
        return self._board

    @property
    def flight(self) -> MoveInFlight | None:
        return self._flight

    @property
    def phase(self) -> Phase:
        return Phase.IDLE if self._flight is None else self._flight.phase

    @property
    def is_busy(self) -> bool:
        return self.phase in (Phase.TRANSITING, Phase.SETTLING)

    @property
    def generation(self) -> int:
        return self._generation

    def attach(self, board: Board) -> None:
        self.cancel()
        self._board = board

    def lift(self, peg: Peg) -> bool:
        if self.is_busy:
            return False
        disk = self._board.top(peg)
        if disk is None or (self._flight is not None and self._flight.source == peg):
            self.deselect()
            return False
        self._flight = MoveInFlight(
            phase=Phase.LIFTED,
            disk=disk,
            source=peg,
            target=None,
            generation=self._generation,
            board=self._board,
        )
        self._changed()
        return True

    def deselect(self) -> None:
        if self._flight is not None and self._flight.phase is Phase.LIFTED:
            self._flight = None
            self._changed()

    def drop(self, peg: Peg) -> MoveOutcome:
        flight = self._flight
        if flight is None or flight.phase is not Phase.LIFTED:
            return MoveOutcome.REJECTED
        if peg == flight.source:
            self.deselect()
            return MoveOutcome.DESELECTED
        if not can_move(flight.board, flight.source, peg):
            self.deselect()
            return MoveOutcome.INVALID

        transiting = replace(flight, phase=Phase.TRANSITING, target=peg)
        self._flight = transiting
        self._schedule(transiting, self.timings.travel_s)
        self._changed()
        return MoveOutcome.STARTED

    def run(self, from_peg: Peg, to_peg: Peg) -> MoveOutcome:
        if self.is_busy:
            return MoveOutcome.REJECTED
        self.deselect()
        if not self.lift(from_peg):
            return MoveOutcome.INVALID
        return self.drop(to_peg)

    def cancel(self, *, finish_settling: bool = False) -> None:
        """Drop any pending phase transition.

        A Transiting move is abandoned before the board changes. A Settling
        move has already changed the board; with `finish_settling` its
        completion is reported immediately instead of being discarded.
        """

        flight = self._flight
        self._generation += 1
        self.scheduler.cancel(self._handle)
        self._handle = None
        self._flight = None
        if flight is None:
            return
        if finish_settling and flight.phase is Phase.SETTLING and self.on_settled:
            self.on_settled(flight.as_move())
        self._changed()

    def _schedule(self, flight: MoveInFlight, delay_s: float) -> None:
        self._handle = self.scheduler.call_later(delay_s, partial(self._advance, flight))

    def _advance(self, flight: MoveInFlight) -> None:
        if flight.generation != self._generation or self._flight is not flight:
            return
        self._handle = None
        if flight.phase is Phase.TRANSITING:
            self._commit(flight)
        elif flight.phase is Phase.SETTLING:
            self._settle(flight)

    def _commit(self, flight: MoveInFlight) -> None:
        move = flight.as_move()
        disk = flight.board.lift_top(move.from_peg)
        flight.board.place(move.to_peg, disk)
        settling = replace(flight, phase=Phase.SETTLING)
        self._flight = settling
        self._schedule(settling, self.timings.drop_s)
        self._changed()

    def _settle(self, flight: MoveInFlight) -> None:
        self._flight = None
        if self.on_settled:
            self.on_settled(flight.as_move())
        self._changed()

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()
