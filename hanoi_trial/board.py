from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

Disk: TypeAlias = int


class Peg(str, Enum):
    A = "A"
    B = "B"
    C = "C"

    def __str__(self) -> str:
        return self.value


PEGS: tuple[Peg, ...] = (Peg.A, Peg.B, Peg.C)


class HanoiError(Exception):
    """Base exception for the Tower of Hanoi trial client."""


class InvalidPegError(HanoiError, ValueError):
    """Raised when a peg label or index cannot be resolved."""


class EmptyPegError(HanoiError):
    """Raised when lifting from a peg that holds no disks."""


def parse_peg(value: object) -> Peg:
    if isinstance(value, Peg):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < len(PEGS):
            return PEGS[value]
        raise InvalidPegError(f"peg index must be in [0, {len(PEGS) - 1}], got {value}")
    if isinstance(value, str):
        token = value.strip().upper()
        try:
            return Peg(token)
        except ValueError:
            pass
    raise InvalidPegError(f"peg must be one of A, B, C, got {value!r}")


def initial_stack(n_disks: int) -> list[Disk]:
    return list(range(n_disks, 0, -1))


def validate_n_disks(n_disks: int) -> None:
    if isinstance(n_disks, bool) or not isinstance(n_disks, int):
        raise TypeError(f"n_disks must be int, got {type(n_disks).__name__}")
    if n_disks < 1:
        raise ValueError(f"n_disks must be >= 1, got {n_disks}")


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """Immutable copy of the three stacks.

    Representation notes:
      - `pegs` follows PEGS order (A, B, C), each stack listed bottom->top.
      - Disk sizes are integers 1..n, where 1 is the smallest.
    """

    n_disks: int
    pegs: tuple[tuple[Disk, ...], tuple[Disk, ...], tuple[Disk, ...]]

    def stack(self, peg: Peg) -> tuple[Disk, ...]:
        return self.pegs[PEGS.index(peg)]

    def top(self, peg: Peg) -> Disk | None:
        stack = self.stack(peg)
        return stack[-1] if stack else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "n_disks": self.n_disks,
            "pegs": {peg.value: list(stack) for peg, stack in zip(PEGS, self.pegs)},
        }


class Board:
    """Mutable peg contents; the single source of truth for disk placement.

    `place` does not re-check the ordering rule. Callers validate with
    `can_move` before mutating.
    """

    def __init__(self, n_disks: int = 0) -> None:
        self.n_disks = n_disks
        self._stacks: dict[Peg, list[Disk]] = {peg: [] for peg in PEGS}

    @classmethod
    def initial(cls, n_disks: int) -> Board:
        validate_n_disks(n_disks)
        board = cls(n_disks)
        board._stacks[Peg.A] = initial_stack(n_disks)
        return board

    def stack(self, peg: Peg) -> tuple[Disk, ...]:
        return tuple(self._stacks[peg])

    def top(self, peg: Peg) -> Disk | None:
        stack = self._stacks[peg]
        return stack[-1] if stack else None

    def lift_top(self, peg: Peg) -> Disk:
        stack = self._stacks[peg]
        if not stack:
            raise EmptyPegError(f"peg {peg} is empty")
        return stack.pop()

    def place(self, peg: Peg, disk: Disk) -> None:
        self._stacks[peg].append(disk)

    def is_complete(self, goal: Peg = Peg.C) -> bool:
        return self.n_disks > 0 and self._stacks[goal] == initial_stack(self.n_disks)

    def snapshot(self) -> BoardSnapshot:
        a, b, c = (tuple(self._stacks[peg]) for peg in PEGS)
        return BoardSnapshot(n_disks=self.n_disks, pegs=(a, b, c))


def can_move(board: Board | BoardSnapshot, from_peg: Peg, to_peg: Peg) -> bool:
    """Return whether the top disk of `from_peg` may be placed on `to_peg`."""

    if from_peg == to_peg:
        return False
    disk = board.top(from_peg)
    if disk is None:
        return False
    target_top = board.top(to_peg)
    return target_top is None or target_top > disk
