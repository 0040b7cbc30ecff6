from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .board import Disk, HanoiError, InvalidPegError, Peg, parse_peg

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR
# 365.25 days, so leap years average out.
SECONDS_PER_YEAR = 1461 * SECONDS_PER_DAY // 4


class SolutionFormatError(HanoiError, ValueError):
    """Raised when a solver payload does not describe a usable solution."""


@dataclass(frozen=True, slots=True)
class Step:
    step_number: int
    from_peg: Peg
    to_peg: Peg
    disk: Disk

    def matches(self, from_peg: Peg, to_peg: Peg, disk: Disk) -> bool:
        return (
            self.from_peg == from_peg and self.to_peg == to_peg and self.disk == disk
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "stepNumber": self.step_number,
            "from": self.from_peg.value,
            "to": self.to_peg.value,
            "disk": self.disk,
        }


@dataclass(frozen=True, slots=True)
class Solution:
    """A solver answer: either the full move list or only the move count."""

    total_steps: int
    steps: tuple[Step, ...] = ()

    @property
    def is_playable(self) -> bool:
        return bool(self.steps)

    @property
    def final_step_number(self) -> int:
        return self.steps[-1].step_number if self.steps else 0

    def step(self, step_number: int) -> Step | None:
        # Numbering is contiguous from 1, so the index is step_number - 1.
        if 1 <= step_number <= len(self.steps):
            return self.steps[step_number - 1]
        return None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"totalSteps": self.total_steps}
        if self.steps:
            payload["steps"] = [step.to_dict() for step in self.steps]
        return payload


def _require_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SolutionFormatError(f"{field} must be an integer, got {value!r}")
    return value


def _parse_step(raw: Any, expected_number: int) -> Step:
    if not isinstance(raw, dict):
        raise SolutionFormatError(f"step {expected_number} must be an object")
    number = _require_int(raw.get("stepNumber"), "stepNumber")
    if number != expected_number:
        raise SolutionFormatError(
            f"steps must be numbered contiguously from 1; expected {expected_number}, got {number}"
        )
    try:
        from_peg = parse_peg(raw.get("from"))
        to_peg = parse_peg(raw.get("to"))
    except InvalidPegError as exc:
        raise SolutionFormatError(f"step {number}: {exc}") from exc
    disk = _require_int(raw.get("disk"), "disk")
    if disk < 1:
        raise SolutionFormatError(f"step {number}: disk must be >= 1, got {disk}")
    return Step(step_number=number, from_peg=from_peg, to_peg=to_peg, disk=disk)


def parse_solution(payload: Any) -> Solution:
    """Build a Solution from either solver response shape.

    Accepted shapes:
      - {"steps": [{"stepNumber", "from", "to", "disk"}, ...], "totalSteps": int}
      - {"totalSteps": int} for disk counts too large to list every move
    """

    if not isinstance(payload, dict):
        raise SolutionFormatError("solution payload must be a JSON object")

    raw_steps = payload.get("steps") or []
    if not isinstance(raw_steps, list):
        raise SolutionFormatError("steps must be a list")
    steps = tuple(_parse_step(raw, i) for i, raw in enumerate(raw_steps, start=1))

    if "totalSteps" in payload:
        total = _require_int(payload["totalSteps"], "totalSteps")
    elif steps:
        total = len(steps)
    else:
        raise SolutionFormatError("solution payload needs steps or totalSteps")
    if total < 0:
        raise SolutionFormatError(f"totalSteps must be >= 0, got {total}")
    if steps and total != len(steps):
        raise SolutionFormatError(
            f"totalSteps ({total}) does not match the number of steps ({len(steps)})"
        )
    return Solution(total_steps=total, steps=steps)


def optimal_step_count(n_disks: int) -> int:
    return (1 << n_disks) - 1


def _plural(value: int, unit: str) -> str:
    return f"{value:,} {unit}{'' if value == 1 else 's'}"


def _pair(major: int, major_unit: str, minor: int, minor_unit: str) -> str:
    if minor == 0:
        return _plural(major, major_unit)
    return f"{_plural(major, major_unit)} {_plural(minor, minor_unit)}"


def format_play_time(total_steps: int, *, seconds_per_move: int = 2) -> str:
    """Human estimate of how long playing every move would take."""

    total = total_steps * seconds_per_move
    if total < SECONDS_PER_MINUTE:
        return _plural(total, "second")
    if total < SECONDS_PER_HOUR:
        return _pair(
            total // SECONDS_PER_MINUTE, "minute", total % SECONDS_PER_MINUTE, "second"
        )
    if total < SECONDS_PER_DAY:
        return _pair(
            total // SECONDS_PER_HOUR,
            "hour",
            (total % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE,
            "minute",
        )
    if total < SECONDS_PER_YEAR:
        return _pair(
            total // SECONDS_PER_DAY,
            "day",
            (total % SECONDS_PER_DAY) // SECONDS_PER_HOUR,
            "hour",
        )
    return _pair(
        total // SECONDS_PER_YEAR,
        "year",
        (total % SECONDS_PER_YEAR) // SECONDS_PER_DAY,
        "day",
    )
