from __future__ import annotations

from .animation import Phase
from .board import PEGS, Disk
from .game import GameSnapshot
from .progress import Progress
from .solution import Solution, format_play_time

INVALID_MOVE_MESSAGE = (
    "Invalid move! You can only move the top disk, and cannot place a larger "
    "disk on a smaller one."
)


def _disk_cell(disk: Disk | None, width: int) -> str:
    if disk is None:
        return "|".center(width)
    return ("(" + "=" * (2 * disk - 1) + ")").center(width)


def format_board(snapshot: GameSnapshot) -> str:
    """ASCII frame of the board.

    A Lifted disk hovers over its source peg and a Transiting disk over its
    target; in both phases it is left out of the source stack.
    """

    n_disks = snapshot.board.n_disks
    width = 2 * max(n_disks, 1) + 3
    stacks = [list(snapshot.board.stack(peg)) for peg in PEGS]

    hover: list[Disk | None] = [None, None, None]
    if snapshot.phase in (Phase.LIFTED, Phase.TRANSITING) and snapshot.selected_disk:
        source = PEGS.index(snapshot.selected_peg) if snapshot.selected_peg else None
        if source is not None and stacks[source] and stacks[source][-1] == snapshot.selected_disk:
            stacks[source].pop()
        over = snapshot.target_peg if snapshot.phase is Phase.TRANSITING else snapshot.selected_peg
        if over is not None:
            hover[PEGS.index(over)] = snapshot.selected_disk

    lines = ["".join(_disk_cell(disk, width) if disk else " " * width for disk in hover)]
    for level in range(max(n_disks, 1) - 1, -1, -1):
        row = [
            _disk_cell(stack[level] if level < len(stack) else None, width)
            for stack in stacks
        ]
        lines.append("".join(row))
    lines.append("=" * (width * len(PEGS)))
    lines.append("".join(peg.value.center(width) for peg in PEGS))
    return "\n".join(line.rstrip() for line in lines)


def format_steps(
    solution: Solution | None,
    progress: Progress,
    *,
    window: int | None = None,
) -> str:
    """Step list with completed ([x]), current (->) and pending ([ ]) markers."""

    if solution is None:
        return "No solution generated yet"
    if not solution.is_playable:
        return (
            f"Total moves required: {solution.total_steps:,}\n"
            f"Time required: {format_play_time(solution.total_steps)}\n"
            "Only the step count is provided for this many disks."
        )

    steps = list(solution.steps)
    if window is not None and window > 0:
        start = max(0, min(progress.current_step - 1 - window // 2, len(steps) - window))
        steps = steps[start : start + window]

    lines = [f"Solution Steps ({len(solution.steps)} total)"]
    for step in steps:
        if step.step_number in progress.completed_steps:
            marker = "[x]"
        elif step.step_number == progress.current_step:
            marker = "-> "
        else:
            marker = "[ ]"
        lines.append(
            f"{marker} {step.step_number:>4}. Move disk {step.disk} "
            f"from {step.from_peg} to {step.to_peg}"
        )
    return "\n".join(lines)


def format_status(snapshot: GameSnapshot, solution: Solution | None) -> str:
    if snapshot.error:
        return f"Auto-solve stopped: {snapshot.error}"
    if snapshot.is_solved:
        return "Solved!"
    total = solution.final_step_number if solution else 0
    mode = "auto-solving" if snapshot.is_auto_solving else "manual"
    if total:
        return f"Step {min(snapshot.progress.current_step, total)}/{total} ({mode})"
    return f"Free play ({mode})"
