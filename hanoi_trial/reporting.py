from __future__ import annotations

import importlib
import sys
from typing import Any

from .progress import Progress


class StepProgressReporter:
    def on_progress(self, progress: Progress) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class NoopStepProgressReporter(StepProgressReporter):
    def on_progress(self, progress: Progress) -> None:  # noqa: ARG002
        return

    def close(self) -> None:
        return


class TqdmStepProgressReporter(StepProgressReporter):
    def __init__(
        self,
        *,
        total_steps: int,
        refresh_s: float,
        tqdm_cls: Any,
    ) -> None:
        self._shown = 0
        self._bar = tqdm_cls(
            total=max(0, int(total_steps)),
            desc="Steps",
            unit="move",
            dynamic_ncols=True,
            mininterval=float(refresh_s),
            file=sys.stderr,
            leave=True,
        )

    def on_progress(self, progress: Progress) -> None:
        done = len(progress.completed_steps)
        if done == self._shown:
            return
        # completed_steps only shrinks when a finished run restarts.
        if done < self._shown:
            self._bar.reset()
            self._shown = 0
        self._bar.set_postfix(
            {"step": str(progress.current_step), "solved": str(progress.is_solved)},
            refresh=False,
        )
        if done > self._shown:
            self._bar.update(done - self._shown)
        self._shown = done

    def close(self) -> None:
        self._bar.close()


def _without_bar(explicit_request: bool, problem: str) -> StepProgressReporter:
    if explicit_request:
        print(
            f"Progress bar disabled: {problem}. Install with "
            "pip install 'hanoi-trial[progress]'.",
            file=sys.stderr,
            flush=True,
        )
    return NoopStepProgressReporter()


def build_step_progress_reporter(
    *,
    enabled: bool,
    total_steps: int,
    refresh_s: float = 0.1,
    explicit_request: bool = False,
) -> StepProgressReporter:
    """Return a tqdm bar over solution steps, or a no-op reporter.

    tqdm is optional; a hint is printed only when the bar was asked for.
    """

    if not enabled or total_steps <= 0:
        return NoopStepProgressReporter()
    try:
        tqdm_module = importlib.import_module("tqdm")
    except ImportError:
        return _without_bar(explicit_request, "tqdm is not installed")
    tqdm_cls = getattr(tqdm_module, "tqdm", None)
    if tqdm_cls is None:
        return _without_bar(explicit_request, "tqdm could not be loaded")
    return TqdmStepProgressReporter(
        total_steps=total_steps, refresh_s=refresh_s, tqdm_cls=tqdm_cls
    )
