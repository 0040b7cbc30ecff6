from __future__ import annotations

import json
import sys
import time
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any, Callable

from .board import HanoiError
from .config import DEFAULT_SOLVER_URL, MAX_DISKS, Settings
from .solution import Solution, SolutionFormatError, optimal_step_count, parse_solution


class SolverError(HanoiError):
    """Raised when a solution cannot be obtained.

    `retryable` is true for transport failures and server-side errors, where
    asking again may succeed.
    """

    def __init__(
        self, message: str, *, retryable: bool = True, status: int | None = None
    ) -> None:
        super().__init__(message)
        self.retryable = retryable
        self.status = status


def validate_disk_count(n_disks: int) -> None:
    if isinstance(n_disks, bool) or not isinstance(n_disks, int):
        raise TypeError(f"n_disks must be int, got {type(n_disks).__name__}")
    if n_disks < 1 or n_disks > MAX_DISKS:
        raise ValueError(f"n_disks must be in [1, {MAX_DISKS}], got {n_disks}")


def solve_endpoint(base_url: str) -> str:
    # The local development server mounts the handler under its stage name.
    return "/dev/solve" if "localhost" in base_url else "/solve"


class SolverClient:
    """HTTP client for the remote solver (POST {"numberOfDisks": n})."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_s: float = 30.0,
        max_retries: int = 2,
        retry_backoff_s: float = 1.0,
        debug: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = (base_url or DEFAULT_SOLVER_URL).rstrip("/")
        self.timeout_s = float(timeout_s)
        self.max_retries = max(0, int(max_retries))
        self.retry_backoff_s = float(retry_backoff_s)
        self.debug = bool(debug)
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> SolverClient:
        return cls(
            settings.solver_url,
            timeout_s=settings.timeout_s,
            max_retries=settings.max_retries,
            retry_backoff_s=settings.retry_backoff_s,
            debug=settings.debug,
        )

    @property
    def url(self) -> str:
        return self.base_url + solve_endpoint(self.base_url)

    def solve(self, n_disks: int) -> Solution:
        validate_disk_count(n_disks)
        payload = self._post_with_retries({"numberOfDisks": n_disks})
        try:
            return parse_solution(payload)
        except SolutionFormatError as exc:
            raise SolverError(f"Malformed solver response: {exc}", retryable=False) from exc

    def _debug_log(self, message: str) -> None:
        if not self.debug:
            return
        print(f"[hanoi-trial debug] {message}", file=sys.stderr, flush=True)

    def _post_with_retries(self, body: dict[str, Any]) -> Any:
        attempt = 0
        while True:
            try:
                return self._post_once(body)
            except SolverError as exc:
                if not exc.retryable or attempt >= self.max_retries:
                    raise
                attempt += 1
                delay = self.retry_backoff_s * attempt
                self._debug_log(
                    f"solver request failed ({exc}); retry {attempt}/{self.max_retries} in {delay:.1f}s"
                )
                self._sleep(delay)

    def _post_once(self, body: dict[str, Any]) -> Any:
        request = urllib.request.Request(
            self.url,
            method="POST",
            data=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
        self._debug_log(f"POST {self.url} {body}")
        try:
            with urllib.request.urlopen(request, timeout=self.timeout_s) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise SolverError(
                f"HTTP {exc.code}: {detail}",
                retryable=exc.code >= 500 or exc.code == 429,
                status=exc.code,
            ) from exc
        except urllib.error.URLError as exc:
            raise SolverError(f"Request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise SolverError(f"Request timed out after {self.timeout_s:g}s") from exc
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SolverError(
                f"Solver returned invalid JSON: {exc}", retryable=False
            ) from exc


class SolutionFileSource:
    """Serves a saved solver response from disk, for offline play."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def solve(self, n_disks: int) -> Solution:
        validate_disk_count(n_disks)
        solution = load_solution_file(self.path)
        expected = optimal_step_count(n_disks)
        if solution.total_steps != expected:
            raise SolverError(
                f"{self.path} holds a {solution.total_steps}-step solution, "
                f"but {n_disks} disks need {expected}",
                retryable=False,
            )
        return solution


def load_solution_file(path: str | Path) -> Solution:
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise SolverError(f"Cannot read solution file {path}: {exc}", retryable=False) from exc
    except json.JSONDecodeError as exc:
        raise SolverError(f"Invalid JSON in {path}: {exc}", retryable=False) from exc
    try:
        return parse_solution(payload)
    except SolutionFormatError as exc:
        raise SolverError(f"Malformed solution file {path}: {exc}", retryable=False) from exc
