from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .animation import AnimationTimings

DEFAULT_SOLVER_URL = "http://localhost:3001"
SOLVER_URL_ENV = "HANOI_SOLVER_URL"
MAX_DISKS = 1000
MAX_BOARD_DISKS = 10

DEFAULT_CONFIG: dict[str, Any] = {
    "solver": {
        "base_url": None,
        "timeout_s": 30,
        "max_retries": 2,
        "retry_backoff_s": 1.0,
    },
    "animation": {
        "travel_ms": 300,
        "drop_ms": 300,
        "step_pause_ms": 100,
    },
    "board": {"max_board_disks": MAX_BOARD_DISKS},
    "debug": False,
}


def load_config(path: str) -> dict[str, Any]:
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError(f"config must be a JSON object: {path}")
    return _expand_env_vars(data)


def _expand_env_vars(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    if isinstance(value, dict):
        return {str(k): _expand_env_vars(v) for k, v in value.items()}
    return value


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {**base}
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


@dataclass(frozen=True, slots=True)
class Settings:
    solver_url: str
    timeout_s: float
    max_retries: int
    retry_backoff_s: float
    timings: AnimationTimings
    max_board_disks: int
    debug: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "solver": {
                "base_url": self.solver_url,
                "timeout_s": self.timeout_s,
                "max_retries": self.max_retries,
                "retry_backoff_s": self.retry_backoff_s,
            },
            "animation": {
                "travel_ms": self.timings.travel_s * 1000.0,
                "drop_ms": self.timings.drop_s * 1000.0,
                "step_pause_ms": self.timings.step_pause_s * 1000.0,
            },
            "board": {"max_board_disks": self.max_board_disks},
            "debug": self.debug,
        }


def _number(section: Mapping[str, Any], key: str, *, minimum: float = 0) -> float:
    value = section.get(key)
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError as exc:
            raise ValueError(f"{key} must be a number, got {value!r}") from exc
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    if value < minimum:
        raise ValueError(f"{key} must be >= {minimum}, got {value}")
    return float(value)


def resolve_settings(
    config: dict[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Merge `config` over the defaults and resolve the solver URL.

    URL precedence: config `solver.base_url`, then $HANOI_SOLVER_URL, then
    the local development server.
    """

    env = os.environ if environ is None else environ
    merged = merge_dicts(DEFAULT_CONFIG, config or {})
    solver = merged.get("solver") or {}
    animation = merged.get("animation") or {}
    board = merged.get("board") or {}

    solver_url = solver.get("base_url") or env.get(SOLVER_URL_ENV) or DEFAULT_SOLVER_URL
    return Settings(
        solver_url=str(solver_url).rstrip("/"),
        timeout_s=_number(solver, "timeout_s", minimum=0.001),
        max_retries=int(_number(solver, "max_retries")),
        retry_backoff_s=_number(solver, "retry_backoff_s"),
        timings=AnimationTimings.from_ms(
            travel_ms=_number(animation, "travel_ms"),
            drop_ms=_number(animation, "drop_ms"),
            step_pause_ms=_number(animation, "step_pause_ms"),
        ),
        max_board_disks=int(_number(board, "max_board_disks", minimum=1)),
        debug=bool(merged.get("debug", False)),
    )
