from __future__ import annotations

import json
import os
import tempfile
import unittest

from hanoi_trial.animation import AnimationTimings
from hanoi_trial.config import (
    DEFAULT_SOLVER_URL,
    load_config,
    merge_dicts,
    resolve_settings,
)


class TestConfig(unittest.TestCase):
    def test_load_config_expands_env_vars(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.json")
            os.environ["HT_TEST_SOLVER"] = "https://solver.example.com/prod"
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"solver": {"base_url": "$HT_TEST_SOLVER"}}, f)
            loaded = load_config(path)
            self.assertEqual(loaded["solver"]["base_url"], "https://solver.example.com/prod")

    def test_load_config_rejects_non_objects(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump([1, 2], f)
            with self.assertRaises(ValueError):
                load_config(path)

    def test_merge_dicts_nested(self) -> None:
        base = {"a": 1, "nested": {"x": 1, "y": 2}}
        override = {"nested": {"y": 3, "z": 4}}
        merged = merge_dicts(base, override)
        self.assertEqual(merged, {"a": 1, "nested": {"x": 1, "y": 3, "z": 4}})

    def test_defaults(self) -> None:
        settings = resolve_settings(environ={})
        self.assertEqual(settings.solver_url, DEFAULT_SOLVER_URL)
        self.assertEqual(settings.timings, AnimationTimings())
        self.assertEqual(settings.max_board_disks, 10)
        self.assertEqual(settings.max_retries, 2)
        self.assertFalse(settings.debug)

    def test_solver_url_precedence(self) -> None:
        environ = {"HANOI_SOLVER_URL": "https://env.example.com/"}
        self.assertEqual(resolve_settings(environ=environ).solver_url, "https://env.example.com")
        config = {"solver": {"base_url": "https://config.example.com"}}
        self.assertEqual(
            resolve_settings(config, environ=environ).solver_url, "https://config.example.com"
        )

    def test_animation_overrides_in_milliseconds(self) -> None:
        settings = resolve_settings(
            {"animation": {"travel_ms": 250, "drop_ms": "500", "step_pause_ms": 0}},
            environ={},
        )
        self.assertEqual(settings.timings, AnimationTimings(0.25, 0.5, 0.0))
        self.assertEqual(settings.to_dict()["animation"]["drop_ms"], 500.0)

    def test_rejects_invalid_values(self) -> None:
        bad_configs = [
            {"animation": {"travel_ms": -1}},
            {"animation": {"drop_ms": "slow"}},
            {"solver": {"timeout_s": 0}},
            {"solver": {"max_retries": True}},
            {"board": {"max_board_disks": 0}},
        ]
        for config in bad_configs:
            with self.subTest(config=config):
                with self.assertRaises(ValueError):
                    resolve_settings(config, environ={})


if __name__ == "__main__":
    unittest.main()
