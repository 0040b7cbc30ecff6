from __future__ import annotations

import io
import json
import os
import tempfile
import unittest
import urllib.error
from unittest import mock

from hanoi_trial.client import (
    SolutionFileSource,
    SolverClient,
    SolverError,
    load_solution_file,
    solve_endpoint,
)

THREE_DISK_PAYLOAD = {
    "totalSteps": 7,
    "steps": [
        {"stepNumber": 1, "from": "A", "to": "C", "disk": 1},
        {"stepNumber": 2, "from": "A", "to": "B", "disk": 2},
        {"stepNumber": 3, "from": "C", "to": "B", "disk": 1},
        {"stepNumber": 4, "from": "A", "to": "C", "disk": 3},
        {"stepNumber": 5, "from": "B", "to": "A", "disk": 1},
        {"stepNumber": 6, "from": "B", "to": "C", "disk": 2},
        {"stepNumber": 7, "from": "A", "to": "C", "disk": 1},
    ],
}


class FakeResponse:
    def __init__(self, body: str) -> None:
        self._body = body.encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


def _http_error(code: int, detail: str = "boom") -> urllib.error.HTTPError:
    return urllib.error.HTTPError(
        "http://solver.test/solve", code, "error", {}, io.BytesIO(detail.encode("utf-8"))
    )


class TestSolverClient(unittest.TestCase):
    def setUp(self) -> None:
        self.sleeps: list[float] = []

    def _client(self, base_url: str = "https://solver.test/", **kwargs: object) -> SolverClient:
        kwargs.setdefault("sleep", self.sleeps.append)
        return SolverClient(base_url, **kwargs)  # type: ignore[arg-type]

    def test_endpoint_depends_on_host(self) -> None:
        self.assertEqual(solve_endpoint("http://localhost:3001"), "/dev/solve")
        self.assertEqual(solve_endpoint("https://api.example.com/prod"), "/solve")
        self.assertEqual(self._client().url, "https://solver.test/solve")
        self.assertEqual(SolverClient().url, "http://localhost:3001/dev/solve")

    def test_solve_posts_disk_count_and_parses_steps(self) -> None:
        requests = []

        def fake_urlopen(request, timeout):  # type: ignore[no-untyped-def]
            requests.append((request, timeout))
            return FakeResponse(json.dumps(THREE_DISK_PAYLOAD))

        with mock.patch("urllib.request.urlopen", side_effect=fake_urlopen):
            solution = self._client(timeout_s=5).solve(3)

        self.assertEqual(solution.total_steps, 7)
        self.assertTrue(solution.is_playable)
        request, timeout = requests[0]
        self.assertEqual(request.full_url, "https://solver.test/solve")
        self.assertEqual(request.get_method(), "POST")
        self.assertEqual(request.get_header("Content-type"), "application/json")
        self.assertEqual(json.loads(request.data), {"numberOfDisks": 3})
        self.assertEqual(timeout, 5.0)

    def test_count_only_response(self) -> None:
        body = json.dumps({"steps": [], "totalSteps": 2**20 - 1})
        with mock.patch("urllib.request.urlopen", return_value=FakeResponse(body)):
            solution = self._client().solve(20)
        self.assertFalse(solution.is_playable)
        self.assertEqual(solution.total_steps, 1048575)

    def test_retries_server_errors_with_backoff(self) -> None:
        responses = [_http_error(503), urllib.error.URLError("refused")]

        def fake_urlopen(request, timeout):  # type: ignore[no-untyped-def]
            if responses:
                raise responses.pop(0)
            return FakeResponse(json.dumps(THREE_DISK_PAYLOAD))

        with mock.patch("urllib.request.urlopen", side_effect=fake_urlopen):
            solution = self._client(max_retries=2, retry_backoff_s=0.5).solve(3)

        self.assertEqual(solution.total_steps, 7)
        self.assertEqual(self.sleeps, [0.5, 1.0])

    def test_gives_up_after_max_retries(self) -> None:
        def fake_urlopen(request, timeout):  # type: ignore[no-untyped-def]
            raise _http_error(503)

        with mock.patch("urllib.request.urlopen", side_effect=fake_urlopen) as urlopen:
            with self.assertRaises(SolverError) as ctx:
                self._client(max_retries=1).solve(3)
        self.assertEqual(urlopen.call_count, 2)
        self.assertTrue(ctx.exception.retryable)
        self.assertEqual(ctx.exception.status, 503)
        self.assertIn("HTTP 503: boom", str(ctx.exception))

    def test_client_errors_are_not_retried(self) -> None:
        with mock.patch(
            "urllib.request.urlopen", side_effect=_http_error(400, "bad disks")
        ) as urlopen:
            with self.assertRaises(SolverError) as ctx:
                self._client(max_retries=3).solve(3)
        self.assertEqual(urlopen.call_count, 1)
        self.assertFalse(ctx.exception.retryable)
        self.assertEqual(self.sleeps, [])

    def test_timeout_is_retryable(self) -> None:
        with mock.patch("urllib.request.urlopen", side_effect=TimeoutError()):
            with self.assertRaises(SolverError) as ctx:
                self._client(max_retries=0, timeout_s=2).solve(3)
        self.assertTrue(ctx.exception.retryable)
        self.assertIn("timed out after 2s", str(ctx.exception))

    def test_bad_json_and_malformed_payloads(self) -> None:
        for body in ("not json", json.dumps({"steps": "nope"})):
            with self.subTest(body=body):
                with mock.patch("urllib.request.urlopen", return_value=FakeResponse(body)):
                    with self.assertRaises(SolverError) as ctx:
                        self._client().solve(3)
                self.assertFalse(ctx.exception.retryable)
        self.assertEqual(self.sleeps, [])

    def test_rejects_disk_counts_before_any_request(self) -> None:
        with mock.patch("urllib.request.urlopen") as urlopen:
            for bad in (0, 1001, -5):
                with self.assertRaises(ValueError):
                    self._client().solve(bad)
            for bad in ("3", 3.0, True):
                with self.assertRaises(TypeError):
                    self._client().solve(bad)  # type: ignore[arg-type]
        urlopen.assert_not_called()

    def test_debug_logs_requests_to_stderr(self) -> None:
        stderr = io.StringIO()
        with (
            mock.patch("urllib.request.urlopen", side_effect=_http_error(502)),
            mock.patch("sys.stderr", stderr),
        ):
            with self.assertRaises(SolverError):
                self._client(max_retries=1, debug=True).solve(3)
        output = stderr.getvalue()
        self.assertIn("[hanoi-trial debug] POST https://solver.test/solve", output)
        self.assertIn("retry 1/1", output)


class TestSolutionFiles(unittest.TestCase):
    def test_file_source_checks_step_count(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "hanoi_3.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump(THREE_DISK_PAYLOAD, f)

            source = SolutionFileSource(path)
            self.assertEqual(source.solve(3).total_steps, 7)
            with self.assertRaises(SolverError) as ctx:
                source.solve(4)
            self.assertFalse(ctx.exception.retryable)
            self.assertIn("4 disks need 15", str(ctx.exception))

    def test_load_solution_file_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = os.path.join(tmp, "missing.json")
            with self.assertRaises(SolverError):
                load_solution_file(missing)

            broken = os.path.join(tmp, "broken.json")
            with open(broken, "w", encoding="utf-8") as f:
                f.write("{")
            with self.assertRaises(SolverError):
                load_solution_file(broken)


if __name__ == "__main__":
    unittest.main()
