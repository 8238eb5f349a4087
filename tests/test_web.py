"""Tests for the HTTP interface.

The web app wraps a shell in a small JSON API.  Tests use
``pytest.importorskip`` so they are skipped gracefully when Flask is
not installed.
"""

from __future__ import annotations

import os
import signal
from typing import Any

import pytest

flask = pytest.importorskip("flask")

from jobsh.web.app import create_app  # noqa: E402

HTTP_OK = 200
HTTP_BAD_REQUEST = 400


def _create_client() -> Any:
    """Create a test client from a fresh app."""
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def _kill(pids: list[int]) -> None:
    """Kill and collect background children started through the API."""
    for pid in pids:
        try:
            os.kill(pid, signal.SIGKILL)
            os.waitpid(pid, 0)
        except (ProcessLookupError, ChildProcessError):
            continue


class TestAppCreation:
    """Verify the app factory."""

    def test_create_app_returns_flask(self) -> None:
        """create_app should return a Flask application."""
        assert isinstance(create_app(), flask.Flask)

    def test_status_initially_running(self) -> None:
        """A fresh session is running with no jobs."""
        response = _create_client().get("/api/status")
        assert response.status_code == HTTP_OK
        assert response.get_json() == {"running": True, "jobs": 0}


class TestExecuteEndpoint:
    """Verify the /api/execute POST endpoint."""

    def test_myjobs(self) -> None:
        """The jobs built-in returns the listing header."""
        response = _create_client().post("/api/execute", json={"command": "myjobs"})
        assert response.status_code == HTTP_OK
        data = response.get_json()
        assert data["output"] == "Background processes:"
        assert data["errors"] == []
        assert data["halted"] is False

    def test_missing_command_field(self) -> None:
        """A body without ``command`` is a 400."""
        response = _create_client().post("/api/execute", json={"cmd": "ls"})
        assert response.status_code == HTTP_BAD_REQUEST

    def test_non_json_body(self) -> None:
        """A non-JSON body is a 400."""
        response = _create_client().post("/api/execute", data="myjobs")
        assert response.status_code == HTTP_BAD_REQUEST

    def test_errors_are_returned(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Error-channel messages come back in ``errors``."""
        response = _create_client().post("/api/execute", json={"command": "false"})
        data = response.get_json()
        assert any("non-zero status" in line for line in data["errors"])
        capfd.readouterr()

    def test_errors_do_not_leak_between_requests(self) -> None:
        """Each response only carries its own errors."""
        client = _create_client()
        client.post("/api/execute", json={"command": "false"})
        data = client.post("/api/execute", json={"command": "true"}).get_json()
        assert data["errors"] == []

    def test_exit_halts_session(self) -> None:
        """``exit`` halts; later commands are refused."""
        client = _create_client()
        first = client.post("/api/execute", json={"command": "exit"}).get_json()
        assert first["halted"] is True
        second = client.post("/api/execute", json={"command": "myjobs"}).get_json()
        assert second["halted"] is True
        assert client.get("/api/status").get_json()["running"] is False


class TestJobsEndpoint:
    """Verify the /api/jobs and /api/log endpoints."""

    def test_background_job_is_listed(self) -> None:
        """A background command appears in the jobs listing."""
        client = _create_client()
        started = client.post("/api/execute", json={"command": "sleep 30 &"}).get_json()
        assert started["output"] == "Background process started: sleep 30"
        jobs = client.get("/api/jobs").get_json()["jobs"]
        try:
            assert len(jobs) == 1
            assert jobs[0]["command"] == "sleep 30"
            assert jobs[0]["pid"] > 0
            assert client.get("/api/status").get_json()["jobs"] == 1
        finally:
            _kill([job["pid"] for job in jobs])

    def test_log_lists_entries(self) -> None:
        """The log endpoint returns formatted entries."""
        client = _create_client()
        client.post("/api/execute", json={"command": "exit"})
        entries = client.get("/api/log").get_json()["entries"]
        assert "[INFO] shell: exit requested" in entries

    def test_log_level_filter(self, capfd: pytest.CaptureFixture[str]) -> None:
        """``?level=`` keeps only entries at or above that severity."""
        client = _create_client()
        client.post("/api/execute", json={"command": "false"})
        client.post("/api/execute", json={"command": "exit"})
        entries = client.get("/api/log?level=warning").get_json()["entries"]
        assert entries
        assert all(e.startswith(("[WARNING]", "[ERROR]")) for e in entries)
        assert "[INFO] shell: exit requested" not in entries
        capfd.readouterr()

    def test_log_source_filter(self) -> None:
        """``?source=`` keeps only entries from that component."""
        client = _create_client()
        client.post("/api/execute", json={"command": "true"})
        client.post("/api/execute", json={"command": "exit"})
        entries = client.get("/api/log?source=shell").get_json()["entries"]
        assert entries == ["[INFO] shell: exit requested"]

    def test_log_unknown_level_is_rejected(self) -> None:
        """An unknown level name is a 400."""
        response = _create_client().get("/api/log?level=loud")
        assert response.status_code == HTTP_BAD_REQUEST
        assert "unknown log level" in response.get_json()["error"]
