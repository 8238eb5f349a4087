"""Flask application factory for the jobsh HTTP interface.

The ``create_app`` function creates a shell and returns a Flask app
wrapping it.  Error-channel messages produced while a command is
dispatched are captured and returned alongside its output; anything a
foreground program itself prints still goes to the server's own
standard streams.
"""

from __future__ import annotations

import io

from flask import Flask, Response, jsonify, request

from jobsh.config import ShellConfig
from jobsh.logging import Logger, LogLevel
from jobsh.shell import Shell

_HTTP_BAD_REQUEST = 400
_LOG_TAIL = 100


def create_app(config: ShellConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Settings for the wrapped shell (defaults if omitted).

    Returns:
        A configured Flask application ready to serve.

    """
    errors = io.StringIO()
    shell = Shell(config=config, err=errors, logger=Logger())
    state = {"running": True}

    app = Flask(__name__)

    def _drain_errors() -> list[str]:
        lines = errors.getvalue().splitlines()
        errors.seek(0)
        errors.truncate()
        return lines

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Execute a command line and return JSON output.

        Expects JSON body: ``{"command": "..."}``

        Returns:
            JSON with ``output``, ``errors`` and ``halted`` fields.

        """
        data = request.get_json(silent=True)
        if data is None or not isinstance(data.get("command"), str):
            return jsonify({"error": "Missing 'command' field"}), _HTTP_BAD_REQUEST

        if not state["running"]:
            return jsonify({"output": "Session ended.", "errors": [], "halted": True})

        result = shell.execute(data["command"])
        if result == Shell.EXIT_SENTINEL:
            state["running"] = False
            return jsonify({"output": "Session ended.", "errors": _drain_errors(), "halted": True})

        return jsonify({"output": result, "errors": _drain_errors(), "halted": False})

    @app.route("/api/jobs")
    def jobs() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the job table after a reaping sweep."""
        shell.reap_jobs()
        table = [{"pid": job.pid, "command": job.command} for job in shell.jobs]
        return jsonify({"jobs": table})

    @app.route("/api/log")
    def log() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the most recent log entries as strings.

        Optional query parameters ``level`` (minimum severity name) and
        ``source`` narrow the result.
        """
        level_name = request.args.get("level")
        try:
            min_level = LogLevel.parse(level_name) if level_name else None
        except ValueError as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST
        source = request.args.get("source") or None
        entries = shell.logger.filter(min_level=min_level, source=source)[-_LOG_TAIL:]
        return jsonify({"entries": [str(e) for e in entries]})

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return session status for polling.

        Returns:
            JSON with ``running`` and ``jobs`` fields.

        """
        return jsonify({"running": state["running"], "jobs": len(shell.jobs)})

    return app


def main() -> None:
    """Run the HTTP interface development server.

    This is the ``jobsh-web`` console entry point.
    """
    app = create_app()
    app.run(debug=False, port=8080, threaded=False)
