"""HTTP interface for jobsh.

This package provides a Flask application that drives a jobsh shell
over HTTP.  It is an **optional** extra — install with::

    pip install jobsh[web]

The ``create_app`` factory in ``app.py`` creates a shell and serves:

- ``POST /api/execute`` — run a command line and return JSON.
- ``GET /api/jobs`` — the background job table.
- ``GET /api/log`` — recent shell log entries.
- ``GET /api/status`` — whether the session is still running.
"""
