from __future__ import annotations

import socket
import threading
from unittest.mock import MagicMock

import pytest
import requests


@pytest.fixture
def fake_session():
    """A requests.Session stand-in; configure .get.return_value or .side_effect."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def stalled_server(monkeypatch):
    """Start a local server that sends ``payload`` then stops responding.

    Returns a function taking the payload bytes and giving back the url.
    """
    # local sockets must not be routed through a proxy from the environment
    for var in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    stop = threading.Event()
    sockets = []

    def serve(listener, payload):
        while not stop.is_set():
            try:
                conn, _ = listener.accept()
            except OSError:
                return
            sockets.append(conn)
            if payload:
                conn.sendall(payload)

    def start(payload: bytes = b"") -> str:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(5)
        sockets.append(listener)
        threading.Thread(target=serve, args=(listener, payload), daemon=True).start()
        host, port = listener.getsockname()
        return f"http://{host}:{port}/index.html"

    yield start
    stop.set()
    for s in sockets:
        s.close()
