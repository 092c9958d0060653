"""Shared fixtures for end-to-end server tests.

Starts ``python -m notevault`` as a subprocess against a temporary snapshot
file and provides a ``live_url`` fixture with the base URL.  The server is
started once per session to keep test runs fast.
"""

from __future__ import annotations

import os
import socket
import subprocess
import sys
import time
from pathlib import Path

import pytest
import requests

_ROOT = Path(__file__).parent.parent.parent
_SRC = _ROOT / "src"


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(scope="session")
def data_path(tmp_path_factory) -> Path:
    return tmp_path_factory.mktemp("vault") / "db.json"


@pytest.fixture(scope="session")
def notevault_server(data_path: Path):
    """Start the server; yield ``(process, port)``; terminate on teardown."""
    port = _free_port()
    env = {
        **os.environ,
        "NOTEVAULT_DATA_PATH": str(data_path),
        "NOTEVAULT_BACKEND": "json",
        "NOTEVAULT_PORT": str(port),
        "NOTEVAULT_LOG_LEVEL": "WARNING",
        "PYTHONPATH": os.pathsep.join(filter(None, [str(_SRC), os.environ.get("PYTHONPATH")])),
    }
    env.pop("NOTEVAULT_CONFIG", None)
    proc = subprocess.Popen(
        [sys.executable, "-m", "notevault"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=str(_ROOT),
        env=env,
    )

    # Wait up to 20 s for the server to be ready
    deadline = time.time() + 20
    while time.time() < deadline:
        try:
            r = requests.get(f"http://127.0.0.1:{port}/health", timeout=1)
            if r.status_code == 200:
                break
        except requests.RequestException:
            time.sleep(0.25)
    else:
        proc.terminate()
        stdout, stderr = proc.communicate(timeout=5)
        pytest.fail(
            f"notevault server did not start within 20 s.\n"
            f"stdout: {stdout.decode()}\nstderr: {stderr.decode()}"
        )

    yield proc, port

    proc.terminate()
    try:
        proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        proc.kill()


@pytest.fixture(scope="session")
def live_url(notevault_server) -> str:
    _, port = notevault_server
    return f"http://127.0.0.1:{port}"
