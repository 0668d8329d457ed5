"""Bring a Selenium grid up before the suite and down after it.

    proving-ground -n 2 \\
        --before examples/selenium_grid/grid.py:setup \\
        --after examples/selenium_grid/grid.py:teardown \\
        examples/selenium_grid/t/*.py

Needs Java and a Selenium 4 server jar (``SELENIUM_JAR``).
"""

import os
import subprocess
import threading
import time

import httpx

URL = os.environ.get("GRID_URL", "http://localhost:4444")
SELENIUM_JAR = os.environ.get("SELENIUM_JAR", "selenium-server.jar")
NUM_NODES = int(os.environ.get("GRID_NODES", "2"))
READY_TIMEOUT = 60.0

children: list[subprocess.Popen] = []


def _start(*args: str) -> None:
    child = subprocess.Popen(
        ["java", "-jar", SELENIUM_JAR, *args],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    children.append(child)


def _wait_until_ready(timeout: float) -> None:
    """Poll the hub's /status until it reports ready."""
    deadline = time.monotonic() + timeout
    with httpx.Client(timeout=2.0) as client:
        while time.monotonic() < deadline:
            try:
                status = client.get(f"{URL}/status").json()
            except (httpx.HTTPError, ValueError):
                status = {}  # hub not listening yet
            if status.get("value", {}).get("ready"):
                return
            time.sleep(0.5)
    raise TimeoutError(f"Selenium grid at {URL} not ready after {timeout:g}s")


def _kill_all() -> None:
    while children:
        child = children.pop()
        child.terminate()
        child.wait()


def setup(done):
    """Start a hub and NUM_NODES nodes, then call ``done`` once the grid is ready."""
    print(f"Starting selenium grid with {NUM_NODES} nodes...")

    def boot():
        try:
            _start("hub")
            for i in range(NUM_NODES):
                _start("node", "--hub", URL, "--port", str(5555 + i))
            _wait_until_ready(READY_TIMEOUT)
        except Exception as e:
            _kill_all()
            done(e)
            return
        print("...done")
        done()

    threading.Thread(target=boot, daemon=True).start()


def teardown(done):
    print("Tearing down selenium grid...")
    _kill_all()
    print("...done")
    done()
