"""Shared fixtures: an in-memory stand-in for the prove child process."""

import asyncio

import pytest


def _reader(data: bytes) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    if data:
        reader.feed_data(data)
    reader.feed_eof()
    return reader


class FakeProcess:
    """Quacks like asyncio.subprocess.Process.

    With ``returncode=None`` the process keeps running until ``exit()``.
    """

    def __init__(self, returncode=0, stdout=b"", stderr=b""):
        self.pid = 4242
        self.killed = False
        self.returncode = None
        self.stdout = _reader(stdout)
        self.stderr = _reader(stderr)
        self._exit = asyncio.get_running_loop().create_future()
        if returncode is not None:
            self.exit(returncode)

    def exit(self, returncode):
        if not self._exit.done():
            self._exit.set_result(returncode)

    async def wait(self):
        self.returncode = await self._exit
        return self.returncode

    def kill(self):
        self.killed = True
        self.exit(-9)


class FakeSpawner:
    """Records spawn calls and hands out FakeProcess instances."""

    def __init__(self, returncode=0, stdout=b"", stderr=b"", error=None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.error = error
        self.calls = []
        self.processes = []

    async def __call__(self, program, args):
        self.calls.append((program, list(args)))
        if self.error is not None:
            raise self.error
        process = FakeProcess(self.returncode, self.stdout, self.stderr)
        self.processes.append(process)
        return process

    @property
    def called(self):
        return bool(self.calls)

    @property
    def args(self):
        return self.calls[-1][1]


@pytest.fixture
def fake_spawner():
    """Factory for FakeSpawner: ``fake_spawner(returncode=3)``."""
    return FakeSpawner
