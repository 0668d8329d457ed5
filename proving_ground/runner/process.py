"""Spawning the ``prove`` child process."""

import asyncio
import logging
import signal
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


class ChildProcess(Protocol):
    """What the orchestrator needs from a spawned process.

    ``asyncio.subprocess.Process`` satisfies this; tests supply fakes.
    """

    pid: Optional[int]
    returncode: Optional[int]
    stdout: Any
    stderr: Any

    async def wait(self) -> int: ...

    def kill(self) -> None: ...


Spawner = Callable[[str, Sequence[str]], Awaitable[ChildProcess]]


async def spawn_process(program: str, args: Sequence[str]) -> asyncio.subprocess.Process:
    """Start ``program`` with stdout and stderr piped.

    Raises whatever process creation raises, e.g. FileNotFoundError when
    the program is not on PATH.
    """
    logger.debug("Spawning %s %s", program, " ".join(args))
    return await asyncio.create_subprocess_exec(
        program,
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )


def signal_name(returncode: Optional[int]) -> Optional[str]:
    """Name of the signal that killed a process, or None for a normal exit.

    asyncio reports signal termination as a negative return code.
    """
    if returncode is None or returncode >= 0:
        return None
    try:
        return signal.Signals(-returncode).name
    except ValueError:
        return f"SIG{-returncode}"
