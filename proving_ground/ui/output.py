"""Output rendering and relaying of the child's streams."""

import asyncio
from typing import Any, BinaryIO

from rich.text import Text
from rich.traceback import Traceback

from .theme import DEFAULT_PALETTE, err_console

CHUNK_SIZE = 64 * 1024


def render_error(text: str) -> None:
    """Render an error message on stderr."""
    palette = DEFAULT_PALETTE
    err = Text()
    err.append("err ", style=f"bold {palette.error}")
    err.append("| ", style=f"dim {palette.text_muted}")
    err.append(text, style=palette.error)
    err_console.print(err)


def render_failure(error: Any) -> None:
    """Render the payload of an ``error`` event.

    Exceptions get a traceback when they carry one; anything else (a signal
    name, a value a hook passed to its continuation) is printed as-is.
    """
    if isinstance(error, BaseException):
        if error.__traceback__ is not None:
            err_console.print(Traceback.from_exception(type(error), error, error.__traceback__))
        else:
            render_error(f"{type(error).__name__}: {error}")
        return
    render_error(str(error))


async def relay_stream(reader: Any, sink: BinaryIO) -> int:
    """Copy a byte stream reader into ``sink`` until EOF.

    Returns the number of bytes relayed.
    """
    total = 0
    while True:
        chunk = await reader.read(CHUNK_SIZE)
        if not chunk:
            break
        sink.write(chunk)
        sink.flush()
        total += len(chunk)
    return total


def start_relays(child: Any, stdout: BinaryIO, stderr: BinaryIO) -> list[asyncio.Task]:
    """Start relaying a child's stdout and stderr; one task per piped stream."""
    tasks = []
    for reader, sink in ((child.stdout, stdout), (child.stderr, stderr)):
        if reader is not None:
            tasks.append(asyncio.ensure_future(relay_stream(reader, sink)))
    return tasks
