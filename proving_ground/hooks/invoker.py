"""Normalize before/after hooks into a single awaitable outcome.

A hook is a callable that receives one continuation, ``complete(error=None,
value=None)``.  It can report completion three ways:

* raise synchronously -- immediate failure with the raised exception;
* return an awaitable -- success or failure when that awaitable settles;
* call ``complete`` -- success for ``complete()``, failure for
  ``complete(err)`` with ``err`` passed through untouched.

When a hook mixes styles, whichever signal arrives first wins and later
ones are ignored.
"""

import asyncio
import concurrent.futures
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Hook = Callable[..., Any]


class HookTimeoutError(TimeoutError):
    """A hook neither completed nor settled within the configured timeout."""

    def __init__(self, hook: Hook, timeout: float):
        self.hook = hook
        self.timeout = timeout
        super().__init__(f"hook {hook_name(hook)} did not complete within {timeout:g}s")


@dataclass(frozen=True)
class HookOutcome:
    """Result of invoking a hook: success, or failure with an error value."""

    failed: bool = False
    error: Any = None

    @classmethod
    def success(cls) -> "HookOutcome":
        return cls()

    @classmethod
    def failure(cls, error: Any) -> "HookOutcome":
        return cls(failed=True, error=error)


def hook_name(hook: Hook) -> str:
    return getattr(hook, "__qualname__", None) or getattr(hook, "__name__", None) or repr(hook)


def _takes_continuation(hook: Hook) -> bool:
    """True unless the hook's signature rules out a positional argument."""
    try:
        params = inspect.signature(hook).parameters.values()
    except (TypeError, ValueError):
        return True
    return any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in params
    )


async def invoke_hook(hook: Hook, timeout: Optional[float] = None) -> HookOutcome:
    """Call ``hook`` once and wait for it to signal completion.

    Args:
        hook: The hook to run.
        timeout: Seconds to wait before failing with HookTimeoutError.
            ``None`` waits forever.

    Returns:
        HookOutcome describing how the hook finished.  Exceptions raised by
        the hook are reported through the outcome, never re-raised.
    """
    loop = asyncio.get_running_loop()
    settled: asyncio.Future = loop.create_future()

    def settle(outcome: HookOutcome) -> None:
        if not settled.done():
            settled.set_result(outcome)

    def complete(error: Any = None, value: Any = None) -> None:
        if settled.done():
            return
        outcome = HookOutcome.success() if error is None else HookOutcome.failure(error)
        # May be called from any thread, including the loop's own.
        try:
            loop.call_soon_threadsafe(settle, outcome)
        except RuntimeError:
            logger.debug("Ignoring late completion of %s: event loop is closed", hook_name(hook))

    def settle_from(awaited: asyncio.Future) -> None:
        if awaited.cancelled():
            settle(HookOutcome.failure(asyncio.CancelledError()))
        elif awaited.exception() is not None:
            settle(HookOutcome.failure(awaited.exception()))
        else:
            settle(HookOutcome.success())

    takes_continuation = _takes_continuation(hook)
    logger.debug("Invoking hook %s", hook_name(hook))

    try:
        result = hook(complete) if takes_continuation else hook()
    except Exception as e:
        logger.debug("Hook %s raised %r", hook_name(hook), e)
        return HookOutcome.failure(e)

    awaited = None
    if isinstance(result, concurrent.futures.Future):
        awaited = asyncio.wrap_future(result)
    elif inspect.isawaitable(result):
        awaited = asyncio.ensure_future(result)

    if awaited is not None:
        awaited.add_done_callback(settle_from)
    elif not takes_continuation:
        settle(HookOutcome.success())

    try:
        return await asyncio.wait_for(asyncio.shield(settled), timeout)
    except asyncio.TimeoutError:
        if awaited is not None and not awaited.done():
            awaited.cancel()
        return HookOutcome.failure(HookTimeoutError(hook, timeout))
