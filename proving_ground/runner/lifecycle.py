"""Lifecycle orchestration: before hook, ``prove``, after hook.

``run`` schedules one orchestration on the running event loop and hands
back a :class:`Lifecycle` that publishes ``start``, ``end`` and ``error``
events.  A run emits ``start`` at most once, and exactly one of ``end`` or
``error``.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generator, Optional, Union

from ..config import PROVE, Configuration, build_prove_args
from ..hooks.invoker import HookOutcome, invoke_hook
from .process import ChildProcess, Spawner, signal_name, spawn_process

logger = logging.getLogger(__name__)


class LifecycleEvent(str, Enum):
    """Events published during a run."""

    START = "start"
    END = "end"
    ERROR = "error"


class RunState(str, Enum):
    """Where a run is in its sequence."""

    IDLE = "idle"
    BEFORE_HOOK = "before_hook"
    SPAWNING = "spawning"
    RUNNING = "running"
    AFTER_HOOK = "after_hook"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class RunOutcome:
    """How a run finished: ``end`` with an exit code, or ``error``."""

    event: LifecycleEvent
    exit_code: Optional[int] = None
    error: Any = None
    started: bool = False

    @property
    def failed(self) -> bool:
        return self.event is LifecycleEvent.ERROR


Handler = Callable[[Any], Any]


class Lifecycle:
    """Event stream and state machine for one orchestration run.

    Created by :func:`run`.  Register handlers with :meth:`on`, or await
    the lifecycle (or :meth:`wait`) for the :class:`RunOutcome`.
    """

    def __init__(self, config: Configuration, spawn: Spawner):
        self.config = config
        self.state = RunState.IDLE
        self.child: Optional[ChildProcess] = None
        self.outcome: Optional[RunOutcome] = None
        self._spawn = spawn
        self._handlers: dict[LifecycleEvent, list[Handler]] = {e: [] for e in LifecycleEvent}
        self._task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def on(self, event: Union[LifecycleEvent, str], handler: Handler) -> "Lifecycle":
        """Subscribe ``handler`` to ``event``; returns self for chaining."""
        try:
            key = LifecycleEvent(event)
        except ValueError:
            raise ValueError(
                f"Unknown lifecycle event {event!r}; "
                f"expected one of {[e.value for e in LifecycleEvent]}"
            ) from None
        self._handlers[key].append(handler)
        return self

    @property
    def done(self) -> bool:
        return self.outcome is not None

    async def wait(self) -> RunOutcome:
        """Wait for the run to finish and return its outcome.

        Exceptions raised by ``end`` and ``error`` handlers propagate from
        here; a raising ``start`` handler kills the child and fails the run.
        """
        if self._task is None:
            raise RuntimeError("Lifecycle has not been started")
        await self._task
        return self.outcome

    def __await__(self) -> Generator[Any, None, RunOutcome]:
        return self.wait().__await__()

    def start(self) -> "Lifecycle":
        """Schedule the orchestration on the running loop."""
        if self._task is not None:
            raise RuntimeError("Lifecycle already started")
        self._task = asyncio.get_running_loop().create_task(self._orchestrate())
        return self

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _emit(self, event: LifecycleEvent, payload: Any) -> None:
        logger.debug("Emitting %s", event.value)
        for handler in list(self._handlers[event]):
            handler(payload)

    def _transition(self, state: RunState) -> None:
        logger.debug("Run state %s -> %s", self.state.value, state.value)
        self.state = state

    def _finish(self, outcome: RunOutcome) -> None:
        if self.outcome is not None:
            raise RuntimeError("Run already finished")
        self.outcome = outcome
        if outcome.failed:
            self._transition(RunState.FAILED)
            self._emit(LifecycleEvent.ERROR, outcome.error)
        else:
            self._transition(RunState.DONE)
            self._emit(LifecycleEvent.END, outcome.exit_code)

    def _fail(self, error: Any) -> None:
        self._finish(RunOutcome(
            event=LifecycleEvent.ERROR,
            error=error,
            started=self.child is not None,
        ))

    async def _reap(self, child: ChildProcess) -> None:
        if child.returncode is None:
            try:
                child.kill()
            except ProcessLookupError:
                pass  # already exited
        await child.wait()

    async def _run_hook(self, hook: Optional[Callable]) -> HookOutcome:
        if hook is None:
            return HookOutcome.success()
        return await invoke_hook(hook, timeout=self.config.hook_timeout)

    async def _orchestrate(self) -> None:
        self._transition(RunState.BEFORE_HOOK)
        before = await self._run_hook(self.config.before)
        if before.failed:
            self._fail(before.error)
            return

        self._transition(RunState.SPAWNING)
        args = build_prove_args(self.config)
        try:
            child = await self._spawn(PROVE, args)
        except Exception as e:
            logger.debug("Failed to spawn %s: %r", PROVE, e)
            self._fail(e)
            return

        self.child = child
        self._transition(RunState.RUNNING)
        try:
            self._emit(LifecycleEvent.START, child)
        except Exception as e:
            logger.debug("start handler raised %r; stopping %s", e, PROVE)
            await self._reap(child)
            self._fail(e)
            return

        returncode = await child.wait()
        killed_by = signal_name(returncode)
        if killed_by is not None:
            self._fail(killed_by)
            return
        logger.debug("%s exited with code %s", PROVE, returncode)

        self._transition(RunState.AFTER_HOOK)
        after = await self._run_hook(self.config.after)
        if after.failed:
            self._fail(after.error)
            return

        self._finish(RunOutcome(
            event=LifecycleEvent.END,
            exit_code=returncode,
            started=True,
        ))


def run(config: Optional[Configuration] = None, spawn: Optional[Spawner] = None) -> Lifecycle:
    """Start an orchestration run on the running event loop.

    Args:
        config: Run configuration; ``None`` means all defaults.
        spawn: Coroutine function ``spawn(program, args)`` returning a
            ChildProcess.  Defaults to :func:`spawn_process`.

    Returns:
        The run's Lifecycle.  Nothing happens until the caller yields to the
        loop, so handlers registered straight away observe every event.
    """
    lifecycle = Lifecycle(config or Configuration(), spawn or spawn_process)
    return lifecycle.start()
