"""Runner module - orchestration of the ``prove`` child process."""

from .lifecycle import Lifecycle, LifecycleEvent, RunOutcome, RunState, run
from .process import ChildProcess, Spawner, signal_name, spawn_process

__all__ = [
    "Lifecycle",
    "LifecycleEvent",
    "RunOutcome",
    "RunState",
    "run",
    "ChildProcess",
    "Spawner",
    "signal_name",
    "spawn_process",
]
