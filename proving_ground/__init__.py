"""proving-ground - run prove between before/after hooks."""

__version__ = "0.1.0"

from .config import Configuration, ConfigManager, build_prove_args
from .hooks import HookLoadError, HookOutcome, HookTimeoutError, invoke_hook, load_hook
from .runner import Lifecycle, LifecycleEvent, RunOutcome, RunState, run

__all__ = [
    "Configuration",
    "ConfigManager",
    "build_prove_args",
    "HookLoadError",
    "HookOutcome",
    "HookTimeoutError",
    "invoke_hook",
    "load_hook",
    "Lifecycle",
    "LifecycleEvent",
    "RunOutcome",
    "RunState",
    "run",
]
