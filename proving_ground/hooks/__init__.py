"""Before/after hook system for proving-ground."""

from .invoker import Hook, HookOutcome, HookTimeoutError, invoke_hook
from .loader import HookLoadError, load_hook

__all__ = [
    "Hook",
    "HookOutcome",
    "HookTimeoutError",
    "invoke_hook",
    "HookLoadError",
    "load_hook",
]
