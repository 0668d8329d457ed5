"""Terminal output for the proving-ground CLI."""

from .theme import DEFAULT_PALETTE, err_console
from .output import relay_stream, render_error, render_failure, start_relays

__all__ = [
    "DEFAULT_PALETTE",
    "err_console",
    "relay_stream",
    "render_error",
    "render_failure",
    "start_relays",
]
