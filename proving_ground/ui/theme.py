"""Terminal palette and shared consoles."""

from dataclasses import dataclass
from rich.console import Console


@dataclass(frozen=True)
class ColorPalette:
    """Core UI color palette."""

    text_muted: str = "#363648"
    error: str = "#e55a6e"


DEFAULT_PALETTE = ColorPalette()

# Diagnostics and logs go to stderr; stdout carries the relayed TAP output.
err_console = Console(stderr=True)
