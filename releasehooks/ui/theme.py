"""Console and color palette for terminal output."""

from dataclasses import dataclass
from rich.console import Console


@dataclass(frozen=True)
class ColorPalette:
    """Core UI color palette."""

    text_bright: str = "#e8e8f0"
    text: str = "#b8b8cc"
    text_dim: str = "#4a4a60"
    text_muted: str = "#363648"
    accent: str = "#00d4e5"
    ready: str = "#34d399"
    pending: str = "#e5c747"
    error: str = "#e55a6e"


PALETTE = ColorPalette()

STATE_STYLES = {
    "ready": PALETTE.ready,
    "pending": PALETTE.pending,
    "failed": PALETTE.error,
    "skipped": PALETTE.text_dim,
}

console = Console()
