"""Terminal output for releasehooks."""

from .theme import console, PALETTE
from .output import (
    render_error,
    render_hook_set,
    render_operation_result,
    render_phase_map,
)

__all__ = [
    "console",
    "PALETTE",
    "render_error",
    "render_hook_set",
    "render_operation_result",
    "render_phase_map",
]
