"""Render hook sets, phase tables and operation results."""

from typing import Any, Mapping, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..hooks.annotations import describe_manifest
from ..hooks.coordinator import OperationResult
from ..hooks.hookset import HookSet
from ..hooks.phases import HookPhase, PHASE_MAP
from .theme import PALETTE, STATE_STYLES, console as default_console


def render_error(text: str, console: Optional[Console] = None) -> None:
    """Render an error message."""
    err = Text()
    err.append("err ", style=f"bold {PALETTE.error}")
    err.append("| ", style=f"dim {PALETTE.text_muted}")
    err.append(text, style=PALETTE.error)
    (console or default_console).print(err)


def render_phase_map(console: Optional[Console] = None) -> None:
    """Print the operation -> (pre, post) table."""
    table = Table(title="Release operations", title_style=f"bold {PALETTE.accent}")
    table.add_column("operation", style=PALETTE.text_bright)
    table.add_column("pre-phase", style=PALETTE.text)
    table.add_column("post-phase", style=PALETTE.text)
    for operation, (pre, post) in PHASE_MAP.items():
        table.add_row(operation.value, pre.value, post.value)
    (console or default_console).print(table)


def render_hook_set(
    hook_set: HookSet,
    ordinary: Sequence[Mapping[str, Any]],
    phases: Optional[Sequence[HookPhase]] = None,
    console: Optional[Console] = None,
) -> None:
    """Print hooks per phase, then the ordinary release resources."""
    out = console or default_console
    table = Table(title="Hooks", title_style=f"bold {PALETTE.accent}")
    table.add_column("phase", style=PALETTE.text_bright)
    table.add_column("hook", style=PALETTE.text)
    table.add_column("kind", style=f"dim {PALETTE.text}")

    for phase in phases or HookPhase:
        hooks = hook_set.hooks_for(phase)
        if not hooks:
            if phases:
                table.add_row(phase.value, Text("(none)", style=PALETTE.text_dim), "")
            continue
        for i, hook in enumerate(hooks):
            table.add_row(phase.value if i == 0 else "", hook.name, hook.kind)

    out.print(table)
    out.print(f"{len(ordinary)} release resource(s)", style=f"dim {PALETTE.text}")
    for manifest in ordinary:
        out.print(f"  {describe_manifest(manifest)}", style=f"dim {PALETTE.text}")


def render_operation_result(result: OperationResult, console: Optional[Console] = None) -> None:
    """Print each executed hook's final state and the overall outcome."""
    out = console or default_console
    table = Table(
        title=f"{result.operation.value}",
        title_style=f"bold {PALETTE.accent}",
    )
    table.add_column("phase", style=PALETTE.text_bright)
    table.add_column("hook", style=PALETTE.text)
    table.add_column("state")
    table.add_column("time", justify="right", style=f"dim {PALETTE.text}")
    table.add_column("reason", style=PALETTE.text)

    for phase_result in result.phase_results:
        for outcome in phase_result.outcomes:
            state = outcome.state.value
            table.add_row(
                phase_result.phase.value,
                outcome.hook.identity,
                Text(state, style=STATE_STYLES[state]),
                f"{outcome.duration:.1f}s",
                outcome.reason,
            )
        for hook in phase_result.skipped:
            table.add_row(
                phase_result.phase.value,
                hook.identity,
                Text("skipped", style=STATE_STYLES["skipped"]),
                "",
                "",
            )

    if table.row_count:
        out.print(table)

    if result.success:
        out.print(f"{result.operation.value} succeeded", style=f"bold {PALETTE.ready}")
    else:
        where = result.failed_phase.value if result.failed_phase else result.stage
        render_error(f"{result.operation.value} failed during {where}: {result.reason}", out)
