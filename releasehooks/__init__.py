"""releasehooks - lifecycle hook orchestration for package releases."""

__version__ = "0.1.0"

from .hooks import (
    Hook,
    HookPhase,
    HookSet,
    LifecycleCoordinator,
    Operation,
    OperationResult,
    PhaseExecutor,
    PhaseResult,
    ReadinessState,
    assemble_hook_set,
    extract_phases,
    phases_for,
)
from .config import ConfigManager

__all__ = [
    "Hook",
    "HookPhase",
    "HookSet",
    "LifecycleCoordinator",
    "Operation",
    "OperationResult",
    "PhaseExecutor",
    "PhaseResult",
    "ReadinessState",
    "assemble_hook_set",
    "extract_phases",
    "phases_for",
    "ConfigManager",
]
