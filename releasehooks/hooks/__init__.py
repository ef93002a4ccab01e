"""Release lifecycle hook orchestration."""

from .phases import HookPhase, Operation, PHASE_MAP, phases_for, parse_phase, parse_operation
from .annotations import HOOK_ANNOTATION, PhaseExtraction, extract_phases, format_phases
from .hookset import Hook, HookSet, assemble_hook_set
from .readiness import ReadinessState, evaluate, policy_for
from .executor import HookOutcome, PhaseExecutor, PhaseResult
from .coordinator import LifecycleCoordinator, OperationResult

__all__ = [
    "HookPhase",
    "Operation",
    "PHASE_MAP",
    "phases_for",
    "parse_phase",
    "parse_operation",
    "HOOK_ANNOTATION",
    "PhaseExtraction",
    "extract_phases",
    "format_phases",
    "Hook",
    "HookSet",
    "assemble_hook_set",
    "ReadinessState",
    "evaluate",
    "policy_for",
    "HookOutcome",
    "PhaseExecutor",
    "PhaseResult",
    "LifecycleCoordinator",
    "OperationResult",
]
