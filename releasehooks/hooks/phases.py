"""Lifecycle phases and the operation -> phase pair registry."""

from enum import Enum
from types import MappingProxyType
from typing import Union

from ..errors import UnknownOperationError, UnrecognizedPhaseError


class HookPhase(str, Enum):
    """Lifecycle moments a hook can be bound to."""

    PRE_INSTALL = "pre-install"
    POST_INSTALL = "post-install"
    PRE_DELETE = "pre-delete"
    POST_DELETE = "post-delete"
    PRE_UPGRADE = "pre-upgrade"
    POST_UPGRADE = "post-upgrade"
    PRE_ROLLBACK = "pre-rollback"
    POST_ROLLBACK = "post-rollback"


class Operation(str, Enum):
    """Caller-initiated release actions."""

    INSTALL = "install"
    UPGRADE = "upgrade"
    DELETE = "delete"
    ROLLBACK = "rollback"


PHASE_MAP = MappingProxyType({
    Operation.INSTALL: (HookPhase.PRE_INSTALL, HookPhase.POST_INSTALL),
    Operation.UPGRADE: (HookPhase.PRE_UPGRADE, HookPhase.POST_UPGRADE),
    Operation.DELETE: (HookPhase.PRE_DELETE, HookPhase.POST_DELETE),
    Operation.ROLLBACK: (HookPhase.PRE_ROLLBACK, HookPhase.POST_ROLLBACK),
})

_PHASES_BY_VALUE = {p.value: p for p in HookPhase}
_OPERATIONS_BY_VALUE = {o.value: o for o in Operation}


def parse_phase(value: Union[str, HookPhase]) -> HookPhase:
    """Match a phase identifier exactly (case-sensitive)."""
    if isinstance(value, HookPhase):
        return value
    phase = _PHASES_BY_VALUE.get(value)
    if phase is None:
        raise UnrecognizedPhaseError(str(value))
    return phase


def parse_operation(value: Union[str, Operation]) -> Operation:
    if isinstance(value, Operation):
        return value
    operation = _OPERATIONS_BY_VALUE.get(value)
    if operation is None:
        raise UnknownOperationError(value)
    return operation


def phases_for(operation: Union[str, Operation]) -> tuple[HookPhase, HookPhase]:
    """Return the (pre, post) phase pair for an operation."""
    return PHASE_MAP[parse_operation(operation)]


def is_phase(value: str) -> bool:
    return value in _PHASES_BY_VALUE
