"""Per-kind readiness policies.

Only run-to-completion workloads (Jobs) are polled. Every other kind is
ready as soon as the apply mechanism has accepted it.
"""

from enum import Enum
from typing import Any, Mapping, Optional


class ReadinessState(str, Enum):
    """Readiness of a submitted hook resource."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self is not ReadinessState.PENDING


class ImmediatePolicy:
    """Ready once the create/update call succeeded."""

    requires_polling = False

    def evaluate(self, observed: Optional[Mapping[str, Any]]) -> ReadinessState:
        return ReadinessState.READY

    def failure_reason(self, observed: Optional[Mapping[str, Any]]) -> str:
        return ""


class RunToCompletionPolicy:
    """Pending until a Complete or Failed condition is reported as True."""

    requires_polling = True

    @staticmethod
    def _condition(observed: Optional[Mapping[str, Any]], cond_type: str) -> Optional[Mapping[str, Any]]:
        if not isinstance(observed, Mapping):
            return None
        status = observed.get("status")
        if not isinstance(status, Mapping):
            return None
        for cond in status.get("conditions") or ():
            if not isinstance(cond, Mapping):
                continue
            if cond.get("type") == cond_type and str(cond.get("status")) == "True":
                return cond
        return None

    def evaluate(self, observed: Optional[Mapping[str, Any]]) -> ReadinessState:
        if self._condition(observed, "Failed") is not None:
            return ReadinessState.FAILED
        if self._condition(observed, "Complete") is not None:
            return ReadinessState.READY
        return ReadinessState.PENDING

    def failure_reason(self, observed: Optional[Mapping[str, Any]]) -> str:
        cond = self._condition(observed, "Failed")
        if cond is None:
            return ""
        return str(cond.get("message") or cond.get("reason") or "job failed")


DEFAULT_POLICY = ImmediatePolicy()

# Kinds that need polling. Anything not listed falls back to DEFAULT_POLICY.
POLICIES = {
    "Job": RunToCompletionPolicy(),
}


def policy_for(kind: str):
    return POLICIES.get(kind, DEFAULT_POLICY)


def evaluate(kind: str, observed: Optional[Mapping[str, Any]]) -> ReadinessState:
    """Decide readiness of a resource of ``kind`` given its observed state."""
    return policy_for(kind).evaluate(observed)
