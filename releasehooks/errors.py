"""Exception hierarchy for release hook orchestration."""

from typing import Optional


class ReleaseHookError(Exception):
    """Base class for all releasehooks errors."""


class ConfigError(ReleaseHookError):
    """The configuration file could not be parsed."""


class ManifestError(ReleaseHookError):
    """A rendered manifest file could not be read or parsed."""


class UnrecognizedPhaseError(ReleaseHookError):
    """An annotation named a phase outside the closed set."""

    def __init__(self, value: str, manifest: str = "") -> None:
        self.value = value
        self.manifest = manifest
        where = f" on {manifest}" if manifest else ""
        super().__init__(f"Unrecognized hook phase '{value}'{where}")


class UnknownOperationError(ReleaseHookError):
    """A release operation outside install/upgrade/delete/rollback."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unknown release operation '{value}'")


class HookError(ReleaseHookError):
    """Base for failures attributed to a single hook."""

    def __init__(self, hook: str, reason: str) -> None:
        self.hook = hook
        self.reason = reason
        super().__init__(f"{hook}: {reason}")


class SubmissionFailedError(HookError):
    """The apply mechanism rejected the hook resource."""


class ReadinessTimeoutError(HookError):
    """The hook did not reach a terminal state before the deadline."""


class HookFailedError(HookError):
    """A run-to-completion hook reached terminal failure."""


class PhaseAbortedError(ReleaseHookError):
    """A hook failed, so the rest of its phase was skipped."""

    def __init__(self, phase: str, cause: HookError, skipped: int = 0) -> None:
        self.phase = phase
        self.cause = cause
        self.skipped = skipped
        msg = f"Phase {phase} aborted: {cause}"
        if skipped:
            msg += f" ({skipped} hook(s) skipped)"
        super().__init__(msg)


class MainActionError(ReleaseHookError):
    """The caller-supplied main action raised."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Main action failed: {cause}")


class OperationFailedError(ReleaseHookError):
    """Terminating error for a failed release operation."""

    def __init__(
        self,
        operation: str,
        reason: str,
        phase: Optional[str] = None,
        hook: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.phase = phase
        self.hook = hook
        self.reason = reason
        parts = [f"{operation} failed"]
        if phase:
            parts.append(f"in phase {phase}")
        if hook:
            parts.append(f"at hook {hook}")
        super().__init__(f"{' '.join(parts)}: {reason}")
