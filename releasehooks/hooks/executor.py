"""Run the hooks bound to one lifecycle phase.

Hooks run one at a time in the order the HookSet holds them. The first
hook that fails stops the phase; hooks after it are never submitted.
Resources that were already submitted stay in the target system.
"""

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from ..errors import (
    HookError,
    HookFailedError,
    PhaseAbortedError,
    ReadinessTimeoutError,
    SubmissionFailedError,
)
from .hookset import Hook, HookSet
from .phases import HookPhase, parse_phase
from .readiness import ReadinessState, policy_for

if TYPE_CHECKING:
    from ..apply.base import BaseApplier, ResourceHandle

logger = logging.getLogger(__name__)


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class HookOutcome:
    """Final state of one executed hook."""

    hook: Hook
    state: ReadinessState
    reason: str = ""
    duration: float = 0.0


@dataclass(frozen=True)
class PhaseResult:
    """Aggregate result of one phase."""

    phase: HookPhase
    success: bool
    outcomes: tuple[HookOutcome, ...] = ()
    skipped: tuple[Hook, ...] = ()
    failed_hook: Optional[Hook] = None
    reason: str = ""
    error: Optional[PhaseAbortedError] = None


class PhaseExecutor:
    """Submit each hook of a phase and wait for it to become ready."""

    def __init__(
        self,
        applier: "BaseApplier",
        timeout: float = 300.0,
        poll_interval: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.applier = applier
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    def run(
        self,
        phase: HookPhase,
        hook_set: HookSet,
        deadline: Optional[float] = None,
        cancel: Optional[CancelSignal] = None,
    ) -> PhaseResult:
        """Execute every hook bound to ``phase``.

        Args:
            phase: The phase to run.
            hook_set: Assembled hooks for the release.
            deadline: Absolute time (same clock as the executor) after which
                any hook still pending is failed.
            cancel: Object with ``is_set()``; once set, pending hooks fail.
        """
        phase = parse_phase(phase)
        hooks = hook_set.hooks_for(phase)
        if not hooks:
            logger.debug("No hooks for %s", phase.value)
            return PhaseResult(phase=phase, success=True)

        logger.info("Running %d hook(s) for %s", len(hooks), phase.value)
        outcomes = []
        for index, hook in enumerate(hooks):
            start = self._clock()
            error = self._run_hook(hook, deadline, cancel)
            duration = round(self._clock() - start, 3)

            if error is None:
                outcomes.append(HookOutcome(hook, ReadinessState.READY, duration=duration))
                logger.info("Hook %s ready (%s)", hook.identity, phase.value)
                continue

            outcomes.append(HookOutcome(hook, ReadinessState.FAILED, error.reason, duration))
            skipped = hooks[index + 1:]
            aborted = PhaseAbortedError(phase.value, error, skipped=len(skipped))
            logger.error("%s", aborted)
            return PhaseResult(
                phase=phase,
                success=False,
                outcomes=tuple(outcomes),
                skipped=skipped,
                failed_hook=hook,
                reason=error.reason,
                error=aborted,
            )

        return PhaseResult(phase=phase, success=True, outcomes=tuple(outcomes))

    def _run_hook(
        self,
        hook: Hook,
        deadline: Optional[float],
        cancel: Optional[CancelSignal],
    ) -> Optional[HookError]:
        """Submit one hook and wait for a terminal state. Returns the failure, if any."""
        logger.debug("Submitting hook %s", hook.identity)
        try:
            result = self.applier.submit(hook.manifest)
        except Exception as e:
            return SubmissionFailedError(hook.identity, f"submission failed: {e}")
        if not result.accepted:
            return SubmissionFailedError(hook.identity, result.error or "submission rejected")

        policy = policy_for(hook.kind)
        if not policy.requires_polling:
            return None

        return self._wait(hook, result.handle, policy, deadline, cancel)

    def _wait(
        self,
        hook: Hook,
        handle: "ResourceHandle",
        policy,
        deadline: Optional[float],
        cancel: Optional[CancelSignal],
    ) -> Optional[HookError]:
        limit = self._clock() + self.timeout
        if deadline is not None:
            limit = min(limit, deadline)

        while True:
            if cancel is not None and cancel.is_set():
                return ReadinessTimeoutError(hook.identity, "cancelled while waiting for readiness")

            try:
                observed = self.applier.poll(handle)
            except Exception as e:
                return HookFailedError(hook.identity, f"polling failed: {e}")

            state = policy.evaluate(observed)
            if state is ReadinessState.READY:
                return None
            if state is ReadinessState.FAILED:
                return HookFailedError(hook.identity, policy.failure_reason(observed))

            now = self._clock()
            if now >= limit:
                return ReadinessTimeoutError(hook.identity, "timed out waiting for readiness")
            logger.debug("Hook %s pending", hook.identity)
            self._sleep(min(self.poll_interval, max(limit - now, 0)))
