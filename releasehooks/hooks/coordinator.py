"""Drive a release operation: pre-phase hooks, main action, post-phase hooks."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from ..errors import MainActionError, OperationFailedError, ReleaseHookError
from .annotations import HOOK_ANNOTATION
from .executor import CancelSignal, PhaseExecutor, PhaseResult
from .hookset import Hook, HookSet, assemble_hook_set
from .phases import HookPhase, Operation, parse_operation, phases_for

logger = logging.getLogger(__name__)

STAGE_PRE = "pre"
STAGE_MAIN = "main"
STAGE_POST = "post"


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one release operation."""

    operation: Operation
    success: bool
    phase_results: tuple[PhaseResult, ...] = ()
    stage: Optional[str] = None
    failed_phase: Optional[HookPhase] = None
    failed_hook: Optional[Hook] = None
    reason: str = ""
    error: Optional[ReleaseHookError] = None

    def raise_for_failure(self) -> None:
        """Raise the terminating error if the operation failed."""
        if self.success:
            return
        raise OperationFailedError(
            self.operation.value,
            self.reason,
            phase=self.failed_phase.value if self.failed_phase else None,
            hook=self.failed_hook.identity if self.failed_hook else None,
        ) from self.error


class LifecycleCoordinator:
    """Runs operations in the fixed order pre -> main -> post."""

    def __init__(
        self,
        executor: PhaseExecutor,
        strict_phases: bool = False,
        annotation: str = HOOK_ANNOTATION,
    ):
        self.executor = executor
        self.strict_phases = strict_phases
        self.annotation = annotation

    def perform(
        self,
        operation: Union[str, Operation],
        pre_phase_action: Callable[[], PhaseResult],
        main_action: Callable[[], Any],
        post_phase_action: Callable[[], PhaseResult],
    ) -> OperationResult:
        """Run the three stages, stopping at the first failure."""
        operation = parse_operation(operation)
        results = []

        pre = pre_phase_action()
        results.append(pre)
        if not pre.success:
            return self._phase_failure(operation, STAGE_PRE, pre, results)

        try:
            main_action()
        except Exception as e:
            error = MainActionError(e)
            logger.error("%s: %s", operation.value, error)
            return OperationResult(
                operation=operation,
                success=False,
                phase_results=tuple(results),
                stage=STAGE_MAIN,
                reason=str(e),
                error=error,
            )

        post = post_phase_action()
        results.append(post)
        if not post.success:
            return self._phase_failure(operation, STAGE_POST, post, results)

        logger.info("%s completed", operation.value)
        return OperationResult(operation=operation, success=True, phase_results=tuple(results))

    def run_release(
        self,
        operation: Union[str, Operation],
        manifests: Iterable[Any],
        main_action: Callable[[list[Mapping[str, Any]]], Any],
        deadline: Optional[float] = None,
        cancel: Optional[CancelSignal] = None,
    ) -> OperationResult:
        """Assemble hooks from flattened manifests and perform ``operation``.

        ``main_action`` receives the ordinary (non-hook) resources.
        """
        operation = parse_operation(operation)
        pre, post = phases_for(operation)
        hook_set, ordinary = assemble_hook_set(
            manifests, strict=self.strict_phases, annotation=self.annotation,
        )
        logger.info(
            "%s: %d hook(s), %d release resource(s)",
            operation.value, len(hook_set), len(ordinary),
        )
        return self.perform(
            operation,
            lambda: self._run_phase(pre, hook_set, deadline, cancel),
            lambda: main_action(ordinary),
            lambda: self._run_phase(post, hook_set, deadline, cancel),
        )

    def _run_phase(
        self,
        phase: HookPhase,
        hook_set: HookSet,
        deadline: Optional[float],
        cancel: Optional[CancelSignal],
    ) -> PhaseResult:
        return self.executor.run(phase, hook_set, deadline=deadline, cancel=cancel)

    @staticmethod
    def _phase_failure(
        operation: Operation,
        stage: str,
        result: PhaseResult,
        results: list[PhaseResult],
    ) -> OperationResult:
        return OperationResult(
            operation=operation,
            success=False,
            phase_results=tuple(results),
            stage=stage,
            failed_phase=result.phase,
            failed_hook=result.failed_hook,
            reason=result.reason,
            error=result.error,
        )
