"""Tests for operation sequencing: pre-phase, main action, post-phase."""

import httpx
import pytest

from releasehooks.apply.kube import KubeApplier
from releasehooks.apply.memory import MemoryApplier
from releasehooks.errors import (
    HookFailedError,
    MainActionError,
    OperationFailedError,
    PhaseAbortedError,
    UnknownOperationError,
    UnrecognizedPhaseError,
)
from releasehooks.hooks.coordinator import LifecycleCoordinator
from releasehooks.hooks.executor import PhaseExecutor, PhaseResult
from releasehooks.hooks.hookset import Hook
from releasehooks.hooks.phases import HookPhase, Operation

FAILED = {"status": {"conditions": [{"type": "Failed", "status": "True", "message": "exit 1"}]}}


def _hook(name, phases, kind="Job"):
    return {"kind": kind, "metadata": {"name": name, "annotations": {"helm.sh/hook": phases}}}


def _resource(name, kind="Deployment"):
    return {"kind": kind, "metadata": {"name": name}}


def _coordinator(applier=None, **kwargs):
    applier = applier or MemoryApplier()
    executor = PhaseExecutor(applier, timeout=10, poll_interval=1, sleep=lambda _s: None)
    return LifecycleCoordinator(executor, **kwargs), applier


class CallLog:
    """Records the order stages are invoked in."""

    def __init__(self, pre_ok=True, main_error=None, post_ok=True):
        self.calls = []
        self._pre_ok = pre_ok
        self._main_error = main_error
        self._post_ok = post_ok

    def _phase(self, phase, ok):
        hook = Hook(kind="Job", name="h", phases=frozenset({phase}), manifest={})
        if ok:
            return PhaseResult(phase=phase, success=True)
        cause = HookFailedError(hook.identity, "boom")
        return PhaseResult(
            phase=phase,
            success=False,
            failed_hook=hook,
            reason="boom",
            error=PhaseAbortedError(phase.value, cause),
        )

    def pre(self):
        self.calls.append("pre")
        return self._phase(HookPhase.PRE_INSTALL, self._pre_ok)

    def main(self):
        self.calls.append("main")
        if self._main_error:
            raise self._main_error

    def post(self):
        self.calls.append("post")
        return self._phase(HookPhase.POST_INSTALL, self._post_ok)


class TestPerform:
    """Stage ordering for explicit stage callables."""

    def test_order(self):
        log = CallLog()
        coordinator, _ = _coordinator()
        result = coordinator.perform(Operation.INSTALL, log.pre, log.main, log.post)

        assert result.success
        assert log.calls == ["pre", "main", "post"]
        assert [r.phase for r in result.phase_results] == [HookPhase.PRE_INSTALL, HookPhase.POST_INSTALL]

    def test_pre_failure_stops_everything(self):
        log = CallLog(pre_ok=False)
        coordinator, _ = _coordinator()
        result = coordinator.perform("install", log.pre, log.main, log.post)

        assert not result.success
        assert log.calls.count("pre") == 1
        assert log.calls.count("main") == 0
        assert log.calls.count("post") == 0
        assert result.stage == "pre"
        assert result.failed_phase is HookPhase.PRE_INSTALL
        assert result.failed_hook.name == "h"
        assert result.reason == "boom"

    def test_main_failure_skips_post(self):
        log = CallLog(main_error=RuntimeError("apply failed"))
        coordinator, _ = _coordinator()
        result = coordinator.perform("install", log.pre, log.main, log.post)

        assert not result.success
        assert log.calls == ["pre", "main"]
        assert result.stage == "main"
        assert isinstance(result.error, MainActionError)
        assert result.reason == "apply failed"
        assert result.failed_phase is None

    def test_post_failure(self):
        log = CallLog(post_ok=False)
        coordinator, _ = _coordinator()
        result = coordinator.perform("install", log.pre, log.main, log.post)

        assert not result.success
        assert log.calls == ["pre", "main", "post"]
        assert result.stage == "post"
        assert result.failed_phase is HookPhase.POST_INSTALL

    def test_unknown_operation(self):
        log = CallLog()
        coordinator, _ = _coordinator()
        with pytest.raises(UnknownOperationError):
            coordinator.perform("deploy", log.pre, log.main, log.post)
        assert log.calls == []


class TestRaiseForFailure:
    """Conversion of a failed result into one error."""

    def test_success_does_not_raise(self):
        log = CallLog()
        coordinator, _ = _coordinator()
        coordinator.perform("install", log.pre, log.main, log.post).raise_for_failure()

    def test_failure_names_operation_phase_and_hook(self):
        log = CallLog(pre_ok=False)
        coordinator, _ = _coordinator()
        result = coordinator.perform("install", log.pre, log.main, log.post)

        with pytest.raises(OperationFailedError) as exc:
            result.raise_for_failure()
        err = exc.value
        assert err.operation == "install"
        assert err.phase == "pre-install"
        assert err.hook == "Job/h"
        assert "boom" in str(err)
        assert isinstance(err.__cause__, PhaseAbortedError)


class TestRunRelease:
    """Operations driven from flattened manifests."""

    def test_install_flow(self):
        coordinator, applier = _coordinator()
        seen = []

        def main(resources):
            seen.append([r["metadata"]["name"] for r in resources])
            for r in resources:
                applier.submit(r)

        manifests = [
            _hook("pre", "pre-install"),
            _resource("web"),
            _hook("post", "post-install", kind="ConfigMap"),
            _hook("upgrade-only", "pre-upgrade"),
        ]
        result = coordinator.run_release("install", manifests, main)

        assert result.success
        assert seen == [["web"]]
        assert applier.submitted_names == ["pre", "web", "post"]

    def test_pre_hook_failure_blocks_main(self):
        applier = MemoryApplier().script("pre", [FAILED])
        coordinator, _ = _coordinator(applier)
        calls = []

        result = coordinator.run_release(
            "upgrade",
            [_hook("pre", "pre-upgrade"), _hook("post", "post-upgrade"), _resource("web")],
            calls.append,
        )

        assert not result.success
        assert calls == []
        assert result.failed_phase is HookPhase.PRE_UPGRADE
        assert result.failed_hook.name == "pre"
        assert applier.submitted_names == ["pre"]

    def test_no_hooks_still_runs_main(self):
        coordinator, applier = _coordinator()
        calls = []
        result = coordinator.run_release("delete", [_resource("web")], calls.append)

        assert result.success
        assert len(calls) == 1
        assert applier.submitted == []

    def test_strict_policy(self):
        coordinator, _ = _coordinator(strict_phases=True)
        with pytest.raises(UnrecognizedPhaseError):
            coordinator.run_release("install", [_hook("x", "pre-install,bogus")], lambda _r: None)

    def test_permissive_policy(self):
        coordinator, applier = _coordinator()
        result = coordinator.run_release("install", [_hook("x", "pre-install,bogus")], lambda _r: None)
        assert result.success
        assert applier.submitted_names == ["x"]

    def test_api_server_rejection_fails_pre_phase(self):
        def handler(request):
            return httpx.Response(403, json=["forbidden"])

        client = httpx.Client(transport=httpx.MockTransport(handler))
        coordinator, _ = _coordinator(KubeApplier("https://api.example:6443", client=client))
        calls = []

        result = coordinator.run_release(
            "upgrade", [_hook("migrate", "pre-upgrade"), _resource("web")], calls.append,
        )

        assert not result.success
        assert calls == []
        assert result.stage == "pre"
        assert result.failed_hook.name == "migrate"
        assert "HTTP 403" in result.reason
