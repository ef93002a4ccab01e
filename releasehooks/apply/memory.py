"""In-memory apply mechanism for dry runs and tests.

Every submission is recorded. Observed states can be scripted per
resource name; ``poll`` walks the script one step per call and then keeps
returning the last state.
"""

from typing import Any, Iterable, Mapping

from ..hooks.annotations import manifest_kind, manifest_name
from .base import BaseApplier, ResourceHandle, SubmitResult
from .registry import register_applier

_COMPLETE = {"status": {"conditions": [{"type": "Complete", "status": "True"}]}}


@register_applier("memory")
class MemoryApplier(BaseApplier):
    """Applier that keeps everything in process."""

    def __init__(self, namespace: str = "default"):
        self.namespace = namespace
        self.submitted: list[Mapping[str, Any]] = []
        self.removed: list[Mapping[str, Any]] = []
        self.polls: list[str] = []
        self._scripts: dict[str, list[dict]] = {}
        self._rejections: dict[str, str] = {}

    def script(self, name: str, states: Iterable[dict]) -> "MemoryApplier":
        """Set the sequence of observed states ``poll`` returns for ``name``."""
        self._scripts[name] = list(states)
        return self

    def reject(self, name: str, error: str = "rejected") -> "MemoryApplier":
        """Make submissions of ``name`` fail with ``error``."""
        self._rejections[name] = error
        return self

    @property
    def submitted_names(self) -> list[str]:
        return [manifest_name(m) for m in self.submitted]

    def submit(self, manifest: Mapping[str, Any]) -> SubmitResult:
        name = manifest_name(manifest)
        if name in self._rejections:
            return SubmitResult(accepted=False, error=self._rejections[name])

        self.submitted.append(manifest)
        handle = ResourceHandle(
            kind=manifest_kind(manifest),
            name=name,
            namespace=self.namespace,
        )
        return SubmitResult(accepted=True, handle=handle)

    def poll(self, handle: ResourceHandle) -> dict:
        self.polls.append(handle.name)
        script = self._scripts.get(handle.name)
        if not script:
            # Unscripted resources finish on the first poll.
            return dict(_COMPLETE)
        if len(script) > 1:
            return script.pop(0)
        return script[0]

    def remove(self, manifest: Mapping[str, Any]) -> None:
        self.removed.append(manifest)
