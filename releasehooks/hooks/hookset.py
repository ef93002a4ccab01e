"""Partition rendered manifests into hooks (per phase) and ordinary resources."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from .annotations import (
    HOOK_ANNOTATION,
    extract_phases,
    format_phases,
    manifest_kind,
    manifest_name,
)
from .phases import HookPhase, parse_phase


@dataclass(frozen=True)
class Hook:
    """A rendered manifest bound to one or more lifecycle phases."""

    kind: str
    name: str
    phases: frozenset[HookPhase]
    manifest: Mapping[str, Any] = field(compare=False, hash=False)

    @property
    def identity(self) -> str:
        return f"{self.kind or 'Unknown'}/{self.name}"


class HookSet:
    """Hooks indexed by phase.

    Order within a phase is the order manifests were discovered in; it is
    not a promise about execution order.
    """

    def __init__(self, buckets: Optional[Mapping[HookPhase, Iterable[Hook]]] = None):
        self._buckets: dict[HookPhase, tuple[Hook, ...]] = {
            parse_phase(phase): tuple(hooks)
            for phase, hooks in (buckets or {}).items()
            if hooks
        }

    def hooks_for(self, phase: HookPhase) -> tuple[Hook, ...]:
        return self._buckets.get(parse_phase(phase), ())

    def phases(self) -> tuple[HookPhase, ...]:
        """Phases with at least one hook, in declaration order of HookPhase."""
        return tuple(p for p in HookPhase if p in self._buckets)

    def hooks(self) -> tuple[Hook, ...]:
        """Distinct hooks across all phases, in first-seen order."""
        seen: dict[int, Hook] = {}
        for phase in self.phases():
            for hook in self._buckets[phase]:
                seen.setdefault(id(hook), hook)
        return tuple(seen.values())

    def __len__(self) -> int:
        return len(self.hooks())

    def __bool__(self) -> bool:
        return bool(self._buckets)

    def describe(self) -> list[dict]:
        """Return a summary of every phase bucket for display."""
        return [
            {
                "phase": phase.value,
                "hooks": [
                    {
                        "kind": h.kind,
                        "name": h.name,
                        "phases": format_phases(h.phases),
                    }
                    for h in self._buckets[phase]
                ],
            }
            for phase in self.phases()
        ]


def assemble_hook_set(
    manifests: Iterable[Any],
    strict: bool = False,
    annotation: str = HOOK_ANNOTATION,
) -> tuple[HookSet, list[Mapping[str, Any]]]:
    """Split flattened manifests into a HookSet and ordinary resources.

    ``manifests`` must already include every sub-package's manifests; they
    are taken as-is with no filtering or reordering by origin. Non-mapping
    documents (such as empty YAML documents) are skipped.
    """
    buckets: dict[HookPhase, list[Hook]] = {}
    ordinary: list[Mapping[str, Any]] = []

    for manifest in manifests:
        if not isinstance(manifest, Mapping):
            continue

        extraction = extract_phases(manifest, strict=strict, annotation=annotation)
        if not extraction.phases:
            ordinary.append(manifest)
            continue

        hook = Hook(
            kind=manifest_kind(manifest),
            name=manifest_name(manifest),
            phases=extraction.phases,
            manifest=manifest,
        )
        for phase in HookPhase:
            if phase in hook.phases:
                buckets.setdefault(phase, []).append(hook)

    return HookSet(buckets), ordinary
