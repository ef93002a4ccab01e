"""Read hook bindings from a rendered manifest's metadata.

The annotation value is a comma-separated list of phase identifiers::

    metadata:
      annotations:
        helm.sh/hook: post-install,post-upgrade

Entries are trimmed and matched case-sensitively. Unknown entries are
skipped with a warning unless ``strict`` is set, in which case the first
one raises ``UnrecognizedPhaseError``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..errors import UnrecognizedPhaseError
from .phases import HookPhase, is_phase, parse_phase

logger = logging.getLogger(__name__)

HOOK_ANNOTATION = "helm.sh/hook"
UNNAMED = "<unnamed>"


@dataclass(frozen=True)
class PhaseExtraction:
    """Phases found on one manifest, plus entries that were skipped."""

    phases: frozenset[HookPhase] = frozenset()
    unrecognized: tuple[str, ...] = ()


def _metadata(manifest: Mapping[str, Any]) -> Mapping[str, Any]:
    metadata = manifest.get("metadata")
    return metadata if isinstance(metadata, Mapping) else {}


def manifest_kind(manifest: Mapping[str, Any]) -> str:
    return str(manifest.get("kind") or "")


def manifest_name(manifest: Mapping[str, Any]) -> str:
    return str(_metadata(manifest).get("name") or UNNAMED)


def describe_manifest(manifest: Mapping[str, Any]) -> str:
    """Short ``Kind/name`` identity used in logs and errors."""
    kind = manifest_kind(manifest) or "Unknown"
    return f"{kind}/{manifest_name(manifest)}"


def extract_phases(
    manifest: Mapping[str, Any],
    strict: bool = False,
    annotation: str = HOOK_ANNOTATION,
) -> PhaseExtraction:
    """Return the phases a manifest is bound to."""
    annotations = _metadata(manifest).get("annotations")
    if not isinstance(annotations, Mapping):
        return PhaseExtraction()

    raw = annotations.get(annotation)
    if not raw:
        return PhaseExtraction()

    phases = set()
    unrecognized = []
    for entry in str(raw).split(","):
        value = entry.strip()
        if not value:
            continue
        if is_phase(value):
            phases.add(parse_phase(value))
            continue
        if strict:
            raise UnrecognizedPhaseError(value, describe_manifest(manifest))
        unrecognized.append(value)

    if unrecognized:
        logger.warning(
            "Ignoring unrecognized hook phase(s) %s on %s",
            ", ".join(unrecognized), describe_manifest(manifest),
        )

    return PhaseExtraction(phases=frozenset(phases), unrecognized=tuple(unrecognized))


def format_phases(phases: Iterable[HookPhase]) -> str:
    """Serialize phases into an annotation value."""
    return ",".join(sorted(parse_phase(p).value for p in phases))
