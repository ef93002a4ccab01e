"""Apply mechanisms: how hook and release resources reach the target system."""

from .base import BaseApplier, ResourceHandle, SubmitResult
from .registry import register_applier, get_applier_class, available_appliers
from .memory import MemoryApplier
from .kube import KubeApplier

__all__ = [
    "BaseApplier",
    "ResourceHandle",
    "SubmitResult",
    "register_applier",
    "get_applier_class",
    "available_appliers",
    "MemoryApplier",
    "KubeApplier",
]
