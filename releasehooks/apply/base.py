"""Base interface for apply mechanisms (the target system's create/get calls)."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class ResourceHandle:
    """Identifies a submitted resource for later polling."""

    kind: str
    name: str
    namespace: Optional[str] = None
    path: str = ""


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a create/update call."""

    accepted: bool
    handle: Optional[ResourceHandle] = None
    error: str = ""


class BaseApplier(ABC):
    """Abstract base class for apply mechanisms.

    The orchestrator makes no assumption about the protocol behind these
    calls. ``poll`` may raise; the caller treats that as a hook failure.
    """

    name = "base"

    @abstractmethod
    def submit(self, manifest: Mapping[str, Any]) -> SubmitResult:
        """Create (or update) the resource described by ``manifest``."""
        pass

    @abstractmethod
    def poll(self, handle: ResourceHandle) -> dict:
        """Return the currently observed object for ``handle``."""
        pass

    @abstractmethod
    def remove(self, manifest: Mapping[str, Any]) -> None:
        """Delete the resource described by ``manifest``."""
        pass

    def close(self) -> None:
        """Release any client resources."""
        pass
