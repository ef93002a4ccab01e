"""Self-registering applier registry.

Appliers register themselves via the @register_applier decorator.
Importing ``releasehooks.apply`` imports every built-in applier module,
which triggers the decorators and populates the registry.
"""

from typing import Dict, Type

from .base import BaseApplier

_REGISTRY: Dict[str, Type[BaseApplier]] = {}


def register_applier(name: str):
    """Decorator that registers an applier class under the given name.

    Usage:
        @register_applier("memory")
        class MemoryApplier(BaseApplier):
            ...
    """
    def decorator(cls: Type[BaseApplier]):
        if not issubclass(cls, BaseApplier):
            raise TypeError(f"{cls.__name__} must be a subclass of BaseApplier")
        cls.name = name
        _REGISTRY[name] = cls
        return cls
    return decorator


def get_applier_class(name: str) -> Type[BaseApplier]:
    """Look up an applier class. Raises KeyError if not registered."""
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Applier '{name}' not registered. Available: {sorted(_REGISTRY)}"
        ) from None


def available_appliers() -> list[str]:
    return sorted(_REGISTRY)
