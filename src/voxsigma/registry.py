"""Self-registering registry of VoxSigma methods.

Usage::

    from voxsigma.registry import register_method, MethodRegistry

    @register_method("vrxs_trans")
    class Trans(Method):
        ...

    definitions = MethodRegistry.definitions_for("vrxs_trans")
"""

from typing import Any, ClassVar

from voxsigma.parameters import ParameterCollection

_EMPTY = ParameterCollection([])


class MethodRegistry:
    """Global lookup of method builders by engine method name."""

    _methods: ClassVar[dict[str, type]] = {}

    @classmethod
    def register(cls, name: str, method_cls: type) -> None:
        cls._methods[name] = method_cls

    @classmethod
    def get(cls, name: str) -> type:
        if name not in cls._methods:
            raise KeyError(f"Unknown method: {name!r}. Available: {cls.available()}")
        return cls._methods[name]

    @classmethod
    def available(cls) -> list[str]:
        return sorted(cls._methods.keys())

    @classmethod
    def definitions_for(cls, name: str) -> ParameterCollection:
        """Parameter definitions of a method, or an empty collection if unknown."""
        method_cls = cls._methods.get(name)
        if method_cls is None:
            return _EMPTY
        return method_cls.parameters()


def register_method(name: str) -> Any:
    """Class decorator that registers a method builder under *name*."""

    def decorator(cls: type) -> type:
        cls.method_name = name
        MethodRegistry.register(name, cls)
        return cls

    return decorator
