"""Service methods: connectivity check and async session status."""

from typing import Self

from voxsigma.methods.base import Method
from voxsigma.parameters import Parameter
from voxsigma.registry import register_method


@register_method("hello")
class Hello(Method):
    """Check that the service is reachable and the credentials are valid."""

    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        return []


@register_method("status")
class Status(Method):
    """Status of an async session."""

    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        return [*super().define_parameters(), Parameter("session", "", "session")]

    def session(self, session_id: str) -> Self:
        return self.set("session", session_id)
