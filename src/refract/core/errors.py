"""Error types raised by refract.

"Not found" outcomes are reported as ``None`` return values, never as
exceptions. Everything here signals a condition the caller must handle.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from refract.types.descriptors import MethodDescriptor, TypeDescriptor


class RefractError(Exception):
    """Base class for all refract errors."""


class InvalidArgumentError(RefractError, ValueError):
    """Raised when a required argument is missing or empty."""


class AmbiguousMethodError(RefractError):
    """Raised when hierarchy-search resolution finds equally good candidates
    declared on different types."""

    def __init__(
        self,
        method_name: str,
        owner: TypeDescriptor,
        parameter_types: Sequence[TypeDescriptor | None],
        candidates: Sequence[MethodDescriptor],
    ) -> None:
        self.method_name = method_name
        self.owner = owner
        self.parameter_types = tuple(parameter_types)
        self.candidates = list(candidates)
        params = ",".join("null" if p is None else p.name for p in self.parameter_types)
        listing = ",".join(c.signature_text for c in self.candidates)
        super().__init__(
            f"Found multiple candidates for method {method_name}({params}) "
            f"on class {owner.name} : [{listing}]"
        )


class RegistryError(RefractError):
    """Raised when a type cannot be registered or looked up."""

    def __init__(self, message: str, errors: Sequence[object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])


class TypeExpressionError(RefractError):
    """Raised when a type expression cannot be parsed."""

    def __init__(self, expression: str, position: int, reason: str) -> None:
        self.expression = expression
        self.position = position
        self.reason = reason
        super().__init__(f"Invalid type expression {expression!r} at {position}: {reason}")


class NoSuchMethodError(RefractError, LookupError):
    """Raised by the invoker when no method matches the call."""


class IllegalAccessError(RefractError):
    """Raised when invoking a method that is not accessible."""


class InvocationError(RefractError):
    """Raised when a resolved method has no implementation to call."""
