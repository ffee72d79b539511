"""Accessibility resolution.

A public method declared on a non-public type cannot be called directly. The
resolver looks for an equivalent declaration that can be called: one on a
public interface implemented along the superclass chain, or on the first
public superclass. Failing that, callers may ask for an ``AccessOverride``
token that authorises calling the original method anyway.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from refract.core.errors import IllegalAccessError, InvalidArgumentError, InvocationError
from refract.types.descriptors import MethodDescriptor, TypeDescriptor
from refract.types.members import declared_method, public_method

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessOverride:
    """Capability to call ``method`` even though its declaring type is not public.

    Tokens hold no global state; creating one twice for the same method is
    harmless.
    """

    method: MethodDescriptor


@dataclass(frozen=True)
class AccessibleMethod:
    """A method that may be invoked, together with the override it needs (if any)."""

    method: MethodDescriptor
    override: AccessOverride | None = None

    @property
    def overridden(self) -> bool:
        return self.override is not None

    def invoke(self, target: Any, *args: Any) -> Any:
        """Call the method's implementation as ``implementation(target, *args)``.

        Raises:
            IllegalAccessError: If the method is not callable and no matching
                override token was supplied.
            InvocationError: If the method has no implementation or the
                argument count is wrong.
        """
        method = self.method
        if self.override is None:
            if not is_directly_callable(method):
                raise IllegalAccessError(f"{method.signature_text} is not accessible")
        elif self.override.method is not method:
            raise IllegalAccessError(
                f"Override for {self.override.method.signature_text} "
                f"does not cover {method.signature_text}"
            )
        if method.implementation is None:
            raise InvocationError(f"{method.signature_text} has no implementation")
        if len(args) != len(method.parameter_types):
            raise InvocationError(
                f"{method.signature_text} expects {len(method.parameter_types)} "
                f"arguments, got {len(args)}"
            )
        return method.implementation(target, *args)


def grant_access(method: MethodDescriptor) -> AccessOverride:
    """Issue an override token for ``method`` regardless of its visibility."""
    if method is None:
        raise InvalidArgumentError("method must not be None")
    return AccessOverride(method)


def is_directly_callable(method: MethodDescriptor) -> bool:
    """Public method on a public declaring type."""
    return method.is_public and method.declaring_type.is_public


def resolve_accessible(
    method: MethodDescriptor, *, allow_override: bool = False
) -> AccessibleMethod | None:
    """Find a callable equivalent of ``method``.

    Args:
        method: The method to resolve.
        allow_override: When no callable equivalent exists, return ``method``
            itself with an ``AccessOverride`` token instead of None.

    Returns:
        The resolved method, or None if ``method`` is not public or no callable
        equivalent exists.

    Raises:
        InvalidArgumentError: If ``method`` is None.
    """
    if method is None:
        raise InvalidArgumentError("method must not be None")
    if not method.is_public:
        return None

    owner = method.declaring_type
    if owner.is_public:
        return AccessibleMethod(method)

    found = _from_interface_nest(owner, method.name, method.parameter_types)
    if found is None:
        found = _from_superclass(owner, method.name, method.parameter_types)
    if found is not None:
        logger.debug("Resolved %s via %s", method.signature_text, found.declaring_type.name)
        return AccessibleMethod(found)

    if allow_override:
        logger.debug("Granting access override for %s", method.signature_text)
        return AccessibleMethod(method, AccessOverride(method))
    return None


def get_accessible(method: MethodDescriptor) -> MethodDescriptor | None:
    """Callable equivalent of ``method``, without access overrides."""
    resolved = resolve_accessible(method)
    return None if resolved is None else resolved.method


def _from_interface_nest(
    cls: TypeDescriptor, name: str, parameter_types: tuple[TypeDescriptor, ...]
) -> MethodDescriptor | None:
    current: TypeDescriptor | None = cls
    while current is not None:
        for iface in current.interfaces:
            if not iface.is_public:
                continue
            found = declared_method(iface, name, parameter_types)
            if found is None:
                found = _from_interface_nest(iface, name, parameter_types)
            if found is not None:
                return found
        current = current.superclass
    return None


def _from_superclass(
    cls: TypeDescriptor, name: str, parameter_types: tuple[TypeDescriptor, ...]
) -> MethodDescriptor | None:
    parent = cls.superclass
    while parent is not None:
        if parent.is_public:
            return public_method(parent, name, parameter_types)
        parent = parent.superclass
    return None
