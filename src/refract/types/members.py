"""Method lookup over a type and its ancestors."""

from __future__ import annotations

from collections.abc import Sequence

from refract.types.compat import all_interfaces, all_superclasses
from refract.types.descriptors import MethodDescriptor, TypeDescriptor


def declared_method(
    cls: TypeDescriptor, name: str, parameter_types: Sequence[TypeDescriptor | None]
) -> MethodDescriptor | None:
    """Method declared directly on ``cls`` with exactly these parameter types."""
    wanted = tuple(parameter_types)
    for method in cls.declared_methods():
        if method.name == name and method.parameter_types == wanted:
            return method
    return None


def public_methods(cls: TypeDescriptor) -> list[MethodDescriptor]:
    """Public methods of ``cls``, declared or inherited.

    Declarations on ``cls`` come first, then superclasses nearest first, then
    interfaces. A declaration hidden by a more derived one with the same name
    and parameter types is left out.
    """
    result: list[MethodDescriptor] = []
    seen: set[tuple[str, tuple[TypeDescriptor, ...]]] = set()
    for owner in [cls, *all_superclasses(cls), *all_interfaces(cls)]:
        for method in owner.declared_methods():
            if not method.is_public:
                continue
            key = (method.name, method.parameter_types)
            if key in seen:
                continue
            seen.add(key)
            result.append(method)
    return result


def public_method(
    cls: TypeDescriptor, name: str, parameter_types: Sequence[TypeDescriptor | None]
) -> MethodDescriptor | None:
    """Public method of ``cls`` (declared or inherited) with exactly these parameter types."""
    wanted = tuple(parameter_types)
    for method in public_methods(cls):
        if method.name == name and method.parameter_types == wanted:
            return method
    return None
