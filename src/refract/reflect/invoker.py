"""Invoke methods on Python values through resolved method descriptors.

Argument types are taken from ``TypeRegistry.type_of`` unless given
explicitly. Each function resolves a method, packs variadic arguments where
the lookup mode allows it and calls the method's implementation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from refract.core.errors import InvalidArgumentError, InvocationError, NoSuchMethodError
from refract.reflect.accessibility import AccessibleMethod, grant_access, resolve_accessible
from refract.reflect.matching import find_matching_accessible_method, get_matching_method
from refract.reflect.varargs import to_varargs
from refract.types.descriptors import TypeDescriptor
from refract.types.members import public_method
from refract.types.registry import TypeRegistry

logger = logging.getLogger(__name__)

TypeRef = TypeDescriptor | str


def _resolve_type(registry: TypeRegistry, cls: TypeRef | None) -> TypeDescriptor:
    if cls is None:
        raise InvalidArgumentError("type must not be None")
    return registry.get(cls) if isinstance(cls, str) else cls


def _argument_types(
    registry: TypeRegistry,
    args: Sequence[Any],
    param_types: Sequence[TypeRef | None] | None,
) -> tuple[TypeDescriptor | None, ...]:
    if param_types is None:
        return registry.types_of(args)
    if len(param_types) != len(args):
        raise InvalidArgumentError(
            f"{len(param_types)} parameter types given for {len(args)} arguments"
        )
    return tuple(
        registry.get(p) if isinstance(p, str) else p for p in param_types
    )


def _not_found(prefix: str, method_name: str, cls: TypeDescriptor, target: str) -> NoSuchMethodError:
    return NoSuchMethodError(f"{prefix}{method_name}() on {target}: {cls.name}")


def _exact(cls: TypeDescriptor, method_name: str, types: Sequence[TypeDescriptor | None]) -> AccessibleMethod | None:
    method = public_method(cls, method_name, types)
    return None if method is None else resolve_accessible(method)


def invoke_method(
    registry: TypeRegistry,
    target: Any,
    method_name: str,
    *args: Any,
    force_access: bool = False,
    param_types: Sequence[TypeRef | None] | None = None,
) -> Any:
    """Call the method of ``target`` that best matches ``args``.

    Args:
        registry: Registry mapping Python values to types.
        target: Receiver; its runtime type is searched.
        method_name: Method name.
        *args: Arguments; trailing variadic arguments are packed automatically.
        force_access: Search declared methods of every visibility on the
            receiver's type and superclasses, and call the winner with an
            access override.
        param_types: Argument types to match instead of the runtime types.

    Returns:
        Whatever the method's implementation returns.

    Raises:
        NoSuchMethodError: If no method matches.
        AmbiguousMethodError: If ``force_access`` is set and the match is ambiguous.
        IllegalAccessError: If the resolved method may not be called.
        InvocationError: If the method has no implementation.
    """
    if target is None:
        raise InvalidArgumentError("target must not be None")
    cls = registry.type_of(target)
    types = _argument_types(registry, args, param_types)

    if force_access:
        method = get_matching_method(cls, method_name, *types)
        if method is None:
            raise _not_found("No such method: ", method_name, cls, "object")
        accessible = AccessibleMethod(method, grant_access(method))
    else:
        accessible = find_matching_accessible_method(cls, method_name, *types)
        if accessible is None:
            raise _not_found("No such accessible method: ", method_name, cls, "object")

    logger.debug("Invoking %s", accessible.method.signature_text)
    return accessible.invoke(target, *to_varargs(accessible.method, args))


def invoke_exact_method(
    registry: TypeRegistry,
    target: Any,
    method_name: str,
    *args: Any,
    param_types: Sequence[TypeRef | None] | None = None,
) -> Any:
    """Call the public method of ``target`` whose parameter types are exactly the argument types.

    No widening, boxing or variadic packing is applied.

    Raises:
        NoSuchMethodError: If no method has exactly these parameter types.
    """
    if target is None:
        raise InvalidArgumentError("target must not be None")
    cls = registry.type_of(target)
    accessible = _exact(cls, method_name, _argument_types(registry, args, param_types))
    if accessible is None:
        raise _not_found("No such accessible method: ", method_name, cls, "object")
    return accessible.invoke(target, *args)


def invoke_static_method(
    registry: TypeRegistry,
    cls: TypeRef,
    method_name: str,
    *args: Any,
    param_types: Sequence[TypeRef | None] | None = None,
) -> Any:
    """Call the static method of ``cls`` that best matches ``args``.

    Raises:
        NoSuchMethodError: If no method matches.
        InvocationError: If the resolved method is not static.
    """
    owner = _resolve_type(registry, cls)
    types = _argument_types(registry, args, param_types)
    accessible = find_matching_accessible_method(owner, method_name, *types)
    if accessible is None:
        raise _not_found("No such accessible method: ", method_name, owner, "class")
    _require_static(accessible)
    return accessible.invoke(None, *to_varargs(accessible.method, args))


def invoke_exact_static_method(
    registry: TypeRegistry,
    cls: TypeRef,
    method_name: str,
    *args: Any,
    param_types: Sequence[TypeRef | None] | None = None,
) -> Any:
    """Call the static method of ``cls`` whose parameter types are exactly the argument types.

    Raises:
        NoSuchMethodError: If no method has exactly these parameter types.
        InvocationError: If the resolved method is not static.
    """
    owner = _resolve_type(registry, cls)
    accessible = _exact(owner, method_name, _argument_types(registry, args, param_types))
    if accessible is None:
        raise _not_found("No such accessible method: ", method_name, owner, "class")
    _require_static(accessible)
    return accessible.invoke(None, *args)


def _require_static(accessible: AccessibleMethod) -> None:
    if not accessible.method.is_static:
        raise InvocationError(f"{accessible.method.signature_text} is not static")
