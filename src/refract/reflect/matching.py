"""Overload resolution.

Three lookups are provided:

- exact mode (``get_accessible_method``): a public method with exactly the
  given parameter types, made callable via accessibility resolution
- matching mode (``get_matching_accessible_method``): the best loosely
  compatible public method, ranked by fit distance
- hierarchy-search mode (``get_matching_method``): the best strictly
  compatible method declared on the type or a superclass, regardless of
  visibility, failing loudly on ambiguity

``None`` in an argument signature stands for a null argument and matches any
reference type.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from refract.core.errors import AmbiguousMethodError, InvalidArgumentError
from refract.reflect.accessibility import AccessibleMethod, resolve_accessible
from refract.types.compat import (
    all_superclasses,
    is_assignable,
    is_assignable_all,
    primitive_to_wrapper,
)
from refract.types.descriptors import MethodDescriptor, TypeDescriptor
from refract.types.members import public_method, public_methods

logger = logging.getLogger(__name__)

Signature = Sequence[TypeDescriptor | None]


def _require(cls: TypeDescriptor | None, method_name: str | None) -> None:
    if cls is None:
        raise InvalidArgumentError("type must not be None")
    if not method_name:
        raise InvalidArgumentError("method name must not be empty")


def distance(
    from_types: Signature, to_types: Sequence[TypeDescriptor], autoboxing: bool = True
) -> int:
    """Fit distance between actual and formal parameter types.

    Each position costs 0 when the types are identical or the actual is null,
    1 when strictly assignable and 2 when assignable only through boxing.

    Returns:
        The summed cost, or -1 if ``from_types`` is not assignable to ``to_types``.
    """
    if not is_assignable_all(from_types, to_types, autoboxing):
        return -1
    total = 0
    for actual, formal in zip(from_types, to_types):
        if actual is None or actual is formal:
            continue
        total += 1 if is_assignable(actual, formal, autoboxing=False) else 2
    return total


def is_matching_method(method: MethodDescriptor, arg_types: Signature) -> bool:
    """Loose compatibility, expanding a trailing variadic parameter."""
    formals = method.parameter_types
    if is_assignable_all(arg_types, formals, True):
        return True
    if not method.is_varargs:
        return False

    fixed = len(formals) - 1
    if len(arg_types) < fixed:
        return False
    if not all(is_assignable(a, f, True) for a, f in zip(arg_types[:fixed], formals[:fixed])):
        return False
    component = formals[-1].component_type
    return all(is_assignable(a, component, True) for a in arg_types[fixed:])


def method_distance(arg_types: Signature, method: MethodDescriptor) -> int:
    """Fit distance of ``arg_types`` against ``method``, expanding varargs when needed."""
    formals = method.parameter_types
    if method.is_varargs and not (
        len(arg_types) == len(formals) and is_assignable(arg_types[-1], formals[-1], True)
    ):
        component = formals[-1].component_type
        formals = formals[:-1] + (component,) * (len(arg_types) - len(formals) + 1)
    return distance(arg_types, formals)


def get_accessible_method(
    cls: TypeDescriptor, method_name: str, *parameter_types: TypeDescriptor
) -> MethodDescriptor | None:
    """Public method with exactly ``parameter_types``, made callable.

    Raises:
        InvalidArgumentError: If ``cls`` is None or ``method_name`` is empty.
    """
    _require(cls, method_name)
    method = public_method(cls, method_name, parameter_types)
    if method is None:
        return None
    resolved = resolve_accessible(method)
    return None if resolved is None else resolved.method


def find_matching_accessible_method(
    cls: TypeDescriptor, method_name: str, *arg_types: TypeDescriptor | None
) -> AccessibleMethod | None:
    """Like ``get_matching_accessible_method`` but keeps the access override token."""
    _require(cls, method_name)

    exact = public_method(cls, method_name, arg_types)
    if exact is not None:
        resolved = resolve_accessible(exact, allow_override=True)
        if resolved is not None:
            logger.debug("Exact match for %s: %s", method_name, exact.signature_text)
            return resolved

    candidates = sorted(
        (
            m
            for m in public_methods(cls)
            if m.name == method_name and is_matching_method(m, arg_types)
        ),
        key=lambda m: m.signature_text,
    )
    logger.debug("%d candidates for %s on %s", len(candidates), method_name, cls.name)

    best: AccessibleMethod | None = None
    best_distance = -1
    for candidate in candidates:
        accessible = resolve_accessible(candidate)
        if accessible is None:
            continue
        cost = method_distance(arg_types, accessible.method)
        if cost < 0:
            continue
        if best is None or cost < best_distance:
            best, best_distance = accessible, cost

    if best is None:
        return None
    if best.method.is_varargs and _vetoed(best.method, arg_types):
        logger.debug("Varargs candidate %s rejected", best.method.signature_text)
        return None
    return best


def get_matching_accessible_method(
    cls: TypeDescriptor, method_name: str, *arg_types: TypeDescriptor | None
) -> MethodDescriptor | None:
    """Best accessible method compatible with ``arg_types``.

    Args:
        cls: Type to search, including inherited public methods.
        method_name: Method name.
        *arg_types: Actual argument types; None matches any reference type.

    Returns:
        The winning method, or None if nothing matches.

    Raises:
        InvalidArgumentError: If ``cls`` is None or ``method_name`` is empty.
    """
    found = find_matching_accessible_method(cls, method_name, *arg_types)
    return None if found is None else found.method


def _vetoed(method: MethodDescriptor, arg_types: Signature) -> bool:
    # Only the immediate superclass of the last argument is consulted.
    formals = method.parameter_types
    if not arg_types:
        return False
    last = arg_types[-1]
    if last is None or last.superclass is None:
        return False
    component = primitive_to_wrapper(formals[-1].component_type)
    if component is None:
        return False
    return component.name not in (last.name, last.superclass.name)


def get_matching_method(
    cls: TypeDescriptor, method_name: str, *parameter_types: TypeDescriptor | None
) -> MethodDescriptor | None:
    """Best strictly compatible method on ``cls`` or a superclass, ignoring access.

    Args:
        cls: Type to search; its interfaces are not consulted.
        method_name: Method name.
        *parameter_types: Parameter types to match.

    Returns:
        An exact match if one exists, otherwise the single closest match, or
        None if nothing is assignable.

    Raises:
        InvalidArgumentError: If ``cls`` is None or ``method_name`` is empty.
        AmbiguousMethodError: If the closest matches come from different
            declaring types.
    """
    _require(cls, method_name)
    wanted = tuple(parameter_types)

    methods = [
        m
        for owner in [cls, *all_superclasses(cls)]
        for m in owner.declared_methods()
        if m.name == method_name
    ]
    for method in methods:
        if method.parameter_types == wanted:
            return method

    buckets: dict[int, list[MethodDescriptor]] = {}
    for method in methods:
        cost = distance(wanted, method.parameter_types, autoboxing=False)
        if cost >= 0:
            buckets.setdefault(cost, []).append(method)
    if not buckets:
        return None

    finalists = buckets[min(buckets)]
    if len(finalists) == 1 or finalists[0].declaring_type is finalists[1].declaring_type:
        return finalists[0]
    raise AmbiguousMethodError(method_name, cls, wanted, finalists)
