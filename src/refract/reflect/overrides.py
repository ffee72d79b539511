"""Override chains.

The override chain of a method lists every declaration, from most to least
derived, that represents the same method across the declaring type's
ancestors. Ancestor methods are found with matching mode and accepted when
their erased parameters are identical, or when they become identical to the
original's after substituting the type arguments bound along the way.
"""

from __future__ import annotations

import logging

from refract.core.config import get_config
from refract.core.errors import InvalidArgumentError
from refract.reflect.matching import get_matching_accessible_method
from refract.types.compat import type_arguments
from refract.types.descriptors import MethodDescriptor, TypeDescriptor
from refract.types.generics import substitute, type_equals

logger = logging.getLogger(__name__)


def overrides(method: MethodDescriptor, candidate: MethodDescriptor) -> bool:
    """Check whether ``method`` overrides ``candidate`` declared on one of its ancestors.

    Args:
        method: The more derived declaration.
        candidate: A same-named declaration on an ancestor of ``method``'s
            declaring type.

    Returns:
        True if the erased parameters match, or if the generic parameters match
        once the ancestor's type variables are bound as seen from ``method``.
    """
    if candidate.parameter_types == method.parameter_types:
        return True
    if len(candidate.parameter_types) != len(method.parameter_types):
        return False

    bindings = type_arguments(method.declaring_type, candidate.declaring_type)
    if bindings is None:
        return False
    for child, parent in zip(method.generic_parameter_types, candidate.generic_parameter_types):
        if not type_equals(substitute(child, bindings), substitute(parent, bindings)):
            return False
    return True


def get_override_hierarchy(
    method: MethodDescriptor, include_interfaces: bool | None = None
) -> list[MethodDescriptor]:
    """Return ``method`` followed by every ancestor declaration it overrides.

    Ancestors are visited depth-first: a type's interfaces (when included),
    then its superclass. When an ancestor's method is not overridden by
    ``method``, that ancestor's own ancestors are skipped on this branch.

    Args:
        method: The method whose chain to compute.
        include_interfaces: Visit interfaces too. None uses the configured
            ``override_include_interfaces``.

    Returns:
        Distinct declarations, most derived first.

    Raises:
        InvalidArgumentError: If ``method`` is None.
    """
    if method is None:
        raise InvalidArgumentError("method must not be None")
    if include_interfaces is None:
        include_interfaces = get_config().override_include_interfaces

    result: list[MethodDescriptor] = [method]
    collected: set[int] = {id(method)}
    visited: set[int] = {id(method.declaring_type)}

    def walk(cls: TypeDescriptor) -> None:
        # Same order as compat.hierarchy; a flat iterator cannot skip a pruned subtree.
        children = list(cls.interfaces) if include_interfaces else []
        if cls.superclass is not None:
            children.append(cls.superclass)

        for ancestor in children:
            if id(ancestor) in visited:
                continue
            visited.add(id(ancestor))
            candidate = get_matching_accessible_method(
                ancestor, method.name, *method.parameter_types
            )
            if candidate is not None:
                if not overrides(method, candidate):
                    logger.debug(
                        "Override chain of %s broken at %s",
                        method.signature_text,
                        candidate.signature_text,
                    )
                    continue
                if id(candidate) not in collected:
                    collected.add(id(candidate))
                    result.append(candidate)
            walk(ancestor)

    walk(method.declaring_type)
    return result
